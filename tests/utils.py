from __future__ import annotations

import io
from pathlib import Path

from line_sentiment.lexicon import LexiconStore, lexicon_from_mapping


def write_lines(path: Path, lines: list[str], encoding: str = "utf-8") -> Path:
    """Write ``lines`` joined with newlines (and a trailing newline) to ``path``."""
    path.write_bytes(("\n".join(lines) + "\n").encode(encoding))
    return path


def small_lexicon() -> LexiconStore:
    """A tiny lexicon for tests that should not depend on the default word list."""
    return lexicon_from_mapping(
        {"good": 1.9, "great": 3.1, "bad": -2.5, "love": 3.2, "happy": 2.7},
        source="<test>",
    )


class FlakyStream(io.BytesIO):
    """BytesIO whose first ``failures`` reads raise OSError."""

    def __init__(self, data: bytes, failures: int) -> None:
        super().__init__(data)
        self.failures = failures
        self.calls = 0

    def read(self, size: int | None = -1) -> bytes:
        self.calls += 1
        if self.failures > 0:
            self.failures -= 1
            raise OSError("device busy")
        return super().read(size)


class CountingStream(io.BytesIO):
    """BytesIO that counts how many chunks were requested."""

    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.reads = 0

    def read(self, size: int | None = -1) -> bytes:
        self.reads += 1
        return super().read(size)


class InterruptingStream(io.BytesIO):
    """BytesIO that serves ``data`` once, then raises ``error`` on the next read."""

    def __init__(self, data: bytes, error: BaseException) -> None:
        super().__init__(data)
        self.error = error
        self.calls = 0

    def read(self, size: int | None = -1) -> bytes:
        self.calls += 1
        if self.calls > 1:
            raise self.error
        return super().read(size)

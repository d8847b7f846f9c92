from __future__ import annotations

import codecs
import io
import logging
import time
from dataclasses import dataclass
from typing import IO, Any, AnyStr, Iterator

from .models import ProcessingError

LOGGER = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 8192
DEFAULT_READ_RETRIES = 2
RETRY_DELAY_SECONDS = 0.05


@dataclass(slots=True, frozen=True)
class RawLine:
    """A physical input line after bounding and decoding."""

    line_number: int
    text: str | None
    truncated: bool = False
    error: ProcessingError | None = None


class ReadFailure(OSError):
    """Raised when the input source keeps failing after the allowed retries."""


def truncate_to_boundary(data: bytes, limit: int) -> bytes:
    """Cut UTF-8 bytes to at most ``limit`` without splitting a code point."""
    if len(data) <= limit:
        return data
    cut = max(0, limit)
    # Back up over continuation bytes (10xxxxxx) to the start of the sequence.
    while cut > 0 and (data[cut] & 0xC0) == 0x80:
        cut -= 1
    return data[:cut]


def truncate_text(text: str, limit: int, encoding: str = "utf-8") -> str:
    """Return the longest prefix of ``text`` whose encoded size is <= ``limit``."""
    if len(text) * 4 <= limit:
        return text
    size = 0
    for idx, char in enumerate(text):
        size += len(char.encode(encoding, errors="replace"))
        if size > limit:
            return text[:idx]
    return text


@dataclass(slots=True)
class ErrorLimiter:
    """Per-run budget of errors that are reported with full detail."""

    max_reported: int = 10
    reported: int = 0
    suppressed: int = 0

    def admit(self) -> bool:
        """Count one error; return False once its detail should be withheld."""
        if self.reported < max(0, self.max_reported):
            self.reported += 1
            return True
        self.suppressed += 1
        return False

    @property
    def total(self) -> int:
        return self.reported + self.suppressed

    def summary_notice(self) -> str | None:
        if not self.suppressed:
            return None
        return f"{self.suppressed} additional errors suppressed"


def iter_bounded_lines(
    stream: IO[AnyStr],
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    encoding: str = "utf-8",
    read_retries: int = DEFAULT_READ_RETRIES,
) -> Iterator[RawLine]:
    """
    Yield the lines of ``stream`` one at a time using bounded memory.

    Binary streams are decoded per line so that a bad byte sequence only
    affects its own line. A text wrapper such as the object returned by
    ``open(path, "r")`` is read through its ``buffer`` and decoded with its own
    encoding, so it gets the same per-line isolation; it must not have been
    read from before. Other text sources (``io.StringIO``) are split as-is; if
    one of them fails to decode, a single ``decode`` error is reported and the
    run ends because the failing line can no longer be located.

    Lines larger than ``buffer_size`` encoded bytes keep their first
    ``buffer_size`` bytes (cut on a code point boundary); the rest of the line
    is read and dropped without being buffered.
    """
    if buffer_size < 1:
        raise ValueError("buffer_size must be at least 1.")
    codecs.lookup(encoding)
    stream, encoding = _byte_source(stream, encoding)

    line_number = 0
    kept: list = []
    kept_size = 0
    in_line = False
    overflow = False
    # One extra unit lets the boundary scan see the first dropped byte.
    capacity = buffer_size + 1
    newline = None

    while True:
        try:
            chunk = _read_chunk(stream, buffer_size, read_retries)
        except ReadFailure as exc:
            yield RawLine(
                line_number=line_number + 1,
                text=None,
                error=ProcessingError(line_number + 1, "read", str(exc)),
            )
            return
        except UnicodeDecodeError as exc:
            # Text streams decode ahead of line splitting; the position is lost.
            yield RawLine(
                line_number=line_number + 1,
                text=None,
                error=ProcessingError(line_number + 1, "decode", str(exc)),
            )
            return

        if not chunk:
            break
        if newline is None:
            newline = b"\n" if isinstance(chunk, bytes) else "\n"

        start = 0
        while start < len(chunk):
            end = chunk.find(newline, start)
            piece = chunk[start:] if end == -1 else chunk[start:end]
            in_line = True
            room = capacity - kept_size
            if room > 0 and piece:
                kept.append(piece[:room])
                kept_size += min(room, len(piece))
            if len(piece) > max(room, 0):
                overflow = True
            if end == -1:
                break
            line_number += 1
            yield _finish_line(line_number, kept, overflow, buffer_size, encoding)
            kept, kept_size, in_line, overflow = [], 0, False, False
            start = end + 1

    if in_line:
        line_number += 1
        yield _finish_line(line_number, kept, overflow, buffer_size, encoding)


def _byte_source(stream: IO[AnyStr], encoding: str) -> tuple[IO[Any], str]:
    if isinstance(stream, io.TextIOBase):
        raw = getattr(stream, "buffer", None)
        if raw is not None:
            return raw, getattr(stream, "encoding", None) or encoding
    return stream, encoding


def _read_chunk(stream: IO[AnyStr], size: int, retries: int) -> AnyStr:
    attempt = 0
    while True:
        try:
            return stream.read(size)
        except InterruptedError:
            raise
        except OSError as exc:
            attempt += 1
            if attempt > max(0, retries):
                raise ReadFailure(
                    f"read failed after {attempt} attempts: {exc}"
                ) from exc
            LOGGER.warning(
                "Transient read failure (attempt %s/%s): %s",
                attempt,
                retries + 1,
                exc,
            )
            time.sleep(RETRY_DELAY_SECONDS * (2 ** (attempt - 1)))


def _finish_line(
    line_number: int,
    parts: list,
    overflow: bool,
    buffer_size: int,
    encoding: str,
) -> RawLine:
    if parts and isinstance(parts[0], bytes):
        data = b"".join(parts)
        if data.endswith(b"\r"):
            data = data[:-1]
        overflow = overflow or len(data) > buffer_size
        return _decode_line(line_number, data, overflow, buffer_size, encoding)

    text = "".join(parts)
    if text.endswith("\r"):
        text = text[:-1]
    truncated = overflow
    if overflow:
        text = truncate_text(text, buffer_size, encoding)
    elif len(text.encode(encoding, errors="replace")) > buffer_size:
        text = truncate_text(text, buffer_size, encoding)
        truncated = True
    if truncated:
        LOGGER.debug("Line %d truncated to %d bytes", line_number, buffer_size)
    return RawLine(line_number=line_number, text=text, truncated=truncated)


def _decode_line(
    line_number: int, data: bytes, overflow: bool, buffer_size: int, encoding: str
) -> RawLine:
    try:
        if overflow:
            text = _decode_prefix(data, buffer_size, encoding)
            LOGGER.debug("Line %d truncated to %d bytes", line_number, buffer_size)
        else:
            text = data.decode(encoding)
    except UnicodeDecodeError as exc:
        return RawLine(
            line_number=line_number,
            text=None,
            truncated=overflow,
            error=ProcessingError(
                line_number, "decode", f"invalid {encoding} data: {exc.reason}"
            ),
        )
    return RawLine(line_number=line_number, text=text, truncated=overflow)


def _decode_prefix(data: bytes, limit: int, encoding: str) -> str:
    if codecs.lookup(encoding).name == "utf-8":
        return truncate_to_boundary(data, limit).decode(encoding)
    # Other codecs: the incremental decoder holds back an incomplete tail.
    decoder = codecs.getincrementaldecoder(encoding)()
    return decoder.decode(data[:limit], final=False)

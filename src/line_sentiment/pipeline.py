from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from itertools import islice
from pathlib import Path
from typing import IO, AnyStr, Dict, Iterable, Iterator, List, cast

from .classifier import classify, validate_thresholds
from .config import SentimentConfig
from .lexicon import LexiconStore, load_lexicon
from .models import (
    ProcessingError,
    ProcessingRecord,
    RunSummary,
    SentimentResult,
    Thresholds,
)
from .scoring import score
from .streaming import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_READ_RETRIES,
    ErrorLimiter,
    RawLine,
    iter_bounded_lines,
)
from .tokenization import tokenize

LOGGER = logging.getLogger(__name__)

BATCH_PER_WORKER = 16


class SentimentAnalyzer:
    """Tokenize, score and classify text against a shared read-only lexicon."""

    def __init__(
        self, lexicon: LexiconStore, thresholds: Thresholds | None = None
    ) -> None:
        self.thresholds = validate_thresholds(thresholds or Thresholds())
        self.lexicon = lexicon

    @classmethod
    def from_config(cls, config: SentimentConfig) -> "SentimentAnalyzer":
        """Validate ``config``, then load the lexicon it names."""
        config.validate()
        return cls(load_lexicon(config.lexicon_path), config.thresholds)

    def analyze(self, text: str) -> SentimentResult:
        return classify(score(tokenize(text), self.lexicon), self.thresholds)

    def polarity_scores(self, text: str) -> Dict[str, float]:
        """VADER-style dictionary of neg/neu/pos/compound for ``text``."""
        result = self.analyze(text)
        return {
            "neg": result.negative,
            "neu": result.neutral,
            "pos": result.positive,
            "compound": result.compound,
        }

    def process_lines(
        self,
        source: IO[AnyStr],
        *,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        encoding: str = "utf-8",
        max_reported_errors: int = 10,
        read_retries: int = DEFAULT_READ_RETRIES,
        workers: int = 1,
        summary: RunSummary | None = None,
    ) -> Iterator[ProcessingRecord]:
        return process_lines(
            source,
            self,
            buffer_size=buffer_size,
            encoding=encoding,
            max_reported_errors=max_reported_errors,
            read_retries=read_retries,
            workers=workers,
            summary=summary,
        )


def analyze_text(text: str, analyzer: SentimentAnalyzer) -> SentimentResult:
    """Classify a single in-memory string."""
    return analyzer.analyze(text)


def process_lines(
    source: IO[AnyStr],
    analyzer: SentimentAnalyzer,
    *,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    encoding: str = "utf-8",
    max_reported_errors: int = 10,
    read_retries: int = DEFAULT_READ_RETRIES,
    workers: int = 1,
    summary: RunSummary | None = None,
) -> Iterator[ProcessingRecord]:
    """
    Lazily classify every non-empty line of ``source``.

    Records come back in input order. A failure on one line becomes a
    ``ProcessingError`` record for that line; the run goes on with the next.
    Pass a ``RunSummary`` to collect counters once the iterator is exhausted.
    """
    summary = summary if summary is not None else RunSummary()
    limiter = ErrorLimiter(max_reported=max_reported_errors)
    raw_lines = iter_bounded_lines(
        source,
        buffer_size=buffer_size,
        encoding=encoding,
        read_retries=read_retries,
    )

    try:
        for record in _score_lines(raw_lines, analyzer, workers):
            if record is None:
                summary.skipped_lines += 1
                continue
            if record.truncated:
                summary.truncated_lines += 1
            if isinstance(record.outcome, ProcessingError):
                record = _limit_error(record, limiter)
                summary.errors += 1
            summary.records += 1
            yield record
    finally:
        summary.suppressed_errors = limiter.suppressed
        notice = limiter.summary_notice()
        if notice:
            LOGGER.warning(notice)
        LOGGER.info(
            "Processed %d records (%d errors, %d truncated, %d blank lines skipped)",
            summary.records,
            summary.errors,
            summary.truncated_lines,
            summary.skipped_lines,
        )


def process_file(
    path: str | Path,
    analyzer: SentimentAnalyzer,
    config: SentimentConfig,
    summary: RunSummary | None = None,
) -> Iterator[ProcessingRecord]:
    """Open ``path`` in binary mode and stream its records."""
    with Path(path).open("rb") as handle:
        yield from process_lines(
            handle,
            analyzer,
            buffer_size=config.buffer_size,
            encoding=config.encoding,
            max_reported_errors=config.max_reported_errors,
            read_retries=config.read_retries,
            workers=config.workers,
            summary=summary,
        )


def score_line(raw: RawLine, analyzer: SentimentAnalyzer) -> ProcessingRecord | None:
    """Turn one bounded line into a record, or None when the line is blank."""
    if raw.error is not None:
        return ProcessingRecord(
            line_number=raw.line_number, outcome=raw.error, truncated=raw.truncated
        )
    text = raw.text or ""
    if not text.strip():
        return None
    try:
        outcome: SentimentResult | ProcessingError = analyzer.analyze(text)
    except Exception as exc:  # noqa: BLE001 - isolate the failing line
        outcome = ProcessingError(raw.line_number, "scoring", repr(exc))
    return ProcessingRecord(
        line_number=raw.line_number,
        outcome=outcome,
        text=text,
        truncated=raw.truncated,
    )


def _score_lines(
    raw_lines: Iterable[RawLine], analyzer: SentimentAnalyzer, workers: int
) -> Iterator[ProcessingRecord | None]:
    if workers <= 1:
        for raw in raw_lines:
            yield score_line(raw, analyzer)
        return

    iterator = iter(raw_lines)
    batch_size = workers * BATCH_PER_WORKER
    with ThreadPoolExecutor(max_workers=workers) as executor:
        while True:
            batch: List[RawLine] = list(islice(iterator, batch_size))
            if not batch:
                return
            # map() hands results back in submission order.
            yield from executor.map(lambda raw: score_line(raw, analyzer), batch)


def _limit_error(record: ProcessingRecord, limiter: ErrorLimiter) -> ProcessingRecord:
    error = cast(ProcessingError, record.outcome)
    if limiter.admit():
        LOGGER.warning(
            "Line %d: %s error - %s", error.line_number, error.kind, error.message
        )
        return record
    return ProcessingRecord(
        line_number=record.line_number,
        outcome=ProcessingError(
            line_number=error.line_number,
            kind=error.kind,
            message="",
            suppressed=True,
        ),
        text=record.text,
        truncated=record.truncated,
    )

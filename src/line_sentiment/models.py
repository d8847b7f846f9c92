from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SentimentLabel(str, Enum):
    """Three-way label assigned from the compound score."""

    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    NEUTRAL = "Neutral"


@dataclass(slots=True, frozen=True)
class Token:
    """A whitespace-delimited chunk of input and its emphasis markers."""

    text: str
    is_all_caps: bool = False
    punctuation_emphasis: int = 0
    raw: str = ""

    @property
    def lower(self) -> str:
        return self.text.lower()


@dataclass(slots=True, frozen=True)
class RawScore:
    """Unnormalized valence sums for a single scoring pass."""

    positive_sum: float = 0.0
    negative_sum: float = 0.0
    neutral_count: int = 0
    positive_count: int = 0
    negative_count: int = 0
    punctuation_amplifier: float = 0.0


@dataclass(slots=True, frozen=True)
class Thresholds:
    """Compound score cut-offs for the Positive and Negative labels."""

    positive: float = 0.05
    negative: float = -0.05


@dataclass(slots=True, frozen=True)
class SentimentResult:
    """Classified sentiment for one analyzed string or line."""

    compound: float
    positive: float
    negative: float
    neutral: float
    label: SentimentLabel


@dataclass(slots=True, frozen=True)
class ProcessingError:
    """Line-scoped failure reported in place of a result."""

    line_number: int
    kind: str
    message: str
    suppressed: bool = False


@dataclass(slots=True, frozen=True)
class ProcessingRecord:
    """Outcome for one non-empty input line."""

    line_number: int
    outcome: SentimentResult | ProcessingError
    text: str = ""
    truncated: bool = False

    @property
    def ok(self) -> bool:
        return isinstance(self.outcome, SentimentResult)


@dataclass(slots=True)
class RunSummary:
    """Aggregate counters for a file-mode run."""

    records: int = 0
    errors: int = 0
    suppressed_errors: int = 0
    truncated_lines: int = 0
    skipped_lines: int = 0

from __future__ import annotations

import math

from .models import RawScore, SentimentLabel, SentimentResult, Thresholds

ALPHA = 15.0


class InvalidThresholdError(ValueError):
    """Raised when the positive threshold does not exceed the negative one."""


def validate_thresholds(thresholds: Thresholds) -> Thresholds:
    """Reject threshold pairs that cannot separate the three labels."""
    if not (math.isfinite(thresholds.positive) and math.isfinite(thresholds.negative)):
        raise InvalidThresholdError("Thresholds must be finite numbers.")
    if thresholds.positive <= thresholds.negative:
        raise InvalidThresholdError(
            "Positive threshold must be greater than negative threshold "
            f"(got positive={thresholds.positive}, negative={thresholds.negative})."
        )
    return thresholds


def normalize(score: float, alpha: float = ALPHA) -> float:
    """Squash an unbounded valence sum into [-1, 1]."""
    if score == 0.0:
        return 0.0
    value = score / math.hypot(score, math.sqrt(alpha))
    return max(-1.0, min(1.0, value))


def label_for(compound: float, thresholds: Thresholds) -> SentimentLabel:
    if compound >= thresholds.positive:
        return SentimentLabel.POSITIVE
    if compound <= thresholds.negative:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


def proportions(raw: RawScore) -> tuple[float, float, float]:
    """
    Return (positive, negative, neutral) shares that sum to 1.0.

    Each sentiment-bearing token contributes one unit of mass on top of its
    valence so that it weighs against the neutral token count on equal terms.
    """
    pos_mass = raw.positive_sum + raw.positive_count
    neg_mass = raw.negative_sum + raw.negative_count
    if pos_mass > neg_mass:
        pos_mass += raw.punctuation_amplifier
    elif neg_mass > pos_mass:
        neg_mass += raw.punctuation_amplifier

    total = pos_mass + neg_mass + raw.neutral_count
    if total <= 0:
        return 0.0, 0.0, 1.0
    return pos_mass / total, neg_mass / total, raw.neutral_count / total


def compound_score(raw: RawScore) -> float:
    total = raw.positive_sum - raw.negative_sum
    if total > 0:
        total += raw.punctuation_amplifier
    elif total < 0:
        total -= raw.punctuation_amplifier
    return normalize(total)


def classify(raw: RawScore, thresholds: Thresholds) -> SentimentResult:
    """Normalize a raw score and assign its label."""
    validate_thresholds(thresholds)
    compound = compound_score(raw)
    positive, negative, neutral = proportions(raw)
    return SentimentResult(
        compound=compound,
        positive=positive,
        negative=negative,
        neutral=neutral,
        label=label_for(compound, thresholds),
    )

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

from .classifier import validate_thresholds
from .models import Thresholds

_POSITIVE_FIELDS = ("buffer_size", "workers", "display_width")
_NON_NEGATIVE_FIELDS = ("max_reported_errors", "read_retries")


@dataclass(slots=True)
class SentimentConfig:
    """Configuration options for the sentiment classifier and line processor."""

    positive_threshold: float = 0.05
    negative_threshold: float = -0.05
    verbose: bool = False
    lexicon_path: str | None = None
    buffer_size: int = 8192
    encoding: str = "utf-8"
    max_reported_errors: int = 10
    read_retries: int = 2
    display_width: int = 60
    workers: int = 1

    @property
    def thresholds(self) -> Thresholds:
        return Thresholds(
            positive=float(self.positive_threshold),
            negative=float(self.negative_threshold),
        )

    def validate(self) -> "SentimentConfig":
        """
        Reject settings the analyzer cannot run with.

        Raises ``InvalidThresholdError`` for an unusable threshold pair and
        ``ValueError`` for sizes or counts out of range. Returns ``self``.
        """
        validate_thresholds(self.thresholds)
        for name in _POSITIVE_FIELDS:
            value = int(getattr(self, name))
            if value < 1:
                raise ValueError(f"{name} must be at least 1, got {value}.")
        for name in _NON_NEGATIVE_FIELDS:
            value = int(getattr(self, name))
            if value < 0:
                raise ValueError(f"{name} must not be negative, got {value}.")
        return self

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable dictionary representation of the configuration."""
        return dict(asdict(self))


def _build_kwargs(data: Mapping[str, Any]) -> dict[str, Any]:
    allowed = {field.name for field in fields(SentimentConfig)}
    return {key: data[key] for key in data if key in allowed}


def config_from_dict(data: Mapping[str, Any] | None) -> SentimentConfig:
    """Build a SentimentConfig from a dictionary-like input."""
    if data is None:
        return SentimentConfig()
    return SentimentConfig(**_build_kwargs(data))


def config_from_yaml(path: str | Path) -> SentimentConfig:
    """Load configuration from a YAML file."""
    contents = Path(path).read_text(encoding="utf-8")
    parsed = yaml.safe_load(contents) or {}
    if not isinstance(parsed, MutableMapping):
        raise ValueError("Configuration YAML must define a mapping.")
    return config_from_dict(parsed)


def load_config(path: str | Path | None = None) -> SentimentConfig:
    """Load configuration from YAML when provided, otherwise return defaults."""
    if path is None:
        return SentimentConfig()
    return config_from_yaml(path)

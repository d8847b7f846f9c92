"""
line_sentiment package exports convenience helpers for library consumers.
"""

from __future__ import annotations

from .classifier import InvalidThresholdError, classify
from .config import SentimentConfig, config_from_dict, config_from_yaml, load_config
from .lexicon import LexiconLoadError, LexiconStore, load_lexicon
from .models import ProcessingError, ProcessingRecord, SentimentLabel, SentimentResult
from .pipeline import SentimentAnalyzer, analyze_text, process_file, process_lines

__all__ = [
    "SentimentConfig",
    "config_from_dict",
    "config_from_yaml",
    "load_config",
    "LexiconStore",
    "LexiconLoadError",
    "load_lexicon",
    "InvalidThresholdError",
    "classify",
    "SentimentAnalyzer",
    "SentimentLabel",
    "SentimentResult",
    "ProcessingError",
    "ProcessingRecord",
    "analyze_text",
    "process_file",
    "process_lines",
]

__version__ = "0.1.0"

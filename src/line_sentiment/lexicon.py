from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from vaderSentiment import vaderSentiment as vader

LOGGER = logging.getLogger(__name__)

DEFAULT_LEXICON_PACKAGE = "vaderSentiment"
DEFAULT_LEXICON_FILE = "vader_lexicon.txt"
MAX_VALENCE = 4.0

# Empirically derived constants from Hutto & Gilbert (2014).
B_INCR: float = vader.B_INCR
B_DECR: float = vader.B_DECR
C_INCR: float = vader.C_INCR
N_SCALAR: float = vader.N_SCALAR

NEGATE = frozenset(vader.NEGATE)

BOOSTER_DICT: Mapping[str, float] = MappingProxyType(
    {word: float(value) for word, value in vader.BOOSTER_DICT.items()}
)

# Phrases whose meaning is not the sum of their words.
SPECIAL_CASES: Mapping[str, float] = MappingProxyType(
    {phrase: float(value) for phrase, value in vader.SPECIAL_CASES.items()}
)

CONTRASTIVE_CONJUNCTIONS = frozenset({"but"})


class LexiconLoadError(RuntimeError):
    """Raised when the backing word list is missing or malformed."""


@dataclass(slots=True, frozen=True)
class LexiconStore:
    """Read-only word -> valence mapping plus the fixed heuristic word lists."""

    valences: Mapping[str, float]
    source: str = "<memory>"
    boosters: Mapping[str, float] = field(default_factory=lambda: BOOSTER_DICT)
    negations: frozenset[str] = field(default=NEGATE)

    def __len__(self) -> int:
        return len(self.valences)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.lower() in self.valences

    def lookup(self, word: str) -> float | None:
        return self.valences.get(word.lower())

    def is_negation(self, word: str, include_nt: bool = True) -> bool:
        lowered = word.lower()
        if lowered in self.negations:
            return True
        return include_nt and "n't" in lowered

    def booster_factor(self, word: str) -> float | None:
        return self.boosters.get(word.lower())

    def is_contrastive_conjunction(self, word: str) -> bool:
        return word.lower() in CONTRASTIVE_CONJUNCTIONS

    def special_case(self, phrase: str) -> float | None:
        return SPECIAL_CASES.get(phrase.lower())


def lexicon_from_mapping(
    entries: Mapping[str, float], source: str = "<memory>"
) -> LexiconStore:
    """Build a store from an in-memory mapping, validating every valence."""
    valences: dict[str, float] = {}
    for word, value in entries.items():
        valences[word.lower()] = _checked_valence(word, value, source)
    if not valences:
        raise LexiconLoadError(f"Lexicon {source} contains no entries.")
    return LexiconStore(valences=MappingProxyType(valences), source=source)


def load_lexicon(path: str | Path | None = None) -> LexiconStore:
    """
    Load a VADER-format lexicon.

    Parameters
    ----------
    path:
        Tab-separated file of ``token<TAB>mean[<TAB>std<TAB>ratings]`` rows.
        Defaults to the canonical ``vader_lexicon.txt`` shipped with the
        ``vaderSentiment`` distribution.
    """
    if path is None:
        try:
            default = resources.files(DEFAULT_LEXICON_PACKAGE).joinpath(
                DEFAULT_LEXICON_FILE
            )
            contents = default.read_text(encoding="utf-8")
        except (ModuleNotFoundError, OSError) as exc:
            raise LexiconLoadError(
                f"Default lexicon {DEFAULT_LEXICON_PACKAGE}/{DEFAULT_LEXICON_FILE} "
                "is unavailable."
            ) from exc
        store = _parse_rows(
            contents.splitlines(), f"<{DEFAULT_LEXICON_PACKAGE}/{DEFAULT_LEXICON_FILE}>"
        )
    else:
        lexicon_path = Path(path)
        if not lexicon_path.is_file():
            raise LexiconLoadError(f"Lexicon file not found: {lexicon_path}")
        try:
            with lexicon_path.open("r", encoding="utf-8", newline="") as handle:
                store = _parse_rows(handle, str(lexicon_path))
        except (OSError, UnicodeDecodeError) as exc:
            raise LexiconLoadError(
                f"Unable to read lexicon {lexicon_path}: {exc}"
            ) from exc

    LOGGER.info("Loaded %d lexicon entries from %s", len(store), store.source)
    return store


def _parse_rows(lines: Iterable[str], source: str) -> LexiconStore:
    valences: dict[str, float] = {}
    reader = csv.reader(lines, delimiter="\t", quoting=csv.QUOTE_NONE)
    for row in reader:
        line_no = reader.line_num
        if not row or not row[0].strip() or row[0].startswith("#"):
            continue
        if len(row) < 2:
            raise LexiconLoadError(
                f"{source}:{line_no}: expected 'token<TAB>valence', got {row!r}"
            )
        word = row[0].strip()
        try:
            value = float(row[1])
        except ValueError as exc:
            raise LexiconLoadError(
                f"{source}:{line_no}: valence {row[1]!r} is not a number"
            ) from exc
        valence = _checked_valence(word, value, f"{source}:{line_no}")
        key = word.lower()
        # Lookups are lower-cased, so a lower-case row wins over a cased twin
        # such as ":D" vs ":d".
        if key in valences and word != key:
            continue
        valences[key] = valence

    if not valences:
        raise LexiconLoadError(f"Lexicon {source} contains no entries.")
    return LexiconStore(valences=MappingProxyType(valences), source=source)


def _checked_valence(word: str, value: float, where: str) -> float:
    valence = float(value)
    if not -MAX_VALENCE <= valence <= MAX_VALENCE:
        raise LexiconLoadError(
            f"{where}: valence {valence} for {word!r} is outside "
            f"[-{MAX_VALENCE}, {MAX_VALENCE}]"
        )
    return valence

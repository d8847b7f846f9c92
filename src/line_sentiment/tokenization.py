from __future__ import annotations

import string
from typing import List

from .models import Token

PUNCTUATION = string.punctuation
EMPHASIS_MARKS = "!?"
MAX_TOKEN_EMPHASIS = 3


def tokenize(text: str) -> List[Token]:
    """Split text on whitespace into tokens carrying caps and punctuation emphasis."""
    tokens: List[Token] = []
    for chunk in text.split():
        lookup = _strip_punctuation(chunk)
        if len(lookup) <= 1:
            continue
        tokens.append(
            Token(
                text=lookup,
                is_all_caps=lookup.isupper(),
                punctuation_emphasis=_trailing_emphasis(chunk),
                raw=chunk,
            )
        )
    return tokens


def has_caps_differential(tokens: List[Token]) -> bool:
    """Return True when some, but not all, tokens are ALL-CAPS."""
    caps = sum(1 for token in tokens if token.is_all_caps)
    return 0 < caps < len(tokens)


def _strip_punctuation(chunk: str) -> str:
    # Short results are kept verbatim so emoticons like ":)" survive.
    stripped = chunk.strip(PUNCTUATION)
    if len(stripped) <= 2:
        return chunk
    return stripped


def _trailing_emphasis(chunk: str) -> int:
    count = 0
    for char in reversed(chunk):
        if char in EMPHASIS_MARKS:
            count += 1
        elif char in PUNCTUATION:
            continue
        else:
            break
    return min(count, MAX_TOKEN_EMPHASIS)

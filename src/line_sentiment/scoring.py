from __future__ import annotations

from typing import List, Sequence

from .heuristics import (
    ValenceContext,
    apply_valence_rules,
    contrastive_weighting,
    punctuation_amplifier,
)
from .lexicon import LexiconStore
from .models import RawScore, Token
from .tokenization import has_caps_differential


def token_valences(tokens: Sequence[Token], lexicon: LexiconStore) -> List[float]:
    """Return the adjusted valence of every token, 0.0 for neutral ones."""
    lowered = [token.lower for token in tokens]
    caps_differential = has_caps_differential(list(tokens))
    valences: List[float] = []

    for idx, word in enumerate(lowered):
        # Boosters only modify their neighbours.
        if lexicon.booster_factor(word) is not None:
            valences.append(0.0)
            continue
        if word == "kind" and idx + 1 < len(lowered) and lowered[idx + 1] == "of":
            valences.append(0.0)
            continue
        base = lexicon.lookup(word)
        if base is None:
            valences.append(0.0)
            continue
        ctx = ValenceContext(
            tokens=tokens,
            lowered=lowered,
            index=idx,
            lexicon=lexicon,
            caps_differential=caps_differential,
        )
        valences.append(apply_valence_rules(base, ctx))

    return contrastive_weighting(valences, tokens, lexicon)


def score(tokens: Sequence[Token], lexicon: LexiconStore) -> RawScore:
    """Accumulate adjusted valences into positive/negative sums and a neutral count."""
    valences = token_valences(tokens, lexicon)
    positive = [v for v in valences if v > 0]
    negative = [-v for v in valences if v < 0]
    return RawScore(
        positive_sum=sum(positive),
        negative_sum=sum(negative),
        neutral_count=sum(1 for v in valences if v == 0),
        positive_count=len(positive),
        negative_count=len(negative),
        punctuation_amplifier=punctuation_amplifier(tokens) if valences else 0.0,
    )

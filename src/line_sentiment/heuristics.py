"""
Valence adjustment rules.

Each rule is a pure function ``rule(valence, context) -> valence``. The scoring
engine applies ``VALENCE_RULES`` in order to every sentiment-bearing token:

1. ``no_rule``            "no" as a determiner negates nearby lexicon words
2. ``caps_rule``          ALL-CAPS word inside mixed-case text
3. ``window_rule``        boosters/dampers and negations in the 3 preceding tokens
4. ``idiom_rule``         fixed idioms and multi-word dampers ("kind of")
5. ``least_rule``         "least X" reads as a negation

Sequence-level rules (``contrastive_weighting`` and ``punctuation_amplifier``)
run once per unit after the per-token pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Sequence

from .lexicon import C_INCR, N_SCALAR, LexiconStore
from .models import Token

WINDOW = 3
DISTANCE_DECAY = {1: 1.0, 2: 0.95, 3: 0.9}
NEVER_AMPLIFIER = 1.25
BEFORE_CONTRAST = 0.5
AFTER_CONTRAST = 1.5
PUNCT_INCR = 0.292
MAX_EMPHASIS_UNITS = 4


@dataclass(slots=True, frozen=True)
class ValenceContext:
    """Everything a rule may look at for the token at ``index``."""

    tokens: Sequence[Token]
    lowered: Sequence[str]
    index: int
    lexicon: LexiconStore
    caps_differential: bool

    @property
    def token(self) -> Token:
        return self.tokens[self.index]

    def word(self, offset: int) -> str:
        """Lower-cased word at ``index + offset`` or an empty string."""
        position = self.index + offset
        if 0 <= position < len(self.lowered):
            return self.lowered[position]
        return ""


ValenceRule = Callable[[float, ValenceContext], float]


def no_rule(valence: float, ctx: ValenceContext) -> float:
    lexicon = ctx.lexicon
    if ctx.word(0) == "no" and ctx.word(1) in lexicon:
        valence = 0.0
    if (
        ctx.word(-1) == "no"
        or ctx.word(-2) == "no"
        or (ctx.word(-3) == "no" and ctx.word(-1) in ("or", "nor"))
    ):
        base = lexicon.lookup(ctx.word(0)) or 0.0
        valence = base * N_SCALAR
    return valence


def caps_rule(valence: float, ctx: ValenceContext) -> float:
    if valence == 0.0 or not ctx.caps_differential or not ctx.token.is_all_caps:
        return valence
    return valence + C_INCR if valence > 0 else valence - C_INCR


def booster_scalar(token: Token, valence: float, ctx: ValenceContext) -> float:
    """Additive intensity change contributed by a single preceding word."""
    factor = ctx.lexicon.booster_factor(token.text)
    if factor is None:
        return 0.0
    scalar = -factor if valence < 0 else factor
    if token.is_all_caps and ctx.caps_differential:
        scalar += C_INCR if valence > 0 else -C_INCR
    return scalar


def negation_at(valence: float, ctx: ValenceContext, distance: int) -> float:
    """Apply the negation check for the word ``distance`` tokens back."""
    between = [ctx.word(-step) for step in range(1, distance)]
    if distance > 1 and ctx.word(-distance) == "never" and any(
        word in ("so", "this") for word in between
    ):
        return valence * NEVER_AMPLIFIER
    if distance > 1 and ctx.word(-distance) == "without" and "doubt" in between:
        return valence
    if ctx.lexicon.is_negation(ctx.word(-distance)):
        return valence * N_SCALAR
    return valence


def window_rule(valence: float, ctx: ValenceContext) -> float:
    for distance in range(1, WINDOW + 1):
        if ctx.index < distance:
            break
        preceding = ctx.tokens[ctx.index - distance]
        if preceding.text in ctx.lexicon:
            continue
        scalar = booster_scalar(preceding, valence, ctx)
        valence += scalar * DISTANCE_DECAY[distance]
        valence = negation_at(valence, ctx, distance)
    return valence


def idiom_rule(valence: float, ctx: ValenceContext) -> float:
    lexicon = ctx.lexicon
    w = ctx.word
    preceding = [
        f"{w(-1)} {w(0)}",
        f"{w(-2)} {w(-1)} {w(0)}",
        f"{w(-2)} {w(-1)}",
        f"{w(-3)} {w(-2)} {w(-1)}",
        f"{w(-3)} {w(-2)}",
    ]
    for phrase in preceding:
        special = lexicon.special_case(phrase)
        if special is not None:
            valence = special
            break
    for phrase in (f"{w(0)} {w(1)}", f"{w(0)} {w(1)} {w(2)}"):
        special = lexicon.special_case(phrase)
        if special is not None:
            valence = special

    for phrase in (f"{w(-3)} {w(-2)} {w(-1)}", f"{w(-3)} {w(-2)}", f"{w(-2)} {w(-1)}"):
        factor = lexicon.booster_factor(phrase)
        if factor is not None and " " in phrase.strip():
            valence += -factor if valence < 0 else factor
    return valence


def least_rule(valence: float, ctx: ValenceContext) -> float:
    if ctx.word(-1) != "least" or "least" in ctx.lexicon:
        return valence
    if ctx.index > 1 and ctx.word(-2) in ("at", "very"):
        return valence
    return valence * N_SCALAR


VALENCE_RULES: tuple[ValenceRule, ...] = (
    no_rule,
    caps_rule,
    window_rule,
    idiom_rule,
    least_rule,
)


def apply_valence_rules(valence: float, ctx: ValenceContext) -> float:
    for rule in VALENCE_RULES:
        valence = rule(valence, ctx)
    return valence


def contrastive_weighting(
    valences: List[float], tokens: Sequence[Token], lexicon: LexiconStore
) -> List[float]:
    """Dampen valences before the first contrastive conjunction, amplify after."""
    pivot = next(
        (
            idx
            for idx, token in enumerate(tokens)
            if lexicon.is_contrastive_conjunction(token.text)
        ),
        None,
    )
    if pivot is None:
        return list(valences)
    weighted: List[float] = []
    for idx, valence in enumerate(valences):
        if idx < pivot:
            weighted.append(valence * BEFORE_CONTRAST)
        elif idx > pivot:
            weighted.append(valence * AFTER_CONTRAST)
        else:
            weighted.append(valence)
    return weighted


def punctuation_amplifier(tokens: Sequence[Token]) -> float:
    units = sum(token.punctuation_emphasis for token in tokens)
    return min(units, MAX_EMPHASIS_UNITS) * PUNCT_INCR

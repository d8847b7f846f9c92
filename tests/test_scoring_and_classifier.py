import pytest

from line_sentiment.classifier import (
    InvalidThresholdError,
    classify,
    label_for,
    normalize,
    proportions,
    validate_thresholds,
)
from line_sentiment.lexicon import load_lexicon
from line_sentiment.models import RawScore, SentimentLabel, Thresholds
from line_sentiment.pipeline import SentimentAnalyzer
from line_sentiment.scoring import score, token_valences
from line_sentiment.tokenization import tokenize

LEXICON = load_lexicon()


def _analyzer(positive: float = 0.05, negative: float = -0.05) -> SentimentAnalyzer:
    return SentimentAnalyzer(LEXICON, Thresholds(positive=positive, negative=negative))


def _valences(text: str) -> list[float]:
    return token_valences(tokenize(text), LEXICON)


def test_love_this_is_positive():
    result = _analyzer().analyze("I love this!")

    assert result.label is SentimentLabel.POSITIVE
    assert result.compound > 0.05
    assert result.positive + result.negative + result.neutral == pytest.approx(1.0)


def test_negation_reduces_positivity():
    plain = _analyzer().analyze("I love this.")
    negated = _analyzer().analyze("I do not love this.")

    assert negated.compound < plain.compound
    assert negated.label is SentimentLabel.NEGATIVE


def test_negation_window_leaves_earlier_words_alone():
    assert _valences("not good")[1] == pytest.approx(1.9 * -0.74)

    valences = _valences("good but not great")
    assert valences[0] > 0
    assert valences[3] < 0


def test_contrastive_conjunction_reweights_clauses():
    assert _valences("good but bad") == pytest.approx([0.95, 0.0, -3.75])


def test_boosters_and_dampers():
    analyzer = _analyzer()
    good = analyzer.analyze("good").compound

    assert analyzer.analyze("very good").compound > good
    assert analyzer.analyze("slightly good").compound < good
    assert analyzer.analyze("kind of good").compound < good
    assert analyzer.analyze("very bad").compound < analyzer.analyze("bad").compound


def test_caps_emphasis_only_in_mixed_case():
    analyzer = _analyzer()
    plain = analyzer.analyze("good day").compound

    assert analyzer.analyze("GOOD day").compound > plain
    assert analyzer.analyze("GOOD DAY").compound == pytest.approx(plain)


def test_punctuation_emphasis_is_capped():
    analyzer = _analyzer()
    one = analyzer.analyze("good!").compound
    plain = analyzer.analyze("good").compound
    four = analyzer.analyze("good!!! day!").compound
    many = analyzer.analyze("good!!! day!!! yes").compound

    assert one > plain
    assert score(tokenize("good!!! day!!!"), LEXICON).punctuation_amplifier == pytest.approx(
        4 * 0.292
    )
    assert many > plain
    assert four > one


def test_no_and_idioms():
    analyzer = _analyzer()

    assert analyzer.analyze("no problems").label is SentimentLabel.POSITIVE
    assert analyzer.analyze("that was the shit").label is SentimentLabel.POSITIVE
    assert _valences("never so happy")[2] == pytest.approx((2.7 + 0.293) * 1.25)


def test_unknown_words_are_neutral():
    raw = score(tokenize("the table is here"), LEXICON)

    assert raw.positive_sum == raw.negative_sum == 0.0
    assert raw.neutral_count == 4


def test_empty_input_is_neutral():
    result = _analyzer().analyze("")

    assert result.label is SentimentLabel.NEUTRAL
    assert result.compound == 0.0
    assert (result.positive, result.negative, result.neutral) == (0.0, 0.0, 1.0)


def test_strict_thresholds_make_mild_text_neutral():
    result = _analyzer(positive=0.9, negative=-0.9).analyze("It's fine.")

    assert result.label is SentimentLabel.NEUTRAL
    assert _analyzer().analyze("It's fine.").label is SentimentLabel.POSITIVE


def test_threshold_boundaries_are_inclusive():
    thresholds = Thresholds(positive=0.05, negative=-0.05)

    assert label_for(0.05, thresholds) is SentimentLabel.POSITIVE
    assert label_for(-0.05, thresholds) is SentimentLabel.NEGATIVE
    assert label_for(0.0499, thresholds) is SentimentLabel.NEUTRAL
    assert label_for(-0.0499, thresholds) is SentimentLabel.NEUTRAL


@pytest.mark.parametrize("positive,negative", [(0.1, 0.1), (-0.2, 0.2)])
def test_invalid_thresholds_rejected(positive: float, negative: float):
    thresholds = Thresholds(positive=positive, negative=negative)
    with pytest.raises(InvalidThresholdError):
        validate_thresholds(thresholds)
    with pytest.raises(InvalidThresholdError):
        SentimentAnalyzer(LEXICON, thresholds)
    with pytest.raises(InvalidThresholdError):
        classify(RawScore(), thresholds)


def test_compound_stays_inside_open_interval():
    analyzer = _analyzer()
    for text in ("love " * 3000, "hate " * 3000, "GREAT!!! " * 500):
        compound = analyzer.analyze(text).compound
        assert -1.0 < compound < 1.0

    assert normalize(0.0) == 0.0
    assert normalize(4.0) == pytest.approx(4.0 / (16.0 + 15.0) ** 0.5)
    assert normalize(-4.0) == pytest.approx(-normalize(4.0))


def test_proportions_sum_to_one():
    raw = RawScore(
        positive_sum=3.2,
        negative_sum=1.0,
        neutral_count=2,
        positive_count=1,
        negative_count=1,
        punctuation_amplifier=0.292,
    )
    pos, neg, neu = proportions(raw)

    assert pos + neg + neu == pytest.approx(1.0)
    assert pos > neg
    assert proportions(RawScore()) == (0.0, 0.0, 1.0)


def test_polarity_scores_keys():
    scores = _analyzer().polarity_scores("bad day :(")

    assert set(scores) == {"neg", "neu", "pos", "compound"}
    assert scores["compound"] < 0


@pytest.mark.parametrize(
    ("text", "label"),
    [
        ("This is pathetic.", SentimentLabel.NEGATIVE),
        ("The staff were delightful and friendly.", SentimentLabel.POSITIVE),
        ("A brilliant talk, I was impressed.", SentimentLabel.POSITIVE),
        ("The meeting is at noon.", SentimentLabel.NEUTRAL),
    ],
)
def test_everyday_sentences_with_default_lexicon(text: str, label: SentimentLabel):
    assert _analyzer().analyze(text).label is label

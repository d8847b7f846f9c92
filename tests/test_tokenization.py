from line_sentiment.tokenization import has_caps_differential, tokenize


def test_tokenize_strips_punctuation_and_records_emphasis():
    tokens = tokenize("I love this!! Really?")

    assert [token.text for token in tokens] == ["love", "this", "Really"]
    assert tokens[1].punctuation_emphasis == 2
    assert tokens[1].raw == "this!!"
    assert tokens[2].punctuation_emphasis == 1


def test_tokenize_caps_emphasis_and_emoticons():
    tokens = tokenize("GREAT day :( 123!!!!!")

    assert tokens[0].is_all_caps
    assert not tokens[1].is_all_caps
    assert tokens[2].text == ":("
    assert not tokens[3].is_all_caps
    assert tokens[3].punctuation_emphasis == 3
    assert has_caps_differential(tokens)


def test_tokenize_empty_input():
    assert tokenize("") == []
    assert tokenize("   \t ") == []


def test_caps_differential_requires_mixed_case():
    assert not has_caps_differential(tokenize("GOOD DAY"))
    assert not has_caps_differential(tokenize("good day"))

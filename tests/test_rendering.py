from line_sentiment.models import (
    ProcessingError,
    ProcessingRecord,
    SentimentLabel,
    SentimentResult,
)
from line_sentiment.rendering import display_text, format_error, format_result, record_dict


def test_display_text_truncates_long_lines():
    text = "x" * 80
    shown = display_text(text, width=60)
    assert len(shown) == 60
    assert shown.endswith("...")
    assert display_text("short", width=60) == "short"


def test_format_result_verbose():
    result = SentimentResult(0.4404, 0.5, 0.0, 0.5, SentimentLabel.POSITIVE)
    lines = format_result(result, "good", verbose=True)
    assert lines == ["Positive: good (0.440)", "  pos: 0.500, neg: 0.000, neu: 0.500"]


def test_error_rendering_hides_suppressed_detail():
    error = ProcessingError(4, "decode", "invalid start byte")
    assert format_error(error) == "Line 4: Error reading - invalid start byte"

    hidden = ProcessingRecord(5, ProcessingError(5, "decode", "", suppressed=True))
    payload = record_dict(hidden)
    assert payload["error_kind"] == "decode"
    assert "error" not in payload

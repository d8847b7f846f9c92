from __future__ import annotations

from typing import List, TypedDict

from .models import ProcessingError, ProcessingRecord, SentimentResult

ELLIPSIS = "..."


class ResultPayload(TypedDict, total=False):
    label: str
    compound: float
    pos: float
    neg: float
    neu: float


class RecordPayload(TypedDict, total=False):
    line: int
    text: str
    truncated: bool
    result: ResultPayload
    error: str
    error_kind: str


def display_text(text: str, width: int = 60) -> str:
    """Shorten ``text`` to ``width`` code points for console output."""
    if width <= len(ELLIPSIS) or len(text) <= width:
        return text
    return text[: width - len(ELLIPSIS)] + ELLIPSIS


def format_result(
    result: SentimentResult, text: str, verbose: bool = False, width: int = 60
) -> List[str]:
    """Render a result the way the console output shows it."""
    lines = [f"{result.label.value}: {display_text(text, width)} ({result.compound:.3f})"]
    if verbose:
        lines.append(
            f"  pos: {result.positive:.3f}, neg: {result.negative:.3f}, "
            f"neu: {result.neutral:.3f}"
        )
    return lines


def format_error(error: ProcessingError) -> str:
    return f"Line {error.line_number}: Error reading - {error.message}"


def result_dict(result: SentimentResult, verbose: bool = False) -> ResultPayload:
    payload: ResultPayload = {
        "label": result.label.value,
        "compound": round(result.compound, 4),
    }
    if verbose:
        payload["pos"] = round(result.positive, 3)
        payload["neg"] = round(result.negative, 3)
        payload["neu"] = round(result.neutral, 3)
    return payload


def record_dict(record: ProcessingRecord, verbose: bool = False) -> RecordPayload:
    """Serialize a ProcessingRecord so it can be emitted as a JSON line."""
    payload: RecordPayload = {"line": record.line_number, "truncated": record.truncated}
    outcome = record.outcome
    if isinstance(outcome, SentimentResult):
        payload["text"] = record.text
        payload["result"] = result_dict(outcome, verbose)
    else:
        payload["error_kind"] = outcome.kind
        if not outcome.suppressed:
            payload["error"] = outcome.message
    return payload

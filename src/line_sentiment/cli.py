from __future__ import annotations

import json
import logging
from pathlib import Path

import click
import typer
import yaml

from .config import SentimentConfig, load_config
from .lexicon import LexiconLoadError
from .models import ProcessingError, RunSummary, SentimentResult
from .pipeline import SentimentAnalyzer, process_file
from .rendering import format_error, format_result, record_dict, result_dict

app = typer.Typer(help="Line Sentiment CLI.", no_args_is_help=True)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@app.command()
def analyze(
    input_value: str = typer.Argument(
        ..., metavar="INPUT", help="Text to analyze, or a file path with --file."
    ),
    file: bool = typer.Option(
        False, "--file", help="Treat INPUT as a file and analyze it line by line."
    ),
    pos_threshold: float | None = typer.Option(
        None, "--pos-threshold", help="Compound score at or above which text is Positive."
    ),
    neg_threshold: float | None = typer.Option(
        None, "--neg-threshold", help="Compound score at or below which text is Negative."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Also print pos/neg/neu sub-scores."
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    lexicon: Path | None = typer.Option(
        None,
        "--lexicon",
        help="VADER-format lexicon file to use instead of the default one.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Emit JSON (one object per line in file mode)."
    ),
    max_errors: int | None = typer.Option(
        None, "--max-errors", help="Per-line errors reported in detail before suppression."
    ),
    workers: int | None = typer.Option(
        None, "--workers", help="Threads used to score lines in file mode."
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        click_type=click.Choice(LOG_LEVELS, case_sensitive=False),
        help="Logging verbosity written to stderr.",
    ),
) -> None:
    """Classify INPUT as Positive, Negative or Neutral."""
    logging.basicConfig(
        level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s"
    )
    try:
        cfg = load_config(config)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        typer.echo(f"Error: invalid configuration: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    _apply_overrides(
        cfg, pos_threshold, neg_threshold, verbose, lexicon, max_errors, workers
    )

    # Everything fatal is raised here, before any input is read.
    try:
        analyzer = SentimentAnalyzer.from_config(cfg)
    except (ValueError, LexiconLoadError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if not file:
        _emit_single(analyzer, input_value, cfg, json_output)
        return

    path = Path(input_value)
    if not path.is_file():
        typer.echo(f"Error: input file not found: {path}", err=True)
        raise typer.Exit(code=1)
    _emit_file(analyzer, path, cfg, json_output)


@app.command("print-config")
def print_config() -> None:
    """Print the default configuration as YAML."""
    cfg = SentimentConfig()
    typer.echo(yaml.safe_dump(cfg.to_dict(), sort_keys=False))


def main() -> None:
    app()


def _apply_overrides(
    config: SentimentConfig,
    pos_threshold: float | None,
    neg_threshold: float | None,
    verbose: bool,
    lexicon: Path | None,
    max_errors: int | None,
    workers: int | None,
) -> None:
    """Apply CLI overrides to config fields when provided."""
    if pos_threshold is not None:
        config.positive_threshold = pos_threshold
    if neg_threshold is not None:
        config.negative_threshold = neg_threshold
    if verbose:
        config.verbose = True
    if lexicon:
        config.lexicon_path = str(lexicon)
    if max_errors is not None:
        config.max_reported_errors = max_errors
    if workers is not None:
        config.workers = workers


def _emit_single(
    analyzer: SentimentAnalyzer, text: str, cfg: SentimentConfig, json_output: bool
) -> None:
    # Blank input still produces a (Neutral) verdict.
    result = analyzer.analyze(text)
    if json_output:
        typer.echo(json.dumps(result_dict(result, cfg.verbose)))
        return
    for line in format_result(result, text, cfg.verbose, cfg.display_width):
        typer.echo(line)


def _emit_file(
    analyzer: SentimentAnalyzer, path: Path, cfg: SentimentConfig, json_output: bool
) -> None:
    summary = RunSummary()
    for record in process_file(path, analyzer, cfg, summary=summary):
        if json_output:
            typer.echo(json.dumps(record_dict(record, cfg.verbose)))
            continue
        outcome = record.outcome
        if isinstance(outcome, SentimentResult):
            lines = format_result(outcome, record.text, cfg.verbose, cfg.display_width)
            typer.echo(f"Line {record.line_number}: {lines[0]}")
            for extra in lines[1:]:
                typer.echo(extra)
        elif isinstance(outcome, ProcessingError) and not outcome.suppressed:
            typer.echo(format_error(outcome), err=True)

    if summary.suppressed_errors:
        typer.echo(f"{summary.suppressed_errors} additional errors suppressed", err=True)


if __name__ == "__main__":
    main()

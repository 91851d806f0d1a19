"""
CLI Interface
=============
Command-line interface for the question-bank parser engine.

Usage:
    python -m exam_parser parse <text_file> [options]
    python -m exam_parser validate <json_file> [options]
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from . import __version__
from .engine import ParserConfig, ParserEngine
from .models import ParseResult, Question, QuestionType
from .validator import QuestionValidator

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="exam-parser")
def cli():
    """Exam Parser: question-bank text to structured question records."""
    pass


@cli.command()
@click.argument("text_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--existing", "-e",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="JSON file of questions already in the bank (for id allocation)",
)
@click.option(
    "--type", "-t", "default_type",
    default=QuestionType.MULTIPLE.value,
    type=click.Choice([t.value for t in QuestionType]),
    help="Question type used before the first section header",
)
@click.option(
    "--strict-labels",
    is_flag=True,
    default=False,
    help="Reject questions whose options repeat a label",
)
@click.option(
    "--output", "-o",
    default=None,
    help="Write the parse result JSON to this file",
)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.option(
    "--log-file",
    default=None,
    help="Path to log file",
)
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output only JSON result to stdout (for programmatic use)",
)
def parse(
    text_file: str,
    existing: str,
    default_type: str,
    strict_labels: bool,
    output: str,
    log_level: str,
    log_file: str,
    json_output: bool,
):
    """Parse a plain-text question bank into structured questions."""

    if json_output:
        # Suppress console output for JSON mode
        log_level = "ERROR"

    try:
        raw_text = Path(text_file).read_text(encoding="utf-8")
        existing_questions = _load_questions(existing) if existing else []
    except (OSError, UnicodeDecodeError, ValueError) as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    config = ParserConfig(
        default_type=QuestionType(default_type),
        strict_labels=strict_labels,
        log_level=log_level,
        log_file=log_file,
    )
    engine = ParserEngine(config)

    if json_output:
        result = engine.parse(raw_text, existing_questions)
        print(json.dumps(
            result.model_dump(mode="json"),
            indent=2,
            ensure_ascii=False,
        ))
    else:
        console.print()
        console.print(
            Panel.fit(
                f"[bold cyan]Exam Parser v{__version__}[/]\n"
                f"[dim]Parsing: {os.path.basename(text_file)}[/]",
                border_style="cyan",
            )
        )
        console.print()

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("Parsing...", total=100)

            def on_progress(percent: int, message: str):
                progress.update(task, completed=percent, description=message)

            result = engine.parse(raw_text, existing_questions, on_progress)

        _display_results(result)

    if output:
        _save_json(result, Path(output))

    if not result.questions:
        sys.exit(1)


@cli.command()
@click.argument("json_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--strict-labels",
    is_flag=True,
    default=False,
    help="Flag questions whose options repeat a label",
)
def validate(json_path: str, strict_labels: bool):
    """Re-validate an existing question-bank JSON file."""

    try:
        records = _load_records(json_path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    validator = QuestionValidator(strict_labels=strict_labels)
    problems: list[tuple[str, str]] = []

    for index, record in enumerate(records, start=1):
        ref = str(record.get("id", f"#{index}")) if isinstance(record, dict) else f"#{index}"
        try:
            question = Question.model_validate(record)
        except ValidationError as e:
            problems.append((ref, f"invalid record: {e.error_count()} field error(s)"))
            continue

        error = validator.check_question(question)
        if error:
            problems.append((ref, error))

    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]Question Bank Check[/]\n"
            f"[dim]File: {json_path} | Questions: {len(records)}[/]",
            border_style="cyan",
        )
    )
    console.print()

    if not problems:
        console.print("[green]✓[/] All questions are valid")
        return

    table = Table(title="Problems", border_style="red")
    table.add_column("Question", style="bold")
    table.add_column("Problem")
    for ref, message in problems:
        table.add_row(ref, message)
    console.print(table)
    console.print()
    sys.exit(1)


# ─── Helpers ──────────────────────────────────────────────────────────────────


def _load_records(json_path: str) -> list:
    """Load question records from a list or a {"questions": [...]} object."""
    with open(json_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("questions", [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of questions in {json_path}")
    return data


def _load_questions(json_path: str) -> list[Question]:
    try:
        return [Question.model_validate(r) for r in _load_records(json_path)]
    except ValidationError as e:
        raise ValueError(f"Invalid question record in {json_path}: {e}") from e


def _save_json(result: ParseResult, filepath: Path):
    """Save ParseResult to JSON file."""
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(result.model_dump(mode="json"), f, indent=2, ensure_ascii=False)


# ─── Display Helpers ──────────────────────────────────────────────────────────


def _display_results(result: ParseResult):
    """Display parse results as rich tables."""
    console.print()

    table = Table(title="Parse Summary", border_style="green")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_column("Status", justify="center")

    table.add_row(
        "Questions Parsed",
        str(result.question_count),
        "[green]✓[/]" if result.question_count > 0 else "[red]✗[/]",
    )
    for type_name, count in result.type_breakdown.items():
        table.add_row(f"  {type_name}", str(count), "")
    table.add_row(
        "Errors",
        str(len(result.errors)),
        "[green]✓[/]" if not result.errors else "[red]✗[/]",
    )
    table.add_row(
        "Warnings",
        str(len(result.warnings)),
        "[green]✓[/]" if not result.warnings else "[yellow]⚠[/]",
    )
    console.print(table)
    console.print()

    for error in result.errors:
        console.print(f"[red]✗[/] {error}")
    for warning in result.warnings:
        console.print(f"[yellow]⚠[/] {warning}")
    if result.errors or result.warnings:
        console.print()


# ─── Entry point (for python -m exam_parser.cli) ──────────────────────────────


if __name__ == "__main__":
    cli()

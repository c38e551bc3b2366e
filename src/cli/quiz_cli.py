"""
Quiz CLI.

Commands for compiling and checking lexed Markdown quiz documents.

The input file is the JSON token tree written by a Markdown lexer
(for example `marked.lexer(source)` serialized with JSON.stringify).

Examples:
    quizmark compile networking.tokens.json
    quizmark compile networking.tokens.json --json > drafts.json
    quizmark check networking.tokens.json
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from config import get_settings
from src.quiz import (
    QuestionDraft,
    QuizCompiler,
    TokenContractError,
    tokens_from_lexer,
    validate,
)

app = typer.Typer(
    help="Compile and check Markdown quiz documents",
    no_args_is_help=True,
)

console = Console()


def _load_tokens(source: Path):
    """Read and type a token file, exiting with an error message on failure."""
    if not source.exists():
        console.print(f"[red]Error: Token file not found: {source}[/red]")
        raise typer.Exit(2)

    limit = get_settings().max_document_bytes
    if source.stat().st_size > limit:
        console.print(f"[red]Error: {source} is larger than {limit} bytes[/red]")
        raise typer.Exit(2)

    try:
        text = source.read_text(encoding="utf-8")
    except (UnicodeDecodeError, OSError) as e:
        console.print(f"[red]Error: Cannot read {source}: {e}[/red]")
        raise typer.Exit(2)

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: {source} is not valid JSON: {e}[/red]")
        raise typer.Exit(2)

    try:
        return tokens_from_lexer(raw)
    except TokenContractError as e:
        console.print(f"[red]Error: Unexpected token tree: {e}[/red]")
        raise typer.Exit(2)


def _answer_summary(draft: QuestionDraft) -> str:
    marks = []
    for answer in draft.answers:
        prefix = "[green]✓[/green] " if answer.is_correct else "  "
        marks.append(f"{prefix}{answer.answer}")
    return "\n".join(marks) or "[dim]-[/dim]"


@app.command("compile")
def compile_document(
    source: Path = typer.Argument(..., help="JSON token file produced by the Markdown lexer"),
    as_json: bool = typer.Option(False, "--json", help="Print drafts as JSON"),
):
    """
    Compile a token file into question drafts without validating them.
    """
    drafts = QuizCompiler().compile(_load_tokens(source))

    if as_json:
        payload = [d.to_dict() for d in drafts]
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False, default=str))
        return

    table = Table(title=f"{source.name}: {len(drafts)} question(s)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Question", style="cyan")
    table.add_column("Options")
    table.add_column("Answers")

    for i, draft in enumerate(drafts, 1):
        table.add_row(str(i), draft.question, draft.options.type or "-", _answer_summary(draft))

    console.print(table)


@app.command("check")
def check_document(
    source: Path = typer.Argument(..., help="JSON token file produced by the Markdown lexer"),
):
    """
    Compile a token file and validate every question.

    Exits with status 1 if the document has no questions or any
    question fails validation.
    """
    drafts = QuizCompiler().compile(_load_tokens(source))

    if not drafts:
        console.print("[red]quiz_no_questions[/red]: document contains no questions")
        raise typer.Exit(1)

    table = Table(title=f"Validation: {source.name}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Question", style="cyan")
    table.add_column("Result")

    failures = []
    for i, draft in enumerate(drafts, 1):
        error = validate(draft)
        if error:
            failures.append((i, error))
            table.add_row(str(i), draft.question, f"[red]{error.value}[/red]")
        else:
            table.add_row(str(i), draft.question, "[green]ok[/green]")

    console.print(table)

    if failures:
        console.print(f"\n[red]{len(failures)} of {len(drafts)} question(s) rejected[/red]")
        for i, error in failures:
            console.print(f"  question {i}: {error.value}", soft_wrap=True)
        raise typer.Exit(1)

    console.print(f"\n[green]All {len(drafts)} question(s) valid[/green]")


# =============================================================================
# Entry Point
# =============================================================================

def main() -> None:
    """CLI entry point."""
    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        level="WARNING",
        format="<level>{message}</level>",
    )

    app()


if __name__ == "__main__":
    main()

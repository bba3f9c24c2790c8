"""WikiRag CLI — entry-point.

Usage:
    echo "What is the capital of France?" | python cli/main.py ask

Configuration is read from the environment (or `.env`):
    AI_MODEL    → gpt-3.5-turbo | gpt-4-turbo | gpt-4o | llama3
    VERBOSE     → any non-empty value prints raw API responses
    WIKI_PAGES  → number of Wikipedia pages fed to the model (default 1)
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from wikirag.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
from typing import Optional

import typer

from cli.rendering import GREETING, render_answer, render_models
from wikirag.config import Settings
from wikirag.errors import NoMatchesError, StageError
from wikirag.pipeline import NO_MATCHES_EXIT_CODE, run_pipeline

app = typer.Typer(
    name="wikirag",
    help="Answer questions using Wikipedia and a language model.",
    no_args_is_help=True,
)


@app.command("ask")
def ask(
    question: Optional[str] = typer.Option(
        None, "--question", "-q", help="Question to answer (read from stdin if omitted)."
    ),
) -> None:
    """Answer a question from Wikipedia pages."""
    typer.echo(GREETING, err=True)
    settings = Settings.from_env()

    if question is None:
        typer.echo("Please enter your question:", err=True)
        question = sys.stdin.readline()

    try:
        result = asyncio.run(run_pipeline(question, settings))
    except StageError as exc:
        typer.echo(f"Error during {exc.stage.label}: {exc}", err=True)
        raise typer.Exit(code=exc.exit_code)
    except NoMatchesError as exc:
        typer.echo(f"{exc}. Try rephrasing your question.", err=True)
        raise typer.Exit(code=NO_MATCHES_EXIT_CODE)

    typer.echo("\nAnswer:", err=True)
    typer.echo(render_answer(result.answer))


@app.command("models")
def models() -> None:
    """List the models that can be selected with AI_MODEL."""
    settings = Settings.from_env()
    typer.echo(render_models(settings.model))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()

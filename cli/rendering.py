"""Console text for the WikiRag CLI."""

from __future__ import annotations

from wikirag.config import ModelChoice
from wikirag.llm.pricing import PRICES_PER_MILLION

NO_ANSWER = "No response received"

GREETING = """\
This is WikiRag!

I will answer your question using knowledge from Wikipedia. I will first
use a LLM to derive key words to perform a search in Wikipedia and will
then retrieve the relevant pages. I will then feed these pages to the
LLM and let it answer your questions in this way.
"""


def render_answer(answer: str | None) -> str:
    return answer if answer is not None else NO_ANSWER


def render_models(current: ModelChoice) -> str:
    """Render the model allow-list as a table, marking *current* with ``*``."""
    lines = [
        "  model          | provider | $/1M in | $/1M out",
        "=================|==========|=========|=========",
    ]
    for choice in ModelChoice:
        in_price, out_price = PRICES_PER_MILLION.get(choice, (0.0, 0.0))
        prefix = "* " if choice is current else "  "
        lines.append(
            f"{prefix}{choice.model_name:<15}| {choice.provider.value:<9}"
            f"| {in_price:>7.2f} | {out_price:>7.2f}"
        )
    lines.append("* = currently selected (set AI_MODEL to change)")
    return "\n".join(lines)

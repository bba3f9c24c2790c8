"""Token prices used to print a cost estimate after each model call."""

from __future__ import annotations

from wikirag.config import ModelChoice
from wikirag.llm.providers import Usage

# USD per million tokens: (input, output)
PRICES_PER_MILLION: dict[ModelChoice, tuple[float, float]] = {
    ModelChoice.GPT_4_TURBO: (10.0, 30.0),
    ModelChoice.GPT_35_TURBO: (0.5, 1.5),
    ModelChoice.GPT_4O: (5.0, 15.0),
    ModelChoice.LLAMA3: (0.0, 0.0),
}


def estimate_cost(model: ModelChoice, usage: Usage) -> tuple[float, float]:
    """Return the ``(input, output)`` cost in USD of *usage* on *model*."""
    in_price, out_price = PRICES_PER_MILLION.get(model, (0.0, 0.0))
    return (
        usage.input_tokens / 1_000_000 * in_price,
        usage.output_tokens / 1_000_000 * out_price,
    )


def format_usage(model: ModelChoice, usage: Usage) -> str:
    in_cost, out_cost = estimate_cost(model, usage)
    return (
        f"Tokens in: {usage.input_tokens} (${in_cost:.6f}), "
        f"tokens out: {usage.output_tokens} (${out_cost:.6f})"
    )

"""Token usage and cost logging for hosted generation calls."""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# USD per 1K tokens as (input, output)
MODEL_PRICING: dict[str, tuple[float, float]] = {
    "llama-3.1-8b-instant": (0.00005, 0.00008),
    "llama-3.3-70b-versatile": (0.00059, 0.00079),
    "gemma2-9b-it": (0.00020, 0.00020),
    "gemini-1.5-flash": (0.000075, 0.0003),
    "gemini-1.5-pro": (0.00125, 0.005),
}

UNKNOWN_MODEL_PRICING = (0.0005, 0.001)


@dataclass(frozen=True)
class Usage:
    provider: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: int = 0

    @property
    def cost(self) -> float:
        input_price, output_price = MODEL_PRICING.get(self.model, UNKNOWN_MODEL_PRICING)
        return round(self.input_tokens / 1000 * input_price + self.output_tokens / 1000 * output_price, 8)


def record_usage(provider: str, model: str, reply: dict, latency_ms: int) -> Usage:
    """Build a Usage from a provider reply and log it. Missing token counts count as zero."""
    usage = Usage(
        provider=provider,
        model=model,
        input_tokens=int(reply.get("input_tokens") or 0),
        output_tokens=int(reply.get("output_tokens") or 0),
        latency_ms=latency_ms,
    )
    logger.info(
        "Generation usage: provider=%s model=%s input_tokens=%d output_tokens=%d latency_ms=%d cost=$%.6f",
        usage.provider, usage.model, usage.input_tokens, usage.output_tokens, usage.latency_ms, usage.cost,
    )
    return usage

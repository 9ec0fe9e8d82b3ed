"""Content generation: hosted providers in order, then the deterministic fallback."""

import asyncio
import logging
import time
from dataclasses import dataclass

from src.config.settings import get_settings
from src.llm.client import configured_providers, get_llm_client
from src.llm.prompts import SYSTEM_PROMPT, GenerationOptions, build_instruction, render_fallback
from src.utils.cost_tracker import record_usage

logger = logging.getLogger(__name__)

FALLBACK_PROVIDER = "local"
FALLBACK_MODEL = "template"


@dataclass
class GenerationResult:
    text: str
    provider: str
    model: str
    latency_ms: int = 0

    @property
    def fallback_used(self) -> bool:
        return self.provider == FALLBACK_PROVIDER


def _is_quota_error(exc: Exception) -> bool:
    return getattr(exc, "status_code", None) == 429 or "quota" in str(exc).lower()


async def generate(prompt: str, options: GenerationOptions | None = None) -> GenerationResult:
    """Generate text for ``prompt``. Never raises; falls back to a templated response."""
    options = options or GenerationOptions()
    settings = get_settings()
    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_instruction(prompt, options)},
    ]

    for provider, model in configured_providers():
        start = time.time()
        try:
            client = get_llm_client(provider)
            result = await asyncio.wait_for(
                client.generate(messages, model, settings.MAX_OUTPUT_TOKENS),
                timeout=settings.GENERATION_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            logger.warning("%s timed out after %.0fs, trying next provider", provider, settings.GENERATION_TIMEOUT_SECONDS)
            continue
        except Exception as exc:
            if _is_quota_error(exc):
                logger.warning("%s quota or rate limit exhausted, trying next provider", provider)
            else:
                logger.warning("%s generation failed, trying next provider", provider, exc_info=True)
            continue

        content = (result.get("content") or "").strip()
        if not content:
            logger.warning("%s returned an empty response, trying next provider", provider)
            continue

        latency_ms = int((time.time() - start) * 1000)
        record_usage(provider, model, result, latency_ms)
        return GenerationResult(text=content, provider=provider, model=model, latency_ms=latency_ms)

    logger.info("Using local fallback response")
    return GenerationResult(text=render_fallback(prompt, options), provider=FALLBACK_PROVIDER, model=FALLBACK_MODEL)

"""LLM client abstraction with Groq (primary) and Google AI (secondary)."""

import logging
from abc import ABC, abstractmethod

from src.config.settings import get_settings

logger = logging.getLogger(__name__)


class LLMClient(ABC):
    @abstractmethod
    async def generate(self, messages: list[dict], model: str, max_tokens: int) -> dict:
        """Return {"content": str, "finish_reason": str, "input_tokens": int, "output_tokens": int}."""
        ...


class GroqClient(LLMClient):
    def __init__(self):
        from groq import AsyncGroq
        settings = get_settings()
        # Retries are handled by falling through the provider chain
        self._client = AsyncGroq(api_key=settings.GROQ_API_KEY, max_retries=0)

    async def generate(self, messages: list[dict], model: str, max_tokens: int) -> dict:
        response = await self._client.chat.completions.create(
            model=model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=0.7,
            top_p=0.95,
        )
        choice = response.choices[0]
        return {
            "content": choice.message.content or "",
            "finish_reason": choice.finish_reason,
            "input_tokens": response.usage.prompt_tokens if response.usage else 0,
            "output_tokens": response.usage.completion_tokens if response.usage else 0,
        }


class GoogleAIClient(LLMClient):
    def __init__(self):
        import google.generativeai as genai
        settings = get_settings()
        genai.configure(api_key=settings.GOOGLE_AI_API_KEY)
        self._genai = genai

    def _convert_messages(self, messages: list[dict]) -> tuple[str | None, str]:
        """Split OpenAI-style messages into a system instruction and the user prompt."""
        system = None
        parts = []
        for msg in messages:
            if msg["role"] == "system":
                system = msg["content"]
            else:
                parts.append(msg["content"])
        return system, "\n\n".join(parts)

    async def generate(self, messages: list[dict], model: str, max_tokens: int) -> dict:
        system, prompt = self._convert_messages(messages)
        gen_model = self._genai.GenerativeModel(model, system_instruction=system)
        response = await gen_model.generate_content_async(
            prompt,
            generation_config={"max_output_tokens": max_tokens, "temperature": 0.7, "top_p": 0.95},
        )
        return {
            "content": response.text,
            "finish_reason": "stop",
            "input_tokens": response.usage_metadata.prompt_token_count if response.usage_metadata else 0,
            "output_tokens": response.usage_metadata.candidates_token_count if response.usage_metadata else 0,
        }


# Singletons
_clients: dict[str, LLMClient] = {}


def get_llm_client(provider: str = "groq") -> LLMClient:
    if provider not in _clients:
        if provider == "groq":
            _clients[provider] = GroqClient()
        elif provider == "google":
            _clients[provider] = GoogleAIClient()
        else:
            raise ValueError(f"Unknown LLM provider: {provider}")
    return _clients[provider]


def configured_providers() -> list[tuple[str, str]]:
    """(provider, model) pairs to try in order; empty when no credential is set."""
    settings = get_settings()
    chain = []
    if settings.GROQ_API_KEY:
        chain.append(("groq", settings.DEFAULT_MODEL))
    if settings.GOOGLE_AI_API_KEY:
        chain.append(("google", settings.FALLBACK_MODEL))
    return chain

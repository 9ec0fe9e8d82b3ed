"""Tests for content generation and the provider chain."""

import asyncio

import pytest

from src.llm import service
from src.llm.prompts import GenerationOptions, build_instruction, render_fallback
from src.utils.cost_tracker import record_usage


class _FailingClient:
    async def generate(self, messages, model, max_tokens):
        raise RuntimeError("provider down")


class _SlowClient:
    async def generate(self, messages, model, max_tokens):
        await asyncio.sleep(5)
        return {"content": "too late"}


class _EchoClient:
    def __init__(self):
        self.messages = None

    async def generate(self, messages, model, max_tokens):
        self.messages = messages
        return {"content": "hosted answer", "input_tokens": 10, "output_tokens": 20}


def _use_providers(monkeypatch, clients):
    monkeypatch.setattr(service, "configured_providers", lambda: [(name, f"{name}-model") for name in clients])
    monkeypatch.setattr(service, "get_llm_client", lambda name: clients[name])


def test_fallback_is_deterministic():
    options = GenerationOptions(tone="friendly", min_words=100, max_words=200, tool="blog")
    first = render_fallback("gardening tips", options)
    assert first == render_fallback("gardening tips", options)
    assert "gardening tips" in first
    assert "friendly" in first
    assert "100-200" in first
    assert "blog" in first


def test_fallback_mentions_negative_prompt():
    text = render_fallback("gardening", GenerationOptions(negative_prompt="pesticides"))
    assert "pesticides" in text


def test_instruction_embeds_every_option():
    options = GenerationOptions(negative_prompt="jargon", min_words=50, max_words=80, tone="casual", tool="email")
    instruction = build_instruction("invite the team", options)
    for fragment in ("jargon", "50", "80", "casual", "email", "invite the team"):
        assert fragment in instruction


def test_defaults_applied():
    instruction = build_instruction("x", GenerationOptions())
    assert "professional" in instruction
    assert "between 500 and 1000 words" in instruction


def test_no_providers_uses_fallback():
    result = asyncio.run(service.generate("ocean poem"))
    assert result.fallback_used
    assert result.text
    assert "ocean poem" in result.text


def test_failing_providers_fall_through(monkeypatch):
    _use_providers(monkeypatch, {"groq": _FailingClient(), "google": _FailingClient()})
    result = asyncio.run(service.generate("ocean poem"))
    assert result.fallback_used


def test_timeout_moves_to_next_provider(monkeypatch):
    echo = _EchoClient()
    _use_providers(monkeypatch, {"groq": _SlowClient(), "google": echo})
    monkeypatch.setattr(service.get_settings(), "GENERATION_TIMEOUT_SECONDS", 0.05)
    result = asyncio.run(service.generate("ocean poem"))
    assert result.provider == "google"
    assert result.text == "hosted answer"


def test_first_provider_answer_used(monkeypatch):
    echo = _EchoClient()
    _use_providers(monkeypatch, {"groq": echo, "google": _FailingClient()})
    result = asyncio.run(service.generate("ocean poem", GenerationOptions(tone="warm")))
    assert result.provider == "groq"
    assert not result.fallback_used
    assert "warm" in echo.messages[-1]["content"]


@pytest.mark.parametrize("content", ["", "   ", None])
def test_empty_response_falls_through(monkeypatch, content):
    class _Empty:
        async def generate(self, messages, model, max_tokens):
            return {"content": content}

    _use_providers(monkeypatch, {"groq": _Empty()})
    result = asyncio.run(service.generate("ocean poem"))
    assert result.fallback_used


def test_usage_cost_uses_model_pricing():
    usage = record_usage("groq", "llama-3.1-8b-instant", {"input_tokens": 1000, "output_tokens": 1000}, 12)
    assert usage.cost == round(0.00005 + 0.00008, 8)

    unknown = record_usage("google", "mystery-model", {"input_tokens": None}, 5)
    assert unknown.input_tokens == 0
    assert unknown.cost == 0

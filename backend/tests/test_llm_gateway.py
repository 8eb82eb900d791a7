"""Tests for the LiteLLM gateway wrapper."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from app.services.llm_gateway import LLMError, LLMGateway


def _completion(content: str = "Hello!"):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        model="gpt-4o-mini",
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15),
    )


@pytest.fixture
def clean_keys(monkeypatch):
    for key in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GEMINI_API_KEY", "OPENROUTER_API_KEY"):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestFallbacks:
    def test_model_availability_follows_env(self, clean_keys):
        gateway = LLMGateway(fallback_models=[])
        clean_keys.setenv("ANTHROPIC_API_KEY", "sk-ant-test")

        assert gateway.is_model_available("anthropic/claude-3-5-sonnet-latest")
        assert not gateway.is_model_available("gemini/gemini-1.5-flash")
        assert not gateway.is_model_available("unknown/model")

    def test_fallbacks_filtered_by_key(self, clean_keys):
        gateway = LLMGateway(
            default_model="openai/gpt-4o-mini",
            fallback_models=[
                "openai/gpt-4o-mini",
                "anthropic/claude-3-5-sonnet-latest",
                "gemini/gemini-1.5-flash",
            ],
        )
        clean_keys.setenv("ANTHROPIC_API_KEY", "sk-ant-test")

        assert gateway._get_available_fallbacks("openai/gpt-4o-mini") == [
            "anthropic/claude-3-5-sonnet-latest"
        ]


class TestChat:
    @pytest.mark.asyncio
    async def test_chat_normalizes_response(self, clean_keys):
        gateway = LLMGateway(default_model="openai/gpt-4o-mini", fallback_models=[])

        with patch("litellm.acompletion", new=AsyncMock(return_value=_completion())) as mock_call:
            result = await gateway.chat(
                [{"role": "user", "content": "Hi"}], temperature=0.7, max_tokens=1000
            )

        assert result["content"] == "Hello!"
        assert set(result) == {"content", "model", "usage"}
        assert result["usage"]["total_tokens"] == 15
        kwargs = mock_call.call_args.kwargs
        assert kwargs["model"] == "openai/gpt-4o-mini"
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 1000
        assert "fallbacks" not in kwargs

    @pytest.mark.asyncio
    async def test_provider_error_wrapped(self, clean_keys):
        gateway = LLMGateway(fallback_models=[])

        with patch("litellm.acompletion", new=AsyncMock(side_effect=RuntimeError("401"))):
            with pytest.raises(LLMError, match="All models failed"):
                await gateway.chat([{"role": "user", "content": "Hi"}])

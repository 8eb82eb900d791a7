"""LLM Gateway - Unified interface using LiteLLM.

LiteLLM provides a unified API for 100+ LLM providers with
automatic format translation to the OpenAI format and built-in fallbacks.

Note: LiteLLM is imported lazily; importing it is slow and it starts
background workers.
"""

import logging
import os
from typing import Any

from app.core.config import settings

logger = logging.getLogger(__name__)

# Module-level flag to track if litellm is initialized
_litellm_initialized = False


def _ensure_litellm():
    """Lazy initialize LiteLLM on first use."""
    global _litellm_initialized
    if _litellm_initialized:
        return

    import litellm

    if settings.debug:
        os.environ["LITELLM_LOG"] = "DEBUG"

    litellm.drop_params = True  # Drop unsupported params instead of error

    # LiteLLM's logging callbacks run async workers that time out and spam logs
    litellm.success_callback = []
    litellm.failure_callback = []

    _litellm_initialized = True
    logger.debug("LiteLLM initialized")


class LLMError(Exception):
    """LLM Gateway error."""
    pass


class LLMGateway:
    """
    Unified LLM Gateway using LiteLLM.

    Model naming convention (provider prefix, then model):
    - openai/gpt-4o-mini
    - anthropic/claude-3-5-sonnet-latest
    - gemini/gemini-1.5-flash
    - openrouter/meta-llama/llama-3.1-70b-instruct
    """

    # Mapping of model prefixes to environment variable names
    _MODEL_KEY_MAPPING = {
        "openai/": "OPENAI_API_KEY",
        "anthropic/": "ANTHROPIC_API_KEY",
        "gemini/": "GEMINI_API_KEY",
        "openrouter/": "OPENROUTER_API_KEY",
    }

    def __init__(
        self,
        default_model: str | None = None,
        fallback_models: list[str] | None = None,
    ):
        """Initialize LLM Gateway with configured API keys."""
        self.default_model = default_model or settings.default_llm_model
        self.fallback_models = list(
            settings.llm_fallback_models if fallback_models is None else fallback_models
        )
        self._setup_api_keys()

    def _setup_api_keys(self):
        """Export API keys from settings so LiteLLM can find them."""
        if settings.openai_api_key:
            os.environ["OPENAI_API_KEY"] = settings.openai_api_key

        if settings.anthropic_api_key:
            os.environ["ANTHROPIC_API_KEY"] = settings.anthropic_api_key

        if settings.gemini_api_key:
            os.environ["GEMINI_API_KEY"] = settings.gemini_api_key

        if settings.openrouter_api_key:
            os.environ["OPENROUTER_API_KEY"] = settings.openrouter_api_key

    def is_model_available(self, model: str) -> bool:
        """Whether the provider key for ``model`` is present in the environment."""
        for prefix, env_key in self._MODEL_KEY_MAPPING.items():
            if model.startswith(prefix):
                return bool(os.environ.get(env_key))
        return False

    def _get_available_fallbacks(self, exclude_model: str) -> list[str]:
        """Get fallback models that have API keys configured.

        Args:
            exclude_model: The primary model to exclude from fallbacks

        Returns:
            List of fallback model names with valid API keys
        """
        available = [
            model
            for model in self.fallback_models
            if model != exclude_model and self.is_model_available(model)
        ]

        if self.fallback_models and not available:
            logger.warning(f"No fallback models available for {exclude_model}.")

        return available

    async def chat(
        self,
        messages: list[dict],
        model: str | None = None,
        temperature: float = 0.2,
        max_tokens: int = 4096,
        fallback: bool = True,
        **kwargs,
    ) -> dict[str, Any]:
        """
        Send chat messages with automatic fallback.

        Args:
            messages: List of message dicts with role and content
            model: Model name with provider prefix
            temperature: Sampling temperature
            max_tokens: Maximum tokens in response
            fallback: Enable automatic fallback to other models
            **kwargs: Additional parameters passed to LiteLLM

        Returns:
            Dict with content, model and usage stats
        """
        _ensure_litellm()
        from litellm import acompletion

        model = model or self.default_model

        params = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs,
        }

        if fallback:
            available_fallbacks = self._get_available_fallbacks(model)
            if available_fallbacks:
                params["fallbacks"] = available_fallbacks

        try:
            response = await acompletion(**params)
        except Exception as e:
            logger.error(f"LLM completion failed: {e}")
            raise LLMError(f"All models failed: {str(e)}") from e

        usage = getattr(response, "usage", None)

        return {
            "content": response.choices[0].message.content if response.choices else None,
            "model": response.model,
            "usage": {
                "prompt_tokens": getattr(usage, "prompt_tokens", 0) or 0,
                "completion_tokens": getattr(usage, "completion_tokens", 0) or 0,
                "total_tokens": getattr(usage, "total_tokens", 0) or 0,
            },
        }


# Singleton instance
_llm_gateway: LLMGateway | None = None


def get_llm_gateway() -> LLMGateway:
    """Get or create LLM Gateway singleton."""
    global _llm_gateway
    if _llm_gateway is None:
        _llm_gateway = LLMGateway()
    return _llm_gateway

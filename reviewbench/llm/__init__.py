"""
LLM Clients

Provider clients for reviewed candidates and the arbiter, plus the retry
wrapper applied around every remote call.

Clients are built explicitly from a model configuration and the run
settings:
    client = create_llm_client(settings.arbiter_model(), settings)
"""

from ..errors import ConfigError
from .anthropic_client import AnthropicClient
from .base import BaseLLMClient, LLMResponse, is_overloaded_error
from .litellm_client import LiteLLMClient
from .openai_client import OpenAIClient
from .retry import DEFAULT_RETRY_POLICY, RetryPolicy, call_with_retry


def create_llm_client(model_config, settings) -> BaseLLMClient:
    """
    Factory function to create a client for a configured model.

    Args:
        model_config: ModelConfig (name, provider, model_id, limits)
        settings: Settings providing API keys and the request timeout

    Returns:
        Configured client (no network access until the first call)
    """
    api_key = settings.api_key_for(model_config.provider)
    timeout = settings.timeout_ms / 1000 if settings.timeout_ms else None

    if model_config.provider == "openai":
        return OpenAIClient(
            model=model_config.model_id,
            api_key=api_key,
            seed=model_config.seed,
            timeout=timeout,
        )
    if model_config.provider == "anthropic":
        return AnthropicClient(
            model=model_config.model_id,
            api_key=api_key,
            max_tokens=model_config.max_tokens,
            temperature=model_config.temperature,
            timeout=timeout,
        )
    if model_config.provider in ("google", "litellm"):
        return LiteLLMClient(
            model=model_config.model_id,
            api_key=api_key,
            max_tokens=model_config.max_tokens,
            temperature=model_config.temperature,
            timeout=timeout,
            provider=model_config.provider,
        )
    raise ConfigError(f"Unsupported provider: {model_config.provider}")


__all__ = [
    # Clients
    "BaseLLMClient",
    "AnthropicClient",
    "OpenAIClient",
    "LiteLLMClient",
    "create_llm_client",
    # Responses
    "LLMResponse",
    "is_overloaded_error",
    # Retry
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "call_with_retry",
]

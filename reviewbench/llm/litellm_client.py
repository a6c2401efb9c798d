"""
LiteLLM Client

Unified client using LiteLLM for multi-provider support. Used for Google
Gemini models and any other LiteLLM-compatible provider (including local
Ollama models).
"""

import logging
import os
from typing import Any, Dict, Optional

from ..errors import EmptyResponseError, ProviderNotConfigured
from ..models import TokenUsage
from .base import BaseLLMClient, LLMResponse, error_status_code

# Suppress LiteLLM's verbose logging and debug info
logging.getLogger("LiteLLM").setLevel(logging.CRITICAL)
logging.getLogger("LiteLLM Proxy").setLevel(logging.CRITICAL)
logging.getLogger("LiteLLM Router").setLevel(logging.CRITICAL)
logging.getLogger("httpx").setLevel(logging.CRITICAL)

os.environ.setdefault("LITELLM_LOG", "ERROR")

logger = logging.getLogger(__name__)

# Error messages for common API errors
ERROR_MESSAGES = {
    "RateLimitError": "Rate limit exceeded. Wait and retry, or reduce request rate.",
    "AuthenticationError": "Invalid API key. Check the provider key in your environment.",
    "BadRequestError": "Invalid request: {detail}",
    "NotFoundError": "Model not found: {model}. Check model name.",
    "APIConnectionError": "Connection failed: {detail}. Check network or API base URL.",
    "Timeout": "Request timeout. Try increasing TIMEOUT_MS.",
    "ServiceUnavailableError": "Service unavailable. The API server may be overloaded.",
    "InternalServerError": "Internal server error. Try again later.",
}


def describe_error(exception: Exception, model: str = "") -> Dict[str, Any]:
    """
    Extract useful info from a LiteLLM exception.

    Args:
        exception: The exception to extract info from
        model: The model name for context

    Returns:
        Dictionary with error type, status code, message, and friendly message
    """
    error_type = type(exception).__name__
    message = str(exception)

    # Clean up LiteLLM's verbose messages
    for marker in ("Give Feedback", "Get Help"):
        if marker in message:
            message = message.split(marker)[0].strip()

    llm_provider = getattr(exception, "llm_provider", None)
    if llm_provider:
        message = f"[{llm_provider}] {message}"

    friendly_template = ERROR_MESSAGES.get(error_type, "API error: {detail}")
    return {
        "type": error_type,
        "status_code": error_status_code(exception),
        "message": message,
        "friendly": friendly_template.format(detail=message[:200], model=model),
    }


class LiteLLMClient(BaseLLMClient):
    """
    Unified LLM client using LiteLLM.

    Model naming conventions:
        - Google: "gemini/gemini-2.5-flash-lite"
        - Anthropic: "anthropic/claude-sonnet-4-5"
        - Ollama: "ollama/qwen2.5-coder:7b"
        - Third-party (OpenAI-compatible): "openai/model-name" with api_base set
    """

    PROVIDER_PREFIXES = {"google": "gemini/"}

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        max_tokens: int = 16000,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
        provider: Optional[str] = None,
        **kwargs,
    ):
        """
        Initialize LiteLLM client.

        Args:
            model: Model name, with or without a LiteLLM provider prefix
            api_key: API key for the provider
            api_base: API base URL for third-party providers
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature (provider default when None)
            timeout: Request timeout in seconds
            provider: Benchmark provider name, used to add a missing prefix
            **kwargs: Additional parameters passed to litellm.completion()
        """
        prefix = self.PROVIDER_PREFIXES.get(provider or "")
        if prefix and "/" not in model:
            model = f"{prefix}{model}"
        super().__init__(model, **kwargs)

        self.api_key = api_key
        self.api_base = api_base
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self.extra_kwargs = kwargs

    def is_available(self) -> bool:
        """Check if the client is available and properly configured."""
        if self.model.startswith("ollama/"):
            return self._check_ollama_available()
        return bool(self.api_key or self.api_base)

    def _check_ollama_available(self) -> bool:
        """Check if Ollama server is running and model is available."""
        import httpx

        host = os.getenv("OLLAMA_HOST", "http://localhost:11434")
        try:
            with httpx.Client(timeout=10) as client:
                response = client.get(f"{host}/api/tags")
        except httpx.HTTPError as e:
            logger.warning(f"Ollama not available at {host}: {e}")
            return False

        if response.status_code != 200:
            logger.warning(f"Ollama server not responding at {host}")
            return False

        models = [m.get("name", "") for m in response.json().get("models", [])]
        model_name = self.model.replace("ollama/", "")
        model_base = model_name.split(":")[0]
        for available_model in models:
            if model_name == available_model or model_base in available_model:
                return True

        logger.warning(f"Model '{model_name}' not found in Ollama. Available: {models}")
        return False

    def complete(self, prompt: str) -> LLMResponse:
        """Send the prompt through litellm.completion()."""
        try:
            import litellm
        except ImportError:
            raise ProviderNotConfigured(
                "litellm package is required. Install with: pip install litellm"
            )

        litellm.suppress_debug_info = True

        completion_kwargs = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.max_tokens,
        }
        if self.temperature is not None:
            completion_kwargs["temperature"] = self.temperature
        if self.api_key:
            completion_kwargs["api_key"] = self.api_key
        if self.api_base:
            completion_kwargs["api_base"] = self.api_base
        if self.timeout:
            completion_kwargs["timeout"] = self.timeout
        completion_kwargs.update(self.extra_kwargs)

        try:
            response = litellm.completion(**completion_kwargs)
        except Exception as e:
            error_info = describe_error(e, self.model)
            logger.error(f"API call failed: {error_info['type']} - {error_info['friendly']}")
            raise

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise EmptyResponseError(f"No response content from {self.model}")

        usage = TokenUsage()
        raw_usage = getattr(response, "usage", None)
        if raw_usage is not None:
            usage = TokenUsage(
                input_tokens=getattr(raw_usage, "prompt_tokens", 0) or 0,
                output_tokens=getattr(raw_usage, "completion_tokens", 0) or 0,
                total_tokens=getattr(raw_usage, "total_tokens", 0) or 0,
            )
        return LLMResponse(content=content, usage=usage, model=self.model)

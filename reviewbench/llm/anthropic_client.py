"""
Anthropic LLM Client

Uses Anthropic's Claude models through the official SDK.
"""

from typing import Optional

from ..errors import EmptyResponseError, ProviderNotConfigured
from ..models import TokenUsage
from .base import BaseLLMClient, LLMResponse


class AnthropicClient(BaseLLMClient):
    """LLM client using Anthropic Claude."""

    DEFAULT_MODEL = "claude-sonnet-4-5"

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        max_tokens: int = 16000,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
        **kwargs,
    ):
        """
        Initialize Anthropic client.

        Args:
            model: Anthropic model name (default: claude-sonnet-4-5)
            api_key: Anthropic API key
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature (provider default when None)
            timeout: Request timeout in seconds
        """
        super().__init__(model or self.DEFAULT_MODEL, **kwargs)

        self.api_key = api_key
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self._client = None

    def _get_client(self):
        """Lazy initialization of Anthropic client."""
        if self._client is None:
            if not self.api_key:
                raise ProviderNotConfigured("Anthropic API key not configured")
            try:
                import anthropic
            except ImportError:
                raise ProviderNotConfigured(
                    "anthropic package is required. Install with: pip install anthropic"
                )

            client_kwargs = {"api_key": self.api_key}
            if self.timeout:
                client_kwargs["timeout"] = self.timeout
            self._client = anthropic.Anthropic(**client_kwargs)
        return self._client

    def is_available(self) -> bool:
        """Check if Anthropic API key is configured."""
        # Just check if key is present - don't make API call
        return bool(self.api_key)

    def complete(self, prompt: str) -> LLMResponse:
        """Send the prompt to Claude."""
        client = self._get_client()

        request = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self.temperature is not None:
            request["temperature"] = self.temperature

        response = client.messages.create(**request)

        text_blocks = [b.text for b in response.content if getattr(b, "type", "") == "text"]
        if not text_blocks or not text_blocks[0]:
            raise EmptyResponseError("Unexpected response type from Anthropic")

        usage = TokenUsage(
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            total_tokens=response.usage.input_tokens + response.usage.output_tokens,
        )
        return LLMResponse(content=text_blocks[0], usage=usage, model=self.model)

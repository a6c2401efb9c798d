"""
OpenAI LLM Client

Uses OpenAI chat completions. GPT-5 family models reject custom
temperature and max_tokens, so only the seed is forwarded.
"""

from typing import Optional

from ..errors import EmptyResponseError, ProviderNotConfigured
from ..models import TokenUsage
from .base import BaseLLMClient, LLMResponse


class OpenAIClient(BaseLLMClient):
    """LLM client using OpenAI."""

    DEFAULT_MODEL = "gpt-5-nano"

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        seed: Optional[int] = None,
        timeout: Optional[float] = None,
        **kwargs,
    ):
        """
        Initialize OpenAI client.

        Args:
            model: OpenAI model name (default: gpt-5-nano)
            api_key: OpenAI API key
            api_base: API base URL (optional, for proxies)
            seed: Sampling seed for reproducible runs
            timeout: Request timeout in seconds
        """
        super().__init__(model or self.DEFAULT_MODEL, **kwargs)

        self.api_key = api_key
        self.api_base = api_base
        self.seed = seed
        self.timeout = timeout
        self._client = None

    def _get_client(self):
        """Lazy initialization of OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise ProviderNotConfigured("OpenAI API key not configured")
            try:
                from openai import OpenAI
            except ImportError:
                raise ProviderNotConfigured(
                    "openai package is required. Install with: pip install openai"
                )

            client_kwargs = {"api_key": self.api_key}
            if self.api_base:
                client_kwargs["base_url"] = self.api_base
            if self.timeout:
                client_kwargs["timeout"] = self.timeout
            self._client = OpenAI(**client_kwargs)
        return self._client

    def is_available(self) -> bool:
        """Check if OpenAI API key is configured."""
        return bool(self.api_key)

    def complete(self, prompt: str) -> LLMResponse:
        """Send the prompt as a single user message."""
        client = self._get_client()

        request = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self.seed is not None:
            request["seed"] = self.seed

        response = client.chat.completions.create(**request)

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise EmptyResponseError("No response content from OpenAI")

        usage = TokenUsage()
        if response.usage is not None:
            usage = TokenUsage(
                input_tokens=response.usage.prompt_tokens or 0,
                output_tokens=response.usage.completion_tokens or 0,
                total_tokens=response.usage.total_tokens or 0,
            )
        return LLMResponse(content=content, usage=usage, model=self.model)

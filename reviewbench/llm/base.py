"""
LLM Client Abstract Base Class

Defines the interface for the model clients used both as reviewed
candidates and as the arbiter. A client performs exactly one attempt per
call; retries are applied by callers through ``call_with_retry``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from ..models import TokenUsage

# HTTP statuses providers use for "overloaded" / "temporarily unavailable"
OVERLOAD_STATUS_CODES = frozenset({503, 529})


@dataclass
class LLMResponse:
    """Text content and token usage of one completion."""

    content: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    model: str = ""


def error_status_code(exc: BaseException) -> Optional[int]:
    """HTTP status carried by an SDK exception, if any."""
    for attr in ("status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def is_overloaded_error(exc: BaseException) -> bool:
    """True when the provider signalled a transient overload."""
    return error_status_code(exc) in OVERLOAD_STATUS_CODES


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    def __init__(self, model: str, **kwargs):
        """
        Initialize the LLM client.

        Args:
            model: Provider model identifier
            **kwargs: Additional client-specific configuration
        """
        self.model = model
        self.config = kwargs

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the client is available and properly configured.

        Returns:
            True if the client can be used, False otherwise
        """
        pass

    @abstractmethod
    def complete(self, prompt: str) -> LLMResponse:
        """
        Send a single-turn prompt and return the completion.

        Args:
            prompt: User prompt text

        Returns:
            LLMResponse with content and token usage

        Raises:
            EmptyResponseError: The provider returned no text
            ProviderNotConfigured: Credentials or SDK are missing
        """
        pass

    def send_prompt(self, prompt: str) -> str:
        """Send a prompt and return only the response text."""
        return self.complete(prompt).content

    def send_prompt_with_usage(self, prompt: str) -> LLMResponse:
        return self.complete(prompt)

    def is_retryable_error(self, exc: BaseException) -> bool:
        """Classify an error raised by ``complete`` as a transient overload."""
        return is_overloaded_error(exc)

    @property
    def client_name(self) -> str:
        """Get a descriptive name for this client."""
        return f"{self.__class__.__name__}:{self.model}"

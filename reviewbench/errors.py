"""
Error Taxonomy

Exceptions raised by the extraction, arbitration, retry and provider layers.
"""

from typing import Optional


class ReviewBenchError(Exception):
    """Base class for all benchmark errors."""


class ConfigError(ReviewBenchError):
    """Invalid or incomplete configuration."""


# =============================================================================
# Extraction
# =============================================================================


class ExtractionError(ReviewBenchError):
    """A structured record could not be recovered from response text."""


class NoJsonFound(ExtractionError):
    """The response text contains no opening brace."""

    def __init__(self, message: str = "No JSON object found in response"):
        super().__init__(message)


class UnterminatedJson(ExtractionError):
    """The braces opened in the response are never balanced."""

    def __init__(self, message: str = "Incomplete JSON object in response"):
        super().__init__(message)


class MalformedJson(ExtractionError):
    """The candidate record failed to parse, even after repair."""

    def __init__(self, parser_error: Exception):
        super().__init__(f"Malformed JSON in response: {parser_error}")
        self.parser_error = parser_error


# =============================================================================
# Arbitration
# =============================================================================


class ArbitrationError(ReviewBenchError):
    """The arbitration exchange for a fixture failed."""


class InvalidArbitrationShape(ArbitrationError):
    """The judge's record lacks the per-candidate verdict collection."""


class UnknownCandidateInVerdict(ArbitrationError):
    """The judge named a candidate that was not part of the request."""

    def __init__(self, agent_name: str):
        super().__init__(f"Model {agent_name!r} not found in responses")
        self.agent_name = agent_name


# =============================================================================
# Remote calls
# =============================================================================


class RetryExhausted(ReviewBenchError):
    """Every attempt of a retried call failed with a retryable error."""

    def __init__(self, attempts: int, last_error: Optional[BaseException]):
        super().__init__(f"Failed after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


class ProviderError(ReviewBenchError):
    """A model provider could not serve a request."""


class ProviderNotConfigured(ProviderError):
    """The provider's credentials or SDK are missing."""


class EmptyResponseError(ProviderError):
    """The provider returned no text content."""

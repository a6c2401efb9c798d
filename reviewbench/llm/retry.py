"""
Remote-Call Resilience

Retry with exponential backoff around calls that may fail with a transient
overload. Only errors the caller classifies as retryable are retried; any
other error propagates on the first attempt.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..errors import RetryExhausted

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt budget and backoff shape (waits of 1s, 2s, 4s, ... capped)."""

    max_attempts: int = 3
    multiplier: float = 1.0
    max_wait: float = 10.0


DEFAULT_RETRY_POLICY = RetryPolicy()


def _never_retry(exc: BaseException) -> bool:
    return False


def _log_retry_attempt(retry_state) -> None:
    """Log retry attempt with useful context."""
    exc = retry_state.outcome.exception()
    wait_time = 0.0
    if retry_state.next_action and hasattr(retry_state.next_action, "sleep"):
        wait_time = retry_state.next_action.sleep

    name = getattr(retry_state.fn, "__qualname__", "call")
    logger.warning(
        f"Overloaded ({type(exc).__name__}) in {name}, "
        f"attempt {retry_state.attempt_number} failed; retrying in {wait_time:.1f}s"
    )


def call_with_retry(
    fn: Callable[..., Any],
    *args: Any,
    is_retryable: Optional[Callable[[BaseException], bool]] = None,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs: Any,
) -> Any:
    """
    Invoke fn, retrying retryable failures with exponential backoff.

    Args:
        fn: The remote call
        *args: Positional arguments for fn
        is_retryable: Classifier for the "overloaded/unavailable" signal;
            when omitted nothing is retried
        policy: Attempt budget and backoff
        sleep: Sleep function (injectable for tests)
        **kwargs: Keyword arguments for fn

    Returns:
        The first successful result

    Raises:
        RetryExhausted: Every attempt failed with a retryable error; the
            last error is available as ``last_error`` and ``__cause__``
        Exception: Any non-retryable error, unchanged
    """
    retrying = Retrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=wait_exponential(multiplier=policy.multiplier, min=0, max=policy.max_wait),
        retry=retry_if_exception(is_retryable or _never_retry),
        before_sleep=_log_retry_attempt,
        sleep=sleep,
        reraise=False,
    )
    try:
        return retrying(fn, *args, **kwargs)
    except RetryError as e:
        last_error = e.last_attempt.exception()
        raise RetryExhausted(policy.max_attempts, last_error) from last_error

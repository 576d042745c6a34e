"""
Shared retry logic for LLM providers.

Question phrasing runs under a short timeout, so retries are limited to
errors that look transient and back off for at most a couple of seconds.
"""

import asyncio
import functools
import logging
import random
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRANSIENT_MARKERS = (
    "timeout",
    "connection",
    "temporary",
    "503",
    "502",
    "500",
    "internal server error",
)

_RATE_LIMIT_MARKERS = (
    "rate limit",
    "rate_limit",
    "429",
    "too many requests",
    "quota exceeded",
)


def is_rate_limit_error(error: Exception) -> bool:
    """Check if an error is a rate limit error."""
    error_str = str(error).lower()
    return any(marker in error_str for marker in _RATE_LIMIT_MARKERS)


def is_transient_error(error: Exception) -> bool:
    """Check if an error is transient and worth another try."""
    error_str = str(error).lower()
    return any(marker in error_str for marker in _TRANSIENT_MARKERS)


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 1
    base_delay: float = 0.5
    max_delay: float = 2.0
    exponential_base: float = 2.0
    jitter: bool = True

    def get_delay(self, attempt: int) -> float:
        """Calculate delay for a given attempt number."""
        delay = min(self.base_delay * (self.exponential_base ** attempt), self.max_delay)
        if self.jitter:
            delay = delay * (0.5 + random.random())
        return delay

    def should_retry(self, error: Exception) -> bool:
        # Rate limits will not clear within the question timeout
        return is_transient_error(error) and not is_rate_limit_error(error)


QUESTION_RETRY_CONFIG = RetryConfig()


def with_retry(config: Optional[RetryConfig] = None):
    """
    Decorator that adds retry logic to async provider calls.

    Args:
        config: Retry configuration (uses QUESTION_RETRY_CONFIG if None)

    Returns:
        Decorated function with retry logic
    """
    retry_config = config or QUESTION_RETRY_CONFIG

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if attempt >= retry_config.max_retries or not retry_config.should_retry(e):
                        raise
                    delay = retry_config.get_delay(attempt)
                    attempt += 1
                    logger.warning(
                        f"Attempt {attempt}/{retry_config.max_retries + 1} failed for "
                        f"{func.__name__}: {e}. Retrying in {delay:.2f}s..."
                    )
                    await asyncio.sleep(delay)

        return wrapper

    return decorator

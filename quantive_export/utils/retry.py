"""Retry utilities for transient API failures.

This module provides exponential backoff with jitter for the Quantive
API client. It includes:
- RetryConfig: Retry limits and delays
- calculate_backoff_delay: Exponential backoff with jitter calculation
- with_retry: Decorator for automatic retry logic
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from typing import Any, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retrying transient failures.

    Attributes:
        max_retries: Retry attempts after the first call (0 disables retrying)
        base_delay_seconds: Delay before the first retry
        max_delay_seconds: Cap on any single delay
        jitter_factor: Random jitter as a fraction of the delay (0-1)
    """

    max_retries: int = 0
    base_delay_seconds: float = 2.0
    max_delay_seconds: float = 60.0
    jitter_factor: float = 0.5

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay_seconds < 0:
            raise ValueError("base_delay_seconds must be >= 0")
        if self.jitter_factor < 0 or self.jitter_factor > 1:
            raise ValueError("jitter_factor must be in [0, 1]")
        if self.max_delay_seconds < self.base_delay_seconds:
            raise ValueError("max_delay_seconds must be >= base_delay_seconds")


def calculate_backoff_delay(attempt: int, config: RetryConfig) -> float:
    """Calculate delay with exponential backoff and jitter.

    Formula: min(base * 2^attempt + jitter, max_delay)

    Args:
        attempt: Current attempt number (0-indexed)
        config: Retry configuration

    Returns:
        Delay in seconds
    """
    exponential_delay = config.base_delay_seconds * (2**attempt)
    jitter = random.uniform(0, config.jitter_factor * exponential_delay)
    delay: float = min(exponential_delay + jitter, config.max_delay_seconds)
    return delay


def with_retry(
    config: RetryConfig,
    is_retryable: Callable[[Exception], bool],
    on_retry: Callable[[int, float, Exception], None] | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator for retrying a function on transient errors.

    Errors rejected by ``is_retryable`` propagate immediately. When the
    retries are exhausted the last error is re-raised unchanged.

    Args:
        config: Retry configuration
        is_retryable: Predicate deciding whether an error is transient
        on_retry: Optional callback called before each retry.
                  Receives (attempt_number, delay_seconds, exception).

    Returns:
        Decorator function
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if attempt >= config.max_retries or not is_retryable(e):
                        raise

                    delay = calculate_backoff_delay(attempt, config)
                    attempt += 1
                    if on_retry:
                        on_retry(attempt, delay, e)
                    time.sleep(delay)

        return wrapper

    return decorator


__all__ = [
    "RetryConfig",
    "calculate_backoff_delay",
    "with_retry",
]

from __future__ import annotations

"""
Bounded Retry Driver.

Wraps an attempt callable that either returns a value or raises. Retryable
errors trigger another attempt, up to a fixed ceiling, with an optional
linearly increasing delay. Any other error propagates immediately.
"""

import logging
import time
from typing import Callable, Optional, Tuple, Type, TypeVar

from figma_i18n.domain.errors import RetriesExhaustedError, RetryableError

logger = logging.getLogger(__name__)
T = TypeVar("T")


def run_with_retries(
        attempt: Callable[[int], T],
        *,
        max_retries: int,
        backoff_seconds: float = 0.0,
        backoff_on: Tuple[Type[RetryableError], ...] = (RetryableError,),
        sleep: Callable[[float], None] = time.sleep,
        on_retry: Optional[Callable[[int, RetryableError], None]] = None,
) -> T:
    """
    Invoke `attempt` until it succeeds or the retry ceiling is reached.

    Args:
        attempt: Callable receiving the 1-based attempt number.
        max_retries: Additional attempts after the first one.
        backoff_seconds: Delay unit; attempt N waits `backoff_seconds * (N - 1)`.
        backoff_on: Error types that are followed by a delay; others are
                    retried immediately.
        sleep: Delay function (injected by tests).
        on_retry: Hook called with the failed attempt number and its error.

    Returns:
        T: The value produced by the first successful attempt.

    Raises:
        RetriesExhaustedError: When every attempt raised a RetryableError.
        ValueError: If `max_retries` is negative.
    """
    if max_retries < 0:
        raise ValueError("max_retries must not be negative.")
    total_attempts = max_retries + 1
    number = 1

    while True:
        try:
            return attempt(number)
        except RetryableError as e:
            logger.debug(f"Retry: attempt {number}/{total_attempts} failed: {e}")
            if number >= total_attempts:
                raise RetriesExhaustedError(total_attempts, e) from e
            if on_retry is not None:
                on_retry(number, e)
            number += 1
            if backoff_seconds > 0 and isinstance(e, backoff_on):
                sleep(backoff_seconds * (number - 1))

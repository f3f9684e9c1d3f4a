"""Utility functions for Inbox Sweeper."""

import time
from typing import Callable, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


def call_with_retry(
    func: Callable[[], T],
    *,
    max_retries: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    should_retry: Callable[[Exception], bool] = lambda exc: True,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call `func`, retrying with exponential backoff on retryable errors.

    Args:
        func: Zero-argument callable.
        max_retries: Maximum number of retry attempts.
        delay: Initial delay between retries in seconds.
        backoff: Multiplier for delay after each retry.
        should_retry: Predicate deciding whether an error is transient.
        sleep: Sleep function, replaceable in tests.

    Returns:
        Whatever `func` returns.
    """

    current_delay = delay
    name = getattr(func, "__name__", repr(func))

    for attempt in range(max_retries + 1):
        try:
            return func()
        except Exception as e:
            if attempt >= max_retries or not should_retry(e):
                if attempt > 0:
                    logger.error(
                        "function_retry_exhausted",
                        function=name,
                        attempts=attempt + 1,
                        error=str(e),
                    )
                raise
            logger.warning(
                "function_retry",
                function=name,
                attempt=attempt + 1,
                max_retries=max_retries,
                delay=current_delay,
                error=str(e),
            )
            sleep(current_delay)
            current_delay *= backoff

    raise AssertionError("unreachable")

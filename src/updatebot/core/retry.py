"""Retry logic with exponential backoff for transient failures.

GitHub calls fail transiently for many reasons:
- Network timeouts
- Rate limiting
- Temporary API unavailability

call_with_retry() runs an operation under a RetryPolicy, sleeping with
exponential backoff between attempts.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from updatebot.core.time.abc import Time

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How often, and how patiently, an operation is retried.

    Delay before attempt N (1-based, N > 1) is
    base_delay * (backoff_factor ** (N - 2)), so the defaults wait 1s then 2s.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    backoff_factor: float = 2.0
    retry_on: tuple[type[BaseException], ...] = (RuntimeError, OSError)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {self.max_attempts}"
            raise ValueError(msg)
        if self.base_delay < 0:
            msg = f"base_delay must not be negative, got {self.base_delay}"
            raise ValueError(msg)

    def delay_before(self, attempt: int) -> float:
        """Seconds to wait before the zero-based attempt number."""
        if attempt == 0:
            return 0.0
        return self.base_delay * (self.backoff_factor ** (attempt - 1))


def call_with_retry(
    time: Time,
    policy: RetryPolicy,
    operation: Callable[[], T],
    description: str,
) -> T:
    """Invoke operation, retrying recoverable failures under policy.

    Args:
        time: Time implementation used for sleeping between attempts
        policy: Attempt count, backoff schedule and recoverable exception types
        operation: Zero-argument callable performing the API call
        description: Human-readable name of the operation, used in log messages

    Returns:
        Whatever operation returns on its first successful attempt

    Raises:
        Exception: The last failure once all attempts are exhausted, or any
            exception not listed in policy.retry_on immediately
    """
    for attempt in range(policy.max_attempts):
        if attempt > 0:
            delay = policy.delay_before(attempt)
            logger.info(
                "Retrying %s after %.1fs (attempt %d/%d)",
                description,
                delay,
                attempt + 1,
                policy.max_attempts,
            )
            time.sleep(delay)

        try:
            return operation()
        except policy.retry_on as e:
            if attempt == policy.max_attempts - 1:
                raise
            logger.warning("Failed to %s: %s", description, e)

    msg = f"Retry loop for {description} completed without result or exception"
    raise RuntimeError(msg)

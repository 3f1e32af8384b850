"""Retry policy with bounded exponential backoff.

Only a fixed allow-list of failures is retried (see
``exceptions.RETRYABLE_ERRORS``). Everything else propagates on first
occurrence, and once attempts are exhausted the last failure is re-raised
unchanged.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TypeVar

from .config import RetryPolicyConfig
from .exceptions import RETRYABLE_ERRORS
from .logger import get_logger

logger = get_logger("retry")

T = TypeVar("T")


class RetryPolicy:
    """Run an attempt function until it succeeds or attempts run out.

    Example:
        ```python
        policy = RetryPolicy(RetryPolicyConfig(max_attempts=3))
        result = policy.call(lambda attempt: do_request(attempt))
        ```
    """

    def __init__(
        self,
        config: RetryPolicyConfig | None = None,
        *,
        retry_on: tuple[type[BaseException], ...] = RETRYABLE_ERRORS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the policy.

        Args:
            config: Attempt count and backoff settings.
            retry_on: Exception types that trigger another attempt.
            sleep: Function used to wait between attempts.
        """
        self.config = config or RetryPolicyConfig()
        self.retry_on = retry_on
        self._sleep = sleep

    def delays(self) -> list[float]:
        """Backoff delays between consecutive attempts."""
        delays: list[float] = []
        delay = self.config.backoff_seconds
        for _ in range(self.config.max_attempts - 1):
            delays.append(min(delay, self.config.max_backoff_seconds))
            delay *= self.config.backoff_multiplier
        return delays

    def call(self, attempt_fn: Callable[[int], T]) -> T:
        """Call ``attempt_fn`` with the 1-based attempt number, retrying transient errors.

        Raises:
            Whatever ``attempt_fn`` raised last.
        """
        delays = self.delays()
        attempt = 0
        while True:
            attempt += 1
            try:
                return attempt_fn(attempt)
            except self.retry_on as exc:
                if attempt >= self.config.max_attempts:
                    logger.error(
                        "Giving up after %d attempts: %s",
                        attempt,
                        exc,
                    )
                    raise
                delay = delays[attempt - 1]
                logger.warning(
                    "Attempt %d/%d failed with %s, retrying in %.2fs",
                    attempt,
                    self.config.max_attempts,
                    type(exc).__name__,
                    delay,
                )
                self._sleep(delay)

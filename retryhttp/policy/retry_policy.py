"""Retry policy for the retrying transport.

Combines a decision function and a delay function into a single callable
returning ``(should_retry, delay_seconds)``.
"""

from dataclasses import dataclass

from .attempt import Attempt
from .decision import (
    ShouldRetryFn,
    retry_any,
    retry_status_5xx,
    retry_temporary_err,
)
from .delay import DelayFn, exponential_delay, no_delay


@dataclass(frozen=True)
class RetryPolicy:
    """Decision and delay functions composed into one policy.

    Policies hold no mutable state and can be shared by any number of
    concurrent requests.
    """
    should_retry: ShouldRetryFn
    delay: DelayFn

    def __call__(self, attempt: Attempt) -> tuple[bool, float]:
        """Decide whether to retry after ``attempt``, and how long to wait.

        The delay function only runs when a retry is chosen, so it never
        consumes jitter for an attempt that is not retried.

        Returns:
            ``(True, delay)`` to retry after ``delay`` seconds, else
            ``(False, 0.0)``.
        """
        if not self.should_retry(attempt):
            return False, 0.0
        return True, self.delay(attempt)


def to_retry_policy(should_retry: ShouldRetryFn, delay: DelayFn) -> RetryPolicy:
    """Combine ``should_retry`` and ``delay`` into a RetryPolicy."""
    return RetryPolicy(should_retry=should_retry, delay=delay)


def default_retry_policy() -> RetryPolicy:
    """Create default retry policy.

    3 retries on temporary errors or 5xx, full jitter backoff from 1s up to 30s.
    """
    return to_retry_policy(
        retry_any(retry_temporary_err(3), retry_status_5xx(3)),
        exponential_delay(1.0, 30.0),
    )


def aggressive_retry_policy() -> RetryPolicy:
    """Create aggressive retry policy for flaky connections.

    5 retries on temporary errors or 5xx, full jitter backoff from 0.5s up to 10s.
    """
    return to_retry_policy(
        retry_any(retry_temporary_err(5), retry_status_5xx(5)),
        exponential_delay(0.5, 10.0),
    )


def no_retry_policy() -> RetryPolicy:
    """Create a no-retry policy (fail immediately)."""
    return to_retry_policy(retry_any(), no_delay())

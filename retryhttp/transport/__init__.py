"""Transport module - retrying requests adapter."""

from .adapter import CANCEL_POLL_INTERVAL, RetryAdapter
from .body import ReplayBuffer
from .cancellation import CancellationRegistry

__all__ = [
    "CANCEL_POLL_INTERVAL",
    "RetryAdapter",
    "ReplayBuffer",
    "CancellationRegistry",
]

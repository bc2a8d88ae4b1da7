"""Delay functions for the retry loop.

A delay function takes the Attempt that was just made and returns how many
seconds to wait before the next one:
- no_delay: retry immediately
- const_delay: fixed wait
- linear_delay: base * (index + 1)
- exponential_delay: full jitter exponential backoff
"""

import math
import random
from typing import Callable, Optional

from .attempt import Attempt

DelayFn = Callable[[Attempt], float]

# Shared jitter source, seeded once per process. Random.random() is a single
# C call and safe to use from several threads.
_PRNG = random.Random()


def no_delay() -> DelayFn:
    """Create a delay function that always returns 0."""
    def delay(attempt: Attempt) -> float:
        return 0.0
    return delay


def const_delay(seconds: float) -> DelayFn:
    """Create a delay function that always waits ``seconds``."""
    def delay(attempt: Attempt) -> float:
        return seconds
    return delay


def linear_delay(base: float) -> DelayFn:
    """Create a delay function returning ``base * (index + 1)``.

    The first retry waits ``base``, the second ``2 * base``, and so on.
    """
    def delay(attempt: Attempt) -> float:
        return base * (attempt.index + 1)
    return delay


def exponential_delay(
    base: float,
    max_delay: float,
    rng: Optional[random.Random] = None,
) -> DelayFn:
    """Create a full jitter exponential backoff delay function.

    The upper bound is ``min(max_delay, base * 2**index)``; the returned
    delay is drawn uniformly from ``[0, upper)``. A non-positive upper bound
    yields 0 without drawing from the generator.

    See https://aws.amazon.com/blogs/architecture/exponential-backoff-and-jitter/

    Args:
        base: Delay scale in seconds for the first retry.
        max_delay: Cap on the upper bound, in seconds.
        rng: Random generator to draw from. Defaults to a process-wide one.

    Returns:
        Delay function.

    Raises:
        ValueError: If ``max_delay`` is not finite.
    """
    if not math.isfinite(max_delay):
        raise ValueError(f"max_delay must be finite, got {max_delay}")
    source = rng or _PRNG

    def delay(attempt: Attempt) -> float:
        if base <= 0 or max_delay <= 0:
            return 0.0
        try:
            top = base * math.pow(2, attempt.index)
        except OverflowError:
            top = math.inf
        return source.random() * min(max_delay, top)

    return delay

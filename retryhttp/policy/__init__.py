"""Policy module - retry decisions and delays."""

from .attempt import Attempt
from .decision import (
    ShouldRetryFn,
    is_temporary,
    retry_all,
    retry_any,
    retry_http_methods,
    retry_is_err,
    retry_max_retries,
    retry_status_5xx,
    retry_status_interval,
    retry_statuses,
    retry_temporary_err,
)
from .delay import (
    DelayFn,
    const_delay,
    exponential_delay,
    linear_delay,
    no_delay,
)
from .retry_policy import (
    RetryPolicy,
    aggressive_retry_policy,
    default_retry_policy,
    no_retry_policy,
    to_retry_policy,
)

__all__ = [
    "Attempt",
    "ShouldRetryFn",
    "is_temporary",
    "retry_all",
    "retry_any",
    "retry_http_methods",
    "retry_is_err",
    "retry_max_retries",
    "retry_status_5xx",
    "retry_status_interval",
    "retry_statuses",
    "retry_temporary_err",
    "DelayFn",
    "const_delay",
    "exponential_delay",
    "linear_delay",
    "no_delay",
    "RetryPolicy",
    "aggressive_retry_policy",
    "default_retry_policy",
    "no_retry_policy",
    "to_retry_policy",
]

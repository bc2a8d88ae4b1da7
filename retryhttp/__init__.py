"""Retrying HTTP transport for requests.

A RetryAdapter wraps another transport adapter and sends a request again
while its retry policy asks for it:

    from retryhttp import RetryAdapter, retry_temporary_err, const_delay

    session = requests.Session()
    session.mount("https://", RetryAdapter(
        should_retry=retry_temporary_err(3),
        delay=const_delay(1.0),
    ))
"""

from .client import RetryHttpClient
from .config import RetryConfig, load_config
from .errors import BodyBufferError, ConfigError, RequestCancelled, RetryHttpError
from .policy import (
    Attempt,
    RetryPolicy,
    aggressive_retry_policy,
    const_delay,
    default_retry_policy,
    exponential_delay,
    is_temporary,
    linear_delay,
    no_delay,
    no_retry_policy,
    retry_all,
    retry_any,
    retry_http_methods,
    retry_is_err,
    retry_max_retries,
    retry_status_5xx,
    retry_status_interval,
    retry_statuses,
    retry_temporary_err,
    to_retry_policy,
)
from .transport import CancellationRegistry, ReplayBuffer, RetryAdapter

__version__ = "0.1.0"

__all__ = [
    "RetryHttpClient",
    "RetryConfig",
    "load_config",
    "BodyBufferError",
    "ConfigError",
    "RequestCancelled",
    "RetryHttpError",
    "Attempt",
    "RetryPolicy",
    "aggressive_retry_policy",
    "const_delay",
    "default_retry_policy",
    "exponential_delay",
    "is_temporary",
    "linear_delay",
    "no_delay",
    "no_retry_policy",
    "retry_all",
    "retry_any",
    "retry_http_methods",
    "retry_is_err",
    "retry_max_retries",
    "retry_status_5xx",
    "retry_status_interval",
    "retry_statuses",
    "retry_temporary_err",
    "to_retry_policy",
    "CancellationRegistry",
    "ReplayBuffer",
    "RetryAdapter",
]

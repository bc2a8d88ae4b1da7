"""Retry decision functions.

A decision function takes the Attempt that was just made and returns
whether the request should be sent again. Every built-in takes a
``max_retries`` bound: attempt indexes at or above it never retry.

Combine them with retry_any (OR) and retry_all (AND), e.g. retry GETs on
5xx or temporary errors, at most 3 times:

    retry_all(
        retry_http_methods(3, "GET"),
        retry_any(retry_status_5xx(3), retry_temporary_err(3)),
    )
"""

from typing import Callable

import requests

from .attempt import Attempt

ShouldRetryFn = Callable[[Attempt], bool]

# Transport errors treated as temporary when the error does not classify
# itself through a ``temporary`` attribute.
TEMPORARY_ERRORS: tuple[type[BaseException], ...] = (
    requests.ConnectionError,
    requests.Timeout,
)
NON_TEMPORARY_ERRORS: tuple[type[BaseException], ...] = (
    requests.exceptions.SSLError,
)


def is_temporary(error: BaseException) -> bool:
    """Check whether an error reports itself as temporary.

    An error classifies itself through a ``temporary`` attribute, either a
    boolean or a no-argument callable. Otherwise connection errors and
    timeouts from requests count as temporary, except SSL errors.
    """
    flag = getattr(error, "temporary", None)
    if flag is not None:
        return bool(flag()) if callable(flag) else bool(flag)
    if isinstance(error, NON_TEMPORARY_ERRORS):
        return False
    return isinstance(error, TEMPORARY_ERRORS)


def retry_any(*fns: ShouldRetryFn) -> ShouldRetryFn:
    """Retry if any of ``fns`` allows it. With no functions, never retry."""
    def should_retry(attempt: Attempt) -> bool:
        return any(fn(attempt) for fn in fns)
    return should_retry


def retry_all(*fns: ShouldRetryFn) -> ShouldRetryFn:
    """Retry only if all of ``fns`` allow it. With no functions, always retry."""
    def should_retry(attempt: Attempt) -> bool:
        return all(fn(attempt) for fn in fns)
    return should_retry


def retry_max_retries(max_retries: int) -> ShouldRetryFn:
    """Retry any attempt, up to ``max_retries`` times."""
    def should_retry(attempt: Attempt) -> bool:
        return attempt.index < max_retries
    return should_retry


def retry_temporary_err(max_retries: int) -> ShouldRetryFn:
    """Retry up to ``max_retries`` times when the attempt raised a temporary error."""
    def should_retry(attempt: Attempt) -> bool:
        if attempt.index >= max_retries:
            return False
        return attempt.error is not None and is_temporary(attempt.error)
    return should_retry


def retry_is_err(
    max_retries: int, predicate: Callable[[BaseException], bool]
) -> ShouldRetryFn:
    """Retry up to ``max_retries`` times when the attempt raised an error
    matching ``predicate``."""
    def should_retry(attempt: Attempt) -> bool:
        if attempt.index >= max_retries:
            return False
        return attempt.error is not None and predicate(attempt.error)
    return should_retry


def retry_status_interval(
    max_retries: int, from_code: int, to_code: int
) -> ShouldRetryFn:
    """Retry up to ``max_retries`` times for a status in ``[from_code, to_code)``."""
    def should_retry(attempt: Attempt) -> bool:
        if attempt.index >= max_retries or attempt.response is None:
            return False
        return from_code <= attempt.response.status_code < to_code
    return should_retry


def retry_status_5xx(max_retries: int) -> ShouldRetryFn:
    """Retry up to ``max_retries`` times for a 5xx status."""
    return retry_status_interval(max_retries, 500, 600)


def retry_statuses(max_retries: int, *codes: int) -> ShouldRetryFn:
    """Retry up to ``max_retries`` times for one of the given status codes."""
    wanted = frozenset(codes)

    def should_retry(attempt: Attempt) -> bool:
        if attempt.index >= max_retries or attempt.response is None:
            return False
        return attempt.response.status_code in wanted
    return should_retry


def retry_http_methods(max_retries: int, *methods: str) -> ShouldRetryFn:
    """Retry up to ``max_retries`` times if the request method is one of ``methods``.

    Methods are compared case-insensitively. This is meant to be combined
    with another decision function through retry_all: on its own it also
    retries successful responses made with one of the listed methods.
    """
    allowed = frozenset(m.upper() for m in methods)

    def should_retry(attempt: Attempt) -> bool:
        if attempt.index >= max_retries:
            return False
        return (attempt.request.method or "").upper() in allowed
    return should_retry
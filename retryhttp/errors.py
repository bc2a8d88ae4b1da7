"""Exceptions raised by the retrying transport.

Errors from the wrapped adapter are never wrapped: when no further retry is
chosen, the last one is re-raised as-is.
"""

import requests


class RetryHttpError(requests.RequestException):
    """Base class for errors introduced by the retry layer."""


class BodyBufferError(RetryHttpError):
    """The request body could not be read into the replay buffer.

    No attempt was made; the original body is consumed and cannot be
    recovered.
    """


class RequestCancelled(RetryHttpError):
    """The request was cancelled while waiting between attempts."""

    def __init__(self, *args, attempts: int = 0, **kwargs):
        super().__init__(*args, **kwargs)
        self.attempts = attempts


class ConfigError(ValueError):
    """Invalid retry configuration."""

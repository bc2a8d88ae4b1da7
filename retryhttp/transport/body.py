"""In-memory replay buffer for request bodies.

An attempt consumes a streamed request body, so a body must be buffered once
to be sent again on each retry. The buffered bytes become the request body:
every attempt, and every redirect requests follows from the same request,
reads them in full.
"""

import logging
from typing import Any

import requests

from ..errors import BodyBufferError

logger = logging.getLogger(__name__)


class ReplayBuffer:
    """Request body buffered in memory for replay across attempts.

    Owned by a single send call and never shared between requests.
    """

    def __init__(self, data: bytes):
        self._data = data

    @classmethod
    def from_body(cls, body: Any) -> "ReplayBuffer":
        """Drain ``body`` into a new buffer and close the original.

        Args:
            body: Prepared request body: bytes-like, str, a file-like object
                or an iterable of chunks.

        Returns:
            ReplayBuffer holding the body bytes.

        Raises:
            BodyBufferError: If reading the body failed. The original body
                is closed and cannot be replayed.
        """
        try:
            data = _drain(body)
        except (OSError, ValueError) as e:
            logger.debug("Failed to buffer request body: %s", e)
            raise BodyBufferError(f"Failed to buffer request body: {e}") from e
        finally:
            close = getattr(body, "close", None)
            if callable(close):
                close()
        return cls(data)

    @property
    def data(self) -> bytes:
        """The buffered body."""
        return self._data

    def install(self, request: requests.PreparedRequest) -> None:
        """Set the buffered bytes as the request body."""
        request.body = self._data
        # bytes need no seeking when requests rebuilds the request for a redirect
        request._body_position = None


def _drain(body: Any) -> bytes:
    if isinstance(body, (bytes, bytearray, memoryview)):
        return bytes(body)
    if isinstance(body, str):
        return body.encode("utf-8")
    if hasattr(body, "read"):
        return _to_bytes(body.read())
    return b"".join(_to_bytes(chunk) for chunk in body)


def _to_bytes(chunk: Any) -> bytes:
    if isinstance(chunk, str):
        return chunk.encode("utf-8")
    if isinstance(chunk, int):
        raise ValueError(f"Request body chunk must be bytes or str, got int {chunk}")
    return bytes(chunk)

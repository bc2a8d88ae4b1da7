"""Shared helpers for retryhttp tests.

Tests never touch the network: the retrying adapter wraps a StubAdapter
that replays scripted outcomes.
"""

import io
import threading
from typing import Any, Optional

import requests
from requests.adapters import BaseAdapter

URL = "http://example.test/resource"


class TrackingRaw(io.BytesIO):
    """Response body recording whether its connection was released."""

    def __init__(self, data: bytes = b""):
        super().__init__(data)
        self.released = False

    def read(self, size: int = -1, decode_content: Optional[bool] = None) -> bytes:
        return super().read(size)

    def release_conn(self) -> None:
        self.released = True


def make_response(
    status: int,
    request: Optional[requests.PreparedRequest] = None,
    body: bytes = b"",
) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.reason = "OK" if status < 400 else "Error"
    response.raw = TrackingRaw(body)
    response.request = request
    response.url = request.url if request is not None else URL
    return response


def make_request(method: str = "GET", data: Any = None, url: str = URL) -> requests.PreparedRequest:
    return requests.Request(method, url, data=data).prepare()


def read_body(body: Any) -> Optional[bytes]:
    """Consume and close a request body the way a real adapter would."""
    if body is None:
        return None
    if isinstance(body, str):
        return body.encode("utf-8")
    if isinstance(body, bytes):
        return body
    data = body.read()
    close = getattr(body, "close", None)
    if callable(close):
        close()
    return data


class StubAdapter(BaseAdapter):
    """Inner adapter returning scripted outcomes in order.

    An outcome is a status code, a Response or an exception to raise. The
    last outcome repeats once the script is exhausted.
    """

    def __init__(self, *outcomes):
        super().__init__()
        self.outcomes = list(outcomes)
        self.bodies: list[Optional[bytes]] = []
        self.kwargs: list[dict] = []
        self.calls = 0
        self.closed = False
        self._lock = threading.Lock()

    def send(self, request, **kwargs):
        with self._lock:
            self.calls += 1
            outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        self.bodies.append(read_body(request.body))
        self.kwargs.append(kwargs)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, requests.Response):
            return outcome
        return make_response(outcome, request)

    def close(self):
        self.closed = True

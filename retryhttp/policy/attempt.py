"""Attempt record passed to retry decision and delay functions."""

from dataclasses import dataclass
from typing import Optional

import requests


@dataclass(frozen=True)
class Attempt:
    """Snapshot of a single send attempt.

    Exactly one of ``response`` and ``error`` is set: the wrapped adapter
    either returns a response or raises. A non-2xx status is a response,
    not an error.
    """
    index: int
    request: requests.PreparedRequest
    response: Optional[requests.Response] = None
    error: Optional[BaseException] = None

    @property
    def status_code(self) -> Optional[int]:
        """Status code of the response, if any."""
        if self.response is None:
            return None
        return self.response.status_code

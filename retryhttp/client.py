"""HTTP client with a retrying transport mounted.

Wraps a requests.Session whose http:// and https:// adapters retry
according to a RetryPolicy.
"""

import threading
from typing import Any, Optional

import requests
from requests.adapters import BaseAdapter

from .config import RetryConfig
from .policy import RetryPolicy, default_retry_policy
from .transport import RetryAdapter


class RetryHttpClient:
    """HTTP client sending every request through a RetryAdapter."""

    def __init__(
        self,
        retry_policy: Optional[RetryPolicy] = None,
        *,
        prevent_retry_with_body: bool = False,
        inner: Optional[BaseAdapter] = None,
        request_timeout: float = 30.0,
    ):
        """Initialize HTTP client.

        Args:
            retry_policy: Retry policy for requests. Default: default_retry_policy().
            prevent_retry_with_body: Never retry requests with a body.
            inner: Adapter executing each attempt. Default: HTTPAdapter().
            request_timeout: Default timeout in seconds for each attempt.
        """
        self.retry_policy = retry_policy or default_retry_policy()
        self.request_timeout = request_timeout
        self.adapter = RetryAdapter(
            inner,
            self.retry_policy,
            prevent_retry_with_body=prevent_retry_with_body,
        )
        self._session = requests.Session()
        self._session.mount("http://", self.adapter)
        self._session.mount("https://", self.adapter)

    @classmethod
    def from_config(
        cls,
        config: RetryConfig,
        *,
        inner: Optional[BaseAdapter] = None,
        request_timeout: float = 30.0,
    ) -> "RetryHttpClient":
        """Create a client from a RetryConfig."""
        return cls(
            config.build_policy(),
            prevent_retry_with_body=config.prevent_retry_with_body,
            inner=inner,
            request_timeout=request_timeout,
        )

    @property
    def session(self) -> requests.Session:
        """Underlying requests session."""
        return self._session

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        """Send a request, retrying as the policy dictates.

        Args:
            method: HTTP method (GET, POST, etc.).
            url: Request URL.
            **kwargs: Additional arguments for requests.

        Returns:
            Response of the last attempt.
        """
        kwargs.setdefault("timeout", self.request_timeout)
        return self._session.request(method, url, **kwargs)

    def get(self, url: str, **kwargs) -> requests.Response:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs) -> requests.Response:
        return self.request("POST", url, **kwargs)

    def prepare(self, method: str, url: str, **kwargs: Any) -> requests.PreparedRequest:
        """Prepare a request with the session's settings, for send()."""
        return self._session.prepare_request(requests.Request(method, url, **kwargs))

    def send(
        self,
        request: requests.PreparedRequest,
        cancel_event: Optional[threading.Event] = None,
        **kwargs,
    ) -> requests.Response:
        """Send a prepared request.

        The request can be cancelled from another thread with cancel(request)
        or by setting ``cancel_event`` while it waits between attempts.
        """
        kwargs.setdefault("timeout", self.request_timeout)
        return self._session.send(request, cancel_event=cancel_event, **kwargs)

    def cancel(self, request: requests.PreparedRequest) -> bool:
        """Cancel a request sent with send(), preventing any pending retry."""
        return self.adapter.cancel(request)

    def close(self) -> None:
        """Close the HTTP session, cancelling pending retries."""
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

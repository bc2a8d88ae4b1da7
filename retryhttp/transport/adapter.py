"""Retrying transport adapter for requests.

RetryAdapter wraps another transport adapter (HTTPAdapter by default) and
sends a request again for as long as its retry policy asks for it:

    adapter = RetryAdapter(
        should_retry=retry_temporary_err(3),  # max 3 retries for temporary errors
        delay=const_delay(1.0),               # wait 1s between retries
    )
    session = requests.Session()
    session.mount("http://", adapter)
    session.mount("https://", adapter)

Every attempt, including successful ones, goes through the policy, unless
the request has a body and ``prevent_retry_with_body`` is set. Request
bodies are buffered in memory so they can be sent again; setting
``prevent_retry_with_body`` avoids the buffering and disables retries for
requests with a body.

A request waiting between attempts can be cancelled with
``RetryAdapter.cancel(request)`` or through the ``cancel_event`` passed to
``send``. An attempt already in flight always runs to completion.
"""

import logging
import threading
import time
from enum import Enum
from typing import Any, Callable, Optional

import requests
from requests.adapters import BaseAdapter, HTTPAdapter
from requests.exceptions import ChunkedEncodingError, ContentDecodingError

from ..errors import RequestCancelled
from ..policy import (
    Attempt,
    DelayFn,
    RetryPolicy,
    ShouldRetryFn,
    default_retry_policy,
    no_delay,
    retry_any,
    to_retry_policy,
)
from .body import ReplayBuffer
from .cancellation import CancellationRegistry

logger = logging.getLogger(__name__)

# Longest time a wait goes without checking the caller's cancel event.
CANCEL_POLL_INTERVAL = 0.05

OnRetry = Callable[[Attempt, float], None]


class _State(str, Enum):
    """States of a single send through the retry loop."""
    BUFFERING = "buffering"
    ATTEMPTING = "attempting"
    DECIDING = "deciding"
    WAITING = "waiting"
    RETURNING = "returning"


class RetryAdapter(BaseAdapter):
    """Transport adapter adding retry logic to another adapter."""

    def __init__(
        self,
        inner: Optional[BaseAdapter] = None,
        policy: Optional[RetryPolicy] = None,
        *,
        should_retry: Optional[ShouldRetryFn] = None,
        delay: Optional[DelayFn] = None,
        prevent_retry_with_body: bool = False,
        on_retry: Optional[OnRetry] = None,
    ):
        """Initialize retry adapter.

        Args:
            inner: Adapter executing each attempt. Default: HTTPAdapter().
            policy: Retry policy. Mutually exclusive with should_retry/delay.
                Default: default_retry_policy().
            should_retry: Decision function, combined with ``delay``.
                Default when only ``delay`` is given: never retry.
            delay: Delay function, combined with ``should_retry``.
                Default when only ``should_retry`` is given: no delay.
            prevent_retry_with_body: Skip body buffering and never retry
                requests that have a body.
            on_retry: Optional callback(attempt, delay) before each retry.
        """
        super().__init__()
        if policy is not None and (should_retry is not None or delay is not None):
            raise ValueError("Pass either policy or should_retry/delay, not both")
        if policy is None:
            if should_retry is None and delay is None:
                policy = default_retry_policy()
            else:
                policy = to_retry_policy(should_retry or retry_any(), delay or no_delay())

        self.inner = inner or HTTPAdapter()
        self.policy = policy
        self.prevent_retry_with_body = prevent_retry_with_body
        self.on_retry = on_retry
        self.registry = CancellationRegistry()

    def send(
        self,
        request: requests.PreparedRequest,
        stream: bool = False,
        timeout: Any = None,
        verify: Any = True,
        cert: Any = None,
        proxies: Optional[dict] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> requests.Response:
        """Send the request, retrying as the policy dictates.

        Keyword arguments other than ``cancel_event`` are passed unchanged
        to the inner adapter on every attempt; ``timeout`` applies to each
        attempt separately.

        Args:
            request: Prepared request to send.
            cancel_event: Optional event that cancels the request while it
                waits between attempts.

        Returns:
            Response of the last attempt.

        Raises:
            BodyBufferError: If the request body could not be buffered.
            RequestCancelled: If the request was cancelled between attempts.
            Exception: The last attempt's error, unchanged.
        """
        send_kwargs = {
            "stream": stream,
            "timeout": timeout,
            "verify": verify,
            "cert": cert,
            "proxies": proxies,
        }
        return _RetryLoop(self, request, send_kwargs, cancel_event).run()

    def cancel(self, request: requests.PreparedRequest) -> bool:
        """Cancel the request, preventing any pending retry.

        Returns:
            True if the request was being sent through this adapter.
        """
        return self.registry.cancel(request)

    def close(self) -> None:
        """Cancel all pending retries and close the inner adapter."""
        cancelled = self.registry.cancel_all()
        if cancelled:
            logger.debug("Cancelled %d pending request(s) on close", cancelled)
        self.inner.close()


class _RetryLoop:
    """One send call through a RetryAdapter.

    Each state is handled by a method returning the next state. The loop
    exclusively owns the request's replay buffer.
    """

    def __init__(
        self,
        adapter: RetryAdapter,
        request: requests.PreparedRequest,
        send_kwargs: dict[str, Any],
        cancel_event: Optional[threading.Event] = None,
    ):
        self.adapter = adapter
        self.request = request
        self.send_kwargs = send_kwargs
        self.cancel_event = cancel_event
        self.prevent_retry = request.body is not None and adapter.prevent_retry_with_body
        self.index = 0
        self.delay = 0.0
        self.attempt: Optional[Attempt] = None
        self.buffer: Optional[ReplayBuffer] = None
        self.signal: Optional[threading.Event] = None

    def run(self) -> requests.Response:
        """Drive the loop until it returns or raises."""
        registry = self.adapter.registry
        self.signal = registry.register(self.request)
        try:
            state = _State.BUFFERING
            while state is not _State.RETURNING:
                state = self.step(state)
            return self.result()
        finally:
            registry.unregister(self.request, self.signal)

    def step(self, state: _State) -> _State:
        """Run the handler for ``state`` and return the next state."""
        if state is _State.BUFFERING:
            return self.buffer_body()
        if state is _State.ATTEMPTING:
            return self.send_attempt()
        if state is _State.DECIDING:
            return self.decide()
        if state is _State.WAITING:
            return self.wait()
        raise ValueError(f"No handler for state {state.value!r}")

    def buffer_body(self) -> _State:
        if self.request.body is not None and not self.prevent_retry:
            self.buffer = ReplayBuffer.from_body(self.request.body)
            self.buffer.install(self.request)
        return _State.ATTEMPTING

    def send_attempt(self) -> _State:
        response: Optional[requests.Response] = None
        error: Optional[Exception] = None
        try:
            response = self.adapter.inner.send(self.request, **self.send_kwargs)
        except Exception as e:
            error = e

        self.attempt = Attempt(
            index=self.index,
            request=self.request,
            response=response,
            error=error,
        )
        return _State.DECIDING

    def decide(self) -> _State:
        if self.prevent_retry:
            return _State.RETURNING

        retry, delay = self.adapter.policy(self.attempt)
        if not retry:
            return _State.RETURNING

        self.delay = delay
        logger.debug(
            "Retry %d for %s %s in %.2fs (%s)",
            self.index + 1,
            self.request.method,
            self.request.url,
            delay,
            _describe(self.attempt),
        )
        if self.adapter.on_retry:
            self.adapter.on_retry(self.attempt, delay)

        # Release the connection of the discarded response
        if self.attempt.response is not None:
            _discard(self.attempt.response)

        if self.buffer is not None:
            self.buffer.install(self.request)
        return _State.WAITING

    def wait(self) -> _State:
        if self._wait_cancelled(self.delay):
            attempts = self.index + 1
            logger.debug(
                "Cancelled %s %s after %d attempt(s)",
                self.request.method,
                self.request.url,
                attempts,
            )
            raise RequestCancelled(
                f"Request cancelled after {attempts} attempt(s)",
                attempts=attempts,
                request=self.request,
            )
        self.index += 1
        return _State.ATTEMPTING

    def result(self) -> requests.Response:
        """Return the last response, or raise the last error."""
        if self.attempt.error is not None:
            raise self.attempt.error
        return self.attempt.response

    def _wait_cancelled(self, timeout: float) -> bool:
        """Block up to ``timeout`` seconds; return True if cancelled."""
        if self.cancel_event is None:
            return self.signal.wait(timeout)

        deadline = time.monotonic() + timeout
        while True:
            if self.cancel_event.is_set():
                return True
            remaining = deadline - time.monotonic()
            if self.signal.wait(max(0.0, min(remaining, CANCEL_POLL_INTERVAL))):
                return True
            if remaining <= CANCEL_POLL_INTERVAL:
                return self.cancel_event.is_set()


def _discard(response: requests.Response) -> None:
    """Drain and close a response that is not returned to the caller."""
    try:
        response.content
    except RuntimeError:
        # Already consumed as a stream by a decision function or hook
        response.raw.read(decode_content=False)
    except (ChunkedEncodingError, ContentDecodingError, requests.ConnectionError) as e:
        logger.debug("Failed to drain discarded response: %s", e)
    finally:
        response.close()


def _describe(attempt: Attempt) -> str:
    if attempt.error is not None:
        return f"{type(attempt.error).__name__}: {attempt.error}"
    return f"status {attempt.response.status_code}"

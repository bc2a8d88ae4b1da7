"""Cancellation registry for in-flight retry sequences.

Maps each request being sent to an event that an external cancel call sets
to abort a pending wait between attempts.
"""

import threading
from typing import Any, Optional


class CancellationRegistry:
    """Thread-safe table of request -> cancellation signal.

    Keys are compared by identity, as for requests.PreparedRequest. The lock
    is only held while the table is read or changed, never while waiting.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._signals: dict[Any, threading.Event] = {}

    def register(self, key: Any) -> threading.Event:
        """Create and store a fresh signal for ``key``.

        Returns:
            The event that is set when ``key`` is cancelled.
        """
        signal = threading.Event()
        with self._lock:
            self._signals[key] = signal
        return signal

    def cancel(self, key: Any) -> bool:
        """Remove ``key`` and set its signal.

        Returns:
            True if a signal was registered for ``key``.
        """
        with self._lock:
            signal = self._signals.pop(key, None)
        if signal is None:
            return False
        signal.set()
        return True

    def unregister(self, key: Any, signal: Optional[threading.Event] = None) -> None:
        """Remove ``key`` without setting its signal.

        If ``signal`` is given, the entry is only removed while it still
        holds that signal. Removing a missing entry is a no-op.
        """
        with self._lock:
            current = self._signals.get(key)
            if current is None:
                return
            if signal is None or current is signal:
                del self._signals[key]

    def cancel_all(self) -> int:
        """Cancel every registered request.

        Returns:
            Number of signals that were set.
        """
        with self._lock:
            signals = list(self._signals.values())
            self._signals.clear()
        for signal in signals:
            signal.set()
        return len(signals)

    def __contains__(self, key: Any) -> bool:
        with self._lock:
            return key in self._signals

    def __len__(self) -> int:
        with self._lock:
            return len(self._signals)

"""Monotonic cancellation token shared by the bootstrap and runnable units.

The token is a level, not an edge: once cancelled it stays cancelled, and a
consumer that starts looking after the fact still sees it. Callbacks added
after cancellation run immediately in the caller's thread.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class CancellationToken:
    """Single-shot, thread-safe cancellation signal."""

    def __init__(self) -> None:
        # Re-entrant: a signal handler may cancel while the main thread is
        # already inside one of these methods.
        self._lock = threading.RLock()
        self._event = threading.Event()
        self._callbacks: list[Callback] = []
        self._reason: str | None = None

    @property
    def is_cancelled(self) -> bool:
        """Return True once `cancel()` has been called."""
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        """Reason given by the call that triggered cancellation, if any."""
        return self._reason

    def cancel(self, reason: str | None = None) -> bool:
        """Trigger cancellation.

        Args:
            reason: Free-form text recorded for diagnostics.

        Returns:
            True if this call triggered cancellation, False if the token was
            already cancelled (the call is then a no-op).
        """
        with self._lock:
            if self._event.is_set():
                return False
            self._reason = reason
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            self._invoke(callback)
        return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or `timeout` elapses; return `is_cancelled`."""
        return self._event.wait(timeout)

    def add_callback(self, callback: Callback) -> None:
        """Run `callback` on cancellation (immediately if already cancelled)."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                if not self._event.is_set():
                    return
                # Cancelled re-entrantly since the check. If cancel() took the
                # list after the append it has run the callback already.
                if callback not in self._callbacks:
                    return
                self._callbacks.remove(callback)
        self._invoke(callback)

    def remove_callback(self, callback: Callback) -> None:
        """Forget a callback that has not run yet. Unknown callbacks are ignored."""
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    @staticmethod
    def _invoke(callback: Callback) -> None:
        try:
            callback()
        except Exception:  # pylint: disable=broad-except
            # One faulty consumer must not stop the others from being told.
            logger.exception("cancellation callback %r failed", callback)

"""Bridge from OS termination signals to the process cancellation token.

Handlers are installed on entry and the previous handlers are restored on
exit, so nothing keeps listening once the bootstrap call returns. Python runs
signal handlers on the main thread between bytecodes; the handler only records
the signal and cancels, and a short-lived reporter thread writes the log lines.
"""

from __future__ import annotations

import logging
import queue
import signal
import threading
from collections.abc import Iterable
from types import FrameType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .cancellation import CancellationToken

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)
REPORTER_JOIN_TIMEOUT = 5.0


class SignalBridge:
    """Context manager translating SIGINT/SIGTERM into token cancellation.

    The handler itself only records the signal and cancels the token; a
    reporter thread logs it. Only the first signal is reported at WARNING
    level; repeats are logged at DEBUG and leave the token untouched.

    Example:
        ```py
        token = CancellationToken()
        with SignalBridge(token):
            unit.run(token)
        ```
    """

    def __init__(
        self,
        token: CancellationToken,
        signals: Iterable[signal.Signals] = DEFAULT_SIGNALS,
    ) -> None:
        self.token = token
        self.signals = tuple(signals)
        self._previous: dict[signal.Signals, Any] = {}
        # SimpleQueue.put() is safe to call from a signal handler
        self._events: queue.SimpleQueue[tuple[signal.Signals, bool] | None] = queue.SimpleQueue()
        self._reporter: threading.Thread | None = None
        self.received: list[signal.Signals] = []

    def __enter__(self) -> SignalBridge:
        if threading.current_thread() is not threading.main_thread():
            # signal.signal() only works on the main thread.
            logger.debug("not on the main thread, OS signals will not be bridged")
            return self
        self._reporter = threading.Thread(
            target=self._report, name="course-signal-reporter", daemon=True
        )
        self._reporter.start()
        for sig in self.signals:
            self._previous[sig] = signal.getsignal(sig)
            signal.signal(sig, self._handle)
        logger.debug(
            "listening for %s", ", ".join(sig.name for sig in self.signals)
        )
        return self

    def __exit__(self, *args) -> None:
        for sig, previous in self._previous.items():
            signal.signal(sig, previous)
        self._previous.clear()
        if self._reporter is not None:
            self._events.put(None)
            self._reporter.join(timeout=REPORTER_JOIN_TIMEOUT)
            self._reporter = None

    def _handle(self, signum: int, frame: FrameType | None) -> None:  # pylint: disable=unused-argument
        sig = signal.Signals(signum)
        self.received.append(sig)
        triggered = self.token.cancel(reason=f"received {sig.name}")
        self._events.put((sig, triggered))

    def _report(self) -> None:
        while (event := self._events.get()) is not None:
            sig, triggered = event
            if triggered:
                logger.warning("system call: %s, shutting down", sig.name)
            else:
                logger.debug("system call: %s, shutdown already in progress", sig.name)

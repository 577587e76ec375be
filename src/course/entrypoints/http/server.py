"""Long-running runnable unit serving the HTTP API with uvicorn.

Signal handling stays with the process's signal bridge: uvicorn's own
signal capture is switched off and shutdown is driven by the cancellation
token instead. On cancellation uvicorn stops accepting connections and
waits up to `http.drain_timeout` seconds for in-flight requests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import uvicorn

from course.interfaces.runnable import RunnableUnit

if TYPE_CHECKING:
    from fastapi import FastAPI

    from course.config import HTTPConfig
    from course.lifecycle import CancellationToken

logger = logging.getLogger(__name__)


class ServerError(Exception):
    """Raised when the server cannot start or stops on its own."""


class _TokenDrivenServer(uvicorn.Server):
    """uvicorn server that leaves OS signals to the caller."""

    @contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield

    def install_signal_handlers(self) -> None:
        pass


class ApiServer(RunnableUnit):
    """Serve `app` on the configured address until cancelled."""

    name = "server"

    def __init__(self, app: FastAPI, conf: HTTPConfig) -> None:
        self.app = app
        self.conf = conf
        self.server: uvicorn.Server | None = None

    def _build_server(self) -> uvicorn.Server:
        config = uvicorn.Config(
            self.app,
            host=self.conf.host,
            port=self.conf.port,
            log_config=None,  # keep the handlers installed by course.logging
            timeout_graceful_shutdown=self.conf.drain_timeout or None,
            lifespan="on",
        )
        return _TokenDrivenServer(config)

    def run(self, cancellation: CancellationToken) -> None:
        if cancellation.is_cancelled:
            logger.warning("shutdown requested before the server started; not serving")
            return

        server = self.server = self._build_server()

        def _stop() -> None:
            server.should_exit = True

        cancellation.add_callback(_stop)
        logger.info("serving on %s:%d", self.conf.host, self.conf.port)
        try:
            server.run()
        except SystemExit as e:
            # uvicorn exits the process when it cannot bind.
            raise ServerError(
                f"unable to serve on {self.conf.host}:{self.conf.port}"
            ) from e
        finally:
            cancellation.remove_callback(_stop)

        if not server.started and not cancellation.is_cancelled:
            raise ServerError("server stopped before it finished starting up")
        if not cancellation.is_cancelled:
            raise ServerError("server stopped without a shutdown request")
        logger.info("server drained and stopped")

"""Logging setup for the COURSE server and seeder.

Logging is configured from the loaded `LogConfig` and scoped to the bootstrap
call: `initialize_logging()` attaches handlers to the root logger and hands
back a `LoggingHandle` whose `close()` flushes and detaches them again. The
console handler uses Rich (or a plain stream handler), and an optional
in-memory "flight recorder" buffers DEBUG records and writes them to disk
when a WARNING or worse is emitted.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

import alembic
import sqlalchemy
import uvicorn
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

    from course.config import LogConfig

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "course"
PLAIN_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class ThirdPartyPrefixFilter(logging.Filter):
    """Annotate third-party log records with a short prefix.

    For records whose logger name does not start with the project prefix,
    sets `record.prefix` to a short bracketed token like "[uvicorn]". For
    project loggers the prefix is set to an empty string. The filter always
    returns True to allow the record to be processed.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith(PROJECT_PREFIX):
            # e.g. "uvicorn.error" -> "[uvicorn]"
            record.prefix = f"[{record.name.split('.')[0]}]"
        else:
            record.prefix = ""
        return True


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Configure and return a RichHandler for console output.

    The handler writes to stderr. In debug mode the handler is set to DEBUG
    and includes source file/line information; otherwise a short third-party
    prefix is applied.

    Args:
        level: Minimum level for console output (overridden to DEBUG in debug_mode).
        debug_mode: When True, enable debug formatting (show_path, timestamps).
        color: Enable color output when True.

    Returns:
        RichHandler: Configured handler suitable to attach to the root logger.
    """

    ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]
    color_system: ColorSystem | None = "auto" if color else None

    console = Console(color_system=color_system, stderr=True)

    if debug_mode:
        level = logging.DEBUG

    handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )

    fmt = (
        "%(prefix)s %(message)s"
        if not debug_mode
        else "%(asctime)s %(name)s: %(message)s"
    )
    handler.setFormatter(logging.Formatter(fmt=fmt))

    if not debug_mode:
        handler.addFilter(ThirdPartyPrefixFilter())

    return handler


def config_plain_handler(
    level: int = logging.INFO, debug_mode: bool = False
) -> logging.StreamHandler:
    """Return a plain stderr handler, for log collectors that dislike ANSI output."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.DEBUG if debug_mode else level)
    handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Configure and return an in-memory flight recorder backed by a file.

    The flight recorder buffers up to `capacity` log records and flushes
    them to the provided file handler when a record at `flush_level` or
    higher is emitted (or on close if `flush_on_close` is True).

    Args:
        path: Destination file path for flushed records.
        capacity: Number of records to buffer in memory.
        flush_level: Level at or above which the buffer will be flushed.
        flush_on_close: If True, flush the buffer when the handler is closed.

    Returns:
        MemoryHandler: A memory-backed handler with a FileHandler target.
    """

    file_handler = logging.FileHandler(path, mode="w", encoding="utf-8", delay=True)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(process)d:%(threadName)s] %(levelname)s %(name)s:%(lineno)d: %(message)s"
        )
    )

    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=file_handler,
        flushOnClose=flush_on_close,
    )


class LoggingHandle:
    """Handlers attached for one bootstrap call, and the means to remove them.

    `close()` is idempotent: it flushes every handler, closes it (including a
    flight recorder's file target), detaches it from the root logger and puts
    back the logger levels that were changed.
    """

    def __init__(
        self,
        handlers: list[logging.Handler],
        saved_levels: dict[str, int],
    ) -> None:
        self.handlers = handlers
        self._saved_levels = saved_levels
        self.closed = False

    @classmethod
    def configure(cls, conf: LogConfig) -> LoggingHandle:
        """Attach handlers described by `conf` to the root logger."""
        level = conf.numeric_level
        handlers: list[logging.Handler] = []

        if conf.format == "plain":
            handlers.append(config_plain_handler(level=level, debug_mode=conf.debug))
        else:
            handlers.append(
                config_console_handler(
                    level=level, debug_mode=conf.debug, color=conf.color
                )
            )

        if conf.flight_recorder:
            handlers.append(
                config_flight_recorder(
                    path=Path(conf.log_path),
                    capacity=conf.flight_recorder_capacity,
                    flush_on_close=conf.force_flush,
                )
            )

        root = logging.getLogger()
        saved_levels = {"": root.level}
        # capture all levels; handlers filter
        root.setLevel(logging.DEBUG)
        for handler in handlers:
            root.addHandler(handler)

        for name, lvl in conf.logger_levels.items():
            named = logging.getLogger(name)
            saved_levels[name] = named.level
            named.setLevel(lvl)

        return cls(handlers, saved_levels)

    def close(self) -> None:
        """Flush and detach the handlers; restore logger levels."""
        if self.closed:
            return
        self.closed = True
        root = logging.getLogger()
        for handler in self.handlers:
            root.removeHandler(handler)
            # MemoryHandler.close() drops its target without closing it.
            target = handler.target if isinstance(handler, MemoryHandler) else None
            try:
                handler.close()
                if target is not None:
                    target.close()
            except OSError as e:
                print(f"unable to close log handler {handler!r}: {e}", file=sys.stderr)
        for name, lvl in self._saved_levels.items():
            logging.getLogger(name or None).setLevel(lvl)


@contextmanager
def initialize_logging(conf: LogConfig) -> Iterator[LoggingHandle]:
    """Configure logging for the duration of the `with` block.

    The handle is closed on every exit path, including `SystemExit`, so
    buffered records (flight recorder) are flushed before the process ends.
    """
    handle = LoggingHandle.configure(conf)
    try:
        yield handle
    finally:
        handle.close()


def log_startup(
    logger: Logger,
    *,
    app_version: str,
    mode: str,
    conf: LogConfig,
    handlers: list[logging.Handler],
) -> None:
    """Log human-friendly startup info and detailed diagnostics.

    Emits an informational one-line summary describing the application
    version, the run mode and whether the flight-recorder is enabled.
    Additional DEBUG-level diagnostics are emitted for troubleshooting,
    including Python and platform versions, process id, current working
    directory, library versions, the active handler types and any per-logger
    overrides.

    Args:
        logger: Logger used to emit startup messages.
        app_version: Application version string to display.
        mode: Run mode ("serve" or "seed").
        conf: The logging configuration in effect.
        handlers: Active logging handlers attached to the root logger.
    """

    logger.info(
        "COURSE %s (%s) console=%s, flight-recorder=%s",
        app_version,
        mode,
        logging.getLevelName(conf.numeric_level),
        "ON" if conf.flight_recorder else "OFF",
    )

    logger.debug("Python: %s", sys.version.split()[0])
    logger.debug("Platform: %s %s", platform.system(), platform.release())
    logger.debug("PID: %s", os.getpid())
    logger.debug("CWD: %s", Path.cwd())
    logger.debug("Alembic: %s", alembic.__version__)
    logger.debug("SQLAlchemy: %s", sqlalchemy.__version__)
    logger.debug("Uvicorn: %s", uvicorn.__version__)
    logger.debug("Handlers: %s", [type(h).__name__ for h in handlers])
    if conf.flight_recorder:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            conf.log_path,
            conf.flight_recorder_capacity,
            conf.force_flush,
        )
    logger.debug(
        "Per-logger overrides: %s",
        {name: logging.getLevelName(lvl) for name, lvl in conf.logger_levels.items()},
    )

"""Bootstrap orchestrator: the ordered, fallible startup of one process.

Sequence (strict order, abort at the first failure):

1. load configuration (fatal on failure);
2. scope logging to this call (torn down on every exit path);
3. create the cancellation token and bridge SIGINT/SIGTERM to it;
4. serve mode only: migrate the schema to head, strictly (fatal on failure);
5. open the clients (the cache only in serve mode);
6. build the runnable unit for the mode;
7. run it with the token and turn its outcome into an exit status.

Fatal steps raise `FatalSetupError`, a `SystemExit`, so the process ends
without attempting further work while scoped teardown still runs. Failures
in steps 5-7 are logged once, naming the step, and returned as
`ExitStatus.RUNTIME_ERROR`. A shutdown requested by signal is a clean exit.

The orchestrator sets no deadline after cancellation. If a unit never returns
the process hangs, so a supervisor should enforce a hard kill timeout.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from course import __version__
from course.adapters.db import migrations
from course.config import (
    DEFAULT_ENV_PREFIX,
    ConfigError,
    default_migration_dir,
    load_server_config,
)
from course.lifecycle import CancellationToken, SignalBridge
from course.logging import initialize_logging, log_startup
from course.utils.sanitize import sanitize_url

from .bootstrap import build_runnable_unit
from .clients import open_clients
from .modes import ExitStatus, Mode

if TYPE_CHECKING:
    from course.config import ServerConfig
    from course.interfaces.runnable import RunnableUnit

    from .clients import Clients

logger = logging.getLogger(__name__)


class Step(Enum):
    """Bootstrap steps, named the way they appear in failure logs."""

    LOAD_CONFIG = "bad config"
    MIGRATE = "migration failed"
    OPEN_CLIENTS = "unable to open clients"
    BUILD_UNIT = "unable to construct"
    RUN_UNIT = "crashed"
    CLOSE_CLIENTS = "unable to close clients"


class FatalSetupError(SystemExit):
    """Setup failure that ends the process; carries the step and exit status."""

    def __init__(self, step: Step, status: ExitStatus) -> None:
        super().__init__(int(status))
        self.step = step
        self.status = status


@dataclass(frozen=True)
class Collaborators:
    """The external pieces the orchestrator sequences.

    Defaults are the real implementations; tests substitute doubles.
    """

    load_config: Callable[[str | Path, str], ServerConfig] = load_server_config
    init_logging: Callable[..., AbstractContextManager[Any]] = initialize_logging
    signal_bridge: Callable[[CancellationToken], AbstractContextManager[Any]] = SignalBridge
    migrate: Callable[..., str | None] = migrations.migrate
    open_clients: Callable[..., AbstractContextManager[Clients]] = open_clients
    build_unit: Callable[[Mode, ServerConfig, Clients], RunnableUnit] = build_runnable_unit


def resolve_migration_dir(conf: ServerConfig, migration_dir: str | Path | None) -> str:
    """Pick the migration directory: CLI flag, then config, then packaged."""
    if migration_dir:
        return str(migration_dir)
    if conf.migrations.dir:
        return conf.migrations.dir
    return default_migration_dir()


def _load_config(c: Collaborators, config_path: str | Path, env_prefix: str) -> ServerConfig:
    try:
        return c.load_config(config_path, env_prefix)
    except ConfigError as e:
        # Logging is not configured yet; Python's last-resort handler prints this.
        logger.critical("%s: unable to load config file %s: %s", Step.LOAD_CONFIG.value, config_path, e)
        raise FatalSetupError(Step.LOAD_CONFIG, ExitStatus.CONFIG_ERROR) from e


def _migrate(c: Collaborators, conf: ServerConfig, migration_dir: str | Path | None) -> None:
    directory = resolve_migration_dir(conf, migration_dir)
    db_url = conf.db.database_url()
    logger.debug("running migration on %s against %s", directory, sanitize_url(db_url))
    try:
        c.migrate(directory, db_url, strict=True)
    except migrations.MigrationError as e:
        logger.critical("%s: unable to run migration: %s", Step.MIGRATE.value, e)
        raise FatalSetupError(Step.MIGRATE, ExitStatus.MIGRATION_ERROR) from e


def _run_unit(
    c: Collaborators, mode: Mode, conf: ServerConfig, token: CancellationToken
) -> ExitStatus:
    unit_name = "server" if mode is Mode.SERVE else "seeder"
    step = Step.OPEN_CLIENTS
    try:
        with c.open_clients(conf, with_cache=mode is Mode.SERVE) as clients:
            step = Step.BUILD_UNIT
            unit = c.build_unit(mode, conf, clients)
            unit_name = unit.name
            step = Step.RUN_UNIT
            logger.info("starting %s", unit_name)
            unit.run(token)
            step = Step.CLOSE_CLIENTS
    except Exception as e:  # pylint: disable=broad-except
        if step is Step.BUILD_UNIT:
            logger.exception("%s %s: %s", step.value, unit_name, e)
        elif step is Step.RUN_UNIT:
            logger.exception("%s %s: %s", unit_name, step.value, e)
        else:
            logger.exception("%s: %s", step.value, e)
        return ExitStatus.RUNTIME_ERROR

    if token.is_cancelled:
        logger.info("%s stopped: shutdown requested (%s)", unit_name, token.reason)
    else:
        logger.info("%s finished", unit_name)
    return ExitStatus.OK


def run(
    config_path: str | Path,
    env_prefix: str = DEFAULT_ENV_PREFIX,
    mode: Mode = Mode.SERVE,
    *,
    migration_dir: str | Path | None = None,
    collaborators: Collaborators | None = None,
) -> ExitStatus:
    """Set up the process and run the unit for `mode` to completion.

    Args:
        config_path: YAML configuration file.
        env_prefix: Prefix of the environment variables overriding the file.
        mode: `Mode.SERVE` (migrate, then serve) or `Mode.SEED` (seed once).
        migration_dir: Overrides the configured/packaged migration directory.
        collaborators: Replacements for the external pieces (tests).

    Returns:
        `ExitStatus.OK` on completion or requested shutdown,
        `ExitStatus.RUNTIME_ERROR` if clients, unit construction or the unit
        itself failed.

    Raises:
        FatalSetupError: If the configuration or the migration step failed.
    """
    c = collaborators or Collaborators()
    conf = _load_config(c, config_path, env_prefix)

    with c.init_logging(conf.log) as log_handle:
        log_startup(
            logger,
            app_version=__version__,
            mode=mode.value,
            conf=conf.log,
            handlers=log_handle.handlers,
        )
        token = CancellationToken()
        with c.signal_bridge(token):
            if mode is Mode.SERVE:
                _migrate(c, conf, migration_dir)
            return _run_unit(c, mode, conf, token)

"""COURSE server CLI: run the API server or seed the catalog.

Both subcommands hand over to the bootstrap orchestrator and exit with its
status. ``start`` migrates the schema before serving; ``seed`` writes the
reference catalog and skips migrations.

Exit codes
- 0: finished, or shut down on SIGINT/SIGTERM
- 1: clients, unit construction or the unit itself failed
- 3: configuration could not be loaded
- 4: migration failed
"""

from __future__ import annotations

from dataclasses import dataclass

import click
import click_extra as clickx

from course import bootstrap
from course.config import DEFAULT_ENV_PREFIX


@dataclass(frozen=True)
class ServerOptions:
    """Options shared by the ``server`` subcommands."""

    config_path: str
    migration_dir: str | None
    env_prefix: str


@click.group(cls=clickx.ExtraGroup)
@click.option(
    "--env-prefix",
    default=DEFAULT_ENV_PREFIX,
    show_default=True,
    help="Prefix of the environment variables that override the config file.",
)
@click.pass_context
def server(ctx: click.Context, env_prefix: str) -> None:
    """Server subcommands."""
    root = ctx.find_root().params
    ctx.obj = ServerOptions(
        config_path=root["config_path"],
        migration_dir=root["migration_dir"],
        env_prefix=env_prefix,
    )


def _run(ctx: click.Context, mode: bootstrap.Mode) -> None:
    opts: ServerOptions = ctx.obj
    status = bootstrap.run(
        opts.config_path,
        opts.env_prefix,
        mode,
        migration_dir=opts.migration_dir,
    )
    ctx.exit(int(status))


@server.command()
@click.pass_context
def start(ctx: click.Context) -> None:
    """Migrate the database, then serve the API until SIGINT/SIGTERM."""
    _run(ctx, bootstrap.Mode.SERVE)


@server.command()
@click.pass_context
def seed(ctx: click.Context) -> None:
    """Seed the database with the reference catalog (no migration)."""
    _run(ctx, bootstrap.Mode.SEED)

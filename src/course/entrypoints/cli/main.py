"""COURSE CLI entry point.

Defines the top-level ``course`` command (via Click-Extra) and registers
subcommands exposed by the project.

Currently available groups
- ``course server``: ``start`` the API server (after migrations) or ``seed``
  the reference catalog.

Notes
- The CLI version is sourced from `course.__version__` and displayed
  automatically by Click-Extra (``--version``).
- Logging is configured from the loaded configuration file, not from CLI
  flags, once the bootstrap has read it.

Examples
    $ course --config config.yaml server start
    $ course -c config.yaml server --env-prefix COURSE_STAGING seed
"""

import click
import click_extra as clickx

from course import __version__
from course.config import DEFAULT_CONFIG_PATH

from .server import server as server_group

HELP = """COURSE command-line interface.

    Runs the course marketplace catalog service: migrates the database and
    serves the catalog API, or seeds the reference catalog in a one-shot run.
    """


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=str),
    default=DEFAULT_CONFIG_PATH,
    envvar="COURSE_CONFIG",
    show_default=True,
    show_envvar=True,
    help="Path to the YAML configuration file.",
)
@click.option(
    "--migration-dir",
    "migration_dir",
    type=click.Path(file_okay=False, path_type=str),
    default=None,
    envvar="COURSE_MIGRATION_DIR",
    show_envvar=True,
    help=(
        "Alembic migration directory (holds env.py and versions/). "
        "Defaults to migrations.dir from the config, then the packaged migrations."
    ),
)
def course(config_path: str, migration_dir: str | None) -> None:  # pylint: disable=unused-argument
    """COURSE command-line interface."""


course.add_command(server_group)


def main() -> None:
    """Console-script entry point."""
    course()  # pylint: disable=no-value-for-parameter

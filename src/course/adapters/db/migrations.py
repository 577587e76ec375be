"""Migration gate: bring the database schema to head before serving.

Thin, strict wrapper over Alembic's ``upgrade head``. Revisions are applied in
the order fixed by the revision chain, each inside its own transaction, so a
failure leaves the schema at the last revision that applied cleanly.

Strict mode (the only mode the server uses):
- a script directory with more than one head is rejected up front, since the
  application order between branches would be ambiguous;
- any warning raised while migrating is escalated to an error, except
  deprecation warnings, which say nothing about the resulting schema.
"""

from __future__ import annotations

import io
import logging
import warnings
from pathlib import Path

from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from alembic.util.exc import CommandError
from sqlalchemy.exc import SQLAlchemyError

from course import config

from .engine import make_engine

logger = logging.getLogger(__name__)


class MigrationError(Exception):
    """Raised when the schema could not be brought to head."""


def _script_directory(cfg) -> ScriptDirectory:
    try:
        return ScriptDirectory.from_config(cfg)
    except CommandError as e:
        raise MigrationError(f"invalid migration directory: {e}") from e


def current_revision(db_url: str) -> str | None:
    """Return the revision stamped in the database, or None if unmigrated."""
    engine = make_engine(db_url)
    try:
        with engine.connect() as conn:
            return MigrationContext.configure(conn).get_current_revision()
    finally:
        engine.dispose()


def migrate(migration_dir: str | Path, db_url: str, strict: bool = True) -> str | None:
    """Apply every pending migration in `migration_dir` to `db_url`.

    Args:
        migration_dir: Alembic script location (holds ``env.py`` and ``versions/``).
        db_url: SQLAlchemy URL of the target database.
        strict: Reject multiple heads and treat migration warnings as errors.

    Returns:
        The revision the database is at after the upgrade.

    Raises:
        MigrationError: If the directory is unusable or any migration fails.
    """
    path = Path(migration_dir)
    if not path.is_dir():
        raise MigrationError(f"migration directory not found: {path}")

    output = io.StringIO()
    cfg = config.build_alembic_config(db_url=db_url, script_location=path, stdout=output)
    script = _script_directory(cfg)

    heads = script.get_heads()
    if strict and len(heads) > 1:
        raise MigrationError(
            f"multiple migration heads ({', '.join(sorted(heads))}); merge them first"
        )

    with warnings.catch_warnings():
        if strict:
            warnings.simplefilter("error")
            warnings.simplefilter("ignore", DeprecationWarning)
            warnings.simplefilter("ignore", PendingDeprecationWarning)
        try:
            command.upgrade(cfg, "heads")
        except Exception as e:  # pylint: disable=broad-except
            # Revision scripts are arbitrary code; any failure fails the gate.
            raise MigrationError(f"migration failed: {e}") from e

    if text := output.getvalue().strip():
        logger.debug("alembic: %s", text)

    try:
        revision = current_revision(db_url)
    except SQLAlchemyError as e:
        raise MigrationError(f"cannot read schema revision: {e}") from e
    logger.info("schema at revision %s", revision or "<base>")
    return revision

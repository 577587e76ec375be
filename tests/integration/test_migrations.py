"""Integration tests for the migration gate (`course.adapters.db.migrations`).

The packaged migrations are applied to file-backed SQLite databases; the
failure modes use small throwaway script directories built under `tmp_path`
around the packaged ``env.py``.
"""

from __future__ import annotations

import shutil
import textwrap
from pathlib import Path

import pytest
from sqlalchemy import inspect

from course.adapters.db.engine import make_engine
from course.adapters.db.migrations import MigrationError, current_revision, migrate
from course.config import default_migration_dir

# pylint: disable=magic-value-comparison,redefined-outer-name

HEAD = "8e51d0a6c2f3"

REVISION_TEMPLATE = '''\
"""{doc}"""

import warnings

import sqlalchemy as sa
from alembic import op

revision = "{rev}"
down_revision = {down!r}
branch_labels = None
depends_on = None


def upgrade() -> None:
{body}


def downgrade() -> None:
    pass
'''


def write_revision(directory: Path, rev: str, down: str | None, body: str) -> None:
    """Write a revision script with `body` as its (indented) upgrade()."""
    text = REVISION_TEMPLATE.format(
        doc=f"revision {rev}", rev=rev, down=down, body=textwrap.indent(body, "    ")
    )
    (directory / "versions" / f"{rev}.py").write_text(text, encoding="utf-8")


@pytest.fixture
def script_dir(tmp_path: Path) -> Path:
    """An empty Alembic script directory reusing the packaged env.py."""
    directory = tmp_path / "migrations"
    (directory / "versions").mkdir(parents=True)
    shutil.copy(Path(default_migration_dir()) / "env.py", directory / "env.py")
    return directory


def test_fresh_database_reaches_head(sqlite_url: str) -> None:
    """The packaged migrations create the catalog tables and stamp head."""
    assert migrate(default_migration_dir(), sqlite_url) == HEAD
    engine = make_engine(sqlite_url)
    try:
        insp = inspect(engine)
        assert {"categories", "courses", "alembic_version"} <= set(insp.get_table_names())
        assert "ix_courses_courses_category_code" in {
            ix["name"] for ix in insp.get_indexes("courses")
        }
    finally:
        engine.dispose()


def test_rerun_is_noop(sqlite_migrated_url: str) -> None:
    """Migrating an up-to-date database succeeds without changes."""
    assert current_revision(sqlite_migrated_url) == HEAD
    assert migrate(default_migration_dir(), sqlite_migrated_url) == HEAD


def test_missing_directory(sqlite_url: str, tmp_path: Path) -> None:
    """A directory that does not exist fails the gate."""
    with pytest.raises(MigrationError, match="not found"):
        migrate(tmp_path / "nowhere", sqlite_url)


def test_directory_without_env(sqlite_url: str, tmp_path: Path) -> None:
    """A directory that is not an Alembic script location fails the gate."""
    with pytest.raises(MigrationError):
        migrate(tmp_path, sqlite_url)


def test_multiple_heads_rejected(script_dir: Path, sqlite_url: str) -> None:
    """Two unmerged branches are refused before anything is applied."""
    write_revision(script_dir, "aaaa00000001", None, 'op.create_table("a", sa.Column("id", sa.Integer, primary_key=True))')
    write_revision(script_dir, "bbbb00000001", None, 'op.create_table("b", sa.Column("id", sa.Integer, primary_key=True))')
    with pytest.raises(MigrationError, match="multiple migration heads"):
        migrate(script_dir, sqlite_url)
    assert current_revision(sqlite_url) is None


def test_multiple_heads_allowed_when_not_strict(script_dir: Path, sqlite_url: str) -> None:
    """Non-strict mode applies every branch."""
    write_revision(script_dir, "aaaa00000001", None, 'op.create_table("a", sa.Column("id", sa.Integer, primary_key=True))')
    write_revision(script_dir, "bbbb00000001", None, 'op.create_table("b", sa.Column("id", sa.Integer, primary_key=True))')
    migrate(script_dir, sqlite_url, strict=False)
    engine = make_engine(sqlite_url)
    try:
        assert {"a", "b"} <= set(inspect(engine).get_table_names())
    finally:
        engine.dispose()


def test_failing_revision_keeps_last_good_revision(script_dir: Path, sqlite_url: str) -> None:
    """A failing revision raises and the stamp stays at the previous one."""
    write_revision(script_dir, "aaaa00000001", None, 'op.create_table("a", sa.Column("id", sa.Integer, primary_key=True))')
    write_revision(script_dir, "aaaa00000002", "aaaa00000001", 'op.execute("SELECT * FROM no_such_table")')
    with pytest.raises(MigrationError, match="migration failed"):
        migrate(script_dir, sqlite_url)
    assert current_revision(sqlite_url) == "aaaa00000001"


def test_warning_is_an_error_in_strict_mode(script_dir: Path, sqlite_url: str) -> None:
    """A warning raised by a revision fails the gate."""
    write_revision(script_dir, "aaaa00000001", None, 'warnings.warn("lossy conversion", UserWarning)')
    with pytest.raises(MigrationError, match="lossy conversion"):
        migrate(script_dir, sqlite_url)


def test_deprecation_warning_is_tolerated(script_dir: Path, sqlite_url: str) -> None:
    """Deprecation warnings do not fail the gate."""
    write_revision(script_dir, "aaaa00000001", None, 'warnings.warn("old api", DeprecationWarning)')
    assert migrate(script_dir, sqlite_url) == "aaaa00000001"

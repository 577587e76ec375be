"""Dialect names supported by COURSE and the dialect-specific upsert.

Centralizing the names as an Enum avoids scattering string literals
(e.g., "postgresql", "sqlite") throughout the codebase.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy.dialects import postgresql, sqlite

if TYPE_CHECKING:
    from sqlalchemy import Table
    from sqlalchemy.engine import Connection, Engine
    from sqlalchemy.sql.dml import Insert


class UnsupportedDialect(Exception):
    """Raised when an unsupported database dialect is encountered."""


class DialectName(str, Enum):
    """Enumeration of supported SQLAlchemy dialect names.

    Attributes:
        POSTGRES: PostgreSQL dialect (``"postgresql"``).
        SQLITE:   SQLite dialect (``"sqlite"``).
    """

    POSTGRES = "postgresql"
    SQLITE = "sqlite"

    @classmethod
    def from_string(cls, dialect_str: str) -> DialectName:
        """Normalize and convert an arbitrary dialect string to DialectName.

        Accepts common aliases and driver-qualified names (e.g., 'postgres',
        'postgresql+psycopg', 'sqlite', 'sqlite+pysqlite').

        Raises:
            UnsupportedDialect: if the dialect is not recognized or supported.
        """

        raw = (dialect_str or "").strip().lower()
        base = raw.split("+", 1)[0]

        if base in {"postgres", "postgresql", "pg"}:
            return cls.POSTGRES
        if base in {"sqlite"}:
            return cls.SQLITE

        raise UnsupportedDialect(f"Unsupported dialect: {dialect_str!r}")

    @classmethod
    def from_sqlalchemy(cls, obj: Engine | Connection) -> DialectName:
        """Extract dialect from a SQLAlchemy Engine or Connection."""
        try:
            name = obj.dialect.name
        except AttributeError as e:
            raise UnsupportedDialect(f"Object has no dialect: {obj!r}") from e
        return cls.from_string(name)


def upsert(conn: Connection, table: Table, rows: list[dict], key: str) -> None:
    """Insert `rows`, updating every non-key column when `key` already exists.

    Both PostgreSQL and SQLite support ``INSERT .. ON CONFLICT DO UPDATE``,
    which makes repeated runs converge to the same rows.
    """
    if not rows:
        return
    dialect = DialectName.from_sqlalchemy(conn)
    stmt: Insert
    if dialect is DialectName.POSTGRES:
        stmt = postgresql.insert(table).values(rows)
    else:
        stmt = sqlite.insert(table).values(rows)
    updates = {
        col.name: stmt.excluded[col.name]
        for col in table.columns
        if col.name != key and col.name in rows[0]
    }
    conn.execute(stmt.on_conflict_do_update(index_elements=[key], set_=updates))

"""Unit tests for database dialect handling and the idempotent upsert."""

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select

from course.adapters.db import schema
from course.adapters.db.dialects import DialectName, UnsupportedDialect, upsert

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

# pylint: disable=too-few-public-methods


@pytest.mark.parametrize(
    "input_str,expected",
    [
        ("postgresql", DialectName.POSTGRES),
        ("postgres", DialectName.POSTGRES),
        ("pg", DialectName.POSTGRES),
        ("postgresql+psycopg", DialectName.POSTGRES),
        ("sqlite", DialectName.SQLITE),
        ("sqlite+pysqlite", DialectName.SQLITE),
    ],
)
def test_from_string_aliases(input_str, expected):
    """Test that various dialect string aliases map correctly to DialectName."""
    assert DialectName.from_string(input_str) is expected


@pytest.mark.parametrize("bad", [None, "", "  ", "mysql", "duckdb"])
def test_from_string_rejects_unsupported(bad):
    """Test that unsupported or invalid dialect strings raise UnsupportedDialect."""
    with pytest.raises(UnsupportedDialect):
        DialectName.from_string(bad)


def test_from_sqlalchemy_raises_when_missing_attribute():
    """Test that from_sqlalchemy raises UnsupportedDialect when .dialect.name is missing."""

    class NotAnEngine:  # no .dialect.name
        """A class that does not have a dialect attribute."""

    with pytest.raises(UnsupportedDialect):
        DialectName.from_sqlalchemy(NotAnEngine())  # type: ignore[arg-type]


def test_upsert_inserts_then_updates(sqlite_engine_file: "Engine"):
    """A second upsert with the same key updates the row instead of failing."""
    row = {"code": "DATA", "name": "Data", "description": None}
    with sqlite_engine_file.begin() as conn:
        upsert(conn, schema.categories, [row], key="code")
    with sqlite_engine_file.begin() as conn:
        upsert(conn, schema.categories, [{**row, "name": "Data Engineering"}], key="code")

    with sqlite_engine_file.connect() as conn:
        rows = conn.execute(select(schema.categories)).mappings().all()
    assert [(r["code"], r["name"]) for r in rows] == [("DATA", "Data Engineering")]


def test_upsert_with_no_rows_is_noop(sqlite_engine_file: "Engine"):
    """An empty batch issues no statement at all."""
    with sqlite_engine_file.begin() as conn:
        upsert(conn, schema.categories, [], key="code")
        count = len(conn.execute(select(schema.categories)).all())
    assert count == 0

"""Integration tests for `SqlAlchemyCatalogStore` on SQLite and PostgreSQL.

The PostgreSQL variants run only where Docker is available.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import func, select

from course.adapters.catalog import SqlAlchemyCatalogStore
from course.adapters.db import schema
from course.domain.catalog import Category, Course
from course.domain.errors import UnknownCategoryError
from course.lifecycle import CancellationToken
from course.service_layer import CatalogService, seed_data

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

# pylint: disable=magic-value-comparison

ENGINES = pytest.mark.parametrize(
    "engine", ["sqlite_engine_file", "postgres_engine"], indirect=True
)


def count(engine: Engine, table) -> int:
    """Number of rows in `table`."""
    with engine.connect() as conn:
        return conn.execute(select(func.count()).select_from(table)).scalar_one()


@ENGINES
def test_seed_twice_converges(engine: Engine) -> None:
    """Seeding twice leaves exactly the reference rows, once each."""
    service = CatalogService(SqlAlchemyCatalogStore(engine))
    service.seed(CancellationToken(), batch_size=4)
    service.seed(CancellationToken(), batch_size=4)
    assert count(engine, schema.categories) == len(seed_data.CATEGORIES)
    assert count(engine, schema.courses) == len(seed_data.COURSES)


@ENGINES
def test_upsert_updates_existing_rows(engine: Engine) -> None:
    """A changed entry with an existing code overwrites the stored row."""
    store = SqlAlchemyCatalogStore(engine)
    store.upsert_categories([Category("PROG", "Programming")])
    store.upsert_courses([Course("PY-101", "PROG", "Python", price_cents=100)])
    store.upsert_courses([Course("PY-101", "PROG", "Python, revised", price_cents=200)])
    course = store.get_course("py-101")
    assert course is not None
    assert (course.title, course.price_cents) == ("Python, revised", 200)


@ENGINES
def test_unknown_category_writes_nothing(engine: Engine) -> None:
    """A batch with one orphan course is rejected as a whole."""
    store = SqlAlchemyCatalogStore(engine)
    store.upsert_categories([Category("PROG", "Programming")])
    batch = [Course("PY-101", "PROG", "Python"), Course("X-1", "NOPE", "Orphan")]
    with pytest.raises(UnknownCategoryError):
        store.upsert_courses(batch)
    assert count(engine, schema.courses) == 0


@ENGINES
def test_reads(engine: Engine) -> None:
    """Listing is ordered by code and filterable by category."""
    store = SqlAlchemyCatalogStore(engine)
    CatalogService(store).seed(CancellationToken())
    codes = [c.code for c in store.list_categories()]
    assert codes == sorted(codes)
    data = store.list_courses("data")
    assert data and {c.category_code for c in data} == {"DATA"}
    assert store.get_course("NOPE-1") is None

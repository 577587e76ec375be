"""SQLAlchemy-backed catalog store.

Every write method runs in its own transaction (``engine.begin()``), so a
batch is either fully written or not at all.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import sqlalchemy as sa

from course.adapters.db.dialects import upsert
from course.adapters.db.schema import categories as categories_table
from course.adapters.db.schema import courses as courses_table
from course.domain.catalog import Category, Course
from course.domain.errors import UnknownCategoryError
from course.interfaces.catalog_store import CatalogStore

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


class SqlAlchemyCatalogStore(CatalogStore):
    """Catalog store over the `categories` and `courses` tables."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def upsert_categories(self, categories: Sequence[Category]) -> None:
        with self.engine.begin() as conn:
            upsert(conn, categories_table, [c.to_row() for c in categories], key="code")

    def upsert_courses(self, courses: Sequence[Course]) -> None:
        if not courses:
            return
        wanted = {c.category_code for c in courses}
        with self.engine.begin() as conn:
            existing = set(
                conn.execute(
                    sa.select(categories_table.c.code).where(
                        categories_table.c.code.in_(wanted)
                    )
                ).scalars()
            )
            for course in courses:
                if course.category_code not in existing:
                    raise UnknownCategoryError(course.code, course.category_code)
            upsert(conn, courses_table, [c.to_row() for c in courses], key="code")

    def list_categories(self) -> list[Category]:
        stmt = sa.select(categories_table).order_by(categories_table.c.code)
        with self.engine.connect() as conn:
            return [
                Category(code=r.code, name=r.name, description=r.description)
                for r in conn.execute(stmt)
            ]

    def list_courses(self, category_code: str | None = None) -> list[Course]:
        stmt = sa.select(courses_table).order_by(courses_table.c.code)
        if category_code is not None:
            stmt = stmt.where(courses_table.c.category_code == category_code.upper())
        with self.engine.connect() as conn:
            return [Course.from_row(r._mapping) for r in conn.execute(stmt)]

    def get_course(self, code: str) -> Course | None:
        stmt = sa.select(courses_table).where(courses_table.c.code == code.upper())
        with self.engine.connect() as conn:
            row = conn.execute(stmt).first()
        return Course.from_row(row._mapping) if row is not None else None

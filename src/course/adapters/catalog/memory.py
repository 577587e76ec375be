"""In-memory catalog store.

Same contract as the SQLAlchemy store, including all-or-nothing batches;
used by the service-layer tests and handy for local experiments.
"""

from __future__ import annotations

from collections.abc import Sequence

from course.domain.catalog import Category, Course
from course.domain.errors import UnknownCategoryError
from course.interfaces.catalog_store import CatalogStore


class InMemoryCatalogStore(CatalogStore):
    """Dictionary-backed catalog store."""

    def __init__(self) -> None:
        self.categories: dict[str, Category] = {}
        self.courses: dict[str, Course] = {}
        self.writes = 0

    def upsert_categories(self, categories: Sequence[Category]) -> None:
        self.categories.update({c.code: c for c in categories})
        self.writes += 1

    def upsert_courses(self, courses: Sequence[Course]) -> None:
        for course in courses:
            if course.category_code not in self.categories:
                raise UnknownCategoryError(course.code, course.category_code)
        self.courses.update({c.code: c for c in courses})
        self.writes += 1

    def list_categories(self) -> list[Category]:
        return [self.categories[k] for k in sorted(self.categories)]

    def list_courses(self, category_code: str | None = None) -> list[Course]:
        wanted = category_code.upper() if category_code is not None else None
        return [
            self.courses[k]
            for k in sorted(self.courses)
            if wanted is None or self.courses[k].category_code == wanted
        ]

    def get_course(self, code: str) -> Course | None:
        return self.courses.get(code.upper())

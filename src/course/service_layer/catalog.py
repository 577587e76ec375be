"""Catalog service: cached reads for the API and batched seeding.

Reads go through an optional `CatalogCache`; a seed run that has one drops
its entries once rows were written.

Seeding writes categories, then courses, in batches; each batch is one
atomic, idempotent upsert and cancellation is checked before every batch, so
an interrupted seed leaves consistent data and can simply be run again.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, TypeVar

from course.domain.catalog import Category, Course

from . import seed_data

if TYPE_CHECKING:
    from course.adapters.cache import CatalogCache
    from course.interfaces.catalog_store import CatalogStore
    from course.lifecycle import CancellationToken

logger = logging.getLogger(__name__)

T = TypeVar("T")


def batched(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of `items` of at most `size` elements."""
    if size < 1:
        raise ValueError("batch size must be positive")
    for start in range(0, len(items), size):
        yield items[start : start + size]


@dataclass(frozen=True, slots=True)
class SeedReport:
    """Outcome of one seeding run."""

    batches_written: int
    batches_total: int
    categories_written: int
    courses_written: int

    @property
    def completed(self) -> bool:
        """True if every batch was written (the run was not cancelled)."""
        return self.batches_written == self.batches_total


class CatalogService:
    """Catalog use cases on top of a `CatalogStore`."""

    def __init__(self, store: CatalogStore, cache: CatalogCache | None = None) -> None:
        self.store = store
        self.cache = cache

    # --- reads ---

    def list_categories(self) -> list[Category]:
        """Return all categories."""
        key = "categories"
        if (cached := self._cache_get(key)) is not None:
            return [Category(**row) for row in cached]
        result = self.store.list_categories()
        self._cache_set(key, [c.to_row() for c in result])
        return result

    def list_courses(self, category_code: str | None = None) -> list[Course]:
        """Return all courses, or those of one category."""
        key = f"courses:{category_code.upper()}" if category_code else "courses"
        if (cached := self._cache_get(key)) is not None:
            return [Course(**row) for row in cached]
        result = self.store.list_courses(category_code)
        self._cache_set(key, [c.to_row() for c in result])
        return result

    def get_course(self, code: str) -> Course | None:
        """Return one course by code, or None. Misses are not cached."""
        key = f"course:{code.upper()}"
        if (cached := self._cache_get(key)) is not None:
            return Course(**cached)
        course = self.store.get_course(code)
        if course is not None:
            self._cache_set(key, course.to_row())
        return course

    def _cache_get(self, key: str):
        if self.cache is None:
            return None
        return self.cache.get(self.cache.key(key))

    def _cache_set(self, key: str, value) -> None:
        if self.cache is not None:
            self.cache.set(self.cache.key(key), value)

    # --- writes ---

    def seed(
        self,
        cancellation: CancellationToken,
        batch_size: int = 5,
        categories: Sequence[Category] = seed_data.CATEGORIES,
        courses: Sequence[Course] = seed_data.COURSES,
    ) -> SeedReport:
        """Upsert the reference catalog in batches until done or cancelled.

        Args:
            cancellation: Checked before each batch; once set no further batch
                is started.
            batch_size: Maximum entries per transaction.
            categories: Categories to write (default: `seed_data.CATEGORIES`).
            courses: Courses to write (default: `seed_data.COURSES`).

        Returns:
            A `SeedReport`; `completed` is False when cancellation stopped it.
            Cached catalog entries are dropped when any batch was written.

        Raises:
            Any store error; batches already written stay written.
        """
        plan = [("categories", b) for b in batched(categories, batch_size)] + [
            ("courses", b) for b in batched(courses, batch_size)
        ]
        written = {"categories": 0, "courses": 0}
        done = 0

        for kind, batch in plan:
            if cancellation.is_cancelled:
                logger.warning(
                    "seeding cancelled after %d of %d batches", done, len(plan)
                )
                break
            if kind == "categories":
                self.store.upsert_categories(batch)
            else:
                self.store.upsert_courses(batch)
            written[kind] += len(batch)
            done += 1
            logger.debug("seeded %s batch %d/%d (%d rows)", kind, done, len(plan), len(batch))

        report = SeedReport(
            batches_written=done,
            batches_total=len(plan),
            categories_written=written["categories"],
            courses_written=written["courses"],
        )
        if done and self.cache is not None:
            self.cache.invalidate()
        logger.info("seed report: %s", asdict(report))
        return report

"""Interface for catalog persistence."""

from __future__ import annotations

import abc
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from course.domain.catalog import Category, Course


class CatalogStore(abc.ABC):
    """Contract for reading and idempotently writing catalog entries."""

    @abc.abstractmethod
    def upsert_categories(self, categories: Sequence[Category]) -> None:
        """Insert or update `categories` atomically, keyed by code.

        Writing the same categories again must leave the store unchanged.
        """

    @abc.abstractmethod
    def upsert_courses(self, courses: Sequence[Course]) -> None:
        """Insert or update `courses` atomically, keyed by code.

        Raises:
            UnknownCategoryError: If a course references a missing category.
        """

    @abc.abstractmethod
    def list_categories(self) -> list[Category]:
        """Return all categories ordered by code."""

    @abc.abstractmethod
    def list_courses(self, category_code: str | None = None) -> list[Course]:
        """Return courses ordered by code, optionally filtered by category.

        Note:
            `category_code` lookup is case-insensitive.
        """

    @abc.abstractmethod
    def get_course(self, code: str) -> Course | None:
        """Return the course with `code` (case-insensitive), or None."""

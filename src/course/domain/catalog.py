"""Catalog value objects.

Conventions:
  - codes are canonical uppercase (e.g., "PY-101"); constructors normalize them.
  - prices are integer minor units (`price_cents`) with an ISO 4217 currency.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from .errors import InvalidEntryError

MAX_CODE_LENGTH = 32


class CourseLevel(str, Enum):
    """Target audience of a course."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


def _check_code(kind: str, code: str) -> None:
    if not code or len(code) > MAX_CODE_LENGTH:
        raise InvalidEntryError(kind, code, f"code must be 1..{MAX_CODE_LENGTH} characters")
    if not all(ch.isalnum() or ch in "-_" for ch in code):
        raise InvalidEntryError(kind, code, "code may contain only letters, digits, '-' and '_'")


@dataclass(frozen=True, slots=True)
class Category:
    """A grouping of courses (e.g., "DATA" for data engineering)."""

    code: str
    name: str
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", self.code.strip().upper())
        _check_code("category", self.code)
        if not self.name.strip():
            raise InvalidEntryError("category", self.code, "name must not be empty")

    def to_row(self) -> dict[str, Any]:
        """Column mapping used by the stores."""
        return asdict(self)


@dataclass(frozen=True, slots=True)
class Course:
    """A course offered in the marketplace catalog."""

    code: str
    category_code: str
    title: str
    level: CourseLevel = CourseLevel.BEGINNER
    price_cents: int = 0
    currency: str = "USD"
    summary: str | None = None
    capacity: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", self.code.strip().upper())
        object.__setattr__(self, "category_code", self.category_code.strip().upper())
        object.__setattr__(self, "currency", self.currency.strip().upper())
        _check_code("course", self.code)
        try:
            object.__setattr__(self, "level", CourseLevel(self.level))
        except ValueError as e:
            raise InvalidEntryError("course", self.code, f"unknown level {self.level!r}") from e
        if not self.title.strip():
            raise InvalidEntryError("course", self.code, "title must not be empty")
        if self.price_cents < 0:
            raise InvalidEntryError("course", self.code, "price_cents must not be negative")
        if len(self.currency) != 3 or not self.currency.isalpha():  # pylint: disable=magic-value-comparison
            raise InvalidEntryError("course", self.code, "currency must be a 3-letter code")
        if self.capacity is not None and self.capacity < 1:
            raise InvalidEntryError("course", self.code, "capacity must be positive if set")

    def to_row(self) -> dict[str, Any]:
        """Column mapping used by the stores."""
        row = asdict(self)
        row["level"] = self.level.value
        return row

    @classmethod
    def from_row(cls, row: Any) -> Course:
        """Build a course from a mapping with the `courses` table columns."""
        return cls(
            code=row["code"],
            category_code=row["category_code"],
            title=row["title"],
            level=CourseLevel(row["level"]),
            price_cents=row["price_cents"],
            currency=row["currency"],
            summary=row["summary"],
            capacity=row["capacity"],
        )

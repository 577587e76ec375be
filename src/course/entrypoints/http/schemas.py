"""Response models of the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel

from course.domain.catalog import Category, Course


class CategoryOut(BaseModel):
    """A catalog category."""

    code: str
    name: str
    description: str | None = None

    @classmethod
    def from_domain(cls, category: Category) -> CategoryOut:
        return cls(**category.to_row())


class CourseOut(BaseModel):
    """A catalog course; prices are in minor units."""

    code: str
    category_code: str
    title: str
    level: str
    price_cents: int
    currency: str
    summary: str | None = None
    capacity: int | None = None

    @classmethod
    def from_domain(cls, course: Course) -> CourseOut:
        return cls(**course.to_row())


class HealthOut(BaseModel):
    """Liveness of the service and its dependencies."""

    status: str
    database: str
    cache: str

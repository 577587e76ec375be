"""Integration tests for the HTTP API over a migrated SQLite database."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient

from course.adapters.cache import CatalogCache
from course.adapters.catalog import SqlAlchemyCatalogStore
from course.bootstrap.clients import Clients
from course.entrypoints.http import create_app
from course.lifecycle import CancellationToken
from course.service_layer import CatalogService, seed_data

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

# pylint: disable=magic-value-comparison,redefined-outer-name


@pytest.fixture
def client(sqlite_engine_file: Engine, fake_redis) -> TestClient:
    """API client over a seeded database and a fake cache."""
    store = SqlAlchemyCatalogStore(sqlite_engine_file)
    CatalogService(store).seed(CancellationToken())
    service = CatalogService(store, CatalogCache(fake_redis))
    app = create_app(service, Clients(db=sqlite_engine_file, cache=fake_redis))
    return TestClient(app)


def test_healthz_ok(client: TestClient) -> None:
    """Both dependencies reachable: 200 and status ok."""
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok", "cache": "ok"}


def test_healthz_degraded_when_cache_down(client: TestClient, fake_redis) -> None:
    """An unreachable cache turns the health check into a 503."""
    fake_redis.down = True
    response = client.get("/healthz")
    assert response.status_code == 503
    assert response.json()["cache"] == "unavailable"


def test_list_categories(client: TestClient) -> None:
    """All seeded categories are returned."""
    response = client.get("/categories")
    assert response.status_code == 200
    assert len(response.json()) == len(seed_data.CATEGORIES)


def test_list_courses_by_category(client: TestClient) -> None:
    """The category filter is case-insensitive."""
    response = client.get("/courses", params={"category": "web"})
    assert response.status_code == 200
    assert {c["category_code"] for c in response.json()} == {"WEB"}


def test_get_course(client: TestClient) -> None:
    """A known course is returned with its price in minor units."""
    response = client.get("/courses/py-101")
    assert response.status_code == 200
    body = response.json()
    assert body["code"] == "PY-101"
    assert body["price_cents"] == 4900
    assert body["level"] == "beginner"


def test_get_unknown_course(client: TestClient) -> None:
    """An unknown code is a 404."""
    response = client.get("/courses/NOPE-1")
    assert response.status_code == 404


def test_reads_survive_cache_outage(client: TestClient, fake_redis) -> None:
    """With Redis down the catalog is still served from the database."""
    fake_redis.down = True
    response = client.get("/courses")
    assert response.status_code == 200
    assert len(response.json()) == len(seed_data.COURSES)

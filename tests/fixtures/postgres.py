"""PostgreSQL related fixtures for COURSE.

PostgreSQL engines are backed by a temporary Postgres 17 instance launched with
Testcontainers and migrated to Alembic head.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import TYPE_CHECKING

import docker
import pytest
from alembic import command
from sqlalchemy import text

from course import config
from course.adapters.db.engine import make_engine

try:
    from testcontainers.postgres import (
        PostgresContainer,  # pyright: ignore[reportMissingTypeStubs]
    )
except ImportError:  # pragma: no cover
    PostgresContainer = None  # pylint: disable=invalid-name

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

# pylint: disable=redefined-outer-name


def _docker_available() -> bool:
    try:
        docker.from_env().ping()
    except Exception:  # pylint: disable=broad-except
        return False
    return True


DOCKER_UP = _docker_available()
PG_FIXTURES = ("postgres_engine", "pg_url")


def pytest_collection_modifyitems(items):
    """Skip Postgres/Testcontainers tests if Docker is unavailable."""
    if DOCKER_UP:
        return
    skip = pytest.mark.skip(reason="Docker/Testcontainers backend not available")
    for item in items:
        fixturenames = getattr(item, "fixturenames", ())
        if any(name in fixturenames for name in PG_FIXTURES):
            item.add_marker(skip)
        elif "postgres_engine" in item.nodeid:
            # indirect parametrization through the `engine` fixture
            item.add_marker(skip)


@pytest.fixture(scope="session")
def pg_url() -> Iterator[str]:
    """Session Postgres 17 container URL, migrated to Alembic head once.

    testcontainers returns psycopg2 URLs by default; the URL is normalized to
    psycopg (v3), which is what COURSE depends on.
    """
    if PostgresContainer is None:
        pytest.skip("testcontainers not installed")

    with PostgresContainer(
        image="postgres:17",
        username="course",
        password="abc123",
        dbname="course",
    ) as pg:
        url = re.sub(r"\+psycopg2\b", "+psycopg", pg.get_connection_url())
        command.upgrade(config.build_alembic_config(url), "head")
        yield url


@pytest.fixture
def postgres_engine(pg_url: str) -> Iterator[Engine]:
    """Per-test Postgres engine; catalog tables are emptied afterwards."""
    eng = make_engine(pg_url)
    try:
        yield eng
    finally:
        with eng.begin() as conn:
            conn.execute(text("TRUNCATE TABLE courses, categories"))
        eng.dispose()

"""Global pytest fixtures for COURSE.

Tests are marked by the directory they live in (`unit`, `integration`,
`functional`) so suites can be selected with ``-m``.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

# pylint: disable=unused-argument

TESTS_ROOT = Path(__file__).parent.resolve()
DIRECTORY_MARKERS = ("unit", "integration", "functional")

pytest_plugins = [
    "tests.fixtures.sqlite",
    "tests.fixtures.postgres",
    "tests.fixtures.fakes",
]


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add the default directory mark to items that do not carry it yet."""
    for item in items:
        path = item.path.resolve()  # pytest>=8: pathlib.Path
        for marker_name in DIRECTORY_MARKERS:
            if TESTS_ROOT / marker_name in path.parents:
                if not any(m.name == marker_name for m in item.iter_markers()):
                    item.add_marker(getattr(pytest.mark, marker_name))


# Helper to route to an existing engine fixture by name
@pytest.fixture
def engine(request: pytest.FixtureRequest) -> Engine:
    """Indirection fixture to parametrize over engine-providing fixtures.

    Example:
        ```py
        @pytest.mark.parametrize("engine", ["postgres_engine", "sqlite_engine_file"], indirect=True)
        def test_something(engine): ...
        ```
    """
    return request.getfixturevalue(request.param)

"""Test doubles shared across suites."""

from __future__ import annotations

from collections.abc import Iterator
from fnmatch import fnmatchcase

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

# pylint: disable=redefined-outer-name


class FakeRedis:
    """Just enough of `redis.Redis` for the catalog cache and health check.

    Set `down = True` to make every call fail like an unreachable server.
    TTLs are recorded but never expire.
    """

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}
        self.down = False
        self.closed = False
        self.reads = 0

    def _check(self) -> None:
        if self.down:
            raise RedisConnectionError("connection refused")

    def get(self, key: str) -> str | None:
        self._check()
        self.reads += 1
        return self.data.get(key)

    def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self._check()
        self.data[key] = value
        self.ttls[key] = ex
        return True

    def scan_iter(self, match: str | None = None) -> Iterator[str]:
        self._check()
        for key in list(self.data):
            if match is None or fnmatchcase(key, match):
                yield key

    def delete(self, *keys: str) -> int:
        self._check()
        removed = [k for k in keys if self.data.pop(k, None) is not None]
        for k in removed:
            self.ttls.pop(k, None)
        return len(removed)

    def ping(self) -> bool:
        self._check()
        return True

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_redis() -> FakeRedis:
    """A fresh, reachable fake Redis client."""
    return FakeRedis()

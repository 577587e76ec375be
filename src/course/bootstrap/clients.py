"""Client factory: the infrastructure handles shared with the runnable unit.

Handles are opened once per process, checked so misconfiguration fails fast,
and released only after the runnable unit has returned.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from course.adapters.cache import make_redis
from course.adapters.db.engine import check_connection, make_engine
from course.utils.sanitize import sanitize_url

if TYPE_CHECKING:
    from redis import Redis
    from sqlalchemy.engine import Engine

    from course.config import ServerConfig

logger = logging.getLogger(__name__)


class ClientError(Exception):
    """Raised when an infrastructure client cannot be opened."""


@dataclass(frozen=True)
class Clients:
    """Opened infrastructure handles (database, optional cache)."""

    db: Engine
    cache: Redis | None = None

    def close(self) -> None:
        """Release the handles; further use opens new connections or fails."""
        if self.cache is not None:
            try:
                self.cache.close()
            except RedisError as e:
                logger.warning("error closing cache client: %s", e)
        self.db.dispose()


def build_clients(conf: ServerConfig, *, with_cache: bool) -> Clients:
    """Open the database handle and, if asked, the cache handle.

    Raises:
        ClientError: If a backend rejects the connection check.
    """
    db_url = conf.db.database_url()
    engine = make_engine(db_url, echo=conf.db.echo)
    try:
        check_connection(engine)
    except SQLAlchemyError as e:
        engine.dispose()
        raise ClientError(f"database {sanitize_url(db_url)} unreachable: {e}") from e
    logger.debug("database client ready: %s", sanitize_url(db_url))

    cache = None
    if with_cache:
        cache = make_redis(conf.redis)
        try:
            cache.ping()
        except RedisError as e:
            cache.close()
            engine.dispose()
            raise ClientError(f"cache {conf.redis.host}:{conf.redis.port} unreachable: {e}") from e
        logger.debug("cache client ready: %s:%s", conf.redis.host, conf.redis.port)

    return Clients(db=engine, cache=cache)


@contextmanager
def open_clients(conf: ServerConfig, *, with_cache: bool) -> Iterator[Clients]:
    """Open the clients for the duration of the `with` block."""
    clients = build_clients(conf, with_cache=with_cache)
    try:
        yield clients
    finally:
        clients.close()
        logger.debug("clients closed")

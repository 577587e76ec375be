"""Wiring of the runnable units from configuration and opened clients."""

from __future__ import annotations

from typing import TYPE_CHECKING

from course.adapters.cache import CatalogCache
from course.adapters.catalog import SqlAlchemyCatalogStore
from course.entrypoints.http import ApiServer, create_app
from course.entrypoints.seeder import Seeder
from course.service_layer import CatalogService

from .modes import Mode

if TYPE_CHECKING:
    from course.config import ServerConfig
    from course.interfaces.runnable import RunnableUnit

    from .clients import Clients


def build_catalog_service(conf: ServerConfig, clients: Clients) -> CatalogService:
    """Catalog service over the database, cached when a cache client exists."""
    cache = (
        CatalogCache(clients.cache, ttl_seconds=conf.redis.ttl_seconds)
        if clients.cache is not None
        else None
    )
    return CatalogService(SqlAlchemyCatalogStore(clients.db), cache=cache)


def build_server(conf: ServerConfig, clients: Clients) -> ApiServer:
    """The HTTP API server unit."""
    service = build_catalog_service(conf, clients)
    return ApiServer(create_app(service, clients), conf.http)


def build_seeder(conf: ServerConfig, clients: Clients) -> Seeder:
    """The catalog seeder unit (no cache involved)."""
    return Seeder(build_catalog_service(conf, clients), batch_size=conf.seed.batch_size)


def build_runnable_unit(mode: Mode, conf: ServerConfig, clients: Clients) -> RunnableUnit:
    """Return the runnable unit for `mode`."""
    if mode is Mode.SERVE:
        return build_server(conf, clients)
    return build_seeder(conf, clients)

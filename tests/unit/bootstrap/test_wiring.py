"""Unit tests for `course.bootstrap.bootstrap`: which unit each mode gets."""

from course.adapters.cache import CatalogCache
from course.bootstrap.bootstrap import build_catalog_service, build_runnable_unit
from course.bootstrap.clients import Clients
from course.bootstrap.modes import Mode
from course.config import HTTPConfig, SeedConfig, ServerConfig
from course.entrypoints.http import ApiServer
from course.entrypoints.seeder import Seeder


def test_serve_mode_builds_api_server(sqlite_engine_file, fake_redis):
    """Serve mode gets the API server with the configured listen address."""
    conf = ServerConfig(http=HTTPConfig(port=9090))
    unit = build_runnable_unit(Mode.SERVE, conf, Clients(db=sqlite_engine_file, cache=fake_redis))
    assert isinstance(unit, ApiServer)
    assert unit.conf.port == 9090


def test_seed_mode_builds_seeder(sqlite_engine_file):
    """Seed mode gets the seeder with the configured batch size."""
    conf = ServerConfig(seed=SeedConfig(batch_size=2))
    unit = build_runnable_unit(Mode.SEED, conf, Clients(db=sqlite_engine_file))
    assert isinstance(unit, Seeder)
    assert unit.batch_size == 2


def test_cache_only_when_client_present(sqlite_engine_file, fake_redis):
    """The catalog service is cached only if a cache client was opened."""
    conf = ServerConfig()
    assert build_catalog_service(conf, Clients(db=sqlite_engine_file)).cache is None
    cached = build_catalog_service(conf, Clients(db=sqlite_engine_file, cache=fake_redis))
    assert isinstance(cached.cache, CatalogCache)
    assert cached.cache.ttl_seconds == conf.redis.ttl_seconds

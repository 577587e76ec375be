"""Redis-backed cache adapters."""

from .redis_cache import CatalogCache, make_redis

__all__ = ["CatalogCache", "make_redis"]

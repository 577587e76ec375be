"""Catalog store adapters (SQLAlchemy and in-memory)."""

from .memory import InMemoryCatalogStore
from .sqlalchemy_store import SqlAlchemyCatalogStore

__all__ = ["InMemoryCatalogStore", "SqlAlchemyCatalogStore"]

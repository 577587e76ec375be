"""Interfaces (ports) for COURSE.

Abstract contracts the bootstrap and service layer depend on; concrete
implementations live in `course.adapters` and `course.entrypoints`.
"""

from .catalog_store import CatalogStore
from .runnable import RunnableUnit

__all__ = ["CatalogStore", "RunnableUnit"]

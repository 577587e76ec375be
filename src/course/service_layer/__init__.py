"""Service layer: catalog use cases shared by the API server and the seeder."""

from .catalog import CatalogService, SeedReport

__all__ = ["CatalogService", "SeedReport"]

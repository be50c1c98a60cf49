from catalog.base import CatalogService
from catalog.memory import InMemoryCatalog
from catalog.rest_client import RestCatalogClient

__all__ = ["CatalogService", "InMemoryCatalog", "RestCatalogClient"]

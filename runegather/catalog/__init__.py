# runegather/catalog/__init__.py
from .catalog import Catalog
from .provider import CatalogProvider, JsonCatalogProvider

__all__ = ["Catalog", "CatalogProvider", "JsonCatalogProvider"]

"""Catalog factory.

Provides get_catalog() / set_catalog() to swap implementations:
- RepositoryCatalog reads the Product aggregate (default)
- InMemoryCatalog holds deterministic snapshots for tests and demos
"""

import os

from storefront.catalog.port import Catalog

_current_catalog: Catalog | None = None


def get_catalog() -> Catalog:
    """Return the active catalog, building it from CATALOG_ADAPTER on first use."""
    global _current_catalog
    if _current_catalog is None:
        adapter = os.environ.get("CATALOG_ADAPTER", "repository")
        if adapter == "repository":
            from storefront.catalog.repository_adapter import RepositoryCatalog

            _current_catalog = RepositoryCatalog()
        elif adapter == "memory":
            from storefront.catalog.memory_adapter import InMemoryCatalog

            _current_catalog = InMemoryCatalog()
        else:
            raise ValueError(f"Unknown catalog adapter: {adapter}")
    return _current_catalog


def set_catalog(catalog: Catalog) -> None:
    """Override the active catalog (useful for tests)."""
    global _current_catalog
    _current_catalog = catalog


def reset_catalog() -> None:
    """Reset to the configured default."""
    global _current_catalog
    _current_catalog = None

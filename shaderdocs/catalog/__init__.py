"""Catalog input - loading and validation of shader catalog files."""

from shaderdocs.catalog.loader import (
    Catalog,
    CatalogEntryModel,
    CatalogError,
    CreditsModel,
    load_catalog,
    parse_catalog,
)

__all__ = [
    "Catalog",
    "CatalogEntryModel",
    "CatalogError",
    "CreditsModel",
    "load_catalog",
    "parse_catalog",
]

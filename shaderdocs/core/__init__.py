"""Core types."""

from shaderdocs.core.types import (
    CatalogEntry,
    Credits,
    LicenceDefaults,
)

__all__ = [
    "CatalogEntry",
    "Credits",
    "LicenceDefaults",
]

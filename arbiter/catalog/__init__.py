"""Rule catalog module."""

from arbiter.catalog.loader import (
    CatalogError,
    CatalogValidationError,
    UnknownArchetypeError,
    load_catalog,
    lookup_archetypes,
    parse_catalog,
    validate_catalog,
)

__all__ = [
    "CatalogError",
    "CatalogValidationError",
    "UnknownArchetypeError",
    "load_catalog",
    "lookup_archetypes",
    "parse_catalog",
    "validate_catalog",
]

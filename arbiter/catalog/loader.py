"""Rule catalog loading and validation."""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from arbiter.config import DEFAULT_CATALOG_PATH
from arbiter.schemas import Archetype, RuleCatalog

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Error reading a rule catalog."""

    pass


class CatalogValidationError(CatalogError):
    """Rule catalog violates a structural or content constraint."""

    pass


class UnknownArchetypeError(KeyError):
    """An archetype id is not present in the catalog."""

    pass


def lookup_archetypes(catalog: RuleCatalog, ids: list[str]) -> list[Archetype]:
    """Resolve archetype ids against the catalog, preserving order.

    Raises:
        UnknownArchetypeError: If any id is not in the catalog
    """
    index = catalog.archetype_index()
    unknown = [i for i in ids if i not in index]
    if unknown:
        raise UnknownArchetypeError(
            f"Unknown archetype ids for catalog {catalog.version}: {', '.join(unknown)}"
        )
    return [index[i] for i in ids]


def _parse_json(text: str, source: str) -> dict[str, Any]:
    """Parse catalog JSON.

    Raises:
        CatalogError: If the document is not a JSON object
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogError(f"Failed to parse catalog {source} as JSON: {e}") from e
    if not isinstance(data, dict):
        raise CatalogError(f"Catalog {source} must be a JSON object")
    return data


def _check_known_ids(ids: list[str], known: set[str], context: str) -> None:
    unknown = [i for i in ids if i not in known]
    if unknown:
        raise CatalogValidationError(
            f"{context} references unknown archetype ids: {', '.join(unknown)}"
        )


def validate_catalog(catalog: RuleCatalog) -> None:
    """Validate catalog constraints beyond the schema.

    Raises:
        CatalogValidationError: If any constraint is violated
    """
    ids = catalog.archetype_ids()
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise CatalogValidationError(
            f"Duplicate archetype ids: {', '.join(duplicates)}"
        )
    known = set(ids)

    if not catalog.buckets.low < catalog.buckets.high:
        raise CatalogValidationError(
            f"Bucket cutlines must satisfy low < high, got "
            f"low={catalog.buckets.low} high={catalog.buckets.high}"
        )

    # Facet names are only checkable when the catalog declares its domains
    if catalog.domains:
        for archetype in catalog.archetypes:
            for domain, cluster in archetype.rules.facet_clusters.items():
                declared = catalog.domains.get(domain)
                if declared is None:
                    raise CatalogValidationError(
                        f"Archetype '{archetype.id}' clusters undeclared domain {domain.value}"
                    )
                stray = [f for f in cluster.facet_names() if f not in declared.facets]
                if stray:
                    raise CatalogValidationError(
                        f"Archetype '{archetype.id}' names unknown {domain.label} facets: "
                        f"{', '.join(stray)}"
                    )

    tie = catalog.tie_layer
    if not tie.binary_templates:
        raise CatalogValidationError(
            "tie_layer.binary_templates is empty; every pair needs a comparison template"
        )

    for template in tie.triad_templates:
        context = f"Triad template '{template.id}'"
        _check_known_ids(template.when_candidates_any, known, context)
        _check_known_ids(list(template.hints), known, context)

    for template in tie.triad_library:
        _check_known_ids(list(template.labels), known, f"Triad library template '{template.id}'")

    seen_pairs: set[frozenset[str]] = set()
    for template in tie.pair_templates:
        a, b = template.pair
        _check_known_ids([a, b], known, f"Pair template '{a}/{b}'")
        if a == b:
            raise CatalogValidationError(f"Pair template pairs '{a}' with itself")
        key = frozenset(template.pair)
        if key in seen_pairs:
            # Later duplicates still compete; the earlier one wins score ties
            logger.warning("Duplicate pair template for %s/%s", a, b)
        seen_pairs.add(key)

    _check_known_ids(list(tie.generic_hints), known, "generic_hints")
    missing_hints = [i for i in ids if i not in tie.generic_hints]
    if missing_hints:
        logger.warning(
            "No generic hint for %s; fallback triads will show the raw id",
            ", ".join(missing_hints),
        )


def parse_catalog(data: dict[str, Any]) -> RuleCatalog:
    """Validate a decoded catalog document.

    Raises:
        CatalogValidationError: If the document violates the schema or constraints
    """
    try:
        catalog = RuleCatalog.model_validate(data)
    except ValidationError as e:
        raise CatalogValidationError(f"Invalid catalog structure: {e}") from e

    validate_catalog(catalog)
    return catalog


def load_catalog(path: Optional[Path] = None) -> RuleCatalog:
    """Load and validate a rule catalog from disk.

    Args:
        path: Catalog JSON file, or None for the packaged catalog

    Returns:
        Frozen, validated RuleCatalog

    Raises:
        CatalogError: If the file cannot be read or parsed
        CatalogValidationError: If the catalog is malformed
    """
    resolved = Path(path) if path is not None else DEFAULT_CATALOG_PATH
    try:
        text = resolved.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {resolved}: {e}") from e

    catalog = parse_catalog(_parse_json(text, str(resolved)))
    logger.info(
        "Loaded catalog %s (%d archetypes, tie layer %s)",
        catalog.version,
        len(catalog.archetypes),
        catalog.tie_layer.version,
    )
    return catalog

"""Triad (three-way) question selection."""

from typing import Optional

from arbiter.catalog.loader import lookup_archetypes
from arbiter.schemas import RuleCatalog, TriadLibraryTemplate, TriadSelection

FALLBACK_TEMPLATE_ID = "fallback"


def generic_hint(archetype_id: str, catalog: RuleCatalog) -> str:
    """Neutral one-line hint for an archetype; the raw id when none is authored."""
    return catalog.tie_layer.generic_hints.get(archetype_id, archetype_id)


def library_score(ids: list[str], template: TriadLibraryTemplate) -> int:
    """2 points per triad member with an authored label, +1 when all have one."""
    authored = [i for i in ids if template.labels.get(i)]
    score = 2 * len(authored)
    if len(authored) == len(ids):
        score += 1
    return score


def _best_library_template(ids: list[str], catalog: RuleCatalog) -> Optional[TriadLibraryTemplate]:
    best = None
    best_score = 0
    for template in catalog.tie_layer.triad_library:
        score = library_score(ids, template)
        if score > best_score:
            best_score = score
            best = template
    return best


def select_triad(ids: list[str], catalog: RuleCatalog) -> TriadSelection:
    """Pick a single-choice question for three archetypes.

    Strategy:
    1. First curated template naming at least two of the three ids
    2. Highest-scoring role-framed library template (declaration order on ties)
    3. The catalog's fallback question with generic hints

    Raises:
        ValueError: If ids does not hold exactly three distinct archetypes
        UnknownArchetypeError: If an id is not in the catalog
    """
    if len(ids) != 3 or len(set(ids)) != 3:
        raise ValueError(f"Triad selection needs three distinct ids, got {ids}")
    lookup_archetypes(catalog, ids)

    for template in catalog.tie_layer.triad_templates:
        overlap = [i for i in ids if i in template.when_candidates_any]
        if len(overlap) >= 2:
            return TriadSelection(
                question=template.question,
                labels={i: template.hints.get(i, i) for i in ids},
                template_id=template.id,
            )

    library = _best_library_template(ids, catalog)
    if library is not None:
        return TriadSelection(
            question=library.question,
            labels={i: library.labels.get(i) or generic_hint(i, catalog) for i in ids},
            template_id=library.id,
        )

    return TriadSelection(
        question=catalog.tie_layer.fallbacks.triad_question,
        labels={i: generic_hint(i, catalog) for i in ids},
        template_id=FALLBACK_TEMPLATE_ID,
    )

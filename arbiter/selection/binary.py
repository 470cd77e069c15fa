"""Binary (pairwise) comparison question selection."""

from arbiter.catalog.loader import CatalogValidationError, lookup_archetypes
from arbiter.config import DomainKey, TemplateFamily
from arbiter.schemas import (
    Archetype,
    BinarySelection,
    BinaryTemplate,
    ProbeOption,
    RuleCatalog,
)
from arbiter.scoring.divergence import largest_difference_axes, required_rank

# Authored pair dilemmas beat style templates, which beat bare domain axes
RELEVANCE: dict[TemplateFamily, float] = {
    TemplateFamily.ARCHETYPE: 2.0,
    TemplateFamily.LEADERSHIP: 1.5,
    TemplateFamily.PROBLEM_SOLVING: 1.5,
    TemplateFamily.DOMAIN: 0.5,
}

# Unset buckets are read as Medium when comparing along an axis
UNSET_RANK = 1


class NoApplicableTemplateError(CatalogValidationError):
    """The template catalog offered nothing for a comparison."""

    pass


def _rank(archetype: Archetype, domain: DomainKey) -> int:
    rank = required_rank(archetype, domain)
    return UNSET_RANK if rank is None else rank


def pair_templates_for(
    a: Archetype,
    b: Archetype,
    catalog: RuleCatalog,
) -> list[BinaryTemplate]:
    """Archetype-specific templates for the unordered pair, oriented as (a, b).

    Pair templates are scored along the pair's own largest-difference axes.
    """
    templates = []
    wanted = {a.id, b.id}
    left_axis, right_axis = largest_difference_axes(a, b)
    for pair in catalog.tie_layer.pair_templates:
        if set(pair.pair) != wanted:
            continue
        reversed_order = pair.pair[0] == b.id
        templates.append(
            BinaryTemplate(
                axis=f"Archetype_{a.id}_vs_{b.id}",
                family=TemplateFamily.ARCHETYPE,
                question=pair.question,
                left_bucket=left_axis,
                left_hint=pair.right if reversed_order else pair.left,
                right_bucket=right_axis,
                right_hint=pair.left if reversed_order else pair.right,
            )
        )
    return templates


def candidate_templates(a: Archetype, b: Archetype, catalog: RuleCatalog) -> list[BinaryTemplate]:
    """All templates competing for a pair, in tie-break order.

    Order: domain-axis templates, archetype pair templates, then
    leadership and problem-solving templates as authored.
    """
    authored = catalog.tie_layer.binary_templates
    domain = [t for t in authored if t.family == TemplateFamily.DOMAIN]
    styled = [t for t in authored if t.family != TemplateFamily.DOMAIN]
    return domain + pair_templates_for(a, b, catalog) + styled


def axis_score(a: Archetype, b: Archetype, template: BinaryTemplate) -> int:
    """How strongly the template's two axes separate the pair."""
    return abs(_rank(a, template.left_bucket) - _rank(b, template.left_bucket)) + abs(
        _rank(a, template.right_bucket) - _rank(b, template.right_bucket)
    )


def template_score(a: Archetype, b: Archetype, template: BinaryTemplate) -> float:
    return axis_score(a, b, template) + RELEVANCE[template.family]


def _orient(a: Archetype, b: Archetype, template: BinaryTemplate) -> tuple[str, str]:
    """Hints for (a, b): the left hint goes to whoever leans toward the left axis."""
    if template.family == TemplateFamily.ARCHETYPE:
        return template.left_hint, template.right_hint
    lean = (_rank(a, template.left_bucket) - _rank(b, template.left_bucket)) - (
        _rank(a, template.right_bucket) - _rank(b, template.right_bucket)
    )
    if lean < 0:
        return template.right_hint, template.left_hint
    return template.left_hint, template.right_hint


def select_binary(id_a: str, id_b: str, catalog: RuleCatalog) -> BinarySelection:
    """Pick the most informative comparison question for two archetypes.

    Args:
        id_a: Archetype shown on the left
        id_b: Archetype shown on the right
        catalog: Rule catalog carrying the template catalogs

    Returns:
        BinarySelection with left=id_a and right=id_b

    Raises:
        UnknownArchetypeError: If either id is not in the catalog
        NoApplicableTemplateError: If no template exists at all
    """
    a, b = lookup_archetypes(catalog, [id_a, id_b])

    best: BinaryTemplate | None = None
    best_score = -1.0
    for template in candidate_templates(a, b, catalog):
        score = template_score(a, b, template)
        if score > best_score:
            best_score = score
            best = template

    if best is None:
        raise NoApplicableTemplateError(
            f"No comparison template available for {id_a} vs {id_b}"
        )

    left_hint, right_hint = _orient(a, b, best)
    return BinarySelection(
        question=best.question,
        left=ProbeOption(id=id_a, label=left_hint),
        right=ProbeOption(id=id_b, label=right_hint),
        axis=best.axis,
        score=best_score,
    )

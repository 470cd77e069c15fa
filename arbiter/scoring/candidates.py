"""Candidate filtering: archetype rules evaluated against a user profile."""

import logging

from arbiter.schemas import Archetype, RuleCatalog, UserProfile

logger = logging.getLogger(__name__)

MIN_CANDIDATES = 4


def matches_profile(archetype: Archetype, profile: UserProfile, catalog: RuleCatalog) -> bool:
    """Check every domain requirement and facet cluster against the profile.

    A domain mean or facet bucket missing from the profile fails the rule
    that depends on it.
    """
    for domain, required in archetype.rules.domains.items():
        mean = profile.domain_mean.get(domain)
        if mean is None or catalog.bucket_for_mean(mean) != required:
            return False

    for domain, cluster in archetype.rules.facet_clusters.items():
        if not cluster.matches(profile.facet_bucket.get(domain, {})):
            return False

    return True


def filter_candidates(
    profile: UserProfile,
    catalog: RuleCatalog,
    minimum: int = MIN_CANDIDATES,
) -> list[str]:
    """Derive the initial candidate pool for a profile.

    Strategy:
    1. Keep archetypes whose rules all hold, in catalog order
    2. If fewer than `minimum` match, backfill with the remaining
       archetypes in catalog order until `minimum` or the catalog runs out

    Args:
        profile: Bucketed trait profile
        catalog: Rule catalog
        minimum: Pool size to backfill up to

    Returns:
        Ordered list of unique archetype ids
    """
    matched = [a.id for a in catalog.archetypes if matches_profile(a, profile, catalog)]
    if len(matched) >= minimum:
        return matched

    pool = list(matched)
    for archetype in catalog.archetypes:
        if len(pool) >= minimum:
            break
        if archetype.id not in pool:
            pool.append(archetype.id)

    logger.debug(
        "Rule match yielded %d candidate(s); backfilled to %s", len(matched), pool
    )
    return pool

"""Divergence between archetype rule profiles."""

from typing import Optional

from arbiter.config import DOMAIN_ORDER, DomainKey
from arbiter.schemas import AnyHighCluster, AnyLowCluster, Archetype

# Partial penalty when only one archetype constrains a domain
ASYMMETRIC_PENALTY = 0.5
POLAR_CLUSTER_BONUS = 0.5
DIFFERENT_CLUSTER_BONUS = 0.25


def required_rank(archetype: Archetype, domain: DomainKey) -> Optional[int]:
    """Numeric rank of the required bucket (Low=0, Medium=1, High=2), or None."""
    bucket = archetype.required(domain)
    return bucket.rank if bucket is not None else None


def cluster_opposition(a: Archetype, b: Archetype, domain: DomainKey) -> float:
    """Score how far apart two archetypes' facet clusters are on one domain."""
    ca, cb = a.cluster(domain), b.cluster(domain)
    if ca is None or cb is None:
        return 0.0
    if isinstance(ca, AnyHighCluster) and isinstance(cb, AnyLowCluster):
        return POLAR_CLUSTER_BONUS
    if isinstance(ca, AnyLowCluster) and isinstance(cb, AnyHighCluster):
        return POLAR_CLUSTER_BONUS
    return 0.0 if ca == cb else DIFFERENT_CLUSTER_BONUS


def divergence(a: Archetype, b: Archetype) -> float:
    """Symmetric, non-negative distance between two archetypes.

    Per domain: both buckets unset adds 0, exactly one unset adds 0.5,
    both set adds the absolute rank gap. Facet clusters add 0.5 for an
    any-high/any-low opposition and 0.25 for any other difference.
    """
    total = 0.0
    for domain in DOMAIN_ORDER:
        ra, rb = required_rank(a, domain), required_rank(b, domain)
        if ra is None and rb is None:
            pass
        elif ra is None or rb is None:
            total += ASYMMETRIC_PENALTY
        else:
            total += abs(ra - rb)
        total += cluster_opposition(a, b, domain)
    return total


def group_divergence(members: list[Archetype]) -> float:
    """Sum of pairwise divergence across a group."""
    return sum(
        divergence(members[i], members[j])
        for i in range(len(members))
        for j in range(i + 1, len(members))
    )


def largest_difference_axes(a: Archetype, b: Archetype) -> tuple[DomainKey, DomainKey]:
    """Ordered domain pair along which two archetypes differ most.

    Unset buckets count as Low. The first maximum in O, C, E, A, N order wins.
    """
    best = (DomainKey.O, DomainKey.C)
    best_gap = -1
    for x in DOMAIN_ORDER:
        for y in DOMAIN_ORDER:
            if x == y:
                continue
            gx = (required_rank(a, x) or 0) - (required_rank(b, x) or 0)
            gy = (required_rank(a, y) or 0) - (required_rank(b, y) or 0)
            gap = abs(gx) + abs(gy)
            if gap > best_gap:
                best_gap = gap
                best = (x, y)
    return best

"""Round grouping, bye and wildcard choices driven by divergence."""

from itertools import combinations
from typing import Optional

from arbiter.schemas import Archetype, RuleCatalog
from arbiter.scoring.divergence import divergence, group_divergence


def best_group(ids: list[str], index: dict[str, Archetype], size: int) -> list[str]:
    """Most divergent group of `size` ids, first maximum in combination order.

    Brute force over C(n, size) combinations; pools stay at a dozen or so.
    """
    if len(ids) <= size:
        return list(ids)
    best: tuple[str, ...] = ()
    best_score = -1.0
    for combo in combinations(ids, size):
        score = group_divergence([index[i] for i in combo])
        if score > best_score:
            best_score = score
            best = combo
    return list(best)


def form_round_groups(
    pool: list[str],
    index: dict[str, Archetype],
    group_size: int = 3,
) -> list[list[str]]:
    """Partition a round's pool into disjoint groups.

    Full groups are chosen greedily by divergence; a remainder of two forms
    a pair and a remainder of one is a bye.
    """
    remaining = list(pool)
    groups: list[list[str]] = []
    while remaining:
        if len(remaining) >= group_size:
            group = best_group(remaining, index, group_size)
        elif len(remaining) == 2:
            group = list(remaining)
        else:
            group = [remaining[0]]
        remaining = [i for i in remaining if i not in group]
        groups = [*groups, group]
    return groups


def pick_bye(ids: list[str], index: dict[str, Archetype]) -> str:
    """The most distinctive member: highest summed divergence to the others."""
    best = ids[0]
    best_score = -1.0
    for candidate in ids:
        score = sum(
            divergence(index[candidate], index[other]) for other in ids if other != candidate
        )
        if score > best_score:
            best_score = score
            best = candidate
    return best


def pick_wildcard(pool: list[str], catalog: RuleCatalog) -> Optional[str]:
    """Catalog archetype outside the pool that diverges most from it.

    Returns None when every catalog archetype is already in the pool.
    """
    index = catalog.archetype_index()
    members = [index[i] for i in pool]
    best: Optional[str] = None
    best_score = -1.0
    for archetype in catalog.archetypes:
        if archetype.id in pool:
            continue
        score = sum(divergence(archetype, m) for m in members)
        if score > best_score:
            best_score = score
            best = archetype.id
    return best

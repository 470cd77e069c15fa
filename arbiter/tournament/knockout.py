"""Group knockout tournament (triad rounds)."""

import logging

from arbiter.config import Asker
from arbiter.schemas import RuleCatalog, TournamentOutcome
from arbiter.tournament.grouping import form_round_groups
from arbiter.tournament.probes import ask_for_winner, binary_probe, triad_probe

logger = logging.getLogger(__name__)


async def _play_group(group: list[str], ask: Asker, catalog: RuleCatalog) -> tuple[str, int]:
    """Resolve one group; returns (winner, probes asked)."""
    if len(group) == 1:
        return group[0], 0
    if len(group) == 2:
        probe = binary_probe(group[0], group[1], catalog)
    else:
        probe = triad_probe(group, catalog)
    return await ask_for_winner(ask, probe, group), 1


async def _ladder(pool: list[str], ask: Asker, catalog: RuleCatalog) -> tuple[str, int]:
    """Settle a pool sequentially: the running champion meets each challenger in turn."""
    champion = pool[0]
    asked = 0
    for challenger in pool[1:]:
        probe = binary_probe(champion, challenger, catalog)
        champion = await ask_for_winner(ask, probe, [champion, challenger])
        asked += 1
    return champion, asked


async def run_knockout(
    pool: list[str],
    ask: Asker,
    catalog: RuleCatalog,
) -> TournamentOutcome:
    """Run knockout rounds until one candidate remains.

    Each round partitions the pool into disjoint groups (no candidate is
    asked about twice in a round), asks one probe per group and advances
    the group winners. Two survivors meet in a final binary probe; a lone
    survivor wins outright.

    Args:
        pool: Deduplicated candidate ids (at least two)
        ask: Presentation-layer callback
        catalog: Rule catalog with tie-layer policy

    Returns:
        TournamentOutcome with the winner and round/probe counts
    """
    tie = catalog.tie_layer
    index = catalog.archetype_index()
    current = list(pool)
    rounds = 0
    probes = 0

    while len(current) > 2:
        if tie.max_rounds is not None and rounds >= tie.max_rounds:
            logger.debug(
                "Round cap %d reached with %d candidates; settling by ladder",
                tie.max_rounds,
                len(current),
            )
            winner, asked = await _ladder(current, ask, catalog)
            return TournamentOutcome(
                winner=winner, pool=list(pool), rounds=rounds + 1, probes=probes + asked
            )

        groups = form_round_groups(current, index, tie.group_size)
        rounds += 1
        logger.debug("Knockout round %d groups: %s", rounds, groups)

        winners: list[str] = []
        for group in groups:
            winner, asked = await _play_group(group, ask, catalog)
            probes += asked
            winners = [*winners, winner]
        current = winners

    if len(current) == 2:
        probe = binary_probe(current[0], current[1], catalog)
        current = [await ask_for_winner(ask, probe, current)]
        rounds += 1
        probes += 1

    return TournamentOutcome(winner=current[0], pool=list(pool), rounds=rounds, probes=probes)

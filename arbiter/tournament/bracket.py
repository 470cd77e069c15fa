"""Binary bracket tournament."""

import logging

from arbiter.config import Asker, BracketPolicy, ProbeStage
from arbiter.schemas import RuleCatalog, TournamentOutcome
from arbiter.tournament.grouping import pick_bye, pick_wildcard
from arbiter.tournament.probes import ask_for_winner, bracket_probe

logger = logging.getLogger(__name__)


def pad_with_wildcard(pool: list[str], catalog: RuleCatalog) -> list[str]:
    """Even out an odd pool with the most divergent catalog archetype."""
    if len(pool) % 2 == 0:
        return list(pool)
    wildcard = pick_wildcard(pool, catalog)
    if wildcard is None:
        return list(pool)
    logger.debug("Added wildcard %s to pool %s", wildcard, pool)
    return [*pool, wildcard]


class _BracketRun:
    """State of one bracket resolution: lineage per survivor and probe count."""

    def __init__(self, pool: list[str], ask: Asker, catalog: RuleCatalog):
        self._ask = ask
        self._catalog = catalog
        self._index = catalog.archetype_index()
        self.lineage: dict[str, list[str]] = {i: [i] for i in pool}
        self.probes = 0

    async def match(self, a: str, b: str, stage: ProbeStage) -> str:
        probe = bracket_probe(
            a, b, stage, self.lineage[a], self.lineage[b], self._catalog
        )
        winner = await ask_for_winner(self._ask, probe, [a, b])
        self.probes += 1
        self.lineage = {**self.lineage, winner: [*self.lineage[a], *self.lineage[b]]}
        logger.debug("Bracket %s %s vs %s -> %s", stage.value, a, b, winner)
        return winner

    async def bye_slice(self, trio: list[str], is_final: bool) -> str:
        """Play a three-member slice: the bye sits out, then meets the pair winner."""
        bye = pick_bye(trio, self._index)
        a, b = [i for i in trio if i != bye]
        logger.debug("Bye for %s in slice %s", bye, trio)
        first = await self.match(a, b, ProbeStage.PAIR)
        return await self.match(bye, first, ProbeStage.FINAL if is_final else ProbeStage.PAIR)

    async def play_round(self, current: list[str], policy: BracketPolicy) -> list[str]:
        winners: list[str] = []
        i = 0
        while i < len(current):
            remain = len(current) - i
            if policy == BracketPolicy.BYE_ON_THREE and remain == 3:
                winner = await self.bye_slice(current[i : i + 3], is_final=len(current) == 3)
                i += 3
            elif remain >= 2:
                stage = ProbeStage.FINAL if len(current) == 2 else ProbeStage.PAIR
                winner = await self.match(current[i], current[i + 1], stage)
                i += 2
            else:
                winner = current[i]
                i += 1
            winners = [*winners, winner]
        return winners


async def run_bracket(
    pool: list[str],
    ask: Asker,
    catalog: RuleCatalog,
) -> TournamentOutcome:
    """Run a pairwise bracket until one candidate remains.

    BRACKET policies:
    - WILDCARD: an odd pool gains the most divergent outside archetype,
      then pairs 0v1, 2v3, ... each round
    - BYE_ON_THREE: no padding; a three-member remainder plays a bye slice

    Args:
        pool: Deduplicated candidate ids (at least two)
        ask: Presentation-layer callback
        catalog: Rule catalog with tie-layer policy

    Returns:
        TournamentOutcome whose pool is the working pool after padding
    """
    policy = catalog.tie_layer.bracket_policy
    working = pad_with_wildcard(pool, catalog) if policy == BracketPolicy.WILDCARD else list(pool)

    run = _BracketRun(working, ask, catalog)
    current = list(working)
    rounds = 0
    while len(current) > 1:
        rounds += 1
        logger.debug("Bracket round %d pool: %s", rounds, current)
        current = await run.play_round(current, policy)

    return TournamentOutcome(winner=current[0], pool=working, rounds=rounds, probes=run.probes)

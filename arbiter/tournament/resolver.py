"""Public tournament entry point."""

from arbiter.catalog.loader import lookup_archetypes
from arbiter.config import Asker, TournamentMode
from arbiter.schemas import RuleCatalog, TournamentOutcome
from arbiter.tournament.bracket import run_bracket
from arbiter.tournament.knockout import run_knockout


class EmptyCandidateSetError(ValueError):
    """resolve() was called without any candidate ids."""

    pass


def dedupe(candidate_ids: list[str]) -> list[str]:
    """Drop repeated ids, keeping first occurrences in order."""
    return list(dict.fromkeys(candidate_ids))


async def run_tournament(
    candidate_ids: list[str],
    ask: Asker,
    catalog: RuleCatalog,
) -> TournamentOutcome:
    """Narrow candidate archetypes to a single winner.

    Args:
        candidate_ids: Candidate archetype ids; duplicates are ignored
        ask: Presentation-layer callback answering each probe
        catalog: Rule catalog; tie_layer.mode selects the tournament

    Returns:
        TournamentOutcome with winner, working pool and counts

    Raises:
        EmptyCandidateSetError: If no candidate ids remain after dedupe
        UnknownArchetypeError: If a candidate is not in the catalog
    """
    pool = dedupe(candidate_ids)
    if not pool:
        raise EmptyCandidateSetError("No candidates")
    lookup_archetypes(catalog, pool)

    if len(pool) == 1:
        return TournamentOutcome(winner=pool[0], pool=pool)

    tournaments = {
        TournamentMode.TRIAD_ROUNDS: run_knockout,
        TournamentMode.BINARY_BRACKETS: run_bracket,
    }
    run = tournaments[catalog.tie_layer.mode]
    return await run(pool, ask, catalog)


async def resolve(
    candidate_ids: list[str],
    ask: Asker,
    catalog: RuleCatalog,
) -> str:
    """Resolve candidate archetypes to the winning id."""
    outcome = await run_tournament(candidate_ids, ask, catalog)
    return outcome.winner

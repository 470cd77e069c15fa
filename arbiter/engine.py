"""Arbiter public adapter."""

import asyncio

from arbiter.audit.trace import TracingAsker, run_checksum
from arbiter.catalog.loader import load_catalog
from arbiter.config import Asker, EngineConfig
from arbiter.schemas import ResolutionResult, RuleCatalog, UserProfile
from arbiter.scoring.candidates import filter_candidates
from arbiter.tournament.resolver import dedupe, run_tournament


class Arbiter:
    """Public interface to Arbiter.

    Loads the rule catalog once and resolves candidate archetypes through
    the configured tie-break tournament. Scoring, selection and tournament
    modules are implementation details.

    Usage:
        from arbiter import Arbiter, EngineConfig

        engine = Arbiter(config=EngineConfig(observability=True))

        async def ask(probe):
            return probe.option_ids()[0]

        result = await engine.resolve(["sovereign", "rebel", "seeker"], ask)
        print(result.winner, result.checksum)
    """

    def __init__(self, config: EngineConfig):
        """Initialize the engine with configuration.

        Args:
            config: EngineConfig naming the catalog and policy overrides

        Raises:
            CatalogError: If the catalog cannot be read
            CatalogValidationError: If the catalog is malformed
        """
        self._config = config
        self._catalog = load_catalog(config.catalog_path).with_policy(
            mode=config.mode,
            bracket_policy=config.bracket_policy,
            max_rounds=config.max_rounds,
        )

    @property
    def catalog(self) -> RuleCatalog:
        return self._catalog

    def candidates_for(self, profile: UserProfile) -> list[str]:
        """Initial candidate pool for a profile, backfilled to min_candidates."""
        return filter_candidates(profile, self._catalog, self._config.min_candidates)

    async def resolve(self, candidate_ids: list[str], ask: Asker) -> ResolutionResult:
        """Resolve candidates to a single archetype.

        Args:
            candidate_ids: Candidate archetype ids (duplicates ignored)
            ask: Async callback presenting each probe and returning the chosen id

        Returns:
            ResolutionResult with winner, checksum and, when observability
            is enabled, the decision trace
        """
        tracer = TracingAsker(ask)
        outcome = await run_tournament(candidate_ids, tracer, self._catalog)
        candidates = dedupe(candidate_ids)

        return ResolutionResult(
            winner=outcome.winner,
            candidates=candidates,
            probes_asked=len(tracer.entries),
            checksum=run_checksum(
                self._catalog.version, candidates, outcome.winner, tracer.entries
            ),
            trace=tracer.entries if self._config.observability else None,
        )

    async def resolve_profile(self, profile: UserProfile, ask: Asker) -> ResolutionResult:
        """Filter candidates for a profile, then resolve them."""
        return await self.resolve(self.candidates_for(profile), ask)

    def resolve_sync(self, candidate_ids: list[str], ask: Asker) -> ResolutionResult:
        """Synchronous wrapper for resolve()."""
        return asyncio.run(self.resolve(candidate_ids, ask))

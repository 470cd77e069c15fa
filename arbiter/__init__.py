"""Arbiter: deterministic archetype resolution engine.

Public exports:
- Arbiter: Facade that loads the catalog and resolves candidates
- EngineConfig: Configuration for the engine
- ResolutionResult: Result type returned by Arbiter.resolve()
- resolve, divergence, filter_candidates, select_binary, select_triad:
  pure building blocks usable without the facade
"""

from arbiter.catalog.loader import load_catalog
from arbiter.config import EngineConfig
from arbiter.engine import Arbiter
from arbiter.schemas import ResolutionResult
from arbiter.scoring import divergence, filter_candidates
from arbiter.selection import select_binary, select_triad
from arbiter.tournament import EmptyCandidateSetError, resolve, run_tournament

__all__ = [
    "Arbiter",
    "EmptyCandidateSetError",
    "EngineConfig",
    "ResolutionResult",
    "divergence",
    "filter_candidates",
    "load_catalog",
    "resolve",
    "run_tournament",
    "select_binary",
    "select_triad",
]

"""Archetype builders and scripted askers shared by the tests."""

from typing import Optional

from arbiter.config import Bucket, DomainKey
from arbiter.schemas import Archetype, ArchetypeColor, RuleSet


def make_archetype(
    archetype_id: str,
    domains: Optional[dict[DomainKey, Bucket]] = None,
    clusters: Optional[dict] = None,
) -> Archetype:
    """Build an archetype with only the rules a test cares about."""
    return Archetype(
        id=archetype_id,
        gz=f"The {archetype_id.title()}",
        color=ArchetypeColor(name="Grey", hex="#808080"),
        rules=RuleSet(domains=domains or {}, facet_clusters=clusters or {}),
    )


async def first_choice(probe) -> str:
    """Always pick the first (left) option."""
    return probe.option_ids()[0]


async def last_choice(probe) -> str:
    """Always pick the last (right) option."""
    return probe.option_ids()[-1]


async def invalid_choice(probe) -> str:
    """Answer with an id that is never on offer."""
    return "not-an-archetype"


class RecordingAsker:
    """Pick the first option and keep every probe seen."""

    def __init__(self):
        self.probes = []

    async def __call__(self, probe) -> str:
        self.probes.append(probe)
        return probe.option_ids()[0]

"""Engine configuration and enums."""

import os
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Protocol

from pydantic import BaseModel, Field, model_validator

if TYPE_CHECKING:
    from arbiter.schemas import BinaryProbe, TriadProbe

DEFAULT_CATALOG_PATH = Path(__file__).parent / "catalog" / "rules.json"


class Bucket(str, Enum):
    """Coarse three-way quantization of a trait score."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _BUCKET_RANK[self]


_BUCKET_RANK = {Bucket.LOW: 0, Bucket.MEDIUM: 1, Bucket.HIGH: 2}


class DomainKey(str, Enum):
    """Big-Five personality domains."""

    O = "O"
    C = "C"
    E = "E"
    A = "A"
    N = "N"

    @property
    def label(self) -> str:
        return _DOMAIN_LABELS[self]


_DOMAIN_LABELS = {
    DomainKey.O: "Openness",
    DomainKey.C: "Conscientiousness",
    DomainKey.E: "Extraversion",
    DomainKey.A: "Agreeableness",
    DomainKey.N: "Neuroticism",
}

# Canonical iteration order for every per-domain computation
DOMAIN_ORDER: tuple[DomainKey, ...] = tuple(DomainKey)


class TournamentMode(str, Enum):
    """Tie-break tournament structure."""

    TRIAD_ROUNDS = "triad_rounds_ko"
    BINARY_BRACKETS = "binary_brackets_4"


class BracketPolicy(str, Enum):
    """How the binary bracket handles an odd pool."""

    WILDCARD = "wildcard"
    BYE_ON_THREE = "bye_on_three"


class ProbeStage(str, Enum):
    """Bracket stage a binary probe belongs to."""

    PAIR = "pair"
    FINAL = "final"


class Presentation(str, Enum):
    """Rendering hint for the presentation layer."""

    IMAGE_PAIR = "image_pair"
    BINARY = "binary"


class TemplateFamily(str, Enum):
    """Origin of a binary comparison template."""

    DOMAIN = "domain"
    LEADERSHIP = "leadership"
    PROBLEM_SOLVING = "problem_solving"
    ARCHETYPE = "archetype"


class Asker(Protocol):
    """Protocol for the presentation layer that answers probes.

    Implementations must:
    - Present the probe to whoever is making the choice
    - Resolve with one of the option ids carried by the probe
    - Not mutate the probe
    """

    async def __call__(self, probe: "TriadProbe | BinaryProbe") -> str:
        """Answer a probe.

        Args:
            probe: Triad or binary probe to present

        Returns:
            The chosen archetype id. An id outside the probe's options is
            tolerated; the engine falls back to the first option.
        """
        ...


class EngineConfig(BaseModel):
    """Configuration for the Arbiter engine."""

    catalog_path: Optional[Path] = Field(
        default=None,
        description="Rule catalog JSON. Falls back to ARBITER_CATALOG, then the packaged catalog.",
    )
    observability: bool = False
    min_candidates: int = Field(
        default=4,
        ge=1,
        description="Pool size the candidate filter backfills up to",
    )

    # Tie layer overrides; None keeps the catalog's own setting
    mode: Optional[TournamentMode] = None
    bracket_policy: Optional[BracketPolicy] = None
    max_rounds: Optional[int] = Field(default=None, ge=1)

    @model_validator(mode="after")
    def resolve_catalog_path(self) -> "EngineConfig":
        """Resolve the catalog path from explicit value, ARBITER_CATALOG, or the packaged default."""
        path = self.catalog_path
        if path is None:
            env_path = os.environ.get("ARBITER_CATALOG")
            path = Path(env_path) if env_path and env_path.strip() else DEFAULT_CATALOG_PATH
        if not path.is_file():
            raise ValueError(f"catalog_path does not point to a file: {path}")
        object.__setattr__(self, "catalog_path", path)
        return self

"""Data structures for Arbiter (frozen schema)."""

from collections.abc import Mapping
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from arbiter.config import (
    BracketPolicy,
    Bucket,
    DomainKey,
    Presentation,
    ProbeStage,
    TemplateFamily,
    TournamentMode,
)

_FROZEN = {"frozen": True}
_CLUSTER = {"frozen": True, "extra": "forbid"}


# -----------------------------
# Trait model
# -----------------------------


class FacetRequirement(BaseModel):
    """A single (facet, bucket) pair inside a Require cluster."""

    model_config = _CLUSTER

    facet: str
    bucket: Bucket


class RequireCluster(BaseModel):
    """All listed facets must sit in the listed bucket."""

    model_config = _CLUSTER

    require: list[FacetRequirement] = Field(min_length=1)

    def facet_names(self) -> list[str]:
        return [r.facet for r in self.require]

    def matches(self, facets: Mapping[str, Bucket]) -> bool:
        return all(facets.get(r.facet) == r.bucket for r in self.require)


class MinHighCluster(BaseModel):
    """At least `min_high` of the named facets must be High."""

    model_config = _CLUSTER

    min_high: int = Field(ge=1)
    facets: list[str] = Field(min_length=1)

    @model_validator(mode="after")
    def check_reachable(self) -> "MinHighCluster":
        if self.min_high > len(self.facets):
            raise ValueError(
                f"min_high={self.min_high} exceeds the {len(self.facets)} named facets"
            )
        return self

    def facet_names(self) -> list[str]:
        return list(self.facets)

    def matches(self, facets: Mapping[str, Bucket]) -> bool:
        highs = sum(1 for f in self.facets if facets.get(f) == Bucket.HIGH)
        return highs >= self.min_high


class AnyHighCluster(BaseModel):
    """At least one named facet must be High."""

    model_config = _CLUSTER

    any_high: list[str] = Field(min_length=1)

    def facet_names(self) -> list[str]:
        return list(self.any_high)

    def matches(self, facets: Mapping[str, Bucket]) -> bool:
        return any(facets.get(f) == Bucket.HIGH for f in self.any_high)


class AnyLowCluster(BaseModel):
    """At least one named facet must be Low."""

    model_config = _CLUSTER

    any_low: list[str] = Field(min_length=1)

    def facet_names(self) -> list[str]:
        return list(self.any_low)

    def matches(self, facets: Mapping[str, Bucket]) -> bool:
        return any(facets.get(f) == Bucket.LOW for f in self.any_low)


FacetCluster = Union[RequireCluster, MinHighCluster, AnyHighCluster, AnyLowCluster]


class RuleSet(BaseModel):
    """Per-domain bucket requirements and facet clusters of an archetype."""

    model_config = _FROZEN

    domains: dict[DomainKey, Bucket] = Field(default_factory=dict)
    facet_clusters: dict[DomainKey, FacetCluster] = Field(default_factory=dict)


class ArchetypeColor(BaseModel):
    model_config = _FROZEN

    name: str
    hex: str = Field(pattern=r"^#[0-9A-Fa-f]{6}$")


class Archetype(BaseModel):
    """A named personality profile class with its trait-matching rules."""

    model_config = _FROZEN

    id: str = Field(min_length=1)
    gz: str = Field(description="Display name shown in final-stage probes")
    color: ArchetypeColor
    rules: RuleSet = Field(default_factory=RuleSet)

    def required(self, domain: DomainKey) -> Optional[Bucket]:
        """Required bucket for a domain, or None when the rule leaves it open."""
        return self.rules.domains.get(domain)

    def cluster(self, domain: DomainKey) -> Optional[FacetCluster]:
        return self.rules.facet_clusters.get(domain)


class DomainSpec(BaseModel):
    model_config = _FROZEN

    label: str
    facets: list[str] = Field(min_length=1)


class BucketCutlines(BaseModel):
    """Raw-scale (1-5) cutlines turning a domain mean into a bucket."""

    model_config = _FROZEN

    low: float
    high: float


# -----------------------------
# Question templates
# -----------------------------


class TriadTemplate(BaseModel):
    """Curated triad question applying to an explicit set of archetypes."""

    model_config = _FROZEN

    id: str
    when_candidates_any: list[str] = Field(min_length=2)
    question: str
    hints: dict[str, str] = Field(default_factory=dict)


class TriadLibraryTemplate(BaseModel):
    """Role-framed triad question with authored labels for some archetypes."""

    model_config = _FROZEN

    id: str
    style: str = Field(description="leadership, problem_solving, relationship or work")
    question: str
    labels: dict[str, str] = Field(min_length=1)


class BinaryTemplate(BaseModel):
    """Comparison question along two named domain axes."""

    model_config = _FROZEN

    axis: str
    family: TemplateFamily = TemplateFamily.DOMAIN
    question: str
    left_bucket: DomainKey
    left_hint: str
    right_bucket: DomainKey
    right_hint: str


class PairTemplate(BaseModel):
    """Dilemma authored for one specific unordered archetype pair."""

    model_config = _FROZEN

    pair: tuple[str, str]
    question: str
    left: str = Field(description="Hint for pair[0]")
    right: str = Field(description="Hint for pair[1]")


class Fallbacks(BaseModel):
    model_config = _FROZEN

    triad_question: str


class TieLayer(BaseModel):
    """Tournament policy plus every question-template catalog."""

    model_config = _FROZEN

    version: str
    mode: TournamentMode = TournamentMode.TRIAD_ROUNDS
    group_size: int = Field(default=3, ge=2, le=3)
    bracket_policy: BracketPolicy = BracketPolicy.WILDCARD
    max_rounds: Optional[int] = Field(default=None, ge=1)
    triad_templates: list[TriadTemplate] = Field(default_factory=list)
    triad_library: list[TriadLibraryTemplate] = Field(default_factory=list)
    binary_templates: list[BinaryTemplate] = Field(default_factory=list)
    pair_templates: list[PairTemplate] = Field(default_factory=list)
    generic_hints: dict[str, str] = Field(default_factory=dict)
    fallbacks: Fallbacks


class RuleCatalog(BaseModel):
    """Static archetype rules and tie-break configuration."""

    model_config = _FROZEN

    version: str
    buckets: BucketCutlines
    domains: dict[DomainKey, DomainSpec] = Field(default_factory=dict)
    archetypes: list[Archetype] = Field(min_length=1)
    tie_layer: TieLayer

    def archetype_index(self) -> dict[str, Archetype]:
        """Map of archetype id to archetype, in catalog order."""
        return {a.id: a for a in self.archetypes}

    def archetype_ids(self) -> list[str]:
        return [a.id for a in self.archetypes]

    def bucket_for_mean(self, mean: float) -> Bucket:
        """Bucket a raw domain mean against the catalog cutlines."""
        if mean < self.buckets.low:
            return Bucket.LOW
        if mean >= self.buckets.high:
            return Bucket.HIGH
        return Bucket.MEDIUM

    def with_policy(
        self,
        mode: Optional[TournamentMode] = None,
        bracket_policy: Optional[BracketPolicy] = None,
        max_rounds: Optional[int] = None,
    ) -> "RuleCatalog":
        """Copy of the catalog with tie-layer policy overrides applied."""
        update = {}
        if mode is not None:
            update["mode"] = mode
        if bracket_policy is not None:
            update["bracket_policy"] = bracket_policy
        if max_rounds is not None:
            update["max_rounds"] = max_rounds
        if not update:
            return self
        return self.model_copy(
            update={"tie_layer": self.tie_layer.model_copy(update=update)}
        )


class UserProfile(BaseModel):
    """Bucketed trait profile produced by the assessment pipeline."""

    domain_mean: dict[DomainKey, float] = Field(default_factory=dict)
    facet_bucket: dict[DomainKey, dict[str, Bucket]] = Field(default_factory=dict)


# -----------------------------
# Probes
# -----------------------------


class ProbeOption(BaseModel):
    model_config = _FROZEN

    id: str
    label: str


class ProbeLineage(BaseModel):
    """Ids each side of a bracket match has advanced through."""

    model_config = _FROZEN

    left: list[str] = Field(default_factory=list)
    right: list[str] = Field(default_factory=list)


class ProbeHints(BaseModel):
    model_config = _FROZEN

    left: str
    right: str


class ProbeMeta(BaseModel):
    """Presentation metadata attached to bracket probes."""

    model_config = _FROZEN

    stage: ProbeStage
    present: Presentation
    lineage: ProbeLineage = Field(default_factory=ProbeLineage)
    hints: Optional[ProbeHints] = None


class TriadProbe(BaseModel):
    """Single-choice question over three archetypes."""

    model_config = _FROZEN

    type: Literal["single_choice"] = "single_choice"
    question: str
    options: list[ProbeOption] = Field(min_length=3, max_length=3)

    def option_ids(self) -> list[str]:
        return [o.id for o in self.options]

    def labels(self) -> list[str]:
        return [o.label for o in self.options]


class BinaryProbe(BaseModel):
    """Head-to-head question between two archetypes."""

    model_config = _FROZEN

    type: Literal["binary"] = "binary"
    question: str
    left: ProbeOption
    right: ProbeOption
    meta: Optional[ProbeMeta] = None

    def option_ids(self) -> list[str]:
        return [self.left.id, self.right.id]

    def labels(self) -> list[str]:
        return [self.left.label, self.right.label]


Probe = Annotated[Union[TriadProbe, BinaryProbe], Field(discriminator="type")]


class BinarySelection(BaseModel):
    """Output of the binary question selector."""

    model_config = _FROZEN

    question: str
    left: ProbeOption
    right: ProbeOption
    axis: str
    score: float


class TriadSelection(BaseModel):
    """Output of the triad question selector."""

    model_config = _FROZEN

    question: str
    labels: dict[str, str]
    template_id: str


# -----------------------------
# Results
# -----------------------------


class DecisionEntry(BaseModel):
    """One resolved probe in the decision trace."""

    model_config = _FROZEN

    question: str
    probe_type: str
    labels: list[str]
    chosen: str


class TournamentOutcome(BaseModel):
    """Winner and bookkeeping of one tournament run."""

    winner: str
    pool: list[str] = Field(description="Working pool after any wildcard padding")
    rounds: int = 0
    probes: int = 0


class ResolutionResult(BaseModel):
    """Result returned by Arbiter.resolve()."""

    winner: str
    candidates: list[str]
    probes_asked: int
    checksum: str
    trace: Optional[list[DecisionEntry]] = None

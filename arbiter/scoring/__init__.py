"""Trait-space scoring: divergence and candidate filtering."""

from arbiter.scoring.candidates import MIN_CANDIDATES, filter_candidates, matches_profile
from arbiter.scoring.divergence import divergence, group_divergence, largest_difference_axes

__all__ = [
    "MIN_CANDIDATES",
    "divergence",
    "filter_candidates",
    "group_divergence",
    "largest_difference_axes",
    "matches_profile",
]

"""Tie-break tournaments: group knockout and binary bracket."""

from arbiter.tournament.bracket import pad_with_wildcard, run_bracket
from arbiter.tournament.grouping import best_group, form_round_groups, pick_bye, pick_wildcard
from arbiter.tournament.knockout import run_knockout
from arbiter.tournament.resolver import EmptyCandidateSetError, resolve, run_tournament

__all__ = [
    "EmptyCandidateSetError",
    "best_group",
    "form_round_groups",
    "pad_with_wildcard",
    "pick_bye",
    "pick_wildcard",
    "resolve",
    "run_bracket",
    "run_knockout",
    "run_tournament",
]

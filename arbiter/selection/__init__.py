"""Comparison question selectors."""

from arbiter.selection.binary import NoApplicableTemplateError, select_binary
from arbiter.selection.triad import select_triad

__all__ = [
    "NoApplicableTemplateError",
    "select_binary",
    "select_triad",
]

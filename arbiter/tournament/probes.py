"""Probe construction and answer handling."""

import logging

from arbiter.config import Asker, Presentation, ProbeStage
from arbiter.schemas import (
    BinaryProbe,
    ProbeHints,
    ProbeLineage,
    ProbeMeta,
    ProbeOption,
    RuleCatalog,
    TriadProbe,
)
from arbiter.selection.binary import select_binary
from arbiter.selection.triad import select_triad

logger = logging.getLogger(__name__)


def binary_probe(id_a: str, id_b: str, catalog: RuleCatalog) -> BinaryProbe:
    """Head-to-head probe labelled with the selector's hints."""
    selection = select_binary(id_a, id_b, catalog)
    return BinaryProbe(
        question=selection.question,
        left=selection.left,
        right=selection.right,
    )


def triad_probe(ids: list[str], catalog: RuleCatalog) -> TriadProbe:
    selection = select_triad(ids, catalog)
    return TriadProbe(
        question=selection.question,
        options=[ProbeOption(id=i, label=selection.labels[i]) for i in ids],
    )


def _side_context(lineage: list[str], archetype_id: str) -> str:
    if len(lineage) > 1:
        return f"Winner of {' vs '.join(lineage)}"
    return archetype_id


def bracket_probe(
    id_a: str,
    id_b: str,
    stage: ProbeStage,
    lineage_a: list[str],
    lineage_b: list[str],
    catalog: RuleCatalog,
) -> BinaryProbe:
    """Bracket probe carrying stage, presentation, lineage and hints.

    Pair-stage labels are raw ids (the presentation layer maps them to
    imagery); final-stage labels are display names.
    """
    selection = select_binary(id_a, id_b, catalog)
    question = selection.question
    if len(lineage_a) > 1 or len(lineage_b) > 1:
        question = (
            f"{selection.question}\n\n"
            f"{_side_context(lineage_a, id_a)} vs {_side_context(lineage_b, id_b)}"
        )

    if stage == ProbeStage.PAIR:
        left_label, right_label = id_a, id_b
        present = Presentation.IMAGE_PAIR
    else:
        index = catalog.archetype_index()
        left_label, right_label = index[id_a].gz, index[id_b].gz
        present = Presentation.BINARY

    return BinaryProbe(
        question=question,
        left=ProbeOption(id=id_a, label=left_label),
        right=ProbeOption(id=id_b, label=right_label),
        meta=ProbeMeta(
            stage=stage,
            present=present,
            lineage=ProbeLineage(left=list(lineage_a), right=list(lineage_b)),
            hints=ProbeHints(left=selection.left.label, right=selection.right.label),
        ),
    )


async def ask_for_winner(ask: Asker, probe: TriadProbe | BinaryProbe, members: list[str]) -> str:
    """Await the asker and map its answer onto the group.

    An answer outside the group falls back to the group's first id.
    """
    pick = await ask(probe)
    if pick in members:
        return pick
    logger.warning(
        "Asker answered %r, not one of %s; advancing %s", pick, members, members[0]
    )
    return members[0]

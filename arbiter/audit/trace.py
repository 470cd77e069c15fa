"""Decision trace recording and run checksums."""

import hashlib
import json
from typing import Any

from arbiter.config import Asker
from arbiter.schemas import BinaryProbe, DecisionEntry, TriadProbe


def stable_dumps(obj: Any) -> str:
    """Key-sorted, compact JSON used as hash input."""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def run_checksum(
    catalog_version: str,
    candidates: list[str],
    winner: str,
    trace: list[DecisionEntry],
) -> str:
    """SHA-256 hex digest of a run's canonical payload."""
    payload = {
        "v": catalog_version,
        "candidates": candidates,
        "winner": winner,
        "trace": [entry.model_dump(mode="json") for entry in trace],
    }
    return hashlib.sha256(stable_dumps(payload).encode("utf-8")).hexdigest()


class TracingAsker:
    """Wrap an asker and record one DecisionEntry per answered probe.

    Entries are appended only after the wrapped asker returns, so the trace
    never holds a probe that was not resolved.
    """

    def __init__(self, ask: Asker):
        self._ask = ask
        self.entries: list[DecisionEntry] = []

    async def __call__(self, probe: TriadProbe | BinaryProbe) -> str:
        chosen = await self._ask(probe)
        self.entries.append(
            DecisionEntry(
                question=probe.question,
                probe_type=probe.type,
                labels=probe.labels(),
                chosen=chosen,
            )
        )
        return chosen

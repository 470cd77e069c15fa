"""Terminal front end for Arbiter.

A minimal interface that renders each probe as a numbered list and reads
the choice from stdin. It must not influence core architecture.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from arbiter import Arbiter, EngineConfig, ResolutionResult
from arbiter.catalog import CatalogError, UnknownArchetypeError
from arbiter.config import BracketPolicy, TournamentMode
from arbiter.schemas import BinaryProbe, TriadProbe, UserProfile
from arbiter.tournament import EmptyCandidateSetError

MODE_CHOICES = {"rounds": TournamentMode.TRIAD_ROUNDS, "brackets": TournamentMode.BINARY_BRACKETS}
POLICY_CHOICES = {"wildcard": BracketPolicy.WILDCARD, "bye": BracketPolicy.BYE_ON_THREE}


def _print_probe(probe: TriadProbe | BinaryProbe) -> None:
    """Print a probe with numbered options."""
    print("-" * 60)
    print(probe.question)
    print()
    if isinstance(probe, BinaryProbe) and probe.meta and probe.meta.hints:
        print(f"  1) {probe.left.label}  ({probe.meta.hints.left})")
        print(f"  2) {probe.right.label}  ({probe.meta.hints.right})")
    else:
        for n, label in enumerate(probe.labels(), start=1):
            print(f"  {n}) {label}")
    print()


async def _terminal_ask(probe: TriadProbe | BinaryProbe) -> str:
    """Ask on the terminal until a valid option number is entered."""
    _print_probe(probe)
    ids = probe.option_ids()
    while True:
        try:
            raw = input(f"Choose 1-{len(ids)}> ").strip()
        except EOFError:
            # No more input; the engine defaults to the first option
            print()
            return ""
        if raw.isdigit() and 1 <= int(raw) <= len(ids):
            return ids[int(raw) - 1]
        print(f"Enter a number between 1 and {len(ids)}")


def _print_result(result: ResolutionResult) -> None:
    print("=" * 60)
    print("RESULT")
    print("=" * 60)
    print(f"Candidates: {', '.join(result.candidates)}")
    print(f"Probes:     {result.probes_asked}")
    print(f"Winner:     {result.winner}")
    print(f"Checksum:   {result.checksum}")
    print()


def _print_trace(result: ResolutionResult) -> None:
    if not result.trace:
        return
    print("DECISION TRACE")
    for n, entry in enumerate(result.trace, start=1):
        question = entry.question.replace("\n", " ").strip()
        print(f"  {n}. [{entry.probe_type}] {question}")
        print(f"     options: {' | '.join(entry.labels)}")
        print(f"     chosen:  {entry.chosen}")
    print()


def _load_profile(path: Path) -> UserProfile:
    return UserProfile.model_validate(json.loads(path.read_text(encoding="utf-8")))


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Arbiter CLI - resolve archetype candidates through tie-break questions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "candidates",
        nargs="*",
        help="Candidate archetype ids (omit when using --profile)",
    )
    parser.add_argument(
        "--profile",
        type=Path,
        metavar="FILE",
        help="UserProfile JSON; candidates are derived by rule matching",
    )
    parser.add_argument("--catalog", type=Path, metavar="FILE", help="Rule catalog JSON")
    parser.add_argument("--mode", choices=sorted(MODE_CHOICES), help="Override tournament mode")
    parser.add_argument(
        "--bracket-policy",
        choices=sorted(POLICY_CHOICES),
        help="Override bracket policy for odd pools",
    )
    parser.add_argument("--trace", action="store_true", help="Print the decision trace")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    """Run one resolution on the terminal."""
    args = _parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        config = EngineConfig(
            catalog_path=args.catalog,
            observability=args.trace,
            mode=MODE_CHOICES.get(args.mode),
            bracket_policy=POLICY_CHOICES.get(args.bracket_policy),
        )
        engine = Arbiter(config=config)
    except (ValidationError, CatalogError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    candidates = list(args.candidates)
    if args.profile:
        try:
            candidates = engine.candidates_for(_load_profile(args.profile))
        except (OSError, ValueError) as e:
            print(f"Error: cannot read profile {args.profile}: {e}")
            sys.exit(1)
        print(f"Rule-matched candidates: {', '.join(candidates)}")

    print(f"Arbiter ({engine.catalog.version}, {engine.catalog.tie_layer.mode.value})")
    print()

    try:
        result = engine.resolve_sync(candidates, _terminal_ask)
    except (EmptyCandidateSetError, UnknownArchetypeError) as e:
        print(f"Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print()
        sys.exit(130)

    _print_result(result)
    _print_trace(result)


if __name__ == "__main__":
    main()

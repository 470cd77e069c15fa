"""Tests for the tie-break tournaments."""

import asyncio
import logging
import math

import pytest

from arbiter.catalog import UnknownArchetypeError
from arbiter.config import BracketPolicy, ProbeStage, TournamentMode
from arbiter.schemas import BinaryProbe, TriadProbe
from arbiter.scoring import divergence
from arbiter.tournament import (
    EmptyCandidateSetError,
    form_round_groups,
    pad_with_wildcard,
    pick_bye,
    pick_wildcard,
    resolve,
    run_tournament,
)
from tests.helpers import RecordingAsker, first_choice, invalid_choice, last_choice


def brackets(catalog, policy=BracketPolicy.WILDCARD):
    return catalog.with_policy(mode=TournamentMode.BINARY_BRACKETS, bracket_policy=policy)


class TestResolveContract:
    """Tests shared by both tournament modes."""

    @pytest.mark.asyncio
    async def test_single_candidate_asks_nothing(self, catalog, recorder):
        """One candidate wins without a single probe."""
        assert await resolve(["sovereign"], recorder, catalog) == "sovereign"
        assert recorder.probes == []

    @pytest.mark.asyncio
    async def test_duplicates_collapse(self, catalog, recorder):
        """Repeated ids count once."""
        outcome = await run_tournament(["rebel", "rebel"], recorder, catalog)

        assert outcome.winner == "rebel"
        assert outcome.pool == ["rebel"]
        assert recorder.probes == []

    @pytest.mark.asyncio
    async def test_empty_input_raises(self, catalog):
        with pytest.raises(EmptyCandidateSetError, match="No candidates"):
            await resolve([], first_choice, catalog)

    @pytest.mark.asyncio
    async def test_unknown_id_raises(self, catalog, recorder):
        with pytest.raises(UnknownArchetypeError):
            await resolve(["sovereign", "jester"], recorder, catalog)
        assert recorder.probes == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mode", list(TournamentMode))
    async def test_winner_is_a_member(self, catalog, mode):
        """Every mode returns an id from the (possibly padded) pool."""
        tuned = catalog.with_policy(mode=mode)
        ids = catalog.archetype_ids()
        for size in range(2, len(ids) + 1):
            outcome = await run_tournament(ids[:size], last_choice, tuned)
            assert outcome.winner in outcome.pool

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mode", list(TournamentMode))
    async def test_deterministic(self, catalog, mode):
        """Same candidates and answers give the same winner and probes."""
        tuned = catalog.with_policy(mode=mode)
        first, second = RecordingAsker(), RecordingAsker()

        a = await resolve(catalog.archetype_ids(), first, tuned)
        b = await resolve(catalog.archetype_ids(), second, tuned)

        assert a == b
        assert first.probes == second.probes

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mode", list(TournamentMode))
    async def test_invalid_answer_advances_first_option(self, catalog, mode, caplog):
        """An answer outside the group is logged and never raises."""
        tuned = catalog.with_policy(mode=mode)

        with caplog.at_level(logging.WARNING, logger="arbiter.tournament.probes"):
            winner = await resolve(["sovereign", "rebel"], invalid_choice, tuned)

        assert winner == "sovereign"
        assert "not-an-archetype" in caplog.text

    @pytest.mark.asyncio
    async def test_independent_resolutions_run_concurrently(self, catalog):
        """Resolutions share no state."""
        ids = catalog.archetype_ids()
        results = await asyncio.gather(
            resolve(ids, first_choice, catalog),
            resolve(ids, last_choice, catalog),
            resolve(ids, first_choice, catalog),
        )

        assert results[0] == results[2]
        assert results[0] == await resolve(ids, first_choice, catalog)
        assert results[1] == await resolve(ids, last_choice, catalog)


class TestRoundGrouping:
    """Tests for knockout round partitioning."""

    def test_groups_are_disjoint_and_complete(self, catalog):
        """No candidate appears twice in a round and none is dropped."""
        index = catalog.archetype_index()
        ids = catalog.archetype_ids()
        for size in range(1, len(ids) + 1):
            groups = form_round_groups(ids[:size], index)
            members = [i for g in groups for i in g]
            assert sorted(members) == sorted(ids[:size])
            assert len(members) == len(set(members))

    def test_pool_strictly_shrinks(self, catalog):
        """Every round with two or more candidates advances fewer."""
        index = catalog.archetype_index()
        ids = catalog.archetype_ids()
        for size in range(2, len(ids) + 1):
            assert len(form_round_groups(ids[:size], index)) < size

    def test_remainders(self, catalog):
        """Full triads first, then a pair or a bye."""
        index = catalog.archetype_index()
        ids = catalog.archetype_ids()

        assert [len(g) for g in form_round_groups(ids[:5], index)] == [3, 2]
        assert [len(g) for g in form_round_groups(ids[:7], index)] == [3, 3, 1]

    def test_binary_group_size(self, catalog):
        index = catalog.archetype_index()
        groups = form_round_groups(catalog.archetype_ids()[:5], index, group_size=2)

        assert [len(g) for g in groups] == [2, 2, 1]


class TestKnockout:
    """Tests for triad-round knockouts."""

    @pytest.mark.asyncio
    async def test_three_candidates_one_triad(self, catalog, recorder):
        outcome = await run_tournament(["sovereign", "rebel", "visionary"], recorder, catalog)

        assert outcome.winner == "sovereign"
        assert outcome.rounds == 1
        assert outcome.probes == 1
        assert isinstance(recorder.probes[0], TriadProbe)

    @pytest.mark.asyncio
    async def test_two_candidates_one_binary(self, catalog, recorder):
        outcome = await run_tournament(["sovereign", "seeker"], recorder, catalog)

        assert outcome.probes == 1
        probe = recorder.probes[0]
        assert isinstance(probe, BinaryProbe)
        assert probe.question == "As a leader, you naturally:"
        assert probe.meta is None

    @pytest.mark.asyncio
    async def test_round_count_bound(self, catalog):
        """Rounds stay within ceil(log2(n)) + 1."""
        ids = catalog.archetype_ids()
        for size in range(2, len(ids) + 1):
            recorder = RecordingAsker()
            outcome = await run_tournament(ids[:size], recorder, catalog)
            assert outcome.rounds <= math.ceil(math.log2(size)) + 1
            assert outcome.probes == len(recorder.probes)

    @pytest.mark.asyncio
    async def test_full_catalog_probe_count(self, catalog):
        """12 -> 4 triads -> triad plus bye -> final."""
        outcome = await run_tournament(catalog.archetype_ids(), first_choice, catalog)

        assert outcome.rounds == 3
        assert outcome.probes == 6

    @pytest.mark.asyncio
    async def test_round_cap_settles_by_ladder(self, catalog, recorder):
        """Reaching max_rounds with more than two left finishes with a ladder."""
        capped = catalog.with_policy(max_rounds=1)

        outcome = await run_tournament(catalog.archetype_ids(), recorder, capped)

        assert outcome.rounds == 2
        assert outcome.probes == 7
        assert all(isinstance(p, TriadProbe) for p in recorder.probes[:4])
        assert all(isinstance(p, BinaryProbe) for p in recorder.probes[4:])
        assert outcome.winner in catalog.archetype_ids()


class TestBracket:
    """Tests for binary brackets."""

    @pytest.mark.asyncio
    async def test_wildcard_pads_odd_pool(self, catalog, recorder):
        """Three candidates gain a wildcard and take three probes."""
        pool = ["sovereign", "rebel", "seeker"]
        outcome = await run_tournament(pool, recorder, brackets(catalog))

        assert len(outcome.pool) == 4
        assert outcome.pool[:3] == pool
        wildcard = outcome.pool[3]
        assert wildcard not in pool
        assert wildcard == pick_wildcard(pool, catalog)
        assert outcome.probes == 3
        assert outcome.winner == "sovereign"

    def test_wildcard_is_most_divergent(self, catalog):
        pool = ["sovereign", "rebel", "seeker"]
        index = catalog.archetype_index()
        outside = [a for a in catalog.archetypes if a.id not in pool]
        expected = max(
            outside, key=lambda a: sum(divergence(a, index[i]) for i in pool)
        ).id

        assert pad_with_wildcard(pool, catalog) == [*pool, expected]

    def test_no_wildcard_when_catalog_exhausted(self, catalog):
        """A pool holding the whole catalog cannot be padded."""
        small = catalog.model_copy(update={"archetypes": catalog.archetypes[:3]})
        pool = small.archetype_ids()

        assert pick_wildcard(pool, small) is None
        assert pad_with_wildcard(pool, small) == pool

    @pytest.mark.asyncio
    async def test_probe_stages_and_lineage(self, catalog, recorder):
        """Pair probes show ids; the final shows display names and lineage."""
        await run_tournament(["sovereign", "rebel", "seeker"], recorder, brackets(catalog))

        first, second, final = recorder.probes
        assert first.meta.stage == ProbeStage.PAIR
        assert first.labels() == ["sovereign", "rebel"]
        assert first.meta.hints.left == "Follow the rules anyway"
        assert second.meta.stage == ProbeStage.PAIR

        assert final.meta.stage == ProbeStage.FINAL
        assert final.option_ids() == ["sovereign", "seeker"]
        assert final.labels() == ["The Sovereign", "The Seeker"]
        assert final.meta.lineage.left == ["sovereign", "rebel"]
        assert "Winner of sovereign vs rebel" in final.question

    @pytest.mark.asyncio
    async def test_even_pool_needs_n_minus_one_probes(self, catalog):
        ids = catalog.archetype_ids()
        for size in (2, 4, 6, 12):
            outcome = await run_tournament(ids[:size], first_choice, brackets(catalog))
            assert outcome.probes == size - 1
            assert outcome.pool == ids[:size]

    @pytest.mark.asyncio
    async def test_bye_on_three(self, catalog, recorder):
        """A three-member pool plays a pair, then the bye meets the winner."""
        pool = ["sovereign", "rebel", "seeker"]
        tuned = brackets(catalog, BracketPolicy.BYE_ON_THREE)

        outcome = await run_tournament(pool, recorder, tuned)

        bye = pick_bye(pool, catalog.archetype_index())
        assert outcome.pool == pool
        assert outcome.probes == 2
        first, final = recorder.probes
        assert bye not in first.option_ids()
        assert first.meta.stage == ProbeStage.PAIR
        assert final.option_ids()[0] == bye
        assert final.meta.stage == ProbeStage.FINAL

    @pytest.mark.asyncio
    async def test_bye_on_three_larger_pool(self, catalog):
        """Five candidates: a pair and a bye slice, then the final."""
        ids = catalog.archetype_ids()[:5]
        tuned = brackets(catalog, BracketPolicy.BYE_ON_THREE)

        outcome = await run_tournament(ids, first_choice, tuned)

        assert outcome.pool == ids
        assert outcome.probes == 4

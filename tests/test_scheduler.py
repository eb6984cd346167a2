"""Tests for round-robin schedule generation."""

from collections import Counter
from itertools import combinations

import pytest

from matchday.core.scheduler import generate_round_robin, regenerate_schedule
from matchday.models.league import Division, Match, ScheduleOptions, Team


def _ids(n: int) -> list[str]:
    return [f"t-{i}" for i in range(n)]


def _pair(m: Match) -> frozenset[str]:
    return frozenset((m.home_id, m.away_id))


class TestSingleLeg:
    def test_4_teams_produces_3_rounds_of_2(self):
        matches = generate_round_robin(["A", "B", "C", "D"])
        rounds = Counter(m.round for m in matches)
        assert sorted(rounds) == [1, 2, 3]
        assert all(count == 2 for count in rounds.values())

    def test_4_teams_each_team_once_per_round(self):
        matches = generate_round_robin(["A", "B", "C", "D"])
        for r in (1, 2, 3):
            teams = [t for m in matches if m.round == r for t in (m.home_id, m.away_id)]
            assert sorted(teams) == ["A", "B", "C", "D"]

    @pytest.mark.parametrize("n", [2, 3, 4, 5, 6, 7, 8, 11, 12])
    def test_every_pair_meets_exactly_once(self, n: int):
        team_ids = _ids(n)
        matches = generate_round_robin(team_ids)
        pairs = Counter(_pair(m) for m in matches)
        assert len(matches) == n * (n - 1) // 2
        assert set(pairs) == {frozenset(p) for p in combinations(team_ids, 2)}
        assert all(count == 1 for count in pairs.values())

    @pytest.mark.parametrize("n", [2, 3, 4, 5, 8, 9])
    def test_each_team_plays_n_minus_1(self, n: int):
        matches = generate_round_robin(_ids(n))
        appearances = Counter(t for m in matches for t in (m.home_id, m.away_id))
        assert all(appearances[t] == n - 1 for t in _ids(n))

    def test_first_round_pairs_slot_i_with_mirror(self):
        matches = generate_round_robin(["A", "B", "C", "D", "E", "F"])
        first = [(m.home_id, m.away_id) for m in matches if m.round == 1]
        # Odd rounds host the first-listed slot
        assert first == [("A", "F"), ("B", "E"), ("C", "D")]

    def test_second_round_rotates_and_swaps_venue(self):
        matches = generate_round_robin(["A", "B", "C", "D", "E", "F"])
        second = [(m.home_id, m.away_id) for m in matches if m.round == 2]
        # Working list after one rotation: A F B C D E; even rounds host the second slot
        assert second == [("E", "A"), ("D", "F"), ("C", "B")]

    def test_anchor_alternates_home_and_away(self):
        matches = generate_round_robin(_ids(8))
        anchor_home = [m.home_id == "t-0" for m in matches if "t-0" in (m.home_id, m.away_id)]
        assert anchor_home == [True, False, True, False, True, False, True]

    def test_matches_start_unplayed(self):
        for m in generate_round_robin(_ids(6)):
            assert m.home_goals is None
            assert m.away_goals is None
            assert m.played_at is None
            assert not m.is_played

    def test_fresh_ids_per_call(self):
        first = {m.id for m in generate_round_robin(_ids(4))}
        second = {m.id for m in generate_round_robin(_ids(4))}
        assert len(first) == 6
        assert first.isdisjoint(second)


class TestOddTeams:
    @pytest.mark.parametrize("n", [3, 5, 7, 9])
    def test_rounds_have_one_idle_team(self, n: int):
        matches = generate_round_robin(_ids(n))
        rounds = Counter(m.round for m in matches)
        # n + 1 slots -> n rounds
        assert sorted(rounds) == list(range(1, n + 1))
        assert all(count == (n - 1) // 2 for count in rounds.values())

    @pytest.mark.parametrize("n", [3, 5, 7])
    def test_each_team_idle_exactly_once(self, n: int):
        team_ids = _ids(n)
        matches = generate_round_robin(team_ids)
        idle = Counter()
        for r in range(1, n + 1):
            playing = {t for m in matches if m.round == r for t in (m.home_id, m.away_id)}
            for t in set(team_ids) - playing:
                idle[t] += 1
        assert idle == Counter({t: 1 for t in team_ids})


class TestEdgeCases:
    @pytest.mark.parametrize("team_ids", [[], ["solo"]])
    def test_fewer_than_two_teams_is_empty(self, team_ids: list[str]):
        assert generate_round_robin(team_ids) == []
        assert generate_round_robin(team_ids, ScheduleOptions(double_round=True)) == []

    def test_two_teams_one_fixture(self):
        matches = generate_round_robin(["A", "B"])
        assert [(m.round, m.home_id, m.away_id) for m in matches] == [(1, "A", "B")]


class TestDoubleRound:
    def test_second_leg_offsets_rounds(self):
        opts = ScheduleOptions(double_round=True, swap_home_away=True)
        matches = generate_round_robin(_ids(4), opts)
        assert len(matches) == 12
        assert sorted({m.round for m in matches}) == [1, 2, 3, 4, 5, 6]

    def test_second_leg_replays_pairings(self):
        opts = ScheduleOptions(double_round=True, swap_home_away=True)
        matches = generate_round_robin(_ids(6), opts)
        legs = 5
        for r in range(1, legs + 1):
            first = {_pair(m) for m in matches if m.round == r}
            second = {_pair(m) for m in matches if m.round == r + legs}
            assert first == second

    def test_swap_inverts_venues(self):
        opts = ScheduleOptions(double_round=True, swap_home_away=True)
        matches = generate_round_robin(_ids(4), opts)
        first = {(m.home_id, m.away_id) for m in matches if m.round <= 3}
        second = {(m.away_id, m.home_id) for m in matches if m.round > 3}
        assert first == second

    def test_without_swap_repeats_venues(self):
        opts = ScheduleOptions(double_round=True, swap_home_away=False)
        matches = generate_round_robin(_ids(4), opts)
        first = [(m.round, m.home_id, m.away_id) for m in matches if m.round <= 3]
        second = [(m.round - 3, m.home_id, m.away_id) for m in matches if m.round > 3]
        assert first == second

    @pytest.mark.parametrize("n", [4, 5])
    def test_each_pair_meets_once_per_leg(self, n: int):
        opts = ScheduleOptions(double_round=True)
        matches = generate_round_robin(_ids(n), opts)
        pairs = Counter(_pair(m) for m in matches)
        assert len(pairs) == n * (n - 1) // 2
        assert all(count == 2 for count in pairs.values())

    def test_odd_double_round_offset(self):
        opts = ScheduleOptions(double_round=True)
        matches = generate_round_robin(_ids(5), opts)
        assert max(m.round for m in matches) == 10


class TestRegenerateSchedule:
    def _division(self) -> Division:
        return Division(name="Div.1", teams=[Team(id=t, name=t) for t in _ids(4)])

    def test_fills_empty_division(self):
        division = self._division()
        matches = regenerate_schedule(division)
        assert len(matches) == 6
        assert division.matches is matches

    def test_refuses_to_discard_results(self):
        division = self._division()
        regenerate_schedule(division)
        division.matches[0].home_goals = 1
        division.matches[0].away_goals = 0
        with pytest.raises(ValueError, match="recorded results"):
            regenerate_schedule(division)
        assert division.matches[0].home_goals == 1

    def test_confirmed_discard_replaces_everything(self):
        division = self._division()
        regenerate_schedule(division)
        old_ids = {m.id for m in division.matches}
        division.matches[0].home_goals = 1
        division.matches[0].away_goals = 0
        division.last_rank_map = {"t-0": 1}

        regenerate_schedule(division, ScheduleOptions(double_round=True), confirm_discard=True)

        assert len(division.matches) == 12
        assert old_ids.isdisjoint({m.id for m in division.matches})
        assert not division.has_results()
        assert division.last_rank_map == {}

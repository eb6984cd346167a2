"""Tests for standings computation."""

from datetime import datetime

import pytest
from conftest import T0, make_teams, played

from matchday.core.standings import compute_table, result_entered_at
from matchday.models.league import Match


def _by_id(table):
    return {s.team_id: s for s in table}


class TestBasicTable:
    def test_single_win(self):
        teams = make_teams("A", "B")
        table = compute_table(teams, [played(1, "a", "b", 3, 1)])

        a, b = table
        assert (a.team_id, a.rank, a.points, a.played) == ("a", 1, 3, 1)
        assert (a.wins, a.draws, a.losses) == (1, 0, 0)
        assert (a.goals_for, a.goals_against, a.goal_difference) == (3, 1, 2)
        assert a.form == ["win"]

        assert (b.team_id, b.rank, b.points, b.played) == ("b", 2, 0, 1)
        assert (b.wins, b.draws, b.losses) == (0, 0, 1)
        assert b.goal_difference == -2
        assert b.form == ["loss"]

    def test_draw_gives_one_point_each(self):
        table = compute_table(make_teams("A", "B"), [played(1, "a", "b", 2, 2)])
        assert [s.points for s in table] == [1, 1]
        assert all(s.draws == 1 and s.form == ["draw"] for s in table)

    def test_away_win(self):
        table = compute_table(make_teams("A", "B"), [played(1, "a", "b", 0, 2)])
        assert table[0].team_id == "b"
        assert table[0].wins == 1
        assert table[1].losses == 1

    def test_unplayed_matches_ignored(self, division):
        table = _by_id(compute_table(division.teams, division.matches))
        assert table["alpha"].played == 1
        assert table["charlie"].played == 1
        assert sum(s.played for s in table.values()) == 4

    def test_team_without_matches_listed_with_zeros(self):
        table = compute_table(make_teams("A", "B", "C"), [played(1, "a", "b", 1, 0)])
        c = _by_id(table)["c"]
        assert (c.played, c.points, c.goal_difference, c.form) == (0, 0, 0, [])
        assert c.rank == 3

    def test_no_teams(self):
        assert compute_table([], []) == []


class TestInvariants:
    @pytest.fixture
    def results(self):
        return [
            played(1, "a", "b", 2, 1),
            played(1, "c", "d", 1, 1),
            played(2, "a", "c", 0, 3),
            played(2, "b", "d", 4, 0),
            played(3, "a", "d", 2, 2),
            played(3, "b", "c", 1, 0),
        ]

    def test_points_formula(self, results):
        for s in compute_table(make_teams("A", "B", "C", "D"), results):
            assert s.points == 3 * s.wins + s.draws
            assert s.played == s.wins + s.draws + s.losses
            assert s.goal_difference == s.goals_for - s.goals_against

    def test_played_sums_to_twice_matches(self, results):
        table = compute_table(make_teams("A", "B", "C", "D"), results)
        assert sum(s.played for s in table) == 2 * len(results)
        assert sum(s.goal_difference for s in table) == 0

    def test_ranks_are_strict_and_contiguous(self, results):
        table = compute_table(make_teams("A", "B", "C", "D"), results)
        assert [s.rank for s in table] == [1, 2, 3, 4]

    def test_idempotent(self, results):
        teams = make_teams("A", "B", "C", "D")
        first = compute_table(teams, results)
        second = compute_table(teams, results)
        assert [s.model_dump() for s in first] == [s.model_dump() for s in second]

    def test_input_order_does_not_matter(self, results):
        teams = make_teams("A", "B", "C", "D")
        forward = compute_table(teams, results)
        backward = compute_table(list(reversed(teams)), list(reversed(results)))
        assert [s.model_dump() for s in forward] == [s.model_dump() for s in backward]


class TestOrdering:
    def test_goal_difference_breaks_points_tie(self):
        teams = make_teams("A", "B", "C", "D")
        table = compute_table(
            teams,
            [played(1, "a", "c", 1, 0), played(1, "b", "d", 5, 0)],
        )
        assert [s.team_id for s in table[:2]] == ["b", "a"]

    def test_goals_for_breaks_difference_tie(self):
        teams = make_teams("A", "B", "C", "D")
        table = compute_table(
            teams,
            [played(1, "a", "c", 1, 0), played(1, "b", "d", 3, 2)],
        )
        assert [s.team_id for s in table[:2]] == ["b", "a"]

    def test_name_breaks_full_tie(self):
        teams = make_teams("Zulu", "alpha", "Mike")
        table = compute_table(teams, [])
        assert [s.team_name for s in table] == ["alpha", "Mike", "Zulu"]
        assert [s.rank for s in table] == [1, 2, 3]

    def test_level_teams_still_get_distinct_ranks(self):
        teams = make_teams("A", "B")
        table = compute_table(teams, [played(1, "a", "b", 1, 1)])
        assert [(s.team_id, s.rank) for s in table] == [("a", 1), ("b", 2)]


class TestForm:
    def test_newest_first(self):
        teams = make_teams("A", "B", "C")
        matches = [
            played(1, "a", "b", 1, 0),
            played(2, "a", "c", 0, 0),
            played(3, "b", "a", 2, 0),
        ]
        assert _by_id(compute_table(teams, matches))["a"].form == ["loss", "draw", "win"]

    def test_capped_at_five(self):
        teams = make_teams("A", "B")
        matches = [played(r, "a", "b", 1, 0) for r in range(1, 7)]
        matches.append(played(7, "a", "b", 0, 1))
        a = _by_id(compute_table(teams, matches))["a"]
        assert a.played == 7
        assert a.form == ["loss", "win", "win", "win", "win"]

    def test_follows_entry_time_not_round(self):
        teams = make_teams("A", "B", "C")
        matches = [
            # Round 2 entered before round 1
            played(1, "a", "b", 1, 0, minutes=30),
            played(2, "a", "c", 0, 1, minutes=10),
        ]
        assert _by_id(compute_table(teams, matches))["a"].form == ["win", "loss"]

    def test_missing_entry_time_sorts_first(self):
        teams = make_teams("A", "B", "C")
        undated = Match(round=5, home_id="a", away_id="c", home_goals=0, away_goals=2)
        matches = [played(1, "a", "b", 1, 0), undated]
        assert _by_id(compute_table(teams, matches))["a"].form == ["win", "loss"]

    def test_same_entry_time_falls_back_to_round(self):
        teams = make_teams("A", "B", "C")
        matches = [
            played(2, "a", "c", 0, 1, minutes=5),
            played(1, "a", "b", 1, 0, minutes=5),
        ]
        assert _by_id(compute_table(teams, matches))["a"].form == ["loss", "win"]

    def test_naive_entry_time_is_utc(self):
        naive = Match(
            round=1,
            home_id="a",
            away_id="b",
            home_goals=1,
            away_goals=0,
            played_at=datetime(2026, 4, 1, 12, 0),
        )
        assert result_entered_at(naive) == T0


class TestBadInput:
    def test_orphaned_match_skipped(self):
        teams = make_teams("A", "B")
        matches = [played(1, "a", "b", 1, 0), played(1, "a", "ghost", 9, 0)]
        a = _by_id(compute_table(teams, matches))["a"]
        assert a.played == 1
        assert a.goals_for == 1

    def test_malformed_score_treated_as_unplayed(self, caplog):
        teams = make_teams("A", "B")
        half = Match(round=1, home_id="a", away_id="b", home_goals=2)
        table = compute_table(teams, [half])
        assert all(s.played == 0 for s in table)
        assert "malformed_score" in caplog.text

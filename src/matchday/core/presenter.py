"""Presentation composition -- everything a table or fixture view needs.

Combines the computed table with rank movement and rank bands in one pass.
Nothing is formatted or localized here; that is the renderer's job.

The rank cache is owned by the caller: ``present_standings`` only reads
``division.last_rank_map`` and ``commit_rank_map`` writes it, typically right
after the view has been shown.

Usage:
    view = present_standings(division)
    render(view)
    commit_rank_map(division, view)
"""

from __future__ import annotations

from collections.abc import Iterable

from matchday.core.bands import classify_rank
from matchday.core.movement import classify_movements
from matchday.core.standings import compute_table, result_entered_at
from matchday.models.league import Division, Match
from matchday.models.standings import StandingsRow, StandingsView


def present_standings(division: Division) -> StandingsView:
    """Compute the division table decorated with movement and band."""
    table = compute_table(division.teams, division.matches)
    movements = classify_movements(division.last_rank_map, table)
    rows = [
        StandingsRow(
            standing=s,
            movement=movements[s.team_id],
            band=classify_rank(division.rank_colors, s.rank),
        )
        for s in table
    ]
    return StandingsView(division_id=division.id, division_name=division.name, rows=rows)


def commit_rank_map(division: Division, view: StandingsView) -> dict[str, int]:
    """Store the view's ranks as the baseline for the next movement diff."""
    division.last_rank_map = view.rank_map()
    return division.last_rank_map


def max_round(division: Division) -> int:
    """Highest round number in the division, at least 1."""
    return max((m.round for m in division.matches), default=1)


def fixtures_for_round(division: Division, round_number: int) -> list[Match]:
    return [m for m in division.matches if m.round == round_number]


def latest_results(division: Division, limit: int = 8) -> list[Match]:
    """Played matches, most recently entered first.  A limit below 1 yields none."""
    played = [m for m in division.matches if m.is_played]
    played.sort(key=lambda m: (result_entered_at(m), m.round), reverse=True)
    return played[: max(limit, 0)]


def team_fixtures(matches: Iterable[Match], team_id: str) -> list[Match]:
    """All of a team's fixtures in round order."""
    return sorted((m for m in matches if m.involves(team_id)), key=lambda m: m.round)

"""Rank movement -- compare a fresh table with the previous rank baseline.

This is a pure diff.  Persisting the new baseline is up to the caller
(see ``matchday.core.presenter.commit_rank_map``).
"""

from __future__ import annotations

from collections.abc import Mapping

from matchday.models.standings import MovementDirection, RankMovement, TeamStanding


def rank_map(table: list[TeamStanding]) -> dict[str, int]:
    """Team id -> rank, ready to be stored as the next baseline."""
    return {s.team_id: s.rank for s in table}


def classify_movement(previous_rank: int | None, current_rank: int) -> RankMovement:
    if previous_rank is None:
        return RankMovement()
    if current_rank < previous_rank:
        return RankMovement(direction=MovementDirection.UP, delta=previous_rank - current_rank)
    if current_rank > previous_rank:
        return RankMovement(direction=MovementDirection.DOWN, delta=current_rank - previous_rank)
    return RankMovement(direction=MovementDirection.SAME, delta=0)


def classify_movements(
    previous_ranks: Mapping[str, int],
    table: list[TeamStanding],
) -> dict[str, RankMovement]:
    """Classify every team in ``table`` as up, down, or same.

    Teams missing from ``previous_ranks`` (new division, fresh season) are
    ``same`` with no delta.
    """
    return {s.team_id: classify_movement(previous_ranks.get(s.team_id), s.rank) for s in table}

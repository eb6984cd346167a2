"""Standings output types -- computed tables, movement, and presented rows.

These are derived values; nothing here is persisted except through
``SnapshotRow`` (see ``matchday.models.league``).
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field

from matchday.models.league import RankColorBand

FormToken = Literal["win", "draw", "loss"]


class TeamStanding(BaseModel):
    """One team's computed line in a table."""

    team_id: str
    team_name: str
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0
    form: list[FormToken] = Field(default_factory=list)  # newest first
    rank: int = 0

    @property
    def win_pct(self) -> float:
        return self.wins / self.played * 100 if self.played else 0.0


class MovementDirection(StrEnum):
    UP = "up"
    DOWN = "down"
    SAME = "same"


class RankMovement(BaseModel):
    """How a team's rank changed since the previous baseline.

    ``delta`` is the number of places moved, or None when there is no
    previous rank to compare against.
    """

    direction: MovementDirection = MovementDirection.SAME
    delta: int | None = None


class StandingsRow(BaseModel):
    """A table row decorated for display."""

    standing: TeamStanding
    movement: RankMovement
    band: RankColorBand | None = None


class StandingsView(BaseModel):
    """A division's table as presented, plus the rank map it implies."""

    division_id: str
    division_name: str
    rows: list[StandingsRow] = Field(default_factory=list)

    def rank_map(self) -> dict[str, int]:
        return {row.standing.team_id: row.standing.rank for row in self.rows}


class ClubSeasonRecord(BaseModel):
    """A club's record for one season, archived or live."""

    season_id: str
    season_name: str
    division_id: str
    division_name: str
    rank: int
    points: int
    played: int
    wins: int
    draws: int
    losses: int
    goals_for: int
    goals_against: int
    win_pct: float = 0.0
    archived: bool = True

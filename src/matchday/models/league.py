"""League, Season, Division, Team, and Match models.

The whole graph hangs off ``LeagueDocument``, which is what the document
store loads and saves wholesale.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, Field, model_validator

SCHEMA_VERSION = 1


def new_id() -> str:
    """Mint a fresh opaque identifier."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(UTC)


class Team(BaseModel):
    """A club. Its id is carried unchanged from season to season."""

    id: str = Field(default_factory=new_id)
    name: str
    logo: str | None = None
    comment: str = ""


class Match(BaseModel):
    """A fixture between two teams of one division.

    A match is played exactly when both goal counts are present.
    """

    id: str = Field(default_factory=new_id)
    round: int = Field(ge=1)
    home_id: str
    away_id: str
    home_goals: int | None = Field(default=None, ge=0)
    away_goals: int | None = Field(default=None, ge=0)
    played_at: datetime | None = None

    @model_validator(mode="after")
    def _distinct_sides(self) -> Match:
        if self.home_id == self.away_id:
            msg = f"Match {self.id} pairs team {self.home_id} with itself"
            raise ValueError(msg)
        return self

    @property
    def is_played(self) -> bool:
        return self.home_goals is not None and self.away_goals is not None

    @property
    def is_malformed(self) -> bool:
        """Exactly one of the two goal counts is present."""
        return (self.home_goals is None) != (self.away_goals is None)

    def involves(self, team_id: str) -> bool:
        return team_id in (self.home_id, self.away_id)


class RankColorBand(BaseModel):
    """A colored zone covering table positions ``rank_from``..``rank_to``."""

    rank_from: int = Field(ge=1)
    rank_to: int = Field(ge=1)
    color: str = "#ffffff"
    label: str = ""

    def contains(self, rank: int) -> bool:
        return self.rank_from <= rank <= self.rank_to


class Division(BaseModel):
    """One table within a season: its teams, fixtures, and rank zones."""

    id: str = Field(default_factory=new_id)
    name: str
    logo: str | None = None
    teams: list[Team] = Field(default_factory=list)
    matches: list[Match] = Field(default_factory=list)
    rank_colors: list[RankColorBand] = Field(default_factory=list)
    # Cache of the last presented ranks; only used to derive movement arrows.
    last_rank_map: dict[str, int] = Field(default_factory=dict)

    def team(self, team_id: str) -> Team | None:
        return next((t for t in self.teams if t.id == team_id), None)

    def has_results(self) -> bool:
        return any(m.is_played for m in self.matches)


class SnapshotRow(BaseModel):
    """One team's final line in an archived table."""

    team_id: str
    team_name: str
    rank: int
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0

    model_config = {"frozen": True}


class Snapshot(BaseModel):
    """Frozen standings and fixtures of a division at season close.

    Fields cannot be reassigned and the row and match sequences are tuples.
    The archived ``Match`` objects are deep copies owned by the snapshot;
    nothing in matchday edits them after the snapshot is taken.
    """

    season_id: str
    season_name: str
    division_id: str = ""
    division_name: str = ""
    saved_at: datetime = Field(default_factory=utcnow)
    rows: tuple[SnapshotRow, ...] = ()
    matches: tuple[Match, ...] = ()

    model_config = {"frozen": True}

    def row_for(self, team_id: str) -> SnapshotRow | None:
        return next((r for r in self.rows if r.team_id == team_id), None)


class Season(BaseModel):
    """A season of a league. ``ended_at`` is set once the season is closed."""

    id: str = Field(default_factory=new_id)
    name: str
    created_at: datetime = Field(default_factory=utcnow)
    ended_at: datetime | None = None
    divisions: list[Division] = Field(default_factory=list)
    # division id -> snapshots, oldest first
    history: dict[str, list[Snapshot]] = Field(default_factory=dict)

    @property
    def is_closed(self) -> bool:
        return self.ended_at is not None

    def division(self, division_id: str) -> Division | None:
        return next((d for d in self.divisions if d.id == division_id), None)


class League(BaseModel):
    """A competition. The last season is the current one by default."""

    id: str = Field(default_factory=new_id)
    name: str
    logo: str | None = None
    seasons: list[Season] = Field(default_factory=list)

    def season(self, season_id: str) -> Season | None:
        return next((s for s in self.seasons if s.id == season_id), None)

    @property
    def current_season(self) -> Season | None:
        return self.seasons[-1] if self.seasons else None


class LeagueDocument(BaseModel):
    """The complete persisted graph."""

    schema_version: int = SCHEMA_VERSION
    leagues: list[League] = Field(default_factory=list)

    @model_validator(mode="after")
    def _known_version(self) -> LeagueDocument:
        if self.schema_version != SCHEMA_VERSION:
            msg = f"Unsupported schema_version {self.schema_version} (expected {SCHEMA_VERSION})"
            raise ValueError(msg)
        return self

    def league(self, league_id: str) -> League | None:
        return next((lg for lg in self.leagues if lg.id == league_id), None)


class Selection(BaseModel):
    """Which league, season, division, and round a caller is looking at.

    Held by the caller and passed in explicitly; nothing in the core keeps it.
    """

    league_id: str | None = None
    season_id: str | None = None
    division_id: str | None = None
    round: int = Field(default=1, ge=1)


class ScheduleOptions(BaseModel):
    """Options for round-robin generation."""

    double_round: bool = False
    swap_home_away: bool = True

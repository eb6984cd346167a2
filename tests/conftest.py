"""Shared test fixtures."""

from datetime import UTC, datetime, timedelta

import pytest

from matchday.config import Settings
from matchday.models.league import Division, Match, Season, Team

T0 = datetime(2026, 4, 1, 12, 0, tzinfo=UTC)


def make_teams(*names: str) -> list[Team]:
    """Teams whose ids are their lower-cased names, for readable assertions."""
    return [Team(id=name.lower(), name=name) for name in names]


def played(
    round_number: int,
    home: str,
    away: str,
    home_goals: int,
    away_goals: int,
    minutes: int | None = None,
) -> Match:
    """A played match; ``minutes`` after T0 sets the entry time (default: by round)."""
    offset = minutes if minutes is not None else round_number * 60
    return Match(
        round=round_number,
        home_id=home,
        away_id=away,
        home_goals=home_goals,
        away_goals=away_goals,
        played_at=T0 + timedelta(minutes=offset),
    )


@pytest.fixture
def settings() -> Settings:
    """Test settings with an in-memory document."""
    return Settings(matchday_env="testing", matchday_document_path=":memory:")


@pytest.fixture
def division() -> Division:
    """Four teams, one round of results in."""
    return Division(
        id="div-1",
        name="Div.1",
        teams=make_teams("Alpha", "Bravo", "Charlie", "Delta"),
        matches=[
            played(1, "alpha", "bravo", 3, 1),
            played(1, "charlie", "delta", 0, 0),
            Match(round=2, home_id="alpha", away_id="charlie"),
            Match(round=2, home_id="bravo", away_id="delta"),
        ],
    )


@pytest.fixture
def season(division: Division) -> Season:
    return Season(id="season-1", name="Season 1", divisions=[division])

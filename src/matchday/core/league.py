"""League bookkeeping -- creating and pruning leagues, seasons, divisions, teams.

Also resolves a caller's ``Selection`` against a document and looks entities
up by id across the whole graph.  Lookups raise ``ValueError`` for unknown
ids; the API layer turns that into a 404.
"""

from __future__ import annotations

import logging

from matchday.core.bands import default_rank_colors
from matchday.core.presenter import max_round
from matchday.models.league import (
    Division,
    League,
    LeagueDocument,
    Match,
    Season,
    Selection,
    Team,
)

logger = logging.getLogger(__name__)

DEFAULT_TEAM_COUNT = 8
MIN_TEAMS = 2


def _default_teams(count: int) -> list[Team]:
    return [Team(name=f"Team{i + 1}") for i in range(count)]


def new_league(name: str, team_count: int = DEFAULT_TEAM_COUNT) -> League:
    """A league with one season, one division, and ``team_count`` teams."""
    division = Division(
        name="Div.1",
        teams=_default_teams(team_count),
        rank_colors=default_rank_colors(),
    )
    return League(name=name, seasons=[Season(name="Season 1", divisions=[division])])


def new_document(
    league_name: str = "League 1",
    team_count: int = DEFAULT_TEAM_COUNT,
) -> LeagueDocument:
    return LeagueDocument(leagues=[new_league(league_name, team_count)])


def add_league(document: LeagueDocument, team_count: int = DEFAULT_TEAM_COUNT) -> League:
    league = new_league(f"League {len(document.leagues) + 1}", team_count)
    league.seasons[0].divisions[0].rank_colors = []
    document.leagues.append(league)
    return league


def remove_league(document: LeagueDocument, league_id: str) -> None:
    if len(document.leagues) <= 1:
        raise ValueError("Cannot remove the last league")
    league = find_league(document, league_id)
    document.leagues.remove(league)


def remove_season(league: League, season_id: str) -> None:
    if len(league.seasons) <= 1:
        raise ValueError("Cannot remove the last season")
    season = league.season(season_id)
    if season is None:
        msg = f"Season {season_id} not found in league {league.id}"
        raise ValueError(msg)
    league.seasons.remove(season)


def add_division(season: Season) -> Division:
    division = Division(name=f"Div.{len(season.divisions) + 1}")
    season.divisions.append(division)
    return division


def remove_division(season: Season, division_id: str) -> None:
    if len(season.divisions) <= 1:
        raise ValueError("Cannot remove the last division")
    division = season.division(division_id)
    if division is None:
        msg = f"Division {division_id} not found in season {season.id}"
        raise ValueError(msg)
    season.divisions.remove(division)


def add_team(division: Division, name: str | None = None) -> Team:
    """Append a team.  The existing schedule does not include it until regenerated."""
    team = Team(name=name or f"Team{len(division.teams) + 1}")
    division.teams.append(team)
    return team


def remove_team(division: Division, team_id: str) -> None:
    """Remove a team and every fixture it takes part in.

    Raises:
        ValueError: If the team is unknown or the division would drop below
            two teams.
    """
    team = division.team(team_id)
    if team is None:
        msg = f"Team {team_id} not found in division {division.id}"
        raise ValueError(msg)
    if len(division.teams) <= MIN_TEAMS:
        msg = f"A division needs at least {MIN_TEAMS} teams"
        raise ValueError(msg)

    division.teams.remove(team)
    before = len(division.matches)
    division.matches = [m for m in division.matches if not m.involves(team_id)]
    division.last_rank_map.pop(team_id, None)
    logger.info(
        "team_removed division_id=%s team_id=%s matches_dropped=%d",
        division.id,
        team_id,
        before - len(division.matches),
    )


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def find_league(document: LeagueDocument, league_id: str) -> League:
    league = document.league(league_id)
    if league is None:
        msg = f"League {league_id} not found"
        raise ValueError(msg)
    return league


def find_season(document: LeagueDocument, season_id: str) -> tuple[League, Season]:
    for league in document.leagues:
        season = league.season(season_id)
        if season is not None:
            return league, season
    msg = f"Season {season_id} not found"
    raise ValueError(msg)


def find_division(document: LeagueDocument, division_id: str) -> tuple[League, Season, Division]:
    for league in document.leagues:
        for season in league.seasons:
            division = season.division(division_id)
            if division is not None:
                return league, season, division
    msg = f"Division {division_id} not found"
    raise ValueError(msg)


def find_match(document: LeagueDocument, match_id: str) -> tuple[Division, Match]:
    for league in document.leagues:
        for season in league.seasons:
            for division in season.divisions:
                for match in division.matches:
                    if match.id == match_id:
                        return division, match
    msg = f"Match {match_id} not found"
    raise ValueError(msg)


def resolve_selection(
    document: LeagueDocument,
    selection: Selection | None = None,
) -> tuple[League, Season, Division, Selection]:
    """Resolve a caller's selection, falling back where ids are stale.

    Unknown or missing ids fall back to the first league, its first season,
    and that season's first division.  The round is clamped to the
    division's rounds.

    Raises:
        ValueError: If the document has nothing to select.
    """
    selection = selection or Selection()
    if not document.leagues:
        raise ValueError("Document has no leagues")

    league = (selection.league_id and document.league(selection.league_id)) or document.leagues[0]
    if not league.seasons:
        msg = f"League {league.id} has no seasons"
        raise ValueError(msg)
    season = (selection.season_id and league.season(selection.season_id)) or league.seasons[0]
    if not season.divisions:
        msg = f"Season {season.id} has no divisions"
        raise ValueError(msg)
    division = (
        selection.division_id and season.division(selection.division_id)
    ) or season.divisions[0]

    last_round = max_round(division)
    resolved = Selection(
        league_id=league.id,
        season_id=season.id,
        division_id=division.id,
        round=min(selection.round, last_round),
    )
    return league, season, division, resolved

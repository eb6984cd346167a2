"""Team API endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from matchday.api.deps import DocumentDep, not_found
from matchday.core.league import find_league
from matchday.core.presenter import team_fixtures
from matchday.core.season import club_history, find_snapshot

router = APIRouter(prefix="/api/teams", tags=["teams"])


@router.get("/{team_id}/history")
async def get_team_history(
    team_id: str,
    league_id: str,
    document: DocumentDep,
    season_id: str | None = None,
) -> dict:
    """Season-by-season record of a club, archived seasons plus the live one."""
    try:
        league = find_league(document, league_id)
        records = club_history(league, team_id, season_id)
    except ValueError as exc:
        raise not_found(exc) from exc
    return {"data": [r.model_dump(mode="json") for r in records]}


@router.get("/{team_id}/seasons/{season_id}/matches")
async def get_team_season_matches(
    team_id: str,
    season_id: str,
    league_id: str,
    document: DocumentDep,
    division_id: str | None = None,
) -> dict:
    """Every fixture a club played in an archived season."""
    try:
        league = find_league(document, league_id)
    except ValueError as exc:
        raise not_found(exc) from exc

    snapshot = find_snapshot(league, season_id, division_id=division_id, team_id=team_id)
    if snapshot is None:
        raise not_found(ValueError(f"No archived matches for season {season_id}"))
    return {
        "data": {
            "season_name": snapshot.season_name,
            "division_name": snapshot.division_name,
            "matches": [
                m.model_dump(mode="json") for m in team_fixtures(snapshot.matches, team_id)
            ],
        },
    }

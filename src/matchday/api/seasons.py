"""Season management API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from matchday.api.deps import DocumentDep, StoreDep, not_found
from matchday.core.league import find_season
from matchday.core.season import close_season, list_snapshots, start_next_season

router = APIRouter(prefix="/api/seasons", tags=["seasons"])


@router.post("/{season_id}/close")
async def close_season_endpoint(season_id: str, store: StoreDep, force: bool = False) -> dict:
    """Close a season, archiving each division's final table and fixtures.

    A closed season is only closed again with ``force``; each closure
    appends a further set of snapshots.
    """
    async with store.lock:
        document = store.load()
        try:
            _, season = find_season(document, season_id)
        except ValueError as exc:
            raise not_found(exc) from exc
        if season.is_closed and not force:
            raise HTTPException(status_code=409, detail=f"Season {season.name} is already closed")

        close_season(season)
        await store.save_async(document)

    return {
        "data": {
            "id": season.id,
            "name": season.name,
            "ended_at": season.ended_at.isoformat(),
            "snapshots": {d.id: len(season.history.get(d.id, [])) for d in season.divisions},
        },
    }


@router.post("/{season_id}/next")
async def next_season_endpoint(season_id: str, store: StoreDep) -> dict:
    """Start the season after ``season_id``, carrying its teams forward."""
    async with store.lock:
        document = store.load()
        try:
            league, _ = find_season(document, season_id)
            new_season = start_next_season(league, season_id)
        except ValueError as exc:
            raise not_found(exc) from exc
        await store.save_async(document)

    return {
        "data": {
            "id": new_season.id,
            "league_id": league.id,
            "name": new_season.name,
            "divisions": [
                {"id": d.id, "name": d.name, "teams": len(d.teams)} for d in new_season.divisions
            ],
        },
    }


@router.get("/{season_id}/history")
async def season_history(season_id: str, document: DocumentDep) -> dict:
    """Archived snapshots of the season, grouped by division id."""
    try:
        _, season = find_season(document, season_id)
    except ValueError as exc:
        raise not_found(exc) from exc

    return {
        "data": {
            division_id: [s.model_dump(mode="json") for s in snapshots]
            for division_id, snapshots in list_snapshots(season)
        },
    }

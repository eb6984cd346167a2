"""Standings API endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from matchday.api.deps import DocumentDep, StoreDep, not_found
from matchday.core.league import find_division
from matchday.core.presenter import commit_rank_map, latest_results, present_standings

router = APIRouter(prefix="/api/divisions", tags=["standings"])


@router.get("/{division_id}/standings")
async def get_standings(division_id: str, document: DocumentDep) -> dict:
    """Get the division table with movement arrows and rank bands.

    Movement is measured against the stored rank baseline, which this
    endpoint does not update; POST ``/rank-cache`` once the table is shown.
    """
    try:
        _, _, division = find_division(document, division_id)
    except ValueError as exc:
        raise not_found(exc) from exc

    view = present_standings(division)
    return {"data": view.model_dump(mode="json")}


@router.post("/{division_id}/rank-cache")
async def commit_rank_cache(division_id: str, store: StoreDep) -> dict:
    """Store the division's current ranks as the next movement baseline."""
    async with store.lock:
        document = store.load()
        try:
            _, _, division = find_division(document, division_id)
        except ValueError as exc:
            raise not_found(exc) from exc
        ranks = commit_rank_map(division, present_standings(division))
        await store.save_async(document)
    return {"data": ranks}


@router.get("/{division_id}/results")
async def get_latest_results(
    division_id: str,
    document: DocumentDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 8,
) -> dict:
    """Most recently entered results of the division."""
    try:
        _, _, division = find_division(document, division_id)
    except ValueError as exc:
        raise not_found(exc) from exc
    return {"data": [m.model_dump(mode="json") for m in latest_results(division, limit)]}

"""Fixture API endpoints -- schedule generation and result entry."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from matchday.api.deps import DocumentDep, StoreDep, bad_request, not_found
from matchday.core.league import find_division, find_match
from matchday.core.presenter import fixtures_for_round, max_round
from matchday.core.results import clear_result, record_result
from matchday.core.scheduler import regenerate_schedule
from matchday.models.league import ScheduleOptions

router = APIRouter(prefix="/api", tags=["fixtures"])


class GenerateScheduleRequest(BaseModel):
    """Request body for (re)generating a division's schedule."""

    double_round: bool = False
    swap_home_away: bool = True
    confirm_discard: bool = False


class ResultRequest(BaseModel):
    home_goals: int = Field(ge=0)
    away_goals: int = Field(ge=0)


@router.get("/divisions/{division_id}/fixtures")
async def get_fixtures(division_id: str, document: DocumentDep, round: int | None = None) -> dict:
    """List the division's fixtures, optionally for a single round."""
    try:
        _, _, division = find_division(document, division_id)
    except ValueError as exc:
        raise not_found(exc) from exc

    matches = division.matches if round is None else fixtures_for_round(division, round)
    return {
        "data": [m.model_dump(mode="json") for m in matches],
        "rounds": max_round(division),
    }


@router.post("/divisions/{division_id}/schedule")
async def generate_schedule(
    division_id: str,
    body: GenerateScheduleRequest,
    store: StoreDep,
) -> dict:
    """Replace the division's fixtures with a new round-robin schedule.

    Recorded results are discarded along with the old fixtures, so a
    division with results requires ``confirm_discard``.
    """
    async with store.lock:
        document = store.load()
        try:
            _, _, division = find_division(document, division_id)
        except ValueError as exc:
            raise not_found(exc) from exc

        options = ScheduleOptions(
            double_round=body.double_round, swap_home_away=body.swap_home_away
        )
        try:
            matches = regenerate_schedule(division, options, confirm_discard=body.confirm_discard)
        except ValueError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        await store.save_async(document)

    if not matches:
        return {"data": [], "message": "At least 2 teams are needed to build a schedule"}
    return {"data": [m.model_dump(mode="json") for m in matches]}


@router.put("/matches/{match_id}/result")
async def put_result(match_id: str, body: ResultRequest, store: StoreDep) -> dict:
    """Record a match score."""
    async with store.lock:
        document = store.load()
        try:
            _, match = find_match(document, match_id)
        except ValueError as exc:
            raise not_found(exc) from exc
        try:
            record_result(match, body.home_goals, body.away_goals)
        except ValueError as exc:
            raise bad_request(exc) from exc
        await store.save_async(document)
    return {"data": match.model_dump(mode="json")}


@router.delete("/matches/{match_id}/result")
async def delete_result(match_id: str, store: StoreDep) -> dict:
    """Return a match to unplayed."""
    async with store.lock:
        document = store.load()
        try:
            _, match = find_match(document, match_id)
        except ValueError as exc:
            raise not_found(exc) from exc
        clear_result(match)
        await store.save_async(document)
    return {"data": match.model_dump(mode="json")}

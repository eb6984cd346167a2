"""FastAPI dependency injection for the document store."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from matchday.db.store import DocumentStore, DocumentValidationError
from matchday.models.league import LeagueDocument


async def get_store(request: Request) -> DocumentStore:
    """Get the document store from app state."""
    return request.app.state.store


async def get_document(store: Annotated[DocumentStore, Depends(get_store)]) -> LeagueDocument:
    """Load the current document, surfacing a corrupt store as a 500."""
    try:
        return store.load()
    except DocumentValidationError as exc:
        raise HTTPException(status_code=500, detail=f"Stored document is invalid: {exc}") from exc


StoreDep = Annotated[DocumentStore, Depends(get_store)]
DocumentDep = Annotated[LeagueDocument, Depends(get_document)]


def not_found(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(exc))


def bad_request(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=400, detail=str(exc))

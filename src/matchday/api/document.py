"""Whole-document load and replace endpoints."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body

from matchday.api.deps import DocumentDep, StoreDep, bad_request
from matchday.db.store import DocumentValidationError, parse_document

router = APIRouter(prefix="/api/document", tags=["document"])


@router.get("")
async def get_document(document: DocumentDep) -> dict:
    """Return the full league graph."""
    return {"data": document.model_dump(mode="json")}


@router.put("")
async def replace_document(store: StoreDep, body: Annotated[dict[str, Any], Body()]) -> dict:
    """Replace the full league graph.

    Accepts the current schema or a legacy v0 document, which is migrated.
    Nothing is stored if validation fails.
    """
    async with store.lock:
        try:
            document = parse_document(body)
        except DocumentValidationError as exc:
            raise bad_request(exc) from exc
        await store.save_async(document)
    return {"data": {"schema_version": document.schema_version, "leagues": len(document.leagues)}}

"""Document store -- load and save the whole league graph at once.

The store never writes part of a document: every save replaces the full
graph.  Three backends, picked from the configured path:

  - ``:memory:``      kept in process only (tests, demos)
  - ``*.yaml|*.yml``  YAML file
  - anything else     JSON file

Documents are validated against the versioned schema on load.  A document
without ``schema_version`` is the legacy browser-storage layout (v0) and is
migrated; anything else that does not fit the schema is rejected.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from matchday.core.league import DEFAULT_TEAM_COUNT, new_document
from matchday.models.league import LeagueDocument

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


class DocumentValidationError(ValueError):
    """A stored or submitted document does not match the expected shape."""


# ---------------------------------------------------------------------------
# Legacy (v0) migration
# ---------------------------------------------------------------------------


def _legacy_time(value: Any) -> datetime | None:
    """v0 stored epoch milliseconds (or null)."""
    if value in (None, "", 0):
        return None
    if isinstance(value, int | float):
        return datetime.fromtimestamp(value / 1000, UTC)
    return value


def _legacy_team(t: dict) -> dict:
    return {
        "id": t["id"],
        "name": t.get("name", ""),
        "logo": t.get("logoDataUrl") or None,
        "comment": t.get("comment") or "",
    }


def _legacy_match(m: dict) -> dict:
    return {
        "id": m["id"],
        "round": m.get("round") or 1,
        "home_id": m["homeId"],
        "away_id": m["awayId"],
        "home_goals": m.get("homeGoals"),
        "away_goals": m.get("awayGoals"),
        "played_at": _legacy_time(m.get("playedAt")),
    }


def _legacy_snapshot(s: dict, division_id: str, division_names: dict[str, str]) -> dict:
    return {
        "season_id": s["seasonId"],
        "season_name": s.get("seasonName", ""),
        "division_id": division_id,
        "division_name": division_names.get(division_id, ""),
        "saved_at": _legacy_time(s.get("savedAt")),
        "rows": [
            {
                "team_id": r["teamId"],
                "team_name": r.get("teamName", ""),
                "rank": r["rank"],
                "played": r.get("played", 0),
                "wins": r.get("w", 0),
                "draws": r.get("d", 0),
                "losses": r.get("l", 0),
                "goals_for": r.get("gf", 0),
                "goals_against": r.get("ga", 0),
                "goal_difference": r.get("gd", 0),
                "points": r.get("pts", 0),
            }
            for r in s.get("rows", [])
        ],
        "matches": [_legacy_match(m) for m in s.get("matches") or []],
    }


def _legacy_division(d: dict) -> dict:
    return {
        "id": d["id"],
        "name": d.get("name", ""),
        "logo": d.get("logoDataUrl") or None,
        "teams": [_legacy_team(t) for t in d.get("teams", [])],
        "matches": [_legacy_match(m) for m in d.get("matches", [])],
        "rank_colors": [
            {
                "rank_from": rc["from"],
                "rank_to": rc["to"],
                "color": rc.get("color") or "#ffffff",
                "label": rc.get("label") or "",
            }
            for rc in d.get("rankColors") or []
        ],
        "last_rank_map": d.get("lastRankMap") or {},
    }


def _legacy_season(s: dict) -> dict:
    division_names = {d["id"]: d.get("name", "") for d in s.get("divisions", [])}
    history = {
        division_id: [_legacy_snapshot(snap, division_id, division_names) for snap in snaps]
        for division_id, snaps in (s.get("history") or {}).items()
    }
    return {
        "id": s["id"],
        "name": s.get("name", ""),
        "created_at": _legacy_time(s.get("createdAt")),
        "ended_at": _legacy_time(s.get("endedAt")),
        "divisions": [_legacy_division(d) for d in s.get("divisions", [])],
        "history": history,
    }


def migrate_legacy(data: dict) -> dict:
    """Convert a v0 (camelCase, epoch-millisecond) document to the v1 layout.

    The v0 ``selected`` block is dropped: selection is held by callers now.

    Raises:
        DocumentValidationError: If the v0 document is missing required keys.
    """
    if not isinstance(data.get("leagues"), list):
        raise DocumentValidationError("Legacy document has no 'leagues' list")
    try:
        leagues = [
            {
                "id": lg["id"],
                "name": lg.get("name", ""),
                "logo": lg.get("logoDataUrl") or None,
                "seasons": [_legacy_season(s) for s in lg.get("seasons", [])],
            }
            for lg in data["leagues"]
        ]
    except (KeyError, TypeError, AttributeError) as exc:
        msg = f"Legacy document is malformed: {exc!r}"
        raise DocumentValidationError(msg) from exc

    migrated: dict[str, Any] = {"schema_version": 1, "leagues": leagues}
    # created_at defaults to "now" rather than null when v0 had no value
    for league in leagues:
        for season in league["seasons"]:
            if season["created_at"] is None:
                del season["created_at"]
    logger.info("document_migrated from_version=0 to_version=1 leagues=%d", len(leagues))
    return migrated


def parse_document(data: Any) -> LeagueDocument:
    """Validate raw data as a LeagueDocument, migrating v0 documents.

    Raises:
        DocumentValidationError: If the data cannot be read as a document.
    """
    if not isinstance(data, dict):
        msg = f"Expected a mapping at the document root, got {type(data).__name__}"
        raise DocumentValidationError(msg)
    if "schema_version" not in data:
        data = migrate_legacy(data)
    try:
        return LeagueDocument.model_validate(data)
    except ValidationError as exc:
        raise DocumentValidationError(str(exc)) from exc


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class DocumentStore:
    """Holds the current document and persists it wholesale.

    Mutations must be serialized by the caller; the HTTP layer does so with
    ``store.lock``.
    """

    def __init__(
        self,
        path: str | Path = MEMORY,
        default_team_count: int = DEFAULT_TEAM_COUNT,
    ) -> None:
        self.path = str(path)
        self.default_team_count = default_team_count
        self.lock = asyncio.Lock()
        self._document: LeagueDocument | None = None

    @property
    def in_memory(self) -> bool:
        return self.path == MEMORY

    @property
    def is_yaml(self) -> bool:
        return Path(self.path).suffix.lower() in (".yaml", ".yml")

    def _read(self) -> LeagueDocument:
        if self.in_memory or not Path(self.path).exists():
            logger.info("document_initialized path=%s", self.path)
            return new_document(team_count=self.default_team_count)

        with open(self.path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) if self.is_yaml else json.load(f)
            except (json.JSONDecodeError, yaml.YAMLError) as exc:
                msg = f"{self.path} is not readable: {exc}"
                raise DocumentValidationError(msg) from exc
        return parse_document(data)

    def load(self) -> LeagueDocument:
        """Return the current document, reading it on first use."""
        if self._document is None:
            self._document = self._read()
        return self._document

    def _serialize(self, document: LeagueDocument) -> str:
        if self.is_yaml:
            return yaml.dump(
                document.model_dump(mode="json"),
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )
        return document.model_dump_json(indent=2)

    def _write(self, text: str) -> None:
        target = Path(self.path)
        tmp = target.with_name(target.name + ".tmp")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(text, encoding="utf-8")
            os.replace(tmp, target)
        except OSError:
            if tmp.exists():
                tmp.unlink()
            raise

    def save(self, document: LeagueDocument | None = None) -> None:
        """Replace the stored document with ``document`` (default: current).

        Callers edit the loaded document in place, so a failed write also
        drops the cached copy: the next ``load`` rereads the last document
        that reached disk.

        Raises:
            OSError: If the file cannot be written.
        """
        document = document or self.load()
        if self.in_memory:
            self._document = document
            return

        try:
            text = self._serialize(document)
            self._write(text)
        except Exception:
            self._document = None
            logger.exception("document_save_failed path=%s", self.path)
            raise
        self._document = document
        logger.debug("document_saved path=%s bytes=%d", self.path, len(text))

    async def save_async(self, document: LeagueDocument | None = None) -> None:
        """``save`` on a worker thread, for request handlers."""
        await asyncio.to_thread(self.save, document)

"""FastAPI application factory."""

import logging

from fastapi import FastAPI

from matchday.api.document import router as document_router
from matchday.api.fixtures import router as fixtures_router
from matchday.api.seasons import router as seasons_router
from matchday.api.standings import router as standings_router
from matchday.api.teams import router as teams_router
from matchday.config import Settings
from matchday.db.store import DocumentStore

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, store: DocumentStore | None = None) -> FastAPI:
    """Create and configure the Matchday FastAPI application."""
    settings = settings or Settings()

    logging.basicConfig(
        level=getattr(logging, settings.matchday_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Matchday",
        version="0.1.0",
        description="Round-robin fixtures, standings, and season archives for a league",
        docs_url="/docs" if settings.matchday_env != "production" else None,
    )
    app.state.settings = settings
    app.state.store = store or DocumentStore(
        settings.matchday_document_path,
        default_team_count=settings.matchday_default_team_count,
    )
    logger.info(
        "app_created env=%s document_path=%s",
        settings.matchday_env,
        settings.matchday_document_path,
    )

    app.include_router(document_router)
    app.include_router(standings_router)
    app.include_router(fixtures_router)
    app.include_router(seasons_router)
    app.include_router(teams_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.matchday_env}

    return app


app = create_app()

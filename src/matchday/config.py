"""Application settings via pydantic-settings. Loads from environment and .env file."""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from matchday.db.store import MEMORY

VALID_ENVS = frozenset({"development", "testing", "production"})


class Settings(BaseSettings):
    """Matchday application configuration.

    All values can be overridden via environment variables or .env file.
    """

    # Environment
    matchday_env: str = "development"

    # Storage: a .json or .yaml path, or ":memory:"
    matchday_document_path: str = "matchday.json"

    # New leagues
    matchday_default_team_count: int = Field(default=8, ge=2, le=64)

    # Logging
    matchday_log_level: str = "INFO"

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def _check_env(self) -> Settings:
        """Reject unknown environments and a throwaway store in production."""
        if self.matchday_env not in VALID_ENVS:
            msg = f"MATCHDAY_ENV must be one of {sorted(VALID_ENVS)}, got {self.matchday_env!r}"
            raise ValueError(msg)
        if self.matchday_env == "production" and self.matchday_document_path == MEMORY:
            msg = (
                "MATCHDAY_DOCUMENT_PATH must point at a file in production; "
                "an in-memory document is lost on restart"
            )
            raise ValueError(msg)
        return self

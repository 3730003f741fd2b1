"""Application configuration."""

import logging
import os
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
_DEV_SESSION_SECRET = "macrolens-dev-secret"

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    environment: str = _ENVIRONMENT
    app_variant: Literal["nutrition", "planner"] = "nutrition"

    session_secret: str | None = None
    session_max_age_seconds: int = 24 * 60 * 60
    session_cookie_name: str = "macrolens_session"
    cookie_secure: bool = True
    cookie_samesite: Literal["lax", "strict", "none"] = "none"

    openai_api_key: str | None = None
    openai_model: str = "gpt-4.1-mini"
    openai_store: bool = False
    food_extraction_mode: Literal["schema", "free_text"] = "schema"
    planner_extraction_mode: Literal["schema", "free_text"] = "free_text"

    storage_backend: Literal["sqlite", "supabase"] = "sqlite"
    database_path: str = "macrolens.db"
    supabase_url: str | None = None
    supabase_service_key: str | None = None

    static_dir: str | None = None
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_required(self) -> "Settings":
        if self.is_production and not self.session_secret:
            raise ValueError("SESSION_SECRET must be set in production")
        if self.storage_backend == "supabase" and not (
            self.supabase_url and self.supabase_service_key
        ):
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required "
                "for the supabase storage backend"
            )
        return self

    @property
    def is_production(self) -> bool:
        """Return True when running a production deployment."""
        return self.environment.strip().lower() == "production"

    def resolved_session_secret(self) -> str:
        """Return the session secret, falling back to a dev value locally."""
        if self.session_secret:
            return self.session_secret
        logger.warning(
            "SESSION_SECRET is not set; using the development secret (%s)",
            self.environment,
        )
        return _DEV_SESSION_SECRET

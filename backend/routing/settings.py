from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

REPO_ROOT = Path(__file__).resolve().parents[2]
ENV_FILE = REPO_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE), env_file_encoding="utf-8", extra="ignore"
    )

    # console logs instead of JSON
    DEBUG: bool = False

    # CORS allow origins (comma-separated). Default empty (no cross-origin).
    CORS_ALLOW_ORIGINS: str = ""

    # Routing providers
    GOOGLE_MAPS_API_KEY: str = ""
    # Optional second key used only by the legacy directions provider
    GOOGLE_MAPS_API_KEY_ALTERNATE: str = ""
    ROUTES_API_URL: str = "https://routes.googleapis.com/directions/v2:computeRoutes"
    DIRECTIONS_API_URL: str = "https://maps.googleapis.com/maps/api/directions/json"
    ROUTE_LANGUAGE: str = "en"
    PROVIDER_TIMEOUT_SECONDS: float = 5.0
    PROVIDER_CONNECT_TIMEOUT_SECONDS: float = 2.0

    # Planar separation (degrees) below which origin/destination count as the same place
    MIN_SEPARATION_DEGREES: float = 0.001

    # Observability
    SENTRY_DSN: str | None = None
    SENTRY_ENVIRONMENT: str = "development"
    SENTRY_RELEASE: str | None = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.2

    @property
    def allow_origins(self) -> list[str]:
        s = (self.CORS_ALLOW_ORIGINS or "").strip()
        if s == "*":
            return ["*"]
        if s == "":
            return []
        return [part.strip() for part in s.split(",") if part.strip()]

    @property
    def legacy_api_key(self) -> str:
        return (self.GOOGLE_MAPS_API_KEY_ALTERNATE or "").strip() or self.GOOGLE_MAPS_API_KEY


settings = Settings()

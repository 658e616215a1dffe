"""Dependency providers and settings management."""

from functools import lru_cache
from typing import Optional

from fastapi import Depends
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .services.marketing_report import MarketingReportService


class Settings(BaseSettings):
    """Application settings loaded from environment or .env."""

    BACKEND_CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    # IANA zone used for the reference "today" when the caller sends none.
    # None = process local time.
    TIMEZONE: Optional[str] = None
    DEFAULT_PERIOD: str = "this_month"

    # Ranking / display
    DEFAULT_TOP_K: int = 5
    UNKNOWN_NAME_LABEL: str = "Unknown"
    UNSPECIFIED_REASON_LABEL: str = "Unspecified"
    RANK_REVENUE_ONLY_ENTITIES: bool = False

    # Telemetry
    SENTRY_DSN: Optional[str] = None
    ENVIRONMENT: str = "development"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("TIMEZONE", "SENTRY_DSN", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()  # type: ignore[call-arg]


def get_report_service(settings: Settings = Depends(get_settings)) -> MarketingReportService:
    """Report service configured from settings (cheap; built per request)."""
    return MarketingReportService.from_settings(settings)

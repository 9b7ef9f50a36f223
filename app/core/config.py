# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    DATABASE_URL: str = Field(default="sqlite:///./tracker.db")
    APP_NAME: str = "Tenant Tracker API"
    APP_DESC: str = "Multi-tenant issue tracking with tenant-scoped access control"
    APP_VERSION: str = "1.0.0"

    # Comma separated list of allowed origins
    CORS_ORIGINS: str = "http://localhost:5173"

    # Identity provider (bearer tokens)
    AUTH_JWT_SECRET: str = Field(default="dev-only-secret-change-me-please-0123456789")
    AUTH_JWT_ALGORITHM: str = "HS256"
    AUTH_JWT_TTL_MIN: int = 60

    LOG_LEVEL: str = "INFO"

    # Base URL used by the selection cascade client
    API_URL: str = "http://localhost:8000"
    API_TIMEOUT_S: float = 10.0

    # Pydantic v2 style config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]

"""Application configuration and settings management."""
from functools import lru_cache
from pathlib import Path
from typing import Annotated, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables or .env."""

    model_config = SettingsConfigDict(
        env_file=(Path(__file__).resolve().parent.parent / ".." / ".env"),
        env_file_encoding="utf-8",
        env_prefix="MEDIAHUB_",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = "MediaHub"
    environment: str = "development"
    secret_key: str = "mediahub-secret-key"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./mediahub.db"

    # Sessions
    session_ttl_minutes: int = 60 * 24
    session_cookie_name: str = "mediahub_session"
    session_cookie_secure: bool | None = None  # None follows the environment
    session_prune_enabled: bool = True
    session_prune_interval_seconds: int = 3600

    allowed_origins: Annotated[List[str], NoDecode] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Initial admin account, seeded on startup when a password is configured
    admin_username: str = "admin"
    admin_email: str = "admin@example.com"
    admin_password: str | None = None

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: List[str] | str) -> List[str]:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cookie_secure(self) -> bool:
        if self.session_cookie_secure is None:
            return self.is_production
        return self.session_cookie_secure

    @property
    def session_ttl_seconds(self) -> int:
        return self.session_ttl_minutes * 60


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings instance."""

    return Settings()

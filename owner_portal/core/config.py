"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the vendor clients and
the maintenance scripts share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Optional

import os

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class HostawaySettings(BaseSettings):
    """Credentials and transport options for the Hostaway REST API."""

    client_id: str = Field(..., validation_alias="HOSTAWAY_CLIENT_ID")
    client_secret: str = Field(..., validation_alias="HOSTAWAY_CLIENT_SECRET")
    base_url: AnyHttpUrl = Field(
        "https://api.hostaway.com/v1", validation_alias="HOSTAWAY_BASE_URL"
    )
    scope: str = Field("general", validation_alias="HOSTAWAY_SCOPE")
    timeout_seconds: float = Field(30.0, validation_alias="HOSTAWAY_TIMEOUT_SECONDS")
    token_safety_margin_seconds: int = Field(
        300,
        validation_alias="HOSTAWAY_TOKEN_SAFETY_MARGIN",
        description="Subtracted from the reported token lifetime to refresh early.",
    )

    @property
    def api_base(self) -> str:
        return str(self.base_url).rstrip("/")


class DatabaseSettings(BaseSettings):
    """Location of the local relational store."""

    path: str = Field("data/owner_portal.db", validation_alias="DATABASE_PATH")


class AuthSettings(BaseSettings):
    """Signed-token configuration for portal users."""

    jwt_secret: str = Field(..., validation_alias="JWT_SECRET")
    jwt_expiry_seconds: int = Field(86400, validation_alias="JWT_EXPIRY_SECONDS")
    jwt_algorithm: str = Field("HS256", validation_alias="JWT_ALGORITHM")


class FirebaseSettings(BaseSettings):
    """Push notification credentials."""

    credentials_path: Optional[str] = Field(
        None,
        validation_alias="FIREBASE_CREDENTIALS_PATH",
        description="Service account JSON. Notifications are only logged when unset.",
    )


class AirdnaSettings(BaseSettings):
    """Credentials for the Airdna Rentalizer income estimate scraper."""

    email: Optional[str] = Field(None, validation_alias="AIRDNA_EMAIL")
    password: Optional[str] = Field(None, validation_alias="AIRDNA_PASSWORD")
    login_url: str = Field(
        "https://app.airdna.co/data/login", validation_alias="AIRDNA_LOGIN_URL"
    )
    rentalizer_url: str = Field(
        "https://app.airdna.co/data/rentalizer", validation_alias="AIRDNA_RENTALIZER_URL"
    )
    timeout_seconds: float = Field(30.0, validation_alias="AIRDNA_TIMEOUT_SECONDS")

    @property
    def configured(self) -> bool:
        return bool(self.email and self.password)


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    port: int = Field(3001, validation_alias="PORT")
    frontend_build_dir: str = Field(
        "build",
        validation_alias="FRONTEND_BUILD_DIR",
        description="Directory holding the bundled front-end served for non-API paths.",
    )
    cors_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        ("http://localhost:3000",), validation_alias="CORS_ORIGINS"
    )
    internal_source_token: str = Field(
        "securestay.ai",
        validation_alias="INTERNAL_SOURCE_TOKEN",
        description="Expected x-internal-source header value on internal webhooks.",
    )
    hostaway: HostawaySettings = Field(default_factory=HostawaySettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    firebase: FirebaseSettings = Field(default_factory=FirebaseSettings)
    airdna: AirdnaSettings = Field(default_factory=AirdnaSettings)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | tuple[str, ...] | list[str]) -> tuple[str, ...]:
        """Support providing origins as a comma-separated string."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(value)
        return tuple(origin.strip() for origin in value.split(",") if origin.strip())

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AirdnaSettings",
    "AppSettings",
    "AuthSettings",
    "DatabaseSettings",
    "FirebaseSettings",
    "HostawaySettings",
    "get_settings",
]

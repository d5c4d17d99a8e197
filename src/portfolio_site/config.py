"""Application configuration."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
_ENV_FILES = (f".env.{_ENVIRONMENT}", ".env")


class Settings(BaseSettings):
    """Backend settings loaded from environment variables."""

    smtp_host: str = Field(min_length=1)
    smtp_port: int
    smtp_secure: bool = False
    smtp_user: str = Field(min_length=1)
    smtp_pass: str = Field(min_length=1)
    smtp_timeout_seconds: float = 20
    mail_from: str = Field(min_length=1)
    mail_to: str = Field(min_length=1)
    port: int = 4000
    cors_origins: str = "http://localhost:3000"
    rate_limit_requests: int = Field(default=10, ge=1)
    rate_limit_window_seconds: float = Field(default=60, gt=0)
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(env_file=_ENV_FILES, extra="ignore")


class ClientSettings(BaseSettings):
    """Settings for the page-side photo store and contact form client."""

    photo_store_dir: Path = Path(".portfolio")
    default_profile_image: str = "/assets/profile.jpg"
    contact_api_url: str = "http://localhost:4000"

    model_config = SettingsConfigDict(env_file=_ENV_FILES, extra="ignore")


def parse_cors_origins(raw: str | None) -> list[str]:
    """Parse the comma-separated list of allowed browser origins."""
    if raw is None:
        return []
    origins: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip().rstrip("/")
        if value and value not in origins:
            origins.append(value)
    return origins

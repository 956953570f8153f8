# freelance_booking/core/config.py
import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).resolve().parents[2] / ".env"
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


_DEV_JWT_SECRET = "dev-only-jwt-secret-change-me"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    database_url: str = Field(
        default="sqlite:///./freelance_booking.db",
        validation_alias=AliasChoices("DATABASE_URL", "database_url"),
        description="SQLAlchemy URL of the calendar store",
    )

    # Bearer credentials issued by the identity provider
    jwt_secret: SecretStr = Field(
        default=SecretStr(_DEV_JWT_SECRET),
        alias="JWT_SECRET",
        description="Shared secret used to verify access tokens",
    )
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_audience: Optional[str] = Field(
        default="authenticated",
        alias="JWT_AUDIENCE",
        description="Expected aud claim; empty disables the audience check",
    )
    access_token_expire_minutes: int = Field(default=60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Per-freelancer calendar mutex
    redis_url: Optional[str] = Field(
        default=None,
        alias="REDIS_URL",
        description="Redis URL for the cross-process calendar lock (optional)",
    )
    calendar_lock_timeout_seconds: float = Field(
        default=5.0, alias="CALENDAR_LOCK_TIMEOUT_SECONDS", gt=0
    )
    calendar_lock_ttl_seconds: int = Field(default=30, alias="CALENDAR_LOCK_TTL_SECONDS", gt=0)

    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS")
    notification_page_size: int = Field(default=20, alias="NOTIFICATION_PAGE_SIZE", ge=1, le=100)

    @field_validator("jwt_audience", "redis_url", mode="before")
    @classmethod
    def _blank_to_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return level

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in {"prod", "production"}

    def get_database_url(self) -> str:
        """Return the calendar store URL, normalizing legacy postgres:// schemes."""
        url = self.database_url
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://") :]
        return url


settings = Settings()

if settings.is_production and settings.jwt_secret.get_secret_value() == _DEV_JWT_SECRET:
    logger.warning("JWT_SECRET is not configured; using the development secret in production")

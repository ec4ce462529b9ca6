import json
import os
import sys
from typing import Annotated, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _should_load_env_file() -> str | None:
    """Decide whether `.env` should be read.

    Local development reads `backend/.env` for convenience. Under pytest or CI
    the file is ignored so tests control the environment explicitly.
    """
    if any("pytest" in str(x) for x in sys.argv if x):
        return None
    if os.environ.get("CI") in ("1", "true", "True"):
        return None
    return ".env"


class Settings(BaseSettings):
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: 'development', 'staging', 'production' or 'test'",
    )

    DATABASE_URL: str = "sqlite:///./data/showcase.db"

    # Bearer tokens are issued by the external identity provider and signed
    # with this shared secret.
    JWT_SECRET: str = Field(
        ...,
        description="Secret used to verify identity provider tokens",
    )
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: Optional[str] = Field(
        default="authenticated",
        description="Expected 'aud' claim; None disables the audience check",
    )

    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins (comma-separated in env var)",
    )

    # Profile seeded as admin by init_db.py
    ADMIN_EMAIL: str = Field(
        ...,
        description="E-mail of the initial admin profile",
    )
    ADMIN_PROFILE_ID: str = Field(
        default="00000000-0000-0000-0000-000000000001",
        description="Identity provider subject of the initial admin profile",
    )

    # Database connection pool settings
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    AUTO_CREATE_DB: bool = Field(
        default=False,
        description="When true, create tables on startup (development only)",
    )

    SLOW_REQUEST_THRESHOLD: float = Field(
        default=1.0,
        description="Log warning for requests slower than this (seconds)",
    )

    # Public pages
    FEATURED_IDEAS_LIMIT: int = Field(
        default=6,
        description="Maximum featured ideas shown on the landing page",
    )

    # Moderation queue
    MODERATION_MAX_WORKING_SET: int = Field(
        default=1000,
        description="Largest pending set the in-memory moderation queue is sized for",
    )
    MODERATION_API_URL: str = Field(
        default="http://localhost:8000",
        description="Base URL of this API as seen by the moderation console",
    )
    MODERATION_API_TIMEOUT: Optional[float] = Field(
        default=None,
        description="Seconds before a moderation request is abandoned; None waits forever",
    )

    CONTACT_RATE_LIMIT: str = Field(
        default="5/hour",
        description="slowapi limit for public contact form submissions",
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, value: object) -> object:
        """Accept a comma-separated string as well as a JSON list."""
        if isinstance(value, str):
            if value.strip().startswith("["):
                return json.loads(value)
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("MODERATION_MAX_WORKING_SET", "FEATURED_IDEAS_LIMIT")
    @classmethod
    def must_be_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value

    model_config = SettingsConfigDict(
        env_file=_should_load_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]

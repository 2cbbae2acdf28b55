"""
HabitRPG configuration.
Loads variables from the .env file.
"""

import json
from typing import Any

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database URL (Railway/Render format)
    # If set, overrides PostgreSQL individual vars
    DATABASE_URL: str | None = None

    # PostgreSQL (individual vars, fallback if DATABASE_URL not set)
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "habitrpg"
    POSTGRES_USER: str = "habitrpg"
    POSTGRES_PASSWORD: SecretStr | None = None

    # Auth
    JWT_SECRET: SecretStr = SecretStr("dev-secret-change-me")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Environment (development | production)
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Extra CORS origins for the mobile/web clients
    CORS_ORIGINS: list[str] = []

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[Any]) -> list[str]:
        if isinstance(v, str):
            if not v.strip():
                return []
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @property
    def database_url(self) -> str:
        """
        Get database URL based on environment.

        Priority:
        1. DATABASE_URL env var (Railway/Render format)
        2. PostgreSQL individual vars (production)
        3. SQLite (development)
        """
        if self.DATABASE_URL:
            url = self.DATABASE_URL
            if url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql://", 1)
            return url

        if self.ENVIRONMENT == "production":
            if not self.POSTGRES_PASSWORD:
                raise ValueError("POSTGRES_PASSWORD required for production")
            return (
                f"postgresql://{self.POSTGRES_USER}:"
                f"{self.POSTGRES_PASSWORD.get_secret_value()}"
                f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

        return "sqlite://db.sqlite3"


config = Settings()

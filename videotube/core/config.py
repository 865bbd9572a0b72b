from __future__ import annotations

"""
# VideoTube · Centralized Configuration (Pydantic v2)

Single `settings` object with strongly-typed, environment-driven config.

## Goals
- Safe defaults for local/dev; explicit where prod needs secrets.
- Independent signing secrets for access and refresh tokens.
- Pluggable document store (`sql` in production, `memory` for dev/tests).

## Usage
    from videotube.core.config import settings
"""

from typing import List, Literal, Optional

from dotenv import load_dotenv
from pydantic import AnyHttpUrl, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()  # harmless in prod; convenient in dev


def _split_csv(v: str | None) -> list[str]:
    """Split a comma-separated string into a trimmed list (empty-safe)."""
    if not v:
        return []
    return [s.strip() for s in str(v).split(",") if s and s.strip()]


class Settings(BaseSettings):
    """
    Global application settings sourced from environment.

    Security:
        - Explicit, separate secrets for access and refresh JWTs.
        - Auth cookies are HTTP-only; `Secure` and `SameSite` are configurable.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── App meta ──────────────────────────────────────────────
    PROJECT_NAME: str = "VideoTube API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    ENV: Literal["development", "staging", "production"] = "development"
    ENABLE_DOCS: bool = True

    # ── Security / JWT ────────────────────────────────────────
    ACCESS_TOKEN_SECRET: SecretStr = Field(...)
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(15, ge=1, le=24 * 60)
    REFRESH_TOKEN_SECRET: SecretStr = Field(...)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(10, ge=1, le=365)
    JWT_ALGORITHM: Literal["HS256", "HS384", "HS512"] = "HS256"
    BCRYPT_ROUNDS: int = Field(12, ge=4, le=31)

    # ── Cookies ───────────────────────────────────────────────
    COOKIE_SECURE: bool = True
    COOKIE_SAMESITE: Literal["strict", "lax", "none"] = "strict"

    # ── Storage ───────────────────────────────────────────────
    STORE_BACKEND: Literal["sql", "memory"] = "sql"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: SecretStr = SecretStr("")
    POSTGRES_DB: str = "videotube"
    ASYNC_DATABASE_URI: Optional[str] = None  # full override, e.g. sqlite+aiosqlite:///./dev.db
    DB_AUTO_CREATE: bool = False

    # ── Logging ───────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    LOG_TO_FILE: bool = False
    LOG_DIR: str = "logs"
    LOG_FILE: str = "videotube.log"
    LOG_ROTATION: str = "10 MB"
    APP_DEBUG: bool = False

    # ── CORS ──────────────────────────────────────────────────
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def _assemble_cors_origins(cls, v: str | List[str]):
        if isinstance(v, str):
            return _split_csv(v)
        return v

    # ── Derived / convenience properties ─────────────────────
    @property
    def DATABASE_URL(self) -> str:
        """Sync DSN."""
        return (
            f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD.get_secret_value()}"
            f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def ASYNC_DATABASE_URL(self) -> str:
        """Async SQLAlchemy DSN; `ASYNC_DATABASE_URI` wins when set."""
        if self.ASYNC_DATABASE_URI:
            return self.ASYNC_DATABASE_URI
        return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://")

    @property
    def cors_origins_list(self) -> List[str]:
        return [str(u).rstrip("/") for u in (self.BACKEND_CORS_ORIGINS or [])]


# Singleton instance
settings = Settings()

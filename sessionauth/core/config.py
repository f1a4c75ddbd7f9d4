"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "sqlite://",
    "sqlite+pysqlite://",
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# 24 hours, expressed in milliseconds like the cookie maxAge it configures.
DEFAULT_SESSION_MAX_AGE_MS = 24 * 60 * 60 * 1000
MAX_SESSION_MAX_AGE_MS = 365 * DEFAULT_SESSION_MAX_AGE_MS

DEFAULT_SESSION_SECRET = "change-me-in-production"
# HMAC key floor in prod; matches the SHA-256 output size.
MIN_PROD_SECRET_BYTES = 32


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # SQLite for local development; PostgreSQL in production.
    DATABASE_URL: str = "sqlite:///./sessionauth.db"
    # Run metadata.create_all at startup. Production schemas come from alembic.
    DATABASE_AUTO_CREATE: bool = True

    # Session cookie signing
    SESSION_SECRET: SecretStr = SecretStr(DEFAULT_SESSION_SECRET)
    SESSION_SIGNING_ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "sessionauth.sid"
    SESSION_MAX_AGE_MS: int = DEFAULT_SESSION_MAX_AGE_MS
    SESSION_COOKIE_SECURE: bool = False
    SESSION_COOKIE_SAMESITE: Literal["lax", "strict", "none"] = "lax"

    # Expired sessions are purged by `python -m sessionauth.retention`.
    SESSION_RETENTION_ENABLED: bool = True

    # When False, POST /register refuses role=admin; admins come from the create_user CLI.
    ALLOW_ADMIN_REGISTRATION: bool = False

    # Comma separated list of origins; empty disables CORS.
    CORS_ALLOW_ORIGINS: str = ""

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DATABASE_URL must be set and non-empty")
        v = v.strip()
        if not any(v.startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a SQLite or PostgreSQL URL "
                "(e.g. sqlite:///./sessionauth.db or postgresql://...)"
            )
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = (v or "").strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}")
        return level

    @field_validator("SESSION_SECRET")
    @classmethod
    def validate_session_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("SESSION_SECRET must be set and non-empty")
        return v

    @field_validator("SESSION_SIGNING_ALGORITHM")
    @classmethod
    def validate_signing_algorithm(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("SESSION_SIGNING_ALGORITHM must be set and non-empty")
        if not v.strip().upper().startswith("HS"):
            raise ValueError("SESSION_SIGNING_ALGORITHM must be an HMAC algorithm (HS256, HS384, HS512)")
        return v.strip().upper()

    @field_validator("SESSION_COOKIE_NAME")
    @classmethod
    def validate_cookie_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("SESSION_COOKIE_NAME must be set and non-empty")
        if any(ch in v for ch in " ;,="):
            raise ValueError("SESSION_COOKIE_NAME must not contain spaces, ';', ',' or '='")
        return v.strip()

    @field_validator("SESSION_MAX_AGE_MS")
    @classmethod
    def validate_session_max_age(cls, v: int) -> int:
        if v < 1000 or v > MAX_SESSION_MAX_AGE_MS:
            raise ValueError(
                "SESSION_MAX_AGE_MS must be between 1000 and "
                f"{MAX_SESSION_MAX_AGE_MS} (1 second to 1 year)"
            )
        return v

    @model_validator(mode="after")
    def validate_prod_secret(self) -> "Settings":
        if self.APP_ENV != "prod":
            return self
        secret = self.SESSION_SECRET.get_secret_value()
        if secret == DEFAULT_SESSION_SECRET:
            raise ValueError("SESSION_SECRET must be changed from the default when APP_ENV=prod")
        if len(secret.encode("utf-8")) < MIN_PROD_SECRET_BYTES:
            raise ValueError(f"SESSION_SECRET must be at least {MIN_PROD_SECRET_BYTES} bytes when APP_ENV=prod")
        return self

    @property
    def session_max_age_seconds(self) -> int:
        """Cookie Max-Age in whole seconds."""
        return self.SESSION_MAX_AGE_MS // 1000

    @property
    def cors_origins(self) -> list[str]:
        return [item.strip() for item in self.CORS_ALLOW_ORIGINS.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()

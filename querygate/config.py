"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - The shared secret and database URL come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process
    - Missing/short values are not rejected here: create_app() raises ConfigurationError

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Plain sqlite:// and postgresql:// URLs rewritten to their asyncio drivers
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ASYNC_DRIVERS = {
    "sqlite://": "sqlite+aiosqlite://",
    "postgresql://": "postgresql+asyncpg://",
    "postgres://": "postgresql+asyncpg://",
}


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database binding
    database_url: str | None = None

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v: str | None) -> str | None:
        """Hosting platforms hand out sync URLs; the engine needs an asyncio driver."""
        if not isinstance(v, str):
            return v
        for prefix, replacement in _ASYNC_DRIVERS.items():
            if v.startswith(prefix):
                return v.replace(prefix, replacement, 1)
        return v

    # Shared secret clients send as "Authorization: Bearer <secret>".
    # Tip: openssl rand -base64 32
    app_secret: str | None = None

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()

"""Database settings.

The store is PostgreSQL through asyncpg in production. ``DATABASE_URL`` may
name any SQLAlchemy async URL (tests use ``sqlite+aiosqlite``); without it
the URL is assembled from the ``DATABASE_*`` components.
"""

from typing import Any
from urllib.parse import urlparse

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ASYNCPG_SCHEME = "postgresql+asyncpg"


class DatabaseConfig(BaseSettings):
    """Where the mirrored GitHub data is stored.

    Environment variables:
    - DATABASE_URL: complete URL, takes precedence over the components
    - DATABASE_HOST, DATABASE_PORT, DATABASE_DATABASE, DATABASE_USERNAME,
      DATABASE_PASSWORD: URL components (the password is required)
    - DATABASE_POOL_SIZE, DATABASE_MAX_OVERFLOW: asyncpg pool size
    - DATABASE_CONNECT_TIMEOUT: seconds to wait for a new connection
    - DATABASE_ECHO_SQL: log every statement
    """

    database_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("database_url", "database_database_url"),
    )
    host: str = "localhost"
    port: int = 5432
    database: str = "ghsync"
    username: str = "postgres"
    password: str | None = None

    pool_size: int = Field(default=10, ge=1)
    max_overflow: int = Field(default=20, ge=0)
    connect_timeout: int = Field(default=10, ge=1, description="Seconds")
    echo_sql: bool = False

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def validate_database_url(cls, v: Any) -> Any:
        if v:
            parsed = urlparse(v)
            # sqlite URLs have no host part.
            if not parsed.scheme or (
                not parsed.scheme.startswith("sqlite") and not parsed.hostname
            ):
                raise ValueError("Invalid database URL format")
        return v

    def get_sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        if not self.password:
            raise ValueError(
                "No database URL available - provide either database_url or password"
            )
        return (
            f"{ASYNCPG_SCHEME}://{self.username}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    @property
    def uses_asyncpg(self) -> bool:
        return self.get_sqlalchemy_url().startswith(ASYNCPG_SCHEME)


_config_instance: DatabaseConfig | None = None


def get_database_config() -> DatabaseConfig:
    """Load the settings from the environment once and reuse them."""
    global _config_instance

    if _config_instance is None:
        _config_instance = DatabaseConfig()

    return _config_instance


def reset_database_config() -> None:
    """Forget the cached settings (tests)."""
    global _config_instance
    _config_instance = None

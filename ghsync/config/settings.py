"""Bot settings.

Settings are read from the environment (and an optional ``.env`` file) once
by the composition root, then passed down explicitly.

Environment variables:
- SYNC_REPOS: Comma separated ``owner/repo`` allow-list. When unset, every
  public repository the app is installed on is synced.
- GITHUB_APP_ID, GITHUB_PRIVATE_KEY or GITHUB_PRIVATE_KEY_PATH: GitHub App
  credentials
- GITHUB_TOKEN: Personal access token used when no app credentials are set
- GITHUB_API_URL: REST API root (default: https://api.github.com)
- SYNC_PAGE_INTERVAL: Seconds to pause between pages of a bulk sync
- SYNC_ON_STARTUP: Run the bulk sync when the server starts (default: true)
- LOG_LEVEL: Logging level (default: INFO)
"""

from enum import Enum
from pathlib import Path

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ghsync.keys import RepoKey

from .exceptions import ConfigurationError


class LogLevel(str, Enum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def parse_sync_repos(value: str | None) -> list[RepoKey]:
    """Parse the ``SYNC_REPOS`` allow-list.

    Entries that do not split into exactly two ``/`` separated parts are
    dropped. Whitespace around owner and repo is ignored.

    Example:
        >>> parse_sync_repos("tikv / tikv , pingcap / tidb ")
        [RepoKey(owner='tikv', repo='tikv'), RepoKey(owner='pingcap', repo='tidb')]
    """
    if value is None or not value.strip():
        return []

    repo_keys = []
    for full_name in value.strip().split(","):
        parts = full_name.split("/")
        if len(parts) == 2:
            repo_keys.append(RepoKey(owner=parts[0].strip(), repo=parts[1].strip()))
    return repo_keys


class BotSettings(BaseSettings):
    """Settings of the sync bot."""

    sync_repos: str | None = Field(
        default=None, description="Comma separated owner/repo allow-list"
    )

    github_app_id: str | None = Field(default=None, description="GitHub App ID")
    github_private_key: str | None = Field(
        default=None, description="PEM encoded private key of the GitHub App"
    )
    github_private_key_path: Path | None = Field(
        default=None, description="File holding the private key of the GitHub App"
    )
    github_token: str | None = Field(
        default=None, description="Personal access token (single-tenant mode)"
    )
    github_api_url: str = Field(
        default="https://api.github.com", description="GitHub REST API root"
    )

    sync_page_interval: float = Field(
        default=1.0, ge=0, description="Seconds to pause between pages of a walk"
    )
    sync_on_startup: bool = Field(
        default=True, description="Run the bulk sync when the server starts"
    )

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def sync_repo_keys(self) -> list[RepoKey] | None:
        """Repositories from the allow-list, or None if no allow-list is set."""
        if self.sync_repos is None:
            return None
        return parse_sync_repos(self.sync_repos)

    @property
    def has_app_credentials(self) -> bool:
        return bool(self.github_app_id) and (
            bool(self.github_private_key) or self.github_private_key_path is not None
        )

    def get_private_key(self) -> str:
        """Return the app private key, reading it from disk if configured by path."""
        if self.github_private_key:
            # Keys passed through env files often carry escaped newlines.
            return self.github_private_key.replace("\\n", "\n")

        if self.github_private_key_path is None:
            raise ConfigurationError(
                "GitHub App private key is not configured", key="GITHUB_PRIVATE_KEY"
            )

        try:
            return self.github_private_key_path.read_text()
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read GitHub App private key: {e}",
                key="GITHUB_PRIVATE_KEY_PATH",
            ) from e

    def validate_credentials(self) -> None:
        """Check that the bot can authenticate against GitHub somehow."""
        if self.github_app_id and not self.has_app_credentials:
            raise ConfigurationError(
                "GITHUB_APP_ID is set but no private key is configured",
                key="GITHUB_PRIVATE_KEY",
            )
        if not self.has_app_credentials and not self.github_token:
            raise ConfigurationError(
                "Either GitHub App credentials or GITHUB_TOKEN must be configured",
                key="GITHUB_APP_ID",
            )
        if not self.has_app_credentials and self.sync_repos is None:
            raise ConfigurationError(
                "SYNC_REPOS is required when authenticating with GITHUB_TOKEN",
                key="SYNC_REPOS",
            )


# Global settings instance
_settings_instance: BotSettings | None = None


def get_bot_settings() -> BotSettings:
    """Get bot settings instance.

    Returns cached instance on subsequent calls.

    Raises:
        ConfigurationError: If a setting has an invalid value
    """
    global _settings_instance

    if _settings_instance is None:
        try:
            _settings_instance = BotSettings()
        except ValidationError as e:
            invalid = [".".join(str(part) for part in error["loc"]) for error in e.errors()]
            raise ConfigurationError(
                f"Invalid bot settings: {', '.join(invalid)}",
                key=invalid[0].upper() if invalid else None,
                details={"errors": e.errors()},
            ) from e

    return _settings_instance


def reset_bot_settings() -> None:
    """Reset settings instance (useful for testing)."""
    global _settings_instance
    _settings_instance = None

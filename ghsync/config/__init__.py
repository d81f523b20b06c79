"""Bot configuration.

Example usage:
    from ghsync.config import get_bot_settings

    settings = get_bot_settings()
    repo_keys = settings.sync_repo_keys
"""

from .exceptions import ConfigurationError
from .settings import (
    BotSettings,
    LogLevel,
    get_bot_settings,
    parse_sync_repos,
    reset_bot_settings,
)

__all__ = [
    "BotSettings",
    "ConfigurationError",
    "LogLevel",
    "get_bot_settings",
    "parse_sync_repos",
    "reset_bot_settings",
]

"""Configuration-related exceptions."""

from typing import Any


class ConfigurationError(Exception):
    """Raised when the bot settings are missing or invalid."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """Initialize configuration error.

        Args:
            message: Human-readable error message
            key: Name of the offending setting, if a single one is at fault
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.key = key
        self.details = details or {}

"""Database infrastructure module."""

from .config import (
    DatabaseConfig,
    get_database_config,
    reset_database_config,
)
from .connection import DatabaseConnectionManager

__all__ = [
    "DatabaseConfig",
    "DatabaseConnectionManager",
    "get_database_config",
    "reset_database_config",
]

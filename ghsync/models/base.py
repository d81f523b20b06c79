"""Base SQLAlchemy model with common functionality."""

import re
from datetime import datetime
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class BaseModel(Base):
    """Base model with dictionary conversion helpers."""

    __abstract__ = True

    @declared_attr
    def __tablename__(cls) -> str:
        """Generate table name from class name."""
        # Convert CamelCase to snake_case
        name = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", cls.__name__)
        return re.sub("([a-z0-9])([A-Z])", r"\1_\2", name).lower()

    @classmethod
    def attribute_names(cls) -> list[str]:
        """Mapped attribute names (Python side, not column names)."""
        return [attr.key for attr in inspect(cls).column_attrs]

    def __repr__(self) -> str:
        """Return string representation of the model."""
        identity = inspect(self).identity
        return f"<{self.__class__.__name__}(identity={identity})>"

    def to_dict(self) -> dict[str, Any]:
        """Snapshot of the mapped attributes as a plain dictionary."""
        return {name: getattr(self, name) for name in self.attribute_names()}

    def to_json_dict(self) -> dict[str, Any]:
        """Dictionary with datetimes rendered as ISO 8601 strings."""
        result = {}
        for key, value in self.to_dict().items():
            if isinstance(value, datetime):
                value = value.isoformat()
            result[key] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BaseModel":
        """Create model instance from dictionary."""
        # Filter out keys that don't correspond to mapped attributes
        valid_keys = set(cls.attribute_names())
        filtered_data = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered_data)

"""Base repository with common keyed lookup and upsert operations.

Each public operation runs in its own short-lived session and commits before
returning. There is no transaction spanning several operations or entities.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, Select, false, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ghsync.models.base import BaseModel

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """Base repository with common CRUD operations."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        model_class: type[ModelType],
    ):
        """Initialize repository with a session factory and model class."""
        self.session_factory = session_factory
        self.model_class = model_class

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session that commits on success and rolls back on error."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def get_by_id(self, entity_id: Any) -> ModelType | None:
        """Get entity by primary key."""
        async with self.session() as session:
            return await session.get(self.model_class, entity_id)

    async def save(self, values: dict[str, Any]) -> ModelType:
        """Insert or update an entity by primary key.

        Args:
            values: Mapped attribute values; a missing or None autoincrement
                key inserts a new row

        Returns:
            The persisted entity
        """
        entity = self.model_class.from_dict(values)
        async with self.session() as session:
            merged = await session.merge(entity)
            await session.flush()
            await session.refresh(merged)
            return merged

    async def save_if_newer(self, values: dict[str, Any]) -> bool:
        """Write ``values`` unless the stored row is at least as recent.

        The ``updated_at`` comparison is part of the UPDATE statement, so when
        two writers race on the same row the older snapshot cannot land last.
        An insert that loses against a concurrent insert is retried once as a
        guarded update.

        Args:
            values: Mapped attribute values including the natural key

        Returns:
            True if the row was inserted or updated
        """
        try:
            return await self._write_if_newer(values)
        except IntegrityError:
            logger.debug(
                f"concurrent insert of {self.model_class.__name__}, retrying as update"
            )
            return await self._write_if_newer(values)

    def _key_criteria(self, values: dict[str, Any]) -> ColumnElement[bool]:
        """Filter selecting the row identified by the natural key in ``values``."""
        raise NotImplementedError(
            f"{type(self).__name__} does not define a natural key"
        )

    async def _write_if_newer(self, values: dict[str, Any]) -> bool:
        criteria = self._key_criteria(values)
        updated_at = values.get("updated_at")
        stored_updated_at = self.model_class.updated_at  # type: ignore[attr-defined]

        if updated_at is None:
            is_older = false()
        else:
            is_older = or_(
                stored_updated_at.is_(None), stored_updated_at < updated_at
            )

        changes = {
            name: value
            for name, value in values.items()
            if name not in ("id", "created_at")
        }
        statement = (
            update(self.model_class)
            .where(criteria, is_older)
            .values(**changes)
            .execution_options(synchronize_session=False)
        )

        async with self.session() as session:
            result = await session.execute(statement)
            if result.rowcount:
                return True

            existing = await session.execute(
                select(self.model_class.id).where(criteria)  # type: ignore[attr-defined]
            )
            if existing.first() is not None:
                return False

            session.add(self.model_class.from_dict(values))
            await session.flush()
            return True

    async def list_all(
        self, limit: int | None = None, offset: int | None = None
    ) -> list[ModelType]:
        """List all entities with optional pagination."""
        query = select(self.model_class)

        if offset is not None:
            query = query.offset(offset)

        if limit is not None:
            query = query.limit(limit)

        return await self._execute_query(query)

    async def count_all(self) -> int:
        """Count total number of entities."""
        query = select(func.count()).select_from(self.model_class)
        async with self.session() as session:
            result = await session.execute(query)
            return result.scalar_one()

    def _build_base_query(self) -> Select[tuple[ModelType]]:
        """Build base query for the model."""
        return select(self.model_class)

    async def _execute_query(self, query: Select[tuple[ModelType]]) -> list[ModelType]:
        """Execute query and return results."""
        async with self.session() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def _execute_single_query(
        self, query: Select[tuple[ModelType]]
    ) -> ModelType | None:
        """Execute query and return single result."""
        async with self.session() as session:
            result = await session.execute(query)
            return result.scalar_one_or_none()

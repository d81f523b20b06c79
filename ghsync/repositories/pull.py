"""Pull repository with domain-specific operations."""

from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ghsync.models import Pull
from ghsync.keys import PullKey

from .base import BaseRepository


class PullRepository(BaseRepository[Pull]):
    """Repository for Pull operations."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """Initialize with session factory."""
        super().__init__(session_factory, Pull)

    def _key_criteria(self, values: dict[str, Any]) -> ColumnElement[bool]:
        return and_(
            Pull.owner == values["owner"],
            Pull.repo == values["repo"],
            Pull.pull_number == values["pull_number"],
        )

    async def get_by_key(self, pull_key: PullKey) -> Pull | None:
        """Get pull request by owner, repository name and number."""
        query = select(Pull).where(
            and_(
                Pull.owner == pull_key.owner,
                Pull.repo == pull_key.repo,
                Pull.pull_number == pull_key.pull_number,
            )
        )
        return await self._execute_single_query(query)

    async def update_updated_at(self, pull_key: PullKey, updated_at: datetime) -> bool:
        """Move ``updated_at`` forward if the stored value is older.

        Returns:
            True if a row was updated
        """
        statement = (
            update(Pull)
            .where(
                and_(
                    Pull.owner == pull_key.owner,
                    Pull.repo == pull_key.repo,
                    Pull.pull_number == pull_key.pull_number,
                    or_(Pull.updated_at.is_(None), Pull.updated_at < updated_at),
                )
            )
            .values(updated_at=updated_at)
        )
        async with self.session() as session:
            result = await session.execute(statement)
            return bool(result.rowcount)

    async def list_by_author(self, login: str) -> list[Pull]:
        """All stored pull requests authored by ``login``, oldest first."""
        query = (
            select(Pull)
            .where(Pull.user == login)
            .order_by(Pull.created_at.asc(), Pull.id.asc())
        )
        return await self._execute_query(query)

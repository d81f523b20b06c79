"""OpenPRStatus repository."""

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ghsync.models import OpenPRStatus
from ghsync.keys import PullKey

from .base import BaseRepository


class OpenPRStatusRepository(BaseRepository[OpenPRStatus]):
    """Repository for the open pull request activity aggregate."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """Initialize with session factory."""
        super().__init__(session_factory, OpenPRStatus)

    async def get_by_key(self, pull_key: PullKey) -> OpenPRStatus | None:
        """Get the aggregate row of a pull request."""
        query = select(OpenPRStatus).where(
            and_(
                OpenPRStatus.owner == pull_key.owner,
                OpenPRStatus.repo == pull_key.repo,
                OpenPRStatus.pull_number == pull_key.pull_number,
            )
        )
        return await self._execute_single_query(query)

    async def delete_by_key(self, pull_key: PullKey) -> bool:
        """Delete the aggregate row. Returns True if a row was deleted."""
        statement = delete(OpenPRStatus).where(
            and_(
                OpenPRStatus.owner == pull_key.owner,
                OpenPRStatus.repo == pull_key.repo,
                OpenPRStatus.pull_number == pull_key.pull_number,
            )
        )
        async with self.session() as session:
            result = await session.execute(statement)
            return bool(result.rowcount)

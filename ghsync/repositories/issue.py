"""Issue repository with domain-specific operations."""

from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ghsync.models import Issue
from ghsync.keys import IssueKey

from .base import BaseRepository


class IssueRepository(BaseRepository[Issue]):
    """Repository for Issue operations."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """Initialize with session factory."""
        super().__init__(session_factory, Issue)

    def _key_criteria(self, values: dict[str, Any]) -> ColumnElement[bool]:
        return and_(
            Issue.owner == values["owner"],
            Issue.repo == values["repo"],
            Issue.issue_number == values["issue_number"],
        )

    async def get_by_key(self, issue_key: IssueKey) -> Issue | None:
        """Get issue by owner, repository name and number."""
        query = select(Issue).where(
            and_(
                Issue.owner == issue_key.owner,
                Issue.repo == issue_key.repo,
                Issue.issue_number == issue_key.issue_number,
            )
        )
        return await self._execute_single_query(query)

    async def update_updated_at(
        self, issue_key: IssueKey, updated_at: datetime
    ) -> bool:
        """Move ``updated_at`` forward if the stored value is older."""
        statement = (
            update(Issue)
            .where(
                and_(
                    Issue.owner == issue_key.owner,
                    Issue.repo == issue_key.repo,
                    Issue.issue_number == issue_key.issue_number,
                    or_(Issue.updated_at.is_(None), Issue.updated_at < updated_at),
                )
            )
            .values(updated_at=updated_at)
        )
        async with self.session() as session:
            result = await session.execute(statement)
            return bool(result.rowcount)

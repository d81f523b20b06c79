"""Comment repository."""

from typing import Any

from sqlalchemy import ColumnElement, and_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ghsync.models import Comment

from .base import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    """Repository for Comment operations."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """Initialize with session factory."""
        super().__init__(session_factory, Comment)

    def _key_criteria(self, values: dict[str, Any]) -> ColumnElement[bool]:
        # GitHub comment ids are unique across repositories and comment kinds.
        return Comment.comment_id == values["comment_id"]

    async def get_by_comment_id(self, comment_id: int) -> Comment | None:
        """Get comment by its GitHub id."""
        query = select(Comment).where(Comment.comment_id == comment_id)
        return await self._execute_single_query(query)

    async def list_by_pull(
        self, owner: str, repo: str, pull_number: int
    ) -> list[Comment]:
        """Comments attached to a pull request or issue number."""
        query = (
            select(Comment)
            .where(
                and_(
                    Comment.owner == owner,
                    Comment.repo == repo,
                    Comment.pull_number == pull_number,
                )
            )
            .order_by(Comment.created_at.asc())
        )
        return await self._execute_query(query)

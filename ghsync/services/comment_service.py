"""Comment reconciliation.

Reviews, review comments and issue comments share one table. Each kind is
normalized into a ``SyncCommentQuery`` first, then goes through ``sync_comment``.
"""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from ghsync.keys import IssueKey, PullKey
from ghsync.models import Relation
from ghsync.repositories import CommentRepository
from ghsync.utils.time import parse_timestamp, time

from .queries import Payload, SyncCommentQuery

logger = logging.getLogger(__name__)


def make_comment(comment_received: SyncCommentQuery) -> dict[str, Any]:
    """New comment record holding only the attributes that never change."""
    return {
        "id": None,
        "pull_number": comment_received.pull_number,
        "comment_id": comment_received.id,
        "comment_type": comment_received.comment_type.value,
        "created_at": parse_timestamp(comment_received.created_at),
        "user": comment_received.user,
        "updated_at": None,
    }


def patch_comment(
    comment_stored: dict[str, Any], comment_received: SyncCommentQuery
) -> dict[str, Any]:
    return {
        **comment_stored,
        "owner": comment_received.owner,
        "repo": comment_received.repo,
        "body": comment_received.body,
        "updated_at": parse_timestamp(comment_received.updated_at),
        "association": comment_received.author_association,
        "relation": Relation.from_association(comment_received.author_association).value,
        "url": comment_received.html_url,
    }


class CommentService:
    """Synchronizes reviews, review comments and issue comments."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        log: logging.Logger | None = None,
    ):
        self.comment_repository = comment_repository
        self.log = log or logger

    async def sync_pull_request_reviews(
        self, pull: PullKey, reviews: Iterable[Payload]
    ) -> None:
        await self._sync_comments(
            SyncCommentQuery.from_review(pull, review) for review in reviews
        )

    async def sync_pull_request_review_comments(
        self, pull: PullKey, review_comments: Iterable[Payload]
    ) -> None:
        await self._sync_comments(
            SyncCommentQuery.from_review_comment(pull, comment)
            for comment in review_comments
        )

    async def sync_pull_request_comments(
        self, pull: PullKey, comments: Iterable[Payload]
    ) -> None:
        await self._sync_comments(
            SyncCommentQuery.from_issue_comment(pull, comment) for comment in comments
        )

    async def sync_issue_comments(
        self, issue: IssueKey, comments: Iterable[Payload]
    ) -> None:
        await self._sync_comments(
            SyncCommentQuery.from_issue_comment(issue, comment) for comment in comments
        )

    async def sync_pull_request_review(self, pull: PullKey, review: Payload) -> None:
        await self.sync_comment(SyncCommentQuery.from_review(pull, review))

    async def sync_pull_request_review_comment(
        self, pull: PullKey, comment: Payload
    ) -> None:
        await self.sync_comment(SyncCommentQuery.from_review_comment(pull, comment))

    async def sync_pull_request_comment(self, pull: PullKey, comment: Payload) -> None:
        await self.sync_comment(SyncCommentQuery.from_issue_comment(pull, comment))

    async def sync_issue_comment(self, issue: IssueKey, comment: Payload) -> None:
        await self.sync_comment(SyncCommentQuery.from_issue_comment(issue, comment))

    async def _sync_comments(self, queries: Iterable[SyncCommentQuery]) -> None:
        """Sync each comment independently; one failure does not stop the rest."""
        pending: Sequence[SyncCommentQuery] = list(queries)
        results = await asyncio.gather(
            *(self.sync_comment(query) for query in pending), return_exceptions=True
        )

        for query, result in zip(pending, results, strict=True):
            if isinstance(result, Exception):
                self.log.error(
                    f"failed to sync {query.comment_type.value} {query}: {result}"
                )

    async def sync_comment(self, comment_received: SyncCommentQuery) -> None:
        """Synchronize the received comment data to the database.

        Comments are looked up by their GitHub id, which is unique across
        repositories and comment kinds.
        """
        comment_type = comment_received.comment_type.value

        try:
            comment_stored = await self.comment_repository.get_by_comment_id(
                comment_received.id
            )
            if comment_stored is None:
                stored = make_comment(comment_received)
            else:
                stored = comment_stored.to_dict()

            if comment_stored is not None and not time(
                comment_received.updated_at
            ).later_than(time(stored["updated_at"])):
                self.log.info(f"sync {comment_type} {comment_received}, but not updated")
                return

            saved = await self.comment_repository.save_if_newer(
                patch_comment(stored, comment_received)
            )
        except SQLAlchemyError as e:
            self.log.error(
                f"failed to save {comment_type} {comment_received}: {e}",
                extra={
                    "owner": comment_received.owner,
                    "repo": comment_received.repo,
                    "pull_number": comment_received.pull_number,
                    "comment_id": comment_received.id,
                },
            )
            return

        if saved:
            self.log.info(f"sync {comment_type} {comment_received} success")
        else:
            self.log.info(f"sync {comment_type} {comment_received}, but not updated")

"""Pull request reconciliation.

Pull request snapshots arrive from webhooks and from the bulk crawl in any
order. A snapshot is applied only if its ``updated_at`` is strictly later than
the stored one, which makes the stored row converge to the newest snapshot.

The open pull request aggregate (``open_pr_status``) is different: it is patched
one field at a time and each patch is applied as given.
"""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from ghsync.keys import PullKey
from ghsync.models import Pull, PullStatus, Relation
from ghsync.repositories import OpenPRStatusRepository, PullRepository
from ghsync.utils.labels import encode_labels
from ghsync.utils.time import parse_timestamp, time

from .queries import (
    Payload,
    SyncPullLastCommentQuery,
    SyncPullLastCommitQuery,
    SyncPullLastReviewQuery,
    SyncPullQuery,
    SyncPullStatusQuery,
    user_login,
)

logger = logging.getLogger(__name__)


def make_pull(pull_received: SyncPullQuery) -> dict[str, Any]:
    """New pull record holding only the attributes that never change."""
    return {
        "id": None,
        "owner": pull_received.owner,
        "repo": pull_received.repo,
        "pull_number": pull_received.number,
        "created_at": parse_timestamp(pull_received.created_at),
        "updated_at": None,
    }


def derive_pull_status(state: str, merged_at: str | None) -> str:
    """A closed pull request with a merge time is stored as merged."""
    if state == PullStatus.CLOSED.value and merged_at is not None:
        return PullStatus.MERGED.value
    return state


def patch_pull(pull_stored: dict[str, Any], pull_received: SyncPullQuery) -> dict[str, Any]:
    """Return a new pull record with the received mutable attributes applied."""
    return {
        **pull_stored,
        "owner": pull_received.owner,
        "repo": pull_received.repo,
        "title": pull_received.title,
        "body": pull_received.body or "",
        "user": pull_received.user or "",
        "status": derive_pull_status(pull_received.state, pull_received.merged_at),
        "label": encode_labels(pull_received.labels),
        "association": pull_received.author_association,
        "relation": Relation.from_association(pull_received.author_association).value,
        "updated_at": parse_timestamp(pull_received.updated_at),
        "closed_at": parse_timestamp(pull_received.closed_at),
        "merged_at": parse_timestamp(pull_received.merged_at),
    }


def _latest(times: Iterable[str | datetime | None]) -> str | datetime | None:
    latest = None
    for candidate in times:
        if time(candidate).later_than(time(latest)):
            latest = candidate
    return latest


class PullService:
    """Synchronizes pull requests and their open status aggregate."""

    def __init__(
        self,
        pull_repository: PullRepository,
        open_pr_status_repository: OpenPRStatusRepository,
        log: logging.Logger | None = None,
    ):
        self.pull_repository = pull_repository
        self.open_pr_status_repository = open_pr_status_repository
        self.log = log or logger

    async def sync_pull_request(self, pull_received: SyncPullQuery) -> None:
        """Synchronize the received pull request data to the database.

        Stale snapshots are ignored. Store failures are logged, never raised,
        so one bad record does not abort a batch.
        """
        pull_key = pull_received.key

        try:
            pull_stored = await self.pull_repository.get_by_key(pull_key)
            if pull_stored is None:
                stored = make_pull(pull_received)
            else:
                stored = pull_stored.to_dict()

            # Ignore outdated pull request data; a first insert always passes.
            if pull_stored is not None and not time(
                pull_received.updated_at
            ).later_than(time(stored["updated_at"])):
                self.log.info(f"sync pull request {pull_key}, but not updated")
                return

            saved = await self.pull_repository.save_if_newer(
                patch_pull(stored, pull_received)
            )
        except SQLAlchemyError as e:
            self.log.error(
                f"failed to sync pull request {pull_key}: {e}",
                extra={
                    "owner": pull_key.owner,
                    "repo": pull_key.repo,
                    "pull_number": pull_key.pull_number,
                },
            )
            return

        if saved:
            self.log.info(f"sync pull request {pull_key} success")
        else:
            self.log.info(f"sync pull request {pull_key}, but not updated")

    async def sync_pull_request_update_time(
        self, pull_key: PullKey, update_time: str | datetime | None
    ) -> None:
        """Move the stored ``updated_at`` forward without touching other fields."""
        updated_at = parse_timestamp(update_time)
        if updated_at is None:
            return

        try:
            updated = await self.pull_repository.update_updated_at(pull_key, updated_at)
        except SQLAlchemyError as e:
            self.log.error(f"failed to sync update time of pull request {pull_key}: {e}")
            return

        if updated:
            self.log.info(f"sync update time of pull request {pull_key} success")
        else:
            self.log.info(f"sync update time of pull request {pull_key}, but not updated")

    async def get_contributor_all_pull_requests(self, login: str) -> list[Pull]:
        """Get all stored pull requests of a contributor."""
        return await self.pull_repository.list_by_author(login)

    async def sync_open_pull_request_status(self, query: SyncPullStatusQuery) -> None:
        """Recompute the aggregate of an open pull request from fetched data.

        Comments written by the pull request author are not activity.
        """
        pull_author = query.pull_author

        last_review_time = _latest(
            review.get("submitted_at") for review in query.reviews
        )

        external_comments = [
            comment
            for comment in (*query.review_comments, *query.comments)
            if pull_author is None or user_login(comment.get("user")) != pull_author
        ]
        last_comment_time = _latest(
            comment.get("updated_at") for comment in external_comments
        )

        last_commit_time = _latest(
            _commit_time(commit) for commit in query.commits
        )

        await self._update_pr_status(
            query.pull,
            last_comment_at=last_comment_time,
            last_review_at=last_review_time,
            last_update_code_at=last_commit_time,
        )

    async def sync_open_pr_last_comment_time(
        self, query: SyncPullLastCommentQuery
    ) -> None:
        """Record a new comment unless the pull request author wrote it."""
        if (
            query.last_comment_author is not None
            and query.last_comment_author == query.pull_author
        ):
            self.log.info(f"ignore comment of {query.pull} written by its author")
            return

        await self._update_pr_status(
            query.pull, last_comment_at=query.last_comment_time
        )

    async def sync_open_pr_last_review_time(self, query: SyncPullLastReviewQuery) -> None:
        await self._update_pr_status(query.pull, last_review_at=query.last_review_time)

    async def sync_open_pr_last_commit_time(self, query: SyncPullLastCommitQuery) -> None:
        await self._update_pr_status(
            query.pull, last_update_code_at=query.last_commit_time
        )

    async def remove_open_pull_request_status(self, pull_key: PullKey) -> None:
        """Drop the aggregate once the pull request is no longer open."""
        try:
            if await self.open_pr_status_repository.delete_by_key(pull_key):
                self.log.info(f"remove open status of pull request {pull_key}")
        except SQLAlchemyError as e:
            self.log.error(f"failed to remove open status of pull request {pull_key}: {e}")

    async def _update_pr_status(
        self,
        pull_key: PullKey,
        last_comment_at: str | datetime | None = None,
        last_review_at: str | datetime | None = None,
        last_update_code_at: str | datetime | None = None,
    ) -> None:
        """Insert or patch the open_pr_status row.

        Arguments left as None keep their stored value.
        """
        changes = {
            name: parse_timestamp(value)
            for name, value in (
                ("last_comment_at", last_comment_at),
                ("last_review_at", last_review_at),
                ("last_update_code_at", last_update_code_at),
            )
            if value is not None
        }

        try:
            status_stored = await self.open_pr_status_repository.get_by_key(pull_key)
            if status_stored is not None:
                status_be_saved = {**status_stored.to_dict(), **changes}
            else:
                status_be_saved = {
                    "owner": pull_key.owner,
                    "repo": pull_key.repo,
                    "pull_number": pull_key.pull_number,
                    **changes,
                }

            await self.open_pr_status_repository.save(status_be_saved)
            self.log.info(
                f"sync open status of pull request {pull_key} success",
                extra={"fields": sorted(changes)},
            )
        except SQLAlchemyError as e:
            self.log.error(f"failed to sync open status of pull request {pull_key}: {e}")


def _commit_time(commit: Payload) -> str | None:
    committer = (commit.get("commit") or {}).get("committer") or {}
    return committer.get("date")

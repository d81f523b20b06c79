"""Issue reconciliation."""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from ghsync.keys import IssueKey
from ghsync.models import Relation
from ghsync.repositories import IssueRepository
from ghsync.utils.labels import encode_labels
from ghsync.utils.time import parse_timestamp, time

from .queries import SyncIssueQuery

logger = logging.getLogger(__name__)


def make_issue(issue_received: SyncIssueQuery) -> dict[str, Any]:
    """New issue record holding only the attributes that never change."""
    return {
        "id": None,
        "owner": issue_received.owner,
        "repo": issue_received.repo,
        "issue_number": issue_received.number,
        "created_at": parse_timestamp(issue_received.created_at),
        "updated_at": None,
    }


def patch_issue(
    issue_stored: dict[str, Any], issue_received: SyncIssueQuery
) -> dict[str, Any]:
    return {
        **issue_stored,
        "owner": issue_received.owner,
        "repo": issue_received.repo,
        "title": issue_received.title,
        "body": issue_received.body or "",
        "user": issue_received.user or "",
        "association": issue_received.author_association,
        "relation": Relation.from_association(issue_received.author_association).value,
        "label": encode_labels(issue_received.labels),
        "status": issue_received.state,
        "updated_at": parse_timestamp(issue_received.updated_at),
        "closed_at": parse_timestamp(issue_received.closed_at),
    }


class IssueService:
    """Synchronizes issues that are not pull requests."""

    def __init__(
        self,
        issue_repository: IssueRepository,
        log: logging.Logger | None = None,
    ):
        self.issue_repository = issue_repository
        self.log = log or logger

    async def sync_issue(self, issue_received: SyncIssueQuery) -> None:
        """Synchronize the received issue data to the database."""
        issue_key = issue_received.key

        try:
            issue_stored = await self.issue_repository.get_by_key(issue_key)
            if issue_stored is None:
                stored = make_issue(issue_received)
            else:
                stored = issue_stored.to_dict()

            if issue_stored is not None and not time(
                issue_received.updated_at
            ).later_than(time(stored["updated_at"])):
                self.log.info(f"sync issue {issue_key}, but not updated")
                return

            saved = await self.issue_repository.save_if_newer(
                patch_issue(stored, issue_received)
            )
        except SQLAlchemyError as e:
            self.log.error(
                f"failed to save issue {issue_key}: {e}",
                extra={
                    "owner": issue_key.owner,
                    "repo": issue_key.repo,
                    "issue_number": issue_key.issue_number,
                },
            )
            return

        if saved:
            self.log.info(f"sync issue {issue_key} success")
        else:
            self.log.info(f"sync issue {issue_key}, but not updated")

    async def sync_issue_update_time(
        self, issue_key: IssueKey, update_time: str | datetime | None
    ) -> None:
        updated_at = parse_timestamp(update_time)
        if updated_at is None:
            return

        try:
            updated = await self.issue_repository.update_updated_at(issue_key, updated_at)
        except SQLAlchemyError as e:
            self.log.error(f"failed to sync update time of issue {issue_key}: {e}")
            return

        if updated:
            self.log.info(f"sync update time of issue {issue_key} success")
        else:
            self.log.info(f"sync update time of issue {issue_key}, but not updated")

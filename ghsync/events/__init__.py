"""Webhook event handlers and the bulk repository sync."""

from .app import RepositorySyncer
from .common import (
    fetch_all_type_comments,
    fetch_issue_comments,
    fetch_pull_request_commits,
    get_pull_request_patch,
    is_lgtm_comment,
    is_syncable_repository,
)
from .issue import handle_issue_comment_event, handle_issue_event
from .pull_request import (
    handle_pull_request_event,
    handle_pull_request_review_comment_event,
    handle_pull_request_review_event,
)
from .router import EventRouter

__all__ = [
    "EventRouter",
    "RepositorySyncer",
    "fetch_all_type_comments",
    "fetch_issue_comments",
    "fetch_pull_request_commits",
    "get_pull_request_patch",
    "handle_issue_comment_event",
    "handle_issue_event",
    "handle_pull_request_event",
    "handle_pull_request_review_comment_event",
    "handle_pull_request_review_event",
    "is_lgtm_comment",
    "is_syncable_repository",
]

"""Handlers for pull request webhook events.

Payload reference:
https://docs.github.com/en/webhooks/webhook-events-and-payloads#pull_request
"""

import logging

from ghsync.github import GitHubClient
from ghsync.keys import PullKey
from ghsync.models import PullStatus
from ghsync.services import CommentService, ContributorService, PullService
from ghsync.services.queries import (
    Payload,
    SyncContributorEmailQuery,
    SyncPullLastCommentQuery,
    SyncPullLastCommitQuery,
    SyncPullLastReviewQuery,
    SyncPullQuery,
    user_login,
)

from .common import get_pull_request_patch, repo_key_from_payload

logger = logging.getLogger(__name__)

# Actions that change data stored on the pull record itself.
PULL_SYNC_ACTIONS = frozenset(
    {"opened", "edited", "closed", "reopened", "labeled", "unlabeled"}
)
PULL_CODE_ACTIONS = frozenset({"opened", "synchronize"})
REVIEW_ACTIONS = frozenset({"submitted", "edited", "dismissed"})
REVIEW_COMMENT_ACTIONS = frozenset({"created", "edited", "deleted"})


def _pull_key(payload: Payload) -> PullKey:
    repo_key = repo_key_from_payload(payload)
    return PullKey(repo_key.owner, repo_key.repo, payload["pull_request"]["number"])


def _is_open(pull: Payload) -> bool:
    return pull.get("state") == PullStatus.OPEN.value


async def handle_pull_request_event(
    payload: Payload,
    github: GitHubClient,
    pull_service: PullService,
    contributor_service: ContributorService,
    log: logging.Logger | None = None,
) -> None:
    log = log or logger
    action = payload["action"]
    pull = payload["pull_request"]
    pull_received = SyncPullQuery.from_payload(repo_key_from_payload(payload), pull)
    pull_key = pull_received.key

    if action in PULL_SYNC_ACTIONS:
        await pull_service.sync_pull_request(pull_received)
    else:
        # Other actions do not touch the fields we store, only the update time.
        await pull_service.sync_pull_request_update_time(pull_key, pull.get("updated_at"))

    if action in PULL_CODE_ACTIONS and _is_open(pull):
        await pull_service.sync_open_pr_last_commit_time(
            SyncPullLastCommitQuery(pull=pull_key, last_commit_time=pull.get("updated_at"))
        )

    if action == "closed":
        await pull_service.remove_open_pull_request_status(pull_key)

        author = pull_received.user
        if pull.get("merged") and author:
            patch = await get_pull_request_patch(github, pull_key, log)
            if patch is not None:
                await contributor_service.sync_contributor_email_from_pr(
                    SyncContributorEmailQuery(
                        contributor_login=author, pull_request_patch=patch
                    )
                )


async def handle_pull_request_review_event(
    payload: Payload,
    pull_service: PullService,
    comment_service: CommentService,
) -> None:
    if payload["action"] not in REVIEW_ACTIONS:
        return

    pull = payload["pull_request"]
    review = payload["review"]
    pull_key = _pull_key(payload)

    await comment_service.sync_pull_request_review(pull_key, review)

    if _is_open(pull):
        await pull_service.sync_open_pr_last_review_time(
            SyncPullLastReviewQuery(
                pull=pull_key, last_review_time=review.get("submitted_at")
            )
        )

    # Review payloads carry no update time of their own; the pull's moves instead.
    await pull_service.sync_pull_request_update_time(pull_key, pull.get("updated_at"))


async def handle_pull_request_review_comment_event(
    payload: Payload,
    pull_service: PullService,
    comment_service: CommentService,
) -> None:
    if payload["action"] not in REVIEW_COMMENT_ACTIONS:
        return

    pull = payload["pull_request"]
    comment = payload["comment"]
    pull_key = _pull_key(payload)

    await comment_service.sync_pull_request_review_comment(pull_key, comment)

    if _is_open(pull):
        await pull_service.sync_open_pr_last_comment_time(
            SyncPullLastCommentQuery(
                pull=pull_key,
                pull_author=user_login(pull.get("user")),
                last_comment_author=user_login(comment.get("user")),
                last_comment_time=comment.get("updated_at"),
            )
        )

    await pull_service.sync_pull_request_update_time(pull_key, pull.get("updated_at"))

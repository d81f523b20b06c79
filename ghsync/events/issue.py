"""Handlers for issue and issue comment webhook events.

GitHub models every pull request as an issue too, so both events also fire
for pull requests. ``issues`` events for pull requests are ignored (the
``pull_request`` event covers them); ``issue_comment`` events on a pull
request are the pull's conversation comments.
"""

from ghsync.keys import IssueKey, PullKey
from ghsync.models import IssueStatus
from ghsync.services import CommentService, IssueService, PullService
from ghsync.services.queries import (
    Payload,
    SyncIssueQuery,
    SyncPullLastCommentQuery,
    SyncPullLastReviewQuery,
    user_login,
)

from .common import is_lgtm_comment, repo_key_from_payload

ISSUE_SYNC_ACTIONS = frozenset(
    {"opened", "edited", "deleted", "closed", "reopened", "labeled", "unlabeled"}
)
ISSUE_COMMENT_ACTIONS = frozenset({"created", "edited", "deleted"})


async def handle_issue_event(payload: Payload, issue_service: IssueService) -> None:
    issue = payload["issue"]
    if issue.get("pull_request"):
        return

    issue_received = SyncIssueQuery.from_payload(repo_key_from_payload(payload), issue)

    if payload["action"] in ISSUE_SYNC_ACTIONS:
        await issue_service.sync_issue(issue_received)
    else:
        await issue_service.sync_issue_update_time(
            issue_received.key, issue.get("updated_at")
        )


async def handle_issue_comment_event(
    payload: Payload,
    pull_service: PullService,
    issue_service: IssueService,
    comment_service: CommentService,
) -> None:
    if payload["action"] not in ISSUE_COMMENT_ACTIONS:
        return

    repo_key = repo_key_from_payload(payload)
    issue = payload["issue"]
    comment = payload["comment"]

    if not issue.get("pull_request"):
        issue_key = IssueKey(repo_key.owner, repo_key.repo, issue["number"])
        await comment_service.sync_issue_comment(issue_key, comment)
        await issue_service.sync_issue_update_time(issue_key, issue.get("updated_at"))
        return

    pull_key = PullKey(repo_key.owner, repo_key.repo, issue["number"])
    await comment_service.sync_pull_request_comment(pull_key, comment)

    if issue.get("state") == IssueStatus.OPEN.value:
        await pull_service.sync_open_pr_last_comment_time(
            SyncPullLastCommentQuery(
                pull=pull_key,
                pull_author=user_login(issue.get("user")),
                last_comment_author=user_login(comment.get("user")),
                last_comment_time=comment.get("updated_at"),
            )
        )

        # The stored comment stays a common comment; only the aggregate
        # treats it as a review.
        if is_lgtm_comment(comment.get("body")):
            await pull_service.sync_open_pr_last_review_time(
                SyncPullLastReviewQuery(
                    pull=pull_key, last_review_time=comment.get("updated_at")
                )
            )

    await pull_service.sync_pull_request_update_time(pull_key, issue.get("updated_at"))

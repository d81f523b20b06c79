"""Helpers shared by the webhook handlers and the bulk sync."""

import logging
import re
from collections.abc import Iterable
from typing import Any

from ghsync.github import GitHubClient, GitHubError
from ghsync.keys import IssueKey, PullKey, RepoKey
from ghsync.services.queries import Payload

logger = logging.getLogger(__name__)

# "/lgtm" or "lgtm" as a standalone token counts as an approving review.
LGTM_PATTERN = re.compile(r"(^|\s)/?lgtm\b", re.IGNORECASE)


def is_lgtm_comment(body: str | None) -> bool:
    if not body:
        return False
    return LGTM_PATTERN.search(body) is not None


def repo_key_from_payload(payload: Payload) -> RepoKey:
    """Repository of a webhook delivery."""
    repository = payload["repository"]
    return RepoKey(owner=repository["owner"]["login"], repo=repository["name"])


def is_syncable_repository(repository: Payload) -> bool:
    """Only public, active repositories are discovered for syncing."""
    return not (
        repository.get("private")
        or repository.get("disabled")
        or repository.get("archived")
    )


def repo_keys_for_account(
    account_login: str, repositories: Iterable[Payload]
) -> list[RepoKey]:
    """Repository keys of an installation payload's repository list."""
    return [RepoKey(owner=account_login, repo=repository["name"]) for repository in repositories]


async def fetch_all_type_comments(
    github: GitHubClient, pull_key: PullKey
) -> tuple[list[dict[str, Any]], list[dict[str, Any]], list[dict[str, Any]]]:
    """Fetch reviews, review comments and conversation comments of a pull."""
    owner, repo, number = pull_key.owner, pull_key.repo, pull_key.pull_number

    reviews = await github.list_reviews(owner, repo, number).collect_all()
    review_comments = await github.list_review_comments(owner, repo, number).collect_all()
    comments = await github.list_issue_comments(owner, repo, number).collect_all()

    return reviews, review_comments, comments


async def fetch_pull_request_commits(
    github: GitHubClient, pull_key: PullKey
) -> list[dict[str, Any]]:
    return await github.list_pull_commits(
        pull_key.owner, pull_key.repo, pull_key.pull_number
    ).collect_all()


async def fetch_issue_comments(
    github: GitHubClient, issue_key: IssueKey
) -> list[dict[str, Any]]:
    return await github.list_issue_comments(
        issue_key.owner, issue_key.repo, issue_key.issue_number
    ).collect_all()


async def get_pull_request_patch(
    github: GitHubClient,
    pull_key: PullKey,
    log: logging.Logger | None = None,
) -> str | None:
    """Get the patch text of a pull request.

    Returns:
        The patch, or None if it could not be fetched
    """
    try:
        return await github.get_pull_patch(
            pull_key.owner, pull_key.repo, pull_key.pull_number
        )
    except GitHubError as e:
        (log or logger).error(f"failed to get patch of pull request {pull_key}: {e}")
        return None

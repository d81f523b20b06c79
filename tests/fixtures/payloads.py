"""Builders for GitHub REST and webhook payloads used across the tests."""

from typing import Any


def make_user(login: str | None) -> dict[str, Any] | None:
    return {"login": login, "id": 1, "type": "User"} if login else None


def make_pull_payload(
    number: int = 2,
    state: str = "open",
    user: str | None = "contributor",
    updated_at: str | None = "2015-09-07T12:14:59Z",
    **overrides: Any,
) -> dict[str, Any]:
    """Pull request object shaped like the GitHub REST API response."""
    payload: dict[str, Any] = {
        "id": 1000 + number,
        "number": number,
        "state": state,
        "title": f"Pull request {number}",
        "body": "Please review",
        "user": make_user(user),
        "labels": [],
        "author_association": "CONTRIBUTOR",
        "created_at": "2015-09-01T08:00:00Z",
        "updated_at": updated_at,
        "closed_at": None,
        "merged_at": None,
    }
    payload.update(overrides)
    return payload


def make_issue_payload(
    number: int = 7,
    state: str = "open",
    user: str | None = "reporter",
    updated_at: str | None = "2020-01-02T00:00:00Z",
    **overrides: Any,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": 2000 + number,
        "number": number,
        "state": state,
        "title": f"Issue {number}",
        "body": "Something is broken",
        "user": make_user(user),
        "labels": [],
        "author_association": "NONE",
        "created_at": "2020-01-01T00:00:00Z",
        "updated_at": updated_at,
        "closed_at": None,
    }
    payload.update(overrides)
    return payload


def make_comment_payload(
    comment_id: int = 80,
    user: str | None = "reviewer",
    updated_at: str | None = "2020-12-30T06:54:09Z",
    body: str = "Looks fine",
    **overrides: Any,
) -> dict[str, Any]:
    """Issue comment or review comment object."""
    payload: dict[str, Any] = {
        "id": comment_id,
        "user": make_user(user),
        "body": body,
        "author_association": "MEMBER",
        "html_url": f"https://github.com/owner/repo/pull/2#comment-{comment_id}",
        "created_at": updated_at,
        "updated_at": updated_at,
    }
    payload.update(overrides)
    return payload


def make_review_payload(
    review_id: int = 80,
    user: str | None = "reviewer",
    submitted_at: str | None = "2020-12-30T06:54:09Z",
    **overrides: Any,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": review_id,
        "user": make_user(user),
        "body": "",
        "state": "APPROVED",
        "author_association": "MEMBER",
        "html_url": f"https://github.com/owner/repo/pull/2#pullrequestreview-{review_id}",
        "submitted_at": submitted_at,
    }
    payload.update(overrides)
    return payload


def make_commit_payload(sha: str, committed_at: str) -> dict[str, Any]:
    return {
        "sha": sha,
        "commit": {
            "author": {"name": "someone", "date": committed_at},
            "committer": {"name": "someone", "date": committed_at},
        },
    }


def make_repository(owner: str = "owner", name: str = "repo", **overrides: Any) -> dict[str, Any]:
    repository: dict[str, Any] = {
        "name": name,
        "full_name": f"{owner}/{name}",
        "owner": {"login": owner},
        "private": False,
        "archived": False,
        "disabled": False,
    }
    repository.update(overrides)
    return repository


def make_event(action: str, owner: str = "owner", repo: str = "repo", **body: Any) -> dict[str, Any]:
    """Webhook delivery body for a repository scoped event."""
    return {
        "action": action,
        "repository": make_repository(owner, repo),
        "installation": {"id": 42},
        **body,
    }

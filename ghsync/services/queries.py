"""Typed inbound records for the reconciliation services.

GitHub delivers the same logical objects in several payload shapes (webhook
events, REST list responses). The constructors here flatten those payloads into
immutable records before they reach the services, so the merge logic only ever
sees one shape per entity.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ghsync.models.enums import CommentType
from ghsync.keys import IssueKey, PullKey, RepoKey

Payload = Mapping[str, Any]


def user_login(user: Payload | None) -> str | None:
    """Login of a GitHub user object, or None for ghost users."""
    if not user:
        return None
    return user.get("login")


@dataclass(frozen=True)
class SyncPullQuery:
    """A pull request snapshot as received from GitHub."""

    owner: str
    repo: str
    number: int
    state: str
    title: str = ""
    body: str | None = None
    user: str | None = None
    labels: tuple[Any, ...] = ()
    author_association: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    closed_at: str | None = None
    merged_at: str | None = None

    @property
    def key(self) -> PullKey:
        return PullKey(self.owner, self.repo, self.number)

    @classmethod
    def from_payload(cls, repo_key: RepoKey, pull: Payload) -> "SyncPullQuery":
        """Build from a ``pull_request`` object of the REST or webhook API."""
        return cls(
            owner=repo_key.owner,
            repo=repo_key.repo,
            number=pull["number"],
            state=pull["state"],
            title=pull.get("title") or "",
            body=pull.get("body"),
            user=user_login(pull.get("user")),
            labels=tuple(pull.get("labels") or ()),
            author_association=pull.get("author_association"),
            created_at=pull.get("created_at"),
            updated_at=pull.get("updated_at"),
            closed_at=pull.get("closed_at"),
            merged_at=pull.get("merged_at"),
        )


@dataclass(frozen=True)
class SyncIssueQuery:
    """An issue snapshot as received from GitHub."""

    owner: str
    repo: str
    number: int
    state: str
    title: str = ""
    body: str | None = None
    user: str | None = None
    labels: tuple[Any, ...] = ()
    author_association: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    closed_at: str | None = None

    @property
    def key(self) -> IssueKey:
        return IssueKey(self.owner, self.repo, self.number)

    @classmethod
    def from_payload(cls, repo_key: RepoKey, issue: Payload) -> "SyncIssueQuery":
        """Build from an ``issue`` object of the REST or webhook API."""
        return cls(
            owner=repo_key.owner,
            repo=repo_key.repo,
            number=issue["number"],
            state=issue["state"],
            title=issue.get("title") or "",
            body=issue.get("body"),
            user=user_login(issue.get("user")),
            labels=tuple(issue.get("labels") or ()),
            author_association=issue.get("author_association"),
            created_at=issue.get("created_at"),
            updated_at=issue.get("updated_at"),
            closed_at=issue.get("closed_at"),
        )


@dataclass(frozen=True)
class SyncCommentQuery:
    """A comment of any kind, normalized for storage.

    ``comment_type`` is the discriminant; use the ``from_*`` constructors to
    build one from the matching GitHub payload.
    """

    owner: str
    repo: str
    pull_number: int | None
    comment_type: CommentType
    id: int
    user: str | None
    body: str
    created_at: str | None
    updated_at: str | None
    author_association: str | None = None
    html_url: str | None = None

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}#{self.id}"

    @classmethod
    def from_review(cls, pull: PullKey, review: Payload) -> "SyncCommentQuery":
        """Reviews only carry ``submitted_at``; it serves as both timestamps."""
        submitted_at = review.get("submitted_at")
        return cls(
            owner=pull.owner,
            repo=pull.repo,
            pull_number=pull.pull_number,
            comment_type=CommentType.REVIEW,
            id=review["id"],
            user=user_login(review.get("user")),
            body=review.get("body") or "",
            created_at=submitted_at,
            updated_at=submitted_at,
            author_association=review.get("author_association"),
            html_url=review.get("html_url"),
        )

    @classmethod
    def from_review_comment(
        cls, pull: PullKey, comment: Payload
    ) -> "SyncCommentQuery":
        return cls(
            owner=pull.owner,
            repo=pull.repo,
            pull_number=pull.pull_number,
            comment_type=CommentType.REVIEW_COMMENT,
            id=comment["id"],
            user=user_login(comment.get("user")),
            body=comment.get("body") or "",
            created_at=comment.get("created_at"),
            updated_at=comment.get("updated_at"),
            author_association=comment.get("author_association"),
            html_url=comment.get("html_url"),
        )

    @classmethod
    def from_issue_comment(
        cls, issue: IssueKey | PullKey, comment: Payload
    ) -> "SyncCommentQuery":
        """Comments on the conversation tab of an issue or a pull request."""
        number = (
            issue.pull_number if isinstance(issue, PullKey) else issue.issue_number
        )
        return cls(
            owner=issue.owner,
            repo=issue.repo,
            pull_number=number,
            comment_type=CommentType.COMMON_COMMENT,
            id=comment["id"],
            user=user_login(comment.get("user")),
            body=comment.get("body") or "",
            created_at=comment.get("created_at"),
            updated_at=comment.get("updated_at"),
            author_association=comment.get("author_association"),
            html_url=comment.get("html_url"),
        )


@dataclass(frozen=True)
class SyncPullStatusQuery:
    """Everything needed to recompute the open pull request aggregate."""

    pull: PullKey
    pull_author: str | None
    comments: list[Payload] = field(default_factory=list)
    reviews: list[Payload] = field(default_factory=list)
    review_comments: list[Payload] = field(default_factory=list)
    commits: list[Payload] = field(default_factory=list)


@dataclass(frozen=True)
class SyncPullLastCommentQuery:
    pull: PullKey
    pull_author: str | None
    last_comment_author: str | None
    last_comment_time: str | None


@dataclass(frozen=True)
class SyncPullLastReviewQuery:
    pull: PullKey
    last_review_time: str | None


@dataclass(frozen=True)
class SyncPullLastCommitQuery:
    pull: PullKey
    last_commit_time: str | None


@dataclass(frozen=True)
class SyncContributorEmailQuery:
    contributor_login: str
    pull_request_patch: str

"""Enums for database models."""

import enum


class PullStatus(str, enum.Enum):
    """Stored status of a pull request."""

    OPEN = "open"
    CLOSED = "closed"
    MERGED = "merged"


class IssueStatus(str, enum.Enum):
    """Stored status of an issue."""

    OPEN = "open"
    CLOSED = "closed"


class CommentType(str, enum.Enum):
    """Kind of a stored comment."""

    COMMON_COMMENT = "common comment"
    REVIEW_COMMENT = "review comment"
    REVIEW = "review"


class Relation(str, enum.Enum):
    """Relation of an author to the organization owning the repository."""

    MEMBER = "member"
    NOT_MEMBER = "not member"

    @classmethod
    def from_association(cls, author_association: str | None) -> "Relation":
        """Derive the relation from GitHub's ``author_association``."""
        if author_association == "MEMBER":
            return cls.MEMBER
        return cls.NOT_MEMBER

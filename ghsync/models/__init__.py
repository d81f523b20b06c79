"""SQLAlchemy models for the GitHub community data bot."""

from .base import Base, BaseModel
from .comment import Comment
from .contributor_info import ContributorInfo
from .enums import CommentType, IssueStatus, PullStatus, Relation
from .issue import Issue
from .open_pr_status import OpenPRStatus
from .pull import Pull

__all__ = [
    # Base classes
    "Base",
    "BaseModel",
    # Enums
    "CommentType",
    "IssueStatus",
    "PullStatus",
    "Relation",
    # Mirrored entities
    "Pull",
    "Issue",
    "Comment",
    "ContributorInfo",
    # Aggregates
    "OpenPRStatus",
]

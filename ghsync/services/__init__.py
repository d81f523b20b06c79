"""Reconciliation services applying GitHub data to the store."""

from .comment_service import CommentService
from .contributor_service import ContributorService
from .issue_service import IssueService
from .pull_service import PullService

__all__ = [
    "CommentService",
    "ContributorService",
    "IssueService",
    "PullService",
]

"""Repository implementations for data access layer."""

from .base import BaseRepository
from .comment import CommentRepository
from .contributor import ContributorRepository
from .issue import IssueRepository
from .open_pr_status import OpenPRStatusRepository
from .pull import PullRepository

__all__ = [
    "BaseRepository",
    "CommentRepository",
    "ContributorRepository",
    "IssueRepository",
    "OpenPRStatusRepository",
    "PullRepository",
]

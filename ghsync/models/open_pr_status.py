"""OpenPRStatus SQLAlchemy model."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class OpenPRStatus(BaseModel):
    """Latest activity times of an open pull request.

    Each column is updated on its own by different events; a write touching one
    column keeps the others as stored.
    """

    __tablename__ = "open_pr_status"

    owner: Mapped[str] = mapped_column(String(255), primary_key=True)
    repo: Mapped[str] = mapped_column(String(255), primary_key=True)
    pull_number: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    last_comment_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_review_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_update_code_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        UniqueConstraint(
            "owner", "repo", "pull_number", name="uq_open_pr_status_repo_number"
        ),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<OpenPRStatus({self.owner}/{self.repo}#{self.pull_number}, "
            f"last_comment_at={self.last_comment_at}, "
            f"last_review_at={self.last_review_at}, "
            f"last_update_code_at={self.last_update_code_at})>"
        )

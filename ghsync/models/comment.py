"""Comment SQLAlchemy model."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class Comment(BaseModel):
    """Issue comment, review comment or review.

    ``comment_id`` is GitHub's id and is globally unique. ``pull_number`` holds
    the pull request number, or the issue number for comments on plain issues.
    """

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    owner: Mapped[str | None] = mapped_column(String(255), nullable=True)
    repo: Mapped[str | None] = mapped_column(String(255), nullable=True)
    pull_number: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    comment_id: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True)
    comment_type: Mapped[str] = mapped_column(String(32), nullable=False)

    body: Mapped[str] = mapped_column(Text, default="", nullable=False)
    user: Mapped[str | None] = mapped_column(String(255), nullable=True)
    url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    association: Mapped[str | None] = mapped_column(String(64), nullable=True)
    relation: Mapped[str | None] = mapped_column(String(32), nullable=True)

    created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<Comment(id={self.id}, comment_id={self.comment_id}, "
            f"comment_type={self.comment_type})>"
        )

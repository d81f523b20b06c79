"""Issue SQLAlchemy model."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class Issue(BaseModel):
    """Mirror of a GitHub issue that is not a pull request."""

    __tablename__ = "issues"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    owner: Mapped[str | None] = mapped_column(String(255), nullable=True)
    repo: Mapped[str | None] = mapped_column(String(255), nullable=True)
    issue_number: Mapped[int] = mapped_column(Integer, nullable=False)

    title: Mapped[str] = mapped_column(Text, default="", nullable=False)
    body: Mapped[str] = mapped_column(Text, default="", nullable=False)
    user: Mapped[str | None] = mapped_column(String(255), nullable=True)
    label: Mapped[str] = mapped_column(Text, default="", nullable=False)
    status: Mapped[str | None] = mapped_column(String(128), nullable=True)
    association: Mapped[str | None] = mapped_column(String(64), nullable=True)
    relation: Mapped[str | None] = mapped_column(String(32), nullable=True)

    created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    closed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("owner", "repo", "issue_number", name="uq_issue_repo_number"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<Issue(id={self.id}, {self.owner}/{self.repo}#{self.issue_number}, "
            f"status={self.status})>"
        )

"""Pull SQLAlchemy model."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel
from .enums import PullStatus


class Pull(BaseModel):
    """Mirror of a GitHub pull request."""

    __tablename__ = "pulls"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Identity
    owner: Mapped[str | None] = mapped_column(String(255), nullable=True)
    repo: Mapped[str | None] = mapped_column(String(255), nullable=True)
    pull_number: Mapped[int] = mapped_column(Integer, nullable=False)

    # Content
    title: Mapped[str] = mapped_column(Text, default="", nullable=False)
    body: Mapped[str] = mapped_column(Text, default="", nullable=False)
    user: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    label: Mapped[str] = mapped_column(Text, default="", nullable=False)
    status: Mapped[str | None] = mapped_column(String(128), nullable=True)
    association: Mapped[str | None] = mapped_column(String(64), nullable=True)
    relation: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # Timestamps copied from GitHub
    created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    closed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    merged_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("owner", "repo", "pull_number", name="uq_pull_repo_number"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<Pull(id={self.id}, {self.owner}/{self.repo}#{self.pull_number}, "
            f"status={self.status})>"
        )

    @property
    def is_open(self) -> bool:
        """Check if the pull request is still open."""
        return self.status == PullStatus.OPEN.value

    @property
    def is_merged(self) -> bool:
        """Check if the pull request was merged."""
        return self.status == PullStatus.MERGED.value

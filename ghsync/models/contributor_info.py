"""ContributorInfo SQLAlchemy model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class ContributorInfo(BaseModel):
    """Contact information of a contributor, keyed by GitHub login.

    A row is created the first time an email is found for the login.
    """

    __tablename__ = "contributor_info"

    login: Mapped[str] = mapped_column("github", String(255), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<ContributorInfo(login={self.login}, email={self.email})>"

"""ContributorInfo repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ghsync.models import ContributorInfo, Pull, PullStatus

from .base import BaseRepository


class ContributorRepository(BaseRepository[ContributorInfo]):
    """Repository for contributor contact information."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """Initialize with session factory."""
        super().__init__(session_factory, ContributorInfo)

    async def get_by_login(self, login: str) -> ContributorInfo | None:
        """Get contributor by GitHub login."""
        return await self.get_by_id(login)

    async def list_no_email_contributor_logins(self) -> list[str]:
        """Logins of merged pull request authors without a known email.

        A contributor without email may have no contributor row at all, so
        the lookup starts from the pulls table.
        """
        with_email = select(ContributorInfo.login).where(
            ContributorInfo.email.is_not(None)
        )
        query = (
            select(Pull.user)
            .where(
                Pull.status == PullStatus.MERGED.value,
                Pull.user.is_not(None),
                Pull.user.not_in(with_email),
            )
            .distinct()
            .order_by(Pull.user)
        )
        async with self.session() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def update_email_info(self, login: str, email: str) -> ContributorInfo:
        """Create the contributor row or patch its email."""
        stored = await self.get_by_login(login)
        values = stored.to_dict() if stored is not None else {"login": login}
        return await self.save({**values, "email": email})

"""Contributor email reconciliation."""

import logging

from sqlalchemy.exc import SQLAlchemyError

from ghsync.repositories import ContributorRepository
from ghsync.utils.patch import extract_email_from_patch

from .queries import SyncContributorEmailQuery

logger = logging.getLogger(__name__)


class ContributorService:
    """Keeps track of contributor emails found in pull request patches."""

    def __init__(
        self,
        contributor_repository: ContributorRepository,
        log: logging.Logger | None = None,
    ):
        self.contributor_repository = contributor_repository
        self.log = log or logger

    async def list_no_email_contributors_login(self) -> list[str]:
        """Logins of merged pull request authors whose email is unknown."""
        return await self.contributor_repository.list_no_email_contributor_logins()

    async def sync_contributor_email_from_pr(
        self, query: SyncContributorEmailQuery
    ) -> bool:
        """Extract the contributor email from a pull request patch and store it.

        Returns:
            True if an email was found and stored
        """
        login = query.contributor_login
        email_found = extract_email_from_patch(query.pull_request_patch)

        if email_found is None:
            return False

        try:
            await self.contributor_repository.update_email_info(login, email_found)
            self.log.info(f"sync contributor {login} with email {email_found} success")
            return True
        except SQLAlchemyError as e:
            self.log.error(
                f"failed to sync contributor email: {e}", extra={"login": login}
            )
            return False

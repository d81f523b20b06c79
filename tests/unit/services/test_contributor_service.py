"""Unit tests for contributor email reconciliation."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from ghsync.services import ContributorService
from ghsync.services.queries import SyncContributorEmailQuery

PATCH = """From: lisi <lisi1024@example.com>
Subject: [PATCH 1/1] Update 5.txt

Signed-off-by: zhangsan <zhangsan1024@example.com>
"""


@pytest.fixture
def contributor_service(mock_contributor_repository: AsyncMock) -> ContributorService:
    return ContributorService(mock_contributor_repository)


class TestContributorService:
    """Tests for ContributorService."""

    async def test_list_no_email_contributors(
        self,
        contributor_service: ContributorService,
        mock_contributor_repository: AsyncMock,
    ) -> None:
        mock_contributor_repository.list_no_email_contributor_logins.return_value = [
            "lisi",
            "zhangsan",
        ]

        assert await contributor_service.list_no_email_contributors_login() == [
            "lisi",
            "zhangsan",
        ]

    async def test_signed_off_email_is_stored(
        self,
        contributor_service: ContributorService,
        mock_contributor_repository: AsyncMock,
    ) -> None:
        """
        Why: The sign-off is the address the contributor chose to publish
        What: With both headers present the sign-off address is stored
        How: Syncs a patch carrying different From and Signed-off-by emails
        """
        synced = await contributor_service.sync_contributor_email_from_pr(
            SyncContributorEmailQuery(contributor_login="zhangsan", pull_request_patch=PATCH)
        )

        assert synced is True
        mock_contributor_repository.update_email_info.assert_awaited_once_with(
            "zhangsan", "zhangsan1024@example.com"
        )

    async def test_patch_without_email(
        self,
        contributor_service: ContributorService,
        mock_contributor_repository: AsyncMock,
    ) -> None:
        synced = await contributor_service.sync_contributor_email_from_pr(
            SyncContributorEmailQuery(contributor_login="ghost", pull_request_patch="From: -\n")
        )

        assert synced is False
        mock_contributor_repository.update_email_info.assert_not_awaited()

    async def test_store_failure_reports_not_synced(
        self,
        contributor_service: ContributorService,
        mock_contributor_repository: AsyncMock,
    ) -> None:
        mock_contributor_repository.update_email_info.side_effect = OperationalError(
            "UPDATE", {}, Exception("down")
        )

        synced = await contributor_service.sync_contributor_email_from_pr(
            SyncContributorEmailQuery(contributor_login="zhangsan", pull_request_patch=PATCH)
        )

        assert synced is False

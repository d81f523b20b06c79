"""Unit tests for issue reconciliation."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from ghsync.keys import IssueKey, RepoKey
from ghsync.models import Issue
from ghsync.services import IssueService
from ghsync.services.issue_service import make_issue, patch_issue
from ghsync.services.queries import SyncIssueQuery
from tests.fixtures.payloads import make_issue_payload

REPO = RepoKey("owner", "repo")
ISSUE_KEY = IssueKey("owner", "repo", 7)


@pytest.fixture
def issue_service(mock_issue_repository: AsyncMock) -> IssueService:
    return IssueService(mock_issue_repository)


class TestIssueMergeHelpers:
    def test_patch_issue(self) -> None:
        query = SyncIssueQuery.from_payload(
            REPO,
            make_issue_payload(
                state="closed",
                labels=[{"name": "type/bug"}],
                closed_at="2020-01-03T00:00:00Z",
                author_association="MEMBER",
            ),
        )

        record = patch_issue(make_issue(query), query)

        assert record["issue_number"] == 7
        assert record["status"] == "closed"
        assert record["label"] == "type/bug"
        assert record["relation"] == "member"
        assert record["closed_at"] == datetime(2020, 1, 3, tzinfo=UTC)


class TestSyncIssue:
    """Tests for IssueService.sync_issue."""

    async def test_first_sync_is_stored(
        self, issue_service: IssueService, mock_issue_repository: AsyncMock
    ) -> None:
        await issue_service.sync_issue(SyncIssueQuery.from_payload(REPO, make_issue_payload()))

        mock_issue_repository.get_by_key.assert_awaited_once_with(ISSUE_KEY)
        saved = mock_issue_repository.save_if_newer.await_args.args[0]
        assert saved["id"] is None
        assert saved["title"] == "Issue 7"
        assert saved["updated_at"] == datetime(2020, 1, 2, tzinfo=UTC)

    @pytest.mark.parametrize(
        ("received_update", "should_save"),
        [
            ("2020-01-01T00:00:00Z", False),
            ("2020-01-02T00:00:00Z", False),
            ("2020-01-03T00:00:00Z", True),
        ],
    )
    async def test_freshness_gate(
        self,
        issue_service: IssueService,
        mock_issue_repository: AsyncMock,
        received_update: str,
        should_save: bool,
    ) -> None:
        mock_issue_repository.get_by_key.return_value = Issue(
            id=3,
            owner="owner",
            repo="repo",
            issue_number=7,
            updated_at=datetime(2020, 1, 2, tzinfo=UTC),
        )

        await issue_service.sync_issue(
            SyncIssueQuery.from_payload(REPO, make_issue_payload(updated_at=received_update))
        )

        assert mock_issue_repository.save_if_newer.await_count == (1 if should_save else 0)

    async def test_store_failure_is_logged_not_raised(
        self, issue_service: IssueService, mock_issue_repository: AsyncMock
    ) -> None:
        mock_issue_repository.save_if_newer.side_effect = OperationalError(
            "INSERT", {}, Exception("down")
        )

        await issue_service.sync_issue(SyncIssueQuery.from_payload(REPO, make_issue_payload()))

    async def test_lookup_failure_is_logged_not_raised(
        self, issue_service: IssueService, mock_issue_repository: AsyncMock
    ) -> None:
        mock_issue_repository.get_by_key.side_effect = OperationalError(
            "SELECT", {}, Exception("connection lost")
        )

        await issue_service.sync_issue(SyncIssueQuery.from_payload(REPO, make_issue_payload()))

        mock_issue_repository.save_if_newer.assert_not_awaited()


class TestSyncIssueUpdateTime:
    async def test_passes_parsed_time(
        self, issue_service: IssueService, mock_issue_repository: AsyncMock
    ) -> None:
        mock_issue_repository.update_updated_at.return_value = False

        await issue_service.sync_issue_update_time(ISSUE_KEY, "2020-02-01T00:00:00Z")

        mock_issue_repository.update_updated_at.assert_awaited_once_with(
            ISSUE_KEY, datetime(2020, 2, 1, tzinfo=UTC)
        )

    async def test_missing_time_is_noop(
        self, issue_service: IssueService, mock_issue_repository: AsyncMock
    ) -> None:
        await issue_service.sync_issue_update_time(ISSUE_KEY, None)

        mock_issue_repository.update_updated_at.assert_not_awaited()

"""
Unit tests for pull request webhook handlers.

Why: Each pull request related delivery has to update the pull record, its
     comments and the open pull request aggregate in the right combination.
What: Tests handle_pull_request_event, handle_pull_request_review_event and
      handle_pull_request_review_comment_event.
How: Feeds webhook-shaped payloads to the handlers with mocked services.
"""

from unittest.mock import AsyncMock

import pytest

from ghsync.events import (
    handle_pull_request_event,
    handle_pull_request_review_comment_event,
    handle_pull_request_review_event,
)
from ghsync.github import GitHubClient, GitHubNotFoundError
from ghsync.keys import PullKey
from ghsync.services import CommentService, ContributorService, PullService
from ghsync.services.queries import (
    SyncContributorEmailQuery,
    SyncPullLastCommentQuery,
    SyncPullLastCommitQuery,
    SyncPullLastReviewQuery,
)
from tests.fixtures.payloads import (
    make_comment_payload,
    make_event,
    make_pull_payload,
    make_review_payload,
)

PULL_KEY = PullKey("owner", "repo", 2)
PATCH = "From: dev <dev@example.com>\n"


@pytest.fixture
def pull_service() -> AsyncMock:
    return AsyncMock(spec=PullService)


@pytest.fixture
def comment_service() -> AsyncMock:
    return AsyncMock(spec=CommentService)


@pytest.fixture
def contributor_service() -> AsyncMock:
    return AsyncMock(spec=ContributorService)


@pytest.fixture
def github() -> AsyncMock:
    client = AsyncMock(spec=GitHubClient)
    client.get_pull_patch.return_value = PATCH
    return client


class TestHandlePullRequestEvent:
    """Tests for pull_request deliveries."""

    async def test_opened_syncs_pull_and_commit_time(
        self, github: AsyncMock, pull_service: AsyncMock, contributor_service: AsyncMock
    ) -> None:
        payload = make_event("opened", pull_request=make_pull_payload())

        await handle_pull_request_event(payload, github, pull_service, contributor_service)

        pull_service.sync_pull_request.assert_awaited_once()
        query = pull_service.sync_pull_request.await_args.args[0]
        assert query.key == PULL_KEY
        pull_service.sync_open_pr_last_commit_time.assert_awaited_once_with(
            SyncPullLastCommitQuery(pull=PULL_KEY, last_commit_time="2015-09-07T12:14:59Z")
        )
        pull_service.sync_pull_request_update_time.assert_not_awaited()

    async def test_synchronize_only_moves_update_time(
        self, github: AsyncMock, pull_service: AsyncMock, contributor_service: AsyncMock
    ) -> None:
        payload = make_event("synchronize", pull_request=make_pull_payload())

        await handle_pull_request_event(payload, github, pull_service, contributor_service)

        pull_service.sync_pull_request.assert_not_awaited()
        pull_service.sync_pull_request_update_time.assert_awaited_once_with(
            PULL_KEY, "2015-09-07T12:14:59Z"
        )
        pull_service.sync_open_pr_last_commit_time.assert_awaited_once()

    @pytest.mark.parametrize("action", ["assigned", "review_requested", "ready_for_review"])
    async def test_other_actions_move_update_time(
        self,
        action: str,
        github: AsyncMock,
        pull_service: AsyncMock,
        contributor_service: AsyncMock,
    ) -> None:
        payload = make_event(action, pull_request=make_pull_payload())

        await handle_pull_request_event(payload, github, pull_service, contributor_service)

        pull_service.sync_pull_request.assert_not_awaited()
        pull_service.sync_pull_request_update_time.assert_awaited_once()
        pull_service.sync_open_pr_last_commit_time.assert_not_awaited()

    async def test_merged_pull_removes_status_and_syncs_email(
        self, github: AsyncMock, pull_service: AsyncMock, contributor_service: AsyncMock
    ) -> None:
        """
        Why: Merged contributions are where contributor emails come from
        What: Closing a merged pull drops its aggregate and stores the patch email
        How: Sends a closed+merged delivery and checks both effects
        """
        payload = make_event(
            "closed",
            pull_request=make_pull_payload(
                state="closed", merged=True, merged_at="2015-09-07T12:14:59Z"
            ),
        )

        await handle_pull_request_event(payload, github, pull_service, contributor_service)

        pull_service.sync_pull_request.assert_awaited_once()
        pull_service.remove_open_pull_request_status.assert_awaited_once_with(PULL_KEY)
        github.get_pull_patch.assert_awaited_once_with("owner", "repo", 2)
        contributor_service.sync_contributor_email_from_pr.assert_awaited_once_with(
            SyncContributorEmailQuery(contributor_login="contributor", pull_request_patch=PATCH)
        )

    async def test_closed_without_merge_skips_email(
        self, github: AsyncMock, pull_service: AsyncMock, contributor_service: AsyncMock
    ) -> None:
        payload = make_event(
            "closed", pull_request=make_pull_payload(state="closed", merged=False)
        )

        await handle_pull_request_event(payload, github, pull_service, contributor_service)

        pull_service.remove_open_pull_request_status.assert_awaited_once_with(PULL_KEY)
        github.get_pull_patch.assert_not_awaited()
        contributor_service.sync_contributor_email_from_pr.assert_not_awaited()

    async def test_patch_failure_skips_email(
        self, github: AsyncMock, pull_service: AsyncMock, contributor_service: AsyncMock
    ) -> None:
        github.get_pull_patch.side_effect = GitHubNotFoundError("Not Found", 404)
        payload = make_event(
            "closed", pull_request=make_pull_payload(state="closed", merged=True)
        )

        await handle_pull_request_event(payload, github, pull_service, contributor_service)

        contributor_service.sync_contributor_email_from_pr.assert_not_awaited()


class TestHandlePullRequestReviewEvent:
    async def test_submitted_review_on_open_pull(
        self, pull_service: AsyncMock, comment_service: AsyncMock
    ) -> None:
        review = make_review_payload(80, submitted_at="2021-01-01T00:00:00Z")
        payload = make_event(
            "submitted",
            pull_request=make_pull_payload(updated_at="2021-01-01T00:00:01Z"),
            review=review,
        )

        await handle_pull_request_review_event(payload, pull_service, comment_service)

        comment_service.sync_pull_request_review.assert_awaited_once_with(PULL_KEY, review)
        pull_service.sync_open_pr_last_review_time.assert_awaited_once_with(
            SyncPullLastReviewQuery(pull=PULL_KEY, last_review_time="2021-01-01T00:00:00Z")
        )
        pull_service.sync_pull_request_update_time.assert_awaited_once_with(
            PULL_KEY, "2021-01-01T00:00:01Z"
        )

    async def test_review_on_closed_pull_skips_aggregate(
        self, pull_service: AsyncMock, comment_service: AsyncMock
    ) -> None:
        payload = make_event(
            "edited",
            pull_request=make_pull_payload(state="closed"),
            review=make_review_payload(),
        )

        await handle_pull_request_review_event(payload, pull_service, comment_service)

        comment_service.sync_pull_request_review.assert_awaited_once()
        pull_service.sync_open_pr_last_review_time.assert_not_awaited()

    async def test_unknown_action_is_ignored(
        self, pull_service: AsyncMock, comment_service: AsyncMock
    ) -> None:
        payload = make_event(
            "requested", pull_request=make_pull_payload(), review=make_review_payload()
        )

        await handle_pull_request_review_event(payload, pull_service, comment_service)

        comment_service.sync_pull_request_review.assert_not_awaited()
        pull_service.sync_pull_request_update_time.assert_not_awaited()


class TestHandlePullRequestReviewCommentEvent:
    async def test_created_comment_on_open_pull(
        self, pull_service: AsyncMock, comment_service: AsyncMock
    ) -> None:
        comment = make_comment_payload(81, user="reviewer", updated_at="2021-01-02T00:00:00Z")
        payload = make_event(
            "created", pull_request=make_pull_payload(user="contributor"), comment=comment
        )

        await handle_pull_request_review_comment_event(payload, pull_service, comment_service)

        comment_service.sync_pull_request_review_comment.assert_awaited_once_with(
            PULL_KEY, comment
        )
        pull_service.sync_open_pr_last_comment_time.assert_awaited_once_with(
            SyncPullLastCommentQuery(
                pull=PULL_KEY,
                pull_author="contributor",
                last_comment_author="reviewer",
                last_comment_time="2021-01-02T00:00:00Z",
            )
        )
        pull_service.sync_pull_request_update_time.assert_awaited_once()

    async def test_comment_on_closed_pull_skips_aggregate(
        self, pull_service: AsyncMock, comment_service: AsyncMock
    ) -> None:
        payload = make_event(
            "deleted",
            pull_request=make_pull_payload(state="closed"),
            comment=make_comment_payload(),
        )

        await handle_pull_request_review_comment_event(payload, pull_service, comment_service)

        comment_service.sync_pull_request_review_comment.assert_awaited_once()
        pull_service.sync_open_pr_last_comment_time.assert_not_awaited()

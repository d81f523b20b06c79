"""
Unit tests for GitHub pagination module.

Why: Ensure list endpoints are walked page by page by following Link headers,
     so the bulk sync sees every item exactly once and in order.

What: Tests LinkHeader parsing, PaginatedResponse, and AsyncPaginator.

How: Uses a mock client whose _fetch_paginated returns canned pages.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from ghsync.github.pagination import (
    MAX_PER_PAGE,
    AsyncPaginator,
    LinkHeader,
    PaginatedResponse,
)

FIRST_URL = "https://api.github.com/repos/owner/repo/pulls"
SECOND_URL = "https://api.github.com/repositories/1/pulls?page=2"
THIRD_URL = "https://api.github.com/repositories/1/pulls?page=3"


def page(items: list[dict], next_url: str | None = None) -> PaginatedResponse:
    headers = {"Link": f'<{next_url}>; rel="next"'} if next_url else {}
    return PaginatedResponse(items, headers, "unused")


class TestLinkHeader:
    """Test LinkHeader parsing."""

    def test_link_header_empty(self) -> None:
        """
        Why: The last page of a listing has no Link header at all
        What: Tests LinkHeader with a missing header
        How: Creates LinkHeader with None and validates empty state
        """
        link_header = LinkHeader(None)

        assert link_header.links == {}
        assert link_header.next_url is None
        assert not link_header.has_next

    def test_link_header_multiple_links(self) -> None:
        header_value = (
            f'<{SECOND_URL}>; rel="next", '
            '<https://api.github.com/repositories/1/pulls?page=10>; rel="last"'
        )

        link_header = LinkHeader(header_value)

        assert link_header.next_url == SECOND_URL
        assert link_header.has_next
        assert link_header.links["last"].endswith("page=10")

    def test_link_header_last_page(self) -> None:
        header_value = (
            '<https://api.github.com/repositories/1/pulls?page=1>; rel="first", '
            '<https://api.github.com/repositories/1/pulls?page=9>; rel="prev"'
        )

        assert not LinkHeader(header_value).has_next

    def test_link_header_malformed(self) -> None:
        assert LinkHeader("not a link header").links == {}


class TestPaginatedResponse:
    def test_navigation(self) -> None:
        response = page([{"id": 1}], next_url=SECOND_URL)

        assert response.items == [{"id": 1}]
        assert response.has_next_page
        assert response.next_page_url == SECOND_URL

    def test_last_page(self) -> None:
        response = page([])

        assert not response.has_next_page
        assert response.next_page_url is None


class TestAsyncPaginator:
    """Test AsyncPaginator."""

    @pytest.fixture
    def mock_client(self) -> Mock:
        client = Mock()
        client._fetch_paginated = AsyncMock()
        return client

    def test_per_page_is_capped(self, mock_client: Mock) -> None:
        paginator = AsyncPaginator(mock_client, FIRST_URL, per_page=500)

        assert paginator.per_page == MAX_PER_PAGE
        assert paginator.params == {"per_page": MAX_PER_PAGE}

    async def test_pages_follow_next_links(self, mock_client: Mock) -> None:
        """
        Why: The next link already encodes the query, so params must not be resent
        What: Only the first request carries the list parameters
        How: Walks three pages and inspects the fetch calls
        """
        mock_client._fetch_paginated.side_effect = [
            page([{"id": 1}, {"id": 2}], next_url=SECOND_URL),
            page([{"id": 3}], next_url=THIRD_URL),
            page([{"id": 4}]),
        ]
        paginator = AsyncPaginator(mock_client, FIRST_URL, params={"state": "all"})

        pages = [items async for items in paginator.pages()]

        assert pages == [[{"id": 1}, {"id": 2}], [{"id": 3}], [{"id": 4}]]
        calls = mock_client._fetch_paginated.await_args_list
        assert [call.args for call in calls] == [
            (FIRST_URL, {"state": "all", "per_page": 100}),
            (SECOND_URL, None),
            (THIRD_URL, None),
        ]

    async def test_max_pages(self, mock_client: Mock) -> None:
        mock_client._fetch_paginated.side_effect = [
            page([{"id": 1}], next_url=SECOND_URL),
            page([{"id": 2}], next_url=THIRD_URL),
        ]
        paginator = AsyncPaginator(mock_client, FIRST_URL, max_pages=1)

        assert await paginator.collect_all() == [{"id": 1}]
        assert mock_client._fetch_paginated.await_count == 1

    async def test_items_key_is_passed_through(self, mock_client: Mock) -> None:
        mock_client._fetch_paginated.return_value = page([{"name": "tidb"}])
        paginator = AsyncPaginator(mock_client, FIRST_URL, items_key="repositories")

        assert [item async for item in paginator] == [{"name": "tidb"}]
        assert mock_client._fetch_paginated.await_args.kwargs == {
            "items_key": "repositories"
        }

    async def test_empty_listing(self, mock_client: Mock) -> None:
        mock_client._fetch_paginated.return_value = page([])

        assert await AsyncPaginator(mock_client, FIRST_URL).collect_all() == []

"""GitHub API pagination utilities."""

import re
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .client import GitHubClient

# Link header format: <url>; rel="next", <url>; rel="last"
LINK_PATTERN = re.compile(r'<([^>]+)>;\s*rel="([^"]+)"')

MAX_PER_PAGE = 100


class LinkHeader:
    """Parser for GitHub Link headers."""

    def __init__(self, link_header: str | None = None):
        self.links: dict[str, str] = {}
        if link_header:
            for match in LINK_PATTERN.finditer(link_header):
                url, rel = match.groups()
                self.links[rel] = url

    @property
    def next_url(self) -> str | None:
        return self.links.get("next")

    @property
    def has_next(self) -> bool:
        return "next" in self.links


class PaginatedResponse:
    """One page of a list endpoint together with its navigation links."""

    def __init__(
        self,
        data: list[dict[str, Any]],
        headers: dict[str, str],
        url: str,
    ):
        self.data = data
        self.headers = headers
        self.url = url
        self.link_header = LinkHeader(headers.get("Link"))

    @property
    def has_next_page(self) -> bool:
        return self.link_header.has_next

    @property
    def next_page_url(self) -> str | None:
        return self.link_header.next_url

    @property
    def items(self) -> list[dict[str, Any]]:
        return self.data


class AsyncPaginator:
    """Async iterator over a paginated GitHub list endpoint.

    Pages are fetched lazily and in order by following ``rel="next"`` links.
    Iterate the paginator for single items, or ``pages()`` to handle one page
    at a time (the bulk sync pauses between pages).

    Some endpoints wrap the list in an object (for example
    ``/installation/repositories`` returns ``{"repositories": [...]}``);
    ``items_key`` names the list to unwrap.
    """

    def __init__(
        self,
        client: "GitHubClient",
        initial_url: str,
        params: dict[str, Any] | None = None,
        max_pages: int | None = None,
        per_page: int = MAX_PER_PAGE,
        items_key: str | None = None,
    ):
        self.client = client
        self.initial_url = initial_url
        self.params = dict(params or {})
        self.max_pages = max_pages
        self.per_page = min(per_page, MAX_PER_PAGE)
        self.items_key = items_key

        self.params["per_page"] = self.per_page

    async def pages(self) -> AsyncIterator[list[dict[str, Any]]]:
        """Yield the items of each page as a list."""
        next_url: str | None = self.initial_url
        params: dict[str, Any] | None = self.params
        fetched = 0

        while next_url:
            if self.max_pages and fetched >= self.max_pages:
                break

            response = await self.client._fetch_paginated(
                next_url, params, items_key=self.items_key
            )
            fetched += 1

            # The next link already carries every query parameter.
            next_url = response.next_page_url if response.has_next_page else None
            params = None

            yield response.items

    async def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        async for page in self.pages():
            for item in page:
                yield item

    async def collect_all(self) -> list[dict[str, Any]]:
        """Collect all items from all pages."""
        items = []
        async for item in self:
            items.append(item)
        return items

"""Async GitHub REST API client."""

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any

import aiohttp

from .auth import AuthProvider
from .exceptions import (
    GitHubAuthenticationError,
    GitHubConnectionError,
    GitHubError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubServerError,
    GitHubTimeoutError,
    GitHubValidationError,
)
from .pagination import AsyncPaginator, PaginatedResponse

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/vnd.github.v3+json"
PATCH_MEDIA_TYPE = "application/vnd.github.v3.patch"


@dataclass
class GitHubClientConfig:
    """Configuration for GitHub client."""

    base_url: str = "https://api.github.com"
    timeout: int = 30
    user_agent: str = "ghsync/0.1"
    max_concurrent_requests: int = 10


@dataclass
class GitHubResponse:
    """Status, headers and body of a completed request."""

    status: int
    headers: dict[str, str]
    body: str

    def json(self) -> Any:
        if not self.body:
            return None
        return json.loads(self.body)


class GitHubClient:
    """Async GitHub API client.

    Failed requests raise a ``GitHubError`` subclass right away; retrying is
    left to the caller.
    """

    def __init__(
        self,
        auth: AuthProvider,
        config: GitHubClientConfig | None = None,
    ) -> None:
        self.auth = auth
        self.config = config or GitHubClientConfig()

        # HTTP session will be initialized on first use
        self._session: aiohttp.ClientSession | None = None
        self._session_lock = asyncio.Lock()
        self._request_semaphore = asyncio.Semaphore(self.config.max_concurrent_requests)

    async def __aenter__(self) -> "GitHubClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            async with self._session_lock:
                if self._session is None or self._session.closed:
                    self._session = aiohttp.ClientSession(
                        timeout=aiohttp.ClientTimeout(total=self.config.timeout),
                        headers={
                            "User-Agent": self.config.user_agent,
                            "Accept": JSON_MEDIA_TYPE,
                        },
                    )
        return self._session

    async def close(self) -> None:
        """Close HTTP session and cleanup resources."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    async def _make_request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> GitHubResponse:
        """Send a request and read the whole response body.

        Raises:
            GitHubError: Various GitHub API errors
        """
        correlation_id = str(uuid.uuid4())[:8]

        request_headers = dict(headers or {})
        auth_token = await self.auth.get_token()
        request_headers.update(auth_token.to_header())

        session = await self._ensure_session()

        request_kwargs: dict[str, Any] = {
            "params": params,
            "headers": request_headers,
        }
        if data is not None:
            request_kwargs["json"] = data

        try:
            async with self._request_semaphore:
                start_time = time.time()
                logger.debug(f"GitHub API request [{correlation_id}] {method} {url}")

                async with session.request(method, url, **request_kwargs) as response:
                    result = GitHubResponse(
                        status=response.status,
                        headers=dict(response.headers),
                        body=await response.text(),
                    )

                logger.debug(
                    f"GitHub API response [{correlation_id}] "
                    f"{result.status} in {time.time() - start_time:.2f}s"
                )
        except TimeoutError as e:
            raise GitHubTimeoutError(f"Request timeout for {method} {url}") from e
        except aiohttp.ClientError as e:
            raise GitHubConnectionError(
                f"Connection error for {method} {url}: {e}"
            ) from e

        if result.status >= 400:
            self._raise_for_status(result, correlation_id)

        return result

    def _raise_for_status(self, response: GitHubResponse, correlation_id: str) -> None:
        """Translate an error response into the matching exception."""
        try:
            error_data = response.json() or {}
        except json.JSONDecodeError:
            error_data = {"message": response.body}
        if not isinstance(error_data, dict):
            error_data = {"message": str(error_data)}

        status = response.status
        error_message = error_data.get("message") or f"HTTP {status}"

        logger.warning(f"GitHub API error [{correlation_id}] {status}: {error_message}")

        if status == 401:
            raise GitHubAuthenticationError(error_message, status, error_data)
        elif status == 403:
            if "rate limit" in error_message.lower():
                reset_time = response.headers.get("X-RateLimit-Reset")
                raise GitHubRateLimitError(
                    error_message,
                    reset_time=int(reset_time) if reset_time else None,
                    remaining=int(response.headers.get("X-RateLimit-Remaining", "0")),
                    limit=int(response.headers.get("X-RateLimit-Limit", "0")),
                )
            raise GitHubAuthenticationError(error_message, status, error_data)
        elif status == 404:
            raise GitHubNotFoundError(error_message, status, error_data)
        elif status == 422:
            raise GitHubValidationError(error_message, status, error_data)
        elif 500 <= status < 600:
            raise GitHubServerError(error_message, status, error_data)
        else:
            raise GitHubError(error_message, status, error_data)

    async def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Make GET request and decode the JSON body."""
        response = await self._make_request("GET", self._url(path), params, headers=headers)
        return response.json()

    async def get_text(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> str:
        """Make GET request and return the raw body."""
        response = await self._make_request("GET", self._url(path), params, headers=headers)
        return response.body

    async def post(
        self,
        path: str,
        data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = await self._make_request("POST", self._url(path), params, data, headers)
        return response.json()

    async def _fetch_paginated(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        items_key: str | None = None,
    ) -> PaginatedResponse:
        """Fetch one page for ``AsyncPaginator``."""
        response = await self._make_request("GET", url, params)
        data = response.json() or []
        if items_key is not None:
            data = data.get(items_key, [])
        return PaginatedResponse(data, response.headers, url)

    def paginate(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        per_page: int = 100,
        max_pages: int | None = None,
        items_key: str | None = None,
    ) -> AsyncPaginator:
        """Create async paginator for a list endpoint."""
        return AsyncPaginator(
            client=self,
            initial_url=self._url(path),
            params=params,
            per_page=per_page,
            max_pages=max_pages,
            items_key=items_key,
        )

    # Repository endpoints

    def list_pulls(
        self,
        owner: str,
        repo: str,
        state: str = "all",
        direction: str = "asc",
        per_page: int = 100,
    ) -> AsyncPaginator:
        return self.paginate(
            f"/repos/{owner}/{repo}/pulls",
            params={"state": state, "direction": direction},
            per_page=per_page,
        )

    def list_issues(
        self,
        owner: str,
        repo: str,
        state: str = "all",
        direction: str = "asc",
        per_page: int = 100,
    ) -> AsyncPaginator:
        """List issues; GitHub includes pull requests in this listing."""
        return self.paginate(
            f"/repos/{owner}/{repo}/issues",
            params={"state": state, "direction": direction},
            per_page=per_page,
        )

    def list_reviews(self, owner: str, repo: str, pull_number: int) -> AsyncPaginator:
        return self.paginate(f"/repos/{owner}/{repo}/pulls/{pull_number}/reviews")

    def list_review_comments(
        self, owner: str, repo: str, pull_number: int
    ) -> AsyncPaginator:
        return self.paginate(f"/repos/{owner}/{repo}/pulls/{pull_number}/comments")

    def list_issue_comments(
        self, owner: str, repo: str, issue_number: int
    ) -> AsyncPaginator:
        return self.paginate(f"/repos/{owner}/{repo}/issues/{issue_number}/comments")

    def list_pull_commits(
        self, owner: str, repo: str, pull_number: int
    ) -> AsyncPaginator:
        return self.paginate(f"/repos/{owner}/{repo}/pulls/{pull_number}/commits")

    async def get_pull_patch(self, owner: str, repo: str, pull_number: int) -> str:
        """Get the pull request as a ``git format-patch`` style text."""
        return await self.get_text(
            f"/repos/{owner}/{repo}/pulls/{pull_number}",
            headers={"Accept": PATCH_MEDIA_TYPE},
        )

    # GitHub App endpoints

    def list_installations(self) -> AsyncPaginator:
        """Installations of the app; requires app (JWT) authentication."""
        return self.paginate("/app/installations")

    def list_installation_repositories(self) -> AsyncPaginator:
        """Repositories accessible to the installation token in use."""
        return self.paginate("/installation/repositories", items_key="repositories")

    async def get_repo_installation(self, owner: str, repo: str) -> dict[str, Any]:
        return await self.get(f"/repos/{owner}/{repo}/installation")

    async def create_installation_token(self, installation_id: int) -> dict[str, Any]:
        return await self.post(f"/app/installations/{installation_id}/access_tokens")

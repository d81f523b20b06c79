"""GitHub API client exceptions."""

from typing import Any


class GitHubError(Exception):
    """Base exception for GitHub API errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: dict[str, Any] | None = None,
    ):
        """Initialize GitHub error.

        Args:
            message: Error message
            status_code: HTTP status code, if a response was received
            response_data: Decoded error body returned by GitHub
        """
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data or {}


class GitHubAuthenticationError(GitHubError):
    """Credentials were rejected or lack access to the resource."""


class GitHubRateLimitError(GitHubError):
    """The request was refused because the rate limit is exhausted.

    Callers are not expected to wait and retry; the error is reported and the
    record is skipped.
    """

    def __init__(
        self,
        message: str,
        reset_time: int | None = None,
        remaining: int = 0,
        limit: int = 0,
    ):
        super().__init__(message, status_code=403)
        self.reset_time = reset_time
        self.remaining = remaining
        self.limit = limit


class GitHubNotFoundError(GitHubError):
    """The resource does not exist or is not visible to the installation."""


class GitHubValidationError(GitHubError):
    """GitHub rejected the request parameters (HTTP 422)."""


class GitHubServerError(GitHubError):
    """GitHub answered with a 5xx status."""


class GitHubConnectionError(GitHubError):
    """The HTTP connection to GitHub failed."""


class GitHubTimeoutError(GitHubError):
    """The request to GitHub timed out."""

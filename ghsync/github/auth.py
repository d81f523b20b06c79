"""GitHub authentication handlers.

Three providers are supported:

- ``PersonalAccessTokenAuth`` for single-tenant deployments.
- ``GitHubAppAuth`` signs short-lived JWTs identifying the GitHub App. They are
  only accepted by the ``/app`` endpoints.
- ``InstallationAuth`` exchanges the app JWT for an installation access token,
  which is what every repository endpoint expects.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

import jwt

from ghsync.utils.time import parse_timestamp

from .exceptions import GitHubAuthenticationError

if TYPE_CHECKING:
    from .client import GitHubClient

# Tokens are renewed this many seconds before GitHub expires them.
EXPIRY_MARGIN = 60

JWT_LIFETIME = 600


@dataclass
class AuthToken:
    """Authentication token with metadata."""

    token: str
    token_type: str = "Bearer"
    expires_at: int | None = None

    @property
    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False
        return time.time() >= self.expires_at - EXPIRY_MARGIN

    def to_header(self) -> dict[str, str]:
        return {"Authorization": f"{self.token_type} {self.token}"}


class AuthProvider(ABC):
    """Abstract base class for authentication providers."""

    @abstractmethod
    async def get_token(self) -> AuthToken:
        """Get a valid token, refreshing it if needed."""

    @abstractmethod
    async def refresh_token(self) -> AuthToken:
        """Unconditionally obtain a new token."""


class PersonalAccessTokenAuth(AuthProvider):
    """Personal Access Token authentication provider."""

    def __init__(self, token: str):
        if not token:
            raise GitHubAuthenticationError("Personal Access Token is required")
        self._token = AuthToken(token=token, token_type="token")  # nosec B106

    async def get_token(self) -> AuthToken:
        return self._token

    async def refresh_token(self) -> AuthToken:
        return self._token


class GitHubAppAuth(AuthProvider):
    """Authenticates as the GitHub App itself with an RS256 JWT."""

    def __init__(self, app_id: str, private_key: str):
        """Initialize GitHub App authentication.

        Args:
            app_id: GitHub App ID
            private_key: PEM encoded private key of the app
        """
        if not app_id or not private_key:
            raise GitHubAuthenticationError("GitHub App ID and private key are required")
        self.app_id = app_id
        self.private_key = private_key
        self._current_token: AuthToken | None = None

    def _generate_jwt(self, now: int) -> str:
        payload = {
            # Backdated to tolerate clock drift between us and GitHub.
            "iat": now - 60,
            "exp": now + JWT_LIFETIME,
            "iss": self.app_id,
        }

        try:
            return jwt.encode(payload, self.private_key, algorithm="RS256")
        except (jwt.PyJWTError, ValueError, TypeError) as e:
            raise GitHubAuthenticationError(f"Failed to generate JWT: {e}") from e

    async def get_token(self) -> AuthToken:
        if self._current_token and not self._current_token.is_expired:
            return self._current_token

        return await self.refresh_token()

    async def refresh_token(self) -> AuthToken:
        now = int(time.time())
        self._current_token = AuthToken(
            token=self._generate_jwt(now),
            token_type="Bearer",  # nosec B106
            expires_at=now + JWT_LIFETIME,
        )
        return self._current_token


class InstallationAuth(AuthProvider):
    """Installation access token of a GitHub App installation.

    The token is requested through a client authenticated as the app and
    cached until shortly before it expires.
    """

    def __init__(self, app_client: "GitHubClient", installation_id: int):
        self.app_client = app_client
        self.installation_id = installation_id
        self._current_token: AuthToken | None = None
        self._lock = asyncio.Lock()

    async def get_token(self) -> AuthToken:
        if self._current_token and not self._current_token.is_expired:
            return self._current_token

        async with self._lock:
            if self._current_token and not self._current_token.is_expired:
                return self._current_token
            return await self.refresh_token()

    async def refresh_token(self) -> AuthToken:
        data = await self.app_client.create_installation_token(self.installation_id)

        token = data.get("token")
        if not token:
            raise GitHubAuthenticationError(
                f"No token returned for installation {self.installation_id}"
            )

        expires_at = parse_timestamp(data.get("expires_at"))
        self._current_token = AuthToken(
            token=token,
            token_type="token",  # nosec B106
            expires_at=int(expires_at.timestamp()) if expires_at else None,
        )
        return self._current_token

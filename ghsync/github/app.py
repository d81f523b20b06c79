"""GitHub App wrapper handing out authenticated clients."""

import logging
from typing import Any

from ghsync.keys import RepoKey

from .auth import GitHubAppAuth, InstallationAuth, PersonalAccessTokenAuth
from .client import GitHubClient, GitHubClientConfig
from .exceptions import GitHubAuthenticationError

logger = logging.getLogger(__name__)


class GitHubApp:
    """Creates GitHub clients for the app and for each of its installations.

    With app credentials, ``auth()`` returns a client authenticated as the app
    and ``auth(installation_id)`` a client using that installation's token.
    With only a personal access token every call returns the same token
    client, and installation discovery is unavailable.
    """

    def __init__(
        self,
        app_auth: GitHubAppAuth | None = None,
        token_auth: PersonalAccessTokenAuth | None = None,
        config: GitHubClientConfig | None = None,
    ):
        if app_auth is None and token_auth is None:
            raise GitHubAuthenticationError(
                "Either GitHub App credentials or a personal access token is required"
            )
        self.app_auth = app_auth
        self.token_auth = token_auth
        self.config = config or GitHubClientConfig()

        self._app_client: GitHubClient | None = None
        self._token_client: GitHubClient | None = None
        self._installation_clients: dict[int, GitHubClient] = {}

    @property
    def has_app_credentials(self) -> bool:
        return self.app_auth is not None

    def auth(self, installation_id: int | None = None) -> GitHubClient:
        """Get a client for the app, or for one of its installations."""
        if self.app_auth is None:
            if self._token_client is None:
                self._token_client = GitHubClient(self.token_auth, self.config)
            return self._token_client

        if self._app_client is None:
            self._app_client = GitHubClient(self.app_auth, self.config)

        if installation_id is None:
            return self._app_client

        client = self._installation_clients.get(installation_id)
        if client is None:
            client = GitHubClient(
                InstallationAuth(self._app_client, installation_id), self.config
            )
            self._installation_clients[installation_id] = client
        return client

    async def installation_for_repo(self, repo_key: RepoKey) -> GitHubClient:
        """Get a client authorized for the installation covering a repository."""
        if self.app_auth is None:
            return self.auth()

        installation = await self.auth().get_repo_installation(
            repo_key.owner, repo_key.repo
        )
        return self.auth(installation["id"])

    async def installation_ids_by_account(self) -> dict[str, int]:
        """Map installation account logins to installation ids."""
        if self.app_auth is None:
            return {}

        installation_ids: dict[str, int] = {}
        async for installation in self.auth().list_installations():
            login = (installation.get("account") or {}).get("login")
            if login is not None:
                installation_ids[login] = installation["id"]
        return installation_ids

    async def list_accessible_repositories(self) -> list[dict[str, Any]]:
        """Repositories accessible to any installation of the app."""
        if self.app_auth is None:
            logger.warning(
                "Repository discovery needs GitHub App credentials, "
                "configure SYNC_REPOS instead"
            )
            return []

        repositories: list[dict[str, Any]] = []
        async for installation in self.auth().list_installations():
            client = self.auth(installation["id"])
            repositories.extend(await client.list_installation_repositories().collect_all())
        return repositories

    async def close(self) -> None:
        """Close every client handed out so far."""
        clients = [self._app_client, self._token_client, *self._installation_clients.values()]
        for client in clients:
            if client is not None:
                await client.close()

        self._app_client = None
        self._token_client = None
        self._installation_clients.clear()

"""Bulk synchronization of whole repositories.

Used when the bot starts and when it is installed on new repositories. Each
repository is walked page by page; the pull request walk and the issue walk of
a repository run concurrently, while the items of one walk are processed one
after another with a pause between pages.
"""

import asyncio
import logging
from collections.abc import Awaitable, Iterable

from ghsync.github import GitHubApp, GitHubClient
from ghsync.keys import IssueKey, PullKey, RepoKey
from ghsync.models import PullStatus
from ghsync.services import (
    CommentService,
    ContributorService,
    IssueService,
    PullService,
)
from ghsync.services.queries import (
    Payload,
    SyncContributorEmailQuery,
    SyncIssueQuery,
    SyncPullQuery,
    SyncPullStatusQuery,
    user_login,
)

from .common import (
    fetch_all_type_comments,
    fetch_issue_comments,
    fetch_pull_request_commits,
    get_pull_request_patch,
    is_syncable_repository,
    repo_keys_for_account,
)

logger = logging.getLogger(__name__)


class RepositorySyncer:
    """Walks repositories and feeds everything found to the services."""

    def __init__(
        self,
        github_app: GitHubApp,
        pull_service: PullService,
        issue_service: IssueService,
        comment_service: CommentService,
        contributor_service: ContributorService,
        sync_repo_keys: list[RepoKey] | None = None,
        page_interval: float = 1.0,
        log: logging.Logger | None = None,
    ):
        """Initialize the syncer.

        Args:
            github_app: Source of authenticated GitHub clients
            sync_repo_keys: Allow-list of repositories to sync at start up;
                None means every repository the app is installed on
            page_interval: Seconds to pause after each page of a walk
        """
        self.github_app = github_app
        self.pull_service = pull_service
        self.issue_service = issue_service
        self.comment_service = comment_service
        self.contributor_service = contributor_service
        self.sync_repo_keys = sync_repo_keys
        self.page_interval = page_interval
        self.log = log or logger

    async def handle_app_start_up(self) -> None:
        if self.sync_repo_keys is not None:
            repo_keys = list(self.sync_repo_keys)
        else:
            repo_keys = await self.list_installed_repositories()

        await self.sync_repos(repo_keys)

    async def handle_app_install_on_account(self, payload: Payload) -> None:
        """The app was installed on an account (``installation.created``)."""
        account_login = payload["installation"]["account"]["login"]
        await self.sync_repos(
            repo_keys_for_account(account_login, payload.get("repositories") or [])
        )

    async def handle_app_install_on_repo(self, payload: Payload) -> None:
        """Repositories were added to an installation (``installation_repositories.added``)."""
        account_login = payload["installation"]["account"]["login"]
        await self.sync_repos(
            repo_keys_for_account(
                account_login, payload.get("repositories_added") or []
            )
        )

    async def list_installed_repositories(self) -> list[RepoKey]:
        """Public, non-archived, non-disabled repositories the app can access."""
        repositories = await self.github_app.list_accessible_repositories()
        return [
            RepoKey(owner=repository["owner"]["login"], repo=repository["name"])
            for repository in repositories
            if is_syncable_repository(repository)
        ]

    async def sync_repos(self, repo_keys: Iterable[RepoKey]) -> None:
        for repo_key in repo_keys:
            try:
                github = await self.github_app.installation_for_repo(repo_key)
            except Exception as e:
                self.log.error(
                    f"Failed to get installation of {repo_key.full_name}: {e}",
                    exc_info=True,
                )
                continue

            await self.sync_repo(repo_key, github)

        # Emails are looked up in the pull requests synced above, so this runs last.
        await self._guarded("contributor email", self.sync_contributor_emails())

    async def sync_repo(self, repo_key: RepoKey, github: GitHubClient) -> None:
        self.log.info(f"Syncing repo {repo_key.full_name}")

        await asyncio.gather(
            self._guarded(
                f"pull requests of {repo_key.full_name}",
                self.sync_pulls(repo_key, github),
            ),
            self._guarded(
                f"issues of {repo_key.full_name}",
                self.sync_issues(repo_key, github),
            ),
        )

    async def sync_pulls(self, repo_key: RepoKey, github: GitHubClient) -> None:
        self.log.info(f"Syncing pull requests of {repo_key.full_name}")

        async for page in github.list_pulls(repo_key.owner, repo_key.repo).pages():
            for pull in page:
                try:
                    await self._sync_pull(repo_key, github, pull)
                except Exception as e:
                    self.log.error(
                        f"Failed to sync pull request "
                        f"{repo_key.full_name}#{pull.get('number')}: {e}",
                        exc_info=True,
                    )
            await asyncio.sleep(self.page_interval)

    async def _sync_pull(
        self, repo_key: RepoKey, github: GitHubClient, pull: Payload
    ) -> None:
        pull_received = SyncPullQuery.from_payload(repo_key, pull)
        pull_key = pull_received.key

        await self.pull_service.sync_pull_request(pull_received)

        reviews, review_comments, comments = await fetch_all_type_comments(
            github, pull_key
        )
        await self.comment_service.sync_pull_request_reviews(pull_key, reviews)
        await self.comment_service.sync_pull_request_review_comments(
            pull_key, review_comments
        )
        await self.comment_service.sync_pull_request_comments(pull_key, comments)

        # The aggregate is only kept for open pull requests.
        if pull.get("state") == PullStatus.OPEN.value:
            commits = await fetch_pull_request_commits(github, pull_key)
            await self.pull_service.sync_open_pull_request_status(
                SyncPullStatusQuery(
                    pull=pull_key,
                    pull_author=user_login(pull.get("user")),
                    comments=comments,
                    reviews=reviews,
                    review_comments=review_comments,
                    commits=commits,
                )
            )

    async def sync_issues(self, repo_key: RepoKey, github: GitHubClient) -> None:
        self.log.info(f"Syncing issues of {repo_key.full_name}")

        async for page in github.list_issues(repo_key.owner, repo_key.repo).pages():
            for issue in page:
                # The issue listing includes pull requests.
                if issue.get("pull_request"):
                    continue

                try:
                    await self._sync_issue(repo_key, github, issue)
                except Exception as e:
                    self.log.error(
                        f"Failed to sync issue "
                        f"{repo_key.full_name}#{issue.get('number')}: {e}",
                        exc_info=True,
                    )
            await asyncio.sleep(self.page_interval)

    async def _sync_issue(
        self, repo_key: RepoKey, github: GitHubClient, issue: Payload
    ) -> None:
        await self.issue_service.sync_issue(SyncIssueQuery.from_payload(repo_key, issue))

        issue_key = IssueKey(repo_key.owner, repo_key.repo, issue["number"])
        comments = await fetch_issue_comments(github, issue_key)
        await self.comment_service.sync_issue_comments(issue_key, comments)

    async def sync_contributor_emails(self) -> None:
        """Find the email of every merged pull request author still missing one.

        Each contributor's pull requests are tried in order until a patch
        yields an email. Pull requests of accounts the app is not installed on
        are skipped, since their patches cannot be fetched.
        """
        self.log.info("Syncing contributor email")

        installation_ids = await self.github_app.installation_ids_by_account()
        uninstalled_owners: set[str] = set()
        logins = await self.contributor_service.list_no_email_contributors_login()

        for login in logins:
            pulls = await self.pull_service.get_contributor_all_pull_requests(login)

            for pull in pulls:
                if (
                    self.github_app.has_app_credentials
                    and pull.owner not in installation_ids
                ):
                    if pull.owner not in uninstalled_owners:
                        uninstalled_owners.add(pull.owner)
                        self.log.warning(
                            f"No installation found for {pull.owner}, "
                            "skip its pull requests when syncing emails"
                        )
                    continue

                pull_key = PullKey(pull.owner, pull.repo, pull.pull_number)
                github = self.github_app.auth(installation_ids.get(pull.owner))

                patch = await get_pull_request_patch(github, pull_key, self.log)
                if patch is None:
                    continue

                synced = await self.contributor_service.sync_contributor_email_from_pr(
                    SyncContributorEmailQuery(
                        contributor_login=login, pull_request_patch=patch
                    )
                )
                if synced:
                    break

    async def _guarded(self, description: str, operation: Awaitable[None]) -> None:
        """Await a whole walk, logging instead of raising if it fails."""
        try:
            await operation
            self.log.info(f"Finish syncing {description}")
        except Exception as e:
            self.log.error(f"Failed to sync {description}: {e}", exc_info=True)

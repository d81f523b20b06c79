"""Dispatches webhook deliveries to their handlers."""

import logging

from ghsync.github import GitHubClient
from ghsync.services import (
    CommentService,
    ContributorService,
    IssueService,
    PullService,
)
from ghsync.services.queries import Payload

from .app import RepositorySyncer
from .issue import handle_issue_comment_event, handle_issue_event
from .pull_request import (
    handle_pull_request_event,
    handle_pull_request_review_comment_event,
    handle_pull_request_review_event,
)

logger = logging.getLogger(__name__)


class EventRouter:
    """Routes a webhook event to the handler for its kind."""

    def __init__(
        self,
        pull_service: PullService,
        issue_service: IssueService,
        comment_service: CommentService,
        contributor_service: ContributorService,
        syncer: RepositorySyncer | None = None,
        log: logging.Logger | None = None,
    ):
        self.pull_service = pull_service
        self.issue_service = issue_service
        self.comment_service = comment_service
        self.contributor_service = contributor_service
        self.syncer = syncer
        self.log = log or logger

    async def dispatch(
        self, event_name: str, payload: Payload, github: GitHubClient
    ) -> None:
        """Handle one delivery.

        Args:
            event_name: Value of the ``X-GitHub-Event`` header
            payload: Decoded delivery body
            github: Client authorized for the installation that sent the event
        """
        action = payload.get("action")
        self.log.debug(f"Received {event_name} event", extra={"action": action})

        match event_name:
            case "ping":
                self.log.info("pong")
            case "pull_request":
                await handle_pull_request_event(
                    payload,
                    github,
                    self.pull_service,
                    self.contributor_service,
                    self.log,
                )
            case "pull_request_review":
                await handle_pull_request_review_event(
                    payload, self.pull_service, self.comment_service
                )
            case "pull_request_review_comment":
                await handle_pull_request_review_comment_event(
                    payload, self.pull_service, self.comment_service
                )
            case "issues":
                await handle_issue_event(payload, self.issue_service)
            case "issue_comment":
                await handle_issue_comment_event(
                    payload, self.pull_service, self.issue_service, self.comment_service
                )
            case "installation" if action == "created" and self.syncer is not None:
                await self.syncer.handle_app_install_on_account(payload)
            case "installation_repositories" if (
                action == "added" and self.syncer is not None
            ):
                await self.syncer.handle_app_install_on_repo(payload)
            case _:
                self.log.debug(f"Ignored {event_name} event", extra={"action": action})

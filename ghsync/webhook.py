"""Webhook receiver and composition root.

``create_app`` wires settings, database, services and handlers together and
returns the FastAPI application that GitHub delivers webhook events to.
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import BackgroundTasks, FastAPI, Header, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ghsync import __version__
from ghsync.config import BotSettings
from ghsync.database import DatabaseConfig, DatabaseConnectionManager
from ghsync.events import EventRouter, RepositorySyncer
from ghsync.github import (
    GitHubApp,
    GitHubAppAuth,
    GitHubClient,
    GitHubClientConfig,
    PersonalAccessTokenAuth,
)
from ghsync.repositories import (
    CommentRepository,
    ContributorRepository,
    IssueRepository,
    OpenPRStatusRepository,
    PullRepository,
)
from ghsync.services import (
    CommentService,
    ContributorService,
    IssueService,
    PullService,
)

logger = logging.getLogger(__name__)


def create_github_app(settings: BotSettings) -> GitHubApp:
    """Build the GitHub client factory from the configured credentials.

    Raises:
        ConfigurationError: If no usable credentials are configured
    """
    settings.validate_credentials()

    app_auth = None
    if settings.has_app_credentials:
        app_auth = GitHubAppAuth(settings.github_app_id, settings.get_private_key())

    token_auth = None
    if settings.github_token:
        token_auth = PersonalAccessTokenAuth(settings.github_token)

    return GitHubApp(
        app_auth=app_auth,
        token_auth=token_auth,
        config=GitHubClientConfig(base_url=settings.github_api_url),
    )


def build_event_handling(
    session_factory: async_sessionmaker[AsyncSession],
    github_app: GitHubApp,
    settings: BotSettings,
) -> tuple[RepositorySyncer, EventRouter]:
    """Create repositories, services and the two entry points using them."""
    pull_service = PullService(
        PullRepository(session_factory), OpenPRStatusRepository(session_factory)
    )
    issue_service = IssueService(IssueRepository(session_factory))
    comment_service = CommentService(CommentRepository(session_factory))
    contributor_service = ContributorService(ContributorRepository(session_factory))

    syncer = RepositorySyncer(
        github_app,
        pull_service,
        issue_service,
        comment_service,
        contributor_service,
        sync_repo_keys=settings.sync_repo_keys,
        page_interval=settings.sync_page_interval,
    )
    router = EventRouter(
        pull_service,
        issue_service,
        comment_service,
        contributor_service,
        syncer=syncer,
    )
    return syncer, router


async def _dispatch(
    router: EventRouter, event_name: str, payload: dict[str, Any], github: GitHubClient
) -> None:
    try:
        await router.dispatch(event_name, payload, github)
    except Exception as e:
        logger.error(
            f"Failed to handle {event_name} event: {e}",
            extra={"action": payload.get("action")},
            exc_info=True,
        )


async def _start_up_sync(syncer: RepositorySyncer) -> None:
    try:
        await syncer.handle_app_start_up()
        logger.info("Finish start up sync")
    except Exception as e:
        logger.error(f"Start up sync failed: {e}", exc_info=True)


def create_app(
    settings: BotSettings,
    database_config: DatabaseConfig | None = None,
    github_app: GitHubApp | None = None,
) -> FastAPI:
    """Create the webhook application.

    If the database cannot be prepared at startup the application still
    starts, answers ``ping`` and health checks, and rejects every other
    delivery with 503.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        gh_app = github_app or create_github_app(settings)
        connection_manager = DatabaseConnectionManager(database_config)
        start_up_task: asyncio.Task[None] | None = None

        app.state.github_app = gh_app
        app.state.router = None
        app.state.event_handling_enabled = False

        try:
            await connection_manager.create_schema()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to connect database, event handling is disabled: {e}")
        else:
            syncer, router = build_event_handling(
                connection_manager.session_factory, gh_app, settings
            )
            app.state.router = router
            app.state.event_handling_enabled = True

            if settings.sync_on_startup:
                start_up_task = asyncio.create_task(_start_up_sync(syncer))

        try:
            yield
        finally:
            if start_up_task is not None and not start_up_task.done():
                start_up_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await start_up_task
            await gh_app.close()
            await connection_manager.close()

    app = FastAPI(title="ghsync", version=__version__, lifespan=lifespan)

    @app.post("/webhook")
    async def github_webhook_endpoint(
        request: Request,
        background_tasks: BackgroundTasks,
        x_github_event: str = Header(...),
    ) -> dict[str, str]:
        """Accept a delivery and handle it after responding."""
        if x_github_event == "ping":
            logger.info("pong")
            return {"status": "pong"}

        if not request.app.state.event_handling_enabled:
            raise HTTPException(status_code=503, detail="Event handling is disabled")

        try:
            payload = await request.json()
        except ValueError as e:
            raise HTTPException(status_code=400, detail="Invalid JSON") from e
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Payload must be an object")

        installation_id = (payload.get("installation") or {}).get("id")
        github = request.app.state.github_app.auth(installation_id)

        background_tasks.add_task(
            _dispatch, request.app.state.router, x_github_event, payload, github
        )
        return {"status": "accepted"}

    @app.get("/health")
    async def health_check(request: Request) -> dict[str, Any]:
        enabled = request.app.state.event_handling_enabled
        return {
            "status": "healthy" if enabled else "degraded",
            "event_handling_enabled": enabled,
        }

    return app

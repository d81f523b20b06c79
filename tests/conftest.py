"""
Test configuration and fixtures.

Provides an in-memory SQLite session factory for repository and service tests,
and mocked repositories for unit tests. Payload builders live in
``tests.fixtures.payloads``.
"""

import os
from collections.abc import AsyncGenerator, Iterator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ghsync.config import reset_bot_settings
from ghsync.database import reset_database_config
from ghsync.models import Base
from ghsync.repositories import (
    CommentRepository,
    ContributorRepository,
    IssueRepository,
    OpenPRStatusRepository,
    PullRepository,
)

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """
    Session factory bound to a fresh in-memory SQLite database.

    Why: Repository behaviour (conditional updates, merges, distinct queries)
         is only meaningful against a real SQL engine
    What: Creates the full schema in a private in-memory database per test
    How: StaticPool keeps the single in-memory connection alive for every session
    """
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def mock_pull_repository() -> AsyncMock:
    repository = AsyncMock(spec=PullRepository)
    repository.get_by_key.return_value = None
    return repository


@pytest.fixture
def mock_issue_repository() -> AsyncMock:
    repository = AsyncMock(spec=IssueRepository)
    repository.get_by_key.return_value = None
    return repository


@pytest.fixture
def mock_comment_repository() -> AsyncMock:
    repository = AsyncMock(spec=CommentRepository)
    repository.get_by_comment_id.return_value = None
    return repository


@pytest.fixture
def mock_contributor_repository() -> AsyncMock:
    return AsyncMock(spec=ContributorRepository)


@pytest.fixture
def mock_open_pr_status_repository() -> AsyncMock:
    repository = AsyncMock(spec=OpenPRStatusRepository)
    repository.get_by_key.return_value = None
    return repository




@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """
    Isolate every test from the host's bot and database settings.

    Why: Settings are read from the environment, so a developer's shell must
         not change test outcomes
    What: Removes GITHUB_*, SYNC_*, DATABASE_* and LOG_LEVEL variables and
          clears the cached settings before and after each test
    How: monkeypatch restores the original environment afterwards
    """
    for name in list(os.environ):
        if name.upper().startswith(("GITHUB_", "SYNC_", "DATABASE_")) or (
            name.upper() == "LOG_LEVEL"
        ):
            monkeypatch.delenv(name, raising=False)

    reset_bot_settings()
    reset_database_config()
    yield
    reset_bot_settings()
    reset_database_config()

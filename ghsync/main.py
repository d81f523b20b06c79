"""Command line entry point.

Usage:
    ghsync serve [--host HOST] [--port PORT]
    ghsync sync [owner/repo ...]
"""

import argparse
import asyncio
import logging
import sys

import uvicorn

from ghsync.config import (
    BotSettings,
    ConfigurationError,
    get_bot_settings,
    parse_sync_repos,
)
from ghsync.database import DatabaseConnectionManager, get_database_config
from ghsync.webhook import build_event_handling, create_app, create_github_app

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once at startup."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


async def run_sync(settings: BotSettings, repos: list[str]) -> None:
    """Sync the given repositories once, or the configured ones if none are given."""
    github_app = create_github_app(settings)
    connection_manager = DatabaseConnectionManager(get_database_config())

    try:
        await connection_manager.create_schema()
        syncer, _ = build_event_handling(
            connection_manager.session_factory, github_app, settings
        )

        if repos:
            await syncer.sync_repos(parse_sync_repos(",".join(repos)))
        else:
            await syncer.handle_app_start_up()
    finally:
        await github_app.close()
        await connection_manager.close()


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Mirror GitHub pull requests, issues and comments into a database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Receive webhook deliveries
  ghsync serve --port 3000

  # Sync two repositories once
  ghsync sync pingcap/tidb tikv/tikv
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the webhook server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address")  # nosec B104
    serve_parser.add_argument("--port", type=int, default=3000, help="Bind port")

    sync_parser = subparsers.add_parser("sync", help="Run a one-shot bulk sync")
    sync_parser.add_argument(
        "repos",
        nargs="*",
        metavar="owner/repo",
        help="Repositories to sync (default: SYNC_REPOS or every installation)",
    )

    args = parser.parse_args(argv)

    try:
        settings = get_bot_settings()
    except ConfigurationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)

    configure_logging(settings.log_level.value)

    try:
        if args.command == "serve":
            app = create_app(
                settings, get_database_config(), github_app=create_github_app(settings)
            )
            uvicorn.run(app, host=args.host, port=args.port, log_config=None)
        else:
            asyncio.run(run_sync(settings, args.repos))
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(2)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(1)


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Main CLI entry point for Chatter backend server.
"""

import asyncio
import sys
from pathlib import Path

import click
import uvicorn
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert

from alembic import command
from alembic.config import Config
from chatter import __version__
from chatter.config import settings
from chatter.logging import configure_logging, get_logger

logger = get_logger(__name__)


def get_alembic_config() -> Config:
    """Get Alembic configuration from the project root."""
    alembic_ini = Path(__file__).resolve().parents[2] / "alembic.ini"

    if not alembic_ini.exists():
        raise FileNotFoundError(f"alembic.ini not found at {alembic_ini}")

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(alembic_ini.parent / "alembic"))
    return config


@click.group()
@click.version_option(version=__version__, prog_name="chatter")
def cli() -> None:
    """Chatter CLI - manage server, database and friendships."""
    pass


@cli.command()
@click.option("--host", default=settings.api_host, show_default=True, help="Host to bind to")
@click.option(
    "--port", default=settings.api_port, show_default=True, type=int, help="Port to bind to"
)
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Start the Chatter API server."""
    configure_logging(debug=(log_level == "debug"), level=log_level)
    logger.info("Starting Chatter API server", host=host, port=port, reload=reload)

    try:
        uvicorn.run(
            "chatter.api.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")


@cli.group()
def db() -> None:
    """Database migration management."""
    configure_logging()


@db.command()
@click.argument("revision", default="head")
def upgrade(revision: str) -> None:
    """Upgrade database to a revision (default: head)."""
    try:
        logger.info("Upgrading database", revision=revision)
        command.upgrade(get_alembic_config(), revision)
        logger.info("Database upgrade completed successfully")
    except Exception as e:
        logger.error("Database upgrade failed", error=str(e))
        sys.exit(1)


@db.command()
@click.argument("revision", default="-1")
def downgrade(revision: str) -> None:
    """Downgrade database to a revision (default: -1)."""
    try:
        logger.info("Downgrading database", revision=revision)
        command.downgrade(get_alembic_config(), revision)
        logger.info("Database downgrade completed successfully")
    except Exception as e:
        logger.error("Database downgrade failed", error=str(e))
        sys.exit(1)


@cli.group()
def friends() -> None:
    """Manage friendships between users."""
    configure_logging()


async def befriend(email: str, friend_email: str) -> None:
    """Make two users friends of each other. Existing edges are kept."""
    from chatter.database.connection import get_async_session
    from chatter.dbmodels import Friends, Users

    async with get_async_session() as session:
        result = await session.execute(
            select(Users.email, Users.id).where(Users.email.in_([email, friend_email]))
        )
        ids = dict(result.all())
        missing = [e for e in (email, friend_email) if e not in ids]
        if missing:
            raise click.ClickException(f"Unknown user(s): {', '.join(missing)}")

        user_id, friend_id = ids[email], ids[friend_email]
        stmt = insert(Friends).values(
            [
                {"user_id": user_id, "friend_id": friend_id},
                {"user_id": friend_id, "friend_id": user_id},
            ]
        )
        await session.execute(stmt.on_conflict_do_nothing())

    logger.info("Friendship added", user_id=str(user_id), friend_id=str(friend_id))


@friends.command("add")
@click.argument("email")
@click.argument("friend_email")
def add_friend(email: str, friend_email: str) -> None:
    """Make EMAIL and FRIEND_EMAIL friends."""
    email, friend_email = email.strip().lower(), friend_email.strip().lower()
    if email == friend_email:
        raise click.ClickException("A user cannot befriend themself")

    asyncio.run(befriend(email, friend_email))
    click.echo(f"✓ {email} and {friend_email} are now friends")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()

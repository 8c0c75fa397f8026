"""Command-line interface for humans.inc.

Runs the API server and covers the few maintenance tasks that have no
HTTP endpoint: creating the schema, creating accounts and previewing a
public page from the terminal.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click
from sqlalchemy.ext.asyncio import AsyncSession

from humans import __version__
from humans.core.config import get_settings
from humans.core.logging import configure_logging, get_logger

T = TypeVar("T")

logger = get_logger(__name__)


def run_with_session(work: Callable[[AsyncSession], Awaitable[T]]) -> T:
    """Run ``work`` with a database session, then dispose of the engine."""
    from humans.infrastructure.persistence.database import get_db_manager

    async def runner() -> T:
        db = get_db_manager()
        try:
            async with db.session() as session:
                return await work(session)
        finally:
            await db.disconnect()

    return asyncio.run(runner())


@click.group()
@click.version_option(version=__version__, prog_name="humans.inc")
def cli() -> None:
    """humans.inc - bio link pages built from ordered content blocks."""
    configure_logging(get_settings())


@cli.command()
@click.option("--host", default=None, help="Interface to bind (defaults to HUMANS_HOST)")
@click.option("--port", type=int, default=None, help="Port to bind (defaults to HUMANS_PORT)")
@click.option("--workers", type=int, default=None, help="Worker processes (ignored with --reload)")
@click.option(
    "--reload/--no-reload",
    default=None,
    help="Restart on code changes (on by default in development)",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool | None) -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    if reload is None:
        reload = settings.is_development
    options = {
        "host": host or settings.host,
        "port": port or settings.port,
        "workers": 1 if reload else (workers or settings.workers),
    }

    logger.info("Starting server", reload=reload, environment=settings.environment, **options)
    uvicorn.run(
        "humans.infrastructure.api.app:app",
        reload=reload,
        log_level=settings.log_level.lower(),
        **options,
    )


@cli.command("init-db")
@click.option("--force", is_flag=True, help="Do not ask for confirmation")
def init_db(force: bool) -> None:
    """Create the users, profiles, blocks and collections tables."""
    from humans.infrastructure.persistence.database import get_db_manager, init_database

    if not force:
        click.confirm("Create any missing tables now?", abort=True)

    async def initialize() -> None:
        try:
            await init_database(create_tables=True)
        finally:
            await get_db_manager().disconnect()

    asyncio.run(initialize())
    click.echo("Database ready.")


@cli.command("create-user")
@click.option("--email", prompt=True, help="Sign-in email")
@click.option(
    "--password", prompt=True, hide_input=True, confirmation_prompt=True, help="Sign-in password"
)
@click.option("--username", default=None, help="Claim this username right away")
def create_user(email: str, password: str, username: str | None) -> None:
    """Create an account, optionally finishing profile setup."""
    from humans.domain.exceptions import HumansError
    from humans.domain.services import ProfileService
    from humans.infrastructure.auth import AccountService

    async def create(session: AsyncSession) -> str:
        user = await AccountService(session).signup(email, password)
        if username:
            await ProfileService(session, user.id).update_profile(username)
        return user.id

    try:
        user_id = run_with_session(create)
    except HumansError as e:
        raise click.ClickException(e.message) from e

    click.echo(f"Created user {user_id} <{email}>")
    if username:
        click.echo(f"Public page: {get_settings().external_url}/{username}")


@cli.command("show-page")
@click.argument("username")
def show_page(username: str) -> None:
    """Print the blocks a visitor sees on USERNAME's page."""
    from humans.domain.services import PublicPageService

    page = run_with_session(lambda session: PublicPageService(session).get_public_page(username))
    if page is None:
        raise click.ClickException(f"No public page for '{username}'")

    click.echo(f"{page.profile.display_name or page.profile.username} (@{page.profile.username})")
    if not page.blocks:
        click.echo("  (no published blocks)")
    for block in page.blocks:
        address = block.slug or block.id
        click.echo(f"  [{block.block_type}] {block.title or 'Untitled'}  /{username}/{address}")


@cli.command()
def info() -> None:
    """Show the effective configuration."""
    from sqlalchemy.engine import make_url

    settings = get_settings()
    rows = [
        ("Version", settings.app_version),
        ("Environment", settings.environment),
        ("API prefix", settings.api_prefix),
        ("External URL", settings.external_url),
        ("Listen", f"{settings.host}:{settings.port} ({settings.workers} worker(s))"),
        ("Database", make_url(settings.database_url).render_as_string(hide_password=True)),
        ("Storage", settings.storage_provider),
        (
            "Avatars",
            f"bucket '{settings.avatar_bucket}', max {settings.max_avatar_size // 1024} KB",
        ),
        ("Logging", f"{settings.log_level} / {settings.log_format}"),
    ]
    width = max(len(label) for label, _ in rows)
    for label, value in rows:
        click.echo(f"{label.ljust(width)}  {value}")


def main() -> None:
    """Entry point of the ``humans`` command and ``python -m humans``."""
    cli()


if __name__ == "__main__":
    main()

"""Database CLI commands: Alembic migrations and direct table creation."""

import asyncio
from pathlib import Path

import typer
from loguru import logger

db_app = typer.Typer()

_CONFIG_OPTION = typer.Option(Path("alembic.ini"), "--config", "-c", help="Path to alembic.ini")


def _alembic_config(ini_path: Path):  # type: ignore[no-untyped-def]
    from alembic.config import Config

    if not ini_path.exists():
        typer.echo(f"Error: Alembic config not found: {ini_path}", err=True)
        raise typer.Exit(code=1)
    return Config(str(ini_path))


@db_app.command()
def upgrade(
    revision: str = typer.Argument("head", help="Target revision"),
    config: Path = _CONFIG_OPTION,
) -> None:
    """Apply migrations up to the target revision."""
    from alembic import command

    logger.info(f"Upgrading fx_deals schema to {revision}")
    command.upgrade(_alembic_config(config), revision)
    logger.info("Schema upgrade complete")


@db_app.command()
def downgrade(
    revision: str = typer.Argument("-1", help="Target revision"),
    config: Path = _CONFIG_OPTION,
) -> None:
    """Revert migrations down to the target revision."""
    from alembic import command

    logger.info(f"Downgrading fx_deals schema to {revision}")
    command.downgrade(_alembic_config(config), revision)
    logger.info("Schema downgrade complete")


@db_app.command()
def current(config: Path = _CONFIG_OPTION) -> None:
    """Show the applied migration revision."""
    from alembic import command

    command.current(_alembic_config(config), verbose=True)


@db_app.command("create")
def create() -> None:
    """Create tables directly from the ORM models (SQLite development databases)."""
    asyncio.run(_create())


async def _create() -> None:
    from fx_deals.core.config import get_settings
    from fx_deals.core.database import create_tables, dispose_engine, init_engine

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)
    try:
        await create_tables()
        typer.echo("Tables created")
    finally:
        await dispose_engine()

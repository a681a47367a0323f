"""Typer CLI root application with serve command."""

import typer

from fx_deals.core.config import get_settings
from fx_deals.core.logging import setup_logging

app = typer.Typer(name="fx-deals", help="FX deal import CLI")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(8080, "--port", help="Bind port"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "fx_deals.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


def _register_subcommands() -> None:
    """Register all CLI subcommand groups."""
    from fx_deals.cli.db_cmd import db_app
    from fx_deals.cli.deals_cmd import deals_app
    from fx_deals.cli.import_cmd import import_app

    app.add_typer(db_app, name="db", help="Database migration commands")
    app.add_typer(import_app, name="import", help="Deal import commands")
    app.add_typer(deals_app, name="deals", help="Stored deal queries")


_register_subcommands()

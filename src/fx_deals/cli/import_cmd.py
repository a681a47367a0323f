"""Import CLI commands for deal files."""

import asyncio
from pathlib import Path

import typer

import_app = typer.Typer()


@import_app.command("file")
def import_file(
    file: Path = typer.Argument(..., help="Path to a JSON or CSV deal file", exists=True),  # noqa: B008
    max_errors: int = typer.Option(20, "--max-errors", help="Maximum number of errors to print"),  # noqa: B008
) -> None:
    """Import deals from a file, committing each deal independently."""
    imported_any = asyncio.run(_import_file(file, max_errors))
    if not imported_any:
        raise typer.Exit(code=1)


async def _import_file(file_path: Path, max_errors: int) -> bool:
    """Async implementation of file import. Returns True if at least one deal was imported."""
    from fx_deals.core.config import get_settings
    from fx_deals.core.database import dispose_engine, get_session_factory, init_engine
    from fx_deals.lib.deal_loader import load_deals
    from fx_deals.services.deal_service import ValidationLimits, import_deals_bulk
    from fx_deals.services.deal_store import SqlAlchemyDealStore
    from fx_deals.services.errors import DealValidationError

    try:
        deals = load_deals(file_path)
    except ValueError as e:
        typer.echo(f"Error: could not read {file_path}: {e}", err=True)
        return False

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)
    limits = ValidationLimits(max_amount=settings.deal_max_amount, max_age_years=settings.deal_max_age_years)

    try:
        store = SqlAlchemyDealStore(get_session_factory())
        typer.echo(f"Importing {len(deals)} deals from {file_path}...")
        try:
            result = await import_deals_bulk(store, deals, limits=limits)
        except DealValidationError as e:
            typer.echo(f"Error: {e}", err=True)
            return False

        typer.echo("\nImport completed:")
        typer.echo(f"  Total received:  {result.total_received}")
        typer.echo(f"  Imported:        {result.imported}")
        typer.echo(f"  Duplicates:      {result.duplicates}")
        typer.echo(f"  Failed:          {result.failed}")
        if result.errors:
            typer.echo("\nErrors:")
            for error in result.errors[:max_errors]:
                typer.echo(f"  {error}")
            if len(result.errors) > max_errors:
                typer.echo(f"  ... and {len(result.errors) - max_errors} more")
        return result.imported > 0
    finally:
        await dispose_engine()

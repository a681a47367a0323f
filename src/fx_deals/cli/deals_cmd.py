"""CLI commands for reading stored deals."""

import asyncio

import typer

deals_app = typer.Typer()


@deals_app.command("list")
def list_deals() -> None:
    """Print every stored deal."""
    asyncio.run(_list_deals())


@deals_app.command("show")
def show_deal(
    deal_unique_id: str = typer.Argument(..., help="Deal unique identifier"),
) -> None:
    """Print one stored deal as JSON."""
    found = asyncio.run(_show_deal(deal_unique_id))
    if not found:
        raise typer.Exit(code=1)


async def _list_deals() -> None:
    from fx_deals.core.config import get_settings
    from fx_deals.core.database import dispose_engine, get_session_factory, init_engine
    from fx_deals.services.deal_service import get_all_deals
    from fx_deals.services.deal_store import SqlAlchemyDealStore

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)
    try:
        deals = await get_all_deals(SqlAlchemyDealStore(get_session_factory()))
        for deal in deals:
            typer.echo(
                f"{deal.id:>6}  {deal.deal_unique_id:<30}  {deal.from_currency_iso_code}->{deal.to_currency_iso_code}"
                f"  {deal.deal_amount:>20}  {deal.deal_timestamp.isoformat()}"
            )
        typer.echo(f"{len(deals)} deal(s)")
    finally:
        await dispose_engine()


async def _show_deal(deal_unique_id: str) -> bool:
    from fx_deals.core.config import get_settings
    from fx_deals.core.database import dispose_engine, get_session_factory, init_engine
    from fx_deals.services.deal_service import get_deal_by_unique_id
    from fx_deals.services.deal_store import SqlAlchemyDealStore

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)
    try:
        deal = await get_deal_by_unique_id(SqlAlchemyDealStore(get_session_factory()), deal_unique_id)
    finally:
        await dispose_engine()

    if deal is None:
        typer.echo(f"Deal not found: {deal_unique_id}", err=True)
        return False
    typer.echo(deal.model_dump_json(indent=2))
    return True

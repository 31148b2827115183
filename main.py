"""Command-line entry point for fetching market data snapshots."""

import json
from typing import Any, Optional

import typer

from src.services.market_service import MarketService
from src.utils.config import Config
from src.utils.errors import MarketDataError
from src.utils.trace_context import trace_scope

app = typer.Typer(help="Fetch public market data from the exchange.", no_args_is_help=True)


@app.callback()
def main(
    ctx: typer.Context,
    endpoint: Optional[str] = typer.Option(None, help="Base URL (defaults to MARKET_ENDPOINT)"),
    timeout: Optional[float] = typer.Option(None, help="Request timeout in seconds"),
):
    """Fetch public market data from the exchange."""
    settings = Config()
    if endpoint:
        settings.market.endpoint = endpoint
    if timeout is not None:
        settings.market.timeout_seconds = timeout

    try:
        settings.validate()
    except ValueError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(2)

    ctx.obj = settings


def _run(ctx: typer.Context, fetch) -> None:
    settings: Config = ctx.obj
    with trace_scope(), MarketService(
        endpoint=settings.market.endpoint,
        timeout=settings.market.timeout_seconds,
    ) as service:
        try:
            record = fetch(service)
        except MarketDataError as e:
            typer.echo(json.dumps(e.to_dict()), err=True)
            raise typer.Exit(1)
    _print(record.to_dict())


def _print(data: dict[str, Any]) -> None:
    typer.echo(json.dumps(data, indent=2))


def _pair(ctx: typer.Context, pair: Optional[str]) -> str:
    return pair or ctx.obj.market.default_pair


@app.command()
def ticker(
    ctx: typer.Context,
    pair: Optional[str] = typer.Argument(None, help="Pair symbol, e.g. XBTUSD"),
):
    """Print the ticker snapshot for a pair."""
    _run(ctx, lambda service: service.get_ticker(_pair(ctx, pair)))


@app.command()
def book(
    ctx: typer.Context,
    pair: Optional[str] = typer.Argument(None, help="Pair symbol, e.g. XBTUSD"),
):
    """Print the order book snapshot for a pair."""
    _run(ctx, lambda service: service.get_order_book(_pair(ctx, pair)))


@app.command()
def trades(
    ctx: typer.Context,
    pair: Optional[str] = typer.Argument(None, help="Pair symbol, e.g. XBTUSD"),
    since: str = typer.Option("", help="Only trades after this match number"),
):
    """Print recent trades for a pair."""
    _run(ctx, lambda service: service.get_recent_trades(_pair(ctx, pair), since))


if __name__ == "__main__":
    app()

"""Allocation CLI commands: list, set, remove."""

from __future__ import annotations

import click


@click.group("allocation")
def allocation_group() -> None:
    """Manage how each ticker splits across asset classes."""
    pass


@allocation_group.command("list")
@click.pass_context
def allocation_list(ctx: click.Context) -> None:
    """List allocation rules, including tickers still missing one."""
    from pinsight.cli.common import open_store
    from pinsight.portfolio.allocation_parser import describe

    with open_store(ctx) as (store, _config):
        if not store.allocations:
            click.echo("No allocations.")
            return
        for rule in store.allocations.values():
            shown = describe(rule.asset_classes) if rule.is_resolved else "?  (missing)"
            click.echo(f"{rule.ticker:<10} {shown}")


@allocation_group.command("set")
@click.argument("ticker")
@click.argument("description")
@click.pass_context
def allocation_set(ctx: click.Context, ticker: str, description: str) -> None:
    """Set TICKER's split, e.g. 'Equity' or 'US:60,Intl:40' or 'Bonds:50,US,Intl'."""
    from pinsight.cli.common import open_store
    from pinsight.errors import ValidationError
    from pinsight.portfolio.allocation_parser import describe

    ticker = ticker.upper()
    with open_store(ctx) as (store, _config):
        try:
            store.set_allocation_description(ticker, description)
        except ValidationError as e:
            raise click.ClickException(f"{ticker}: {e}") from None
        click.echo(f"{ticker} = {describe(store.allocations[ticker].asset_classes)}")


@allocation_group.command("remove")
@click.argument("ticker")
@click.pass_context
def allocation_remove(ctx: click.Context, ticker: str) -> None:
    """Forget a ticker's allocation."""
    from pinsight.cli.common import open_store

    ticker = ticker.upper()
    with open_store(ctx) as (store, _config):
        if ticker not in store.allocations or not store.allocations[ticker].is_resolved:
            raise click.ClickException(f"No allocation stored for {ticker}")
        store.remove_allocation(ticker)
    click.echo(f"Removed {ticker}")

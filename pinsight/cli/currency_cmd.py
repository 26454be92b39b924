"""Currency CLI commands: list, set, remove."""

from __future__ import annotations

import click


@click.group("currency")
def currency_group() -> None:
    """Manage currency multipliers into the reporting currency."""
    pass


@currency_group.command("list")
@click.pass_context
def currency_list(ctx: click.Context) -> None:
    """List currencies, including ones still missing a multiplier."""
    from pinsight.cli.common import open_store

    with open_store(ctx) as (store, _config):
        if not store.currencies:
            click.echo("No currencies.")
            return
        for entry in store.currencies.values():
            shown = entry.multiplier if entry.is_resolved else "?  (missing)"
            click.echo(f"{entry.code:<6} {shown}")


@currency_group.command("set")
@click.argument("code")
@click.argument("multiplier", type=float)
@click.pass_context
def currency_set(ctx: click.Context, code: str, multiplier: float) -> None:
    """Set the multiplier converting one unit of CODE into the reporting currency."""
    from pinsight.cli.common import open_store
    from pinsight.portfolio.models import CurrencyEntry

    code = code.upper()
    with open_store(ctx) as (store, _config):
        store.add_currency(CurrencyEntry.resolved(code, multiplier))
    click.echo(f"{code} = {multiplier}")


@currency_group.command("remove")
@click.argument("code")
@click.pass_context
def currency_remove(ctx: click.Context, code: str) -> None:
    """Forget a currency multiplier."""
    from pinsight.cli.common import open_store

    code = code.upper()
    with open_store(ctx) as (store, _config):
        if code not in store.currencies or not store.currencies[code].is_resolved:
            raise click.ClickException(f"No multiplier stored for {code}")
        store.remove_currency(code)
    click.echo(f"Removed {code}")

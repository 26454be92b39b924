"""CLI command: pinsight import -- capture account positions."""

from __future__ import annotations

import logging

import click

from pinsight.config.defaults import ACCOUNT_TYPES

logger = logging.getLogger(__name__)


@click.group("import")
def import_group() -> None:
    """Import account positions into the portfolio."""
    pass


@import_group.command("positions")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--brokerage", required=True, help="Brokerage key, e.g. questrade")
@click.option("--account", "account_name", required=True, help="Account name")
@click.option(
    "--type", "account_type",
    type=click.Choice(ACCOUNT_TYPES), default=None,
    help="Partial capture: only cash, or everything except cash",
)
@click.option(
    "--exclude-cash", is_flag=True, default=False,
    help="Drop CASH positions from this capture",
)
@click.pass_context
def import_positions(
    ctx: click.Context,
    path: str,
    brokerage: str,
    account_name: str,
    account_type: str | None,
    exclude_cash: bool,
) -> None:
    """Import one account's holdings CSV.

    PATH: holdings export with symbol, value and (ideally) currency columns.
    """
    from pinsight.cli.common import open_store
    from pinsight.data.position_import import read_positions_csv
    from pinsight.errors import SourceUnavailable

    with open_store(ctx) as (store, config):
        try:
            snapshot = read_positions_csv(
                path, brokerage, account_name,
                account_type=account_type,
                columns=config.import_.columns,
            )
        except SourceUnavailable as e:
            raise click.ClickException(str(e)) from None

        if snapshot.diagnostics.info:
            click.echo(f"  Note: {snapshot.diagnostics.info}")

        existed = snapshot.account.id in store.accounts
        include_cash = config.import_.include_cash and not exclude_cash
        store.merge_snapshot(snapshot, include_cash=include_cash)

        action = "Updated" if existed else "Added"
        stored = store.accounts[snapshot.account.id]
        click.echo(f"{action} {stored.id} with {len(stored.positions)} positions")

        for code in store.unresolved_currencies():
            click.echo(f"  Currency {code} needs a multiplier (pinsight currency set {code} ...)")
        for ticker in store.unresolved_tickers():
            click.echo(f"  Ticker {ticker} needs an allocation (pinsight allocation set {ticker} ...)")

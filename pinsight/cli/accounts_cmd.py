"""Account CLI commands: list, hide, show, remove."""

from __future__ import annotations

import click

from pinsight.output.summary import format_value


@click.group("accounts")
def accounts_group() -> None:
    """Manage brokerage accounts."""
    pass


@accounts_group.command("list")
@click.option("--positions", "show_positions", is_flag=True, help="List each position")
@click.pass_context
def accounts_list(ctx: click.Context, show_positions: bool) -> None:
    """List stored accounts."""
    from pinsight.cli.common import open_store

    with open_store(ctx) as (store, _config):
        if not store.accounts:
            click.echo("No accounts stored.")
            return
        for account in store.accounts.values():
            flags = []
            if account.hidden:
                flags.append("hidden")
            if account.type:
                flags.append(account.type)
            suffix = f" ({', '.join(flags)})" if flags else ""
            click.echo(f"{account.id}  {len(account.positions)} positions{suffix}")
            if show_positions:
                for p in account.positions:
                    click.echo(f"    {p.ticker:<10} {format_value(p.value):>14} {p.currency or ''}")


def _set_hidden(ctx: click.Context, account_id: str, hidden: bool) -> None:
    from pinsight.cli.common import open_store

    with open_store(ctx) as (store, _config):
        try:
            store.update_account(account_id, hidden=hidden)
        except KeyError:
            raise click.ClickException(f"No account {account_id}") from None
    click.echo(f"{account_id} is now {'hidden' if hidden else 'visible'}")


@accounts_group.command("hide")
@click.argument("account_id")
@click.pass_context
def accounts_hide(ctx: click.Context, account_id: str) -> None:
    """Hide an account from listings (it still counts in the summary)."""
    _set_hidden(ctx, account_id, True)


@accounts_group.command("show")
@click.argument("account_id")
@click.pass_context
def accounts_show(ctx: click.Context, account_id: str) -> None:
    """Make a hidden account visible again."""
    _set_hidden(ctx, account_id, False)


@accounts_group.command("remove")
@click.argument("account_id")
@click.pass_context
def accounts_remove(ctx: click.Context, account_id: str) -> None:
    """Remove an account and its positions."""
    from pinsight.cli.common import open_store

    with open_store(ctx) as (store, _config):
        if not store.remove_account(account_id):
            raise click.ClickException(f"No account {account_id}")
    click.echo(f"Removed {account_id}")

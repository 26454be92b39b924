"""Report CLI commands: summary, export."""

from __future__ import annotations

from pathlib import Path

import click


@click.command("summary")
@click.pass_context
def summary_cmd(ctx: click.Context) -> None:
    """Show how the portfolio splits across asset classes."""
    from pinsight.cli.common import open_store
    from pinsight.output.summary import render_summary

    with open_store(ctx) as (store, _config):
        for line in render_summary(store.summary):
            click.echo(line)
        missing = store.unresolved_currencies()
        if missing:
            click.echo(f"\nMissing multipliers (counted at x1): {', '.join(missing)}")


@click.group("export")
def export_group() -> None:
    """Write CSV exports of the portfolio."""
    pass


def _write(text: str, output: str | None, default_name: str, export_dir: str) -> Path:
    from pinsight.config.loader import resolve_path

    path = Path(output) if output else resolve_path(export_dir) / default_name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@export_group.command("portfolio")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None)
@click.pass_context
def export_portfolio(ctx: click.Context, output: str | None) -> None:
    """Export one row per position and asset class."""
    from pinsight.cli.common import open_store
    from pinsight.output.export import export_filename, portfolio_csv

    with open_store(ctx) as (store, config):
        text = portfolio_csv(
            store.accounts.values(),
            store.allocations.values(),
            store.currencies.values(),
            include_cash=config.aggregation.include_cash,
        )
        path = _write(text, output, export_filename("portfolio"), config.export.dir)
    click.echo(f"Wrote {path}")


@export_group.command("assets")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None)
@click.pass_context
def export_assets(ctx: click.Context, output: str | None) -> None:
    """Export the asset-class summary."""
    from pinsight.cli.common import open_store
    from pinsight.output.export import assets_csv, export_filename

    with open_store(ctx) as (store, config):
        text = assets_csv(
            store.accounts.values(),
            store.allocations.values(),
            store.currency_table,
            include_cash=config.aggregation.include_cash,
            unknown_asset_class=config.aggregation.unknown_asset_class,
        )
        path = _write(text, output, export_filename("assets"), config.export.dir)
    click.echo(f"Wrote {path}")

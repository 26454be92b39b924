"""Top-level CLI entry point for pinsight."""

from __future__ import annotations

import logging

import click

from pinsight import __version__


@click.group()
@click.version_option(version=__version__, prog_name="pinsight")
@click.option(
    "--config",
    type=click.Path(),
    default=None,
    envvar="PINSIGHT_CONFIG",
    help="Path to pinsight.yaml",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """pinsight -- portfolio allocation across brokerage accounts."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# Register sub-commands
from pinsight.cli.accounts_cmd import accounts_group  # noqa: E402
from pinsight.cli.allocation_cmd import allocation_group  # noqa: E402
from pinsight.cli.config_cmd import config_group  # noqa: E402
from pinsight.cli.currency_cmd import currency_group  # noqa: E402
from pinsight.cli.import_cmd import import_group  # noqa: E402
from pinsight.cli.report_cmd import export_group, summary_cmd  # noqa: E402

cli.add_command(accounts_group, "accounts")
cli.add_command(allocation_group, "allocation")
cli.add_command(config_group, "config")
cli.add_command(currency_group, "currency")
cli.add_command(export_group, "export")
cli.add_command(import_group, "import")
cli.add_command(summary_cmd, "summary")


@cli.command()
@click.option(
    "--write-config", is_flag=True,
    help="Also write a pinsight.yaml with every default spelled out",
)
@click.pass_context
def init(ctx: click.Context, write_config: bool) -> None:
    """Create the database and, optionally, a starter config file."""
    from pathlib import Path

    import pydantic
    import yaml

    from pinsight.config.loader import load_config, resolve_path
    from pinsight.config.schema import PinsightConfig
    from pinsight.errors import PinsightError
    from pinsight.storage.database import Database
    from pinsight.storage.migrations import ensure_schema

    if write_config:
        target = Path(ctx.obj.get("config_path") or "pinsight.yaml")
        if target.exists():
            click.echo(f"  Config: {target} (kept existing)")
        else:
            defaults = PinsightConfig().model_dump(by_alias=True)
            target.write_text(yaml.safe_dump(defaults, sort_keys=False), encoding="utf-8")
            click.echo(f"  Config: {target} (written)")

    try:
        config = load_config(ctx.obj.get("config_path"))
    except (PinsightError, pydantic.ValidationError) as e:
        raise click.ClickException(str(e)) from None
    db_path = resolve_path(config.database.path)
    with Database(db_path) as db:
        version = ensure_schema(db)
    click.echo(f"  Database: {db_path}")
    click.echo(f"  Schema version: {version}")

    click.echo("\nNext steps:")
    click.echo("  pinsight import positions holdings.csv --brokerage questrade --account TFSA")
    click.echo("  pinsight currency set USD 1.35")
    click.echo("  pinsight allocation set XIU 'Equity:50,Bonds:50'")
    click.echo("  pinsight summary")


def main() -> None:
    cli(obj={})

"""Config CLI commands: show, validate."""

from __future__ import annotations

import json

import click
import yaml


@click.group("config")
def config_group() -> None:
    """Inspect pinsight.yaml."""
    pass


@config_group.command("show")
@click.option(
    "--format", "fmt", type=click.Choice(["yaml", "json"]), default="yaml",
    help="Output format",
)
@click.pass_context
def config_show(ctx: click.Context, fmt: str) -> None:
    """Print the effective configuration, defaults filled in."""
    from pinsight.config.loader import load_config

    settings = load_config(ctx.obj.get("config_path")).model_dump(by_alias=True)
    if fmt == "json":
        click.echo(json.dumps(settings, indent=2))
    else:
        click.echo(yaml.safe_dump(settings, sort_keys=False).rstrip())


@config_group.command("validate")
@click.pass_context
def config_validate(ctx: click.Context) -> None:
    """Check pinsight.yaml against the schema."""
    from pydantic import ValidationError

    from pinsight.config.loader import load_config
    from pinsight.errors import ConfigError

    try:
        config = load_config(ctx.obj.get("config_path"))
    except (ValidationError, ConfigError) as e:
        click.echo(f"Config validation failed: {e}", err=True)
        raise SystemExit(1) from None

    aliases = config.import_.columns
    click.echo("Config is valid.")
    click.echo(f"  Database: {config.database.path}")
    click.echo(f"  Export dir: {config.export.dir}")
    click.echo(f"  Include cash: {config.aggregation.include_cash}")
    click.echo(f"  Unknown bucket: {config.aggregation.unknown_asset_class}")
    click.echo(f"  Symbol columns: {', '.join(aliases.symbol)}")

"""Shared plumbing for commands that work on the stored portfolio."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

import click
import pydantic

from pinsight.config.schema import PinsightConfig
from pinsight.errors import PinsightError
from pinsight.portfolio.store import PortfolioStore


@contextmanager
def open_store(ctx: click.Context) -> Generator[tuple[PortfolioStore, PinsightConfig], None, None]:
    """Load config, open the database and yield a populated store."""
    from pinsight.config.loader import load_config, resolve_path
    from pinsight.storage.database import Database
    from pinsight.storage.migrations import ensure_schema
    from pinsight.storage.queries import SqliteBackend, load_collections

    try:
        config = load_config(ctx.obj.get("config_path"))
    except (PinsightError, pydantic.ValidationError) as e:
        raise click.ClickException(str(e)) from None
    with Database(resolve_path(config.database.path)) as db:
        ensure_schema(db)
        store = PortfolioStore(
            SqliteBackend(db),
            include_cash=config.aggregation.include_cash,
            unknown_asset_class=config.aggregation.unknown_asset_class,
        )
        store.load(load_collections(db))
        yield store, config

"""CSV exports of the portfolio detail and the asset-class summary.

The detail export keeps the raw per-position view: currency lookup is an
exact code match, and a ticker without an allocation rule is written once
at 100% under a blank asset class (the on-screen summary uses the ``???``
bucket instead).
"""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable

import pandas as pd

from pinsight.config.defaults import UNKNOWN_ASSET_CLASS
from pinsight.portfolio.aggregation import aggregate, resolved_rules
from pinsight.portfolio.currency import CurrencyTable
from pinsight.portfolio.models import (
    Account,
    AllocationRule,
    AssetClassWeight,
    AssetSummary,
    CurrencyEntry,
)

PORTFOLIO_COLUMNS = [
    "Brokerage",
    "Account ID",
    "Account Name",
    "Ticker",
    "Value",
    "Currency",
    "Currency Multiplier",
    "Normalized Value",
    "Asset Class",
]

ASSET_COLUMNS = ["Asset Class", "Value", "% Portfolio"]

_UNALLOCATED = (AssetClassWeight(name="", percentage=1.0),)


def portfolio_rows(
    accounts: Iterable[Account],
    allocation_rules: Iterable[AllocationRule],
    currencies: Iterable[CurrencyEntry],
    *,
    include_cash: bool = True,
) -> list[dict[str, Any]]:
    """One row per (position, asset class) pair, in account/position order.

    CASH positions are left out when ``include_cash`` is False, as they are
    in the summary.
    """
    rules = resolved_rules(allocation_rules)
    multipliers: dict[str, float | None] = {}
    for entry in currencies:
        multipliers.setdefault(entry.code, entry.multiplier)

    rows: list[dict[str, Any]] = []
    for account in accounts:
        for position in account.positions:
            if position.is_cash and not include_cash:
                continue
            multiplier = multipliers.get(position.currency) if position.currency else None
            rule = rules.get(position.ticker)
            asset_classes = rule.asset_classes if rule is not None else _UNALLOCATED
            for asset_class in asset_classes:
                value = position.value * asset_class.percentage
                rows.append({
                    "Brokerage": account.brokerage,
                    "Account ID": account.id,
                    "Account Name": account.name,
                    "Ticker": position.ticker,
                    "Value": value,
                    "Currency": position.currency,
                    "Currency Multiplier": multiplier,
                    "Normalized Value": value * (multiplier or 1),
                    "Asset Class": asset_class.name,
                })
    return rows


def summary_rows(summary: AssetSummary) -> list[dict[str, Any]]:
    """One row per asset class of an already computed summary."""
    return [
        {
            "Asset Class": item.asset_class,
            "Value": item.value,
            "% Portfolio": item.percentage,
        }
        for item in summary.items
    ]


def asset_rows(
    accounts: Iterable[Account],
    allocation_rules: Iterable[AllocationRule],
    currencies: CurrencyTable | Iterable[CurrencyEntry],
    *,
    include_cash: bool = True,
    unknown_asset_class: str = UNKNOWN_ASSET_CLASS,
) -> list[dict[str, Any]]:
    """One row per asset class, largest first, from the same inputs as ``aggregate``."""
    summary = aggregate(
        accounts,
        allocation_rules,
        currencies,
        include_cash=include_cash,
        unknown_asset_class=unknown_asset_class,
    )
    return summary_rows(summary)


def _to_csv(rows: list[dict[str, Any]], columns: list[str]) -> str:
    return pd.DataFrame(rows, columns=columns).to_csv(index=False, lineterminator="\n")


def portfolio_csv(
    accounts: Iterable[Account],
    allocation_rules: Iterable[AllocationRule],
    currencies: Iterable[CurrencyEntry],
    *,
    include_cash: bool = True,
) -> str:
    rows = portfolio_rows(accounts, allocation_rules, currencies, include_cash=include_cash)
    return _to_csv(rows, PORTFOLIO_COLUMNS)


def assets_csv(
    accounts: Iterable[Account],
    allocation_rules: Iterable[AllocationRule],
    currencies: CurrencyTable | Iterable[CurrencyEntry],
    *,
    include_cash: bool = True,
    unknown_asset_class: str = UNKNOWN_ASSET_CLASS,
) -> str:
    rows = asset_rows(
        accounts,
        allocation_rules,
        currencies,
        include_cash=include_cash,
        unknown_asset_class=unknown_asset_class,
    )
    return _to_csv(rows, ASSET_COLUMNS)


def export_filename(kind: str, today: date | None = None) -> str:
    """Download name for an export, e.g. ``2024-03-01 portfolio.csv``."""
    if kind not in ("portfolio", "assets"):
        raise ValueError(f"Unknown export kind: {kind!r}")
    day = today or date.today()
    return f"{day.isoformat()} {kind}.csv"

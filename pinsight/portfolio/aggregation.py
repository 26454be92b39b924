"""Asset-class aggregation across every account.

Each position is split by its allocation rule, normalised into the
reporting currency, and accumulated per asset class. The result is rebuilt
from scratch on every call.
"""

from __future__ import annotations

import logging
from typing import Iterable

from pinsight.config.defaults import UNKNOWN_ASSET_CLASS
from pinsight.portfolio.currency import CurrencyTable
from pinsight.portfolio.models import (
    Account,
    AllocationRule,
    AssetClassTotal,
    AssetClassWeight,
    AssetSummary,
    CurrencyEntry,
)

logger = logging.getLogger(__name__)


def resolved_rules(rules: Iterable[AllocationRule]) -> dict[str, AllocationRule]:
    """Index resolved rules by ticker. The first rule for a ticker wins."""
    index: dict[str, AllocationRule] = {}
    for rule in rules:
        if rule.is_resolved and rule.ticker not in index:
            index[rule.ticker] = rule
    return index


def aggregate(
    accounts: Iterable[Account],
    allocation_rules: Iterable[AllocationRule],
    currency_table: CurrencyTable | Iterable[CurrencyEntry],
    *,
    include_cash: bool = True,
    unknown_asset_class: str = UNKNOWN_ASSET_CLASS,
) -> AssetSummary:
    """Compute per-asset-class totals for the whole portfolio.

    Parameters:
        accounts: All accounts. Hidden accounts are included.
        allocation_rules: Rules keyed by ticker; unresolved rules are ignored.
        currency_table: Multipliers into the reporting currency.
        include_cash: When False, ``CASH`` positions are left out.
        unknown_asset_class: Bucket for tickers with no resolved rule.

    Returns:
        AssetSummary with items sorted by value descending (ties keep the
        order in which asset classes were first seen) and the grand total.
        With no positions the summary is empty; when positions exist but
        total zero, every percentage is 0.0.
    """
    if not isinstance(currency_table, CurrencyTable):
        currency_table = CurrencyTable(currency_table)
    rules = resolved_rules(allocation_rules)
    unknown = (AssetClassWeight(name=unknown_asset_class, percentage=1.0),)

    buckets: dict[str, float] = {}
    n_positions = 0
    for account in accounts:
        for position in account.positions:
            if position.is_cash and not include_cash:
                continue
            n_positions += 1
            rule = rules.get(position.ticker)
            asset_classes = rule.asset_classes if rule is not None else unknown
            for asset_class in asset_classes:
                contribution = currency_table.convert(
                    position.value * asset_class.percentage, position.currency
                )
                buckets[asset_class.name] = buckets.get(asset_class.name, 0.0) + contribution

    total = sum(buckets.values())
    ranked = sorted(buckets.items(), key=lambda kv: kv[1], reverse=True)
    items = tuple(
        AssetClassTotal(
            asset_class=name,
            value=value,
            percentage=value / total if total else 0.0,
        )
        for name, value in ranked
    )

    logger.debug(
        "Aggregated %d positions into %d asset classes (total=%.2f)",
        n_positions, len(items), total,
    )
    return AssetSummary(items=items, total=total)

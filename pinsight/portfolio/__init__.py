"""Portfolio engine: allocation parsing, currency normalisation, aggregation.

Public API::

    from pinsight.portfolio import (
        PortfolioStore,
        aggregate,
        convert,
        parse_description,
        missing_currency_codes,
        missing_allocation_tickers,
    )
"""

from pinsight.portfolio.aggregation import aggregate
from pinsight.portfolio.allocation_parser import describe, parse_description
from pinsight.portfolio.currency import CurrencyTable, convert
from pinsight.portfolio.gaps import (
    missing_allocation_tickers,
    missing_currency_codes,
)
from pinsight.portfolio.models import (
    Account,
    AllocationRule,
    AssetClassTotal,
    AssetClassWeight,
    AssetSummary,
    BrokerageSnapshot,
    CurrencyEntry,
    Diagnostics,
    Position,
)
from pinsight.portfolio.store import PortfolioStore

__all__ = [
    "Account",
    "AllocationRule",
    "AssetClassTotal",
    "AssetClassWeight",
    "AssetSummary",
    "BrokerageSnapshot",
    "CurrencyEntry",
    "CurrencyTable",
    "Diagnostics",
    "Position",
    "PortfolioStore",
    "aggregate",
    "convert",
    "describe",
    "parse_description",
    "missing_allocation_tickers",
    "missing_currency_codes",
]

"""Position import from brokerage holdings CSV exports.

Reads one account's holdings file and turns it into a BrokerageSnapshot
the portfolio store can merge. Headers are matched against configurable
aliases, so exports from different brokerages work without reshaping.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pandas as pd

from pinsight.config.defaults import IMPORT_SKIP_SYMBOLS
from pinsight.config.schema import ImportColumnsConfig
from pinsight.errors import SourceUnavailable
from pinsight.portfolio.models import Account, BrokerageSnapshot, Diagnostics, Position

logger = logging.getLogger(__name__)

EMPTY_POSITIONS_INFO = "Positions list is empty."
MISSING_CURRENCY_INFO = "Currency is missing. Add a 'Currency' column to the export."


def parse_value(val: Any) -> float | None:
    """Parse a money cell such as ``"$1,234.50"``. Returns None when blank.

    Brokerage exports use "-" and similar markers for cells that don't
    apply; those count as blank.
    """
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return None
    if isinstance(val, (int, float)):
        return float(val)
    text = str(val).replace(",", "").replace("$", "").strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def account_id(brokerage: str, account_name: str) -> str:
    """Stable, brokerage-namespaced account id."""
    return f"{brokerage}:{account_name}"


def _find_column(df: pd.DataFrame, aliases: list[str]) -> str | None:
    by_lower = {str(c).strip().lower(): c for c in df.columns}
    for alias in aliases:
        column = by_lower.get(alias.lower())
        if column is not None:
            return column
    return None


def parse_holdings_frame(
    holdings_df: pd.DataFrame,
    columns: ImportColumnsConfig | None = None,
) -> list[Position]:
    """Parse a holdings table into positions.

    Parameters
    ----------
    holdings_df : pd.DataFrame
        Holdings table with at least a symbol and a value column.
    columns : ImportColumnsConfig | None
        Header aliases. Defaults to the built-in aliases.

    Returns
    -------
    list[Position]
        Positions in file order. Aggregation rows (TOTAL etc.), blank
        symbols and rows without a value are skipped.

    Raises
    ------
    SourceUnavailable
        When no symbol or no value column can be found.
    """
    columns = columns or ImportColumnsConfig()
    if holdings_df is None or holdings_df.empty:
        return []

    symbol_col = _find_column(holdings_df, columns.symbol)
    value_col = _find_column(holdings_df, columns.value)
    if symbol_col is None or value_col is None:
        raise SourceUnavailable(
            f"Holdings need a symbol and a value column; found {list(holdings_df.columns)}"
        )
    currency_col = _find_column(holdings_df, columns.currency)

    positions: list[Position] = []
    for _, row in holdings_df.iterrows():
        raw_symbol = row.get(symbol_col)
        symbol = "" if pd.isna(raw_symbol) else str(raw_symbol).strip().upper()
        if not symbol or symbol in IMPORT_SKIP_SYMBOLS:
            continue

        value = parse_value(row.get(value_col))
        if value is None:
            logger.debug("Skipping %s: no value", symbol)
            continue

        currency = None
        if currency_col is not None:
            raw_currency = row.get(currency_col)
            if not pd.isna(raw_currency):
                currency = str(raw_currency).strip().upper() or None

        positions.append(Position(ticker=symbol, value=value, currency=currency))

    return positions


def _diagnose(positions: list[Position]) -> str | None:
    if not positions:
        return EMPTY_POSITIONS_INFO
    if any(not p.currency for p in positions):
        return MISSING_CURRENCY_INFO
    return None


def read_positions_csv(
    path: str | Path,
    brokerage: str,
    account_name: str,
    account_type: str | None = None,
    columns: ImportColumnsConfig | None = None,
) -> BrokerageSnapshot:
    """Read one account's holdings CSV into a snapshot.

    Parameters
    ----------
    path : str | Path
        Holdings CSV file.
    brokerage : str
        Brokerage key, used to namespace the account id.
    account_name : str
        Account display name.
    account_type : str | None
        None, "cash-only" or "excludes-cash"; decides how the capture
        merges into an existing account.
    columns : ImportColumnsConfig | None
        Header aliases.

    Returns
    -------
    BrokerageSnapshot
        The captured account plus info diagnostics (empty list, missing
        currency).

    Raises
    ------
    SourceUnavailable
        Missing account name, unreadable file, or no usable columns.
    """
    account_name = account_name.strip()
    if not account_name:
        raise SourceUnavailable("Account name is missing")

    try:
        holdings = pd.read_csv(path, dtype=str, skip_blank_lines=True)
    except pd.errors.EmptyDataError:
        holdings = pd.DataFrame()
    except (OSError, pd.errors.ParserError) as e:
        raise SourceUnavailable(f"Cannot read holdings from {path}: {e}") from e

    positions = parse_holdings_frame(holdings, columns)
    info = _diagnose(positions)
    if info:
        logger.info("%s: %s", path, info)

    account = Account(
        id=account_id(brokerage, account_name),
        name=account_name,
        brokerage=brokerage,
        type=account_type,
        positions=tuple(positions),
    )
    logger.info("Read %d positions for %s from %s", len(positions), account.id, path)
    return BrokerageSnapshot(
        brokerage=brokerage,
        account=account,
        diagnostics=Diagnostics(info=info),
    )

"""Discovery of currencies and tickers that still need user input."""

from __future__ import annotations

from typing import Iterable

from pinsight.portfolio.models import Account


def portfolio_currency_codes(accounts: Iterable[Account]) -> list[str]:
    """Distinct non-empty currency codes, in order of first occurrence."""
    codes = (p.currency for a in accounts for p in a.positions)
    return list(dict.fromkeys(c for c in codes if c))


def portfolio_tickers(accounts: Iterable[Account]) -> list[str]:
    """Distinct tickers, in order of first occurrence."""
    return list(dict.fromkeys(p.ticker for a in accounts for p in a.positions))


def missing_currency_codes(
    accounts: Iterable[Account],
    known_codes: Iterable[str],
) -> list[str]:
    """Currency codes referenced by positions but absent from ``known_codes``."""
    known = set(known_codes)
    return [c for c in portfolio_currency_codes(accounts) if c not in known]


def missing_allocation_tickers(
    accounts: Iterable[Account],
    known_tickers: Iterable[str],
) -> list[str]:
    """Tickers referenced by positions but absent from ``known_tickers``."""
    known = set(known_tickers)
    return [t for t in portfolio_tickers(accounts) if t not in known]

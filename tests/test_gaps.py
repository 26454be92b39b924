"""Tests for unresolved currency / ticker discovery."""

from __future__ import annotations

from pinsight.portfolio.gaps import (
    missing_allocation_tickers,
    missing_currency_codes,
    portfolio_currency_codes,
    portfolio_tickers,
)
from pinsight.portfolio.models import Account, Position


def _accounts() -> list[Account]:
    return [
        Account(id="a:1", name="1", positions=(
            Position("XIU", 10, "CAD"),
            Position("AAPL", 10, "USD"),
            Position("CASH", 5, None),
        )),
        Account(id="a:2", name="2", positions=(
            Position("AAPL", 10, "USD"),
            Position("VGRO", 10, "CAD"),
            Position("SAP", 10, "EUR"),
        )),
    ]


class TestPortfolioKeys:
    def test_codes_in_first_seen_order(self):
        assert portfolio_currency_codes(_accounts()) == ["CAD", "USD", "EUR"]

    def test_codes_skip_empty(self):
        assert None not in portfolio_currency_codes(_accounts())

    def test_tickers_in_first_seen_order(self):
        assert portfolio_tickers(_accounts()) == ["XIU", "AAPL", "CASH", "VGRO", "SAP"]


class TestMissing:
    def test_missing_codes(self):
        assert missing_currency_codes(_accounts(), ["USD"]) == ["CAD", "EUR"]

    def test_missing_tickers(self):
        assert missing_allocation_tickers(_accounts(), ["AAPL", "CASH"]) == ["XIU", "VGRO", "SAP"]

    def test_empty_once_resolved(self):
        accounts = _accounts()
        assert missing_currency_codes(accounts, portfolio_currency_codes(accounts)) == []
        assert missing_allocation_tickers(accounts, portfolio_tickers(accounts)) == []

    def test_match_is_exact(self):
        assert missing_currency_codes(_accounts(), ["cad", "USD", "EUR"]) == ["CAD"]

    def test_no_accounts(self):
        assert missing_currency_codes([], ["USD"]) == []
        assert missing_allocation_tickers([], []) == []

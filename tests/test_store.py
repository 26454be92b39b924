"""Tests for the observable portfolio store."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from pinsight.errors import ValidationError
from pinsight.portfolio.models import (
    Account,
    AllocationRule,
    AssetClassWeight,
    BrokerageSnapshot,
    CurrencyEntry,
    Position,
)
from pinsight.portfolio.store import PortfolioStore, replacement_positions


@pytest.fixture
def backend() -> MagicMock:
    return MagicMock()


@pytest.fixture
def store(backend, stored_collections) -> PortfolioStore:
    s = PortfolioStore(backend)
    s.load(stored_collections)
    backend.reset_mock()
    return s


def _snapshot(*positions: Position, type: str | None = None) -> BrokerageSnapshot:
    return BrokerageSnapshot(
        brokerage="questrade",
        account=Account(
            id="questrade:TFSA", name="TFSA", brokerage="questrade",
            type=type, positions=positions,
        ),
    )


# ---------------------------------------------------------------------------
# Tests: loading and recompute
# ---------------------------------------------------------------------------

class TestLoad:
    def test_load_computes_summary(self, store):
        assert store.summary.total == pytest.approx(230)
        assert [i.asset_class for i in store.summary.items] == ["Equity", "Bonds"]

    def test_load_empty(self):
        store = PortfolioStore()
        summary = store.load({})
        assert summary.items == ()
        assert store.accounts == {}

    def test_load_adds_placeholders(self):
        store = PortfolioStore()
        store.load({"accounts": [
            {"id": "b:a", "name": "a", "positions": [
                {"ticker": "AAPL", "value": 10, "currency": "USD"},
            ]},
        ]})
        assert store.unresolved_currencies() == ["USD"]
        assert store.unresolved_tickers() == ["AAPL"]

    def test_subscribers_notified(self, store):
        seen = []
        store.subscribe(seen.append)
        store.recompute()
        assert seen == [store.summary]

    def test_unsubscribe(self, store):
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        store.recompute()
        assert seen == []

    def test_apply_changes_ignores_unknown_names(self, store):
        store.apply_changes({"bogus": [{"x": 1}]})
        assert store.summary.total == pytest.approx(230)

    def test_apply_changes_replaces_collection(self, store):
        store.apply_changes({"currencies": [{"code": "CAD", "multiplier": 1.0}]})
        assert store.summary.total == pytest.approx(250)
        assert store.unresolved_currencies() == ["USD"]


# ---------------------------------------------------------------------------
# Tests: persistence
# ---------------------------------------------------------------------------

class TestPersistence:
    def test_unresolved_entries_not_persisted(self, store, backend):
        store.add_currency(CurrencyEntry(code="EUR"))
        store.add_allocation(AllocationRule(ticker="SAP"))
        saved_currencies = backend.save.call_args_list[0].args
        saved_allocations = backend.save.call_args_list[1].args
        assert saved_currencies[0] == "currencies"
        assert [r["code"] for r in saved_currencies[1]] == ["USD", "CAD"]
        assert saved_allocations[0] == "allocations"
        assert [r["ticker"] for r in saved_allocations[1]] == ["AAPL", "XIU"]

    def test_persisted_accounts_round_trip(self, store):
        records = store.persisted("accounts")
        assert [r["id"] for r in records] == ["questrade:TFSA", "wealthsimple:RRSP"]
        assert Account.from_dict(records[1]).hidden is True

    def test_unknown_collection(self, store):
        with pytest.raises(KeyError):
            store.persisted("positions")

    def test_works_without_backend(self, stored_collections):
        store = PortfolioStore()
        store.load(stored_collections)
        store.add_currency(CurrencyEntry.resolved("USD", 2.0))
        assert store.summary.total == pytest.approx(380)


# ---------------------------------------------------------------------------
# Tests: accounts
# ---------------------------------------------------------------------------

class TestAccounts:
    def test_add_inserts_first(self, store, backend):
        store.add_account(Account(id="td:cash", name="cash", positions=(Position("CASH", 10.0),)))
        assert list(store.accounts)[0] == "td:cash"
        backend.save.assert_called_once()
        assert store.summary.total == pytest.approx(240)

    def test_add_existing_merges_in_place(self, store):
        store.add_account(Account(id="wealthsimple:RRSP", name="RRSP2"))
        assert list(store.accounts) == ["questrade:TFSA", "wealthsimple:RRSP"]
        assert store.accounts["wealthsimple:RRSP"].name == "RRSP2"

    def test_add_existing_keeps_hidden(self, store):
        store.update_account("questrade:TFSA", hidden=True)
        store.add_account(
            Account(id="questrade:TFSA", name="TFSA", positions=(Position("VGRO", 5.0, "CAD"),))
        )
        account = store.accounts["questrade:TFSA"]
        assert account.hidden is True
        assert account.positions == (Position("VGRO", 5.0, "CAD"),)
        assert store.backend.save.call_args.args[1][0]["hidden"] is True

    def test_update_preserves_other_fields(self, store):
        store.update_account("wealthsimple:RRSP", name="Renamed")
        account = store.accounts["wealthsimple:RRSP"]
        assert account.hidden is True
        assert account.name == "Renamed"

    def test_update_unknown(self, store):
        with pytest.raises(KeyError):
            store.update_account("nope:x", hidden=True)

    def test_remove(self, store):
        assert store.remove_account("questrade:TFSA") is True
        assert store.summary.total == pytest.approx(80)
        assert store.remove_account("questrade:TFSA") is False

    def test_new_ticker_gets_placeholders(self, store):
        store.add_account(Account(id="b:x", name="x", positions=(Position("SAP", 10, "EUR"),)))
        assert store.unresolved_currencies() == ["EUR"]
        assert store.unresolved_tickers() == ["SAP"]
        assert store.summary.get("???").value == pytest.approx(10)

    def test_placeholders_dropped_with_positions(self, store):
        store.add_account(Account(id="b:x", name="x", positions=(Position("SAP", 10, "EUR"),)))
        store.remove_account("b:x")
        assert store.unresolved_currencies() == []
        assert store.unresolved_tickers() == []


# ---------------------------------------------------------------------------
# Tests: snapshot merging
# ---------------------------------------------------------------------------

class TestMergeSnapshot:
    def test_new_account(self):
        store = PortfolioStore()
        store.merge_snapshot(_snapshot(Position("AAPL", 10, "USD")))
        account = store.accounts["questrade:TFSA"]
        assert account.brokerage == "questrade"
        assert [p.ticker for p in account.positions] == ["AAPL"]

    def test_new_account_without_cash(self):
        store = PortfolioStore()
        store.merge_snapshot(
            _snapshot(Position("AAPL", 10), Position("CASH", 5)), include_cash=False
        )
        assert [p.ticker for p in store.accounts["questrade:TFSA"].positions] == ["AAPL"]

    def test_replace_keeps_hidden(self, store):
        store.update_account("questrade:TFSA", hidden=True)
        store.merge_snapshot(_snapshot(Position("MSFT", 20, "USD")))
        account = store.accounts["questrade:TFSA"]
        assert account.hidden is True
        assert [p.ticker for p in account.positions] == ["MSFT"]

    def test_cash_only_keeps_securities(self, store):
        store.merge_snapshot(_snapshot(Position("CASH", 7, "USD"), type="cash-only"))
        tickers = [p.ticker for p in store.accounts["questrade:TFSA"].positions]
        assert tickers == ["AAPL", "CASH"]

    def test_excludes_cash_keeps_cash(self, store):
        store.merge_snapshot(_snapshot(Position("CASH", 7, "USD"), type="cash-only"))
        store.merge_snapshot(_snapshot(Position("MSFT", 20, "USD"), type="excludes-cash"))
        tickers = [p.ticker for p in store.accounts["questrade:TFSA"].positions]
        assert tickers == ["CASH", "MSFT"]


class TestReplacementPositions:
    def test_default_replaces(self):
        current = [Position("A", 1), Position("CASH", 2)]
        assert replacement_positions(current, [Position("B", 3)], None) == [Position("B", 3)]

    def test_cash_only(self):
        current = [Position("A", 1), Position("CASH", 2)]
        result = replacement_positions(current, [Position("CASH", 9)], "cash-only")
        assert result == [Position("A", 1), Position("CASH", 9)]

    def test_excludes_cash(self):
        current = [Position("A", 1), Position("CASH", 2)]
        result = replacement_positions(current, [Position("B", 3)], "excludes-cash")
        assert result == [Position("CASH", 2), Position("B", 3)]


# ---------------------------------------------------------------------------
# Tests: currencies and allocations
# ---------------------------------------------------------------------------

class TestCurrencies:
    def test_update_resolves(self, store):
        store.update_currency("USD", 1.35)
        assert store.summary.total == pytest.approx(150 * 1.35 + 80)

    def test_update_unknown(self, store):
        with pytest.raises(KeyError):
            store.update_currency("JPY", 0.01)

    def test_remove_referenced_becomes_placeholder(self, store):
        assert store.remove_currency("CAD") is True
        assert "CAD" in store.currencies
        assert store.unresolved_currencies() == ["CAD"]
        assert store.summary.total == pytest.approx(250)

    def test_remove_missing(self, store):
        assert store.remove_currency("JPY") is False


class TestAllocations:
    def test_set_description(self, store):
        store.set_allocation_description("aapl", "US:60,Intl:40")
        assert store.allocations["AAPL"].asset_classes == (
            AssetClassWeight("US", 0.6),
            AssetClassWeight("Intl", 0.4),
        )
        assert store.summary.get("US").value == pytest.approx(90)

    def test_invalid_description_changes_nothing(self, store, backend):
        before = store.allocations["AAPL"]
        with pytest.raises(ValidationError):
            store.set_allocation_description("AAPL", "A:60,B:50")
        assert store.allocations["AAPL"] == before
        backend.save.assert_not_called()

    def test_update_allocation(self, store):
        store.update_allocation("AAPL", [AssetClassWeight("Tech", 1.0)])
        assert store.summary.get("Tech").value == pytest.approx(150)

    def test_remove_referenced_goes_unknown(self, store):
        store.remove_allocation("AAPL")
        assert store.unresolved_tickers() == ["AAPL"]
        assert store.summary.get("???").value == pytest.approx(150)

"""Observable portfolio store.

Holds the three user-editable collections (accounts, currencies,
allocations), keeps unresolved placeholders in step with the positions,
persists the resolved records through an optional backend, and publishes a
fresh AssetSummary to subscribers after every change.

Every mutation follows the same path: persist the collection, re-apply it
through the collection's handler (which re-derives placeholders), then
recompute. External change notifications enter through ``apply_changes``
and take the same handlers.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Protocol

from pinsight.config.defaults import COLLECTIONS, UNKNOWN_ASSET_CLASS
from pinsight.portfolio.aggregation import aggregate
from pinsight.portfolio.allocation_parser import parse_description
from pinsight.portfolio.currency import CurrencyTable
from pinsight.portfolio.gaps import missing_allocation_tickers, missing_currency_codes
from pinsight.portfolio.models import (
    Account,
    AllocationRule,
    AssetClassWeight,
    AssetSummary,
    BrokerageSnapshot,
    CurrencyEntry,
    Position,
)

logger = logging.getLogger(__name__)

Record = dict[str, Any]
RecomputeListener = Callable[[AssetSummary], None]


class PersistenceBackend(Protocol):
    """Durable home of the resolved collections."""

    def save(self, name: str, records: list[Record]) -> None: ...


def replacement_positions(
    current: Iterable[Position],
    incoming: Iterable[Position],
    account_type: str | None,
) -> list[Position]:
    """Positions an account holds after a new capture is merged in.

    A ``cash-only`` capture only knows the cash balance, so the stored
    securities are kept; an ``excludes-cash`` capture only knows the
    securities, so the stored cash is kept. Anything else replaces all.
    """
    incoming = list(incoming)
    if account_type == "cash-only":
        return [p for p in current if not p.is_cash] + incoming
    if account_type == "excludes-cash":
        return [p for p in current if p.is_cash] + incoming
    return incoming


class PortfolioStore:
    """The three collections plus the derived asset-class summary.

    Usage::

        store = PortfolioStore(backend=SqliteBackend(db))
        store.subscribe(lambda summary: print(summary.total))
        store.load(load_collections(db))
        store.set_allocation_description("XIU", "Equity:50,Bonds:50")

    Parameters:
        backend: Optional persistence backend; receives resolved records only.
        include_cash: Whether CASH positions count towards the summary.
        unknown_asset_class: Bucket name for tickers with no rule.
    """

    def __init__(
        self,
        backend: PersistenceBackend | None = None,
        *,
        include_cash: bool = True,
        unknown_asset_class: str = UNKNOWN_ASSET_CLASS,
    ) -> None:
        self.backend = backend
        self.include_cash = include_cash
        self.unknown_asset_class = unknown_asset_class

        self.accounts: dict[str, Account] = {}
        self.currencies: dict[str, CurrencyEntry] = {}
        self.allocations: dict[str, AllocationRule] = {}
        self.summary = AssetSummary()
        self._listeners: list[RecomputeListener] = []

        self._handlers: dict[str, Callable[[list[Record]], None]] = {
            "accounts": self._set_accounts,
            "currencies": self._set_currencies,
            "allocations": self._set_allocations,
        }

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def subscribe(self, listener: RecomputeListener) -> Callable[[], None]:
        """Register a recompute listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def recompute(self) -> AssetSummary:
        self.summary = aggregate(
            self.accounts.values(),
            self.allocations.values(),
            self.currency_table,
            include_cash=self.include_cash,
            unknown_asset_class=self.unknown_asset_class,
        )
        for listener in list(self._listeners):
            listener(self.summary)
        return self.summary

    @property
    def currency_table(self) -> CurrencyTable:
        return CurrencyTable(self.currencies.values())

    # ------------------------------------------------------------------
    # Loading and external changes
    # ------------------------------------------------------------------

    def load(self, data: dict[str, list[Record] | None]) -> AssetSummary:
        """Replace collections from persisted data, then recompute once."""
        return self.apply_changes(data)

    def apply_changes(self, changes: dict[str, list[Record] | None]) -> AssetSummary:
        """Apply whole-collection replacements keyed by collection name.

        Unknown names are ignored; collections absent from ``changes`` keep
        their current contents.
        """
        for name in COLLECTIONS:
            records = changes.get(name)
            if records is not None:
                self._handlers[name](records)
        return self.recompute()

    def _set_accounts(self, records: list[Record]) -> None:
        self.accounts = {}
        for record in records:
            account = Account.from_dict(record)
            self.accounts[account.id] = account
        self._refresh_placeholders()

    def _set_currencies(self, records: list[Record]) -> None:
        entries = [CurrencyEntry.from_dict(r) for r in records]
        missing = missing_currency_codes(self.accounts.values(), (e.code for e in entries))
        self.currencies = {e.code: e for e in entries}
        for code in missing:
            self.currencies[code] = CurrencyEntry(code=code)

    def _set_allocations(self, records: list[Record]) -> None:
        rules = [AllocationRule.from_dict(r) for r in records]
        missing = missing_allocation_tickers(self.accounts.values(), (r.ticker for r in rules))
        self.allocations = {r.ticker: r for r in rules}
        for ticker in missing:
            self.allocations[ticker] = AllocationRule(ticker=ticker)

    def _refresh_placeholders(self) -> None:
        self._set_currencies(self.persisted("currencies"))
        self._set_allocations(self.persisted("allocations"))

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def persisted(self, name: str) -> list[Record]:
        """Records of a collection as stored durably (resolved entries only)."""
        if name == "accounts":
            return [a.to_dict() for a in self.accounts.values()]
        if name == "currencies":
            return [c.to_dict() for c in self.currencies.values() if c.is_resolved]
        if name == "allocations":
            return [r.to_dict() for r in self.allocations.values() if r.is_resolved]
        raise KeyError(f"Unknown collection: {name}")

    def _commit(self, name: str) -> AssetSummary:
        records = self.persisted(name)
        if self.backend is not None:
            self.backend.save(name, records)
        return self.apply_changes({name: records})

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def add_account(self, account: Account, at: int = 0) -> AssetSummary:
        """Add an account at position ``at``, or merge it into the one with its id.

        A merge keeps the stored ``hidden`` flag; use ``update_account`` to
        change it.
        """
        existing = self.accounts.get(account.id)
        if existing is not None:
            self.accounts[account.id] = account.with_changes(hidden=existing.hidden)
        else:
            items = list(self.accounts.items())
            items.insert(at, (account.id, account))
            self.accounts = dict(items)
        logger.info("Stored account %s (%d positions)", account.id, len(account.positions))
        return self._commit("accounts")

    def update_account(self, account_id: str, **changes: Any) -> AssetSummary:
        account = self.accounts.get(account_id)
        if account is None:
            raise KeyError(f"Unknown account: {account_id}")
        self.accounts[account_id] = account.with_changes(**changes)
        logger.info("Updated account %s: %s", account_id, ", ".join(sorted(changes)))
        return self._commit("accounts")

    def remove_account(self, account_id: str) -> bool:
        if self.accounts.pop(account_id, None) is None:
            return False
        logger.info("Removed account %s", account_id)
        self._commit("accounts")
        return True

    def merge_snapshot(
        self,
        snapshot: BrokerageSnapshot,
        include_cash: bool = True,
    ) -> AssetSummary:
        """Add a captured account, or fold it into the stored one with its id.

        ``hidden`` and any other stored attribute the capture does not carry
        are preserved. CASH positions are dropped when ``include_cash`` is
        False.
        """
        captured = snapshot.account
        existing = self.accounts.get(captured.id)
        if existing is None:
            positions = captured.positions
        else:
            positions = replacement_positions(existing.positions, captured.positions, captured.type)
        positions = tuple(p for p in positions if include_cash or not p.is_cash)

        if existing is None:
            return self.add_account(
                captured.with_changes(brokerage=snapshot.brokerage, positions=positions)
            )

        changes: dict[str, Any] = {
            "name": captured.name,
            "brokerage": snapshot.brokerage,
            "positions": positions,
        }
        if captured.type is not None:
            changes["type"] = captured.type
        return self.update_account(existing.id, **changes)

    # ------------------------------------------------------------------
    # Currencies
    # ------------------------------------------------------------------

    def add_currency(self, entry: CurrencyEntry) -> AssetSummary:
        self.currencies[entry.code] = entry
        logger.info("Stored currency %s (multiplier=%s)", entry.code, entry.multiplier)
        return self._commit("currencies")

    def update_currency(self, code: str, multiplier: float) -> AssetSummary:
        if code not in self.currencies:
            raise KeyError(f"Unknown currency: {code}")
        return self.add_currency(CurrencyEntry.resolved(code, multiplier))

    def remove_currency(self, code: str) -> bool:
        if self.currencies.pop(code, None) is None:
            return False
        logger.info("Removed currency %s", code)
        self._commit("currencies")
        return True

    def unresolved_currencies(self) -> list[str]:
        return [c.code for c in self.currencies.values() if not c.is_resolved]

    # ------------------------------------------------------------------
    # Allocations
    # ------------------------------------------------------------------

    def add_allocation(self, rule: AllocationRule) -> AssetSummary:
        self.allocations[rule.ticker] = rule
        logger.info("Stored allocation for %s", rule.ticker)
        return self._commit("allocations")

    def update_allocation(
        self,
        ticker: str,
        asset_classes: list[AssetClassWeight],
    ) -> AssetSummary:
        if ticker not in self.allocations:
            raise KeyError(f"Unknown allocation: {ticker}")
        return self.add_allocation(AllocationRule.resolved(ticker, asset_classes))

    def set_allocation_description(self, ticker: str, description: str) -> AssetSummary:
        """Parse ``description`` and store it as the rule for ``ticker``.

        Raises ValidationError before anything is stored when the text is
        invalid.
        """
        asset_classes = parse_description(description)
        return self.add_allocation(AllocationRule.resolved(ticker.upper(), asset_classes))

    def remove_allocation(self, ticker: str) -> bool:
        if self.allocations.pop(ticker, None) is None:
            return False
        logger.info("Removed allocation for %s", ticker)
        self._commit("allocations")
        return True

    def unresolved_tickers(self) -> list[str]:
        return [r.ticker for r in self.allocations.values() if not r.is_resolved]

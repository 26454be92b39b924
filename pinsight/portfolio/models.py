"""Portfolio data model: positions, accounts, currencies, allocation rules.

Currencies and allocation rules carry an explicit resolution state. A code
or ticker seen in positions but not yet described by the user is held as
``Unresolved``; only resolved entries are ever persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Union

from pinsight.config.defaults import ACCOUNT_TYPES, CASH_TICKER

# ---------------------------------------------------------------------------
# Positions and accounts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Position:
    """A holding of one ticker inside one account."""

    ticker: str
    value: float
    currency: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "ticker", self.ticker.strip().upper())

    @property
    def is_cash(self) -> bool:
        return self.ticker == CASH_TICKER

    def to_dict(self) -> dict[str, Any]:
        return {"ticker": self.ticker, "value": self.value, "currency": self.currency}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Position":
        return cls(
            ticker=str(data.get("ticker") or data.get("symbol") or ""),
            value=float(data.get("value") or 0),
            currency=data.get("currency") or None,
        )


@dataclass(frozen=True)
class Account:
    """A brokerage account and its captured positions.

    ``id`` is namespaced by brokerage (``"<brokerage>:<account name>"``) and
    unique within the store.
    """

    id: str
    name: str
    brokerage: str = ""
    hidden: bool = False
    type: str | None = None
    """None, "cash-only" or "excludes-cash"."""
    positions: tuple[Position, ...] = ()

    def __post_init__(self) -> None:
        if self.type is not None and self.type not in ACCOUNT_TYPES:
            raise ValueError(f"Unknown account type: {self.type!r}")
        object.__setattr__(self, "positions", tuple(self.positions))

    def with_changes(self, **changes: Any) -> "Account":
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "brokerage": self.brokerage,
            "hidden": self.hidden,
            "type": self.type,
            "positions": [p.to_dict() for p in self.positions],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Account":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            brokerage=data.get("brokerage", ""),
            hidden=bool(data.get("hidden", False)),
            type=data.get("type"),
            positions=tuple(Position.from_dict(p) for p in data.get("positions", [])),
        )


# ---------------------------------------------------------------------------
# Resolution states
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Unresolved:
    """Placeholder state for a code or ticker still awaiting user input."""


UNRESOLVED = Unresolved()


@dataclass(frozen=True)
class Rate:
    """Resolved currency state: one unit of the code in reporting currency."""

    multiplier: float


@dataclass(frozen=True)
class AssetClassWeight:
    name: str
    percentage: float


@dataclass(frozen=True)
class Split:
    """Resolved allocation state: non-empty weights summing to 1."""

    asset_classes: tuple[AssetClassWeight, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "asset_classes", tuple(self.asset_classes))
        if not self.asset_classes:
            raise ValueError("A resolved split needs at least one asset class")


CurrencyState = Union[Rate, Unresolved]
AllocationState = Union[Split, Unresolved]


# ---------------------------------------------------------------------------
# Currency entries and allocation rules
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CurrencyEntry:
    code: str
    rate: CurrencyState = UNRESOLVED

    @classmethod
    def resolved(cls, code: str, multiplier: float) -> "CurrencyEntry":
        return cls(code=code, rate=Rate(float(multiplier)))

    @property
    def is_resolved(self) -> bool:
        return isinstance(self.rate, Rate)

    @property
    def multiplier(self) -> float | None:
        return self.rate.multiplier if isinstance(self.rate, Rate) else None

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "multiplier": self.multiplier}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CurrencyEntry":
        multiplier = data.get("multiplier")
        if isinstance(multiplier, (int, float)) and not isinstance(multiplier, bool):
            return cls.resolved(data["code"], multiplier)
        return cls(code=data["code"])


@dataclass(frozen=True)
class AllocationRule:
    ticker: str
    split: AllocationState = UNRESOLVED

    @classmethod
    def resolved(
        cls, ticker: str, asset_classes: list[AssetClassWeight] | tuple[AssetClassWeight, ...]
    ) -> "AllocationRule":
        return cls(ticker=ticker, split=Split(tuple(asset_classes)))

    @property
    def is_resolved(self) -> bool:
        return isinstance(self.split, Split)

    @property
    def asset_classes(self) -> tuple[AssetClassWeight, ...]:
        return self.split.asset_classes if isinstance(self.split, Split) else ()

    @property
    def is_multi_asset(self) -> bool:
        return len(self.asset_classes) > 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticker": self.ticker,
            "assetClasses": [
                {"name": ac.name, "percentage": ac.percentage}
                for ac in self.asset_classes
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AllocationRule":
        classes = [
            AssetClassWeight(name=ac.get("name", ""), percentage=float(ac["percentage"]))
            for ac in data.get("assetClasses") or []
        ]
        if classes:
            return cls.resolved(data["ticker"], classes)
        return cls(ticker=data["ticker"])


# ---------------------------------------------------------------------------
# Aggregation results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AssetClassTotal:
    """Normalised value held in one asset class across the portfolio."""

    asset_class: str
    value: float
    percentage: float


@dataclass(frozen=True)
class AssetSummary:
    items: tuple[AssetClassTotal, ...] = ()
    total: float = 0.0

    @property
    def n_asset_classes(self) -> int:
        return len(self.items)

    def get(self, asset_class: str) -> AssetClassTotal | None:
        for item in self.items:
            if item.asset_class == asset_class:
                return item
        return None


# ---------------------------------------------------------------------------
# Position source snapshots
# ---------------------------------------------------------------------------

@dataclass
class Diagnostics:
    """Messages a position source reports alongside its snapshot."""

    error: str | None = None
    info: str | None = None


@dataclass
class BrokerageSnapshot:
    """One capture of an account from a position source."""

    brokerage: str
    account: Account
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

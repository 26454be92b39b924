"""Currency normalisation into the reporting currency.

Missing exchange rates fail open: a value whose currency has no resolved
multiplier passes through unchanged (x1) instead of blocking aggregation.
"""

from __future__ import annotations

from typing import Iterable

from pinsight.portfolio.models import CurrencyEntry


class CurrencyTable:
    """Case-insensitive lookup of resolved currency multipliers.

    Usage::

        table = CurrencyTable([CurrencyEntry.resolved("USD", 1.35)])
        table.convert(100, "usd")   # 135.0
        table.convert(100, "ZZZ")   # 100.0
    """

    def __init__(self, entries: Iterable[CurrencyEntry] = ()) -> None:
        self.entries = list(entries)
        self._multipliers: dict[str, float] = {}
        for entry in self.entries:
            key = entry.code.upper()
            if entry.multiplier is not None and key not in self._multipliers:
                self._multipliers[key] = entry.multiplier

    @classmethod
    def from_mapping(cls, multipliers: dict[str, float]) -> "CurrencyTable":
        return cls(CurrencyEntry.resolved(code, m) for code, m in multipliers.items())

    def multiplier_for(self, currency_code: str | None) -> float | None:
        """Resolved multiplier for a code, or None when unknown/unresolved."""
        return self._multipliers.get((currency_code or "").upper())

    def convert(self, value: float, currency_code: str | None) -> float:
        multiplier = self.multiplier_for(currency_code)
        return value * (multiplier if multiplier is not None else 1)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"CurrencyTable({self._multipliers!r})"


def convert(
    value: float,
    currency_code: str | None,
    table: CurrencyTable | Iterable[CurrencyEntry],
) -> float:
    """Convert ``value`` in ``currency_code`` into the reporting currency."""
    if not isinstance(table, CurrencyTable):
        table = CurrencyTable(table)
    return table.convert(value, currency_code)

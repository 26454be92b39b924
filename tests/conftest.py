"""Shared test fixtures for pinsight.

Provides a small two-brokerage portfolio, matching currency and
allocation data, and database fixtures.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from pinsight.config.schema import PinsightConfig
from pinsight.portfolio.currency import CurrencyTable
from pinsight.portfolio.models import (
    Account,
    AllocationRule,
    AssetClassWeight,
    CurrencyEntry,
    Position,
)
from pinsight.storage.database import Database
from pinsight.storage.migrations import ensure_schema

# ---------------------------------------------------------------------------
# Core infrastructure
# ---------------------------------------------------------------------------

@pytest.fixture
def test_config(tmp_path: Path) -> PinsightConfig:
    """Minimal config with temp database and export paths."""
    return PinsightConfig(
        database={"path": str(tmp_path / "test.db")},
        export={"dir": str(tmp_path / "exports")},
    )


@pytest.fixture
def test_db(tmp_path: Path) -> Database:
    """Database with schema applied, using temp file."""
    db = Database(tmp_path / "test.db")
    ensure_schema(db)
    yield db
    db.close()


@pytest.fixture
def memory_db() -> Database:
    """In-memory database for fast unit tests."""
    db = Database(":memory:")
    ensure_schema(db)
    yield db
    db.close()


# ---------------------------------------------------------------------------
# Portfolio data
# ---------------------------------------------------------------------------

@pytest.fixture
def two_accounts() -> list[Account]:
    """AAPL 150 USD at one brokerage, XIU 100 CAD at another."""
    return [
        Account(
            id="questrade:TFSA",
            name="TFSA",
            brokerage="questrade",
            positions=(Position("AAPL", 150.0, "USD"),),
        ),
        Account(
            id="wealthsimple:RRSP",
            name="RRSP",
            brokerage="wealthsimple",
            hidden=True,
            positions=(Position("XIU", 100.0, "CAD"),),
        ),
    ]


@pytest.fixture
def currencies() -> list[CurrencyEntry]:
    return [
        CurrencyEntry.resolved("USD", 1.0),
        CurrencyEntry.resolved("CAD", 0.8),
    ]


@pytest.fixture
def currency_table(currencies) -> CurrencyTable:
    return CurrencyTable(currencies)


@pytest.fixture
def allocation_rules() -> list[AllocationRule]:
    return [
        AllocationRule.resolved("AAPL", [AssetClassWeight("Equity", 1.0)]),
        AllocationRule.resolved(
            "XIU",
            [AssetClassWeight("Equity", 0.5), AssetClassWeight("Bonds", 0.5)],
        ),
    ]


@pytest.fixture
def stored_collections(two_accounts, currencies, allocation_rules) -> dict[str, list[dict]]:
    """The sample portfolio as persisted records."""
    return {
        "accounts": [a.to_dict() for a in two_accounts],
        "currencies": [c.to_dict() for c in currencies],
        "allocations": [r.to_dict() for r in allocation_rules],
    }

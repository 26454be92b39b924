"""Default values shared by the config schema and the engine."""

# ---------------------------------------------------------------------------
# Reserved names
# ---------------------------------------------------------------------------
CASH_TICKER = "CASH"

# Bucket for positions whose ticker has no allocation rule yet.
UNKNOWN_ASSET_CLASS = "???"

# ---------------------------------------------------------------------------
# Account types
# ---------------------------------------------------------------------------
ACCOUNT_TYPES = ("cash-only", "excludes-cash")

# ---------------------------------------------------------------------------
# Collections kept by the portfolio store (and persisted by name)
# ---------------------------------------------------------------------------
COLLECTIONS = ("accounts", "currencies", "allocations")

# ---------------------------------------------------------------------------
# CSV position import
# ---------------------------------------------------------------------------
IMPORT_COLUMNS = {
    "symbol": ["Symbol", "Ticker", "Security"],
    "value": ["Market Value", "Value", "Current Value"],
    "currency": ["Currency", "Ccy"],
}

# Aggregation rows found in brokerage holdings exports.
IMPORT_SKIP_SYMBOLS = frozenset({"TOTAL", "ACCOUNT TOTAL", "NAN"})

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
DATABASE_PATH = "~/.pinsight/pinsight.db"
EXPORT_DIR = "."

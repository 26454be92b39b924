"""Position sources feeding account snapshots into the portfolio store."""

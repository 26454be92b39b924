"""Output generation: CSV exports and text summaries."""

from pinsight.output.export import (
    assets_csv,
    export_filename,
    portfolio_csv,
)
from pinsight.output.summary import format_value, render_summary

__all__ = [
    "assets_csv",
    "export_filename",
    "portfolio_csv",
    "format_value",
    "render_summary",
]

"""Plain-text rendering of the asset-class summary."""

from __future__ import annotations

from pinsight.portfolio.models import AssetSummary


def format_value(x: float) -> str:
    """Round to cents and group thousands: 1234567.891 -> '1,234,567.89'.

    Trailing zeros are dropped the way a plain float prints (1200.5 ->
    '1,200.5', 10.0 -> '10').
    """
    rounded = round(x, 2)
    sign = "-" if rounded < 0 else ""
    whole, _, frac = f"{abs(rounded):.2f}".partition(".")
    frac = frac.rstrip("0")
    grouped = f"{int(whole):,}"
    return sign + (f"{grouped}.{frac}" if frac else grouped)


def format_percentage(p: float) -> str:
    return f"{p * 100:.1f}"


def render_summary(summary: AssetSummary) -> list[str]:
    """Aligned table lines: asset class, value, percent of portfolio."""
    if not summary.items:
        return ["No positions."]

    rows = [
        (item.asset_class or "(blank)", format_value(item.value), format_percentage(item.percentage) + "%")
        for item in summary.items
    ]
    name_w = max(len("Asset Class"), *(len(r[0]) for r in rows))
    value_w = max(len("Value"), *(len(r[1]) for r in rows), len(format_value(summary.total)))

    lines = [f"{'Asset Class':<{name_w}}  {'Value':>{value_w}}  {'%':>6}"]
    lines.append("-" * len(lines[0]))
    for name, value, pct in rows:
        lines.append(f"{name:<{name_w}}  {value:>{value_w}}  {pct:>6}")
    lines.append("-" * len(lines[0]))
    lines.append(f"{'Total':<{name_w}}  {format_value(summary.total):>{value_w}}")
    return lines

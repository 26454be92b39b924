"""Allocation description parsing.

A description is the text a user types to say how one security's value
splits across asset classes::

    Stocks                    -> Stocks 100%
    US:60,Intl:40             -> US 60%, Intl 40%
    Bonds:50,US,Intl          -> Bonds 50%, US 25%, Intl 25%

Segments without a usable number share whatever the explicit percentages
leave over. Arithmetic runs on Decimals rounded to 3 places (0.1%) so the
"adds up to 100%" check is exact.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, ROUND_UP, Decimal
from typing import Iterable

from pinsight.errors import ValidationError
from pinsight.portfolio.models import AssetClassWeight

_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")
_PLACES = Decimal("0.001")
_ONE = Decimal(1)
_HUNDRED = Decimal(100)


def _explicit_percentage(name: str, text: str) -> Decimal | None:
    """Read the percentage written after a colon, as a 0-1 fraction.

    Returns None when the segment should auto-fill: no number, or zero.
    """
    match = _NUMBER.search(text)
    if match is None:
        return None

    value = Decimal(match.group(0))
    if value > _HUNDRED:
        raise ValidationError(f"'{name}' exceeds 100%")

    percentage = (value / _HUNDRED).quantize(_PLACES, rounding=ROUND_HALF_UP)
    return percentage or None


def parse_description(description: str) -> list[AssetClassWeight]:
    """Parse an allocation description into asset-class weights.

    Parameters:
        description: Comma-separated ``name[:percent]`` segments.

    Returns:
        Weights in input order, summing to exactly 1. Names are trimmed but
        not checked for emptiness.

    Raises:
        ValidationError: A class exceeds 100%, the explicit percentages
            exceed 100%, or the split cannot be completed to 100%.
    """
    segments = description.split(",")
    if len(segments) == 1:
        # A lone class is always 100%; a written value only has to be sane.
        name, _, text = description.partition(":")
        name = name.strip()
        _explicit_percentage(name, text)
        return [AssetClassWeight(name=name, percentage=1.0)]

    names: list[str] = []
    percentages: list[Decimal | None] = []
    for segment in segments:
        name, _, text = segment.partition(":")
        name = name.strip()
        names.append(name)
        percentages.append(_explicit_percentage(name, text))

    if sum(p for p in percentages if p is not None) > _ONE:
        raise ValidationError("Exceeds 100%")

    # Each auto-filling entry takes its share of what is left, rounded up,
    # so leftover thousandths land on the earlier entries.
    auto = [i for i, p in enumerate(percentages) if p is None]
    for n, index in enumerate(auto):
        remaining = _ONE - sum(p for p in percentages if p is not None)
        percentages[index] = (remaining / (len(auto) - n)).quantize(_PLACES, rounding=ROUND_UP)

    if sum(percentages) != _ONE:
        raise ValidationError("Does not add up to 100%")

    return [
        AssetClassWeight(name=name, percentage=float(percentage))
        for name, percentage in zip(names, percentages)
        if percentage
    ]


def _format_percent(percentage: float) -> str:
    value = (Decimal(str(percentage)) * _HUNDRED).normalize()
    return format(value, "f")


def describe(asset_classes: Iterable[AssetClassWeight]) -> str:
    """Render weights back into the editable description form."""
    classes = list(asset_classes)
    if len(classes) <= 1:
        return "".join(ac.name for ac in classes)
    return ",".join(f"{ac.name}:{_format_percent(ac.percentage)}" for ac in classes)

# lightning_yield/ui/formatting.py
from __future__ import annotations

import math
from typing import Optional

from lightning_yield.config import settings


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def parse_number(text) -> Optional[float]:
    """
    Parse a form value that may contain thousands separators.

    "14,805,000" -> 14805000.0; blank or unparsable text -> None.
    """
    if text is None:
        return None
    if isinstance(text, (int, float)):
        return None if _is_blank(float(text)) else float(text)
    cleaned = str(text).replace(",", "").strip()
    if cleaned == "":
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return None if math.isnan(value) else value


def format_number(value) -> str:
    """Whole number with thousands separators; blank for missing values."""
    if _is_blank(value):
        return ""
    return f"{value:,.0f}"


def format_input_number(value) -> str:
    # Keeps decimals the user typed, e.g. 5021.5 -> "5,021.5"
    if _is_blank(value):
        return ""
    if float(value).is_integer():
        return f"{value:,.0f}"
    return f"{value:,}"


def format_currency(value) -> str:
    if _is_blank(value):
        return "$0.00"
    return f"${value:,.2f}"


def format_price(value) -> str:
    if _is_blank(value):
        return "$0"
    return f"${value:,.0f}"


def format_btc(value) -> str:
    if _is_blank(value):
        return "0 BTC"
    return f"{value:,.2f} BTC"


def format_pct(value, decimals: int = 1) -> str:
    if _is_blank(value):
        return "0%"
    text = f"{value:,.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text}%"


def format_delta(value: float) -> str:
    """Signed change, e.g. +12.3% / -4.0%."""
    sign = "+" if value > 0 else ""
    return f"{sign}{value:.1f}%"


def delta_color(value: float) -> str:
    # A change that displays as 0.0% is shown neutral, not as a loss
    if round(value, 1) == 0:
        return settings.DELTA_NEUTRAL_COLOR
    return settings.DELTA_POSITIVE_COLOR if value > 0 else settings.DELTA_NEGATIVE_COLOR

# lightning_yield/core/input_validation.py
from __future__ import annotations

import math
from typing import Dict, Optional

from lightning_yield.core.projection_models import ProjectionInput

MSG_MUST_BE_POSITIVE = "Must be > 0"
MSG_REQUIRED = "Required"
MSG_CAGR_FLOOR = "Must be ≥ -100"
MSG_NOT_A_NUMBER = "Must be a finite number"

# Below -100% the price path would need the root of a negative number
MIN_BTC_CAGR_PCT = -100.0


def _as_number(value) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _is_missing_or_non_positive(value) -> bool:
    number = _as_number(value)
    # Rejects NaN and inf along with zero/negatives
    return number is None or not math.isfinite(number) or number <= 0


def validate_projection_inputs(raw: ProjectionInput) -> Dict[str, str]:
    """
    Check a raw input record before a projection is run.

    Every rule is evaluated so the form can flag all fields at once. Keys
    keep form order (reserves, shares, CAGR), so the first key is the field
    the UI should focus. An empty dict means the inputs are valid.

    CAGR may be zero or negative (a legitimate bear case) but not below
    -100%, which would take the BTC price below zero.
    """
    errors: Dict[str, str] = {}

    if _is_missing_or_non_positive(raw.btc_reserves):
        errors["btc_reserves"] = MSG_MUST_BE_POSITIVE

    if _is_missing_or_non_positive(raw.shares_outstanding):
        errors["shares_outstanding"] = MSG_MUST_BE_POSITIVE

    cagr = _as_number(raw.btc_cagr_annual_pct)
    if cagr is None:
        errors["btc_cagr_annual_pct"] = MSG_REQUIRED
    elif not math.isfinite(cagr):
        errors["btc_cagr_annual_pct"] = MSG_NOT_A_NUMBER
    elif cagr < MIN_BTC_CAGR_PCT:
        errors["btc_cagr_annual_pct"] = MSG_CAGR_FLOOR

    return errors


def is_valid(raw: ProjectionInput) -> bool:
    return not validate_projection_inputs(raw)

# lightning_yield/core/projection_engine.py
"""
Quarterly Lightning yield projection engine

Models a bitcoin treasury split into two pools:

- a yield pool deployed to Lightning routing, earning a fixed annual yield
  converted to an effective quarterly rate;
- an idle pool that earns nothing.

Each quarter the routing fees earned by the yield pool are converted to EPS
at the start-of-quarter BTC price, then the pools are either rebalanced back
to the target allocation or the fees are left to compound on Lightning.
The BTC price follows a deterministic path compounding at the CAGR.

The run is a fold over PoolState: quarter q+1 only sees the state returned
by quarter q, so the loop must stay sequential.
"""
from __future__ import annotations

import logging
import math
from typing import List, Tuple

import pandas as pd

from lightning_yield.config import settings
from lightning_yield.core.projection_models import (
    PoolState,
    ProjectionInput,
    ProjectionResult,
    QuarterResult,
)

logger = logging.getLogger(__name__)

# Idle treasury is un-deployed BTC, not an interest-bearing instrument
IDLE_POOL_QUARTERLY_RATE = 0.0


class ProjectionInputError(ValueError):
    """Raised when the engine is called with inputs that failed validation."""


def quarterly_rate(annual_pct: float) -> float:
    """Convert an annual % rate to the equivalent quarterly compounding rate."""
    return (1.0 + annual_pct / 100.0) ** (1.0 / settings.QUARTERS_PER_YEAR) - 1.0


def quarter_label(quarter_index: int) -> str:
    """Label for a 1-based quarter index, e.g. 1 -> 'Y1Q1', 6 -> 'Y2Q2'."""
    per_year = settings.QUARTERS_PER_YEAR
    year = (quarter_index - 1) // per_year + 1
    quarter = (quarter_index - 1) % per_year + 1
    return f"Y{year}Q{quarter}"


def _is_positive(value) -> bool:
    # NaN and inf are rejected along with zero/negatives
    if value is None:
        return False
    number = float(value)
    return math.isfinite(number) and number > 0


def _check_preconditions(inputs: ProjectionInput, btc_price_usd_t0: float) -> None:
    problems: List[str] = []
    if not _is_positive(inputs.btc_reserves):
        problems.append(f"btc_reserves must be > 0 (got {inputs.btc_reserves!r})")
    if not _is_positive(inputs.shares_outstanding):
        problems.append(
            f"shares_outstanding must be > 0 (got {inputs.shares_outstanding!r})"
        )
    if not _is_positive(btc_price_usd_t0):
        problems.append(f"btc_price_usd_t0 must be > 0 (got {btc_price_usd_t0!r})")
    if not 0.0 <= inputs.lightning_allocation_pct <= 100.0:
        problems.append(
            "lightning_allocation_pct must be within [0, 100] "
            f"(got {inputs.lightning_allocation_pct!r})"
        )
    yield_pct = float(inputs.lightning_yield_annual_pct)
    if not (math.isfinite(yield_pct) and yield_pct >= 0.0):
        problems.append(
            "lightning_yield_annual_pct must be a finite number >= 0 "
            f"(got {inputs.lightning_yield_annual_pct!r})"
        )
    cagr = inputs.btc_cagr_annual_pct
    if cagr is None or math.isnan(float(cagr)):
        problems.append("btc_cagr_annual_pct is required")
    elif math.isinf(float(cagr)):
        problems.append(f"btc_cagr_annual_pct must be finite (got {cagr!r})")
    elif float(cagr) < -100.0:
        # (1 + r) would be negative and its quarterly root complex
        problems.append(f"btc_cagr_annual_pct must be >= -100 (got {cagr!r})")

    if problems:
        raise ProjectionInputError("; ".join(problems))


def initial_pool_state(inputs: ProjectionInput, btc_price_usd_t0: float) -> PoolState:
    reserves = float(inputs.btc_reserves)
    allocation = inputs.allocation_fraction
    return PoolState(
        yield_pool_btc=reserves * allocation,
        idle_pool_btc=reserves * (1.0 - allocation),
        btc_price_usd=float(btc_price_usd_t0),
    )


def advance_quarter(
    state: PoolState,
    quarter_index: int,
    inputs: ProjectionInput,
    quarterly_yield_rate: float,
    quarterly_price_growth_rate: float,
) -> Tuple[PoolState, QuarterResult]:
    """
    Run one quarter: book routing fees at the start-of-quarter price, then
    move the pools according to the compounding policy and grow the price.
    """
    shares = float(inputs.shares_outstanding)
    allocation = inputs.allocation_fraction

    earned = state.yield_pool_btc * quarterly_yield_rate
    idle_earned = state.idle_pool_btc * IDLE_POOL_QUARTERLY_RATE

    row = QuarterResult(
        label=quarter_label(quarter_index),
        quarter_index=quarter_index,
        eps_usd=earned * state.btc_price_usd / shares,
        sats_per_share=earned / shares * settings.SATS_PER_BTC,
        btc_earned=earned,
        btc_price_usd=state.btc_price_usd,
        yield_pool_btc=state.yield_pool_btc,
        idle_pool_btc=state.idle_pool_btc,
    )

    if inputs.rebalance_mode:
        total = state.yield_pool_btc + earned + state.idle_pool_btc + idle_earned
        yield_pool = total * allocation
        idle_pool = total * (1.0 - allocation)
    else:
        yield_pool = state.yield_pool_btc + earned
        idle_pool = state.idle_pool_btc + idle_earned

    next_state = PoolState(
        yield_pool_btc=yield_pool,
        idle_pool_btc=idle_pool,
        btc_price_usd=state.btc_price_usd * (1.0 + quarterly_price_growth_rate),
    )
    return next_state, row


def project(inputs: ProjectionInput, btc_price_usd_t0: float) -> ProjectionResult:
    """
    Run the 20-quarter Lightning yield projection.

    Parameters
    ----------
    inputs:
        Calculator inputs that already passed validate_projection_inputs.
    btc_price_usd_t0:
        BTC/USD price at the start of the first quarter.

    Raises ProjectionInputError if the inputs would produce a meaningless
    result (non-positive reserves, shares or price, etc.).
    """
    _check_preconditions(inputs, btc_price_usd_t0)

    q_yield = quarterly_rate(inputs.lightning_yield_annual_pct)
    q_cagr = quarterly_rate(float(inputs.btc_cagr_annual_pct))

    state = initial_pool_state(inputs, btc_price_usd_t0)
    rows: List[QuarterResult] = []
    for quarter_index in range(1, settings.PROJECTION_QUARTERS + 1):
        state, row = advance_quarter(state, quarter_index, inputs, q_yield, q_cagr)
        rows.append(row)

    year1 = rows[: settings.QUARTERS_PER_YEAR]
    result = ProjectionResult(
        inputs=inputs,
        btc_price_usd_t0=float(btc_price_usd_t0),
        quarterly_results=rows,
        cumulative_eps_usd=sum(r.eps_usd for r in rows),
        cumulative_sats_per_share=sum(r.sats_per_share for r in rows),
        cumulative_routing_fees_btc=sum(r.btc_earned for r in rows),
        year1_eps_uplift=sum(r.eps_usd for r in year1),
        final_state=state,
    )

    logger.debug(
        "Projection run policy=%s allocation=%.2f%% yield=%.2f%% cagr=%.2f%% "
        "price_t0=%.2f cumulative_eps=%.6f routing_fees_btc=%.8f",
        inputs.policy.value,
        inputs.lightning_allocation_pct,
        inputs.lightning_yield_annual_pct,
        float(inputs.btc_cagr_annual_pct),
        btc_price_usd_t0,
        result.cumulative_eps_usd,
        result.cumulative_routing_fees_btc,
    )
    return result


def projection_to_dataframe(result: ProjectionResult) -> pd.DataFrame:
    if not result.quarterly_results:
        return pd.DataFrame()
    return pd.DataFrame(
        [
            {
                "Quarter": r.label,
                "EPS (USD)": r.eps_usd,
                "Sats/share": r.sats_per_share,
                "BTC earned": r.btc_earned,
                "BTC price (USD)": r.btc_price_usd,
                "Lightning BTC": r.yield_pool_btc,
                "Idle BTC": r.idle_pool_btc,
            }
            for r in result.quarterly_results
        ]
    )


def annual_totals(result: ProjectionResult) -> pd.DataFrame:
    """Per-year sums of EPS, sats/share and BTC earned."""
    if not result.quarterly_results:
        return pd.DataFrame()
    df = pd.DataFrame(
        [
            {
                "Year": (r.quarter_index - 1) // settings.QUARTERS_PER_YEAR + 1,
                "EPS (USD)": r.eps_usd,
                "Sats/share": r.sats_per_share,
                "BTC earned": r.btc_earned,
            }
            for r in result.quarterly_results
        ]
    )
    return df.groupby("Year", as_index=False)[
        ["EPS (USD)", "Sats/share", "BTC earned"]
    ].sum()

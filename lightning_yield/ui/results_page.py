# lightning_yield/ui/results_page.py
from __future__ import annotations

from typing import Optional

import streamlit as st

from lightning_yield.core.projection_delta import ProjectionDelta
from lightning_yield.core.projection_engine import annual_totals, projection_to_dataframe
from lightning_yield.core.projection_models import ProjectionResult
from lightning_yield.ui.charts import render_quarterly_eps_chart
from lightning_yield.ui.faq import render_methodology
from lightning_yield.ui.formatting import (
    format_btc,
    delta_color,
    format_currency,
    format_delta,
    format_number,
    format_pct,
    format_price,
)


def build_scenario_summary(result: ProjectionResult) -> str:
    """
    One-line echo of the inputs behind a result.

    Example:
      '5,021 BTC • 15% Lightning • 4% yield • 29% BTC CAGR • 14,805,000 shares
       • BTC price (t₀): $65,000'
    """
    inputs = result.inputs
    return (
        f"{format_number(inputs.btc_reserves)} BTC • "
        f"{format_pct(inputs.lightning_allocation_pct)} Lightning • "
        f"{format_pct(inputs.lightning_yield_annual_pct)} yield • "
        f"{format_pct(inputs.btc_cagr_annual_pct)} BTC CAGR • "
        f"{format_number(inputs.shares_outstanding)} shares • "
        f"BTC price (t₀): {format_price(result.btc_price_usd_t0)}"
    )


def _render_delta_callout(delta: Optional[ProjectionDelta]) -> None:
    if delta is None or not delta.has_baseline:
        return
    colour = delta_color(delta.routing_fees_btc_pct)
    st.markdown(
        f"Bitcoin routing fees: :{colour}[{format_delta(delta.routing_fees_btc_pct)} "
        f"vs. previous setting] · sats/share: "
        f"{format_delta(delta.sats_per_share_pct)}"
    )


def _render_headline(result: ProjectionResult) -> None:
    st.markdown("**Non-Dilutive EPS Uplift**")
    st.markdown(f"## +{format_currency(result.first_quarter_eps_usd)} per share")
    st.caption(
        f"Allocating {format_pct(result.inputs.lightning_allocation_pct)} to "
        "Lightning can deliver material, non-dilutive EPS over 5 years. "
        "Q1 EPS calculated using start-of-quarter BTC price."
    )


def _render_metrics(result: ProjectionResult) -> None:
    col1, col2, col3, col4 = st.columns(4)

    with col1:
        st.metric(
            label="Run-Rate EPS Uplift (Year 1)",
            value=format_currency(result.year1_eps_uplift),
            help="Sum of the first four quarterly EPS uplifts.",
        )
    with col2:
        st.metric(
            label="Cumulative EPS Gain (5Y, USD/share)",
            value=format_currency(result.cumulative_eps_usd),
        )
    with col3:
        st.metric(
            label="Cumulative Routing Fees (5-Year BTC Earned)",
            value=format_btc(result.cumulative_routing_fees_btc),
        )
    with col4:
        st.metric(
            label="Cumulative Sats/Share Growth (5-Year)",
            value=f"+{format_number(result.cumulative_sats_per_share)}",
        )


def _render_tables(result: ProjectionResult) -> None:
    with st.expander("Quarterly and annual detail", expanded=False):
        st.dataframe(annual_totals(result), hide_index=True)
        quarterly_df = projection_to_dataframe(result)
        st.dataframe(quarterly_df, hide_index=True)
        st.download_button(
            "Download quarterly projection (CSV)",
            data=quarterly_df.to_csv(index=False).encode("utf-8"),
            file_name="lightning_yield_projection.csv",
            mime="text/csv",
        )


def render_results_page(
    result: ProjectionResult,
    delta: Optional[ProjectionDelta],
    policy_toggle_key: str,
    on_policy_toggle,
    on_back,
) -> None:
    """
    Results view for a finished projection.

    The policy toggle does not recompute anything here: on_policy_toggle is
    the orchestrator's callback, which re-runs the engine and stores the new
    result and delta before the next render.
    """
    st.button("← Back to Calculator", on_click=on_back)

    st.caption(f"**Scenario inputs:** {build_scenario_summary(result)}")

    _render_headline(result)

    st.toggle(
        "Reinvest Lightning Yield",
        key=policy_toggle_key,
        on_change=on_policy_toggle,
        help="Off: rebalance both pools back to the target allocation every quarter.",
    )
    _render_delta_callout(delta)

    _render_metrics(result)
    render_quarterly_eps_chart(result)
    _render_tables(result)
    render_methodology(result.policy)

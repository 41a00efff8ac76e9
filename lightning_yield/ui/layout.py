# lightning_yield/ui/layout.py
from __future__ import annotations

import streamlit as st

from lightning_yield.core.live_data import PriceSnapshot
from lightning_yield.core.projection_models import CompoundingPolicy
from lightning_yield.core.projection_runner import rerun_with_policy, run_projection
from lightning_yield.ui.calculator_inputs import (
    FIELD_LABELS,
    read_calculator_inputs,
    render_calculator_inputs,
    restore_calculator_state,
)
from lightning_yield.ui.faq import render_faq
from lightning_yield.ui.formatting import format_price
from lightning_yield.ui.results_page import render_results_page

# Session state keys owned by the orchestrator
PAGE_KEY = "page"
PAGE_CALCULATOR = "calculator"
PAGE_RESULTS = "results"
ERRORS_KEY = "input_errors"
RESULT_KEY = "projection_result"
DELTA_KEY = "projection_delta"
POLICY_TOGGLE_KEY = "results_reinvest_yield"


def _on_calculate(price: PriceSnapshot) -> None:
    run = run_projection(read_calculator_inputs(), price.btc_price_usd)
    st.session_state[ERRORS_KEY] = run.errors
    if not run.ok:
        return
    st.session_state[RESULT_KEY] = run.result
    st.session_state[DELTA_KEY] = None  # fresh submit, nothing to compare yet
    st.session_state[POLICY_TOGGLE_KEY] = run.result.policy.reinvests_yield
    st.session_state[PAGE_KEY] = PAGE_RESULTS


def _on_policy_toggle() -> None:
    previous = st.session_state[RESULT_KEY]
    policy = CompoundingPolicy.from_reinvest_toggle(
        st.session_state[POLICY_TOGGLE_KEY]
    )
    run = rerun_with_policy(previous, policy)
    # Previous result is only kept long enough to build the delta
    st.session_state[RESULT_KEY] = run.result
    st.session_state[DELTA_KEY] = run.delta


def _on_back() -> None:
    result = st.session_state.get(RESULT_KEY)
    if result is not None:
        restore_calculator_state(result.inputs)
    st.session_state[PAGE_KEY] = PAGE_CALCULATOR


def _render_header(price: PriceSnapshot) -> None:
    st.title("Bitcoin Treasury Lightning Yield")
    st.markdown(
        "Estimate non-dilutive EPS impact and per-share Bitcoin growth under "
        "GAAP fair-value rules."
    )
    label = "Default BTC Price" if price.is_fallback else "Live BTC Price"
    st.caption(f"{label}: {format_price(price.btc_price_usd)} ({price.source})")


def _render_value_props() -> None:
    col1, col2, col3 = st.columns(3)
    with col1:
        st.markdown("**Instant Analysis**")
        st.caption("Immediate EPS and per-share Bitcoin projections.")
    with col2:
        st.markdown("**EPS Impact**")
        st.caption("See how Lightning yield enhances non-dilutive earnings per share.")
    with col3:
        st.markdown("**Non-Dilutive Treasury Growth**")
        st.caption(
            "Track how Lightning fees grow per-share Bitcoin holdings without "
            "issuing new shares."
        )


def _render_disclaimer() -> None:
    st.caption(
        "This model isolates Lightning yield impact. Designed for corporate "
        "Bitcoin treasuries under ASC 350-60; yield estimates assume bitcoin "
        "remains in company-controlled channels. All results are planning "
        "estimates only and do not constitute investment advice."
    )


def render_calculator_page(price: PriceSnapshot) -> None:
    _render_header(price)
    _render_value_props()

    errors = st.session_state.get(ERRORS_KEY, {})
    render_calculator_inputs(errors)
    if errors:
        first_field = next(iter(errors))
        st.error(f"Please check **{FIELD_LABELS[first_field]}**: {errors[first_field]}")

    st.button(
        "Calculate EPS & Treasury Impact",
        type="primary",
        on_click=_on_calculate,
        args=(price,),
    )

    _render_disclaimer()
    render_faq()


def render_dashboard(price: PriceSnapshot) -> None:
    """Route between the calculator and results pages."""
    page = st.session_state.get(PAGE_KEY, PAGE_CALCULATOR)
    result = st.session_state.get(RESULT_KEY)

    if page == PAGE_RESULTS and result is not None:
        render_results_page(
            result=result,
            delta=st.session_state.get(DELTA_KEY),
            policy_toggle_key=POLICY_TOGGLE_KEY,
            on_policy_toggle=_on_policy_toggle,
            on_back=_on_back,
        )
        return

    render_calculator_page(price)

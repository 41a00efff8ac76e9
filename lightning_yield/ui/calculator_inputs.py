# lightning_yield/ui/calculator_inputs.py
from __future__ import annotations

from typing import Dict, Optional

import streamlit as st

from lightning_yield.config import settings
from lightning_yield.core.projection_models import CompoundingPolicy, ProjectionInput
from lightning_yield.core.scenario_presets import (
    ScenarioPreset,
    apply_preset,
    build_default_presets,
    find_active_preset,
)
from lightning_yield.ui.faq import POLICY_EXPLANATIONS
from lightning_yield.ui.formatting import format_input_number, parse_number

# Session state keys for the calculator widgets
KEY_RESERVES = "calc_btc_reserves"
KEY_SHARES = "calc_shares_outstanding"
KEY_ALLOCATION = "calc_lightning_allocation_pct"
KEY_YIELD = "calc_lightning_yield_pct"
KEY_REINVEST = "calc_reinvest_yield"
KEY_CAGR = "calc_btc_cagr_pct"

FIELD_LABELS = {
    "btc_reserves": "Total BTC Reserves",
    "shares_outstanding": "Shares Outstanding",
    "btc_cagr_annual_pct": "BTC CAGR (%)",
}


def init_calculator_state() -> None:
    """Seed widget state with the illustrative defaults on first load."""
    cagr = settings.DEFAULT_BTC_CAGR_PCT
    defaults = {
        KEY_RESERVES: format_input_number(settings.DEFAULT_BTC_RESERVES),
        KEY_SHARES: format_input_number(settings.DEFAULT_SHARES_OUTSTANDING),
        KEY_ALLOCATION: float(settings.DEFAULT_LIGHTNING_ALLOCATION_PCT),
        KEY_YIELD: float(settings.DEFAULT_LIGHTNING_YIELD_PCT),
        KEY_REINVEST: bool(settings.DEFAULT_REINVEST_YIELD),
        KEY_CAGR: "" if cagr is None else f"{cagr:g}",
    }
    for key, value in defaults.items():
        st.session_state.setdefault(key, value)


def restore_calculator_state(inputs: ProjectionInput) -> None:
    """Put previously submitted inputs back into the form (back navigation)."""
    cagr = inputs.btc_cagr_annual_pct
    st.session_state[KEY_RESERVES] = format_input_number(inputs.btc_reserves)
    st.session_state[KEY_SHARES] = format_input_number(inputs.shares_outstanding)
    st.session_state[KEY_ALLOCATION] = float(inputs.lightning_allocation_pct)
    st.session_state[KEY_YIELD] = float(inputs.lightning_yield_annual_pct)
    st.session_state[KEY_REINVEST] = inputs.policy.reinvests_yield
    st.session_state[KEY_CAGR] = "" if cagr is None else f"{cagr:g}"


def read_calculator_inputs() -> ProjectionInput:
    """Build a ProjectionInput from the current widget state."""
    return ProjectionInput(
        btc_reserves=parse_number(st.session_state.get(KEY_RESERVES)),
        shares_outstanding=parse_number(st.session_state.get(KEY_SHARES)),
        lightning_allocation_pct=float(st.session_state.get(KEY_ALLOCATION, 0.0)),
        lightning_yield_annual_pct=float(st.session_state.get(KEY_YIELD, 0.0)),
        btc_cagr_annual_pct=parse_number(st.session_state.get(KEY_CAGR)),
        policy=CompoundingPolicy.from_reinvest_toggle(
            bool(st.session_state.get(KEY_REINVEST, True))
        ),
    )


def preset_widget_values(
    inputs: ProjectionInput, preset: ScenarioPreset
) -> Dict[str, object]:
    """Widget state for the yield fields after applying a preset to inputs."""
    updated = apply_preset(inputs, preset)
    return {
        KEY_ALLOCATION: float(updated.lightning_allocation_pct),
        KEY_YIELD: float(updated.lightning_yield_annual_pct),
        KEY_CAGR: f"{updated.btc_cagr_annual_pct:g}",
    }


def _apply_preset(preset: ScenarioPreset) -> None:
    # Runs as a button callback, before the sliders are re-created.
    # Company inputs keep their raw text, so only the yield fields are written.
    st.session_state.update(preset_widget_values(read_calculator_inputs(), preset))


def _render_field_error(errors: Dict[str, str], field: str) -> None:
    if field in errors:
        st.caption(f":red[{errors[field]}]")


def _render_presets() -> None:
    st.markdown("**Quick Scenarios**")
    active: Optional[ScenarioPreset] = find_active_preset(read_calculator_inputs())
    presets = build_default_presets()
    columns = st.columns(len(presets))
    for column, preset in zip(columns, presets.values()):
        with column:
            st.button(
                preset.label,
                key=f"preset_{preset.name}",
                type="primary" if active == preset else "secondary",
                on_click=_apply_preset,
                args=(preset,),
                help=(
                    f"Lightning Allocation: {preset.lightning_allocation_pct:g}% · "
                    f"Lightning Yield: {preset.lightning_yield_annual_pct:g}% · "
                    f"BTC CAGR: {preset.btc_cagr_annual_pct:g}%"
                ),
            )


def render_calculator_inputs(errors: Dict[str, str]) -> None:
    """
    Render the treasury calculator form.

    Widget values live in st.session_state; read them back with
    read_calculator_inputs(). errors is the field-keyed map from the last
    validation attempt.
    """
    init_calculator_state()

    st.subheader("Treasury Calculator")
    st.caption("Model how Lightning yield can enhance EPS and Bitcoin Treasury growth")

    st.markdown("#### Company Inputs")
    col_reserves, col_shares = st.columns(2)
    with col_reserves:
        st.text_input(
            FIELD_LABELS["btc_reserves"], key=KEY_RESERVES, placeholder="5,021"
        )
        _render_field_error(errors, "btc_reserves")
    with col_shares:
        st.text_input(
            FIELD_LABELS["shares_outstanding"],
            key=KEY_SHARES,
            placeholder="14,805,000",
        )
        _render_field_error(errors, "shares_outstanding")

    st.divider()
    _render_presets()
    st.divider()

    st.markdown("#### Yield Inputs")
    st.slider(
        "% of Treasury Allocated to Lightning",
        min_value=settings.ALLOCATION_SLIDER_MIN_PCT,
        max_value=settings.ALLOCATION_SLIDER_MAX_PCT,
        step=settings.ALLOCATION_SLIDER_STEP_PCT,
        key=KEY_ALLOCATION,
        help="Portion of bitcoin treasury deployed to Lightning routing.",
    )
    st.slider(
        "Projected Lightning Yield (%)",
        min_value=settings.YIELD_SLIDER_MIN_PCT,
        max_value=settings.YIELD_SLIDER_MAX_PCT,
        step=settings.YIELD_SLIDER_STEP_PCT,
        key=KEY_YIELD,
        help=(
            "Estimated annual yield from Lightning routing fees. Typical range "
            "for well-managed channels is 2–7%."
        ),
    )
    reinvest = st.toggle("Reinvest Lightning Yield", key=KEY_REINVEST)
    st.caption(POLICY_EXPLANATIONS[CompoundingPolicy.from_reinvest_toggle(reinvest)])

    st.divider()
    st.markdown("#### Market Assumptions")
    st.text_input(FIELD_LABELS["btc_cagr_annual_pct"], key=KEY_CAGR, placeholder="e.g. 29")
    st.caption("Assumed annual BTC price growth for scenario modelling.")
    _render_field_error(errors, "btc_cagr_annual_pct")

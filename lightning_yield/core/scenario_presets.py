# lightning_yield/core/scenario_presets.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Optional

from lightning_yield.config import settings
from lightning_yield.core.projection_models import ProjectionInput

PresetName = Literal["bear", "base", "bull"]


@dataclass(frozen=True)
class ScenarioPreset:
    name: PresetName
    label: str
    lightning_allocation_pct: float
    lightning_yield_annual_pct: float
    btc_cagr_annual_pct: float


def build_default_presets() -> dict[PresetName, ScenarioPreset]:
    """
    Bear / Base / Bull quick scenarios built from the constants in settings.py.

    UI code should call this instead of hard-coding preset values.
    """

    def _preset(name: PresetName, label: str, values) -> ScenarioPreset:
        allocation, yield_pct, cagr = values
        return ScenarioPreset(
            name=name,
            label=label,
            lightning_allocation_pct=allocation,
            lightning_yield_annual_pct=yield_pct,
            btc_cagr_annual_pct=cagr,
        )

    return {
        "bear": _preset("bear", "Bear Case", settings.PRESET_BEAR),
        "base": _preset("base", "Base Case", settings.PRESET_BASE),
        "bull": _preset("bull", "Bull Case", settings.PRESET_BULL),
    }


def apply_preset(inputs: ProjectionInput, preset: ScenarioPreset) -> ProjectionInput:
    """Overwrite the yield assumptions; company inputs and policy are kept."""
    return replace(
        inputs,
        lightning_allocation_pct=preset.lightning_allocation_pct,
        lightning_yield_annual_pct=preset.lightning_yield_annual_pct,
        btc_cagr_annual_pct=preset.btc_cagr_annual_pct,
    )


def find_active_preset(inputs: ProjectionInput) -> Optional[ScenarioPreset]:
    """Return the preset whose assumptions match the inputs exactly, if any."""
    for preset in build_default_presets().values():
        if (
            preset.lightning_allocation_pct == inputs.lightning_allocation_pct
            and preset.lightning_yield_annual_pct == inputs.lightning_yield_annual_pct
            and preset.btc_cagr_annual_pct == inputs.btc_cagr_annual_pct
        ):
            return preset
    return None

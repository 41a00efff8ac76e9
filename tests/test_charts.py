# tests/test_charts.py

from dataclasses import replace

import pytest

from lightning_yield.core.projection_engine import project
from lightning_yield.core.projection_models import ProjectionInput
from lightning_yield.ui.charts import (
    EMPTY_EPS_AXIS_TOP_USD,
    build_quarterly_eps_figure,
    eps_axis_range,
)


def _result():
    return project(
        ProjectionInput(
            btc_reserves=5021,
            shares_outstanding=14_805_000,
            lightning_allocation_pct=15,
            lightning_yield_annual_pct=4,
            btc_cagr_annual_pct=29,
        ),
        65000,
    )


def test_eps_figure_has_one_bar_per_quarter():
    result = _result()
    fig = build_quarterly_eps_figure(result)

    assert len(fig.data) == 1
    bar = fig.data[0]
    assert list(bar.x) == [r.label for r in result.quarterly_results]
    assert list(bar.y) == [r.eps_usd for r in result.quarterly_results]
    assert bar.customdata[0][0] == result.quarterly_results[0].sats_per_share


def test_eps_axis_tops_out_above_best_quarter():
    result = _result()
    best = max(r.eps_usd for r in result.quarterly_results)

    low, high = eps_axis_range(result, 0.5)
    assert low == 0.0
    assert high == pytest.approx(best * 1.5)
    assert eps_axis_range(result, -1.0) == (0.0, pytest.approx(best))


def test_eps_axis_has_fixed_top_when_nothing_is_earned():
    idle = project(replace(_result().inputs, lightning_allocation_pct=0), 65000)

    assert eps_axis_range(idle, 0.5) == (0.0, EMPTY_EPS_AXIS_TOP_USD)
    fig = build_quarterly_eps_figure(idle)
    assert tuple(fig.layout.yaxis.range) == (0.0, EMPTY_EPS_AXIS_TOP_USD)

# tests/test_projection_engine.py

import math
from dataclasses import replace

import pytest

from lightning_yield.config import settings
from lightning_yield.core.projection_engine import (
    ProjectionInputError,
    annual_totals,
    project,
    projection_to_dataframe,
    quarter_label,
    quarterly_rate,
)
from lightning_yield.core.projection_models import CompoundingPolicy, ProjectionInput

PRICE_T0 = 65000.0


@pytest.fixture()
def base_inputs() -> ProjectionInput:
    return ProjectionInput(
        btc_reserves=5021,
        shares_outstanding=14_805_000,
        lightning_allocation_pct=15,
        lightning_yield_annual_pct=4,
        btc_cagr_annual_pct=29,
        policy=CompoundingPolicy.REINVEST,
    )


def test_quarterly_rate_compounds_back_to_annual():
    q = quarterly_rate(4.0)
    assert q == pytest.approx(1.04**0.25 - 1)
    assert (1 + q) ** 4 == pytest.approx(1.04)
    assert quarterly_rate(0.0) == 0.0


def test_quarter_labels_cover_five_years():
    labels = [quarter_label(q) for q in range(1, 21)]
    assert labels[0] == "Y1Q1"
    assert labels[3] == "Y1Q4"
    assert labels[4] == "Y2Q1"
    assert labels[-1] == "Y5Q4"


def test_reference_scenario_first_quarter(base_inputs):
    result = project(base_inputs, PRICE_T0)

    earned = 5021 * 0.15 * (1.04**0.25 - 1)
    first = result.quarterly_results[0]
    assert first.label == "Y1Q1"
    assert first.btc_earned == pytest.approx(earned)
    assert first.eps_usd == pytest.approx(earned * 65000 / 14_805_000)
    assert first.eps_usd > 0
    assert result.first_quarter_eps_usd == first.eps_usd
    assert result.cumulative_routing_fees_btc > earned


def test_result_always_has_twenty_ordered_quarters(base_inputs):
    for policy in CompoundingPolicy:
        result = project(base_inputs.with_policy(policy), PRICE_T0)
        assert len(result.quarterly_results) == settings.PROJECTION_QUARTERS
        assert [r.quarter_index for r in result.quarterly_results] == list(
            range(1, 21)
        )


def test_projection_is_deterministic(base_inputs):
    assert project(base_inputs, PRICE_T0) == project(base_inputs, PRICE_T0)


def test_aggregates_match_quarterly_rows(base_inputs):
    result = project(base_inputs.with_policy(CompoundingPolicy.REBALANCE), PRICE_T0)
    rows = result.quarterly_results

    assert result.cumulative_eps_usd == pytest.approx(sum(r.eps_usd for r in rows))
    assert result.cumulative_sats_per_share == pytest.approx(
        sum(r.sats_per_share for r in rows)
    )
    assert result.cumulative_routing_fees_btc == pytest.approx(
        sum(r.btc_earned for r in rows)
    )
    assert result.year1_eps_uplift == pytest.approx(sum(r.eps_usd for r in rows[:4]))
    assert result.inputs == base_inputs.with_policy(CompoundingPolicy.REBALANCE)
    assert result.btc_price_usd_t0 == PRICE_T0


def test_reinvest_keeps_idle_pool_fixed_and_grows_yield_pool(base_inputs):
    result = project(base_inputs, PRICE_T0)
    initial_idle = 5021 * (1 - 15 / 100)

    pools = [r.yield_pool_btc for r in result.quarterly_results]
    for row in result.quarterly_results:
        assert row.idle_pool_btc == initial_idle
    assert result.final_state.idle_pool_btc == initial_idle
    assert all(later > earlier for earlier, later in zip(pools, pools[1:]))
    assert result.final_state.yield_pool_btc > pools[-1]


def test_rebalance_restores_target_allocation_each_quarter(base_inputs):
    result = project(base_inputs.with_policy(CompoundingPolicy.REBALANCE), PRICE_T0)

    for row in result.quarterly_results[1:]:
        share = row.yield_pool_btc / (row.yield_pool_btc + row.idle_pool_btc)
        assert share == pytest.approx(0.15, rel=1e-9)
    assert result.final_state.yield_share == pytest.approx(0.15, rel=1e-9)


def test_pools_only_grow_by_earnings(base_inputs):
    for policy in CompoundingPolicy:
        result = project(base_inputs.with_policy(policy), PRICE_T0)
        rows = result.quarterly_results
        next_totals = [r.yield_pool_btc + r.idle_pool_btc for r in rows[1:]]
        next_totals.append(result.final_state.total_btc)
        for row, next_total in zip(rows, next_totals):
            expected = row.yield_pool_btc + row.idle_pool_btc + row.btc_earned
            assert next_total == pytest.approx(expected, rel=1e-12)
        assert result.final_state.total_btc == pytest.approx(
            5021 + result.cumulative_routing_fees_btc
        )


def test_sats_per_share_conversion(base_inputs):
    result = project(base_inputs, PRICE_T0)
    for row in result.quarterly_results:
        assert row.sats_per_share == (row.btc_earned / 14_805_000) * 1e8
        earned_from_eps = row.eps_usd * 14_805_000 / row.btc_price_usd
        assert earned_from_eps == pytest.approx(row.btc_earned)


def test_eps_uses_start_of_quarter_price(base_inputs):
    result = project(base_inputs, PRICE_T0)
    q_cagr = quarterly_rate(29)

    assert result.quarterly_results[0].btc_price_usd == PRICE_T0
    assert result.quarterly_results[-1].btc_price_usd == pytest.approx(
        PRICE_T0 * (1 + q_cagr) ** 19
    )
    assert result.final_state.btc_price_usd == pytest.approx(
        PRICE_T0 * (1 + q_cagr) ** 20
    )


def test_negative_cagr_lowers_price_path(base_inputs):
    result = project(replace(base_inputs, btc_cagr_annual_pct=-20), PRICE_T0)
    prices = [r.btc_price_usd for r in result.quarterly_results]
    assert all(later < earlier for earlier, later in zip(prices, prices[1:]))


@pytest.mark.parametrize("policy", list(CompoundingPolicy))
def test_zero_allocation_earns_nothing(base_inputs, policy):
    inputs = replace(base_inputs, lightning_allocation_pct=0, policy=policy)
    result = project(inputs, PRICE_T0)

    assert all(r.eps_usd == 0 for r in result.quarterly_results)
    assert all(r.sats_per_share == 0 for r in result.quarterly_results)
    assert result.cumulative_routing_fees_btc == 0


def test_full_allocation_makes_policies_identical(base_inputs):
    inputs = replace(base_inputs, lightning_allocation_pct=100)
    reinvest = project(inputs.with_policy(CompoundingPolicy.REINVEST), PRICE_T0)
    rebalance = project(inputs.with_policy(CompoundingPolicy.REBALANCE), PRICE_T0)

    assert all(r.idle_pool_btc == 0 for r in reinvest.quarterly_results)
    assert all(r.idle_pool_btc == 0 for r in rebalance.quarterly_results)
    assert reinvest.quarterly_results == rebalance.quarterly_results
    assert reinvest.cumulative_eps_usd == rebalance.cumulative_eps_usd


def test_reinvest_outearns_rebalance_when_allocation_is_partial(base_inputs):
    reinvest = project(base_inputs, PRICE_T0)
    rebalance = project(base_inputs.with_policy(CompoundingPolicy.REBALANCE), PRICE_T0)
    # Rebalancing moves 85% of each quarter's fees to the idle pool
    assert (
        reinvest.cumulative_routing_fees_btc > rebalance.cumulative_routing_fees_btc
    )


@pytest.mark.parametrize(
    "changes, price",
    [
        ({"shares_outstanding": 0}, PRICE_T0),
        ({"shares_outstanding": None}, PRICE_T0),
        ({"btc_reserves": -1}, PRICE_T0),
        ({"btc_reserves": math.nan}, PRICE_T0),
        ({"btc_cagr_annual_pct": None}, PRICE_T0),
        ({"btc_cagr_annual_pct": -150}, PRICE_T0),
        ({"lightning_allocation_pct": 120}, PRICE_T0),
        ({"lightning_yield_annual_pct": -1}, PRICE_T0),
        ({"btc_reserves": math.inf}, PRICE_T0),
        ({"shares_outstanding": math.inf}, PRICE_T0),
        ({"btc_cagr_annual_pct": math.inf}, PRICE_T0),
        ({"lightning_yield_annual_pct": math.inf}, PRICE_T0),
        ({}, 0.0),
        ({}, math.inf),
    ],
)
def test_engine_rejects_invalid_preconditions(base_inputs, changes, price):
    with pytest.raises(ProjectionInputError):
        project(replace(base_inputs, **changes), price)


def test_projection_to_dataframe_shape(base_inputs):
    df = projection_to_dataframe(project(base_inputs, PRICE_T0))
    assert len(df) == 20
    assert list(df.columns) == [
        "Quarter",
        "EPS (USD)",
        "Sats/share",
        "BTC earned",
        "BTC price (USD)",
        "Lightning BTC",
        "Idle BTC",
    ]
    assert df["Quarter"].iloc[-1] == "Y5Q4"


def test_annual_totals_sum_to_cumulative(base_inputs):
    result = project(base_inputs, PRICE_T0)
    annual = annual_totals(result)

    assert list(annual["Year"]) == [1, 2, 3, 4, 5]
    assert annual["EPS (USD)"].iloc[0] == pytest.approx(result.year1_eps_uplift)
    assert annual["EPS (USD)"].sum() == pytest.approx(result.cumulative_eps_usd)
    assert annual["BTC earned"].sum() == pytest.approx(
        result.cumulative_routing_fees_btc
    )


def test_infinite_reserves_at_zero_allocation_raise_instead_of_nan(base_inputs):
    # inf * 0 would otherwise seed the Lightning pool with NaN
    inputs = replace(base_inputs, btc_reserves=math.inf, lightning_allocation_pct=0)
    with pytest.raises(ProjectionInputError, match="btc_reserves"):
        project(inputs, PRICE_T0)

# lightning_yield/core/projection_models.py
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional


class CompoundingPolicy(str, Enum):
    """
    How the Lightning allocation evolves between quarters.

    REBALANCE: both pools are reset to the target allocation every quarter.
    REINVEST: routing fees stay on Lightning and compound on their own; the
    idle treasury is left untouched.
    """

    REBALANCE = "rebalance"
    REINVEST = "reinvest"

    @classmethod
    def from_reinvest_toggle(cls, reinvest: bool) -> "CompoundingPolicy":
        # The UI shows "Reinvest Lightning Yield"; this is the only place
        # that toggle is translated into a policy.
        return cls.REINVEST if reinvest else cls.REBALANCE

    @property
    def reinvests_yield(self) -> bool:
        return self is CompoundingPolicy.REINVEST


@dataclass(frozen=True)
class ProjectionInput:
    """
    Raw calculator inputs for a single projection run.

    Optional fields may be None straight out of the form; the validator
    reports them before the engine is allowed to run. Percentages are
    expressed as whole numbers, e.g. 15.0 = 15%.
    """

    btc_reserves: Optional[float]
    shares_outstanding: Optional[float]
    lightning_allocation_pct: float
    lightning_yield_annual_pct: float
    btc_cagr_annual_pct: Optional[float]
    policy: CompoundingPolicy = CompoundingPolicy.REINVEST

    @property
    def rebalance_mode(self) -> bool:
        return self.policy is CompoundingPolicy.REBALANCE

    @property
    def allocation_fraction(self) -> float:
        return self.lightning_allocation_pct / 100.0

    def with_policy(self, policy: CompoundingPolicy) -> "ProjectionInput":
        return replace(self, policy=policy)


@dataclass(frozen=True)
class PoolState:
    """State carried from one quarter to the next."""

    yield_pool_btc: float
    idle_pool_btc: float
    btc_price_usd: float

    @property
    def total_btc(self) -> float:
        return self.yield_pool_btc + self.idle_pool_btc

    @property
    def yield_share(self) -> float:
        total = self.total_btc
        return self.yield_pool_btc / total if total > 0 else 0.0


@dataclass(frozen=True)
class QuarterResult:
    label: str  # e.g. "Y2Q3"
    quarter_index: int  # 1..20
    eps_usd: float
    sats_per_share: float

    # Audit trail (pools and price at the start of the quarter)
    btc_earned: float
    btc_price_usd: float
    yield_pool_btc: float
    idle_pool_btc: float


@dataclass(frozen=True)
class ProjectionResult:
    """
    Output of one engine run: the quarterly series plus its aggregates and
    an echo of what produced it.
    """

    inputs: ProjectionInput
    btc_price_usd_t0: float
    quarterly_results: List[QuarterResult]

    cumulative_eps_usd: float
    cumulative_sats_per_share: float
    cumulative_routing_fees_btc: float
    year1_eps_uplift: float

    # Pools and price after the last quarter
    final_state: PoolState

    @property
    def first_quarter_eps_usd(self) -> float:
        if not self.quarterly_results:
            return 0.0
        return self.quarterly_results[0].eps_usd

    @property
    def policy(self) -> CompoundingPolicy:
        return self.inputs.policy

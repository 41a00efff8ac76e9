# lightning_yield/core/projection_delta.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from lightning_yield.core.projection_models import ProjectionResult


@dataclass(frozen=True)
class ProjectionDelta:
    """Relative change (%) between two consecutive projection runs."""

    sats_per_share_pct: float
    routing_fees_btc_pct: float
    has_baseline: bool


def relative_delta(previous: Optional[float], current: float) -> float:
    """
    Percentage change from previous to current.

    Returns 0 when there is nothing to compare against. A move away from a
    zero base is reported as +100, since the true ratio is undefined.
    """
    if previous is None:
        return 0.0
    if previous == 0:
        return 0.0 if current == 0 else 100.0
    return (current - previous) / previous * 100.0


def compare_projections(
    previous: Optional[ProjectionResult],
    current: ProjectionResult,
) -> ProjectionDelta:
    """Compare cumulative sats/share and routing fees of two runs."""
    if previous is None:
        return ProjectionDelta(
            sats_per_share_pct=0.0,
            routing_fees_btc_pct=0.0,
            has_baseline=False,
        )
    return ProjectionDelta(
        sats_per_share_pct=relative_delta(
            previous.cumulative_sats_per_share, current.cumulative_sats_per_share
        ),
        routing_fees_btc_pct=relative_delta(
            previous.cumulative_routing_fees_btc, current.cumulative_routing_fees_btc
        ),
        has_baseline=True,
    )

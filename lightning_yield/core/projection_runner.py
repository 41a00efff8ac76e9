# lightning_yield/core/projection_runner.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from lightning_yield.core.input_validation import validate_projection_inputs
from lightning_yield.core.projection_delta import ProjectionDelta, compare_projections
from lightning_yield.core.projection_engine import project
from lightning_yield.core.projection_models import (
    CompoundingPolicy,
    ProjectionInput,
    ProjectionResult,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectionRun:
    """
    Outcome of one calculation trigger (submit or policy toggle).

    Either errors is non-empty and nothing was projected, or result and
    delta are both set.
    """

    errors: Dict[str, str] = field(default_factory=dict)
    result: Optional[ProjectionResult] = None
    delta: Optional[ProjectionDelta] = None

    @property
    def ok(self) -> bool:
        return not self.errors


def run_projection(
    inputs: ProjectionInput,
    btc_price_usd_t0: float,
    previous: Optional[ProjectionResult] = None,
) -> ProjectionRun:
    """
    Validate, project and diff against the previous run (if any).

    The engine is skipped entirely when validation fails.
    """
    errors = validate_projection_inputs(inputs)
    if errors:
        logger.info("Projection skipped, invalid fields: %s", ", ".join(errors))
        return ProjectionRun(errors=errors)

    result = project(inputs, btc_price_usd_t0)
    return ProjectionRun(result=result, delta=compare_projections(previous, result))


def rerun_with_policy(
    previous: ProjectionResult,
    policy: CompoundingPolicy,
) -> ProjectionRun:
    """Re-run a finished projection with only the compounding policy changed."""
    return run_projection(
        previous.inputs.with_policy(policy),
        previous.btc_price_usd_t0,
        previous=previous,
    )

# Copyright 2025-2026 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Input checks and result helpers shared by the planners."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rrtplan.spec import PlanningResult, PlanningStatus, as_configuration
from rrtplan.utils.path_utils import compute_path_length

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray

    from rrtplan.spec import ConfigurationLike, FeasibilityFn, Path


def check_inputs(
    start: ConfigurationLike,
    goal: ConfigurationLike,
    step_length: float,
    max_iterations: int,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Enforce the preconditions every search shares.

    Raises:
        ValueError: On mismatched dimensions, ``step_length <= 0`` or a
            negative iteration budget.
    """
    q_start = as_configuration(start)
    q_goal = as_configuration(goal)
    if q_start.shape != q_goal.shape:
        raise ValueError(
            f"start and goal differ in dimension: {q_start.shape[0]} != {q_goal.shape[0]}"
        )
    if q_start.shape[0] == 0:
        raise ValueError("Configurations must have at least one dimension")
    if not step_length > 0.0:
        raise ValueError(f"step_length must be strictly positive, got {step_length}")
    if max_iterations < 0:
        raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")
    return q_start, q_goal


def validate_endpoints(
    q_start: NDArray[np.float64],
    q_goal: NDArray[np.float64],
    is_free: FeasibilityFn,
) -> PlanningResult | None:
    """Check start and goal feasibility, returns error result or None if valid."""
    if not is_free(q_start):
        return create_failure_result(
            PlanningStatus.COLLISION_AT_START,
            "Start configuration is not feasible",
        )

    if not is_free(q_goal):
        return create_failure_result(
            PlanningStatus.COLLISION_AT_GOAL,
            "Goal configuration is not feasible",
        )

    return None


# ============= Result Helpers =============


def create_success_result(
    path: Path,
    planning_time: float,
    iterations: int,
    num_nodes: int,
) -> PlanningResult:
    """Create a successful planning result."""
    return PlanningResult(
        status=PlanningStatus.SUCCESS,
        path=path,
        planning_time=planning_time,
        path_length=compute_path_length(path),
        iterations=iterations,
        num_nodes=num_nodes,
        message="Path found",
    )


def create_failure_result(
    status: PlanningStatus,
    message: str,
    planning_time: float = 0.0,
    iterations: int = 0,
) -> PlanningResult:
    """Create a failed planning result."""
    return PlanningResult(
        status=status,
        path=[],
        planning_time=planning_time,
        iterations=iterations,
        message=message,
    )

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

"""Bi-directional RRT-Connect.

The search only uses the caller's feasibility predicate and sampler, so it
works in any configuration space that can be written as a float vector.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import numpy as np

from rrtplan.planners.common import (
    check_inputs,
    create_failure_result,
    create_success_result,
    validate_endpoints,
)
from rrtplan.spec import (
    ExhaustedBudgetError,
    ExtendStatus,
    PlanningStatus,
    TreeRole,
    as_configuration,
)
from rrtplan.tree import Tree
from rrtplan.utils.logging_config import setup_logger
from rrtplan.utils.path_utils import concatenate_paths, smooth_path

if TYPE_CHECKING:
    from rrtplan.spec import (
        ConfigurationLike,
        FeasibilityFn,
        IndexFactory,
        Path,
        PlanningResult,
        SampleFn,
    )

logger = setup_logger()


def dual_rrt_connect(
    start: ConfigurationLike,
    goal: ConfigurationLike,
    is_free: FeasibilityFn,
    random_sample: SampleFn,
    step_length: float,
    max_iterations: int,
    *,
    index_factory: IndexFactory | None = None,
) -> Path:
    """Search a feasible path from ``start`` to ``goal`` with RRT-Connect.

    One tree grows from each endpoint. Every iteration extends one tree
    toward a random sample and then connects the other tree to the new
    node; the trees swap roles whenever they fail to meet.

    Args:
        start: Start configuration
        goal: Goal configuration, same dimension as ``start``
        is_free: Feasibility predicate, called on every candidate point
        random_sample: Sampler over the configuration space
        step_length: Maximum distance between a node and its parent
        max_iterations: Number of samples to draw before giving up
        index_factory: Builds the nearest-neighbor index of each tree

    Returns:
        Waypoints from ``start`` to ``goal``. Consecutive waypoints are at
        most ``step_length`` apart.

    Raises:
        ExhaustedBudgetError: No connection within ``max_iterations``.
        ValueError: Dimension mismatch or non-positive ``step_length``.
    """
    path, _, _ = _grow_and_connect(
        start, goal, is_free, random_sample, step_length, max_iterations, index_factory
    )
    return path


def _grow_and_connect(
    start: ConfigurationLike,
    goal: ConfigurationLike,
    is_free: FeasibilityFn,
    random_sample: SampleFn,
    step_length: float,
    max_iterations: int,
    index_factory: IndexFactory | None,
) -> tuple[Path, int, int]:
    """Run RRT-Connect; returns (path, iterations used, total nodes)."""
    q_start, q_goal = check_inputs(start, goal, step_length, max_iterations)

    tree_a = Tree.from_root(q_start, role=TreeRole.START, index_factory=index_factory)
    tree_b = Tree.from_root(q_goal, role=TreeRole.GOAL, index_factory=index_factory)

    for iteration in range(max_iterations):
        q_rand = as_configuration(random_sample(), tree_a.dim)

        extended = tree_a.extend(q_rand, step_length, is_free)
        if extended.status is ExtendStatus.TRAPPED:
            tree_a, tree_b = tree_b, tree_a
            continue

        q_new = tree_a.config(extended.index)
        connected = tree_b.connect(q_new, step_length, is_free)

        if connected.status is ExtendStatus.REACHED:
            path = _extract_path(tree_a, extended.index, tree_b, connected.index)
            logger.info(
                "Trees connected",
                iterations=iteration + 1,
                waypoints=len(path),
                start_tree_nodes=len(tree_a if tree_a.role is TreeRole.START else tree_b),
                goal_tree_nodes=len(tree_b if tree_a.role is TreeRole.START else tree_a),
            )
            return path, iteration + 1, len(tree_a) + len(tree_b)

        tree_a, tree_b = tree_b, tree_a

    logger.warning(
        "RRT-Connect exhausted its iteration budget",
        max_iterations=max_iterations,
        nodes=len(tree_a) + len(tree_b),
    )
    raise ExhaustedBudgetError(max_iterations)


def _extract_path(tree_a: Tree, new_index: int, tree_b: Tree, reached_index: int) -> Path:
    """Join the two trees at the bridge and orient the result start -> goal."""
    # tree_a root -> new node
    path_a = tree_a.path_from_root(new_index)

    # reached node -> tree_b root
    path_b = list(reversed(tree_b.path_from_root(reached_index)))

    # The reached node coincides with the new node when the last step was short
    path = concatenate_paths(path_a, path_b)

    if tree_b.role is TreeRole.START:
        path.reverse()
    return path


class RRTConnectPlanner:
    """Bi-directional RRT-Connect planner with optional shortcutting.

    Args:
        step_length: Maximum distance between a node and its parent
        max_iterations: Sampling budget per query
        smoothing_iterations: Shortcut attempts on the found path (0 disables)
        index_factory: Builds the nearest-neighbor index of each tree
        seed: Seed of the generator used for shortcutting
    """

    def __init__(
        self,
        step_length: float = 0.2,
        max_iterations: int = 1000,
        smoothing_iterations: int = 100,
        index_factory: IndexFactory | None = None,
        seed: int | None = None,
    ):
        self._step_length = step_length
        self._max_iterations = max_iterations
        self._smoothing_iterations = smoothing_iterations
        self._index_factory = index_factory
        self._rng = np.random.default_rng(seed)

    def plan(
        self,
        start: ConfigurationLike,
        goal: ConfigurationLike,
        is_free: FeasibilityFn,
        random_sample: SampleFn,
    ) -> PlanningResult:
        """Plan a feasible path; search failures are reported in the result."""
        start_time = time.time()

        q_start, q_goal = check_inputs(start, goal, self._step_length, self._max_iterations)
        error = validate_endpoints(q_start, q_goal, is_free)
        if error is not None:
            return error

        try:
            path, iterations, num_nodes = _grow_and_connect(
                q_start,
                q_goal,
                is_free,
                random_sample,
                self._step_length,
                self._max_iterations,
                self._index_factory,
            )
        except ExhaustedBudgetError as e:
            return create_failure_result(
                PlanningStatus.NO_SOLUTION,
                str(e),
                time.time() - start_time,
                e.iterations,
            )

        if self._smoothing_iterations > 0:
            num_waypoints = len(path)
            smooth_path(
                path, is_free, self._step_length, self._smoothing_iterations, rng=self._rng
            )
            logger.debug("Path shortcut", before=num_waypoints, after=len(path))

        return create_success_result(path, time.time() - start_time, iterations, num_nodes)

    def get_name(self) -> str:
        """Get planner name."""
        return "RRTConnect"

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

"""RRT* with choose-parent and neighborhood rewiring.

Every node stores the length of its parent chain back to the start. A new
node is attached to whichever neighbor gives it the lowest cost, then the
neighbors are rewired through it when that shortens their chains. Cost
decreases are pushed down the rewired subtree, so a stored cost always
equals the recomputed chain length.
"""

from __future__ import annotations

from dataclasses import dataclass
import time
from typing import TYPE_CHECKING

import numpy as np

from rrtplan.planners.common import (
    check_inputs,
    create_failure_result,
    create_success_result,
    validate_endpoints,
)
from rrtplan.spec import ExhaustedBudgetError, PlanningStatus, TreeRole, as_configuration
from rrtplan.tree import Tree
from rrtplan.utils.logging_config import setup_logger
from rrtplan.utils.path_utils import steer

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


@dataclass
class RRTStarResult:
    """Tree grown by RRT* and the position of the goal node, if any.

    Attributes:
        tree: The whole search tree, rooted at the start
        goal_index: Arena position of the goal node (None if never reached)
        iterations: Sampling iterations consumed
    """

    tree: Tree
    goal_index: int | None = None
    iterations: int = 0

    @property
    def reached_goal(self) -> bool:
        return self.goal_index is not None

    @property
    def goal_cost(self) -> float | None:
        """Current path cost to the goal node."""
        if self.goal_index is None:
            return None
        return self.tree.nodes[self.goal_index].cost

    def path(self) -> Path:
        """Waypoints from start to goal, empty if the goal was never reached."""
        if self.goal_index is None:
            return []
        return self.tree.path_from_root(self.goal_index)


def rrtstar(
    start: ConfigurationLike,
    goal: ConfigurationLike,
    is_free: FeasibilityFn,
    random_sample: SampleFn,
    step_length: float,
    max_iterations: int,
    neighborhood_radius: float,
    stop_when_reach_goal: bool = True,
    *,
    index_factory: IndexFactory | None = None,
) -> RRTStarResult:
    """Grow a cost-optimizing tree from ``start`` toward ``goal``.

    The goal is attached the first time a new node lands within
    ``step_length`` of it. After that it is an ordinary node: its cost
    follows any rewiring of its ancestors and it may itself be rewired.

    Args:
        start: Start configuration (tree root)
        goal: Goal configuration, same dimension as ``start``
        is_free: Feasibility predicate, called on every candidate point
        random_sample: Sampler over the configuration space
        step_length: Maximum steering distance per iteration
        max_iterations: Number of samples to draw
        neighborhood_radius: Radius of the choose-parent / rewire query
        stop_when_reach_goal: Return as soon as the goal is attached.
            When set, failing to reach the goal raises.

    Returns:
        The tree and the goal node position. With ``stop_when_reach_goal``
        unset the result comes back after the full budget whether or not
        the goal was reached; check ``goal_index``.

    Raises:
        ExhaustedBudgetError: ``stop_when_reach_goal`` is set and the goal
            was never reached.
        ValueError: Dimension mismatch, non-positive ``step_length`` or
            negative ``neighborhood_radius``.
    """
    q_start, q_goal = check_inputs(start, goal, step_length, max_iterations)
    if neighborhood_radius < 0.0:
        raise ValueError(f"neighborhood_radius must be non-negative, got {neighborhood_radius}")

    tree = Tree.from_root(q_start, role=TreeRole.START, index_factory=index_factory)
    goal_index: int | None = None

    for iteration in range(max_iterations):
        q_rand = as_configuration(random_sample(), tree.dim)

        nearest = tree.nearest_index(q_rand)
        q_new = steer(tree.config(nearest), q_rand, step_length)
        if not is_free(q_new):
            continue

        near = tree.near_indices(q_new, neighborhood_radius)

        cost_via_nearest = tree.nodes[nearest].cost + _distance(tree.config(nearest), q_new)
        new_index = tree.add_vertex(q_new, cost=cost_via_nearest)

        _choose_parent(tree, new_index, nearest, near)
        _rewire(tree, new_index, near)

        if goal_index is None:
            dist_to_goal = _distance(q_new, q_goal)
            if dist_to_goal < step_length:
                goal_cost = tree.nodes[new_index].cost + dist_to_goal
                goal_index = tree.add_vertex(q_goal, cost=goal_cost)
                tree.add_edge(new_index, goal_index)
                logger.info(
                    "RRT* reached the goal",
                    iterations=iteration + 1,
                    nodes=len(tree),
                    cost=round(tree.nodes[goal_index].cost, 4),
                )
                if stop_when_reach_goal:
                    return RRTStarResult(tree, goal_index, iteration + 1)

    if goal_index is None and stop_when_reach_goal:
        logger.warning(
            "RRT* exhausted its iteration budget",
            max_iterations=max_iterations,
            nodes=len(tree),
        )
        raise ExhaustedBudgetError(max_iterations)

    logger.debug(
        "RRT* used its full budget",
        nodes=len(tree),
        reached_goal=goal_index is not None,
    )
    return RRTStarResult(tree, goal_index, max_iterations)


def _distance(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.linalg.norm(a - b))


def _choose_parent(tree: Tree, new_index: int, nearest: int, near: list[int]) -> None:
    """Attach ``new_index`` to the cheapest of ``nearest`` and ``near``."""
    q_new = tree.config(new_index)
    best_parent = nearest
    best_cost = tree.nodes[new_index].cost

    for candidate in near:
        cost = tree.nodes[candidate].cost + _distance(tree.config(candidate), q_new)
        if cost < best_cost:
            best_parent, best_cost = candidate, cost

    tree.add_edge(best_parent, new_index)
    tree.nodes[new_index].cost = best_cost


def _rewire(tree: Tree, new_index: int, near: list[int]) -> None:
    """Reparent neighbors through ``new_index`` when that lowers their cost."""
    q_new = tree.config(new_index)
    new_cost = tree.nodes[new_index].cost

    for neighbor in near:
        potential = new_cost + _distance(q_new, tree.config(neighbor))
        if potential >= tree.nodes[neighbor].cost:
            continue
        # Ancestors of the new node can only tie through it, never improve
        if tree.is_ancestor(neighbor, new_index):
            continue
        tree.add_edge(new_index, neighbor)
        tree.update_cost(neighbor, potential)


class RRTStarPlanner:
    """RRT* planner returning the start-to-goal branch of the tree.

    Args:
        step_length: Maximum steering distance per iteration
        max_iterations: Sampling budget per query
        neighborhood_radius: Radius of the choose-parent / rewire query
        stop_when_reach_goal: Stop at first goal contact instead of using
            the whole budget to lower the path cost
        index_factory: Builds the nearest-neighbor index of the tree
    """

    def __init__(
        self,
        step_length: float = 0.2,
        max_iterations: int = 1000,
        neighborhood_radius: float = 0.5,
        stop_when_reach_goal: bool = True,
        index_factory: IndexFactory | None = None,
    ):
        self._step_length = step_length
        self._max_iterations = max_iterations
        self._neighborhood_radius = neighborhood_radius
        self._stop_when_reach_goal = stop_when_reach_goal
        self._index_factory = index_factory

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
            result = rrtstar(
                q_start,
                q_goal,
                is_free,
                random_sample,
                self._step_length,
                self._max_iterations,
                self._neighborhood_radius,
                self._stop_when_reach_goal,
                index_factory=self._index_factory,
            )
        except ExhaustedBudgetError as e:
            return create_failure_result(
                PlanningStatus.NO_SOLUTION,
                str(e),
                time.time() - start_time,
                e.iterations,
            )

        if not result.reached_goal:
            return create_failure_result(
                PlanningStatus.NO_SOLUTION,
                f"Goal not reached after {result.iterations} iterations",
                time.time() - start_time,
                result.iterations,
            )

        return create_success_result(
            result.path(), time.time() - start_time, result.iterations, len(result.tree)
        )

    def get_name(self) -> str:
        """Get planner name."""
        return "RRTStar"

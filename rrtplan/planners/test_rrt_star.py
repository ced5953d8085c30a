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

import math

import numpy as np
import pytest

from rrtplan.examples.box_obstacle import BoxObstacleProblem
from rrtplan.planners.rrt_star import RRTStarPlanner, rrtstar
from rrtplan.spec import ExhaustedBudgetError, PlanningStatus, TreeRole
from rrtplan.tree import Tree
from rrtplan.utils.testing import (
    SQUARE_GOAL,
    SQUARE_START,
    SQUARE_STEP,
    RecordingPredicate,
    inside_square,
    scripted_sampler,
    square_is_free,
    uniform_sampler,
)

FAR_GOAL = (20.0, 20.0)


def always_free(q):
    return True


def biased_problem(seed):
    return BoxObstacleProblem(
        half_extents=(1.0, 1.0), low=-2.0, high=2.0, goal=SQUARE_GOAL, goal_bias=0.1, seed=seed
    )


def test_reaches_goal_around_square(biased_square_problem):
    predicate = RecordingPredicate(biased_square_problem.is_free)
    result = rrtstar(
        SQUARE_START,
        SQUARE_GOAL,
        predicate,
        biased_square_problem.random_sample,
        SQUARE_STEP,
        2000,
        0.5,
        True,
    )

    assert result.reached_goal
    assert result.tree.role is TreeRole.START
    assert math.isfinite(result.goal_cost)

    path = result.path()
    np.testing.assert_array_equal(path[0], SQUARE_START)
    np.testing.assert_array_equal(path[-1], SQUARE_GOAL)
    assert not any(inside_square(q) for q in path)
    assert result.goal_cost == pytest.approx(result.tree.cost_to_root(result.goal_index))
    # Root and goal are the only nodes not produced by an accepted candidate
    for node in result.tree.nodes[1 : result.goal_index]:
        assert predicate.was_accepted(node.config)


def test_stored_costs_match_parent_chains():
    problem = biased_problem(seed=21)
    result = rrtstar(
        SQUARE_START, SQUARE_GOAL, problem.is_free, problem.random_sample, 0.2, 600, 0.5, False
    )
    tree = result.tree
    assert tree.nodes[0].cost == 0.0
    for i, node in enumerate(tree.nodes):
        assert node.cost == pytest.approx(tree.cost_to_root(i), abs=1e-9)
        if node.parent is not None:
            assert i in tree.nodes[node.parent].children


def test_rewiring_never_increases_cost(monkeypatch):
    original = Tree.update_cost
    updates = []

    def checked_update(self, index, cost):
        before = [node.cost for node in self.nodes]
        original(self, index, cost)
        after = [node.cost for node in self.nodes]
        assert all(a <= b + 1e-12 for a, b in zip(after, before))
        updates.append(index)

    monkeypatch.setattr(Tree, "update_cost", checked_update)

    problem = biased_problem(seed=4)
    rrtstar(SQUARE_START, SQUARE_GOAL, problem.is_free, problem.random_sample, 0.2, 600, 0.8, False)
    assert updates


def test_choose_parent_picks_cheapest_neighbor():
    sampler = scripted_sampler([(1.0, 0.0), (2.0, 0.0), (2.0, 1.0)])
    result = rrtstar((0.0, 0.0), FAR_GOAL, always_free, sampler, 10.0, 3, 1.5, False)
    tree = result.tree

    assert [node.parent for node in tree.nodes] == [None, 0, 1, 1]
    # (2, 1) is nearest to (2, 0) but cheaper through (1, 0)
    assert tree.nodes[3].cost == pytest.approx(1.0 + math.sqrt(2.0))
    assert not result.reached_goal


def test_rewire_through_new_node():
    sampler = scripted_sampler([(1.2, 0.0), (2.4, 0.0), (2.4, 1.0), (2.4, 2.0), (1.6, 0.6)])
    result = rrtstar((0.0, 0.0), FAR_GOAL, always_free, sampler, 10.0, 5, 1.5, False)
    tree = result.tree

    assert tree.nodes[5].parent == 1
    assert tree.nodes[5].cost == pytest.approx(1.2 + math.sqrt(0.52))
    # (2.4, 1.0) is cheaper through the new node and takes its child along
    assert tree.nodes[3].parent == 5
    assert tree.nodes[3].cost == pytest.approx(1.2 + math.sqrt(0.52) + math.sqrt(0.8))
    assert tree.nodes[4].parent == 3
    assert tree.nodes[4].cost == pytest.approx(tree.nodes[3].cost + 1.0)
    # (2.4, 0.0) would not improve
    assert tree.nodes[2].parent == 1
    assert tree.nodes[2].cost == pytest.approx(2.4)
    assert tree.nodes[3].cost == pytest.approx(tree.cost_to_root(3))


def test_goal_attached_within_step():
    sampler = scripted_sampler([(0.4, 0.0), (0.8, 0.0)])
    result = rrtstar((0.0, 0.0), (1.0, 0.0), always_free, sampler, 0.5, 10, 0.5, True)

    assert result.iterations == 2
    assert result.goal_index == 3
    assert result.tree.nodes[3].parent == 2
    assert result.goal_cost == pytest.approx(1.0)
    np.testing.assert_allclose(
        np.asarray(result.path()), [[0.0, 0.0], [0.4, 0.0], [0.8, 0.0], [1.0, 0.0]]
    )


def test_continuing_after_goal_only_lowers_its_cost():
    first = biased_problem(seed=9)
    stopped = rrtstar(
        SQUARE_START, SQUARE_GOAL, first.is_free, first.random_sample, 0.2, 2000, 0.5, True
    )

    second = biased_problem(seed=9)
    continued = rrtstar(
        SQUARE_START, SQUARE_GOAL, second.is_free, second.random_sample, 0.2, 2000, 0.5, False
    )

    assert continued.goal_index == stopped.goal_index
    assert continued.iterations == 2000
    assert continued.goal_cost <= stopped.goal_cost + 1e-9
    assert continued.goal_cost == pytest.approx(continued.tree.cost_to_root(continued.goal_index))


def test_unreachable_goal_raises_when_required(rng):
    with pytest.raises(ExhaustedBudgetError) as exc_info:
        rrtstar(SQUARE_START, (0.0, 0.0), square_is_free, uniform_sampler(rng), 0.2, 200, 0.5, True)
    assert exc_info.value.iterations == 200


def test_unreachable_goal_returns_tree_when_not_required(rng):
    result = rrtstar(
        SQUARE_START, (0.0, 0.0), square_is_free, uniform_sampler(rng), 0.2, 200, 0.5, False
    )
    assert not result.reached_goal
    assert result.goal_cost is None
    assert result.path() == []
    assert result.iterations == 200
    assert len(result.tree) > 1


def test_rejects_negative_radius(rng):
    with pytest.raises(ValueError):
        rrtstar((0.0, 0.0), (1.0, 0.0), always_free, uniform_sampler(rng), 0.2, 10, -0.1)


def test_rejects_mismatched_endpoints(rng):
    with pytest.raises(ValueError):
        rrtstar((0.0, 0.0), (1.0,), always_free, uniform_sampler(rng), 0.2, 10, 0.5)


class TestRRTStarPlanner:
    def test_plan_success(self, biased_square_problem):
        planner = RRTStarPlanner(step_length=SQUARE_STEP, max_iterations=2000)
        result = planner.plan(
            SQUARE_START,
            SQUARE_GOAL,
            biased_square_problem.is_free,
            biased_square_problem.random_sample,
        )

        assert result.is_success()
        assert result.num_nodes >= len(result.path)
        np.testing.assert_array_equal(result.path[0], SQUARE_START)
        np.testing.assert_array_equal(result.path[-1], SQUARE_GOAL)
        assert result.path_length >= 2.4

    def test_goal_in_collision(self, rng):
        planner = RRTStarPlanner()
        result = planner.plan(SQUARE_START, (0.0, 0.0), square_is_free, uniform_sampler(rng))
        assert result.status == PlanningStatus.COLLISION_AT_GOAL

    @pytest.mark.parametrize("stop_when_reach_goal", [True, False])
    def test_no_solution(self, rng, stop_when_reach_goal):
        endpoints = {(0.0, 0.0), (1.0, 1.0)}

        def only_endpoints(q):
            return tuple(float(x) for x in q) in endpoints

        planner = RRTStarPlanner(max_iterations=40, stop_when_reach_goal=stop_when_reach_goal)
        result = planner.plan((0.0, 0.0), (1.0, 1.0), only_endpoints, uniform_sampler(rng))
        assert result.status == PlanningStatus.NO_SOLUTION
        assert result.iterations == 40
        assert result.path == []

    def test_name(self):
        assert RRTStarPlanner().get_name() == "RRTStar"

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

"""Plan around a single axis-aligned box.

Two scenes are provided:

- ``square``: 2-D square of half-extent 1.0 at the origin, endpoints at
  (-1.2, 0) and (1.2, 0)
- ``cuboid``: 3-D thin cuboid at the origin, a ball of radius 0.05 moving
  between (0.2, 0.2, 0.2) and (-0.2, -0.2, -0.2)

Usage:
    python -m rrtplan.examples.box_obstacle --scene square --planner rrt_star --seed 3
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from rrtplan.core.global_config import PlanningConfig
from rrtplan.factory import create_planner
from rrtplan.utils.logging_config import setup_logger
from rrtplan.utils.path_utils import is_path_free

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from rrtplan.spec import ConfigurationLike

logger = setup_logger()


@dataclass
class BoxObstacleProblem:
    """A box obstacle in an N-D space, with a seeded uniform sampler.

    A configuration is free when it lies outside the box and at least
    ``clearance`` away from it (the clearance models a ball-shaped body).

    Attributes:
        half_extents: Half side lengths of the box, one per dimension
        center: Box center (origin if None)
        low: Lower sampling bound, scalar or per dimension
        high: Upper sampling bound, scalar or per dimension
        clearance: Minimum distance kept from the box
        goal: Configuration returned by goal-biased samples
        goal_bias: Probability of sampling ``goal`` instead of a uniform point
        seed: Seed of the sampling generator
        num_checks: Number of feasibility checks performed so far
    """

    half_extents: tuple[float, ...] = (1.0, 1.0)
    center: tuple[float, ...] | None = None
    low: float | tuple[float, ...] = -2.0
    high: float | tuple[float, ...] = 2.0
    clearance: float = 0.0
    goal: tuple[float, ...] | None = None
    goal_bias: float = 0.0
    seed: int | None = None
    num_checks: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self._half_extents = np.asarray(self.half_extents, dtype=np.float64)
        dim = self._half_extents.shape[0]
        if self.center is None:
            self._center = np.zeros(dim)
        else:
            self._center = np.asarray(self.center, dtype=np.float64)
        self._low = np.broadcast_to(np.asarray(self.low, dtype=np.float64), (dim,))
        self._high = np.broadcast_to(np.asarray(self.high, dtype=np.float64), (dim,))
        self._goal = None if self.goal is None else np.asarray(self.goal, dtype=np.float64)
        self._rng = np.random.default_rng(self.seed)

    @property
    def dim(self) -> int:
        return int(self._half_extents.shape[0])

    def contains(self, q: ConfigurationLike) -> bool:
        """True if ``q`` is strictly inside the box."""
        offset = np.abs(np.asarray(q, dtype=np.float64) - self._center)
        return bool(np.all(offset < self._half_extents))

    def distance(self, q: ConfigurationLike) -> float:
        """Euclidean distance from ``q`` to the box (0 inside or on it)."""
        offset = np.abs(np.asarray(q, dtype=np.float64) - self._center)
        return float(np.linalg.norm(np.maximum(offset - self._half_extents, 0.0)))

    def is_free(self, q: ConfigurationLike) -> bool:
        self.num_checks += 1
        if self.contains(q):
            return False
        return self.distance(q) >= self.clearance

    def random_sample(self) -> NDArray[np.float64]:
        if self._goal is not None and self._rng.random() < self.goal_bias:
            return self._goal.copy()
        return self._rng.uniform(self._low, self._high)


SCENES = {
    "square": {
        "problem": {"half_extents": (1.0, 1.0), "low": -2.0, "high": 2.0},
        "start": (-1.2, 0.0),
        "goal": (1.2, 0.0),
    },
    "cuboid": {
        "problem": {
            "half_extents": (0.05, 0.25, 0.15),
            "low": -4.0,
            "high": 4.0,
            "clearance": 0.05,
        },
        "start": (0.2, 0.2, 0.2),
        "goal": (-0.2, -0.2, -0.2),
    },
}


def make_scene(
    name: str,
    seed: int | None = None,
    goal_bias: float = 0.0,
) -> tuple[BoxObstacleProblem, tuple[float, ...], tuple[float, ...]]:
    """Build a named scene. Returns (problem, start, goal)."""
    if name not in SCENES:
        raise ValueError(f"Unknown scene: {name}. Available: {sorted(SCENES)}")
    scene = SCENES[name]
    problem = BoxObstacleProblem(
        **scene["problem"], goal=scene["goal"], goal_bias=goal_bias, seed=seed
    )
    return problem, scene["start"], scene["goal"]


def main(argv: list[str] | None = None) -> int:
    config = PlanningConfig()

    parser = argparse.ArgumentParser(description="Plan a path around a box obstacle.")
    parser.add_argument("--scene", choices=sorted(SCENES), default="square")
    parser.add_argument("--planner", choices=["rrt_connect", "rrt_star"], default="rrt_connect")
    parser.add_argument("--seed", type=int, default=config.seed)
    parser.add_argument("--step-length", type=float, default=None)
    parser.add_argument("--max-iterations", type=int, default=config.max_iterations)
    parser.add_argument("--goal-bias", type=float, default=0.0)
    args = parser.parse_args(argv)

    problem, start, goal = make_scene(args.scene, seed=args.seed, goal_bias=args.goal_bias)

    # The cuboid scene needs finer steps than the default
    step_length = args.step_length
    if step_length is None:
        step_length = config.step_length if args.scene == "square" else 0.05

    planner = create_planner(
        args.planner,
        config=config,
        step_length=step_length,
        max_iterations=args.max_iterations,
    )
    result = planner.plan(start, goal, problem.is_free, problem.random_sample)

    if not result.is_success():
        logger.error(
            "Planning failed",
            planner=planner.get_name(),
            status=result.status.name,
            message=result.message,
        )
        return 1

    logger.info(
        "Planning succeeded",
        planner=planner.get_name(),
        waypoints=len(result.path),
        length=round(result.path_length, 3),
        iterations=result.iterations,
        nodes=result.num_nodes,
        checks=problem.num_checks,
        time=round(result.planning_time, 4),
        segments_free=is_path_free(result.path, problem.is_free, step_length),
    )
    for q in result.path:
        logger.debug("waypoint", q=np.round(q, 3).tolist())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

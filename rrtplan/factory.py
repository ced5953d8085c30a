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

"""Factory functions for planning components."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any

from rrtplan.core.global_config import PlanningConfig

if TYPE_CHECKING:
    from rrtplan.spec import IndexFactory, NearestNeighborIndex, PlannerSpec


def create_index(
    name: str = "kdtree",
    dim: int = 2,
    **kwargs: Any,
) -> NearestNeighborIndex:
    """Create an empty nearest-neighbor index. name='kdtree'|'brute_force'."""
    if name == "kdtree":
        from rrtplan.tree.index import KDTreeIndex

        return KDTreeIndex(dim, **kwargs)
    elif name == "brute_force":
        from rrtplan.tree.index import BruteForceIndex

        return BruteForceIndex(dim, **kwargs)
    else:
        raise ValueError(f"Unknown index: {name}. Available: ['kdtree', 'brute_force']")


def create_index_factory(name: str = "kdtree", **kwargs: Any) -> IndexFactory:
    """Bind an index name to a callable taking only the dimension."""
    # Fail on unknown names now rather than inside the first planning call
    create_index(name, **kwargs)
    return partial(_index_for_dim, name, kwargs)


def _index_for_dim(name: str, kwargs: dict[str, Any], dim: int) -> NearestNeighborIndex:
    return create_index(name, dim, **kwargs)


def create_planner(
    name: str = "rrt_connect",
    config: PlanningConfig | None = None,
    **kwargs: Any,
) -> PlannerSpec:
    """Create motion planner. name='rrt_connect'|'rrt_star'.

    Defaults come from ``config`` (or the environment); keyword arguments
    override them.
    """
    if config is None:
        config = PlanningConfig()

    kwargs.setdefault("step_length", config.step_length)
    kwargs.setdefault("max_iterations", config.max_iterations)
    kwargs.setdefault("index_factory", create_index_factory(config.index))

    if name == "rrt_connect":
        from rrtplan.planners.rrt_connect import RRTConnectPlanner

        kwargs.setdefault("smoothing_iterations", config.smoothing_iterations)
        kwargs.setdefault("seed", config.seed)
        return RRTConnectPlanner(**kwargs)
    elif name == "rrt_star":
        from rrtplan.planners.rrt_star import RRTStarPlanner

        kwargs.setdefault("neighborhood_radius", config.neighborhood_radius)
        kwargs.setdefault("stop_when_reach_goal", config.stop_when_reach_goal)
        return RRTStarPlanner(**kwargs)
    else:
        raise ValueError(f"Unknown planner: {name}. Available: ['rrt_connect', 'rrt_star']")

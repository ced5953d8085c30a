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

"""Protocol definitions for sampling-based planning.

The planners only depend on these Protocol types. Concrete indices and
planners are built through rrtplan.factory.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

    from rrtplan.spec.types import (
        ConfigurationLike,
        FeasibilityFn,
        PlanningResult,
        SampleFn,
    )


@runtime_checkable
class NearestNeighborIndex(Protocol):
    """Incremental point index answering Euclidean proximity queries.

    Identifiers are opaque to the index; trees use arena positions.

    Implementations:
        - KDTreeIndex: scipy cKDTree with buffered rebuilds
        - BruteForceIndex: numpy linear scan
    """

    def insert(self, point: ConfigurationLike, id: int) -> None:
        """Associate a point with an identifier. Raises ValueError on dimension mismatch."""
        ...

    def nearest(self, point: ConfigurationLike) -> int:
        """Identifier of the closest inserted point. Raises ValueError when empty."""
        ...

    def within_radius(self, point: ConfigurationLike, radius: float) -> set[int]:
        """Identifiers of all points at distance <= radius."""
        ...

    def __len__(self) -> int: ...


IndexFactory: TypeAlias = "Callable[[int], NearestNeighborIndex]"
"""Builds an empty index for a given dimension"""


@runtime_checkable
class PlannerSpec(Protocol):
    """Protocol for motion planners.

    Planners find feasible paths between two configurations using only the
    caller's feasibility predicate and sampler. A failed search is reported
    through the result status, never raised.

    Implementations:
        - RRTConnectPlanner: Bi-directional RRT-Connect planner
        - RRTStarPlanner: RRT* planner with neighborhood rewiring
    """

    def plan(
        self,
        start: ConfigurationLike,
        goal: ConfigurationLike,
        is_free: FeasibilityFn,
        random_sample: SampleFn,
    ) -> PlanningResult:
        """Plan a feasible path from start to goal."""
        ...

    def get_name(self) -> str:
        """Get planner name."""
        ...

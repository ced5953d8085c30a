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

"""
rrtplan

Sampling-based motion planning in continuous configuration spaces of any
dimension. The caller supplies a feasibility predicate and a sampler; the
package grows the trees.

## Architecture

- Tree: arena of nodes with a pluggable NearestNeighborIndex
  - KDTreeIndex: scipy cKDTree with buffered rebuilds
  - BruteForceIndex: numpy linear scan
- dual_rrt_connect: Bi-directional RRT-Connect
- rrtstar: RRT* with choose-parent and rewiring
- smooth_path: random shortcutting of a found path

## Functional API

```python
import numpy as np
from rrtplan import dual_rrt_connect, smooth_path

rng = np.random.default_rng(0)
is_free = lambda p: not (abs(p[0]) < 1.0 and abs(p[1]) < 1.0)
sample = lambda: rng.uniform(-2.0, 2.0, size=2)

path = dual_rrt_connect([-1.2, 0.0], [1.2, 0.0], is_free, sample, 0.2, 1000)
smooth_path(path, is_free, 0.2, 100, rng=rng)
```

## Planner Objects

```python
from rrtplan.factory import create_planner

planner = create_planner(name="rrt_star", neighborhood_radius=0.5)
result = planner.plan(start, goal, is_free, sample)
```
"""

from rrtplan.factory import create_index, create_index_factory, create_planner
from rrtplan.planners import (
    RRTConnectPlanner,
    RRTStarPlanner,
    RRTStarResult,
    dual_rrt_connect,
    rrtstar,
)
from rrtplan.spec import (
    ExhaustedBudgetError,
    ExtendResult,
    ExtendStatus,
    NearestNeighborIndex,
    PlannerSpec,
    PlanningError,
    PlanningResult,
    PlanningStatus,
    TreeRole,
)
from rrtplan.tree import BruteForceIndex, KDTreeIndex, Node, Tree
from rrtplan.utils.path_utils import (
    compute_path_length,
    interpolate_path,
    is_path_free,
    smooth_path,
    steer,
)

__all__ = [
    "BruteForceIndex",
    "ExhaustedBudgetError",
    "ExtendResult",
    "ExtendStatus",
    "KDTreeIndex",
    "NearestNeighborIndex",
    "Node",
    "PlannerSpec",
    "PlanningError",
    "PlanningResult",
    "PlanningStatus",
    "RRTConnectPlanner",
    "RRTStarPlanner",
    "RRTStarResult",
    "Tree",
    "TreeRole",
    "compute_path_length",
    "create_index",
    "create_index_factory",
    "create_planner",
    "dual_rrt_connect",
    "interpolate_path",
    "is_path_free",
    "rrtstar",
    "smooth_path",
    "steer",
]
__version__ = "0.1.0"

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
Motion Planners Module

Sampling-based planners that only rely on a caller-supplied feasibility
predicate and sampler.

## Implementations

- dual_rrt_connect / RRTConnectPlanner: Bi-directional RRT-Connect (fast, reliable)
- rrtstar / RRTStarPlanner: RRT* with choose-parent and rewiring

## Usage

```python
from rrtplan.factory import create_planner

planner = create_planner(name="rrt_connect")  # Returns PlannerSpec
result = planner.plan(q_start, q_goal, is_free, random_sample)
```
"""

from rrtplan.planners.rrt_connect import RRTConnectPlanner, dual_rrt_connect
from rrtplan.planners.rrt_star import RRTStarPlanner, RRTStarResult, rrtstar

__all__ = [
    "RRTConnectPlanner",
    "RRTStarPlanner",
    "RRTStarResult",
    "dual_rrt_connect",
    "rrtstar",
]

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

import numpy as np
import pytest

from rrtplan.examples.box_obstacle import BoxObstacleProblem
from rrtplan.utils.testing import SQUARE_GOAL


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def square_problem():
    return BoxObstacleProblem(half_extents=(1.0, 1.0), low=-2.0, high=2.0, seed=7)


@pytest.fixture
def biased_square_problem():
    return BoxObstacleProblem(
        half_extents=(1.0, 1.0), low=-2.0, high=2.0, goal=SQUARE_GOAL, goal_bias=0.1, seed=7
    )

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

"""Helpers shared by the test modules."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from rrtplan.spec import ConfigurationLike, FeasibilityFn

# 2-D square obstacle of half-extent 1.0 at the origin
SQUARE_START = (-1.2, 0.0)
SQUARE_GOAL = (1.2, 0.0)
SQUARE_STEP = 0.2


def inside_square(q: ConfigurationLike) -> bool:
    return abs(q[0]) < 1.0 and abs(q[1]) < 1.0


def square_is_free(q: ConfigurationLike) -> bool:
    return not inside_square(q)


def uniform_sampler(rng: np.random.Generator, low: float = -2.0, high: float = 2.0, dim: int = 2):
    return lambda: rng.uniform(low, high, size=dim)


def scripted_sampler(samples: Iterable[ConfigurationLike]):
    """Sampler replaying a fixed sequence of configurations."""
    it = iter(samples)
    return lambda: np.asarray(next(it), dtype=np.float64)


class RecordingPredicate:
    """Wraps a feasibility predicate and remembers every point it accepted."""

    def __init__(self, predicate: FeasibilityFn):
        self._predicate = predicate
        self.accepted: set[tuple[float, ...]] = set()
        self.calls = 0

    def __call__(self, q: ConfigurationLike) -> bool:
        self.calls += 1
        ok = bool(self._predicate(q))
        if ok:
            self.accepted.add(tuple(float(x) for x in q))
        return ok

    def was_accepted(self, q: ConfigurationLike) -> bool:
        return tuple(float(x) for x in q) in self.accepted


def walk_is_free(
    q_from: ConfigurationLike,
    q_to: ConfigurationLike,
    is_free: FeasibilityFn,
    step_length: float,
) -> bool:
    """Re-walk a segment the way the shortcutting pass checks it."""
    base = np.asarray(q_from, dtype=np.float64)
    target = np.asarray(q_to, dtype=np.float64)
    while True:
        dist = float(np.linalg.norm(target - base))
        if dist < step_length:
            return True
        base = base + (target - base) * (step_length / dist)
        if not is_free(base):
            return False

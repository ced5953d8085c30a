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
Path Utilities

Standalone utility functions for steering and path post-processing.
These functions are stateless and can be used by any planner implementation.

## Functions

- steer(): Bounded move from one configuration toward another
- interpolate_path(): Interpolate path to uniform resolution
- interpolate_segment(): Interpolate between two configurations
- smooth_path(): Remove waypoints by random shortcutting
- compute_path_length(): Compute total Euclidean path length
- is_path_free(): Check waypoints and straight segments against a predicate
- concatenate_paths(): Join paths, collapsing duplicated junctions
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from rrtplan.spec import as_configuration

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from rrtplan.spec import ConfigurationLike, FeasibilityFn, Path


def _check_step(step_length: float) -> None:
    if not step_length > 0.0:
        raise ValueError(f"step_length must be strictly positive, got {step_length}")


def steer(
    q_from: ConfigurationLike,
    q_toward: ConfigurationLike,
    max_step: float,
) -> NDArray[np.float64]:
    """Move from ``q_from`` toward ``q_toward`` by at most ``max_step``.

    Returns a copy of ``q_toward`` when it is closer than ``max_step``,
    otherwise the point exactly ``max_step`` along the straight line.

    Raises:
        ValueError: If ``max_step`` is not strictly positive or the
            configurations differ in dimension.
    """
    _check_step(max_step)
    start = as_configuration(q_from)
    target = as_configuration(q_toward, start.shape[0])

    diff = target - start
    dist = float(np.linalg.norm(diff))

    if dist < max_step:
        return target
    return start + diff * (max_step / dist)


def interpolate_path(
    path: Path,
    resolution: float = 0.05,
) -> Path:
    """Interpolate path to have uniform resolution.

    Adds intermediate waypoints so that the Euclidean distance between
    consecutive waypoints is at most ``resolution``.

    Args:
        path: Original path
        resolution: Maximum distance between waypoints

    Returns:
        Interpolated path with more waypoints

    Example:
        dense = interpolate_path(dual_rrt_connect(...), resolution=0.02)
    """
    if len(path) <= 1:
        return [as_configuration(q) for q in path]

    interpolated: Path = [as_configuration(path[0])]
    for i in range(len(path) - 1):
        segment = interpolate_segment(path[i], path[i + 1], resolution)
        interpolated.extend(segment[1:])

    return interpolated


def interpolate_segment(
    start: ConfigurationLike,
    end: ConfigurationLike,
    step_size: float,
) -> Path:
    """Interpolate between two configurations.

    Returns a list of configurations from start to end (inclusive)
    with at most ``step_size`` distance between consecutive points.

    Example:
        for q in interpolate_segment(q_a, q_b, step_size=0.02):
            if not is_free(q):
                return False
    """
    _check_step(step_size)
    q_start = as_configuration(start)
    q_end = as_configuration(end, q_start.shape[0])

    diff = q_end - q_start
    distance = float(np.linalg.norm(diff))

    if distance <= step_size:
        return [q_start, q_end]

    num_steps = int(np.ceil(distance / step_size))
    return [q_start + (i / num_steps) * diff for i in range(num_steps + 1)]


def smooth_path(
    path: Path,
    is_free: FeasibilityFn,
    step_length: float,
    max_iterations: int,
    rng: np.random.Generator | None = None,
) -> Path:
    """Shorten a path in place by random shortcutting.

    Each iteration picks two waypoints at least two apart and walks from the
    first toward the second in ``step_length`` steps, checking every
    intermediate point. If the walk arrives, the waypoints strictly between
    them are dropped. Paths with fewer than three waypoints are left alone.

    Args:
        path: Waypoints to shorten; the list itself is modified
        is_free: Feasibility predicate
        step_length: Spacing of the feasibility checks along a shortcut
        max_iterations: Number of shortcut attempts
        rng: Random source for picking waypoints

    Returns:
        The same list, never longer than it was

    Example:
        path = dual_rrt_connect(start, goal, is_free, sample, 0.2, 1000)
        smooth_path(path, is_free, 0.2, 100, rng=np.random.default_rng(0))
    """
    _check_step(step_length)
    if len(path) < 3:
        return path
    if rng is None:
        rng = np.random.default_rng()

    for _ in range(max_iterations):
        # Pick two random indices (at least 2 apart)
        i = int(rng.integers(0, len(path) - 2))
        j = int(rng.integers(i + 2, len(path)))

        if _walk_is_free(path[i], path[j], is_free, step_length):
            # Remove intermediate waypoints
            del path[i + 1 : j]
            if len(path) == 2:
                break

    return path


def _walk_is_free(
    q_from: ConfigurationLike,
    q_to: ConfigurationLike,
    is_free: FeasibilityFn,
    step_length: float,
) -> bool:
    """Step from ``q_from`` toward ``q_to``; True if every step is feasible."""
    base = as_configuration(q_from)
    target = as_configuration(q_to, base.shape[0])
    while True:
        diff = target - base
        dist = float(np.linalg.norm(diff))
        if dist < step_length:
            return True
        base = base + diff * (step_length / dist)
        if not is_free(base):
            return False


def is_path_free(
    path: Path,
    is_free: FeasibilityFn,
    step_length: float,
) -> bool:
    """Check every waypoint and the straight segments between them.

    Segments are sampled at ``step_length`` resolution.
    """
    if not path:
        return True
    if not is_free(as_configuration(path[0])):
        return False
    for i in range(len(path) - 1):
        segment = interpolate_segment(path[i], path[i + 1], step_length)
        if not all(is_free(q) for q in segment[1:]):
            return False
    return True


def compute_path_length(path: Path) -> float:
    """Compute total path length.

    Sums the Euclidean distances between consecutive waypoints.

    Example:
        length = compute_path_length(path)
    """
    if len(path) <= 1:
        return 0.0

    points = np.asarray(path, dtype=np.float64)
    return float(np.sum(np.linalg.norm(np.diff(points, axis=0), axis=1)))


def concatenate_paths(
    *paths: Path,
    remove_duplicates: bool = True,
) -> Path:
    """Concatenate multiple paths into one.

    Args:
        *paths: Paths to concatenate
        remove_duplicates: If True, remove duplicate waypoints at junctions

    Returns:
        Single concatenated path
    """
    joined: Path = []
    for path in paths:
        skip_first = (
            remove_duplicates
            and len(joined) > 0
            and len(path) > 0
            and np.allclose(joined[-1], path[0], atol=1e-12, rtol=0)
        )
        joined.extend(path[1:] if skip_first else path)
    return joined

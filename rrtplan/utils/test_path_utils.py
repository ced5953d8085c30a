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

from rrtplan.utils.path_utils import (
    compute_path_length,
    concatenate_paths,
    interpolate_path,
    interpolate_segment,
    is_path_free,
    smooth_path,
    steer,
)
from rrtplan.utils.testing import RecordingPredicate, square_is_free, walk_is_free


def always_free(q):
    return True


def detour_around_square():
    corners = [[-1.2, 0.0], [-1.2, 1.2], [0.0, 1.2], [1.2, 1.2], [1.2, 0.0]]
    return interpolate_path(corners, resolution=0.2)


class TestSteer:
    def test_returns_target_when_close(self):
        q = steer([0.0, 0.0], [0.1, 0.1], 0.5)
        np.testing.assert_array_equal(q, [0.1, 0.1])

    def test_clamps_to_step(self):
        q = steer([0.0, 0.0], [3.0, 4.0], 0.5)
        np.testing.assert_allclose(q, [0.3, 0.4])
        assert np.linalg.norm(q) == pytest.approx(0.5)

    def test_exact_step_distance_is_clamped_onto_target(self):
        q = steer([0.0], [0.5], 0.5)
        np.testing.assert_allclose(q, [0.5])

    def test_does_not_alias_inputs(self):
        target = np.array([0.1, 0.0])
        q = steer([0.0, 0.0], target, 1.0)
        q[0] = 5.0
        assert target[0] == 0.1

    @pytest.mark.parametrize("step", [0.0, -1.0])
    def test_rejects_non_positive_step(self, step):
        with pytest.raises(ValueError):
            steer([0.0], [1.0], step)

    def test_rejects_dimension_mismatch(self):
        with pytest.raises(ValueError):
            steer([0.0, 0.0], [1.0, 0.0, 0.0], 0.1)


class TestInterpolation:
    def test_segment_spacing(self):
        points = interpolate_segment([0.0, 0.0], [1.0, 0.0], 0.3)
        assert len(points) == 5
        np.testing.assert_allclose(points[0], [0.0, 0.0])
        np.testing.assert_allclose(points[-1], [1.0, 0.0])
        gaps = np.linalg.norm(np.diff(np.asarray(points), axis=0), axis=1)
        assert np.all(gaps <= 0.3 + 1e-12)

    def test_short_segment(self):
        assert len(interpolate_segment([0.0], [0.1], 0.5)) == 2

    def test_path_keeps_waypoints(self):
        path = interpolate_path([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0]], resolution=0.25)
        assert len(path) == 9
        np.testing.assert_allclose(path[4], [1.0, 0.0])

    def test_trivial_paths(self):
        assert interpolate_path([]) == []
        assert len(interpolate_path([[1.0, 2.0]])) == 1


class TestPathChecks:
    def test_length(self):
        assert compute_path_length([[0.0, 0.0], [3.0, 4.0], [3.0, 5.0]]) == pytest.approx(6.0)
        assert compute_path_length([[0.0, 0.0]]) == 0.0
        assert compute_path_length([]) == 0.0

    def test_is_path_free(self):
        assert is_path_free(detour_around_square(), square_is_free, 0.05)
        assert not is_path_free([[-1.2, 0.0], [1.2, 0.0]], square_is_free, 0.05)
        assert not is_path_free([[0.0, 0.0], [1.2, 0.0]], square_is_free, 0.05)
        assert is_path_free([], square_is_free, 0.05)

    def test_concatenate_collapses_junctions(self):
        a = [np.array([0.0]), np.array([1.0])]
        b = [np.array([1.0]), np.array([2.0])]
        c = [np.array([3.0])]
        joined = concatenate_paths(a, b, [], c)
        np.testing.assert_array_equal(np.asarray(joined).ravel(), [0.0, 1.0, 2.0, 3.0])

        kept = concatenate_paths(a, b, remove_duplicates=False)
        assert len(kept) == 4


class TestSmoothPath:
    def test_short_paths_untouched(self, rng):
        predicate = RecordingPredicate(always_free)
        path = [np.array([0.0, 0.0]), np.array([1.0, 1.0])]
        assert smooth_path(path, predicate, 0.1, 50, rng=rng) is path
        assert len(path) == 2
        assert predicate.calls == 0

    def test_free_space_collapses_to_endpoints(self, rng):
        path = interpolate_path([[0.0, 0.0], [1.0, 1.0], [2.0, 0.0]], resolution=0.1)
        first, last = path[0].copy(), path[-1].copy()

        smooth_path(path, always_free, 0.1, 100, rng=rng)

        assert len(path) == 2
        np.testing.assert_array_equal(path[0], first)
        np.testing.assert_array_equal(path[-1], last)

    def test_obstacle_shortcuts_stay_feasible(self, rng):
        path = detour_around_square()
        original_len = len(path)
        original_length = compute_path_length(path)

        smooth_path(path, square_is_free, 0.05, 200, rng=rng)

        assert 2 < len(path) <= original_len
        assert compute_path_length(path) <= original_length + 1e-9
        np.testing.assert_allclose(path[0], [-1.2, 0.0])
        np.testing.assert_allclose(path[-1], [1.2, 0.0])
        for a, b in zip(path[:-1], path[1:]):
            assert walk_is_free(a, b, square_is_free, 0.05)

    def test_zero_iterations_is_noop(self, rng):
        path = detour_around_square()
        before = [q.copy() for q in path]
        smooth_path(path, square_is_free, 0.05, 0, rng=rng)
        assert len(path) == len(before)

    def test_same_seed_same_result(self):
        a = detour_around_square()
        b = detour_around_square()
        smooth_path(a, square_is_free, 0.05, 30, rng=np.random.default_rng(3))
        smooth_path(b, square_is_free, 0.05, 30, rng=np.random.default_rng(3))
        assert len(a) == len(b)
        np.testing.assert_array_equal(np.asarray(a), np.asarray(b))

    def test_rejects_non_positive_step(self, rng):
        with pytest.raises(ValueError):
            smooth_path(detour_around_square(), always_free, 0.0, 10, rng=rng)

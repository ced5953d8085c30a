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

"""Nearest-neighbor indices implementing NearestNeighborIndex.

Trees only talk to the index through the protocol, so any structure with
``insert`` / ``nearest`` / ``within_radius`` can be injected instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from scipy.spatial import cKDTree

from rrtplan.spec import as_configuration

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from rrtplan.spec import ConfigurationLike

_INITIAL_CAPACITY = 64


class _PointStore:
    """Growable (n, dim) buffer of points with their identifiers."""

    def __init__(self, dim: int) -> None:
        if dim <= 0:
            raise ValueError(f"Index dimension must be positive, got {dim}")
        self._dim = dim
        self._points: NDArray[np.float64] = np.empty((_INITIAL_CAPACITY, dim), dtype=np.float64)
        self._ids: list[int] = []

    @property
    def dim(self) -> int:
        return self._dim

    def __len__(self) -> int:
        return len(self._ids)

    def insert(self, point: ConfigurationLike, id: int) -> None:
        q = as_configuration(point, self._dim)
        size = len(self._ids)
        if size == self._points.shape[0]:
            grown = np.empty((2 * size, self._dim), dtype=np.float64)
            grown[:size] = self._points
            self._points = grown
        self._points[size] = q
        self._ids.append(id)
        self._on_insert()

    def _on_insert(self) -> None:
        pass

    def _query_point(self, point: ConfigurationLike) -> NDArray[np.float64]:
        if not self._ids:
            raise ValueError("Cannot query an empty index")
        return as_configuration(point, self._dim)

    def _scan_nearest(self, q: NDArray[np.float64], begin: int) -> tuple[int, float]:
        """Linear scan of positions [begin, len). Returns (position, distance)."""
        block = self._points[begin : len(self._ids)]
        if block.shape[0] == 0:
            return -1, float("inf")
        dists = np.linalg.norm(block - q, axis=1)
        k = int(np.argmin(dists))
        return begin + k, float(dists[k])

    def _scan_within(self, q: NDArray[np.float64], radius: float, begin: int) -> list[int]:
        block = self._points[begin : len(self._ids)]
        if block.shape[0] == 0:
            return []
        dists = np.linalg.norm(block - q, axis=1)
        return [begin + int(k) for k in np.flatnonzero(dists <= radius)]


class BruteForceIndex(_PointStore):
    """Exact index answering every query with a vectorized linear scan."""

    def nearest(self, point: ConfigurationLike) -> int:
        q = self._query_point(point)
        position, _ = self._scan_nearest(q, 0)
        return self._ids[position]

    def within_radius(self, point: ConfigurationLike, radius: float) -> set[int]:
        if not self._ids:
            return set()
        q = self._query_point(point)
        return {self._ids[k] for k in self._scan_within(q, radius, 0)}


class KDTreeIndex(_PointStore):
    """Exact index backed by a periodically rebuilt ``cKDTree``.

    cKDTree is static, so the tree covers a prefix of the inserted points and
    is rebuilt once ``rebuild_every`` points have accumulated past it. Points
    in the unindexed tail are scanned linearly, which keeps every answer exact
    between rebuilds.

    Args:
        dim: Dimension of the indexed points
        rebuild_every: Tail length that triggers a rebuild
    """

    def __init__(self, dim: int, rebuild_every: int = 64) -> None:
        super().__init__(dim)
        if rebuild_every <= 0:
            raise ValueError(f"rebuild_every must be positive, got {rebuild_every}")
        self._rebuild_every = rebuild_every
        self._kdtree: cKDTree | None = None
        self._num_indexed = 0

    @property
    def num_indexed(self) -> int:
        """Number of points covered by the current kd-tree."""
        return self._num_indexed

    def _on_insert(self) -> None:
        if len(self._ids) - self._num_indexed >= self._rebuild_every:
            self.rebuild()

    def rebuild(self) -> None:
        """Rebuild the kd-tree over every inserted point."""
        size = len(self._ids)
        if size == 0:
            return
        self._kdtree = cKDTree(self._points[:size].copy())
        self._num_indexed = size

    def nearest(self, point: ConfigurationLike) -> int:
        q = self._query_point(point)

        best_position, best_dist = -1, float("inf")
        if self._kdtree is not None:
            dist, position = self._kdtree.query(q, k=1)
            best_position, best_dist = int(position), float(dist)

        tail_position, tail_dist = self._scan_nearest(q, self._num_indexed)
        if tail_dist < best_dist:
            best_position = tail_position

        return self._ids[best_position]

    def within_radius(self, point: ConfigurationLike, radius: float) -> set[int]:
        if not self._ids:
            return set()
        q = self._query_point(point)

        positions: list[int] = []
        if self._kdtree is not None:
            positions.extend(int(k) for k in self._kdtree.query_ball_point(q, radius))
        positions.extend(self._scan_within(q, radius, self._num_indexed))

        return {self._ids[k] for k in positions}

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

"""Arena-backed search tree shared by the RRT planners.

Nodes live in a list and refer to each other by position, so rewiring a
node is a plain field write and positions never move. Every node is put in
the nearest-neighbor index before it is appended, so anything visible in the
arena is also queryable.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from rrtplan.spec import ExtendResult, ExtendStatus, as_configuration
from rrtplan.tree.index import KDTreeIndex
from rrtplan.utils.path_utils import steer

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from rrtplan.spec import (
        ConfigurationLike,
        FeasibilityFn,
        IndexFactory,
        NearestNeighborIndex,
        TreeRole,
    )


@dataclass(eq=False)
class Node:
    """Node in an RRT tree with optional cost tracking (for RRT*)."""

    config: NDArray[np.float64]
    parent: int | None = None
    cost: float = 0.0
    children: list[int] = field(default_factory=list)


class Tree:
    """Append-only arena of nodes plus a nearest-neighbor index.

    The first node is the root and never gets a parent. Parent links may be
    rewritten (rewiring) but nodes are never removed.

    Args:
        dim: Dimension of the configurations stored in the tree
        role: Which endpoint the tree is rooted at, if it plays one
        index: Empty nearest-neighbor index (defaults to KDTreeIndex)
    """

    def __init__(
        self,
        dim: int,
        role: TreeRole | None = None,
        index: NearestNeighborIndex | None = None,
    ) -> None:
        if dim <= 0:
            raise ValueError(f"Tree dimension must be positive, got {dim}")
        if index is None:
            index = KDTreeIndex(dim)
        if len(index) != 0:
            raise ValueError("Tree index must start empty")
        self.dim = dim
        self.role = role
        self.nodes: list[Node] = []
        self._index = index

    @classmethod
    def from_root(
        cls,
        root: ConfigurationLike,
        role: TreeRole | None = None,
        index_factory: IndexFactory | None = None,
    ) -> Tree:
        """Create a tree holding only ``root``."""
        q_root = as_configuration(root)
        dim = q_root.shape[0]
        index = index_factory(dim) if index_factory is not None else None
        tree = cls(dim, role=role, index=index)
        tree.add_vertex(q_root)
        return tree

    def __len__(self) -> int:
        return len(self.nodes)

    def __repr__(self) -> str:
        role = self.role.name if self.role is not None else None
        return f"Tree(dim={self.dim}, role={role}, nodes={len(self.nodes)})"

    def config(self, index: int) -> NDArray[np.float64]:
        return self.nodes[index].config

    # ============= Structure =============

    def add_vertex(self, q: ConfigurationLike, cost: float = 0.0) -> int:
        """Insert a parentless node and return its arena position."""
        config = as_configuration(q, self.dim)
        index = len(self.nodes)
        self._index.insert(config, index)
        self.nodes.append(Node(config=config, cost=cost))
        return index

    def add_edge(self, parent: int, child: int) -> None:
        """Make ``parent`` the parent of ``child``, replacing any previous link."""
        self._check_position(parent)
        self._check_position(child)
        if child == 0:
            raise ValueError("The root node cannot have a parent")
        if self.is_ancestor(child, parent):
            raise ValueError(f"Linking {parent} -> {child} would create a cycle")

        self.remove_edge(child)
        self.nodes[child].parent = parent
        self.nodes[parent].children.append(child)

    def remove_edge(self, child: int) -> None:
        """Detach ``child`` from its parent, if it has one."""
        node = self.nodes[child]
        if node.parent is not None:
            self.nodes[node.parent].children.remove(child)
            node.parent = None

    def is_ancestor(self, ancestor: int, index: int) -> bool:
        """True if ``ancestor`` lies on the parent chain of ``index`` (inclusive)."""
        current: int | None = index
        while current is not None:
            if current == ancestor:
                return True
            current = self.nodes[current].parent
        return False

    def descendants(self, index: int) -> Iterator[int]:
        """Breadth-first iteration over the subtree below ``index`` (exclusive)."""
        queue = deque(self.nodes[index].children)
        while queue:
            current = queue.popleft()
            yield current
            queue.extend(self.nodes[current].children)

    def _check_position(self, index: int) -> None:
        if not 0 <= index < len(self.nodes):
            raise IndexError(f"Node {index} not in tree of {len(self.nodes)} nodes")

    # ============= Queries =============

    def nearest_index(self, q: ConfigurationLike) -> int:
        return self._index.nearest(as_configuration(q, self.dim))

    def near_indices(self, q: ConfigurationLike, radius: float) -> list[int]:
        """Positions of all nodes within ``radius`` of ``q``, in growth order."""
        return sorted(self._index.within_radius(as_configuration(q, self.dim), radius))

    def path_from_root(self, index: int) -> list[NDArray[np.float64]]:
        """Configurations from the root down to ``index`` (inclusive)."""
        path = []
        current: int | None = index
        while current is not None:
            node = self.nodes[current]
            path.append(node.config.copy())
            current = node.parent
        return list(reversed(path))

    def depth(self, index: int) -> int:
        """Number of edges between ``index`` and the root."""
        depth = 0
        current = self.nodes[index].parent
        while current is not None:
            depth += 1
            current = self.nodes[current].parent
        return depth

    def cost_to_root(self, index: int) -> float:
        """Recompute the edge-length sum along the parent chain of ``index``."""
        total = 0.0
        node = self.nodes[index]
        while node.parent is not None:
            parent = self.nodes[node.parent]
            total += float(np.linalg.norm(node.config - parent.config))
            node = parent
        return total

    def edge_cost(self, a: int, b: int) -> float:
        return float(np.linalg.norm(self.nodes[a].config - self.nodes[b].config))

    # ============= Cost Bookkeeping (RRT*) =============

    def update_cost(self, index: int, cost: float) -> None:
        """Set the cost of ``index`` and shift its whole subtree by the same delta."""
        delta = cost - self.nodes[index].cost
        self.nodes[index].cost = cost
        if delta == 0.0:
            return
        for descendant in self.descendants(index):
            self.nodes[descendant].cost += delta

    # ============= Growth =============

    def extend(
        self,
        target: ConfigurationLike,
        step_length: float,
        is_free: FeasibilityFn,
    ) -> ExtendResult:
        """Grow one step from the nearest node toward ``target``.

        Returns:
            REACHED with the new node if it landed within ``step_length`` of
            the target, ADVANCED with the new node otherwise, TRAPPED (tree
            unchanged) if the candidate is infeasible.
        """
        q_target = as_configuration(target, self.dim)
        nearest = self.nearest_index(q_target)
        q_new = steer(self.nodes[nearest].config, q_target, step_length)

        if not is_free(q_new):
            return ExtendResult(ExtendStatus.TRAPPED)

        new_index = self.add_vertex(q_new)
        self.add_edge(nearest, new_index)

        if float(np.linalg.norm(q_new - q_target)) < step_length:
            return ExtendResult(ExtendStatus.REACHED, new_index)
        return ExtendResult(ExtendStatus.ADVANCED, new_index)

    def connect(
        self,
        target: ConfigurationLike,
        step_length: float,
        is_free: FeasibilityFn,
    ) -> ExtendResult:
        """Extend toward ``target`` until it is reached or growth gets trapped."""
        q_target = as_configuration(target, self.dim)
        while True:
            result = self.extend(q_target, step_length, is_free)
            if result.status is not ExtendStatus.ADVANCED:
                return result

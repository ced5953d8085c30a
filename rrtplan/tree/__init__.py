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
Search Trees

Arena-backed RRT tree and the nearest-neighbor indices it queries.

## Implementations

- Tree: nodes addressed by stable integer position, with extend/connect growth
- KDTreeIndex: scipy cKDTree with buffered rebuilds (default)
- BruteForceIndex: numpy linear scan
"""

from rrtplan.tree.index import BruteForceIndex, KDTreeIndex
from rrtplan.tree.tree import Node, Tree

__all__ = ["BruteForceIndex", "KDTreeIndex", "Node", "Tree"]

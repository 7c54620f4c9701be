"""
Incremental 3D k-d tree for exact nearest-neighbour queries.

scipy's cKDTree is static, the point sampler needs to insert accepted points
one at a time and query between insertions, so this tree grows in place.
"""

import heapq
from typing import List, Sequence, Tuple


class _Node:
    __slots__ = ("point", "item", "axis", "left", "right")

    def __init__(self, point: Tuple[float, float, float], item: int, axis: int):
        self.point = point
        self.item = item
        self.axis = axis
        self.left = None
        self.right = None


def _squared_distance(a, b) -> float:
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    dz = a[2] - b[2]
    return dx * dx + dy * dy + dz * dz


class SpatialIndex:
    """Exact k-d tree over 3D points, each carrying an integer id.

    Not safe for concurrent mutation.
    """

    def __init__(self):
        self._root = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def insert(self, point: Sequence[float], item: int) -> None:
        """Insert a point with its id."""
        p = (float(point[0]), float(point[1]), float(point[2]))

        if self._root is None:
            self._root = _Node(p, item, 0)
            self._size = 1
            return

        node = self._root
        while True:
            axis = node.axis
            if p[axis] < node.point[axis]:
                if node.left is None:
                    node.left = _Node(p, item, (axis + 1) % 3)
                    break
                node = node.left
            else:
                if node.right is None:
                    node.right = _Node(p, item, (axis + 1) % 3)
                    break
                node = node.right
        self._size += 1

    def nearest_within(
        self, query: Sequence[float], squared_radius: float, k: int
    ) -> List[int]:
        """Return up to k ids within squared_radius of query, closest first."""
        return [item for _, item in self._search(query, k, squared_radius)]

    def nearest(self, query: Sequence[float], k: int) -> List[int]:
        """Return the k closest ids (fewer if the index is smaller), closest first."""
        return [item for _, item in self._search(query, k, float("inf"))]

    def _search(self, query, k: int, squared_radius: float) -> List[Tuple[float, int]]:
        if k <= 0 or self._root is None:
            return []

        q = (float(query[0]), float(query[1]), float(query[2]))

        # Max-heap of the best k candidates as (-dist, -id)
        best = []

        def worst() -> float:
            if len(best) < k:
                return squared_radius
            return -best[0][0]

        # Stack of (node, lower bound on squared distance to its region)
        stack = [(self._root, 0.0)]
        while stack:
            node, bound = stack.pop()
            if bound > worst():
                continue

            d = _squared_distance(q, node.point)
            if d <= squared_radius:
                entry = (-d, -node.item)
                if len(best) < k:
                    heapq.heappush(best, entry)
                elif entry > best[0]:
                    heapq.heapreplace(best, entry)

            diff = q[node.axis] - node.point[node.axis]
            if diff < 0:
                near, far = node.left, node.right
            else:
                near, far = node.right, node.left

            # Far side first so the near side is popped next
            if far is not None:
                stack.append((far, max(bound, diff * diff)))
            if near is not None:
                stack.append((near, bound))

        return sorted((-nd, -ni) for nd, ni in best)

"""Undirected simple graph with positional node indices."""

from typing import Iterator, List, Sequence, Tuple

import numpy as np

from ..exceptions import InvariantViolation


class UndirectedGraph:
    """
    Undirected graph whose nodes carry a 3D position.

    Nodes are identified by their insertion index. Edges keep insertion
    order, and so do the per-node adjacency lists, which makes every
    traversal a pure function of the construction sequence.
    """

    def __init__(self):
        self._positions: List[Tuple[float, float, float]] = []
        self._edges: List[Tuple[int, int]] = []
        self._adjacency: List[List[int]] = []
        # Membership only, never iterated
        self._edge_keys = set()
        self._frozen = False

    def _check_mutable(self):
        if self._frozen:
            raise InvariantViolation("Graph is frozen")

    def add_node(self, position: Sequence[float]) -> int:
        """Add a node and return its index."""
        self._check_mutable()
        self._positions.append(
            (float(position[0]), float(position[1]), float(position[2]))
        )
        self._adjacency.append([])
        return len(self._positions) - 1

    def add_edge(self, a: int, b: int) -> None:
        """Add the undirected edge a-b."""
        self._check_mutable()
        n = len(self._positions)
        if not (0 <= a < n and 0 <= b < n):
            raise InvariantViolation(f"Edge ({a}, {b}) references a missing node")
        if a == b:
            raise InvariantViolation(f"Self-loop on node {a}")
        key = (a, b) if a < b else (b, a)
        if key in self._edge_keys:
            raise InvariantViolation(f"Duplicate edge ({a}, {b})")

        self._edge_keys.add(key)
        self._edges.append((a, b))
        self._adjacency[a].append(b)
        self._adjacency[b].append(a)

    def contains_edge(self, a: int, b: int) -> bool:
        key = (a, b) if a < b else (b, a)
        return key in self._edge_keys

    def freeze(self) -> "UndirectedGraph":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def node_count(self) -> int:
        return len(self._positions)

    def edge_count(self) -> int:
        return len(self._edges)

    def position(self, node: int) -> np.ndarray:
        return np.array(self._positions[node])

    @property
    def positions(self) -> np.ndarray:
        """(n, 3) array of node positions."""
        arr = np.array(self._positions, dtype=np.float64).reshape(-1, 3)
        arr.flags.writeable = False
        return arr

    @property
    def edges(self) -> List[Tuple[int, int]]:
        return list(self._edges)

    def node_indices(self) -> range:
        return range(len(self._positions))

    def neighbors(self, node: int) -> List[int]:
        return list(self._adjacency[node])

    def degree(self, node: int) -> int:
        return len(self._adjacency[node])

    def iter_edges(self) -> Iterator[Tuple[int, int]]:
        return iter(self._edges)

    def __eq__(self, other):
        """Exact equality: same positions in order and same edges in order."""
        if not isinstance(other, UndirectedGraph):
            return NotImplemented
        return self._positions == other._positions and self._edges == other._edges

    def __hash__(self):
        if not self._frozen:
            raise TypeError("unhashable type: graph is not frozen")
        return hash((tuple(self._positions), tuple(self._edges)))

    def __repr__(self):
        return f"UndirectedGraph(nodes={self.node_count()}, edges={self.edge_count()})"

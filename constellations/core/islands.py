"""
Island (connected component) detection.

Islands are the strongly connected components of the graph seen as a
symmetric directed graph, which for an undirected graph are exactly its
connected components.
"""

from typing import Dict, List, Sequence, Tuple

import numpy as np
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import connected_components

from ..exceptions import InvariantViolation
from .graph import UndirectedGraph

Island = Tuple[int, ...]


def find_islands(graph: UndirectedGraph) -> List[Island]:
    """
    Compute the islands of a graph.

    Islands list their nodes in ascending order and are ordered by their
    smallest node. Both depend only on the graph's structure.

    Args:
        graph: Graph to analyse

    Returns:
        List of islands covering every node exactly once
    """
    n = graph.node_count()
    if n == 0:
        return []

    edges = np.array(graph.edges, dtype=np.int64).reshape(-1, 2)
    rows = np.concatenate([edges[:, 0], edges[:, 1]])
    cols = np.concatenate([edges[:, 1], edges[:, 0]])
    data = np.ones(len(rows), dtype=np.int8)
    adjacency = coo_matrix((data, (rows, cols)), shape=(n, n)).tocsr()

    n_components, labels = connected_components(
        adjacency, directed=True, connection="strong"
    )

    members: List[List[int]] = [[] for _ in range(n_components)]
    for node, label in enumerate(labels):
        members[int(label)].append(node)

    # Order by smallest member so the order never depends on label numbering
    islands = sorted(tuple(m) for m in members if m)
    validate_islands(islands, n)
    return islands


def validate_islands(islands: Sequence[Island], n: int) -> None:
    """Raise InvariantViolation unless islands partition 0..n-1."""
    seen = np.zeros(n, dtype=bool)
    for island in islands:
        if not island:
            raise InvariantViolation("Empty island")
        for node in island:
            if not 0 <= node < n:
                raise InvariantViolation(f"Island references missing node {node}")
            if seen[node]:
                raise InvariantViolation(f"Node {node} belongs to more than one island")
            seen[node] = True
    if not seen.all():
        missing = np.flatnonzero(~seen)
        raise InvariantViolation(f"Island partition is missing nodes {missing.tolist()}")


def island_index_map(islands: Sequence[Island]) -> Dict[int, int]:
    """Map each node to the index of its island, keyed in node order."""
    pairs = sorted(
        (node, island_idx)
        for island_idx, island in enumerate(islands)
        for node in island
    )
    assoc = {}
    for node, island_idx in pairs:
        if node in assoc:
            raise InvariantViolation(f"Node {node} belongs to more than one island")
        assoc[node] = island_idx
    return assoc

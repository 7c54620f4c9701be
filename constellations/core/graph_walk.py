"""
Walk planning over a constellation graph.

A walk starts at one node and keeps moving to the neighbour that best
preserves its current direction, until it reaches a node with no way
forward. Edge lengths translate into a power-of-two number of beats.
"""

import math
from typing import List, Optional, Sequence

import numpy as np

from .graph import UndirectedGraph

MAX_EDGE_BEATS = 16
BEATS_PER_UNIT = 8.0


def round_to_nearest_pow2(x: float) -> float:
    """Round to the nearest power of two in log space; 1.0 for x <= 0."""
    if x <= 0.0:
        return 1.0
    return 2.0 ** round(math.log2(x))


def edge_beats(length: float) -> int:
    """Number of beats to travel an edge of the given length."""
    beats = round_to_nearest_pow2(length * BEATS_PER_UNIT)
    return int(min(max(beats, 0.0), MAX_EDGE_BEATS))


def _normalized(v: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(v)
    if norm == 0.0:
        return v
    return v / norm


def next_walk_nodes(
    graph: UndirectedGraph, node: int, last_diff: Optional[Sequence[float]] = None
) -> List[int]:
    """
    Nodes a walk at `node` moves to next.

    The first step fans out to every neighbour. After that only the
    neighbour most aligned with `last_diff` is taken; a node with at most
    one neighbour (the one we came from) ends the walk.
    """
    neighbors = graph.neighbors(node)
    if last_diff is None:
        return neighbors

    if len(neighbors) <= 1:
        return []

    last_dir = _normalized(np.asarray(last_diff, dtype=np.float64))
    node_pos = graph.position(node)

    # Last neighbour wins ties
    best = None
    best_dot = -np.inf
    for nb in neighbors:
        dot = float(np.dot(last_dir, _normalized(graph.position(nb) - node_pos)))
        if dot >= best_dot:
            best, best_dot = nb, dot
    return [best]


def walk_path(graph: UndirectedGraph, start: int) -> List[int]:
    """
    Follow a single walk from `start`.

    Takes the first branch of the opening fan-out and stops at a dead end
    or when the next node was already visited.
    """
    path = [start]
    visited = {start}
    last_diff = None
    node = start

    while True:
        candidates = next_walk_nodes(graph, node, last_diff)
        if not candidates or candidates[0] in visited:
            return path

        nxt = candidates[0]
        last_diff = graph.position(nxt) - graph.position(node)
        path.append(nxt)
        visited.add(nxt)
        node = nxt


def walk_beats(graph: UndirectedGraph, path: Sequence[int]) -> List[int]:
    """Beats spent on each edge of a walk path."""
    return [
        edge_beats(float(np.linalg.norm(graph.position(b) - graph.position(a))))
        for a, b in zip(path, path[1:])
    ]

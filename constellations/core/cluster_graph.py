"""
Per-cluster nearest-neighbour graphs and their merge into one graph.

Each cluster is connected on its own: every point links to a randomly
sized set of its nearest neighbours. The merge only relabels nodes, it
never adds edges between clusters.
"""

from typing import List, Sequence

import structlog

from ..exceptions import ConfigurationError, InvariantViolation
from ..utils.xoshiro_prng import Xoshiro256Plus
from .clustering import Cluster
from .graph import UndirectedGraph
from .spatial_index import SpatialIndex

logger = structlog.get_logger()

MIN_NEIGHBOR_COUNT = 1

# Bias towards degree 2, degrees above 3 are never drawn
NEIGHBOR_COUNT_WEIGHTS = {
    1: 0.8,
    2: 1.0,
    3: 0.3,
}

# Largest degree with a non-zero weight
MAX_DRAWN_NEIGHBOR_COUNT = max(NEIGHBOR_COUNT_WEIGHTS)


def neighbor_count_weight(count: int) -> float:
    return NEIGHBOR_COUNT_WEIGHTS.get(count, 0.0)


def connect_cluster(
    cluster: Cluster, max_neighbor_count: int, rng: Xoshiro256Plus
) -> UndirectedGraph:
    """
    Build the graph for a single cluster.

    Nodes are the cluster's points in order (local indices 0..m-1).

    Args:
        cluster: Cluster to connect
        max_neighbor_count: Upper bound on the degree drawn per point
        rng: Generator shared by all clusters of this stage

    Returns:
        UndirectedGraph over the cluster's points
    """
    if max_neighbor_count < MIN_NEIGHBOR_COUNT:
        raise ConfigurationError(
            f"max_neighbor_count must be >= {MIN_NEIGHBOR_COUNT}, got {max_neighbor_count}"
        )

    tree = SpatialIndex()
    for i, p in enumerate(cluster.points):
        tree.insert(p, i)

    graph = UndirectedGraph()
    for p in cluster.points:
        graph.add_node(p)

    # Zero-weight degrees are never drawn
    counts = list(
        range(MIN_NEIGHBOR_COUNT, min(max_neighbor_count, MAX_DRAWN_NEIGHBOR_COUNT) + 1)
    )
    weights = [neighbor_count_weight(c) for c in counts]

    for i, point in enumerate(cluster.points):
        neighbor_count = rng.choice_weighted(counts, weights)

        # +1 since the point itself comes back too
        for j in tree.nearest(point, neighbor_count + 1):
            if i != j and not graph.contains_edge(i, j):
                graph.add_edge(i, j)

    return graph


def merge_undirected_graphs(
    base: UndirectedGraph, others: Sequence[UndirectedGraph]
) -> UndirectedGraph:
    """
    Append each graph's nodes and edges to `base`, in order.

    Local node indices are translated through a list built in node order,
    so identical input always yields the same global numbering.
    """
    for g in others:
        node_map = [base.add_node(g.position(node)) for node in g.node_indices()]

        if len(set(node_map)) != len(node_map):
            raise InvariantViolation("Duplicate node indices after merge")

        for a, b in g.iter_edges():
            base.add_edge(node_map[a], node_map[b])

    return base


def connect_clusters_internally(
    clusters: List[Cluster], max_neighbor_count: int, rng: Xoshiro256Plus
) -> UndirectedGraph:
    """Connect every cluster in order, then merge the results into one graph."""
    graphs = [connect_cluster(c, max_neighbor_count, rng) for c in clusters]

    logger.debug(
        "Connected clusters",
        clusters=len(graphs),
        edges=sum(g.edge_count() for g in graphs),
    )

    return merge_undirected_graphs(UndirectedGraph(), graphs)

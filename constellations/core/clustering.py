"""Nearest-centroid (single pass Voronoi) clustering of sampled points."""

import math
from dataclasses import dataclass
from typing import List

import numpy as np
from scipy.spatial import cKDTree

from ..exceptions import ConfigurationError, InvariantViolation
from ..utils.xoshiro_prng import Xoshiro256Plus

# ~15 nodes per cluster
DEFAULT_POINTS_PER_CLUSTER = 15


@dataclass(frozen=True)
class Cluster:
    """Points assigned to one centroid."""

    points: np.ndarray  # (m, 3) in sampler order
    centroid: np.ndarray  # (3,)
    point_indices: np.ndarray  # indices into the sampler output

    def __len__(self) -> int:
        return len(self.points)


def cluster_count_for(n: int, points_per_cluster: int = DEFAULT_POINTS_PER_CLUSTER) -> int:
    """Number of clusters for n points."""
    if points_per_cluster < 1:
        raise ConfigurationError(
            f"points_per_cluster must be >= 1, got {points_per_cluster}"
        )
    return math.ceil(n / points_per_cluster)


def cluster_voronoi(points: np.ndarray, k: int, rng: Xoshiro256Plus) -> List[Cluster]:
    """
    Cluster points around k randomly chosen centroids.

    Each point joins its nearest centroid (no Lloyd refinement). Clusters are
    then sorted, stably, by descending centroid height (y).

    Args:
        points: (n, 3) array of points
        k: Number of clusters
        rng: Generator owned by this stage

    Returns:
        List of Cluster covering every point exactly once
    """
    n = len(points)
    if n == 0:
        return []
    if k < 1:
        raise ConfigurationError(f"Cluster count resolved to {k} for {n} points")
    if k > n:
        raise ConfigurationError(f"Cannot pick {k} centroids from {n} points")

    centroid_indices = rng.sample(range(n), k)
    centroids = np.asarray(points)[centroid_indices]

    tree = cKDTree(centroids)
    _, nearest = tree.query(points, k=1)

    members: List[List[int]] = [[] for _ in range(k)]
    for point_idx, cluster_idx in enumerate(nearest):
        members[int(cluster_idx)].append(point_idx)

    assigned = sum(len(m) for m in members)
    if assigned != n:
        raise InvariantViolation(f"{n - assigned} points were assigned to no cluster")

    clusters = [
        Cluster(
            points=np.asarray(points)[idx].reshape(-1, 3),
            centroid=centroids[c],
            point_indices=np.array(idx, dtype=np.int64),
        )
        for c, idx in enumerate(members)
    ]

    # sorted() is stable, equal heights keep centroid draw order
    return sorted(clusters, key=lambda cluster: -cluster.centroid[1])

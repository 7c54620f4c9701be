"""
Constellation graph generation.

A constellation is a set of points on a sphere, grouped into clusters,
connected within each cluster and split into islands. A chord and a
semitone offset are drawn first from the same generator for the musical
mapping done by consumers.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import structlog

from ..exceptions import ConfigurationError, InvariantViolation
from ..utils.logging import profile
from ..utils.random import rng_from_global_seed
from ..utils.xoshiro_prng import Xoshiro256Plus
from .chords import Chord
from .cluster_graph import MIN_NEIGHBOR_COUNT, connect_clusters_internally
from .clustering import DEFAULT_POINTS_PER_CLUSTER, cluster_count_for, cluster_voronoi
from .graph import UndirectedGraph
from .islands import Island, find_islands, island_index_map, validate_islands
from .point_sampler import DEFAULT_MAX_ANGLE, PointSample, generate_points_poisson

logger = structlog.get_logger()

# Same offset for every note to avoid dissonance
SEMITONE_OFFSET_RANGE = (-11, 12)


@dataclass(frozen=True)
class ConstellationGraph:
    """Generated graph, its islands and the musical key. Read-only."""

    chord: Chord
    semitone_offset: int
    graph: UndirectedGraph
    islands: Tuple[Island, ...]
    _island_of: Dict[int, int] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "islands", tuple(tuple(i) for i in self.islands))
        if self._island_of is None:
            object.__setattr__(self, "_island_of", island_index_map(self.islands))

    def island_of(self, node: int) -> int:
        """Index of the island containing `node`."""
        return self._island_of[node]

    @property
    def island_sizes(self) -> List[int]:
        return [len(island) for island in self.islands]

    def to_dict(self) -> dict:
        return {
            "chord": self.chord.value,
            "semitone_offset": self.semitone_offset,
            "nodes": self.graph.positions.tolist(),
            "edges": [list(e) for e in self.graph.edges],
            "islands": [list(island) for island in self.islands],
        }

    def __eq__(self, other):
        """Structural equality, used for determinism checks."""
        if not isinstance(other, ConstellationGraph):
            return NotImplemented
        return (
            self.chord == other.chord
            and self.semitone_offset == other.semitone_offset
            and self.graph == other.graph
            and self.islands == other.islands
        )


def validate_parameters(
    n: int, radius: float, max_neighbor_count: int, points_per_cluster: int
) -> None:
    """Raise ConfigurationError for parameters generation cannot honour."""
    if n < 0:
        raise ConfigurationError(f"Point count must be >= 0, got {n}")
    if not radius > 0:
        raise ConfigurationError(f"Radius must be > 0, got {radius}")
    if max_neighbor_count < MIN_NEIGHBOR_COUNT:
        raise ConfigurationError(
            f"max_neighbor_count must be >= {MIN_NEIGHBOR_COUNT}, got {max_neighbor_count}"
        )
    if points_per_cluster < 1:
        raise ConfigurationError(
            f"points_per_cluster must be >= 1, got {points_per_cluster}"
        )


def generate_points(n: int, radius: float, rng: Xoshiro256Plus) -> PointSample:
    """Generate n points on the sphere with the default target angle."""
    return generate_points_poisson(n, radius, DEFAULT_MAX_ANGLE, rng)


def generate_constellation(
    n: int,
    radius: float,
    max_neighbor_count: int,
    rng: Xoshiro256Plus,
    points_per_cluster: int = DEFAULT_POINTS_PER_CLUSTER,
) -> ConstellationGraph:
    """
    Create the graph and its islands.

    Every stage draws from its own fork of `rng`, so the same inputs give
    the same graph, islands, chord and offset.

    Args:
        n: Number of points / nodes
        radius: Sphere radius
        max_neighbor_count: Upper bound on the degree drawn per point
        rng: Root generator, advanced by this call
        points_per_cluster: Target cluster size

    Returns:
        ConstellationGraph
    """
    validate_parameters(n, radius, max_neighbor_count, points_per_cluster)
    logger.info(
        "Generating ConstellationGraph",
        n=n,
        radius=radius,
        max_neighbor_count=max_neighbor_count,
        rng_type=type(rng).__name__,
    )

    # A fork keeps the root stream stable if the chord set ever changes
    chord = rng.fork().choice(list(Chord))
    semitone_offset = rng.randrange(*SEMITONE_OFFSET_RANGE)

    point_rng = rng.fork()
    cluster_rng = rng.fork()
    connect_rng = rng.fork()

    with profile("generate_points"):
        sample = generate_points(n, radius, point_rng)

    with profile("cluster_voronoi"):
        k = cluster_count_for(n, points_per_cluster)
        clusters = cluster_voronoi(sample.points, k, cluster_rng)

    with profile("connect_clusters_internally"):
        graph = connect_clusters_internally(clusters, max_neighbor_count, connect_rng)

    with profile("find_islands"):
        islands = find_islands(graph)

    if graph.node_count() != n:
        raise InvariantViolation(
            f"Graph has {graph.node_count()} nodes, expected {n}"
        )
    validate_islands(islands, n)

    logger.info(
        "Generated ConstellationGraph",
        chord=chord.value,
        semitone_offset=semitone_offset,
        nodes=graph.node_count(),
        edges=graph.edge_count(),
        islands=len(islands),
        relaxations=sample.relaxations,
    )

    return ConstellationGraph(
        chord=chord,
        semitone_offset=semitone_offset,
        graph=graph.freeze(),
        islands=islands,
    )


@dataclass(frozen=True)
class ConstellationSnapshot:
    """Generation inputs plus output, for regression snapshots."""

    global_seed: int
    num_points: int
    max_neighbor_count: int
    radius: float
    rng_type: str
    constellation_graph: ConstellationGraph

    def to_dict(self) -> dict:
        return {
            "global_seed": self.global_seed,
            "num_points": self.num_points,
            "max_neighbor_count": self.max_neighbor_count,
            "radius": self.radius,
            "rng_type": self.rng_type,
            "constellation_graph": self.constellation_graph.to_dict(),
        }


def make_snapshot(
    global_seed: int,
    num_points: int,
    radius: float,
    max_neighbor_count: int,
    rng: Optional[Xoshiro256Plus] = None,
) -> ConstellationSnapshot:
    """Generate a constellation from an i64 seed and wrap it in a snapshot."""
    if rng is None:
        rng = rng_from_global_seed(global_seed)
    constellation = generate_constellation(num_points, radius, max_neighbor_count, rng)
    return ConstellationSnapshot(
        global_seed=global_seed,
        num_points=constellation.graph.node_count(),
        max_neighbor_count=max_neighbor_count,
        radius=radius,
        rng_type=type(rng).__name__,
        constellation_graph=constellation,
    )

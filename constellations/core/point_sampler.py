"""
Poisson-disk-like point sampling on the surface of a sphere.

Points are grown outwards from a pole: each new point is a random existing
point rotated by a random angle about a random axis, and is accepted only if
no existing point lies within a minimum chord distance. When a point cannot
be placed within the iteration budget the constraint is relaxed ("leniency")
for the rest of the generation, so sampling always terminates.
"""

import math
from dataclasses import dataclass

import numpy as np
import structlog
from scipy.spatial.transform import Rotation

from ..exceptions import InvariantViolation
from ..utils.random import TAU, random_unit_axis
from ..utils.xoshiro_prng import Xoshiro256Plus
from .spatial_index import SpatialIndex

logger = structlog.get_logger()

# Large angles are fine thanks to leniency
DEFAULT_MAX_ANGLE = TAU * 0.02

# Underestimate the true separation to keep acceptance rates reasonable
EPSILON_MULT = 0.9

ITERATION_LIMIT = 1_000
LENIENCY_FACTOR = 0.9

# 0.9 ** 500 ~ 1e-23, past that the loop is not converging at all
MAX_RELAXATIONS = 500


def chord_length(radius: float, angle: float) -> float:
    """Straight-line distance between two points `angle` radians apart on the sphere."""
    return 2.0 * radius * math.sin(angle / 2.0)


@dataclass
class LeniencyState:
    """Bounded relaxation state machine for placing a single point.

    Every rejected candidate costs one iteration. Reaching ITERATION_LIMIT
    relaxes the constraint and resets the counter.
    """

    min_distance: float
    max_angle: float
    iteration: int = 0
    relaxations: int = 0

    def step(self) -> bool:
        """Account for the next attempt. Returns True if this attempt relaxed the constraint."""
        if self.iteration < ITERATION_LIMIT:
            return False

        self.iteration = 0
        self.min_distance *= LENIENCY_FACTOR
        self.max_angle *= LENIENCY_FACTOR
        self.relaxations += 1
        if self.relaxations > MAX_RELAXATIONS:
            raise InvariantViolation(
                f"Point sampling did not converge after {MAX_RELAXATIONS} relaxations"
            )
        return True

    def reject(self) -> None:
        self.iteration += 1


@dataclass(frozen=True)
class PointSample:
    """Sampler output plus leniency bookkeeping."""

    points: np.ndarray  # (n, 3), read-only
    relaxations: int  # total leniency steps taken
    strict_count: int  # points accepted before the first relaxation
    initial_min_distance: float  # lower bound honoured by the first strict_count points


def generate_points_poisson(
    n: int,
    radius: float,
    max_angle: float,
    rng: Xoshiro256Plus,
) -> PointSample:
    """
    Generate n points on the surface of a sphere of the given radius.

    Consecutive points are roughly `max_angle` radians apart. If a point
    cannot be placed within ITERATION_LIMIT attempts, both the minimum
    distance and `max_angle` shrink by LENIENCY_FACTOR, permanently.

    Args:
        n: Number of points
        radius: Sphere radius
        max_angle: Target angular separation in radians
        rng: Generator owned by this stage

    Returns:
        PointSample with an (n, 3) array of points
    """
    initial_min_distance = chord_length(radius, 0.5 * max_angle) * EPSILON_MULT

    if n <= 0:
        points = np.empty((0, 3), dtype=np.float64)
        points.flags.writeable = False
        return PointSample(points, 0, 0, initial_min_distance)

    points = [np.array([0.0, radius, 0.0])]
    tree = SpatialIndex()
    tree.insert(points[0], 0)

    relaxations = 0
    strict_count = None

    while len(points) < n:
        # Random spread of 50%..150% keeps inter-point spacing varied
        angle = rng.uniform(0.5, 1.5) * max_angle

        # Chord distance, NOT arc length: we want an underestimation
        state = LeniencyState(
            min_distance=chord_length(radius, angle) * EPSILON_MULT,
            max_angle=max_angle,
        )

        while True:
            parent = points[rng.randrange(0, len(points))]

            if state.step():
                if strict_count is None:
                    strict_count = len(points)
                logger.warning(
                    "Reducing poisson min_distance due to reaching iteration limit",
                    min_distance=round(state.min_distance, 4),
                    point=len(points),
                )

            axis = random_unit_axis(rng)
            candidate = Rotation.from_rotvec(axis * angle).apply(parent)

            min_sq = state.min_distance * state.min_distance
            if not tree.nearest_within(candidate, min_sq, 1):
                tree.insert(candidate, len(points))
                points.append(candidate)
                break

            state.reject()

        max_angle = state.max_angle
        relaxations += state.relaxations

    result = np.vstack(points)
    result.flags.writeable = False
    return PointSample(
        points=result,
        relaxations=relaxations,
        strict_count=n if strict_count is None else strict_count,
        initial_min_distance=initial_min_distance,
    )

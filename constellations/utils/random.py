"""
Random number generation utilities.

Every generator is created from an explicit seed and handed down the call
chain. There is no process-wide PRNG: stages that need their own stream get
a fork() of their parent. Python's random and NumPy's random should not be
used in generation code, their streams are not part of our contract.
"""

import hashlib
import math

import numpy as np

from .xoshiro_prng import Xoshiro256Plus

TAU = 2.0 * math.pi


def rng_from_global_seed(global_seed: int) -> Xoshiro256Plus:
    """
    Create a generator from a signed 64-bit seed.

    The seed fills the first 8 bytes (little-endian, two's complement) of
    the 32-byte seed, the rest is zero.

    Args:
        global_seed: Seed in the i64 range

    Returns:
        Xoshiro256Plus instance
    """
    seed_bytes = global_seed.to_bytes(8, "little", signed=True) + bytes(24)
    return Xoshiro256Plus.from_seed(seed_bytes)


def create_rng_from_seed_and_state(local_seed: int, global_seed: int) -> Xoshiro256Plus:
    """
    Merge a global seed and a local seed with SHA-256 into a generator.

    Call this once per generation; derive sub-generators with fork().

    Args:
        local_seed: Unsigned 32-bit seed identifying the consumer
        global_seed: Signed 64-bit user-facing seed

    Returns:
        Xoshiro256Plus instance
    """
    hasher = hashlib.sha256()
    hasher.update(global_seed.to_bytes(8, "big", signed=True))
    hasher.update(local_seed.to_bytes(4, "big", signed=False))
    return Xoshiro256Plus.from_seed(hasher.digest())


def random_unit_axis(rng: Xoshiro256Plus) -> np.ndarray:
    """
    Draw a unit vector uniformly distributed over the unit sphere.

    Uses the cylindrical projection: z uniform in [-1, 1], azimuth uniform
    in [0, TAU).
    """
    z = -rng.uniform(-1.0, 1.0)
    theta = rng.uniform(0.0, TAU)

    # Radius of the cross-section of the unit sphere at height z
    radius = math.sqrt(max(0.0, 1.0 - z * z))
    return np.array([radius * math.cos(theta), radius * math.sin(theta), z])

"""Tests for Poisson-disk-like sphere sampling."""

import math

import numpy as np
import pytest
from constellations.core.point_sampler import (
    DEFAULT_MAX_ANGLE,
    ITERATION_LIMIT,
    LENIENCY_FACTOR,
    MAX_RELAXATIONS,
    LeniencyState,
    chord_length,
    generate_points_poisson,
)
from constellations.exceptions import InvariantViolation
from constellations.utils.random import rng_from_global_seed


def pairwise_distances(points):
    diff = points[:, None, :] - points[None, :, :]
    return np.sqrt(np.sum(diff**2, axis=-1))


class TestGeneratePoints:
    """Test point generation."""

    def test_zero_points(self):
        sample = generate_points_poisson(0, 5.0, DEFAULT_MAX_ANGLE, rng_from_global_seed(1))
        assert sample.points.shape == (0, 3)
        assert sample.relaxations == 0

    def test_single_point_is_pole(self):
        rng = rng_from_global_seed(1)
        sample = generate_points_poisson(1, 5.0, DEFAULT_MAX_ANGLE, rng)
        np.testing.assert_array_equal(sample.points, [[0.0, 5.0, 0.0]])
        # No candidates were sought
        assert rng.call_count == 0

    def test_point_count(self):
        sample = generate_points_poisson(100, 5.0, DEFAULT_MAX_ANGLE, rng_from_global_seed(2))
        assert sample.points.shape == (100, 3)

    def test_points_on_sphere(self):
        radius = 3.5
        sample = generate_points_poisson(80, radius, DEFAULT_MAX_ANGLE, rng_from_global_seed(3))
        norms = np.linalg.norm(sample.points, axis=1)
        np.testing.assert_allclose(norms, radius, rtol=1e-9)

    def test_points_are_read_only(self):
        sample = generate_points_poisson(5, 5.0, DEFAULT_MAX_ANGLE, rng_from_global_seed(3))
        with pytest.raises(ValueError):
            sample.points[0, 0] = 1.0

    def test_deterministic(self):
        a = generate_points_poisson(60, 5.0, DEFAULT_MAX_ANGLE, rng_from_global_seed(4))
        b = generate_points_poisson(60, 5.0, DEFAULT_MAX_ANGLE, rng_from_global_seed(4))
        np.testing.assert_array_equal(a.points, b.points)

    def test_different_seeds(self):
        a = generate_points_poisson(20, 5.0, DEFAULT_MAX_ANGLE, rng_from_global_seed(4))
        b = generate_points_poisson(20, 5.0, DEFAULT_MAX_ANGLE, rng_from_global_seed(5))
        assert not np.array_equal(a.points, b.points)

    def test_minimum_separation_before_relaxation(self):
        """Points accepted before any relaxation respect the initial bound."""
        radius = 5.0
        sample = generate_points_poisson(150, radius, DEFAULT_MAX_ANGLE, rng_from_global_seed(6))
        strict = sample.points[: sample.strict_count]
        d = pairwise_distances(strict)
        np.fill_diagonal(d, np.inf)
        assert d.min() >= sample.initial_min_distance - 1e-9

    def test_initial_min_distance(self):
        sample = generate_points_poisson(2, 5.0, DEFAULT_MAX_ANGLE, rng_from_global_seed(6))
        expected = 2.0 * 5.0 * math.sin(0.25 * DEFAULT_MAX_ANGLE) * 0.9
        assert sample.initial_min_distance == pytest.approx(expected)

    def test_leniency_kicks_in(self):
        """Thirty points cannot be 40+ degrees apart, so the sampler must relax."""
        sample = generate_points_poisson(30, 1.0, math.pi / 2, rng_from_global_seed(8))
        assert sample.points.shape == (30, 3)
        assert sample.relaxations > 0
        assert sample.strict_count < 30


class TestLeniencyState:
    """Test the bounded relaxation state machine."""

    def test_relaxes_at_iteration_limit(self):
        state = LeniencyState(min_distance=1.0, max_angle=0.5)
        for _ in range(ITERATION_LIMIT):
            assert state.step() is False
            state.reject()
        assert state.step() is True
        assert state.iteration == 0
        assert state.relaxations == 1
        assert state.min_distance == pytest.approx(LENIENCY_FACTOR)
        assert state.max_angle == pytest.approx(0.5 * LENIENCY_FACTOR)

    def test_relaxation_is_bounded(self):
        state = LeniencyState(min_distance=1.0, max_angle=0.5)
        with pytest.raises(InvariantViolation):
            for _ in range(MAX_RELAXATIONS + 1):
                state.iteration = ITERATION_LIMIT
                state.step()


class TestChordLength:
    def test_half_turn_is_diameter(self):
        assert chord_length(2.0, math.pi) == pytest.approx(4.0)

    def test_chord_shorter_than_arc(self):
        assert chord_length(5.0, 0.3) < 5.0 * 0.3

"""Tests for nearest-centroid clustering."""

import numpy as np
import pytest
from constellations.core.clustering import cluster_count_for, cluster_voronoi
from constellations.core.point_sampler import DEFAULT_MAX_ANGLE, generate_points_poisson
from constellations.exceptions import ConfigurationError
from constellations.utils.random import rng_from_global_seed


@pytest.fixture
def points():
    return generate_points_poisson(90, 5.0, DEFAULT_MAX_ANGLE, rng_from_global_seed(21)).points


class TestClusterCount:
    """Test cluster count derivation."""

    @pytest.mark.parametrize(
        "n, expected", [(0, 0), (1, 1), (15, 1), (16, 2), (30, 2), (2000, 134)]
    )
    def test_about_fifteen_per_cluster(self, n, expected):
        assert cluster_count_for(n) == expected

    def test_invalid_cluster_size(self):
        with pytest.raises(ConfigurationError):
            cluster_count_for(10, 0)


class TestClusterVoronoi:
    """Test cluster assignment."""

    def test_every_point_once(self, points):
        clusters = cluster_voronoi(points, 6, rng_from_global_seed(1))
        assert len(clusters) == 6
        indices = np.concatenate([c.point_indices for c in clusters])
        assert sorted(indices.tolist()) == list(range(len(points)))
        assert sum(len(c) for c in clusters) == len(points)

    def test_points_match_indices(self, points):
        for c in cluster_voronoi(points, 6, rng_from_global_seed(1)):
            np.testing.assert_array_equal(c.points, points[c.point_indices])

    def test_nearest_centroid(self, points):
        clusters = cluster_voronoi(points, 6, rng_from_global_seed(1))
        centroids = np.array([c.centroid for c in clusters])
        for ci, c in enumerate(clusters):
            for p in c.points:
                d = np.linalg.norm(centroids - p, axis=1)
                assert d[ci] <= d.min() + 1e-12

    def test_sorted_by_descending_height(self, points):
        clusters = cluster_voronoi(points, 6, rng_from_global_seed(1))
        heights = [c.centroid[1] for c in clusters]
        assert heights == sorted(heights, reverse=True)

    def test_centroids_are_points(self, points):
        for c in cluster_voronoi(points, 6, rng_from_global_seed(1)):
            assert np.any(np.all(points == c.centroid, axis=1))

    def test_deterministic(self, points):
        a = cluster_voronoi(points, 6, rng_from_global_seed(2))
        b = cluster_voronoi(points, 6, rng_from_global_seed(2))
        for ca, cb in zip(a, b):
            np.testing.assert_array_equal(ca.point_indices, cb.point_indices)

    def test_empty(self):
        assert cluster_voronoi(np.empty((0, 3)), 0, rng_from_global_seed(1)) == []

    def test_zero_clusters_rejected(self, points):
        with pytest.raises(ConfigurationError):
            cluster_voronoi(points, 0, rng_from_global_seed(1))

    def test_too_many_clusters_rejected(self, points):
        with pytest.raises(ConfigurationError):
            cluster_voronoi(points, len(points) + 1, rng_from_global_seed(1))

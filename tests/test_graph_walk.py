"""Tests for walk planning."""

import pytest
from constellations.core.constellation import generate_constellation
from constellations.core.graph import UndirectedGraph
from constellations.core.graph_walk import (
    edge_beats,
    next_walk_nodes,
    round_to_nearest_pow2,
    walk_beats,
    walk_path,
)
from constellations.utils.random import rng_from_global_seed


@pytest.fixture
def branching_graph():
    """0 - 1 - 2 along x, with 3 branching off 1 along y."""
    g = UndirectedGraph()
    g.add_node([0.0, 0.0, 0.0])
    g.add_node([1.0, 0.0, 0.0])
    g.add_node([2.0, 0.0, 0.0])
    g.add_node([1.0, 1.0, 0.0])
    g.add_edge(0, 1)
    g.add_edge(1, 2)
    g.add_edge(1, 3)
    return g


class TestPowerOfTwo:
    @pytest.mark.parametrize(
        "x, expected", [(0.0, 1.0), (-3.0, 1.0), (1.0, 1.0), (3.0, 4.0), (5.0, 4.0), (6.0, 8.0)]
    )
    def test_round(self, x, expected):
        assert round_to_nearest_pow2(x) == expected

    @pytest.mark.parametrize(
        "length, beats", [(0.0, 1), (0.125, 1), (0.5, 4), (1.0, 8), (5.0, 16)]
    )
    def test_edge_beats(self, length, beats):
        assert edge_beats(length) == beats


class TestNextWalkNodes:
    def test_first_step_fans_out(self, branching_graph):
        assert next_walk_nodes(branching_graph, 1) == [0, 2, 3]

    def test_keeps_direction(self, branching_graph):
        assert next_walk_nodes(branching_graph, 1, [1.0, 0.0, 0.0]) == [2]
        assert next_walk_nodes(branching_graph, 1, [0.0, 1.0, 0.0]) == [3]

    def test_dead_end(self, branching_graph):
        assert next_walk_nodes(branching_graph, 2, [1.0, 0.0, 0.0]) == []

    def test_last_neighbour_wins_ties(self):
        """Equally aligned neighbours resolve to the one added last."""
        g = UndirectedGraph()
        g.add_node([0.0, 0.0, 0.0])
        g.add_node([1.0, 0.0, 0.0])
        g.add_node([-1.0, 0.0, 0.0])
        g.add_node([0.0, -1.0, 0.0])
        g.add_edge(0, 3)
        g.add_edge(0, 1)
        g.add_edge(0, 2)
        assert next_walk_nodes(g, 0, [0.0, 1.0, 0.0]) == [2]


class TestWalkPath:
    def test_straight_walk(self, branching_graph):
        assert walk_path(branching_graph, 0) == [0, 1, 2]

    def test_isolated_node(self):
        g = UndirectedGraph()
        g.add_node([0.0, 0.0, 0.0])
        assert walk_path(g, 0) == [0]

    def test_beats(self, branching_graph):
        assert walk_beats(branching_graph, [0, 1, 2]) == [8, 8]

    def test_walk_stays_on_island(self):
        c = generate_constellation(60, 5.0, 3, rng_from_global_seed(12))
        for start in (0, 10, 59):
            path = walk_path(c.graph, start)
            assert len(set(path)) == len(path)
            assert {c.island_of(n) for n in path} == {c.island_of(start)}
            for a, b in zip(path, path[1:]):
                assert c.graph.contains_edge(a, b)

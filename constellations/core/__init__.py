"""
Core constellation generation functionality.
"""

from .chords import Chord
from .constellation import ConstellationGraph, generate_constellation, make_snapshot
from .graph import UndirectedGraph
from .graph_walk import edge_beats, next_walk_nodes, walk_beats, walk_path

__all__ = ['Chord', 'ConstellationGraph', 'generate_constellation', 'make_snapshot',
           'UndirectedGraph', 'edge_beats', 'next_walk_nodes', 'walk_beats', 'walk_path']

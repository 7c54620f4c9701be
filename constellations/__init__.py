"""Deterministic constellation graph generation."""

__version__ = "0.1.0"

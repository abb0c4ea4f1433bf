"""Utility functions for vdjpool.

Provides statistical helpers used by repertoire comparison routines.
"""

from .stats import (
    dot_distance,
    pairwise_distances,
    distance_correlation,
)

__all__ = [
    "dot_distance",
    "pairwise_distances",
    "distance_correlation",
]

"""
utils.py - Common utility functions for the erosion simulator

Provides shared, stateless helper functions used across different modules.
"""
from __future__ import annotations

from typing import List, Tuple

Point = Tuple[int, int]


def clamp(val: float, low: float, high: float) -> float:
    """Clamp a value between low and high bounds."""
    return max(low, min(high, val))


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation from a (t=0) to b (t=1)."""
    return a + (b - a) * t


# =============================================================================
# 8-Neighbor Utilities
# =============================================================================

# Scan order used by every neighbour search: N, S, W, E, then diagonals.
# North is y - 1.
NEIGHBORS_4: List[Point] = [
    (0, -1),   # N
    (0,  1),   # S
    (-1, 0),   # W
    (1,  0),   # E
]

DIAGONALS: List[Point] = [
    (-1, -1),  # NW
    (1, -1),   # NE
    (-1,  1),  # SW
    (1,  1),   # SE
]

NEIGHBORS_8: List[Point] = NEIGHBORS_4 + DIAGONALS


def is_diagonal(direction: Point) -> bool:
    """True for the four corner neighbours."""
    return direction[0] != 0 and direction[1] != 0


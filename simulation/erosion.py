# simulation/erosion.py
"""Erosion coupling for water transport.

Moving water drags solid material with it when the ground under the water
runs downhill:
- Candidate solid = water moved * EROSION_WATER_RATIO, capped at
  EROSION_SLOPE_CAP of the ground drop
- Loose material (if the source has any) moves 1:1 to the destination's loose
- Bare rock erodes at HARD_EROSION_RATE of the candidate and arrives at the
  destination as loose, multiplied by HARD_TO_LOOSE_EXPANSION

Two forms are provided: erode_toward() mutates the grid immediately for the
sequential stochastic pass, erosion_transfer() computes whole-array amounts
for the full-grid strategies.
"""
from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from simulation.config import (
    EROSION_WATER_RATIO,
    EROSION_SLOPE_CAP,
    LOOSE_AVAILABLE_THRESHOLD,
    HARD_EROSION_RATE,
    HARD_TO_LOOSE_EXPANSION,
)
from world.grid import CellArrays


def erode_toward(cells: CellArrays, src: int, dst: int, water_moved: float) -> Tuple[float, float]:
    """Apply erosion for water_moved flowing from src to dst.

    Args:
        cells: Cell storage to mutate in place
        src, dst: Flat cell indices
        water_moved: Volume of water moving this step

    Returns:
        (loose_moved, hard_eroded)
    """
    ground_from = float(cells.hard[src]) + float(cells.loose[src])
    ground_to = float(cells.hard[dst]) + float(cells.loose[dst])

    if ground_from <= ground_to:
        return 0.0, 0.0

    ground_to_move = water_moved * EROSION_WATER_RATIO
    slope_cap = (ground_from - ground_to) * EROSION_SLOPE_CAP
    if ground_to_move > slope_cap:
        ground_to_move = slope_cap

    loose_available = float(cells.loose[src])
    if loose_available > LOOSE_AVAILABLE_THRESHOLD:
        if ground_to_move > loose_available:
            ground_to_move = loose_available
        cells.loose[src] -= ground_to_move
        cells.loose[dst] += ground_to_move
        return ground_to_move, 0.0

    ground_to_move *= HARD_EROSION_RATE
    cells.hard[src] -= ground_to_move
    cells.loose[dst] += ground_to_move * HARD_TO_LOOSE_EXPANSION
    return 0.0, ground_to_move


def erosion_transfer(
    ground_from: np.ndarray,
    ground_to: np.ndarray,
    loose_from: np.ndarray,
    water_moved: np.ndarray,
    loose_cap: Optional[np.ndarray] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Vectorized erosion amounts for a set of simultaneous transfers.

    Args:
        ground_from, ground_to: Ground levels at source and destination
        loose_from: Loose material at the source (decides loose vs hard)
        water_moved: Water moved by each transfer
        loose_cap: Most loose a single transfer may take (defaults to loose_from);
            split a source's loose between several outflows with this

    Returns:
        (loose_moved, hard_eroded). Destination loose gains
        loose_moved + hard_eroded * HARD_TO_LOOSE_EXPANSION.
    """
    if loose_cap is None:
        loose_cap = loose_from

    drop = ground_from - ground_to
    downhill = (drop > 0) & (water_moved > 0)
    candidate = np.minimum(water_moved * EROSION_WATER_RATIO, drop * EROSION_SLOPE_CAP)

    has_loose = loose_from > LOOSE_AVAILABLE_THRESHOLD
    loose_moved = np.where(downhill & has_loose, np.minimum(candidate, loose_cap), 0.0)
    hard_eroded = np.where(downhill & ~has_loose, candidate * HARD_EROSION_RATE, 0.0)
    return loose_moved, hard_eroded

# simulation/rain.py
"""Rain injection.

Rain amounts come from the atmospheric pool (world_state.py); these functions
only place water on the grid.
"""
from __future__ import annotations

from typing import Optional

import numpy as np

from world.grid import TerrainGrid


def add_rain(grid: TerrainGrid, total_amount: float) -> None:
    """Spread total_amount evenly over every cell."""
    grid.water += np.float32(total_amount / grid.size)


def add_rain_random(
    grid: TerrainGrid,
    total_amount: float,
    num_drops: int,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Drop total_amount as num_drops equal point increments at random cells.

    Cells are drawn with replacement, so one cell can catch several drops.

    Returns:
        Indices that received a drop (one entry per drop)
    """
    if num_drops <= 0 or total_amount <= 0:
        return np.empty(0, dtype=np.int64)

    rng = rng if rng is not None else np.random.default_rng()
    amount = np.float32(total_amount / num_drops)
    targets = rng.integers(0, grid.size, size=num_drops)
    # add.at accumulates repeated indices
    np.add.at(grid.water, targets, amount)
    return targets

# simulation/surface.py
"""Stochastic surface water flow (the per-tick production algorithm).

Water is moved by repeated random sampling rather than a full-grid sweep:
1. Rebuild the active water list (cells holding water above a threshold)
2. Draw sample cells from it uniformly, with replacement
3. Each sample moves water (and drags sediment) toward its lowest neighbour

Samples read and write shared cell state and every sample sees the effects
of the samples before it, so the loop is strictly sequential.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

import numpy as np
import structlog

from simulation.config import (
    ACTIVE_WATER_THRESHOLD,
    SAMPLE_MIN_WATER,
    STOCHASTIC_EQUALISE_FRACTION,
)
from simulation.erosion import erode_toward
from world.grid import TerrainGrid

logger = structlog.get_logger(__name__)


@dataclass
class FlowReport:
    """Summary of one flow pass."""
    strategy: str
    cells_processed: int = 0
    water_moved: float = 0.0
    loose_moved: float = 0.0
    hard_eroded: float = 0.0

    def log(self) -> None:
        logger.debug("flow_pass", **asdict(self))


def find_lowest_neighbor(grid: TerrainGrid, celli: int) -> tuple[int, float]:
    """Lowest of the 8 neighbours by total height.

    Scan order is N, S, W, E, NW, NE, SW, SE; a later neighbour only replaces
    the current pick when strictly lower, so ties go to the earlier one.

    Returns:
        (index, height) of the lowest neighbour
    """
    hard, loose, water = grid.cells.hard, grid.cells.loose, grid.cells.water
    lowest = -1
    lowest_h = 0.0
    for n in grid.neighbors[celli].tolist():
        nh = float(hard[n]) + float(loose[n]) + float(water[n])
        if lowest < 0 or nh < lowest_h:
            lowest = n
            lowest_h = nh
    return lowest, lowest_h


def run_water_random(
    grid: TerrainGrid,
    num_samples: int,
    rng: Optional[np.random.Generator] = None,
) -> FlowReport:
    """Run one stochastic flow pass of num_samples samples.

    For each sample: find the lowest neighbour; if it is strictly lower, move
    min(half the height gap, held water) to it, eroding along the way when
    the ground beneath also runs downhill.

    Args:
        grid: Terrain to modify in place
        num_samples: Number of draws from the active water list
        rng: Source of randomness (seed it for reproducible runs)

    Returns:
        FlowReport for the pass
    """
    report = FlowReport("stochastic")
    active = grid.rebuild_water_map(ACTIVE_WATER_THRESHOLD)
    if len(active) == 0 or num_samples <= 0:
        return report

    rng = rng if rng is not None else np.random.default_rng()
    picks = active[rng.integers(0, len(active), size=num_samples)]

    cells = grid.cells
    hard, loose, water = cells.hard, cells.loose, cells.water

    for celli in picks.tolist():
        held = float(water[celli])

        # Drained by an earlier sample this pass
        if held < SAMPLE_MIN_WATER:
            continue

        report.cells_processed += 1
        h = float(hard[celli]) + float(loose[celli]) + held

        # Hole detection
        lowest, lowest_h = find_lowest_neighbor(grid, celli)
        if lowest_h >= h:
            continue

        diff = (h - lowest_h) * STOCHASTIC_EQUALISE_FRACTION
        amount = diff if diff < held else held

        loose_moved, hard_eroded = erode_toward(cells, celli, lowest, amount)
        report.loose_moved += loose_moved
        report.hard_eroded += hard_eroded

        water[celli] -= amount
        water[lowest] += amount
        report.water_moved += amount

    report.log()
    return report

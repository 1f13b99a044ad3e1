# simulation/flow_fields.py
"""Full-grid water flow strategies (vectorized).

Every strategy here reads a snapshot of the grid, accumulates signed deltas
in a scratch buffer (temp_diff or the erosion map) and merges them once at
the end. Neighbour lookups go through the grid's precomputed (size, 8)
neighbour table, so all addressing wraps around the torus.

Strategies:
- run_water_fast: steepest descent, a cell dumps all its water downhill
- run_water_slow: damped diffusion to every lower neighbour
- run_water_proportional: split across lower cardinal neighbours by drop
- run_water_fall_vector: advect along the surface gradient (experimental)
"""
from __future__ import annotations

import numpy as np
from scipy.ndimage import correlate

from simulation.config import (
    FULL_GRID_MIN_WATER,
    DIFFUSIVE_DAMPING,
    PROPORTIONAL_FLOW_FRACTION,
    FALL_VECTOR_FLOW_FRACTION,
    HARD_TO_LOOSE_EXPANSION,
)
from simulation.erosion import erosion_transfer
from simulation.surface import FlowReport
from utils import NEIGHBORS_8
from world.grid import TerrainGrid

# Columns 0-3 of the neighbour table are the cardinal neighbours (N, S, W, E)
CARDINAL_COLUMNS = 4

# Octant k covers angle k * 45 degrees (y grows southward)
OCTANT_OFFSETS = [(1, 0), (1, 1), (0, 1), (-1, 1), (-1, 0), (-1, -1), (0, -1), (1, -1)]
OCTANT_COLUMNS = np.array([NEIGHBORS_8.index(offset) for offset in OCTANT_OFFSETS])

# Cross-shaped kernels for the fall vector
_FALL_X_KERNEL = np.array([[0, 0, 0], [1, 0, -1], [0, 0, 0]], dtype=np.float64)
_FALL_Y_KERNEL = np.array([[0, 1, 0], [0, 0, 0], [0, -1, 0]], dtype=np.float64)
_CROSS_KERNEL = np.array([[0, 1, 0], [1, 0, 1], [0, 1, 0]], dtype=np.float64)


def _apply_water_delta(grid: TerrainGrid, sources: np.ndarray, targets: np.ndarray,
                       amounts: np.ndarray) -> float:
    """Route water through temp_diff and merge it into the grid."""
    grid.clear_temp_diff()
    amounts = amounts.astype(np.float32)
    np.subtract.at(grid.temp_diff, sources, amounts)
    np.add.at(grid.temp_diff, targets, amounts)
    grid.water += grid.temp_diff
    return float(np.sum(amounts, dtype=np.float64))


def _record_erosion(grid: TerrainGrid, sources: np.ndarray, targets: np.ndarray,
                    loose_moved: np.ndarray, hard_eroded: np.ndarray) -> None:
    erosion = grid.erosion
    np.subtract.at(erosion.loose, sources, loose_moved.astype(np.float32))
    np.subtract.at(erosion.hard, sources, hard_eroded.astype(np.float32))
    deposited = loose_moved + hard_eroded * HARD_TO_LOOSE_EXPANSION
    np.add.at(erosion.loose, targets, deposited.astype(np.float32))


# =============================================================================
# Steepest descent
# =============================================================================

def run_water_fast(grid: TerrainGrid) -> FlowReport:
    """Send all water of each wet cell to its lowest neighbour.

    A cell only drains when its lowest neighbour's total height is not above
    the cell's own ground level. Erosion is computed from the pre-pass
    snapshot into the erosion map.
    """
    report = FlowReport("steepest")
    cells = grid.cells
    heights = cells.height
    ground = cells.ground_level
    water = cells.water.copy()

    neighbour_heights = heights[grid.neighbors]
    # argmin keeps the first minimum, so ties go to the earlier scan position
    column = np.argmin(neighbour_heights, axis=1)
    rows = np.arange(grid.size)
    lowest = grid.neighbors[rows, column]
    lowest_h = neighbour_heights[rows, column]

    movers = (water >= FULL_GRID_MIN_WATER) & (lowest_h <= ground)
    sources = np.flatnonzero(movers)
    if len(sources) == 0:
        report.log()
        return report
    targets = lowest[sources]
    amounts = water[sources]

    loose_moved, hard_eroded = erosion_transfer(
        ground[sources].astype(np.float64),
        ground[targets].astype(np.float64),
        cells.loose[sources].astype(np.float64),
        amounts.astype(np.float64),
    )

    grid.erosion.clear()
    _record_erosion(grid, sources, targets, loose_moved, hard_eroded)

    report.cells_processed = len(sources)
    report.water_moved = _apply_water_delta(grid, sources, targets, amounts)
    grid.erosion.merge_into(cells)
    report.loose_moved = float(loose_moved.sum())
    report.hard_eroded = float(hard_eroded.sum())
    report.log()
    return report


# =============================================================================
# Diffusive
# =============================================================================

def run_water_slow(grid: TerrainGrid) -> FlowReport:
    """Damped equalisation toward every lower neighbour. Does not erode.

    With k lower neighbours and lowest neighbour height m, a cell moves
    d = min(h - m, water) * DIFFUSIVE_DAMPING; each lower neighbour receives
    d / (k + 1) and the remainder of the share stays put.
    """
    report = FlowReport("diffusive")
    cells = grid.cells
    heights = cells.height
    water = cells.water.copy()

    neighbour_heights = heights[grid.neighbors]
    lower = neighbour_heights < heights[:, None]
    lower_count = lower.sum(axis=1)
    lowest_h = neighbour_heights.min(axis=1)

    active = (water >= FULL_GRID_MIN_WATER) & (lower_count > 0)
    if not np.any(active):
        report.log()
        return report

    d = np.zeros(grid.size, dtype=np.float64)
    d[active] = np.minimum(heights[active] - lowest_h[active], water[active]) * DIFFUSIVE_DAMPING
    share = d / (lower_count + 1)

    grid.clear_temp_diff()
    moved = np.zeros(grid.size, dtype=np.float64)
    for column in range(len(NEIGHBORS_8)):
        mask = active & lower[:, column]
        sources = np.flatnonzero(mask)
        np.add.at(grid.temp_diff, grid.neighbors[sources, column], share[sources].astype(np.float32))
        moved[sources] += share[sources]
    grid.temp_diff -= moved.astype(np.float32)
    grid.water += grid.temp_diff

    report.cells_processed = int(active.sum())
    report.water_moved = float(moved.sum())
    report.log()
    return report


# =============================================================================
# Proportional multi-directional
# =============================================================================

def run_water_proportional(grid: TerrainGrid) -> FlowReport:
    """Spread water over every lower cardinal neighbour by relative drop.

    Per cell: total_cell_drop and max_cell_drop over the 4 cardinal
    neighbours; min(total_drop * PROPORTIONAL_FLOW_FRACTION, water) leaves the
    cell, each lower neighbour taking drop / total_drop of it. Erosion is
    applied per transfer with the source's loose split the same way.
    """
    report = FlowReport("proportional")
    cells = grid.cells
    heights = cells.height.astype(np.float64)
    ground = cells.ground_level.astype(np.float64)
    loose = cells.loose.astype(np.float64)
    water = cells.water.astype(np.float64)

    cardinal = grid.neighbors[:, :CARDINAL_COLUMNS]
    drops = np.maximum(heights[:, None] - heights[cardinal], 0.0)
    total_drop = drops.sum(axis=1)
    grid.total_cell_drop[:] = total_drop
    grid.max_cell_drop[:] = drops.max(axis=1)

    active = (water >= FULL_GRID_MIN_WATER) & (total_drop > 0)
    grid.erosion.clear()
    if not np.any(active):
        report.log()
        return report

    outflow = np.minimum(total_drop * PROPORTIONAL_FLOW_FRACTION, water)

    for column in range(CARDINAL_COLUMNS):
        sources = np.flatnonzero(active & (drops[:, column] > 0))
        if len(sources) == 0:
            continue
        targets = cardinal[sources, column]
        fraction = drops[sources, column] / total_drop[sources]
        amounts = outflow[sources] * fraction

        np.subtract.at(grid.erosion.water, sources, amounts.astype(np.float32))
        np.add.at(grid.erosion.water, targets, amounts.astype(np.float32))

        loose_moved, hard_eroded = erosion_transfer(
            ground[sources], ground[targets], loose[sources], amounts,
            loose_cap=loose[sources] * fraction,
        )
        _record_erosion(grid, sources, targets, loose_moved, hard_eroded)

        report.water_moved += float(amounts.sum())
        report.loose_moved += float(loose_moved.sum())
        report.hard_eroded += float(hard_eroded.sum())

    grid.erosion.merge_into(cells)
    report.cells_processed = int(active.sum())
    report.log()
    return report


# =============================================================================
# Fall-vector advection
# =============================================================================

def compute_fall_map(grid: TerrainGrid) -> np.ndarray:
    """Fill grid.fall_map with the normalised fall vector of every cell.

    fall = Σ (dx, dy, hn - h0) * (h0 - hn) over the 4 cardinal neighbours,
    which works out to (h_W - h_E, h_N - h_S, -Σ (h0 - hn)^2). Flat cells
    get the zero vector.
    """
    h = grid.as_2d(grid.cells.height.astype(np.float64))

    fx = correlate(h, _FALL_X_KERNEL, mode="wrap")
    fy = correlate(h, _FALL_Y_KERNEL, mode="wrap")
    neighbour_sum = correlate(h, _CROSS_KERNEL, mode="wrap")
    neighbour_sq = correlate(h * h, _CROSS_KERNEL, mode="wrap")
    fz = -(4.0 * h * h - 2.0 * h * neighbour_sum + neighbour_sq)

    fall = np.stack([fx.ravel(), fy.ravel(), fz.ravel()], axis=1)
    norm = np.linalg.norm(fall, axis=1)
    flat = norm <= 0.0
    norm[flat] = 1.0
    fall /= norm[:, None]
    fall[flat] = 0.0

    grid.fall_map[:] = fall
    return grid.fall_map


def run_water_fall_vector(grid: TerrainGrid) -> FlowReport:
    """Move a fraction of each cell's water along its fall vector.

    The destination is the neighbour in the fall vector's dominant octant,
    and water only moves when that neighbour is lower. Does not erode.
    """
    report = FlowReport("fall_vector")
    fall = compute_fall_map(grid)
    heights = grid.cells.height
    water = grid.cells.water.copy()

    fx = fall[:, 0].astype(np.float64)
    fy = fall[:, 1].astype(np.float64)
    octant = np.rint(np.arctan2(fy, fx) / (np.pi / 4.0)).astype(np.int64) % 8
    targets = grid.neighbors[np.arange(grid.size), OCTANT_COLUMNS[octant]]

    movers = (
        (water >= FULL_GRID_MIN_WATER)
        & ((fx != 0.0) | (fy != 0.0))
        & (heights[targets] < heights)
    )
    sources = np.flatnonzero(movers)
    if len(sources) == 0:
        report.log()
        return report

    amounts = water[sources] * FALL_VECTOR_FLOW_FRACTION
    report.cells_processed = len(sources)
    report.water_moved = _apply_water_delta(grid, sources, targets[sources], amounts)
    report.log()
    return report

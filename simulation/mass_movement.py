# simulation/mass_movement.py
"""Gravitational mass movement: slumping, rock collapse, point collapses.

The two samplers (slump, collapse) visit random receiver cells and pull
material down from any neighbour standing too far above them. They record
signed amounts in the grid's temp_diff buffer while sampling and merge it
once at the end. Diagonal neighbours use the threshold scaled
by sqrt(2).

collapse_from / collapse_to are one-shot edits around a single point and
mutate the grid immediately.
"""
from __future__ import annotations

import math
from typing import Optional

import numpy as np
import structlog

from simulation.config import (
    DIAGONAL_FACTOR,
    SLUMP_THRESHOLD,
    SLUMP_AMOUNT,
    SLUMP_SAMPLES,
    COLLAPSE_THRESHOLD,
    COLLAPSE_AMOUNT,
    COLLAPSE_LOOSE_THRESHOLD,
    COLLAPSE_SAMPLES,
    COLLAPSE_FROM_LOOSE_SHARE,
    COLLAPSE_TO_LOOSE_SHARE,
)
from utils import NEIGHBORS_8, is_diagonal
from world.grid import TerrainGrid

logger = structlog.get_logger(__name__)

SQRT_2 = math.sqrt(2.0)


def _draw_receivers(grid: TerrainGrid, num_iterations: int,
                    rng: Optional[np.random.Generator]) -> list:
    rng = rng if rng is not None else np.random.default_rng()
    xs = rng.integers(0, grid.width, size=num_iterations)
    ys = rng.integers(0, grid.height, size=num_iterations)
    return [grid.index(x, y) for x, y in zip(xs.tolist(), ys.tolist())]


def _thresholds(threshold: float) -> list:
    """Per-neighbour threshold in scan order."""
    return [threshold * SQRT_2 if is_diagonal(d) else threshold for d in NEIGHBORS_8]


# =============================================================================
# Samplers
# =============================================================================

def slump(
    grid: TerrainGrid,
    threshold: float = SLUMP_THRESHOLD,
    amount: float = SLUMP_AMOUNT,
    num_iterations: int = SLUMP_SAMPLES,
    rng: Optional[np.random.Generator] = None,
) -> float:
    """Let loose material slide onto randomly chosen lower cells.

    For each receiver p (ground level h) and each neighbour d holding loose:
    when ground(d) - h exceeds the threshold, move
    min(excess - threshold, loose(d)) * amount from d to p and raise h by it.
    Only loose material moves. Pending moves count against a donor's loose,
    so no cell is driven below zero.

    Returns:
        Total loose moved
    """
    if num_iterations <= 0:
        return 0.0

    grid.clear_temp_diff()
    hard, loose, diff = grid.cells.hard, grid.cells.loose, grid.temp_diff
    limits = _thresholds(threshold)
    total = 0.0

    for p in _draw_receivers(grid, num_iterations, rng):
        h = float(hard[p]) + float(loose[p]) + float(diff[p])
        for n, limit in zip(grid.neighbors[p].tolist(), limits):
            donor_loose = float(loose[n]) + float(diff[n])
            if donor_loose <= 0.0:
                continue
            excess = float(hard[n]) + donor_loose - h
            if excess <= limit:
                continue
            moved = min(excess - limit, donor_loose) * amount
            diff[n] -= moved
            diff[p] += moved
            h += moved
            total += moved

    grid.loose += diff
    logger.debug("slump", samples=num_iterations, moved=total)
    return total


def collapse(
    grid: TerrainGrid,
    threshold: float = COLLAPSE_THRESHOLD,
    amount: float = COLLAPSE_AMOUNT,
    loose_threshold: float = COLLAPSE_LOOSE_THRESHOLD,
    num_iterations: int = COLLAPSE_SAMPLES,
    rng: Optional[np.random.Generator] = None,
) -> float:
    """Let over-steep bare rock break off onto randomly chosen lower cells.

    Donors with more than loose_threshold of loose cover are stable. For an
    exposed donor d, excess = hard(d) - h; above the threshold,
    (excess - threshold) * amount breaks off. Both heights include what is
    already pending in temp_diff, and a donor never gives more rock than it
    has left. After sampling, net losses come out of hard and net gains land
    as loose.

    Returns:
        Total material broken off
    """
    if num_iterations <= 0:
        return 0.0

    grid.clear_temp_diff()
    hard, loose, diff = grid.cells.hard, grid.cells.loose, grid.temp_diff
    limits = _thresholds(threshold)
    total = 0.0

    for p in _draw_receivers(grid, num_iterations, rng):
        h = float(hard[p]) + float(loose[p]) + float(diff[p])
        for n, limit in zip(grid.neighbors[p].tolist(), limits):
            if loose[n] > loose_threshold:
                continue
            # Pending losses already left the donor's rock
            donor_hard = float(hard[n]) + min(float(diff[n]), 0.0)
            if donor_hard <= 0.0:
                continue
            excess = donor_hard - h
            if excess <= limit:
                continue
            moved = min((excess - limit) * amount, donor_hard)
            diff[n] -= moved
            diff[p] += moved
            h += moved
            total += moved

    lost = diff < 0
    hard[lost] += diff[lost]
    loose[~lost] += diff[~lost]
    logger.debug("collapse", samples=num_iterations, moved=total)
    return total


# =============================================================================
# Point collapses
# =============================================================================

def collapse_from(grid: TerrainGrid, x: int, y: int, amount: float) -> float:
    """Spill material from (x, y) onto every lower neighbour.

    Each neighbour below the centre gains
    min(h_c - h_n, COLLAPSE_FROM_LOOSE_SHARE * loose_c) * w as loose, with
    w = amount (cardinal) or amount * DIAGONAL_FACTOR (diagonal). The centre
    pays the total from its loose first, then from hard.

    Returns:
        Total material spilled
    """
    cells = grid.cells
    ci = grid.index(x, y)
    h = grid.cell_height(ci)
    cap = float(cells.loose[ci]) * COLLAPSE_FROM_LOOSE_SHARE
    spilled = 0.0

    for (dx, dy), n in zip(NEIGHBORS_8, grid.neighbours_of(x, y)):
        weight = amount * DIAGONAL_FACTOR if is_diagonal((dx, dy)) else amount
        d = min(h - grid.cell_height(n), cap)
        if d > 0.0:
            d *= weight
            cells.loose[n] += d
            spilled += d

    available = float(cells.loose[ci])
    if spilled < available:
        cells.loose[ci] -= spilled
    else:
        cells.hard[ci] -= spilled - available
        cells.loose[ci] = 0.0
    return spilled


def collapse_to(grid: TerrainGrid, x: int, y: int, amount: float) -> float:
    """Pull loose material from every higher neighbour into (x, y).

    Each neighbour above the centre gives
    min(h_n - h_c, COLLAPSE_TO_LOOSE_SHARE * loose_n) * w of its loose, with
    the same weights as collapse_from.

    Returns:
        Total material gathered
    """
    cells = grid.cells
    ci = grid.index(x, y)
    h = grid.cell_height(ci)
    gathered = 0.0

    for (dx, dy), n in zip(NEIGHBORS_8, grid.neighbours_of(x, y)):
        weight = amount * DIAGONAL_FACTOR if is_diagonal((dx, dy)) else amount
        d = min(grid.cell_height(n) - h, float(cells.loose[n]) * COLLAPSE_TO_LOOSE_SHARE)
        if d > 0.0:
            d *= weight
            cells.loose[n] -= d
            gathered += d

    cells.loose[ci] += gathered
    return gathered

# world/query.py
"""Read-only height sampling for callers outside the simulation."""
from __future__ import annotations

import math
from typing import Sequence, Tuple

from config import WORLD_SCALE
from utils import lerp
from world.grid import TerrainGrid


def water_height_at(grid: TerrainGrid, x: float, y: float) -> float:
    """Bilinear total height (ground + water) at normalised (x, y).

    Args:
        grid: Terrain to sample
        x, y: Normalised coordinates in [0, 1); values outside wrap

    Returns:
        Interpolated height in volume units
    """
    fx = x * grid.width
    fy = y * grid.height
    xx = math.floor(fx)
    yy = math.floor(fy)
    xfrac = fx - xx
    yfrac = fy - yy

    h00 = grid.cell_height(grid.index(xx, yy))
    h10 = grid.cell_height(grid.index(xx + 1, yy))
    h01 = grid.cell_height(grid.index(xx, yy + 1))
    h11 = grid.cell_height(grid.index(xx + 1, yy + 1))

    return lerp(lerp(h00, h10, xfrac), lerp(h01, h11, xfrac), yfrac)


def clamp_to_ground(grid: TerrainGrid, position: Sequence[float]) -> Tuple[float, float, float]:
    """Snap a world position (x, up, z) onto the water/ground surface.

    x and z are the normalised horizontal coordinates; the vertical
    component becomes height / WORLD_SCALE.
    """
    x, _, z = position
    return x, water_height_at(grid, x, z) / WORLD_SCALE, z

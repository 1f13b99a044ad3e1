# world/grid.py
"""Cell grid and toroidal addressing.

Cells are stored column-wise: one flat float32 array per field, indexed
row-major (index = y * width + x). The grid is a torus: every coordinate is
wrapped before it is turned into an index, so the neighbours of an edge cell
are the cells on the opposite edge.

Two address functions exist:
- torus_index / torus_x / torus_y: the reference 10-bit packing with a fixed
  1024 period on both axes (y in the high 10 bits).
- TerrainGrid.index: wraps by the grid's own width/height. For a 1024×1024
  grid the two are identical.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np

from config import ADDRESS_BITS, ADDRESS_MASK
from utils import NEIGHBORS_8, Point


# =============================================================================
# Reference address function (fixed 1024 period)
# =============================================================================

def torus_index(x: int, y: int) -> int:
    """Pack (x, y) into the 1024×1024 address space, wrapping both axes."""
    return (x & ADDRESS_MASK) + ((y & ADDRESS_MASK) << ADDRESS_BITS)


def torus_x(i: int) -> int:
    """Low 10 bits of an index."""
    return i & ADDRESS_MASK


def torus_y(i: int) -> int:
    """High 10 bits of an index."""
    return (i >> ADDRESS_BITS) & ADDRESS_MASK


# =============================================================================
# Cell storage
# =============================================================================

@dataclass
class CellArrays:
    """Column-wise storage for a set of cells.

    Used both for the primary map and for same-shaped scratch maps that
    accumulate signed deltas before being merged.
    """
    hard: np.ndarray          # Bedrock volume
    loose: np.ndarray         # Sediment volume
    water: np.ndarray         # Liquid volume
    delta_height: np.ndarray  # Visualisation-only accumulator

    @classmethod
    def zeros(cls, size: int) -> "CellArrays":
        return cls(
            hard=np.zeros(size, dtype=np.float32),
            loose=np.zeros(size, dtype=np.float32),
            water=np.zeros(size, dtype=np.float32),
            delta_height=np.zeros(size, dtype=np.float32),
        )

    def clear(self) -> None:
        self.hard.fill(0.0)
        self.loose.fill(0.0)
        self.water.fill(0.0)
        self.delta_height.fill(0.0)

    @property
    def height(self) -> np.ndarray:
        """Total stack height: hard + loose + water."""
        return self.hard + self.loose + self.water

    @property
    def ground_level(self) -> np.ndarray:
        """Height excluding standing water."""
        return self.hard + self.loose

    def merge_into(self, target: "CellArrays") -> None:
        """Elementwise-add hard/loose/water deltas into target."""
        target.hard += self.hard
        target.loose += self.loose
        target.water += self.water


class TerrainGrid:
    """The heightfield: primary cells plus every scratch buffer.

    All buffers are allocated once here and reused by every simulation call.
    """

    def __init__(self, width: int, height: int):
        if int(width) != width or int(height) != height or width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive integers, got {width}x{height}")

        self.width = int(width)
        self.height = int(height)
        self.size = self.width * self.height

        self.cells = CellArrays.zeros(self.size)
        self.erosion = CellArrays.zeros(self.size)

        # Scratch buffers
        self.temp_diff = np.zeros(self.size, dtype=np.float32)
        self.total_cell_drop = np.zeros(self.size, dtype=np.float32)
        self.max_cell_drop = np.zeros(self.size, dtype=np.float32)
        self.water_map = np.zeros(self.size, dtype=np.int64)
        self.water_map_size = 0
        self.fall_map = np.zeros((self.size, 3), dtype=np.float32)

        # Neighbour index table, shape (size, 8), order N,S,W,E,NW,NE,SW,SE
        self.neighbors = self._build_neighbor_table()

    # -------------------------------------------------------------------------
    # Field shortcuts
    # -------------------------------------------------------------------------

    @property
    def hard(self) -> np.ndarray:
        return self.cells.hard

    @hard.setter
    def hard(self, values: np.ndarray) -> None:
        self.cells.hard[...] = values

    @property
    def loose(self) -> np.ndarray:
        return self.cells.loose

    @loose.setter
    def loose(self, values: np.ndarray) -> None:
        self.cells.loose[...] = values

    @property
    def water(self) -> np.ndarray:
        return self.cells.water

    @water.setter
    def water(self, values: np.ndarray) -> None:
        self.cells.water[...] = values

    @property
    def delta_height(self) -> np.ndarray:
        return self.cells.delta_height

    @delta_height.setter
    def delta_height(self, values: np.ndarray) -> None:
        self.cells.delta_height[...] = values

    @property
    def heights(self) -> np.ndarray:
        """Total height of every cell (new array)."""
        return self.cells.height

    @property
    def ground_level(self) -> np.ndarray:
        """Ground level of every cell (new array)."""
        return self.cells.ground_level

    def cell_height(self, i: int) -> float:
        return float(self.cells.hard[i]) + float(self.cells.loose[i]) + float(self.cells.water[i])

    def total_water(self) -> float:
        return float(np.sum(self.cells.water, dtype=np.float64))

    def as_2d(self, values: np.ndarray) -> np.ndarray:
        """View a flat per-cell array as (height, width)."""
        return values.reshape(self.height, self.width)

    # -------------------------------------------------------------------------
    # Addressing
    # -------------------------------------------------------------------------

    def index(self, x: int, y: int) -> int:
        """Flat index of (x, y) after wrapping both axes."""
        return (y % self.height) * self.width + (x % self.width)

    def cell_x(self, i: int) -> int:
        return i % self.width

    def cell_y(self, i: int) -> int:
        return (i // self.width) % self.height

    def neighbours_of(self, x: int, y: int) -> List[int]:
        """Indices of the 8 neighbours in scan order N,S,W,E,NW,NE,SW,SE."""
        return [self.index(x + dx, y + dy) for dx, dy in NEIGHBORS_8]

    def _build_neighbor_table(self) -> np.ndarray:
        ys, xs = np.divmod(np.arange(self.size, dtype=np.int64), self.width)
        table = np.empty((self.size, len(NEIGHBORS_8)), dtype=np.int64)
        for k, (dx, dy) in enumerate(NEIGHBORS_8):
            table[:, k] = ((ys + dy) % self.height) * self.width + (xs + dx) % self.width
        return table

    # -------------------------------------------------------------------------
    # Whole-grid operations
    # -------------------------------------------------------------------------

    def clear(self, base_height: float = 0.0) -> None:
        """Reset every cell: hard to base_height, everything else to zero."""
        self.cells.clear()
        if base_height:
            self.cells.hard.fill(base_height)

    def set_base_level(self) -> None:
        """Shift bedrock so its minimum is exactly zero."""
        lowest = self.cells.hard.min()
        self.cells.hard -= lowest

    def add_loose_material(self, amount: float) -> None:
        """Lay a uniform sheet of loose material over the whole grid."""
        self.cells.loose += amount

    def clear_temp_diff(self) -> None:
        self.temp_diff.fill(0.0)

    def rebuild_water_map(self, threshold: float) -> np.ndarray:
        """Collect indices of cells holding more than threshold water.

        Returns:
            View of the active prefix of water_map
        """
        active = np.flatnonzero(self.cells.water > threshold)
        self.water_map_size = len(active)
        self.water_map[:self.water_map_size] = active
        return self.water_map[:self.water_map_size]

    def coords(self, i: int) -> Point:
        return self.cell_x(i), self.cell_y(i)

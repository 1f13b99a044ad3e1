# terrain_state/state.py
"""Core terrain state data structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple, Union

import numpy as np
import structlog

from config import TerrainParameters
from simulation.strategies import FlowStrategy, StochasticFlow
from world.grid import TerrainGrid
from world.persistence import load_terrain, save_terrain
from world_state import AtmosphericWaterPool

logger = structlog.get_logger(__name__)


@dataclass
class TerrainState:
    """Main simulation container.

    One heightfield plus everything a tick needs: tuning parameters, the
    finite rain reservoir, the random generator shared by every stochastic
    pass, and the flow strategy run each tick.
    """
    grid: TerrainGrid
    parameters: TerrainParameters = field(default_factory=TerrainParameters)
    water_pool: AtmosphericWaterPool | None = None
    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    flow: FlowStrategy | None = None
    iterations: int = 0

    # Optional per-tick post-processing
    slump_enabled: bool = False
    collapse_enabled: bool = False

    def __post_init__(self) -> None:
        if self.water_pool is None:
            budget = self.parameters.total_water_budget
            self.water_pool = AtmosphericWaterPool(total_budget=budget, atmospheric_reserve=budget)
        if self.flow is None:
            self.flow = StochasticFlow(self.parameters.water_samples_per_tick)

    @property
    def size(self) -> Tuple[int, int]:
        return self.grid.width, self.grid.height

    def reset_budget(self) -> None:
        self.water_pool.reset(self.parameters.total_water_budget)

    # === Snapshots ===
    def save(self, path: Union[str, Path]) -> None:
        save_terrain(self.grid, path)

    def load(self, path: Union[str, Path]) -> None:
        """Load a snapshot into the grid and refill the rain reservoir.

        The grid is untouched (and the budget not refilled) if the load fails.
        """
        load_terrain(self.grid, path)
        self.reset_budget()

    def summary(self) -> dict:
        """Whole-grid totals for status lines and logs."""
        return {
            "iterations": self.iterations,
            "water": self.grid.total_water(),
            "hard": float(np.sum(self.grid.hard, dtype=np.float64)),
            "loose": float(np.sum(self.grid.loose, dtype=np.float64)),
            "atmospheric_reserve": self.water_pool.atmospheric_reserve,
        }

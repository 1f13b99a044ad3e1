# simulation/strategies.py
"""Selectable flow strategies behind one interface.

Every strategy is called as strategy.run(grid, rng) and returns a
FlowReport. Only the stochastic strategy consumes the generator; the
full-grid ones are deterministic and ignore it.
"""
from __future__ import annotations

from typing import Dict, Optional, Type

import numpy as np

from config import WATER_SAMPLES_PER_TICK
from simulation.flow_fields import (
    run_water_fast,
    run_water_slow,
    run_water_proportional,
    run_water_fall_vector,
)
from simulation.surface import FlowReport, run_water_random
from world.grid import TerrainGrid


class FlowStrategy:
    """Base class for a water flow pass."""
    name = "base"

    def run(self, grid: TerrainGrid, rng: Optional[np.random.Generator] = None) -> FlowReport:
        raise NotImplementedError


class StochasticFlow(FlowStrategy):
    name = "stochastic"

    def __init__(self, num_samples: int = WATER_SAMPLES_PER_TICK):
        self.num_samples = num_samples

    def run(self, grid: TerrainGrid, rng: Optional[np.random.Generator] = None) -> FlowReport:
        return run_water_random(grid, self.num_samples, rng)


class SteepestDescentFlow(FlowStrategy):
    name = "steepest"

    def run(self, grid: TerrainGrid, rng: Optional[np.random.Generator] = None) -> FlowReport:
        return run_water_fast(grid)


class DiffusiveFlow(FlowStrategy):
    name = "diffusive"

    def run(self, grid: TerrainGrid, rng: Optional[np.random.Generator] = None) -> FlowReport:
        return run_water_slow(grid)


class ProportionalFlow(FlowStrategy):
    name = "proportional"

    def run(self, grid: TerrainGrid, rng: Optional[np.random.Generator] = None) -> FlowReport:
        return run_water_proportional(grid)


class FallVectorFlow(FlowStrategy):
    name = "fall_vector"

    def run(self, grid: TerrainGrid, rng: Optional[np.random.Generator] = None) -> FlowReport:
        return run_water_fall_vector(grid)


STRATEGIES: Dict[str, Type[FlowStrategy]] = {
    cls.name: cls
    for cls in (StochasticFlow, SteepestDescentFlow, DiffusiveFlow, ProportionalFlow, FallVectorFlow)
}


def get_strategy(name: str, **kwargs) -> FlowStrategy:
    """Instantiate a strategy by registry name.

    Raises:
        ValueError: Unknown name
    """
    try:
        cls = STRATEGIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown flow strategy {name!r}; choose from {', '.join(sorted(STRATEGIES))}"
        ) from None
    return cls(**kwargs)

# terrain_state/initialization.py
"""Terrain state initialization and world generation."""
from __future__ import annotations

from typing import Optional

import numpy as np

from config import GRID_WIDTH, GRID_HEIGHT, TerrainParameters
from simulation.strategies import get_strategy
from terrain_state.state import TerrainState
from world.generation import build_reference_terrain
from world.grid import TerrainGrid
from world.noise import NoiseFunction, wrap_noise


def build_empty_state(
    width: int = GRID_WIDTH,
    height: int = GRID_HEIGHT,
    parameters: Optional[TerrainParameters] = None,
    seed: Optional[int] = None,
    strategy: str = "stochastic",
) -> TerrainState:
    """Create a state over a zeroed grid with a full rain reservoir."""
    parameters = parameters if parameters is not None else TerrainParameters()
    kwargs = {"num_samples": parameters.water_samples_per_tick} if strategy == "stochastic" else {}

    return TerrainState(
        grid=TerrainGrid(width, height),
        parameters=parameters,
        rng=np.random.default_rng(seed),
        flow=get_strategy(strategy, **kwargs),
    )


def build_initial_state(
    width: int = GRID_WIDTH,
    height: int = GRID_HEIGHT,
    parameters: Optional[TerrainParameters] = None,
    seed: Optional[int] = None,
    strategy: str = "stochastic",
    noise: NoiseFunction = wrap_noise,
) -> TerrainState:
    """Create a new state with generated reference terrain.

    The same seed drives terrain generation and every later tick, so two
    states built with one seed evolve identically.
    """
    state = build_empty_state(width, height, parameters, seed, strategy)
    build_reference_terrain(state.grid, state.water_pool, rng=state.rng, noise=noise)
    return state

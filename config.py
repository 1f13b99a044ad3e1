# config.py
"""
Centralized simulation configuration for the erosion simulator.

This file contains high-level, cross-cutting constants.
Domain-specific constants are in:
- simulation/config.py (flow, erosion, mass movement tuning)
"""
from __future__ import annotations

from dataclasses import dataclass

# =============================================================================
# GRID
# =============================================================================
# Default grid resolution. Terrain generation samples noise per point, so
# build time grows with the cell count.
GRID_WIDTH = 64
GRID_HEIGHT = 64

# Reference toroidal address space: 10 bits per axis (1024×1024)
ADDRESS_BITS = 10
ADDRESS_PERIOD = 1 << ADDRESS_BITS   # 1024
ADDRESS_MASK = ADDRESS_PERIOD - 1    # 1023

# =============================================================================
# UNITS & SCALE
# =============================================================================
# Heights are stored in raw volume units. World-space vertical position of a
# point on the surface = height / WORLD_SCALE.
WORLD_SCALE = 4096.0

# =============================================================================
# WATER BUDGET & RAIN
# =============================================================================
TOTAL_WATER_BUDGET = 1024.0 * 1024.0 * 10.0   # Atmospheric reservoir over terrain lifetime
MAX_RAIN_PER_TICK = 1024.0 * 1024.0 * 0.01    # Cap on rain drawn per tick
RAIN_DROPS_PER_TICK = 25000                   # Random point drops the rain is split into
WATER_SAMPLES_PER_TICK = 50000                # Stochastic flow samples per tick

# =============================================================================
# PERSISTENCE
# =============================================================================
FILE_MAGIC = 0x54455231  # "TER1"


@dataclass
class TerrainParameters:
    """Tunable options recognised by the simulation driver."""
    total_water_budget: float = TOTAL_WATER_BUDGET
    max_rain_per_tick: float = MAX_RAIN_PER_TICK
    rain_drops_per_tick: int = RAIN_DROPS_PER_TICK
    water_samples_per_tick: int = WATER_SAMPLES_PER_TICK

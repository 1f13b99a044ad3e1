# world/__init__.py
"""
World module: the heightfield grid and everything that reads or builds it.

Provides:
- Cell storage and toroidal addressing (from grid.py)
- Wrapping noise source and transforms (from noise.py)
- Terrain generation (from generation.py)
- Height queries (from query.py)
- Binary snapshots (from persistence.py)
"""

# Grid
from world.grid import (
    CellArrays,
    TerrainGrid,
    torus_index,
    torus_x,
    torus_y,
)

# Noise
from world.noise import wrap_noise, absolute, square, clamp_offset

# Generation
from world.generation import (
    NoiseLayer,
    add_noise,
    add_discontinuous_noise,
    add_pow_noise,
    build_reference_terrain,
)

# Queries
from world.query import water_height_at, clamp_to_ground

# Persistence
from world.persistence import (
    write_terrain,
    read_terrain,
    save_terrain,
    load_terrain,
    terrain_to_bytes,
)

__all__ = [
    # Grid
    "CellArrays",
    "TerrainGrid",
    "torus_index",
    "torus_x",
    "torus_y",
    # Noise
    "wrap_noise",
    "absolute",
    "square",
    "clamp_offset",
    # Generation
    "NoiseLayer",
    "add_noise",
    "add_discontinuous_noise",
    "add_pow_noise",
    "build_reference_terrain",
    # Queries
    "water_height_at",
    "clamp_to_ground",
    # Persistence
    "write_terrain",
    "read_terrain",
    "save_terrain",
    "load_terrain",
    "terrain_to_bytes",
]

# terrain_state/__init__.py
"""Terrain state management module."""

from terrain_state.state import TerrainState
from terrain_state.initialization import build_empty_state, build_initial_state

__all__ = [
    'TerrainState',
    'build_empty_state',
    'build_initial_state',
]

"""Shared fixtures for the erosion simulator tests."""

import math

import numpy as np
import pytest

from world.grid import TerrainGrid


def wave_noise(s, t, width, height, seed_x, seed_y, scale):
    """Cheap deterministic stand-in for the OpenSimplex source, tileable on both axes."""
    fx = scale * width
    fy = scale * height
    return math.sin(2 * math.pi * (t * fx + seed_x)) * math.cos(2 * math.pi * (s * fy + seed_y))


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def flat_grid():
    """4x4 grid, everything zero."""
    return TerrainGrid(4, 4)


@pytest.fixture
def slope_grid():
    """4x4 grid whose bedrock rises eastward: hard = 10 * x."""
    grid = TerrainGrid(4, 4)
    for y in range(4):
        for x in range(4):
            grid.hard[grid.index(x, y)] = 10.0 * x
    return grid


@pytest.fixture
def rough_grid(rng):
    """16x16 grid with random relief, sediment and standing water."""
    grid = TerrainGrid(16, 16)
    grid.hard[:] = rng.uniform(0.0, 50.0, grid.size)
    grid.loose[:] = rng.uniform(0.0, 5.0, grid.size)
    grid.water[:] = rng.uniform(0.0, 3.0, grid.size)
    return grid


@pytest.fixture
def fake_noise():
    return wave_noise


class _ScriptedRng:
    """Generator stand-in that hands out a fixed sequence of integer draws."""

    def __init__(self, *draws):
        self._draws = [np.asarray(d, dtype=np.int64) for d in draws]

    def integers(self, low, high, size=None):
        return self._draws.pop(0)


@pytest.fixture
def scripted_rng():
    """Factory: scripted_rng(xs, ys) replays the given receiver coordinates."""
    return _ScriptedRng

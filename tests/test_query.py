"""Tests for height sampling."""

import pytest

from config import WORLD_SCALE
from world.grid import TerrainGrid
from world.query import clamp_to_ground, water_height_at


@pytest.fixture
def ramp():
    """4x4 grid, hard = x + 10 * y, one unit of water on (1, 0)."""
    grid = TerrainGrid(4, 4)
    for y in range(4):
        for x in range(4):
            grid.hard[grid.index(x, y)] = x + 10.0 * y
    grid.water[grid.index(1, 0)] = 1.0
    return grid


class TestWaterHeightAt:

    def test_cell_corner_is_cell_height(self, ramp):
        assert water_height_at(ramp, 0.5, 0.5) == pytest.approx(22.0)

    def test_includes_water(self, ramp):
        assert water_height_at(ramp, 0.25, 0.0) == pytest.approx(2.0)

    def test_bilinear_between_cells(self, ramp):
        # halfway between (2, 1) = 12 and (3, 1) = 13, and (2, 2) = 22 and (3, 2) = 23
        assert water_height_at(ramp, 0.625, 0.375) == pytest.approx(17.5)

    def test_wraps(self, ramp):
        assert water_height_at(ramp, 1.0, 1.0) == pytest.approx(water_height_at(ramp, 0.0, 0.0))
        assert water_height_at(ramp, -0.25, 0.0) == pytest.approx(3.0)
        # between the last column (3) and the wrapped first column (0)
        assert water_height_at(ramp, 0.875, 0.0) == pytest.approx(1.5)


class TestClampToGround:

    def test_replaces_vertical_component(self, ramp):
        x, up, z = clamp_to_ground(ramp, (0.5, 123.0, 0.5))
        assert (x, z) == (0.5, 0.5)
        assert up == pytest.approx(22.0 / WORLD_SCALE)

"""Tests for rain injection."""

import numpy as np
import pytest

from simulation.rain import add_rain, add_rain_random


class TestRain:

    def test_uniform_rain(self, flat_grid):
        add_rain(flat_grid, 32.0)
        assert np.all(flat_grid.water == 2.0)

    def test_single_drop_lands_in_one_cell(self, flat_grid, rng):
        targets = add_rain_random(flat_grid, 1.0, 1, rng)
        assert len(targets) == 1
        assert np.count_nonzero(flat_grid.water) == 1
        assert flat_grid.water[targets[0]] == 1.0

    def test_random_rain_conserves_total(self, rough_grid, rng):
        before = rough_grid.total_water()
        add_rain_random(rough_grid, 500.0, 2000, rng)
        assert rough_grid.total_water() == pytest.approx(before + 500.0, rel=1e-5)

    def test_repeated_targets_accumulate(self):
        from world.grid import TerrainGrid
        grid = TerrainGrid(1, 1)
        add_rain_random(grid, 10.0, 4, np.random.default_rng(0))
        assert grid.water[0] == pytest.approx(10.0)

    @pytest.mark.parametrize("amount,drops", [(0.0, 10), (5.0, 0), (-1.0, 3)])
    def test_nothing_to_drop(self, flat_grid, rng, amount, drops):
        targets = add_rain_random(flat_grid, amount, drops, rng)
        assert len(targets) == 0
        assert not flat_grid.water.any()

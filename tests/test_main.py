"""Tests for the tick driver and the command line."""

import numpy as np
import pytest

from config import GRID_WIDTH, TerrainParameters
from main import build_parser, main, modify_terrain, run, simulate_tick, survey_cell
from simulation.strategies import DiffusiveFlow
from terrain_state import build_empty_state, build_initial_state


@pytest.fixture
def small_params():
    return TerrainParameters(
        total_water_budget=100.0,
        max_rain_per_tick=30.0,
        rain_drops_per_tick=10,
        water_samples_per_tick=50,
    )


class TestSimulateTick:

    def test_rain_is_capped_and_drawn_from_budget(self, small_params):
        state = build_empty_state(8, 8, parameters=small_params, seed=1)
        rain = simulate_tick(state)
        assert rain == 30.0
        assert state.iterations == 1
        assert state.water_pool.atmospheric_reserve == 70.0
        assert state.grid.total_water() == pytest.approx(30.0, rel=1e-5)

    def test_budget_runs_dry(self, small_params):
        state = build_empty_state(8, 8, parameters=small_params, seed=1)
        rains = [simulate_tick(state) for _ in range(5)]
        assert rains == pytest.approx([30.0, 30.0, 30.0, 10.0, 0.0])
        assert state.water_pool.is_dry
        assert state.iterations == 5
        assert state.grid.total_water() == pytest.approx(100.0, rel=1e-5)

    def test_alias(self, small_params):
        state = build_empty_state(4, 4, parameters=small_params, seed=1)
        assert modify_terrain is simulate_tick
        assert run(state, 2) == pytest.approx(60.0)

    def test_mass_movement_and_strategy_options(self, small_params, fake_noise):
        state = build_initial_state(8, 8, parameters=small_params, seed=2,
                                    strategy="diffusive", noise=fake_noise)
        state.slump_enabled = True
        state.collapse_enabled = True
        solid = float(np.sum(state.grid.ground_level, dtype=np.float64))

        run(state, 3)

        assert isinstance(state.flow, DiffusiveFlow)
        assert float(np.sum(state.grid.ground_level, dtype=np.float64)) == pytest.approx(solid, rel=1e-5)

    def test_seeded_states_evolve_identically(self, small_params, fake_noise):
        a = build_initial_state(8, 8, parameters=small_params, seed=5, noise=fake_noise)
        b = build_initial_state(8, 8, parameters=small_params, seed=5, noise=fake_noise)
        run(a, 3)
        run(b, 3)
        np.testing.assert_array_equal(a.grid.water, b.grid.water)
        np.testing.assert_array_equal(a.grid.hard, b.grid.hard)

    def test_survey_cell_wraps(self, small_params):
        state = build_empty_state(4, 4, parameters=small_params)
        state.grid.water[state.grid.index(1, 2)] = 2.0
        info = survey_cell(state, 5, -2)
        assert (info["x"], info["y"]) == (1, 2)
        assert info["water"] == 2.0
        assert info["surface"] == pytest.approx(2.0)


class TestCommandLine:

    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        assert args.width == GRID_WIDTH == 64
        assert args.strategy == "stochastic"
        assert args.ticks == 10
        assert not args.slump

    def test_rejects_unknown_strategy(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--strategy", "teleport"])

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "run.bin"
        assert main(["--width", "8", "--height", "8", "--ticks", "2", "--seed", "1",
                     "--save", str(path), "--log-level", "WARNING"]) == 0
        assert path.stat().st_size == 12 + 8 * 8 * 16

        assert main(["--width", "8", "--height", "8", "--ticks", "1", "--load", str(path),
                     "--strategy", "proportional", "--log-format", "json"]) == 0

    def test_load_size_mismatch_fails(self, tmp_path):
        path = tmp_path / "run.bin"
        main(["--width", "8", "--height", "8", "--ticks", "0", "--seed", "1", "--save", str(path)])
        assert main(["--width", "16", "--height", "16", "--ticks", "1", "--load", str(path)]) == 1

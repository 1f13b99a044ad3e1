"""Tests for noise transforms and terrain generation."""

import numpy as np
import pytest

from world.generation import (
    HARD,
    LOOSE,
    NoiseLayer,
    accumulate_noise,
    add_discontinuous_noise,
    add_pow_noise,
    add_noise,
    apply_layer,
    build_reference_terrain,
)
from world.grid import TerrainGrid
from world.noise import absolute, clamp_offset, square, wrap_noise
from world_state import AtmosphericWaterPool


def constant(value):
    def noise(s, t, width, height, seed_x, seed_y, scale):
        return value
    return noise


def octave_weight_sum(octaves):
    return sum(1.0 / (2 ** j + 1) for j in range(1, octaves + 1))


class TestTransforms:

    def test_absolute_and_square(self):
        assert absolute(-0.5) == 0.5
        assert square(-0.5) == 0.25

    def test_clamp_offset(self):
        detail = clamp_offset(0.1, 10.0)
        assert detail(0.0) == 0.0
        assert detail(1.0) == pytest.approx(1.9)
        assert detail(10.0) == pytest.approx(9.9)


class TestWrapNoise:

    def test_seamless_on_both_axes(self):
        for u in (0.0, 0.3, 0.77):
            assert wrap_noise(0.0, u, 64, 64, 0.2, 0.4, 0.05) == pytest.approx(
                wrap_noise(1.0, u, 64, 64, 0.2, 0.4, 0.05), abs=1e-9)
            assert wrap_noise(u, 0.0, 64, 64, 0.2, 0.4, 0.05) == pytest.approx(
                wrap_noise(u, 1.0, 64, 64, 0.2, 0.4, 0.05), abs=1e-9)

    def test_bounded(self):
        values = [wrap_noise(s / 7, t / 7, 32, 32, 0.5, 0.5, 0.1) for s in range(7) for t in range(7)]
        assert max(abs(v) for v in values) <= 1.5
        assert len(set(values)) > 1


class TestAddNoise:

    def test_octave_weights(self, flat_grid, rng):
        out = accumulate_noise(flat_grid, 3, 0.1, 0.0, 0.0, noise=constant(1.0))
        assert out.shape == (4, 4)
        np.testing.assert_allclose(out, octave_weight_sum(3))

    def test_amplitude_and_target(self, flat_grid, rng):
        add_noise(flat_grid, 2, 0.1, 10.0, target=LOOSE, noise=constant(1.0), rng=rng)
        np.testing.assert_allclose(flat_grid.loose, 10.0 * octave_weight_sum(2), rtol=1e-6)
        assert not flat_grid.hard.any()

    def test_transform_applies_per_weighted_octave(self, flat_grid, rng):
        add_noise(flat_grid, 2, 0.1, 1.0, transform=square, noise=constant(-1.0), rng=rng)
        expected = sum((1.0 / (2 ** j + 1)) ** 2 for j in (1, 2))
        np.testing.assert_allclose(flat_grid.hard, expected, rtol=1e-6)

    def test_post_transform_applies_to_sum(self, flat_grid, rng):
        add_noise(flat_grid, 2, 0.1, 2.0, post_transform=square, noise=constant(-1.0), rng=rng)
        np.testing.assert_allclose(flat_grid.hard, 2.0 * octave_weight_sum(2) ** 2, rtol=1e-6)

    def test_unknown_target(self, flat_grid, rng):
        with pytest.raises(ValueError, match="Unknown noise target"):
            add_noise(flat_grid, 1, 0.1, 1.0, target="magma", noise=constant(1.0), rng=rng)

    def test_discontinuous_noise_makes_plateaus(self, flat_grid, rng, fake_noise):
        add_discontinuous_noise(flat_grid, 2, 0.25, 5.0, threshold=0.0, noise=fake_noise, rng=rng)
        assert set(np.unique(flat_grid.hard).tolist()) <= {0.0, 5.0}

    def test_pow_noise_raises_sum_before_amplitude(self, flat_grid, rng):
        add_pow_noise(flat_grid, 2, 0.1, 3.0, 2.0, noise=constant(-1.0), rng=rng)
        np.testing.assert_allclose(flat_grid.hard, 3.0 * octave_weight_sum(2) ** 2, rtol=1e-6)
        assert not flat_grid.loose.any()

    def test_pow_noise_post_transform(self, flat_grid, rng):
        add_pow_noise(flat_grid, 1, 0.1, 2.0, 3.0, post_transform=absolute,
                      noise=constant(-1.0), rng=rng)
        np.testing.assert_allclose(flat_grid.hard, 2.0 / 27.0, rtol=1e-6)

    def test_pow_noise_fractional_power_floors_negative_sums(self, flat_grid, rng):
        add_pow_noise(flat_grid, 2, 0.1, 5.0, 0.5, noise=constant(-1.0), rng=rng)
        assert not flat_grid.hard.any()

    def test_apply_layer_scales_frequency_by_width(self, rng):
        seen = []

        def recording(s, t, width, height, seed_x, seed_y, scale):
            seen.append(scale)
            return 0.0

        grid = TerrainGrid(8, 2)
        apply_layer(grid, NoiseLayer(1, 4.0, 1.0, target=HARD), noise=recording, rng=rng)
        # octave 1 samples at twice the base frequency
        assert seen and all(scale == pytest.approx(2 * 4.0 / 8) for scale in seen)


class TestReferenceTerrain:

    def test_builds_normalised_terrain(self, fake_noise, rng):
        grid = TerrainGrid(8, 8)
        grid.water[:] = 3.0
        pool = AtmosphericWaterPool(100.0, 100.0)
        pool.rain(60.0)

        build_reference_terrain(grid, pool, rng=rng, noise=fake_noise)

        assert grid.hard.min() == 0.0
        assert grid.hard.max() > 0.0
        assert grid.loose.min() > 0.0
        assert not grid.water.any()
        assert pool.atmospheric_reserve == 100.0

    def test_seed_reproducible(self, fake_noise):
        a, b = TerrainGrid(8, 8), TerrainGrid(8, 8)
        build_reference_terrain(a, rng=np.random.default_rng(3), noise=fake_noise)
        build_reference_terrain(b, rng=np.random.default_rng(3), noise=fake_noise)
        np.testing.assert_array_equal(a.hard, b.hard)
        np.testing.assert_array_equal(a.loose, b.loose)

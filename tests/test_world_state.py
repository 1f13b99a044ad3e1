"""Tests for the atmospheric water budget."""

import pytest

from config import MAX_RAIN_PER_TICK, TOTAL_WATER_BUDGET
from world_state import AtmosphericWaterPool


class TestAtmosphericWaterPool:

    def test_defaults(self):
        pool = AtmosphericWaterPool()
        assert pool.total_budget == TOTAL_WATER_BUDGET
        assert pool.atmospheric_reserve == TOTAL_WATER_BUDGET
        assert not pool.is_dry

    def test_rain_draws_requested_amount(self):
        pool = AtmosphericWaterPool(100.0, 100.0)
        assert pool.rain(30.0) == 30.0
        assert pool.atmospheric_reserve == 70.0
        assert pool.rained_total == 30.0

    def test_reserve_never_increases_and_floors_at_zero(self):
        pool = AtmosphericWaterPool(100.0, 100.0)
        previous = pool.atmospheric_reserve
        drawn = 0.0
        for _ in range(10):
            drawn += pool.rain(15.0)
            assert pool.atmospheric_reserve <= previous
            assert pool.atmospheric_reserve >= 0.0
            previous = pool.atmospheric_reserve
        assert drawn == pytest.approx(100.0)
        assert pool.is_dry
        assert pool.rain(15.0) == 0.0

    def test_non_positive_request_is_noop(self):
        pool = AtmosphericWaterPool(10.0, 10.0)
        assert pool.rain(0.0) == 0.0
        assert pool.rain(-5.0) == 0.0
        assert pool.atmospheric_reserve == 10.0

    def test_per_tick_cap(self):
        pool = AtmosphericWaterPool()
        assert pool.rain(MAX_RAIN_PER_TICK) == pytest.approx(MAX_RAIN_PER_TICK)
        assert pool.atmospheric_reserve == pytest.approx(TOTAL_WATER_BUDGET - MAX_RAIN_PER_TICK)

    def test_reset(self):
        pool = AtmosphericWaterPool(50.0, 50.0)
        pool.rain(50.0)
        pool.reset()
        assert pool.atmospheric_reserve == 50.0
        assert pool.rained_total == 0.0
        pool.reset(total_budget=80.0)
        assert pool.atmospheric_reserve == 80.0

#!/usr/bin/env python3
"""
Flow strategy benchmark.

Generates one terrain, rains on it, then times repeated passes of every
registered flow strategy on its own copy of that terrain. Reports per-pass
timing, water moved and peak traced memory.

Usage:
    python -m performance.benchmarks.flow --size 128 --passes 20 --seed 1
"""
from __future__ import annotations

import argparse
import copy
import tracemalloc
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from logging_config import configure_logging
from performance.benchmarks.utils import (
    Timer,
    TimeStats,
    format_memory_mb,
    format_time_ms,
    print_section_header,
    print_table,
)
from simulation.rain import add_rain
from simulation.strategies import STRATEGIES, get_strategy
from world.generation import build_reference_terrain
from world.grid import TerrainGrid
from world.noise import NoiseFunction, wrap_noise

# Enough standing water that every strategy has work to do
BENCHMARK_RAIN_PER_CELL = 2.0


@dataclass
class StrategyResult:
    name: str
    times: List[float]
    water_moved: float
    peak_memory: int

    @property
    def stats(self) -> TimeStats:
        return TimeStats.from_samples(self.times)


def prepare_grid(size: int, seed: Optional[int], noise: NoiseFunction = wrap_noise) -> TerrainGrid:
    grid = TerrainGrid(size, size)
    build_reference_terrain(grid, rng=np.random.default_rng(seed), noise=noise)
    add_rain(grid, BENCHMARK_RAIN_PER_CELL * grid.size)
    return grid


def benchmark_strategy(name: str, grid: TerrainGrid, passes: int, seed: Optional[int]) -> StrategyResult:
    """Time passes runs of one strategy on a private copy of grid."""
    work = copy.deepcopy(grid)
    strategy = get_strategy(name)
    rng = np.random.default_rng(seed)

    times: List[float] = []
    moved = 0.0
    tracemalloc.start()
    try:
        for _ in range(passes):
            with Timer() as t:
                report = strategy.run(work, rng)
            times.append(t.elapsed)
            moved += report.water_moved
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()

    return StrategyResult(name, times, moved, peak)


def run_benchmark(
    size: int = 128,
    passes: int = 10,
    seed: Optional[int] = None,
    noise: NoiseFunction = wrap_noise,
) -> Dict[str, StrategyResult]:
    grid = prepare_grid(size, seed, noise)
    return {name: benchmark_strategy(name, grid, passes, seed) for name in STRATEGIES}


def print_report(results: Dict[str, StrategyResult], size: int) -> None:
    print_section_header(f"FLOW STRATEGY BENCHMARK ({size}x{size} cells)")
    columns = [("Strategy", 14), ("Mean", 12), ("Median", 12), ("Max", 12),
               ("Water moved", 16), ("Peak mem", 10)]
    rows = []
    for result in results.values():
        stats = result.stats
        rows.append([
            result.name,
            format_time_ms(stats.mean),
            format_time_ms(stats.median),
            format_time_ms(stats.max),
            f"{result.water_moved:.1f}",
            format_memory_mb(result.peak_memory),
        ])
    print_table(columns, rows)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Time every flow strategy on one terrain.")
    parser.add_argument("--size", type=int, default=128)
    parser.add_argument("--passes", type=int, default=10)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    configure_logging("WARNING")
    print_report(run_benchmark(args.size, args.passes, args.seed), args.size)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

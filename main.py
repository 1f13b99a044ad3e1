# main.py
"""
Headless hydraulic erosion simulator.

Builds (or loads) a heightfield, then runs ticks of rain, water flow and
optional mass movement. Each tick draws rain from a finite atmospheric
reservoir, scatters it as random drops and lets the configured flow
strategy move water and sediment downhill.
"""
from __future__ import annotations

import argparse
from typing import List, Optional

import structlog

from config import GRID_WIDTH, GRID_HEIGHT
from errors import TerrainFileError
from logging_config import configure_logging
from simulation.mass_movement import collapse, slump
from simulation.rain import add_rain_random
from simulation.strategies import STRATEGIES
from terrain_state import TerrainState, build_empty_state, build_initial_state
from world.query import water_height_at

logger = structlog.get_logger(__name__)


def simulate_tick(state: TerrainState) -> float:
    """Run one terrain tick.

    Rain (capped at max_rain_per_tick) is drawn from the reservoir while any
    remains and dropped as rain_drops_per_tick random drops; then one flow
    pass runs; then the optional mass-movement samplers.

    Returns:
        Rain drawn from the reservoir this tick
    """
    params = state.parameters
    rain = 0.0

    if not state.water_pool.is_dry:
        rain = state.water_pool.rain(params.max_rain_per_tick)
        add_rain_random(state.grid, rain, params.rain_drops_per_tick, state.rng)

    report = state.flow.run(state.grid, state.rng)

    if state.slump_enabled:
        slump(state.grid, rng=state.rng)
    if state.collapse_enabled:
        collapse(state.grid, rng=state.rng)

    state.iterations += 1
    logger.debug(
        "tick",
        iteration=state.iterations,
        rain=rain,
        reserve=state.water_pool.atmospheric_reserve,
        water_moved=report.water_moved,
    )
    return rain


# Same operation under the name the terrain editor uses
modify_terrain = simulate_tick


def run(state: TerrainState, ticks: int) -> float:
    """Run several ticks. Returns total rain drawn."""
    total = 0.0
    for _ in range(ticks):
        total += simulate_tick(state)
    return total


def show_status(state: TerrainState) -> None:
    logger.info("status", **state.summary())


def survey_cell(state: TerrainState, x: int, y: int) -> dict:
    """Describe one cell (wrapped) for status output."""
    grid = state.grid
    i = grid.index(x, y)
    return {
        "x": grid.cell_x(i),
        "y": grid.cell_y(i),
        "hard": float(grid.hard[i]),
        "loose": float(grid.loose[i]),
        "water": float(grid.water[i]),
        "surface": water_height_at(grid, x / grid.width, y / grid.height),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run the hydraulic erosion simulator headless.",
        epilog="Building a fresh terrain samples noise once per octave per cell; "
               "large grids take minutes before the first tick.",
    )
    parser.add_argument("--width", type=int, default=GRID_WIDTH, help="Grid width in cells")
    parser.add_argument("--height", type=int, default=GRID_HEIGHT, help="Grid height in cells")
    parser.add_argument("--ticks", type=int, default=10, help="Number of ticks to run")
    parser.add_argument("--seed", type=int, default=None, help="Seed for terrain and rain")
    parser.add_argument("--load", metavar="FILE", help="Start from a saved snapshot")
    parser.add_argument("--save", metavar="FILE", help="Write a snapshot after the run")
    parser.add_argument("--slump", action="store_true", help="Slump loose material every tick")
    parser.add_argument("--collapse", action="store_true", help="Collapse steep rock every tick")
    parser.add_argument("--strategy", choices=sorted(STRATEGIES), default="stochastic",
                        help="Water flow strategy")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    parser.add_argument("--log-format", choices=("plain", "json"), default="plain")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_format)

    if args.load:
        state = build_empty_state(args.width, args.height, seed=args.seed, strategy=args.strategy)
        try:
            state.load(args.load)
        except TerrainFileError as exc:
            logger.error("startup_failed", error=str(exc))
            return 1
    else:
        state = build_initial_state(args.width, args.height, seed=args.seed, strategy=args.strategy)

    state.slump_enabled = args.slump
    state.collapse_enabled = args.collapse

    rain = run(state, args.ticks)
    logger.info("run_complete", ticks=args.ticks, rain=rain)
    show_status(state)

    if args.save:
        state.save(args.save)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

# simulation/__init__.py
"""Simulation modules for the erosion simulator.

- rain: Rain injection (uniform and random drops)
- surface: Stochastic surface water flow (per-tick production pass)
- flow_fields: Vectorized full-grid flow strategies
- strategies: Named FlowStrategy registry over all of the above
- mass_movement: Slumping, rock collapse and point collapses
"""

from simulation.rain import add_rain, add_rain_random
from simulation.surface import FlowReport, run_water_random
from simulation.strategies import FlowStrategy, STRATEGIES, get_strategy
from simulation.mass_movement import slump, collapse, collapse_from, collapse_to

__all__ = [
    "add_rain",
    "add_rain_random",
    "FlowReport",
    "run_water_random",
    "FlowStrategy",
    "STRATEGIES",
    "get_strategy",
    "slump",
    "collapse",
    "collapse_from",
    "collapse_to",
]

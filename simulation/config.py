# simulation/config.py
"""
Configuration constants for the simulation domain.
Includes flow, erosion and mass-movement tuning values.
"""
from __future__ import annotations

# =============================================================================
# WATER PHYSICS
# =============================================================================
ACTIVE_WATER_THRESHOLD = 1e-4     # Cells above this join the stochastic sample list
SAMPLE_MIN_WATER = 1e-6           # Sampled cell with less than this is skipped
FULL_GRID_MIN_WATER = 1e-5        # Full-grid strategies ignore cells below this

STOCHASTIC_EQUALISE_FRACTION = 0.5   # Share of the height gap moved per sample
DIFFUSIVE_DAMPING = 0.1              # Share of the movable gap moved per pass
PROPORTIONAL_FLOW_FRACTION = 0.3     # Share of total downhill drop moved per pass
FALL_VECTOR_FLOW_FRACTION = 0.1      # Share of held water moved along the fall vector

# =============================================================================
# EROSION & SEDIMENT
# =============================================================================
EROSION_WATER_RATIO = 0.25        # Solid moved per unit of water moved
EROSION_SLOPE_CAP = 0.8           # Never move more than this share of the ground drop
LOOSE_AVAILABLE_THRESHOLD = 1e-4  # Below this a cell is bare rock
HARD_EROSION_RATE = 0.2           # Hard erodes at 20% of the loose rate
HARD_TO_LOOSE_EXPANSION = 1.0     # Loose deposited per unit of hard destroyed

# =============================================================================
# MASS MOVEMENT
# =============================================================================
DIAGONAL_FACTOR = 0.707           # Weight of diagonal neighbours in point collapses

SLUMP_THRESHOLD = 4.0             # Height difference loose material tolerates
SLUMP_AMOUNT = 0.25               # Share of the excess moved
SLUMP_SAMPLES = 50000

COLLAPSE_THRESHOLD = 40.0         # Height difference bare rock tolerates
COLLAPSE_AMOUNT = 0.1
COLLAPSE_LOOSE_THRESHOLD = 1.0    # Donors with more loose cover than this are stable
COLLAPSE_SAMPLES = 20000

COLLAPSE_FROM_LOOSE_SHARE = 0.2   # Centre gives at most this share of its loose per neighbour
COLLAPSE_TO_LOOSE_SHARE = 0.25    # Neighbours give at most this share of their loose

# world/noise.py
"""
Tileable noise sampling and noise transforms.

The initializer only depends on the NoiseFunction contract:

    noise(s, t, width, height, seed_x, seed_y, scale) -> float in ~[-1, 1]

where s and t are the normalised row/column coordinates (y/height, x/width).
The default implementation maps the (s, t) square onto a torus in 4-D and
samples OpenSimplex noise there, so the result wraps seamlessly on both axes
exactly like the grid does.
"""
from __future__ import annotations

import math
from functools import lru_cache
from typing import Callable

from opensimplex import OpenSimplex

from utils import clamp

NoiseFunction = Callable[[float, float, float, float, float, float, float], float]
Transform = Callable[[float], float]

TWO_PI = 2.0 * math.pi

# Seeds in [0, 1) are spread over this much noise space
SEED_OFFSET_SCALE = 1000.0


@lru_cache(maxsize=8)
def _generator(seed: int) -> OpenSimplex:
    return OpenSimplex(seed=seed)


def wrap_noise(
    s: float,
    t: float,
    width: float,
    height: float,
    seed_x: float,
    seed_y: float,
    scale: float,
    seed: int = 0,
) -> float:
    """Sample seamless noise at normalised coordinates (s, t).

    Args:
        s: Row coordinate in [0, 1) (y / height)
        t: Column coordinate in [0, 1) (x / width)
        width, height: Physical grid size; with scale gives features per cell
        seed_x, seed_y: Offsets in [0, 1) decorrelating separate layers
        scale: Spatial frequency in features per cell
        seed: OpenSimplex permutation seed

    Returns:
        Noise value in roughly [-1, 1]
    """
    # Circumference of each circle = size * scale, so one feature per 1/scale cells
    radius_x = width * scale / TWO_PI
    radius_y = height * scale / TWO_PI
    angle_t = t * TWO_PI
    angle_s = s * TWO_PI

    ox = seed_x * SEED_OFFSET_SCALE
    oy = seed_y * SEED_OFFSET_SCALE

    return _generator(seed).noise4(
        ox + radius_x * math.cos(angle_t),
        ox + radius_x * math.sin(angle_t),
        oy + radius_y * math.cos(angle_s),
        oy + radius_y * math.sin(angle_s),
    )


# =============================================================================
# Transforms
# =============================================================================

def absolute(h: float) -> float:
    """Fold noise about zero, creating creases along the zero set."""
    return abs(h)


def square(h: float) -> float:
    """Sharpen peaks and flatten lows."""
    return h * h


def clamp_offset(low: float = 0.1, high: float = 10.0) -> Transform:
    """Build clamp(2h^2, low, high) - low.

    Restricts added roughness to [0, high - low] with the floor at zero.
    """
    def transform(h: float) -> float:
        return clamp(h * h * 2.0, low, high) - low
    return transform


# world/generation.py
"""Noise-seeded terrain generation.

Builds the starting heightfield by layering fractal noise into the hard and
loose fields of a TerrainGrid. Each layer is a NoiseLayer: octave count,
base frequency, amplitude and an optional pre/post transform pair. Octave j
(1-based) samples at frequency * 2**j with weight 1 / (2**j + 1).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

import numpy as np
import structlog

from world.grid import TerrainGrid
from world.noise import NoiseFunction, Transform, absolute, clamp_offset, square, wrap_noise

if TYPE_CHECKING:
    from world_state import AtmosphericWaterPool

logger = structlog.get_logger(__name__)

HARD = "hard"
LOOSE = "loose"

# Uniform sediment sheet laid before loose detail noise
BASE_LOOSE_DEPTH = 15.0


@dataclass(frozen=True)
class NoiseLayer:
    """One fractal noise contribution to the heightfield.

    frequency is in features per grid width; it is divided by the grid width
    when the layer is applied so the same layer list works at any size.
    """
    octaves: int
    frequency: float
    amplitude: float
    transform: Optional[Transform] = None
    post_transform: Optional[Transform] = None
    target: str = HARD


# =============================================================================
# REFERENCE TERRAIN
# =============================================================================
# Broad relief, two ridge layers, two clamped detail layers, then sediment.

DETAIL = clamp_offset(0.1, 10.0)

REFERENCE_LAYERS: List[NoiseLayer] = [
    NoiseLayer(6, 0.9, 1000.0),
    NoiseLayer(10, 1.43, 800.0, absolute, square),
    NoiseLayer(8, 3.7, 400.0, square, square),
    NoiseLayer(10, 7.7, 30.0, absolute, DETAIL),
    NoiseLayer(5, 37.7, 10.0, absolute, DETAIL),
]

REFERENCE_LOOSE_LAYERS: List[NoiseLayer] = [
    NoiseLayer(5, 17.7, 10.0, target=LOOSE),
]


def _field(grid: TerrainGrid, target: str) -> np.ndarray:
    if target == HARD:
        return grid.hard
    if target == LOOSE:
        return grid.loose
    raise ValueError(f"Unknown noise target '{target}' (expected '{HARD}' or '{LOOSE}')")


def accumulate_noise(
    grid: TerrainGrid,
    octaves: int,
    scale: float,
    seed_x: float,
    seed_y: float,
    transform: Optional[Transform] = None,
    noise: NoiseFunction = wrap_noise,
) -> np.ndarray:
    """Sum weighted octaves of noise for every cell.

    Returns:
        Array of shape (height, width), float64
    """
    width, height = grid.width, grid.height
    frequencies = [scale * (1 << j) for j in range(1, octaves + 1)]
    weights = [1.0 / ((1 << j) + 1) for j in range(1, octaves + 1)]

    out = np.zeros((height, width), dtype=np.float64)
    for y in range(height):
        s = y / height
        row = out[y]
        for x in range(width):
            t = x / width
            h = 0.0
            for freq, weight in zip(frequencies, weights):
                sample = noise(s, t, float(width), float(height), seed_x, seed_y, freq) * weight
                h += transform(sample) if transform is not None else sample
            row[x] = h
    return out


def add_noise(
    grid: TerrainGrid,
    octaves: int,
    scale: float,
    amplitude: float,
    transform: Optional[Transform] = None,
    post_transform: Optional[Transform] = None,
    target: str = HARD,
    noise: NoiseFunction = wrap_noise,
    rng: Optional[np.random.Generator] = None,
) -> None:
    """Add one layer of fractal noise into the hard or loose field.

    Args:
        grid: Terrain to modify
        octaves: Number of octaves (frequency doubles each octave)
        scale: Base spatial frequency in features per cell
        amplitude: Final multiplier
        transform: Applied to each weighted octave sample before summing
        post_transform: Applied to the summed value before scaling
        target: "hard" or "loose"
        noise: Tileable noise function
        rng: Source of the per-layer seed offsets
    """
    field = _field(grid, target)
    rng = rng if rng is not None else np.random.default_rng()
    seed_x, seed_y = (float(v) for v in rng.random(2))

    h = accumulate_noise(grid, octaves, scale, seed_x, seed_y, transform, noise)
    if post_transform is not None:
        h = np.vectorize(post_transform, otypes=[np.float64])(h)

    field += (h * amplitude).astype(np.float32).ravel()


def add_pow_noise(
    grid: TerrainGrid,
    octaves: int,
    scale: float,
    amplitude: float,
    power: float,
    post_transform: Optional[Transform] = None,
    noise: NoiseFunction = wrap_noise,
    rng: Optional[np.random.Generator] = None,
) -> None:
    """Add post_transform(h ** power * amplitude) into hard.

    h is the plain octave sum. With a fractional power, negative sums are
    treated as zero.
    """
    rng = rng if rng is not None else np.random.default_rng()
    seed_x, seed_y = (float(v) for v in rng.random(2))

    h = accumulate_noise(grid, octaves, scale, seed_x, seed_y, None, noise)
    if not float(power).is_integer():
        h = np.maximum(h, 0.0)
    h = np.power(h, power) * amplitude
    if post_transform is not None:
        h = np.vectorize(post_transform, otypes=[np.float64])(h)

    grid.hard += h.astype(np.float32).ravel()


def add_discontinuous_noise(
    grid: TerrainGrid,
    octaves: int,
    scale: float,
    amplitude: float,
    threshold: float,
    noise: NoiseFunction = wrap_noise,
    rng: Optional[np.random.Generator] = None,
) -> None:
    """Raise hard by amplitude wherever amplitude-weighted noise exceeds threshold.

    Produces flat-topped plateaus with vertical edges.
    """
    rng = rng if rng is not None else np.random.default_rng()
    seed_x, seed_y = (float(v) for v in rng.random(2))

    h = accumulate_noise(grid, octaves, scale, seed_x, seed_y, None, noise) * amplitude
    grid.hard += np.where(h > threshold, amplitude, 0.0).astype(np.float32).ravel()


def apply_layer(
    grid: TerrainGrid,
    layer: NoiseLayer,
    noise: NoiseFunction = wrap_noise,
    rng: Optional[np.random.Generator] = None,
) -> None:
    """Apply a NoiseLayer, converting its frequency to per-cell units."""
    add_noise(
        grid,
        layer.octaves,
        layer.frequency / grid.width,
        layer.amplitude,
        layer.transform,
        layer.post_transform,
        layer.target,
        noise=noise,
        rng=rng,
    )


def build_reference_terrain(
    grid: TerrainGrid,
    water_pool: Optional["AtmosphericWaterPool"] = None,
    rng: Optional[np.random.Generator] = None,
    noise: NoiseFunction = wrap_noise,
) -> None:
    """Build the standard starting terrain in place.

    Clears the grid, layers the reference noise, lays sediment, refills the
    atmospheric budget and normalises the bedrock floor to zero.
    """
    rng = rng if rng is not None else np.random.default_rng()

    grid.clear()

    for layer in REFERENCE_LAYERS:
        apply_layer(grid, layer, noise=noise, rng=rng)

    grid.add_loose_material(BASE_LOOSE_DEPTH)
    for layer in REFERENCE_LOOSE_LAYERS:
        apply_layer(grid, layer, noise=noise, rng=rng)

    if water_pool is not None:
        water_pool.reset()

    grid.set_base_level()

    logger.info(
        "terrain_built",
        width=grid.width,
        height=grid.height,
        max_hard=float(grid.hard.max()),
        mean_loose=float(grid.loose.mean()),
    )

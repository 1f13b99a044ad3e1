# world/persistence.py
"""Binary terrain snapshots.

Layout (little-endian, no version field):

    int32   magic  (FILE_MAGIC)
    int32   width
    int32   height
    width*height records of float32 hard, loose, water, delta_height

Records are written in flat index order (index 0..N-1). A load validates the
header and the body length before a single cell is overwritten.
"""
from __future__ import annotations

import struct
from pathlib import Path
from typing import BinaryIO, Union

import numpy as np
import structlog

from config import FILE_MAGIC
from errors import DimensionMismatchError, FormatError
from world.grid import TerrainGrid

logger = structlog.get_logger(__name__)

HEADER = struct.Struct("<iii")
RECORD_DTYPE = np.dtype("<f4")
FIELDS_PER_CELL = 4

PathLike = Union[str, Path]


def terrain_to_bytes(grid: TerrainGrid) -> bytes:
    """Serialise the grid into the snapshot layout."""
    records = np.empty((grid.size, FIELDS_PER_CELL), dtype=RECORD_DTYPE)
    records[:, 0] = grid.hard
    records[:, 1] = grid.loose
    records[:, 2] = grid.water
    records[:, 3] = grid.delta_height
    return HEADER.pack(FILE_MAGIC, grid.width, grid.height) + records.tobytes()


def write_terrain(grid: TerrainGrid, stream: BinaryIO) -> None:
    stream.write(terrain_to_bytes(grid))


def read_terrain(grid: TerrainGrid, stream: BinaryIO) -> None:
    """Load a snapshot from an open binary stream into grid.

    Raises:
        FormatError: Wrong magic constant or truncated data
        DimensionMismatchError: Stored size differs from the grid's
    """
    header = stream.read(HEADER.size)
    if len(header) < HEADER.size:
        raise FormatError("Not a terrain file (truncated header)")

    magic, width, height = HEADER.unpack(header)
    if magic != FILE_MAGIC:
        raise FormatError(f"Not a terrain file (magic 0x{magic & 0xFFFFFFFF:08X})")

    if width != grid.width or height != grid.height:
        raise DimensionMismatchError((grid.width, grid.height), (width, height))

    expected = grid.size * FIELDS_PER_CELL * RECORD_DTYPE.itemsize
    body = stream.read(expected)
    if len(body) < expected:
        raise FormatError(f"Truncated terrain body: {len(body)} of {expected} bytes")

    records = np.frombuffer(body, dtype=RECORD_DTYPE).reshape(grid.size, FIELDS_PER_CELL)
    grid.hard[:] = records[:, 0]
    grid.loose[:] = records[:, 1]
    grid.water[:] = records[:, 2]
    grid.delta_height[:] = records[:, 3]


def save_terrain(grid: TerrainGrid, path: PathLike) -> None:
    """Write a snapshot to path, replacing any existing file."""
    with open(path, "wb") as fh:
        write_terrain(grid, fh)
    logger.info("terrain_saved", path=str(path), width=grid.width, height=grid.height)


def load_terrain(grid: TerrainGrid, path: PathLike) -> None:
    """Read a snapshot from path into grid (see read_terrain)."""
    with open(path, "rb") as fh:
        try:
            read_terrain(grid, fh)
        except (FormatError, DimensionMismatchError) as exc:
            logger.warning("terrain_load_failed", path=str(path), error=str(exc))
            raise
    logger.info("terrain_loaded", path=str(path), width=grid.width, height=grid.height)

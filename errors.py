"""
Custom exceptions for the erosion simulator.

The simulation algorithms themselves never raise: empty water lists, flat
neighbourhoods and bare rock are all silent no-ops. Only snapshot loading
has failure modes worth naming.

Exception Hierarchy:
    TerrainError (base)
    └── TerrainFileError
        ├── FormatError
        └── DimensionMismatchError
"""
from __future__ import annotations

from typing import Tuple


class TerrainError(Exception):
    """Base exception for all terrain simulation errors."""
    pass


class TerrainFileError(TerrainError):
    """Base exception for snapshot read problems."""
    pass


class FormatError(TerrainFileError):
    """Raised when a snapshot has the wrong magic constant or is truncated."""
    pass


class DimensionMismatchError(TerrainFileError):
    """
    Raised when a snapshot's stored size differs from the live grid.

    Attributes:
        expected: (width, height) of the live grid
        found: (width, height) stored in the file
    """

    def __init__(self, expected: Tuple[int, int], found: Tuple[int, int]):
        super().__init__(
            f"Terrain size {found[0]}x{found[1]} did not match "
            f"generator size {expected[0]}x{expected[1]}"
        )
        self.expected = expected
        self.found = found

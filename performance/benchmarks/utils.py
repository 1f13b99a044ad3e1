"""Shared timing and report helpers for the benchmarks."""
from __future__ import annotations

import time
from dataclasses import dataclass
from statistics import mean, median, stdev
from typing import List, Tuple


class Timer:
    """Context manager for timing code blocks."""

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed = time.perf_counter() - self.start


# =============================================================================
# Statistics
# =============================================================================

@dataclass
class TimeStats:
    """Summary of repeated timings, in seconds."""
    mean: float = 0.0
    median: float = 0.0
    stdev: float = 0.0
    min: float = 0.0
    max: float = 0.0

    @classmethod
    def from_samples(cls, times: List[float]) -> "TimeStats":
        if not times:
            return cls()
        return cls(
            mean=mean(times),
            median=median(times),
            stdev=stdev(times) if len(times) > 1 else 0.0,
            min=min(times),
            max=max(times),
        )


# =============================================================================
# Formatting
# =============================================================================

def format_time_ms(seconds: float) -> str:
    """Format time in milliseconds: '12.34ms'"""
    return f"{seconds * 1000:.2f}ms"


def format_memory_mb(bytes_: int) -> str:
    """Format memory in megabytes: '123.4 MB'"""
    return f"{bytes_ / (1024 * 1024):.1f} MB"


def print_section_header(title: str, width: int = 80):
    print("\n" + "=" * width)
    print(title)
    print("=" * width)


def print_table(columns: List[Tuple[str, int]], rows: List[List[str]]):
    """Print a left-aligned table: column (name, width) pairs, then rows."""
    header = " ".join(f"{col:<{width}}" for col, width in columns)
    print(header)
    print("-" * len(header))
    for values in rows:
        print(" ".join(f"{val:<{width}}" for val, (_, width) in zip(values, columns)))

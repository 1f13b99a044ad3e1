# world_state.py
"""Global world state tracking for conservation of water.

Rain is not created from nothing: every drop injected into the terrain is
drawn from a finite atmospheric reservoir that is refilled only when the
terrain is rebuilt or reloaded.
"""
from __future__ import annotations

from dataclasses import dataclass

from config import TOTAL_WATER_BUDGET


@dataclass
class AtmosphericWaterPool:
    """Finite rainfall source over the terrain's lifetime.

    - Rain draws from atmospheric_reserve, never below zero
    - reset() restores the reserve to total_budget (terrain build, load)
    """
    total_budget: float = TOTAL_WATER_BUDGET
    atmospheric_reserve: float = TOTAL_WATER_BUDGET
    rained_total: float = 0.0   # Sum of all rain drawn since the last reset

    def rain(self, amount: float) -> float:
        """Rain draws from atmospheric reserve.

        Args:
            amount: Desired rainfall amount

        Returns:
            Actual amount available (may be less if atmosphere is dry)
        """
        if amount <= 0 or self.atmospheric_reserve <= 0:
            return 0.0
        actual = min(amount, self.atmospheric_reserve)
        self.atmospheric_reserve -= actual
        if self.atmospheric_reserve < 0:
            self.atmospheric_reserve = 0.0
        self.rained_total += actual
        return actual

    def reset(self, total_budget: float | None = None) -> None:
        """Refill the reservoir, optionally with a new total."""
        if total_budget is not None:
            self.total_budget = total_budget
        self.atmospheric_reserve = self.total_budget
        self.rained_total = 0.0

    @property
    def is_dry(self) -> bool:
        return self.atmospheric_reserve <= 0

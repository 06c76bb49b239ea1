from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class Dice:
    """An unordered roll of two dice, stored with the larger die first."""

    big: int
    small: int

    def __post_init__(self) -> None:
        if not (1 <= self.small <= 6 and 1 <= self.big <= 6):
            raise ValueError(f"Dice values must lie in 1..6, got {self.big}, {self.small}.")
        if self.small > self.big:
            big, small = self.small, self.big
            object.__setattr__(self, "big", big)
            object.__setattr__(self, "small", small)

    @property
    def is_double(self) -> bool:
        return self.big == self.small

    def __repr__(self) -> str:
        return f"Dice({self.big}, {self.small})"


def _all_21() -> Tuple[Tuple[Dice, float], ...]:
    rolls = []
    for big in range(1, 7):
        for small in range(1, big + 1):
            rolls.append((Dice(big, small), 1.0 if big == small else 2.0))
    return tuple(rolls)


# 15 non-doubles (weight 2) and 6 doubles (weight 1); weights sum to 36.
ALL_21: Tuple[Tuple[Dice, float], ...] = _all_21()


class DiceGen:
    """Seedable dice source shared by duels and training."""

    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        self.rng = rng or np.random.default_rng()

    def roll(self) -> Dice:
        first, second = self.rng.integers(1, 7, size=2)
        return Dice(int(first), int(second))

    def first_roll(self) -> Dice:
        """Opening roll; doubles are rerolled."""
        while True:
            dice = self.roll()
            if not dice.is_double:
                return dice

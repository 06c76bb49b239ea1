from __future__ import annotations

from typing import Optional, TypeVar

import numpy as np

from tdgammon.core import Dice

from .base import legal_successors

S = TypeVar("S")


class RandomEvaluator:
    """Uniformly random move choice; the weakest baseline."""

    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        self.rng = rng or np.random.default_rng()

    def best_position(self, state: S, dice: Dice) -> S:
        successors = legal_successors(state, dice)
        return successors[int(self.rng.integers(len(successors)))]

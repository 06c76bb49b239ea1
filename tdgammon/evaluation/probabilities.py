from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import numpy as np

from tdgammon.core import GameResult


@dataclass(frozen=True)
class Probabilities:
    """Distribution over the six game results; the fields sum to 1.0."""

    win_n: float
    win_g: float
    win_b: float
    lose_n: float
    lose_g: float
    lose_b: float

    @classmethod
    def from_counts(cls, counts: Sequence[int]) -> "Probabilities":
        """Normalise six integer tallies indexed by ``GameResult``."""
        total = float(sum(counts))
        return cls(*(counts[result] / total for result in GameResult))

    @classmethod
    def empty(cls) -> "Probabilities":
        return cls(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_result(cls, result: GameResult) -> "Probabilities":
        values = [0.0] * 6
        values[result] = 1.0
        return cls(*values)

    @classmethod
    def from_compact(cls, values: Sequence[float]) -> "Probabilities":
        """Build from ``(win, win_g_or_better, win_b, lose_g_or_better, lose_b)``."""
        win, win_gb, win_b, lose_gb, lose_b = (float(v) for v in values)
        return cls(
            win_n=win - win_gb,
            win_g=win_gb - win_b,
            win_b=win_b,
            lose_n=1.0 - win - lose_gb,
            lose_g=lose_gb - lose_b,
            lose_b=lose_b,
        )

    def win_prob(self) -> float:
        return self.win_n + self.win_g + self.win_b

    def equity(self) -> float:
        """Cubeless equity."""
        return (
            self.win_n
            - self.lose_n
            + 2.0 * (self.win_g - self.lose_g)
            + 3.0 * (self.win_b - self.lose_b)
        )

    def normalized(self) -> "Probabilities":
        total = sum(self.to_list())
        return Probabilities(*(value / total for value in self.to_list()))

    def flip(self) -> "Probabilities":
        return Probabilities(
            win_n=self.lose_n,
            win_g=self.lose_g,
            win_b=self.lose_b,
            lose_n=self.win_n,
            lose_g=self.win_g,
            lose_b=self.win_b,
        )

    def to_list(self) -> List[float]:
        return [self.win_n, self.win_g, self.win_b, self.lose_n, self.lose_g, self.lose_b]

    def to_compact(self) -> List[float]:
        win_g = self.win_g + self.win_b
        lose_g = self.lose_g + self.lose_b
        return [self.win_n + win_g, win_g, self.win_b, lose_g, self.lose_b]

    def as_dict(self) -> Dict[str, float]:
        win, win_g, win_b, lose_g, lose_b = self.to_compact()
        return {"win": win, "win_g": win_g, "win_b": win_b, "lose_g": lose_g, "lose_b": lose_b}

    def __repr__(self) -> str:
        return (
            f"Probabilities: wn {100 * self.win_n:.2f}%; wg {100 * self.win_g:.2f}%; "
            f"wb {100 * self.win_b:.2f}%; ln {100 * self.lose_n:.2f}%; "
            f"lg {100 * self.lose_g:.2f}%; lb {100 * self.lose_b:.2f}%"
        )


def equities_from_compact(table: np.ndarray) -> np.ndarray:
    """Vectorised ``Probabilities.from_compact(row).equity()`` over an (N, 5) table."""
    win, win_gb, win_b, lose_gb, lose_b = (table[:, i].astype(np.float64) for i in range(5))
    win_n = win - win_gb
    win_g = win_gb - win_b
    lose_n = 1.0 - win - lose_gb
    lose_g = lose_gb - lose_b
    return (win_n - lose_n) + 2.0 * (win_g - lose_g) + 3.0 * (win_b - lose_b)


@dataclass
class ResultCounter:
    results: List[int] = field(default_factory=lambda: [0] * 6)

    @classmethod
    def of(
        cls,
        win_n: int = 0,
        win_g: int = 0,
        win_b: int = 0,
        lose_n: int = 0,
        lose_g: int = 0,
        lose_b: int = 0,
    ) -> "ResultCounter":
        return cls([win_n, win_g, win_b, lose_n, lose_g, lose_b])

    def add(self, result: GameResult) -> None:
        self.results[result] += 1

    def add_results(self, result: GameResult, amount: int) -> None:
        self.results[result] += amount

    def sum(self) -> int:
        return sum(self.results)

    def num_of(self, result: GameResult) -> int:
        return self.results[result]

    def combine(self, other: "ResultCounter") -> "ResultCounter":
        return ResultCounter([a + b for a, b in zip(self.results, other.results)])

    def probabilities(self) -> Probabilities:
        return Probabilities.from_counts(self.results)

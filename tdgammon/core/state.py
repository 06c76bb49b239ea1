from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from math import comb
from typing import Optional, Protocol, Sequence, Tuple, TypeVar

NUM_PIPS = 26  # opponent bar (0), points 1..24, own bar (25)
BAR = 25
OPPONENT_BAR = 0


class GameResult(IntEnum):
    """Outcome of a finished game from the perspective of the side to move."""

    WIN_NORMAL = 0
    WIN_GAMMON = 1
    WIN_BACKGAMMON = 2
    LOSE_NORMAL = 3
    LOSE_GAMMON = 4
    LOSE_BACKGAMMON = 5

    @property
    def is_win(self) -> bool:
        return self < GameResult.LOSE_NORMAL

    def reverse(self) -> "GameResult":
        return GameResult((int(self) + 3) % 6)


@dataclass(frozen=True)
class GameState:
    result: Optional[GameResult] = None

    @property
    def is_over(self) -> bool:
        return self.result is not None

    def __repr__(self) -> str:
        if self.result is None:
            return "Ongoing"
        return f"GameOver({self.result.name})"


ONGOING = GameState()


def game_over(result: GameResult) -> GameState:
    return GameState(result)


def mcomb(n: int, k: int) -> int:
    """Number of multisets of size ``k`` drawn from ``n`` kinds."""
    return comb(n + k - 1, k)


@dataclass(frozen=True)
class Position:
    """Board snapshot from the side to move ("x").

    ``pips[1..24]`` hold signed checker counts (positive for x, negative for
    the opponent), ``pips[25]`` is x's bar and ``pips[0]`` the opponent's bar
    (stored negative). x moves from high to low points and bears off below 1.
    """

    pips: Tuple[int, ...]
    x_off: int = 0
    o_off: int = 0

    def __post_init__(self) -> None:
        if len(self.pips) != NUM_PIPS:
            raise ValueError(f"Position needs {NUM_PIPS} pips, got {len(self.pips)}.")

    @property
    def x_bar(self) -> int:
        return self.pips[BAR]

    @property
    def o_bar(self) -> int:
        return -self.pips[OPPONENT_BAR]

    def flip(self) -> "Position":
        pips = tuple(-self.pips[NUM_PIPS - 1 - i] for i in range(NUM_PIPS))
        return Position(pips=pips, x_off=self.o_off, o_off=self.x_off)

    def __repr__(self) -> str:
        board = " ".join(f"{p:+d}" if p else "." for p in self.pips[1:BAR])
        return (
            f"Position(x_bar={self.x_bar}, o_bar={self.o_bar}, "
            f"x_off={self.x_off}, o_off={self.o_off}, board=[{board}])"
        )


S = TypeVar("S", bound="State")


class State(Protocol):
    """Game-state capability consumed by evaluators, duels and training."""

    NUM_CHECKERS: int

    @classmethod
    def new(cls: type[S]) -> S:
        ...

    def possible_positions(self: S, dice) -> Sequence[S]:
        ...

    def game_state(self) -> GameState:
        ...

    def flip(self: S) -> S:
        ...

    def position(self) -> Position:
        ...

    def dbhash(self) -> int:
        ...

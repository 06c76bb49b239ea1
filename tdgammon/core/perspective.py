from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, List, Type, TypeVar

from .dice import Dice
from .state import GameState, Position

G = TypeVar("G")


@dataclass(frozen=True)
class PerspectiveState(Generic[G]):
    """A raw game state plus the flag telling which original player owns it.

    The raw engine re-normalises every successor to the side to move, so
    repeated flips alone lose track of who is who. ``turn`` is True when
    player A (the side that moved first) is to move.
    """

    state: G
    turn: bool = True

    @classmethod
    def new(cls, game_type: Type[G]) -> "PerspectiveState[G]":
        return cls(game_type.new(), True)

    @property
    def NUM_CHECKERS(self) -> int:
        return self.state.NUM_CHECKERS

    def possible_positions(self, dice: Dice) -> List["PerspectiveState[G]"]:
        return [PerspectiveState(pos, not self.turn) for pos in self.state.possible_positions(dice)]

    def game_state(self) -> GameState:
        return self.raw_game_state()

    def raw_game_state(self) -> GameState:
        """Result from the side to move, whoever that is."""
        return self.state.game_state()

    def resolved_game_state(self) -> GameState:
        """Result from player A's perspective."""
        return self.resolved_state().game_state()

    def resolved_state(self) -> G:
        """The raw state as seen by player A."""
        return self.state if self.turn else self.state.flip()

    def flip(self) -> "PerspectiveState[G]":
        return PerspectiveState(self.state.flip(), not self.turn)

    def position(self) -> Position:
        return self.state.position()

    def dbhash(self) -> int:
        return self.state.dbhash()

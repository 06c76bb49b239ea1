"""Core game logic for tdgammon."""

from .dice import ALL_21, Dice, DiceGen
from .perspective import PerspectiveState
from .rules import Hypergammon, database_size
from .state import (
    BAR,
    NUM_PIPS,
    ONGOING,
    OPPONENT_BAR,
    GameResult,
    GameState,
    Position,
    State,
    game_over,
    mcomb,
)

__all__ = [
    "ALL_21",
    "BAR",
    "Dice",
    "DiceGen",
    "GameResult",
    "GameState",
    "Hypergammon",
    "NUM_PIPS",
    "ONGOING",
    "OPPONENT_BAR",
    "PerspectiveState",
    "Position",
    "State",
    "database_size",
    "game_over",
    "mcomb",
]

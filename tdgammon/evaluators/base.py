from __future__ import annotations

from typing import List, Protocol, TypeVar

from tdgammon.core import Dice

S = TypeVar("S")


class NoLegalMovesError(RuntimeError):
    """An evaluator was asked to move in a state without successors."""


class Evaluator(Protocol[S]):
    """Anything that can pick a successor for a state and a dice roll."""

    def best_position(self, state: S, dice: Dice) -> S:
        ...


def legal_successors(state: S, dice: Dice) -> List[S]:
    successors = list(state.possible_positions(dice))
    if not successors:
        raise NoLegalMovesError(f"No legal successors for {state!r} with {dice!r}.")
    return successors

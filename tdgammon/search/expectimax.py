from __future__ import annotations

from typing import List, Protocol, Sequence, Tuple

import numpy as np

from tdgammon.core import ALL_21, Dice, GameResult, PerspectiveState, Position
from tdgammon.evaluators.base import legal_successors


class ValueFunction(Protocol):
    def predict_batch(self, positions: Sequence[Position]) -> np.ndarray:
        """Winning chances of the side to move (``x``) for every position."""
        ...


def result_value(result: GameResult) -> float:
    return 1.0 if result.is_win else 0.0


class NPlyEvaluator:
    """Expectimax over a learned value function.

    Every value at a node is the winning chance of the searching side's
    opponent, so the searcher picks minima and the opponent maxima. The
    searching side is player A when ``turn == maximizing``; polarity flips
    at each ply together with the turn, which keeps the frame fixed along a
    search path:

    ====  ==========  ========  ====
    turn  maximizing  searcher  pick
    ====  ==========  ========  ====
    A     True        A         min
    B     True        B         min
    A     False       B         max
    B     False       A         max
    ====  ==========  ========  ====

    Leaf flipping follows the searcher's seat, not the successor's own turn
    flag. At the root the network therefore scores each successor as the
    engine returns it, from the opponent's side.
    """

    def __init__(self, value_function: ValueFunction, depth: int = 1) -> None:
        if depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {depth}.")
        self.value_function = value_function
        self.depth = depth

    def best_position(self, state: PerspectiveState, dice: Dice) -> PerspectiveState:
        return self.evaluate(state, dice)[0]

    def evaluate(self, state: PerspectiveState, dice: Dice) -> Tuple[PerspectiveState, float]:
        return self._nply(state, dice, self.depth, True)

    # ------------------------------------------------------------------
    def _nply(
        self,
        state: PerspectiveState,
        dice: Dice,
        depth: int,
        maximizing: bool,
    ) -> Tuple[PerspectiveState, float]:
        successors = legal_successors(state, dice)
        searcher = state.turn == maximizing
        if depth == 1:
            values = self._leaf_values(successors, searcher)
        else:
            values = np.array(
                [self._successor_value(succ, searcher, depth, maximizing) for succ in successors],
                dtype=np.float64,
            )
        index = int(np.argmin(values)) if maximizing else int(np.argmax(values))
        return successors[index], float(values[index])

    def _leaf_values(self, successors: List[PerspectiveState], searcher: bool) -> np.ndarray:
        # A successor whose turn flag equals the searcher's seat is the
        # searcher's own view; flip it to read the opponent's chances.
        positions = [
            succ.position().flip() if succ.turn == searcher else succ.position()
            for succ in successors
        ]
        return np.asarray(self.value_function.predict_batch(positions), dtype=np.float64).reshape(-1)

    def _successor_value(
        self,
        succ: PerspectiveState,
        searcher: bool,
        depth: int,
        maximizing: bool,
    ) -> float:
        status = succ.raw_game_state()
        if status.is_over:
            value = result_value(status.result)
            return 1.0 - value if succ.turn == searcher else value

        total = 0.0
        weights = 0.0
        for dice, weight in ALL_21:
            _, value = self._nply(succ, dice, depth - 1, not maximizing)
            total += weight * value
            weights += weight
        return total / weights

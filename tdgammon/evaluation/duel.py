from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Callable, Generic, Optional, TypeVar

import numpy as np
from tqdm import tqdm

from tdgammon.core import DiceGen, Hypergammon, PerspectiveState

from .probabilities import Probabilities, ResultCounter

if TYPE_CHECKING:
    from tdgammon.evaluators.base import Evaluator

S = TypeVar("S")

new_hypergammon = functools.partial(PerspectiveState.new, Hypergammon)


class Duel(Generic[S]):
    """Paired games between two evaluators on one dice sequence.

    In the first game evaluator 1 moves on even plies, in the second game on
    odd plies, so each evaluator opens once with the same rolls. Both
    outcomes are counted from evaluator 1's point of view.
    """

    def __init__(
        self,
        evaluator1: "Evaluator[S]",
        evaluator2: "Evaluator[S]",
        new_game: Callable[[], S] = new_hypergammon,
    ) -> None:
        self.evaluator1 = evaluator1
        self.evaluator2 = evaluator2
        self.new_game = new_game

    def single_duel(self, dice_gen: DiceGen) -> ResultCounter:
        pos1 = self.new_game()
        pos2 = self.new_game()
        iteration = 1
        pos1_finished = False
        pos2_finished = False
        counter = ResultCounter()
        while not (pos1_finished and pos2_finished):
            dice = dice_gen.roll()
            even = iteration % 2 == 0

            if not pos1_finished:
                status = pos1.game_state()
                if status.is_over:
                    pos1_finished = True
                    counter.add(status.result if even else status.result.reverse())
                else:
                    mover = self.evaluator1 if even else self.evaluator2
                    pos1 = mover.best_position(pos1, dice)

            if not pos2_finished:
                status = pos2.game_state()
                if status.is_over:
                    pos2_finished = True
                    counter.add(status.result.reverse() if even else status.result)
                else:
                    mover = self.evaluator2 if even else self.evaluator1
                    pos2 = mover.best_position(pos2, dice)

            iteration += 1

        assert counter.sum() == 2, "each duel should have two game results"
        return counter


def duel(
    evaluator1: "Evaluator[S]",
    evaluator2: "Evaluator[S]",
    rounds: int,
    *,
    new_game: Callable[[], S] = new_hypergammon,
    rng: Optional[np.random.Generator] = None,
    progress: bool = True,
    desc: str = "duel",
) -> Probabilities:
    """Play ``rounds`` paired duels and return evaluator 1's outcome distribution."""
    if rounds <= 0:
        raise ValueError(f"rounds must be positive, got {rounds}")
    dice_gen = DiceGen(rng or np.random.default_rng())
    match = Duel(evaluator1, evaluator2, new_game)
    results = ResultCounter()
    bar = tqdm(range(rounds), desc=desc, disable=not progress, leave=False)
    for round_index in bar:
        results = results.combine(match.single_duel(dice_gen))
        if progress and round_index % 50 == 0:
            probs = results.probabilities()
            bar.set_postfix(win=f"{100 * probs.win_prob():.1f}%", equity=f"{probs.equity():.3f}")
    return results.probabilities()

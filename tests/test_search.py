import numpy as np
import pytest

from tdgammon.core import ALL_21, BAR, NUM_PIPS, Dice, GameResult, Hypergammon, PerspectiveState, Position
from tdgammon.search import NPlyEvaluator, result_value


class HashValue:
    """Deterministic pseudo-value per position."""

    def __init__(self) -> None:
        self.calls = 0

    def score(self, position: Position) -> float:
        weighted = sum(i * p for i, p in enumerate(position.pips)) + 7 * position.x_off - 5 * position.o_off
        return (weighted % 97) / 97.0

    def predict_batch(self, positions):
        self.calls += 1
        return np.array([self.score(pos) for pos in positions], dtype=np.float32)


class ConstantValue:
    def predict_batch(self, positions):
        return np.full((len(positions),), 0.5, dtype=np.float32)


def race_position() -> Position:
    pips = [0] * NUM_PIPS
    pips[2] = 1
    pips[6] = 1
    for point in (20, 21, 22):
        pips[point] = -1
    return Position(tuple(pips), x_off=1, o_off=0)


def test_depth_must_be_positive():
    with pytest.raises(ValueError):
        NPlyEvaluator(ConstantValue(), depth=0)


def test_result_value():
    assert result_value(GameResult.WIN_BACKGAMMON) == 1.0
    assert result_value(GameResult.LOSE_NORMAL) == 0.0


@pytest.mark.parametrize("turn", [True, False])
@pytest.mark.parametrize("dice", [Dice(3, 1), Dice(6, 5), Dice(4, 4), Dice(2, 1)])
def test_depth_one_matches_flat_ranking(turn, dice):
    value_function = HashValue()
    evaluator = NPlyEvaluator(value_function, depth=1)
    state = PerspectiveState(Hypergammon.new(), turn)

    successors = state.possible_positions(dice)
    expected = min(successors, key=lambda succ: value_function.score(succ.position()))
    chosen, value = evaluator.evaluate(state, dice)
    assert chosen == expected
    assert value == pytest.approx(value_function.score(expected.position()), abs=1e-6)
    assert value_function.calls == 1
    assert evaluator.best_position(state, dice) == expected


def test_depth_two_takes_the_win():
    state = PerspectiveState(Hypergammon(race_position()), True)
    dice = Dice(6, 2)
    successors = state.possible_positions(dice)
    assert any(succ.raw_game_state().is_over for succ in successors)
    assert any(not succ.raw_game_state().is_over for succ in successors)

    chosen, value = NPlyEvaluator(ConstantValue(), depth=2).evaluate(state, dice)
    assert chosen.raw_game_state().is_over
    assert chosen.resolved_game_state().result.is_win
    assert value == 0.0


def test_depth_two_averages_over_all_rolls():
    state = PerspectiveState(Hypergammon(race_position()), False)
    evaluator = NPlyEvaluator(ConstantValue(), depth=2)
    succ = next(s for s in state.possible_positions(Dice(6, 2)) if not s.raw_game_state().is_over)
    # The opponent cannot finish from here, so every roll leads back to the constant.
    value = evaluator._successor_value(succ, searcher=True, depth=2, maximizing=True)
    assert value == pytest.approx(0.5)
    assert sum(weight for _, weight in ALL_21) == 36
    assert succ.position().pips[BAR - 2] == -1


def test_depth_two_opponent_node_takes_the_maximum():
    value_function = HashValue()
    evaluator = NPlyEvaluator(value_function, depth=2)
    state = PerspectiveState(Hypergammon.new(), True)
    dice = Dice(3, 1)

    def opponent_value(succ, pick):
        # Leaves are seen from the searcher's side, so they are flipped before scoring.
        total = 0.0
        for roll, weight in ALL_21:
            leaves = succ.possible_positions(roll)
            total += weight * pick(value_function.score(leaf.position().flip()) for leaf in leaves)
        return total / 36.0

    successors = state.possible_positions(dice)
    expected = [opponent_value(succ, max) for succ in successors]
    searched = [evaluator._successor_value(succ, True, 2, True) for succ in successors]
    assert searched == pytest.approx(expected, abs=1e-6)
    assert all(high > opponent_value(succ, min) for high, succ in zip(expected, successors))

    chosen, value = evaluator.evaluate(state, dice)
    assert expected[successors.index(chosen)] == pytest.approx(min(expected), abs=1e-6)
    assert value == pytest.approx(min(expected), abs=1e-6)

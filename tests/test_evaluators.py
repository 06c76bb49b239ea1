from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pytest

from tdgammon.core import Dice, Hypergammon, PerspectiveState
from tdgammon.evaluators import (
    DatabaseEvaluator,
    DatabaseUnavailable,
    NoLegalMovesError,
    RandomEvaluator,
)
from tdgammon.evaluators.database import RECORD_BYTES


@dataclass(frozen=True)
class IndexedState:
    """Tiny stand-in game whose successors and hashes are given explicitly."""

    key: int
    children: Tuple[int, ...] = ()

    def possible_positions(self, dice):
        return [IndexedState(child) for child in self.children]

    def dbhash(self) -> int:
        return self.key


def write_table(path, rows) -> None:
    np.asarray(rows, dtype="<f4").tofile(path)


def test_random_evaluator_is_seedable():
    state = PerspectiveState.new(Hypergammon)
    dice = Dice(5, 3)
    first = RandomEvaluator(np.random.default_rng(7))
    second = RandomEvaluator(np.random.default_rng(7))
    picks = [first.best_position(state, dice) for _ in range(10)]
    assert picks == [second.best_position(state, dice) for _ in range(10)]
    assert all(pick in state.possible_positions(dice) for pick in picks)


def test_no_legal_moves_raises():
    with pytest.raises(NoLegalMovesError):
        RandomEvaluator(np.random.default_rng(0)).best_position(IndexedState(0), Dice(1, 2))
    with pytest.raises(NoLegalMovesError):
        DatabaseEvaluator(np.zeros((1, 5), dtype=np.float32)).best_position(IndexedState(0), Dice(1, 2))


def test_database_rejects_wrong_record_count(tmp_path):
    path = tmp_path / "hyper.db"
    write_table(path, np.zeros((10, 5)))
    with pytest.raises(DatabaseUnavailable):
        DatabaseEvaluator.from_file(str(path))
    with pytest.raises(DatabaseUnavailable):
        DatabaseEvaluator.from_file(str(path), expected_records=11)


def test_database_rejects_truncated_file(tmp_path):
    path = tmp_path / "hyper.db"
    path.write_bytes(b"\x00" * (RECORD_BYTES * 3 + 7))
    with pytest.raises(DatabaseUnavailable):
        DatabaseEvaluator.from_file(str(path), expected_records=3)


def test_database_missing_file(tmp_path):
    with pytest.raises(DatabaseUnavailable):
        DatabaseEvaluator.from_file(str(tmp_path / "missing.db"))


def test_database_validation_rejects_malformed_rows(tmp_path):
    path = tmp_path / "hyper.db"
    write_table(path, [[0.5, 0.0, 0.0, 0.0, 0.0], [2.0, 0.0, 0.0, 0.0, 0.0]])
    with pytest.raises(DatabaseUnavailable):
        DatabaseEvaluator.from_file(str(path), expected_records=2, validate=True)


def test_database_picks_lowest_opponent_equity(tmp_path):
    path = tmp_path / "hyper.db"
    rows = [
        [0.5, 0.0, 0.0, 0.0, 0.0],  # equity 0.0
        [0.9, 0.3, 0.0, 0.0, 0.0],  # equity 1.1
        [0.2, 0.0, 0.0, 0.1, 0.0],  # equity -0.7
        [0.4, 0.0, 0.0, 0.0, 0.0],  # equity -0.2
    ]
    write_table(path, rows)
    evaluator = DatabaseEvaluator.from_file(str(path), expected_records=4, validate=True)
    assert len(evaluator) == 4
    assert evaluator.equity(IndexedState(1)) == pytest.approx(1.1, abs=1e-6)
    assert evaluator.probabilities(IndexedState(2)).win_prob() == pytest.approx(0.2, abs=1e-6)

    choice = evaluator.best_position(IndexedState(0, (0, 1, 2, 3)), Dice(3, 1))
    assert choice == IndexedState(2)
    choice = evaluator.best_position(IndexedState(0, (0, 1, 3)), Dice(3, 1))
    assert choice == IndexedState(3)


def test_database_table_is_read_only():
    evaluator = DatabaseEvaluator(np.zeros((2, 5), dtype=np.float32))
    with pytest.raises(ValueError):
        evaluator.table[0, 0] = 1.0

from __future__ import annotations

import logging
import os
from typing import Optional, TypeVar

import numpy as np

from tdgammon.core import Dice, Hypergammon, database_size
from tdgammon.evaluation.probabilities import Probabilities, equities_from_compact
from tdgammon.validation import ProbabilityDataError, validate_table

from .base import legal_successors

logger = logging.getLogger(__name__)

S = TypeVar("S")

RECORD_FIELDS = 5
RECORD_DTYPE = np.dtype("<f4")
RECORD_BYTES = RECORD_FIELDS * RECORD_DTYPE.itemsize  # 20


class DatabaseUnavailable(ValueError):
    pass


class DatabaseEvaluator:
    """Exact lookup of win/gammon/backgammon chances indexed by ``dbhash``.

    Records describe the position from the side to move, and every successor
    is already the opponent's view, so the best move minimises the looked-up
    equity.
    """

    def __init__(self, table: np.ndarray) -> None:
        self.table = table
        self.table.setflags(write=False)
        self.equities = equities_from_compact(table)
        self.equities.setflags(write=False)

    @classmethod
    def from_file(
        cls,
        path: str,
        *,
        num_checkers: int = Hypergammon.NUM_CHECKERS,
        expected_records: Optional[int] = None,
        validate: bool = False,
    ) -> "DatabaseEvaluator":
        if num_checkers < 1:
            raise ValueError(f"num_checkers must be positive, got {num_checkers}")
        expected = expected_records if expected_records is not None else database_size(num_checkers)
        if not os.path.isfile(path):
            raise DatabaseUnavailable(f"database file {path!r} not found")
        size = os.path.getsize(path)
        if size % RECORD_BYTES != 0:
            raise DatabaseUnavailable(
                f"database file {path!r} is truncated: {size} bytes is not a multiple of {RECORD_BYTES}"
            )
        records = size // RECORD_BYTES
        if records != expected:
            raise DatabaseUnavailable(
                f"database file {path!r} has {records} records, expected {expected}"
            )
        table = np.fromfile(path, dtype=RECORD_DTYPE).reshape(records, RECORD_FIELDS)
        if validate:
            try:
                validate_table(table)
            except ProbabilityDataError as exc:
                raise DatabaseUnavailable(f"database file {path!r} is malformed: {exc}") from exc
        logger.info("Loaded %d database records from %s", records, path)
        return cls(table)

    def __len__(self) -> int:
        return len(self.table)

    def probabilities(self, state) -> Probabilities:
        return Probabilities.from_compact(self.table[state.dbhash()])

    def equity(self, state) -> float:
        return float(self.equities[state.dbhash()])

    def best_position(self, state: S, dice: Dice) -> S:
        successors = legal_successors(state, dice)
        values = self.equities[[succ.dbhash() for succ in successors]]
        return successors[int(np.argmin(values))]

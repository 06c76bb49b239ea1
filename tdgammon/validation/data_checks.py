from __future__ import annotations

from typing import Sequence

import numpy as np

from tdgammon.evaluation.probabilities import Probabilities

TOLERANCE = 1e-4


class ProbabilityDataError(ValueError):
    pass


def validate_probabilities(probs: Probabilities, *, atol: float = TOLERANCE) -> Probabilities:
    values = np.asarray(probs.to_list(), dtype=np.float64)
    if not np.isfinite(values).all():
        raise ProbabilityDataError("probabilities contain non-finite values")
    if (values < -atol).any():
        raise ProbabilityDataError(f"probabilities contain a negative fraction: {probs!r}")
    if not np.isclose(values.sum(), 1.0, atol=atol):
        raise ProbabilityDataError(f"probabilities sum to {values.sum():.6f}, expected 1.0")
    return probs


def validate_compact(values: Sequence[float], *, atol: float = TOLERANCE) -> Probabilities:
    """Check a cumulative 5-field record and return its six-field form."""
    array = np.asarray(values, dtype=np.float64)
    if array.shape != (5,):
        raise ProbabilityDataError(f"compact record needs 5 fields, got shape {array.shape}")
    if not np.isfinite(array).all():
        raise ProbabilityDataError("compact record contains non-finite values")
    win, win_gb, win_b, lose_gb, lose_b = array
    if win + atol < win_gb:
        raise ProbabilityDataError("P(win) must be at least P(win gammon or better)")
    if win_gb + atol < win_b:
        raise ProbabilityDataError("P(win gammon or better) must be at least P(win backgammon)")
    if lose_gb + atol < lose_b:
        raise ProbabilityDataError("P(lose gammon or better) must be at least P(lose backgammon)")
    return validate_probabilities(Probabilities.from_compact(array), atol=atol)


def validate_table(table: np.ndarray, *, atol: float = TOLERANCE) -> None:
    """Vectorised sanity check of an (N, 5) compact table."""
    if table.ndim != 2 or table.shape[1] != 5:
        raise ProbabilityDataError(f"table must have shape (N, 5), got {table.shape}")
    if not np.isfinite(table).all():
        raise ProbabilityDataError("table contains non-finite values")
    if (table < -atol).any() or (table > 1.0 + atol).any():
        raise ProbabilityDataError("table values out of [0,1] range")
    if (table[:, 0] + table[:, 3] > 1.0 + atol).any():
        raise ProbabilityDataError("P(win) + P(lose gammon or better) exceeds 1")

import numpy as np
import pytest

from tdgammon.evaluation import Probabilities
from tdgammon.validation import (
    ProbabilityDataError,
    validate_compact,
    validate_probabilities,
    validate_table,
)


def test_validate_probabilities_ok():
    probs = Probabilities.from_counts([1, 1, 1, 1, 1, 1])
    assert validate_probabilities(probs) is probs


def test_validate_probabilities_rejects_bad_sum():
    with pytest.raises(ProbabilityDataError):
        validate_probabilities(Probabilities(0.5, 0.0, 0.0, 0.4, 0.0, 0.0))


def test_validate_probabilities_rejects_negative():
    with pytest.raises(ProbabilityDataError):
        validate_probabilities(Probabilities(1.2, 0.0, 0.0, -0.2, 0.0, 0.0))


def test_validate_probabilities_rejects_nan():
    with pytest.raises(ProbabilityDataError):
        validate_probabilities(Probabilities(np.nan, 0.0, 0.0, 1.0, 0.0, 0.0))


def test_validate_compact():
    probs = validate_compact([0.6, 0.2, 0.05, 0.1, 0.01])
    assert probs.win_prob() == pytest.approx(0.6)
    with pytest.raises(ProbabilityDataError):
        validate_compact([0.6, 0.2, 0.05, 0.1])
    with pytest.raises(ProbabilityDataError):
        validate_compact([0.2, 0.3, 0.0, 0.1, 0.0])
    with pytest.raises(ProbabilityDataError):
        validate_compact([0.8, 0.2, 0.0, 0.5, 0.0])


def test_validate_table():
    table = np.array([[0.6, 0.2, 0.05, 0.1, 0.01], [0.0, 0.0, 0.0, 1.0, 1.0]], dtype=np.float32)
    validate_table(table)
    with pytest.raises(ProbabilityDataError):
        validate_table(table[:, :4])
    bad = table.copy()
    bad[1, 0] = 1.5
    with pytest.raises(ProbabilityDataError):
        validate_table(bad)

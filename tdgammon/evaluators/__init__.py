"""Move evaluators sharing the ``best_position(state, dice)`` contract."""

from .base import Evaluator, NoLegalMovesError, legal_successors
from .baseline import RandomEvaluator
from .database import DatabaseEvaluator, DatabaseUnavailable

__all__ = [
    "DatabaseEvaluator",
    "DatabaseUnavailable",
    "Evaluator",
    "NoLegalMovesError",
    "RandomEvaluator",
    "legal_successors",
]

"""Outcome statistics, duels and gating for tdgammon."""

from .probabilities import Probabilities, ResultCounter, equities_from_compact
from .duel import Duel, duel, new_hypergammon
from .gating import GatingDecision, gate_model

__all__ = [
    "Duel",
    "GatingDecision",
    "Probabilities",
    "ResultCounter",
    "duel",
    "equities_from_compact",
    "gate_model",
    "new_hypergammon",
]

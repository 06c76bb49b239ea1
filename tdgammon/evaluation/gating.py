from __future__ import annotations

from dataclasses import dataclass

from .probabilities import Probabilities


@dataclass
class GatingDecision:
    promote: bool
    win_prob: float
    threshold: float
    min_rounds: int
    probabilities: Probabilities


def gate_model(
    probabilities: Probabilities,
    rounds: int,
    *,
    threshold: float,
    min_rounds: int,
) -> GatingDecision:
    """Promote a candidate that beats the incumbent strictly above ``threshold``."""
    win_prob = probabilities.win_prob()
    promote = rounds >= min_rounds and win_prob > threshold
    return GatingDecision(
        promote=promote,
        win_prob=win_prob,
        threshold=threshold,
        min_rounds=min_rounds,
        probabilities=probabilities,
    )

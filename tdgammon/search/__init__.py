"""n-ply expectimax search over a learned value function."""

from .expectimax import NPlyEvaluator, ValueFunction, result_value

__all__ = ["NPlyEvaluator", "ValueFunction", "result_value"]

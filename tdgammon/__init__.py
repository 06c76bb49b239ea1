"""TD-learning hypergammon: evaluators, duels and self-play training."""

from . import core, evaluation, evaluators, features, models, search, training
from .core import (
    ALL_21,
    Dice,
    DiceGen,
    GameResult,
    GameState,
    Hypergammon,
    PerspectiveState,
    Position,
)
from .evaluation import Duel, GatingDecision, Probabilities, ResultCounter, duel, gate_model
from .evaluators import (
    DatabaseEvaluator,
    DatabaseUnavailable,
    Evaluator,
    NoLegalMovesError,
    RandomEvaluator,
)
from .features import INPUT_SIZE, encode_position, positions_to_torch
from .models import TDNet, TDNetConfig, TDValueFunction
from .search import NPlyEvaluator, ValueFunction
from .training import TDConfig, TDTrainer, TrainingGameOutput
from .orchestration import TDTrainingRun, TDTrainingRunConfig

__all__ = [
    "core",
    "evaluation",
    "evaluators",
    "features",
    "models",
    "search",
    "training",
    "ALL_21",
    "Dice",
    "DiceGen",
    "GameResult",
    "GameState",
    "Hypergammon",
    "PerspectiveState",
    "Position",
    "Duel",
    "GatingDecision",
    "Probabilities",
    "ResultCounter",
    "duel",
    "gate_model",
    "DatabaseEvaluator",
    "DatabaseUnavailable",
    "Evaluator",
    "NoLegalMovesError",
    "RandomEvaluator",
    "INPUT_SIZE",
    "encode_position",
    "positions_to_torch",
    "TDNet",
    "TDNetConfig",
    "TDValueFunction",
    "NPlyEvaluator",
    "ValueFunction",
    "TDConfig",
    "TDTrainer",
    "TrainingGameOutput",
    "TDTrainingRun",
    "TDTrainingRunConfig",
]

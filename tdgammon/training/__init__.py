"""Training loop utilities."""

from .loop import TDConfig, TDTrainer, TrainingGameOutput

__all__ = ["TDConfig", "TDTrainer", "TrainingGameOutput"]

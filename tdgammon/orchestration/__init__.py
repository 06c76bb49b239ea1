from .loop import TDTrainingRun, TDTrainingRunConfig

__all__ = ["TDTrainingRun", "TDTrainingRunConfig"]

from .data_checks import ProbabilityDataError, validate_compact, validate_probabilities, validate_table

__all__ = ["ProbabilityDataError", "validate_compact", "validate_probabilities", "validate_table"]

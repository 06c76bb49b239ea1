"""Feature extraction helpers for tdgammon."""

from .observation import INPUT_SIZE, encode_position, positions_to_numpy, positions_to_torch

__all__ = [
    "INPUT_SIZE",
    "encode_position",
    "positions_to_numpy",
    "positions_to_torch",
]

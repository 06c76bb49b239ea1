from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import torch

from tdgammon.core import BAR, Hypergammon, Position

NUM_POINTS = 24
UNITS_PER_POINT = 4
INPUT_SIZE = 2 * NUM_POINTS * UNITS_PER_POINT + 4  # + bar and off for each side


def _point_units(count: int) -> tuple:
    return (
        float(count >= 1),
        float(count >= 2),
        float(count >= 3),
        max(count - 3, 0) / 2.0,
    )


def encode_position(position: Position, *, num_checkers: int = Hypergammon.NUM_CHECKERS) -> np.ndarray:
    """TD-Gammon style inputs with shape (INPUT_SIZE,), side to move first."""
    features = np.zeros((INPUT_SIZE,), dtype=np.float32)
    offset = NUM_POINTS * UNITS_PER_POINT
    for point in range(1, BAR):
        count = position.pips[point]
        base = (point - 1) * UNITS_PER_POINT
        if count > 0:
            features[base : base + UNITS_PER_POINT] = _point_units(count)
        elif count < 0:
            # Opponent points are indexed from the opponent's side of the board.
            base = offset + (NUM_POINTS - point) * UNITS_PER_POINT
            features[base : base + UNITS_PER_POINT] = _point_units(-count)
    tail = 2 * offset
    features[tail] = position.x_bar / 2.0
    features[tail + 1] = position.o_bar / 2.0
    features[tail + 2] = position.x_off / num_checkers
    features[tail + 3] = position.o_off / num_checkers
    return features


def positions_to_numpy(positions: Sequence[Position], **kwargs) -> np.ndarray:
    if not positions:
        return np.zeros((0, INPUT_SIZE), dtype=np.float32)
    return np.stack([encode_position(pos, **kwargs) for pos in positions], axis=0)


def positions_to_torch(
    positions: Sequence[Position],
    *,
    device: Optional[torch.device] = None,
    dtype: torch.dtype = torch.float32,
    num_checkers: int = Hypergammon.NUM_CHECKERS,
) -> torch.Tensor:
    batch = positions_to_numpy(positions, num_checkers=num_checkers)
    return torch.from_numpy(batch).to(device=device, dtype=dtype)

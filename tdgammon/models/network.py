from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import torch
import torch.nn as nn

from tdgammon.core import GameResult, Hypergammon, Position
from tdgammon.features import INPUT_SIZE, positions_to_torch
from tdgammon.search import result_value


@dataclass
class TDNetConfig:
    hidden: int = 160
    layers: int = 1
    input_size: int = INPUT_SIZE


class TDNet(nn.Module):
    """Sigmoid MLP mapping encoded positions to the mover's winning chance."""

    def __init__(self, config: TDNetConfig = TDNetConfig()) -> None:
        super().__init__()
        self.config = config
        layers = []
        width = config.input_size
        for _ in range(config.layers):
            layers.append(nn.Linear(width, config.hidden))
            layers.append(nn.Sigmoid())
            width = config.hidden
        self.hidden = nn.Sequential(*layers)
        self.output = nn.Linear(width, 1)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """
        Args:
            x: Tensor shaped (batch, input_size)
        Returns:
            values in (0, 1) shaped (batch,)
        """
        x = self.hidden(x)
        return torch.sigmoid(self.output(x)).squeeze(-1)


class TDValueFunction:
    """Runs a ``TDNet`` on positions; the search and trainer talk to this."""

    def __init__(
        self,
        model: TDNet,
        *,
        device: Optional[torch.device] = None,
        dtype: torch.dtype = torch.float32,
        num_checkers: int = Hypergammon.NUM_CHECKERS,
    ) -> None:
        self.model = model.to(device=device, dtype=dtype)
        self.device = device or torch.device("cpu")
        self.dtype = dtype
        self.num_checkers = num_checkers

    def value(self, position: Position) -> torch.Tensor:
        """Scalar value tensor that keeps the autograd graph."""
        inputs = positions_to_torch(
            [position], device=self.device, dtype=self.dtype, num_checkers=self.num_checkers
        )
        return self.model(inputs)[0]

    def result_value(self, result: GameResult) -> torch.Tensor:
        return torch.tensor(result_value(result), device=self.device, dtype=self.dtype)

    @torch.no_grad()
    def predict_batch(self, positions: Sequence[Position]) -> np.ndarray:
        inputs = positions_to_torch(
            positions, device=self.device, dtype=self.dtype, num_checkers=self.num_checkers
        )
        return self.model(inputs).float().cpu().numpy()

    def snapshot(self) -> "TDValueFunction":
        """Frozen deep copy for duels while training continues."""
        model = copy.deepcopy(self.model)
        model.eval()
        for param in model.parameters():
            param.requires_grad_(False)
        return TDValueFunction(model, device=self.device, dtype=self.dtype, num_checkers=self.num_checkers)


def select_device(cpu_only: bool = False) -> torch.device:
    if not cpu_only and torch.cuda.is_available():
        return torch.device("cuda")
    return torch.device("cpu")

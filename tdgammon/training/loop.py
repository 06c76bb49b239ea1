from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np
import torch

from tdgammon.core import Dice, DiceGen, GameResult, PerspectiveState
from tdgammon.evaluation import new_hypergammon
from tdgammon.models import TDValueFunction
from tdgammon.search import NPlyEvaluator


@dataclass
class TDConfig:
    learning_rate: float = 0.1
    td_decay: float = 0.7
    search_depth: int = 1
    device: Optional[torch.device] = None
    dtype: torch.dtype = torch.float32


@dataclass
class TrainingGameOutput:
    plies: int
    mean_td_error: float
    mean_abs_td_error: float
    result: Optional[GameResult]

    def as_dict(self) -> Dict[str, float]:
        return {
            "plies": float(self.plies),
            "mean_td_error": self.mean_td_error,
            "mean_abs_td_error": self.mean_abs_td_error,
            "first_player_won": float(self.result is not None and self.result.is_win),
        }


class TDTrainer:
    """Online TD self-play on a single trajectory.

    Each ply follows the same pipeline: take the gradient of the current
    value, let the greedy search choose the move, then step the parameters
    by ``learning_rate * td_error`` along that stored gradient. SGD momentum
    with ``td_decay`` plays the part of the eligibility trace, and the
    optimizer is rebuilt for every game so the trace starts empty.
    """

    def __init__(
        self,
        value_function: TDValueFunction,
        config: TDConfig = TDConfig(),
        *,
        rng: Optional[np.random.Generator] = None,
        new_game: Callable[[], PerspectiveState] = new_hypergammon,
    ) -> None:
        self.value_function = value_function
        self.model = value_function.model
        self.config = config
        self.search = NPlyEvaluator(value_function, depth=config.search_depth)
        self.dice_gen = DiceGen(rng or np.random.default_rng())
        self.new_game = new_game

    def value(self, state: PerspectiveState) -> torch.Tensor:
        """Value of ``state`` for the player who moved first."""
        resolved = state.resolved_state()
        status = resolved.game_state()
        if status.is_over:
            return self.value_function.result_value(status.result)
        return self.value_function.value(resolved.position())

    def make_optimizer(self) -> torch.optim.Optimizer:
        return torch.optim.SGD(
            self.model.parameters(),
            lr=self.config.learning_rate,
            momentum=self.config.td_decay,
            dampening=0.0,
        )

    def train_game(self) -> TrainingGameOutput:
        optimizer = self.make_optimizer()
        self.model.train()

        state = self.new_game()
        dice = self.dice_gen.first_roll()
        td_errors: List[float] = []

        while not state.raw_game_state().is_over:
            state, td_error = self.train_ply(optimizer, state, dice)
            td_errors.append(td_error)
            dice = self.dice_gen.roll()

        errors = np.asarray(td_errors, dtype=np.float64)
        return TrainingGameOutput(
            plies=len(td_errors),
            mean_td_error=float(errors.mean()) if len(errors) else 0.0,
            mean_abs_td_error=float(np.abs(errors).mean()) if len(errors) else 0.0,
            result=state.resolved_game_state().result,
        )

    def train_ply(
        self,
        optimizer: torch.optim.Optimizer,
        state: PerspectiveState,
        dice: Dice,
    ) -> Tuple[PerspectiveState, float]:
        """Move once from ``state`` and apply one TD step; returns the new state and its TD error."""
        params = [param for param in self.model.parameters() if param.requires_grad]

        # capture
        optimizer.zero_grad(set_to_none=True)
        cur_value = self.value(state)
        cur_value.backward()
        grads = [param.grad.detach().clone() for param in params]

        # act
        state = self.search.best_position(state, dice)
        with torch.no_grad():
            next_value = self.value(state)
        td_error = float((next_value - cur_value.detach()).item())

        # apply
        for param, grad in zip(params, grads):
            param.grad = grad
        for group in optimizer.param_groups:
            group["lr"] = -self.config.learning_rate * td_error
        optimizer.step()
        return state, td_error

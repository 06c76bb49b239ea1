from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import torch
from tqdm import tqdm

from tdgammon.evaluation import GatingDecision, Probabilities, duel, gate_model
from tdgammon.evaluators import DatabaseEvaluator, DatabaseUnavailable, RandomEvaluator
from tdgammon.models import (
    ModelMetadata,
    TDNet,
    TDNetConfig,
    TDValueFunction,
    load_checkpoint,
    save_checkpoint,
)
from tdgammon.search import NPlyEvaluator
from tdgammon.training import TDConfig, TDTrainer

try:
    from torch.utils.tensorboard import SummaryWriter
except ImportError:  # pragma: no cover
    SummaryWriter = None

logger = logging.getLogger(__name__)


@dataclass
class TDTrainingRunConfig:
    td_config: TDConfig = field(default_factory=TDConfig)
    model_config: TDNetConfig = field(default_factory=TDNetConfig)
    seed: Optional[int] = None
    progress_interval: int = 100
    eval_interval: int = 5_000
    eval_rounds: int = 1_000
    eval_depth: int = 1
    promote_threshold: float = 0.53
    min_eval_rounds: int = 100
    regression_patience: Optional[int] = 100_000
    database_path: Optional[str] = None
    database_eval_interval: int = 25_000
    checkpoint_dir: Optional[str] = None
    checkpoint_interval: int = 10_000
    log_dir: Optional[str] = None
    wandb_project: Optional[str] = None
    wandb_run_name: Optional[str] = None
    wandb_entity: Optional[str] = None
    duel_progress: bool = False


class TDTrainingRun:
    """Episode loop around ``TDTrainer`` with periodic duels and checkpoints."""

    def __init__(
        self,
        config: TDTrainingRunConfig = TDTrainingRunConfig(),
        *,
        model: Optional[TDNet] = None,
    ) -> None:
        self.config = config
        td_config = config.td_config
        self.device = td_config.device or torch.device("cpu")
        self.rng = np.random.default_rng(config.seed)

        self.model = model if model is not None else TDNet(config.model_config)
        self.value_function = TDValueFunction(self.model, device=self.device, dtype=td_config.dtype)
        self.model = self.value_function.model
        self.trainer = TDTrainer(self.value_function, td_config, rng=self.rng)
        self.random_evaluator = RandomEvaluator(self.rng)

        self.best = self.value_function.snapshot()
        self.best_episode = 0
        self.episode = 0
        self.history: List[Dict[str, float]] = []

        self.database: Optional[DatabaseEvaluator] = None
        if config.database_path:
            try:
                self.database = DatabaseEvaluator.from_file(config.database_path)
            except DatabaseUnavailable as exc:
                logger.warning("Database evaluation disabled: %s", exc)

        self.writer: Optional[SummaryWriter] = None
        if self.config.log_dir and SummaryWriter is not None:
            os.makedirs(self.config.log_dir, exist_ok=True)
            self.writer = SummaryWriter(log_dir=self.config.log_dir)

        self.wandb_run = None
        self._wandb = None
        if self.config.wandb_project:
            try:
                import wandb
            except ImportError as exc:
                raise RuntimeError("wandb is not installed but wandb_project is set") from exc
            self._wandb = wandb
            self.wandb_run = wandb.init(
                project=self.config.wandb_project,
                name=self.config.wandb_run_name,
                entity=self.config.wandb_entity,
                config={
                    "td": self._td_summary(),
                    "model": vars(self.model.config),
                    "eval_interval": self.config.eval_interval,
                    "eval_rounds": self.config.eval_rounds,
                    "promote_threshold": self.config.promote_threshold,
                    "regression_patience": self.config.regression_patience,
                },
            )

    def _td_summary(self) -> Dict[str, float]:
        td = self.config.td_config
        return {
            "learning_rate": td.learning_rate,
            "td_decay": td.td_decay,
            "search_depth": td.search_depth,
        }

    # ------------------------------------------------------------------
    def run(self, num_episodes: int, *, progress: bool = False) -> Dict[str, object]:
        bar = tqdm(total=num_episodes, initial=self.episode, desc="episodes", disable=not progress)
        window: List[Dict[str, float]] = []
        try:
            while self.episode < num_episodes:
                output = self.trainer.train_game()
                window.append(output.as_dict())
                if self.episode % self.config.progress_interval == 0:
                    self._report_progress(window)
                    window = []

                self.episode += 1
                bar.update(1)

                if self.config.eval_interval > 0 and self.episode % self.config.eval_interval == 0:
                    self.evaluate()

                patience = self.config.regression_patience
                if patience is not None and self.episode - self.best_episode > patience:
                    logger.warning(
                        "No improvement for %d episodes; reverting to episode %d",
                        self.episode - self.best_episode,
                        self.best_episode,
                    )
                    self.revert_to_best()
                    bar.n = self.episode
                    bar.refresh()

                if (
                    self.database is not None
                    and self.config.database_eval_interval > 0
                    and self.episode % self.config.database_eval_interval == 0
                ):
                    self.evaluate_database()

                if (
                    self.config.checkpoint_dir
                    and self.config.checkpoint_interval > 0
                    and self.episode % self.config.checkpoint_interval == 0
                ):
                    self.save_checkpoint()
        finally:
            bar.close()

        return {
            "episode": self.episode,
            "best_episode": self.best_episode,
            "history": self.history,
        }

    def _report_progress(self, window: List[Dict[str, float]]) -> None:
        if not window:
            return
        averages = {key: float(np.mean([m[key] for m in window])) for key in window[0]}
        logger.info(
            "Episode %d: plies %.1f, |td| %.4f",
            self.episode,
            averages["plies"],
            averages["mean_abs_td_error"],
        )
        self._log_scalars({f"train_avg/{k}": v for k, v in averages.items()})

    def _log_scalars(self, scalars: Dict[str, float]) -> None:
        if self.writer:
            for key, value in scalars.items():
                self.writer.add_scalar(key, value, self.episode)
            self.writer.flush()
        if self.wandb_run and self._wandb:
            log_data = dict(scalars)
            log_data["episode"] = self.episode
            self._wandb.log(log_data)

    def _log_duel(self, name: str, probs: Probabilities) -> None:
        logger.info(
            "%s equity: %.3f (%.1f%%). %r",
            name,
            probs.equity(),
            probs.win_prob() * 100.0,
            probs,
        )
        scalars = {f"duel/{name}/equity": probs.equity(), f"duel/{name}/win": probs.win_prob()}
        self._log_scalars(scalars)
        record = {"episode": float(self.episode)}
        record.update(scalars)
        self.history.append(record)

    # ------------------------------------------------------------------
    def candidate(self) -> NPlyEvaluator:
        return NPlyEvaluator(self.value_function.snapshot(), depth=self.config.eval_depth)

    def evaluate(self) -> GatingDecision:
        """Duel the current model against random play and the best snapshot."""
        snapshot = self.value_function.snapshot()
        candidate = NPlyEvaluator(snapshot, depth=self.config.eval_depth)
        rounds = self.config.eval_rounds

        probs = duel(
            candidate,
            self.random_evaluator,
            rounds,
            rng=self.rng,
            progress=self.config.duel_progress,
            desc="vs random",
        )
        self._log_duel("random", probs)

        incumbent = NPlyEvaluator(self.best, depth=self.config.eval_depth)
        probs = duel(
            candidate,
            incumbent,
            rounds,
            rng=self.rng,
            progress=self.config.duel_progress,
            desc="vs best",
        )
        self._log_duel("best", probs)

        decision = gate_model(
            probs,
            rounds,
            threshold=self.config.promote_threshold,
            min_rounds=self.config.min_eval_rounds,
        )
        if decision.promote:
            logger.info("Promoting model from episode %d", self.episode)
            self.best = snapshot
            self.best_episode = self.episode
        return decision

    def evaluate_database(self) -> Optional[Probabilities]:
        if self.database is None:
            return None
        probs = duel(
            self.candidate(),
            self.database,
            self.config.eval_rounds,
            rng=self.rng,
            progress=self.config.duel_progress,
            desc="vs database",
        )
        self._log_duel("database", probs)
        return probs

    def revert_to_best(self) -> None:
        self.model.load_state_dict(self.best.model.state_dict())
        self.episode = self.best_episode

    # ------------------------------------------------------------------
    def save_checkpoint(self, path: Optional[str] = None) -> str:
        if not path:
            if not self.config.checkpoint_dir:
                raise ValueError("checkpoint_dir is not configured.")
            os.makedirs(self.config.checkpoint_dir, exist_ok=True)
            path = os.path.join(self.config.checkpoint_dir, f"games-{self.episode:07d}.pt")

        save_checkpoint(
            self.model,
            path,
            metadata=ModelMetadata(episode=self.episode, config=self._td_summary()),
            extra={
                "best_model": self.best.model.state_dict(),
                "episode": self.episode,
                "best_episode": self.best_episode,
            },
        )
        logger.info("Saved checkpoint to %s", path)
        return path

    def load_checkpoint(self, path: str) -> None:
        state = load_checkpoint(path, self.device)
        self.model.load_state_dict(state["model"])
        self.episode = state.get("episode", 0)
        best_state = state.get("best_model")
        self.best = self.value_function.snapshot()
        if best_state is not None:
            self.best.model.load_state_dict(best_state)
        self.best_episode = state.get("best_episode", self.episode)

    def close(self) -> None:
        if self.writer:
            self.writer.close()
        if self.wandb_run:
            self.wandb_run.finish()

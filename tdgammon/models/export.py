from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import torch

from tdgammon.models.network import TDNet, TDNetConfig


@dataclass
class ModelMetadata:
    episode: int
    config: Dict[str, Any]
    notes: Optional[str] = None


def save_checkpoint(
    model: TDNet,
    path: str,
    *,
    optimizer: Optional[torch.optim.Optimizer] = None,
    metadata: Optional[ModelMetadata] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    state = {"model": model.state_dict(), "model_config": asdict(model.config)}
    if extra:
        state.update(extra)
    if optimizer is not None:
        state["optimizer"] = optimizer.state_dict()
    if metadata is not None:
        state["metadata"] = asdict(metadata)
    torch.save(state, path)


def load_checkpoint(path: str, device: Optional[torch.device] = None) -> Dict[str, Any]:
    return torch.load(path, map_location=device or torch.device("cpu"), weights_only=False)


def load_model(
    path: str,
    device: Optional[torch.device] = None,
    config: Optional[TDNetConfig] = None,
) -> TDNet:
    state = load_checkpoint(path, device)
    if isinstance(state, dict) and "model" in state:
        if config is None and "model_config" in state:
            config = TDNetConfig(**state["model_config"])
        weights = state["model"]
    else:
        weights = state
    model = TDNet(config or TDNetConfig())
    model.load_state_dict(weights)
    return model.to(device=device)

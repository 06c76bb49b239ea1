"""Neural value functions for tdgammon."""

from .network import TDNet, TDNetConfig, TDValueFunction, select_device
from .export import ModelMetadata, load_checkpoint, load_model, save_checkpoint

__all__ = [
    "TDNet",
    "TDNetConfig",
    "TDValueFunction",
    "select_device",
    "ModelMetadata",
    "save_checkpoint",
    "load_checkpoint",
    "load_model",
]

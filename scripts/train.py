#!/usr/bin/env python3
"""Train a hypergammon value network by TD self-play."""

import argparse
import json
import logging
from pathlib import Path

import yaml

from tdgammon.models import TDNetConfig, load_model, select_device
from tdgammon.orchestration import TDTrainingRun, TDTrainingRunConfig
from tdgammon.training import TDConfig


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", type=str, default="configs/td_train.yaml")
    parser.add_argument("-m", "--model", help="Initial model checkpoint")
    parser.add_argument("-d", "--dir", help="Checkpoint directory")
    parser.add_argument("-c", "--cpu", action="store_true", help="Use CPU only")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--episodes", type=int)
    parser.add_argument("--seed", type=int)
    parser.add_argument("--database")
    parser.add_argument("--log-dir")
    parser.add_argument("--wandb-project")
    parser.add_argument("--wandb-run-name")
    parser.add_argument("--wandb-entity")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = {}
    if args.config:
        cfg_path = Path(args.config)
        if cfg_path.exists():
            cfg = yaml.safe_load(cfg_path.read_text()) or {}

    device = select_device(args.cpu)
    episodes = args.episodes if args.episodes is not None else cfg.get("episodes", 1_000_000)
    td_config = TDConfig(device=device, **cfg.get("td", {}))
    model_config = TDNetConfig(**cfg.get("model", {}))

    run_cfg = dict(cfg.get("run", {}))
    if args.dir is not None:
        run_cfg["checkpoint_dir"] = args.dir
    if args.seed is not None:
        run_cfg["seed"] = args.seed
    if args.database is not None:
        run_cfg["database_path"] = args.database
    if args.log_dir is not None:
        run_cfg["log_dir"] = args.log_dir
    run_cfg["wandb_project"] = args.wandb_project or run_cfg.get("wandb_project")
    run_cfg["wandb_run_name"] = args.wandb_run_name or run_cfg.get("wandb_run_name")
    run_cfg["wandb_entity"] = args.wandb_entity or run_cfg.get("wandb_entity")

    config = TDTrainingRunConfig(td_config=td_config, model_config=model_config, **run_cfg)

    model = load_model(args.model, device) if args.model else None
    run = TDTrainingRun(config, model=model)
    try:
        summary = run.run(episodes, progress=True)
    finally:
        if config.checkpoint_dir:
            run.save_checkpoint()
        run.close()
    print(json.dumps({"episode": summary["episode"], "best_episode": summary["best_episode"]}, indent=2))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""Duel every checkpoint in a directory against one baseline and write CSV rows."""

import argparse
import csv
import re
import sys
from pathlib import Path

import numpy as np
from tqdm import tqdm

from tdgammon.evaluation import duel
from tdgammon.evaluators import DatabaseEvaluator, RandomEvaluator
from tdgammon.models import TDValueFunction, load_model, select_device
from tdgammon.search import NPlyEvaluator

FIELDS = ["round", "equity", "win", "win_n", "win_g", "win_b", "lose_n", "lose_g", "lose_b"]


def checkpoint_round(path: Path) -> int:
    match = re.search(r"(\d+)", path.stem)
    return int(match.group(1)) if match else -1


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("directory", help="Directory with *.pt checkpoints")
    parser.add_argument("--baseline", choices=["random", "database"], default="random")
    parser.add_argument("--database", default="data/hyper.db")
    parser.add_argument("--rounds", type=int, default=1000)
    parser.add_argument("--depth", type=int, default=1)
    parser.add_argument("--seed", type=int)
    parser.add_argument("--output", help="CSV file; stdout when omitted")
    parser.add_argument("--cpu", action="store_true")
    args = parser.parse_args()

    device = select_device(args.cpu)
    rng = np.random.default_rng(args.seed)
    if args.baseline == "database":
        baseline = DatabaseEvaluator.from_file(args.database)
    else:
        baseline = RandomEvaluator(rng)

    checkpoints = sorted(Path(args.directory).glob("*.pt"), key=checkpoint_round)
    handle = open(args.output, "w", newline="") if args.output else sys.stdout
    try:
        writer = csv.writer(handle)
        writer.writerow(FIELDS)
        for path in tqdm(checkpoints, desc="checkpoints"):
            model = load_model(str(path), device)
            model.eval()
            evaluator = NPlyEvaluator(TDValueFunction(model, device=device), depth=args.depth)
            probs = duel(evaluator, baseline, args.rounds, rng=rng, progress=False)
            row = [checkpoint_round(path), probs.equity(), probs.win_prob(), *probs.to_list()]
            writer.writerow([row[0]] + [f"{value:.4f}" for value in row[1:]])
            handle.flush()
    finally:
        if handle is not sys.stdout:
            handle.close()


if __name__ == "__main__":
    main()

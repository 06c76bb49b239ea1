#!/usr/bin/env python3
"""Duel two evaluators and report the first one's outcome distribution."""

import argparse
import json

import numpy as np

from tdgammon.evaluation import duel
from tdgammon.evaluators import DatabaseEvaluator, RandomEvaluator
from tdgammon.models import TDValueFunction, load_model, select_device
from tdgammon.search import NPlyEvaluator


def evaluator_from_identifier(identifier: str, args, device, rng):
    key = identifier.lower()
    if key == "random":
        return RandomEvaluator(rng)
    if key == "database":
        return DatabaseEvaluator.from_file(args.database)
    model = load_model(identifier, device)
    model.eval()
    return NPlyEvaluator(TDValueFunction(model, device=device), depth=args.depth)


def main() -> None:
    parser = argparse.ArgumentParser(description="Duel two evaluators.")
    parser.add_argument("first", help="Checkpoint path or 'random'/'database'")
    parser.add_argument("second", help="Checkpoint path or 'random'/'database'")
    parser.add_argument("--rounds", type=int, default=1000)
    parser.add_argument("--depth", type=int, default=1)
    parser.add_argument("--database", default="data/hyper.db")
    parser.add_argument("--seed", type=int)
    parser.add_argument("--cpu", action="store_true")
    args = parser.parse_args()

    device = select_device(args.cpu)
    rng = np.random.default_rng(args.seed)
    first = evaluator_from_identifier(args.first, args, device, rng)
    second = evaluator_from_identifier(args.second, args, device, rng)

    probs = duel(first, second, args.rounds, rng=rng)
    output = {
        "rounds": args.rounds,
        "equity": probs.equity(),
        "win_prob": probs.win_prob(),
        "probabilities": dict(zip(["win_n", "win_g", "win_b", "lose_n", "lose_g", "lose_b"], probs.to_list())),
    }
    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()

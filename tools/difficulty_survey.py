#!/usr/bin/env python3
"""
Difficulty survey tool.

Generates a batch of seeded puzzles and reports how the difficulty
scores and labels are distributed for a given size and blank count.

Usage:
    python difficulty_survey.py [--size N] [--blanks K] [--count C] [--seed S]

Examples:
    python tools/difficulty_survey.py
    python tools/difficulty_survey.py --size 5 --blanks 15 --count 2000
"""

import sys
import argparse
from collections import Counter
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.puzzle import SumPuzzle, DifficultyLevel


def survey(size: int, blanks: int, count: int, seed: int) -> dict:
    """
    Generate puzzles and collect their difficulty scores.

    Args:
        size: Grid size
        blanks: Blank cells per puzzle
        count: Number of puzzles
        seed: Seed for the shared random generator

    Returns:
        Dictionary with scores array and label counter
    """
    rng = np.random.default_rng(seed)
    scores = np.zeros(count, dtype=np.int64)
    labels = Counter()

    for i in range(count):
        snapshot = SumPuzzle(size, rng=rng).generate(blanks)
        scores[i] = snapshot.difficulty
        labels[snapshot.difficulty_label] += 1

    return {"scores": scores, "labels": labels}


def print_report(result: dict, size: int, blanks: int) -> None:
    """Print score statistics and the label distribution."""
    scores = result["scores"]
    total = len(scores)

    print(f"\n{'='*60}")
    print(f"Difficulty survey: {total} puzzles, {size}x{size}, {blanks} blanks")
    print(f"{'='*60}")
    print(f"  Score min/median/max: {scores.min()} / {np.median(scores):.1f} / {scores.max()}")
    print(f"  Score mean: {scores.mean():.2f} (std {scores.std():.2f})")

    print(f"\n  Score histogram:")
    values, counts = np.unique(scores, return_counts=True)
    for value, n in zip(values, counts):
        bar = "#" * max(1, int(40 * n / total))
        print(f"    {value:3d}: {n:6d} {bar}")

    print(f"\n  Labels:")
    for level in DifficultyLevel:
        n = result["labels"].get(level.label, 0)
        print(f"    {level.display:16s} {n:6d} ({100.0 * n / total:5.1f}%)")


def main():
    parser = argparse.ArgumentParser(description="Survey puzzle difficulty scores")
    parser.add_argument("--size", type=int, default=5, help="Grid size (default: 5)")
    parser.add_argument("--blanks", type=int, default=10, help="Blank cells (default: 10)")
    parser.add_argument("--count", type=int, default=1000, help="Puzzles to generate (default: 1000)")
    parser.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    args = parser.parse_args()

    if args.count < 1:
        parser.error("--count must be at least 1")

    result = survey(args.size, args.blanks, args.count, args.seed)
    print_report(result, args.size, args.blanks)
    return 0


if __name__ == "__main__":
    sys.exit(main())

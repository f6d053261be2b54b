"""
Difficulty Module - Constraint-propagation solve simulation and labels.

The score is the number of propagation rounds a simple solver needs to
fill the blanks. Each round fills every blank that is the last unknown
cell in its row (or, failing that, its column). Cells filled earlier in
a round count as known for cells scanned later in the same round.
"""

import logging
from enum import Enum
from typing import Optional, Sequence, Tuple

from .grid import BLANK, MAX_DIGIT, MIN_DIGIT, PuzzleGrid

logger = logging.getLogger(__name__)

# Upper bound on simulated rounds (also the maximum score)
MAX_ROUNDS = 100

# Score thresholds (inclusive upper bounds)
EASY_MAX_SCORE = 3
NORMAL_MAX_SCORE = 6
HARD_MAX_SCORE = 10


class DifficultyLevel(Enum):
    """
    Ordinal difficulty categories.

    Values are (label, stars) pairs.
    """
    EASY = ("Easy", 1)
    NORMAL = ("Normal", 2)
    HARD = ("Hard", 3)
    VERY_HARD = ("Very Hard", 4)

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def stars(self) -> int:
        return self.value[1]

    @property
    def display(self) -> str:
        """Label followed by its star rating, e.g. 'Hard ***'."""
        return f"{self.label} {'*' * self.stars}"


def _infer(line_total: int, known_sum: int) -> Optional[int]:
    """Value of the single missing cell of a line, or None if out of range."""
    value = line_total - known_sum
    if MIN_DIGIT <= value <= MAX_DIGIT:
        return value
    return None


def simulate_solve(
    puzzle: PuzzleGrid,
    row_sums: Sequence[int],
    col_sums: Sequence[int],
    max_rounds: int = MAX_ROUNDS
) -> Tuple[int, PuzzleGrid]:
    """
    Simulate solving the puzzle by sum subtraction.

    The round counter is incremented before the scan, so a puzzle with
    no blanks still scores 1. A round that fills nothing, or that leaves
    no blanks, ends the simulation.

    Args:
        puzzle: Puzzle grid with BLANK cells (not modified)
        row_sums: Target sum of each row
        col_sums: Target sum of each column
        max_rounds: Round cap

    Returns:
        (rounds executed in [1, max_rounds], working grid after the
        last round, possibly still holding blanks)
    """
    work: PuzzleGrid = [list(row) for row in puzzle]
    size = len(work)
    rounds = 0

    while rounds < max_rounds:
        progress = False
        rounds += 1

        for row in range(size):
            for col in range(size):
                if work[row][col] is not BLANK:
                    continue

                row_known = 0
                row_unknown = 0
                for c in range(size):
                    if work[row][c] is BLANK:
                        row_unknown += 1
                    else:
                        row_known += work[row][c]

                col_known = 0
                col_unknown = 0
                for r in range(size):
                    if work[r][col] is BLANK:
                        col_unknown += 1
                    else:
                        col_known += work[r][col]

                # Row inference wins; the column is only tried when the
                # row still has other blanks
                if row_unknown == 1:
                    value = _infer(row_sums[row], row_known)
                    if value is not None:
                        work[row][col] = value
                        progress = True
                elif col_unknown == 1:
                    value = _infer(col_sums[col], col_known)
                    if value is not None:
                        work[row][col] = value
                        progress = True

        if not progress:
            break

        if all(cell is not BLANK for line in work for cell in line):
            break

    logger.debug(f"Solve simulation finished after {rounds} round(s)")
    return rounds, work


def estimate_difficulty(
    puzzle: PuzzleGrid,
    row_sums: Sequence[int],
    col_sums: Sequence[int],
    max_rounds: int = MAX_ROUNDS
) -> int:
    """Difficulty score of a puzzle: the round count of simulate_solve()."""
    rounds, _ = simulate_solve(puzzle, row_sums, col_sums, max_rounds)
    return rounds


def difficulty_level(score: int) -> DifficultyLevel:
    """
    Map a difficulty score to its category.

    Args:
        score: Round count from estimate_difficulty()

    Returns:
        DifficultyLevel for the score
    """
    if score <= EASY_MAX_SCORE:
        return DifficultyLevel.EASY
    if score <= NORMAL_MAX_SCORE:
        return DifficultyLevel.NORMAL
    if score <= HARD_MAX_SCORE:
        return DifficultyLevel.HARD
    return DifficultyLevel.VERY_HARD


def difficulty_label(score: int) -> str:
    """Human-readable label for a difficulty score."""
    return difficulty_level(score).label

"""
Grid Module - Complete grid generation, sum calculation and cell masking.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)

# Digit range for every grid cell (inclusive)
MIN_DIGIT = 1
MAX_DIGIT = 9

# Marker used for cells hidden from the player
BLANK = None

Grid = List[List[int]]
PuzzleGrid = List[List[Optional[int]]]


def generate_complete_grid(size: int, rng: np.random.Generator) -> Grid:
    """
    Generate a size x size grid of random digits.

    Every cell is drawn independently and uniformly from 1-9. Rows and
    columns may repeat digits, there is no Sudoku constraint.

    Args:
        size: Grid dimension (rows == cols)
        rng: Random source exposing integers(low, high, size=...)

    Returns:
        2D list of ints in [MIN_DIGIT, MAX_DIGIT]
    """
    values = np.asarray(rng.integers(MIN_DIGIT, MAX_DIGIT + 1, size=(size, size)))
    grid = [[int(v) for v in row] for row in values]
    logger.debug(f"Generated {size}x{size} grid")
    return grid


def compute_sums(grid: Grid) -> Tuple[List[int], List[int]]:
    """
    Compute the row and column sums of a complete grid.

    Args:
        grid: Complete grid (no blanks)

    Returns:
        (row_sums, col_sums) as lists of ints
    """
    values = np.asarray(grid, dtype=np.int64)
    row_sums = [int(s) for s in values.sum(axis=1)]
    col_sums = [int(s) for s in values.sum(axis=0)]
    return row_sums, col_sums


def shuffled_positions(size: int, rng: np.random.Generator) -> List[Tuple[int, int]]:
    """
    Return every (row, col) coordinate in a uniformly random order.

    Coordinates start in row-major order and are shuffled with
    Fisher-Yates: for i from the last index down to 1, swap with a
    uniformly chosen index in [0, i].

    Args:
        size: Grid dimension
        rng: Random source

    Returns:
        List of size*size (row, col) tuples
    """
    positions = [(r, c) for r in range(size) for c in range(size)]

    for i in range(len(positions) - 1, 0, -1):
        j = int(rng.integers(0, i + 1))
        positions[i], positions[j] = positions[j], positions[i]

    return positions


def mask_cells(grid: Grid, blank_count: int, rng: np.random.Generator) -> PuzzleGrid:
    """
    Blank out cells of a copy of the grid.

    The blank count is clamped to [0, size*size]. The original grid
    is left untouched.

    Args:
        grid: Complete grid
        blank_count: Requested number of blank cells
        rng: Random source

    Returns:
        Puzzle grid with BLANK in the masked positions
    """
    size = len(grid)
    puzzle: PuzzleGrid = [list(row) for row in grid]

    positions = shuffled_positions(size, rng)
    count = max(0, min(blank_count, len(positions)))
    if count < blank_count:
        logger.debug(f"Blank count {blank_count} clamped to {count}")

    for r, c in positions[:count]:
        puzzle[r][c] = BLANK

    return puzzle


def count_blanks(puzzle: PuzzleGrid) -> int:
    """Count the blank cells of a puzzle grid."""
    return sum(1 for row in puzzle for cell in row if cell is BLANK)


def blank_positions(puzzle: PuzzleGrid) -> List[Tuple[int, int]]:
    """List blank cell coordinates in row-major order."""
    return [
        (r, c)
        for r, row in enumerate(puzzle)
        for c, cell in enumerate(row)
        if cell is BLANK
    ]

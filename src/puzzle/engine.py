"""
Engine Module - Orchestrates the puzzle generation pipeline.
"""

import logging
from typing import List, Optional

import numpy as np

from .difficulty import difficulty_label, estimate_difficulty
from .errors import GenerationError, InvalidSizeError, PuzzleNotGeneratedError
from .grid import Grid, PuzzleGrid, compute_sums, generate_complete_grid, mask_cells
from .progress import (
    PROGRESS_DONE,
    PROGRESS_GRID,
    PROGRESS_MASK,
    PROGRESS_START,
    PROGRESS_SUMS,
    as_observer,
)
from .snapshot import PuzzleSnapshot

logger = logging.getLogger(__name__)

# Defaults of the core engine (the desktop UI uses its own settings)
DEFAULT_SIZE = 4
DEFAULT_BLANK_COUNT = 6


class SumPuzzle:
    """
    Generates one row/column sum puzzle.

    A fresh instance is meant to be created per puzzle. generate() runs
    the whole pipeline and only stores its results once every stage has
    succeeded, so a failed run never leaves a half-built puzzle behind.

    Attributes:
        size: Grid dimension
        rng: Random source used for digits and the mask shuffle
        grid: Complete grid (answer key)
        puzzle: Grid with blanks
        row_sums: Row sums of grid
        col_sums: Column sums of grid
        difficulty: Difficulty score (0 until generated)

    Example:
        engine = SumPuzzle(5, seed=42)
        snapshot = engine.generate(10, observer=print)
        print(snapshot.difficulty_label)
    """

    def __init__(self, size: int = DEFAULT_SIZE,
                 rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None):
        """
        Initialize the engine.

        Args:
            size: Grid dimension, must be a positive integer
            rng: Random source (takes precedence over seed)
            seed: Seed for a new numpy Generator when rng is not given

        Raises:
            InvalidSizeError: If size is not a positive integer
        """
        if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size < 1:
            raise InvalidSizeError(size)

        self.size = int(size)
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        self.grid: Grid = []
        self.puzzle: PuzzleGrid = []
        self.row_sums: List[int] = []
        self.col_sums: List[int] = []
        self.difficulty = 0
        self._snapshot: Optional[PuzzleSnapshot] = None

    def generate(self, blank_count: int = DEFAULT_BLANK_COUNT, observer=None) -> PuzzleSnapshot:
        """
        Run the full pipeline: grid, sums, mask, difficulty.

        The observer receives 0, 30, 50, 70 and 100 as the stages complete.

        Args:
            blank_count: Cells to blank (clamped to size*size)
            observer: ProgressObserver, plain callable or None

        Returns:
            PuzzleSnapshot of the generated puzzle

        Raises:
            GenerationError: If any stage fails
        """
        progress = as_observer(observer)

        # Drop the previous run so a failure leaves nothing stale behind
        self.grid = []
        self.puzzle = []
        self.row_sums = []
        self.col_sums = []
        self.difficulty = 0
        self._snapshot = None
        stage = "start"

        try:
            progress.report_progress(PROGRESS_START)

            stage = "grid generation"
            grid = generate_complete_grid(self.size, self.rng)
            progress.report_progress(PROGRESS_GRID)

            stage = "sum calculation"
            row_sums, col_sums = compute_sums(grid)
            progress.report_progress(PROGRESS_SUMS)

            stage = "masking"
            puzzle = mask_cells(grid, blank_count, self.rng)
            progress.report_progress(PROGRESS_MASK)

            stage = "difficulty estimation"
            difficulty = estimate_difficulty(puzzle, row_sums, col_sums)
            progress.report_progress(PROGRESS_DONE)
        except Exception as e:
            logger.exception(f"Generation failed during {stage}")
            raise GenerationError(stage, e) from e

        self.grid = grid
        self.puzzle = puzzle
        self.row_sums = row_sums
        self.col_sums = col_sums
        self.difficulty = difficulty
        self._snapshot = PuzzleSnapshot.create(puzzle, grid, row_sums, col_sums, difficulty)

        logger.info(
            f"Generated {self.size}x{self.size} puzzle with "
            f"{self._snapshot.blank_count} blanks, difficulty "
            f"{difficulty} ({self._snapshot.difficulty_label})"
        )
        return self._snapshot

    @property
    def is_generated(self) -> bool:
        return self._snapshot is not None

    def get_difficulty_label(self) -> str:
        """Label for the current difficulty score."""
        return difficulty_label(self.difficulty)

    def get_puzzle_data(self) -> PuzzleSnapshot:
        """
        Get the result of the last successful generate().

        Returns:
            PuzzleSnapshot

        Raises:
            PuzzleNotGeneratedError: If generate() has not succeeded yet
        """
        if self._snapshot is None:
            raise PuzzleNotGeneratedError("generate() has not completed")
        return self._snapshot

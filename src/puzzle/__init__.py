"""
Puzzle Package - Generation engine for the row/column sum puzzle.

A puzzle is a square grid of digits 1-9 where every row and column
sum is shown. Some cells are blanked out and the player fills them in.
The engine builds the grid, derives the sums, masks cells and scores
difficulty by simulating a sum-subtraction solver.

Public API:
    - SumPuzzle: Engine running the generation pipeline
    - PuzzleSnapshot: Read-only generation result
    - DifficultyLevel: Difficulty categories
    - ProgressObserver: Interface for progress notifications
    - generate_complete_grid(), compute_sums(), mask_cells(): Pipeline stages
    - simulate_solve(), estimate_difficulty(), difficulty_label(): Difficulty scoring

Usage:
    from src.puzzle import SumPuzzle

    engine = SumPuzzle(5)
    snapshot = engine.generate(10, observer=lambda pct: print(f"{pct}%"))

    for row in snapshot.puzzle:
        print(" ".join("." if v is None else str(v) for v in row))
    print(f"Difficulty: {snapshot.difficulty_label}")
"""

from .grid import (
    BLANK,
    MIN_DIGIT,
    MAX_DIGIT,
    generate_complete_grid,
    compute_sums,
    shuffled_positions,
    mask_cells,
    count_blanks,
    blank_positions,
)
from .difficulty import (
    MAX_ROUNDS,
    DifficultyLevel,
    simulate_solve,
    estimate_difficulty,
    difficulty_level,
    difficulty_label,
)
from .progress import (
    ProgressObserver,
    CallbackObserver,
    NullObserver,
    RecordingObserver,
)
from .snapshot import PuzzleSnapshot
from .errors import (
    PuzzleError,
    InvalidSizeError,
    GenerationError,
    PuzzleNotGeneratedError,
)
from .engine import SumPuzzle, DEFAULT_SIZE, DEFAULT_BLANK_COUNT

__all__ = [
    # Grid stages
    "BLANK",
    "MIN_DIGIT",
    "MAX_DIGIT",
    "generate_complete_grid",
    "compute_sums",
    "shuffled_positions",
    "mask_cells",
    "count_blanks",
    "blank_positions",
    # Difficulty
    "MAX_ROUNDS",
    "DifficultyLevel",
    "simulate_solve",
    "estimate_difficulty",
    "difficulty_level",
    "difficulty_label",
    # Progress
    "ProgressObserver",
    "CallbackObserver",
    "NullObserver",
    "RecordingObserver",
    # Results and errors
    "PuzzleSnapshot",
    "PuzzleError",
    "InvalidSizeError",
    "GenerationError",
    "PuzzleNotGeneratedError",
    # Engine
    "SumPuzzle",
    "DEFAULT_SIZE",
    "DEFAULT_BLANK_COUNT",
]

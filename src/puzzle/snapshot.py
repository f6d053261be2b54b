"""
Snapshot Module - Read-only result of a puzzle generation.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .difficulty import DifficultyLevel, difficulty_level
from .grid import BLANK, blank_positions


@dataclass(frozen=True)
class PuzzleSnapshot:
    """
    Everything a presentation layer needs to show and check a puzzle.

    Matrices are stored as tuples of tuples so the snapshot cannot be
    changed by the UI that consumes it.

    Attributes:
        size: Grid dimension
        puzzle: Masked grid, BLANK (None) for cells the player fills in
        solution: Complete grid (answer key)
        row_sums: Sum of each solution row
        col_sums: Sum of each solution column
        difficulty: Round count from the solve simulation
        difficulty_label: Human-readable difficulty category
    """
    size: int
    puzzle: Tuple[Tuple[Optional[int], ...], ...]
    solution: Tuple[Tuple[int, ...], ...]
    row_sums: Tuple[int, ...]
    col_sums: Tuple[int, ...]
    difficulty: int
    difficulty_label: str

    @classmethod
    def create(cls, puzzle: List[List[Optional[int]]], solution: List[List[int]],
               row_sums: List[int], col_sums: List[int],
               difficulty: int) -> 'PuzzleSnapshot':
        """
        Build a snapshot from the engine's mutable lists.

        Args:
            puzzle: Masked grid
            solution: Complete grid
            row_sums: Row sums
            col_sums: Column sums
            difficulty: Difficulty score

        Returns:
            PuzzleSnapshot instance
        """
        return cls(
            size=len(solution),
            puzzle=tuple(tuple(row) for row in puzzle),
            solution=tuple(tuple(row) for row in solution),
            row_sums=tuple(row_sums),
            col_sums=tuple(col_sums),
            difficulty=difficulty,
            difficulty_label=difficulty_level(difficulty).label,
        )

    @property
    def level(self) -> DifficultyLevel:
        """Difficulty category of this puzzle."""
        return difficulty_level(self.difficulty)

    def is_blank(self, row: int, col: int) -> bool:
        """Check whether the player has to fill the cell."""
        return self.puzzle[row][col] is BLANK

    def blank_cells(self) -> List[Tuple[int, int]]:
        """Blank cell coordinates in row-major order."""
        return blank_positions(self.puzzle)

    @property
    def blank_count(self) -> int:
        return len(self.blank_cells())

    def is_correct(self, row: int, col: int, value: int) -> bool:
        """Compare a player value against the solution."""
        return self.solution[row][col] == value

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the plain data contract used by browser front ends.

        Returns:
            Dict with size, puzzle, solution, rowSums, colSums,
            difficulty and difficultyLabel keys
        """
        return {
            "size": self.size,
            "puzzle": [list(row) for row in self.puzzle],
            "solution": [list(row) for row in self.solution],
            "rowSums": list(self.row_sums),
            "colSums": list(self.col_sums),
            "difficulty": self.difficulty,
            "difficultyLabel": self.difficulty_label,
        }

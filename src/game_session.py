"""
Game Session Module - Player state for one generated puzzle.

The session owns everything the UI needs to remember between events:
the player's entries, the selected cell (click-select mode) and whether
the puzzle has been solved. It only reads the PuzzleSnapshot and never
touches the engine.

State Flow:
    PLAYING --(every blank entered correctly)--> SOLVED
"""

from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Tuple, Union
import logging

import numpy as np

from src.puzzle import MAX_DIGIT, MIN_DIGIT, PuzzleSnapshot

logger = logging.getLogger(__name__)


__all__ = [
    "SessionState",
    "InputMode",
    "CellFeedback",
    "GameSession",
]

Cell = Tuple[int, int]

# Arrow key directions as (row delta, col delta)
DIRECTIONS: Dict[str, Cell] = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1),
}

DEFAULT_CHOICE_COUNT = 4


class SessionState(Enum):
    """
    Session states.

    States:
        PLAYING: Blanks remain or some entries are wrong
        SOLVED: Every blank holds the correct digit
    """
    PLAYING = auto()
    SOLVED = auto()


class InputMode(Enum):
    """How the player enters digits."""
    DIRECT = "direct"   # Type a digit into the cell
    CHOICE = "choice"   # Pick one of a few candidate digits
    SELECT = "select"   # Click a cell, then click a digit on the pad

    @classmethod
    def from_name(cls, name: str) -> 'InputMode':
        """
        Look up a mode by its settings name.

        Raises:
            ValueError: If the name is unknown
        """
        try:
            return cls(name)
        except ValueError:
            available = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown input mode: {name}. Available: {available}") from None


class CellFeedback(Enum):
    """Result of entering a value into a cell."""
    CORRECT = auto()
    INCORRECT = auto()
    REJECTED = auto()  # Not a single digit 1-9; entry cleared


class GameSession:
    """
    Tracks the player's progress on one puzzle.

    Example:
        session = GameSession(snapshot, on_solved=show_congratulations)
        feedback = session.enter(0, 2, "7")
        if feedback is CellFeedback.CORRECT:
            ...
    """

    def __init__(self, snapshot: PuzzleSnapshot, mode: InputMode = InputMode.DIRECT,
                 on_solved: Optional[Callable[[], None]] = None):
        """
        Initialize session.

        Args:
            snapshot: Generated puzzle
            mode: Input mode used by the UI
            on_solved: Called once when the puzzle becomes solved
        """
        self.snapshot = snapshot
        self.mode = mode
        self.on_solved = on_solved

        self._state = SessionState.PLAYING
        self._entries: Dict[Cell, int] = {}
        self._selected: Optional[Cell] = None
        self._blanks: List[Cell] = snapshot.blank_cells()

    @property
    def state(self) -> SessionState:
        """Get current session state."""
        return self._state

    @property
    def selected(self) -> Optional[Cell]:
        """Currently selected blank (click-select mode)."""
        return self._selected

    @property
    def entries(self) -> Dict[Cell, int]:
        """Copy of the player's entries keyed by (row, col)."""
        return dict(self._entries)

    def blank_cells(self) -> List[Cell]:
        """Blank cells in row-major order."""
        return list(self._blanks)

    def is_blank(self, row: int, col: int) -> bool:
        return self.snapshot.is_blank(row, col)

    def entry(self, row: int, col: int) -> Optional[int]:
        """Player's value for a cell, or None if empty."""
        return self._entries.get((row, col))

    def enter(self, row: int, col: int, value: Union[str, int, None]) -> CellFeedback:
        """
        Enter a player value into a blank cell.

        Args:
            row: Row index
            col: Column index
            value: Digit as int or single-character string

        Returns:
            CellFeedback for the entry

        Raises:
            ValueError: If the cell is not a blank
        """
        self._require_blank(row, col)

        digit = self._parse_digit(value)
        if digit is None:
            self._entries.pop((row, col), None)
            return CellFeedback.REJECTED

        self._entries[(row, col)] = digit

        if not self.snapshot.is_correct(row, col, digit):
            logger.debug(f"Incorrect entry {digit} at ({row},{col})")
            return CellFeedback.INCORRECT

        self._check_completion()
        return CellFeedback.CORRECT

    def clear(self, row: int, col: int) -> None:
        """Remove the player's value from a cell."""
        self._require_blank(row, col)
        self._entries.pop((row, col), None)

    def select(self, row: int, col: int) -> bool:
        """
        Select a blank cell for click-select entry.

        Returns:
            True if the cell was selected (revealed cells are ignored)
        """
        if not self.is_blank(row, col):
            return False
        self._selected = (row, col)
        return True

    def enter_selected(self, value: Union[str, int]) -> Optional[CellFeedback]:
        """
        Enter a value into the selected cell.

        Returns:
            CellFeedback, or None if no cell is selected
        """
        if self._selected is None:
            return None
        row, col = self._selected
        return self.enter(row, col, value)

    def is_complete(self) -> bool:
        """Check whether every blank holds the correct digit."""
        for row, col in self._blanks:
            value = self._entries.get((row, col))
            if value is None or not self.snapshot.is_correct(row, col, value):
                return False
        return True

    def next_blank(self, row: int, col: int) -> Optional[Cell]:
        """
        Blank after (row, col) in row-major order.

        Returns:
            Next blank cell, or None at the last blank
        """
        try:
            index = self._blanks.index((row, col))
        except ValueError:
            return None
        if index < len(self._blanks) - 1:
            return self._blanks[index + 1]
        return None

    def navigate(self, row: int, col: int, direction: str) -> Optional[Cell]:
        """
        Arrow-key movement from a cell.

        Movement is clamped to the grid edge.

        Args:
            row: Current row
            col: Current column
            direction: "up", "down", "left" or "right"

        Returns:
            Target cell if it is a blank, otherwise None
        """
        d_row, d_col = DIRECTIONS[direction]
        last = self.snapshot.size - 1
        new_row = min(max(row + d_row, 0), last)
        new_col = min(max(col + d_col, 0), last)

        if self.is_blank(new_row, new_col):
            return (new_row, new_col)
        return None

    def choices_for(self, row: int, col: int, count: int = DEFAULT_CHOICE_COUNT,
                    rng: Optional[np.random.Generator] = None) -> List[int]:
        """
        Candidate digits for multiple-choice entry.

        Args:
            row: Row index
            col: Column index
            count: Number of candidates (at most 9)
            rng: Random source

        Returns:
            Shuffled list of distinct digits containing the solution
        """
        self._require_blank(row, col)
        rng = rng if rng is not None else np.random.default_rng()
        count = max(1, min(count, MAX_DIGIT - MIN_DIGIT + 1))

        answer = self.snapshot.solution[row][col]
        others = [d for d in range(MIN_DIGIT, MAX_DIGIT + 1) if d != answer]
        picked = rng.choice(others, size=count - 1, replace=False)

        choices = [answer] + [int(d) for d in picked]
        return [choices[i] for i in rng.permutation(len(choices))]

    def _check_completion(self) -> None:
        """Move to SOLVED the first time every blank is correct."""
        if self._state is SessionState.SOLVED or not self.is_complete():
            return
        self._state = SessionState.SOLVED
        logger.info("Puzzle solved")
        if self.on_solved:
            self.on_solved()

    def _require_blank(self, row: int, col: int) -> None:
        if not self.is_blank(row, col):
            raise ValueError(f"Cell ({row},{col}) is not a blank cell")

    @staticmethod
    def _parse_digit(value: Union[str, int, None]) -> Optional[int]:
        """Accept a single digit 1-9 given as int or string."""
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value if MIN_DIGIT <= value <= MAX_DIGIT else None
        if isinstance(value, str) and len(value) == 1 and value in "123456789":
            return int(value)
        return None

    def get_state_string(self) -> str:
        """Get human-readable state description."""
        filled = sum(1 for cell in self._blanks if cell in self._entries)
        if self._state is SessionState.SOLVED:
            return "Solved!"
        return f"{filled}/{len(self._blanks)} filled"

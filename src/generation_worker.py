"""
Generation Worker Module for Sum Puzzle

Runs the puzzle generation pipeline on a background QThread so the
window stays responsive. Progress and results reach the UI via Qt
signals, which are delivered on the UI thread.
"""

import logging
from typing import Optional

from PyQt5.QtCore import QThread, pyqtSignal

from src.puzzle import SumPuzzle, PuzzleSnapshot


# Configure module logger
logger = logging.getLogger(__name__)


class SignalObserver:
    """Forwards engine progress to a worker's progress_changed signal."""

    def __init__(self, worker: 'GenerationWorker'):
        self._worker = worker

    def report_progress(self, percent: int) -> None:
        self._worker.progress_changed.emit(percent)


class GenerationWorker(QThread):
    """
    Background worker generating a single puzzle.

    Each request gets its own worker and engine. A request id is carried
    through the signals so the caller can ignore results from a worker
    that has been superseded by a newer request.

    Signals:
        progress_changed(int): Generation percentage (0-100)
        puzzle_ready(int, object): Request id and PuzzleSnapshot
        error_occurred(int, str): Request id and error message

    Example:
        worker = GenerationWorker(request_id=1, size=5, blank_count=10)
        worker.progress_changed.connect(window.set_progress)
        worker.puzzle_ready.connect(on_ready)
        worker.start()
    """

    progress_changed = pyqtSignal(int)
    puzzle_ready = pyqtSignal(int, object)
    error_occurred = pyqtSignal(int, str)

    def __init__(self, request_id: int, size: int, blank_count: int,
                 seed: Optional[int] = None):
        """
        Initialize the generation worker.

        Args:
            request_id: Identifier echoed back in result signals
            size: Grid size
            blank_count: Cells to blank out
            seed: Optional RNG seed
        """
        super().__init__()
        self.request_id = request_id
        self.size = size
        self.blank_count = blank_count
        self.seed = seed
        self.snapshot: Optional[PuzzleSnapshot] = None

    def run(self):
        """Generate the puzzle. Called when thread starts."""
        logger.info(
            f"Generation request {self.request_id}: size={self.size}, "
            f"blanks={self.blank_count}, seed={self.seed}"
        )

        try:
            engine = SumPuzzle(self.size, seed=self.seed)
            self.snapshot = engine.generate(self.blank_count, SignalObserver(self))
        except Exception as e:
            # The engine has already logged the traceback
            logger.error(f"Error generating puzzle: {e}")
            self.error_occurred.emit(self.request_id, str(e))
            return

        self.puzzle_ready.emit(self.request_id, self.snapshot)

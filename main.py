"""
Sum Puzzle - Entry Point

Launches the puzzle window and generates puzzles on a background worker.

Example:
    python main.py
    python main.py --size 4 --blanks 6     # Smaller puzzle
    python main.py --mode choice --seed 7  # Multiple choice, reproducible
"""

import sys
import logging
import argparse
from typing import Any, Dict, List, Optional

from PyQt5.QtWidgets import QApplication, QMessageBox
from PyQt5.QtCore import QTimer

from src.puzzle_window import PuzzleWindow
from src.generation_worker import GenerationWorker
from src.game_session import GameSession, InputMode
from src.puzzle import PuzzleSnapshot
from src.puzzle_image import save_puzzle_image
from src.settings import load_settings, save_settings


logger = logging.getLogger(__name__)

# Pause after generation so the full progress bar is visible
RESULT_DISPLAY_DELAY_MS = 200


def configure_logging(debug: bool = False):
    """Configure logging - output to both console and file."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(),  # Console output
            logging.FileHandler("sum_puzzle.log", mode='w', encoding='utf-8')  # File output
        ]
    )


class Application:
    """
    Main application controller.

    Owns the window, the generation workers and the current game
    session, connecting signals between them.
    """

    def __init__(self, overrides: Optional[Dict[str, Any]] = None):
        """
        Initialize the application.

        Args:
            overrides: Settings given on the command line (not persisted)
        """
        # Load persistent settings
        self.settings = load_settings()
        self.effective = dict(self.settings)
        self.effective.update({k: v for k, v in (overrides or {}).items() if v is not None})

        self.window: Optional[PuzzleWindow] = None
        self.session: Optional[GameSession] = None
        self.snapshot: Optional[PuzzleSnapshot] = None

        # Workers still running; only the latest request is displayed
        self._workers: List[GenerationWorker] = []
        self._request_id = 0

    def setup(self):
        """Set up the UI and connect signals."""
        self.window = PuzzleWindow()

        self.window.regenerate_requested.connect(self._on_regenerate)
        self.window.mode_changed.connect(self._on_mode_changed)
        self.window.save_image_requested.connect(self._on_save_image)
        self.window.shutdown_requested.connect(self._on_shutdown)

        self.window.set_input_mode(self._input_mode())

        logger.info(
            f"Application initialized: size={self.effective['grid_size']}, "
            f"blanks={self.effective['blank_count']}, mode={self.effective['input_mode']}"
        )

    def _input_mode(self) -> InputMode:
        try:
            return InputMode.from_name(self.effective["input_mode"])
        except ValueError as e:
            logger.warning(f"{e}, using direct entry")
            return InputMode.DIRECT

    def _on_regenerate(self):
        """Start generating a new puzzle, superseding any pending request."""
        self._request_id += 1
        request_id = self._request_id

        # A fixed seed gives a reproducible sequence of puzzles
        seed = self.effective.get("seed")
        if seed is not None:
            seed += request_id - 1

        worker = GenerationWorker(
            request_id,
            size=self.effective["grid_size"],
            blank_count=self.effective["blank_count"],
            seed=seed,
        )
        worker.progress_changed.connect(
            lambda percent, rid=request_id: self._on_progress(rid, percent)
        )
        worker.puzzle_ready.connect(self._on_puzzle_ready)
        worker.error_occurred.connect(self._on_error)
        worker.finished.connect(lambda w=worker: self._on_worker_finished(w))

        self._workers.append(worker)
        self.window.set_generating(True)
        worker.start()

    def _on_progress(self, request_id: int, percent: int):
        if request_id == self._request_id:
            self.window.set_progress(percent)

    def _on_puzzle_ready(self, request_id: int, snapshot: PuzzleSnapshot):
        """Handle a finished puzzle from a worker."""
        if request_id != self._request_id:
            logger.debug(f"Ignoring superseded request {request_id}")
            return

        self.snapshot = snapshot
        QTimer.singleShot(RESULT_DISPLAY_DELAY_MS, lambda: self._show_puzzle(request_id))

    def _show_puzzle(self, request_id: int):
        if request_id != self._request_id:
            return
        self._start_session()
        self.window.set_generating(False)

    def _start_session(self):
        """Create a fresh session for the current snapshot and render it."""
        self.session = GameSession(self.snapshot, mode=self.window.current_input_mode())
        self.window.show_session(self.session)

    def _on_error(self, request_id: int, error_msg: str):
        """Handle worker error."""
        if request_id != self._request_id:
            return
        logger.error(f"Worker error: {error_msg}")
        self.window.set_generating(False)
        self.window.show_error(error_msg)

    def _on_worker_finished(self, worker: GenerationWorker):
        if worker in self._workers:
            self._workers.remove(worker)

    def _on_mode_changed(self, mode_name: str):
        """Handle input mode selection change from UI."""
        logger.info(f"Input mode changed to: {mode_name}")

        # Save to persistent settings
        self.settings["input_mode"] = mode_name
        self.effective["input_mode"] = mode_name
        save_settings(self.settings)

        # Restart the current puzzle with the new input widgets
        if self.snapshot is not None:
            self._start_session()

    def _on_save_image(self):
        """Export the current puzzle as PNG."""
        if self.snapshot is None:
            return
        try:
            path = save_puzzle_image(self.snapshot)
        except OSError as e:
            logger.error(f"Failed to save puzzle image: {e}")
            QMessageBox.warning(self.window, "Sum Puzzle", f"Could not save image: {e}")
            return
        self.window.status_label.setText(f"Saved {path.name}")

    def _on_shutdown(self):
        """Handle window close."""
        logger.info("Shutdown requested")
        for worker in list(self._workers):
            worker.wait(2000)  # 2 second timeout

    def run(self) -> int:
        """
        Show the window and request the first puzzle.

        Returns:
            Exit code
        """
        self.window.show()
        self._on_regenerate()
        return 0


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Sum Puzzle - Fill the grid so every row and column adds up"
    )
    parser.add_argument(
        "--size", "-s",
        type=int,
        help="Grid size (default from config.json, 5)"
    )
    parser.add_argument(
        "--blanks", "-b",
        type=int,
        help="Number of blank cells (default from config.json, 10)"
    )
    parser.add_argument(
        "--mode", "-m",
        choices=[m.value for m in InputMode],
        help="Input mode (default from config.json, direct)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible puzzles"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )
    return parser.parse_args(argv)


def main():
    """Initialize and run the Sum Puzzle application."""
    args = parse_args()
    configure_logging(args.debug)

    app = QApplication(sys.argv)

    application = Application(overrides={
        "grid_size": args.size,
        "blank_count": args.blanks,
        "input_mode": args.mode,
        "seed": args.seed,
    })
    application.setup()
    application.run()

    sys.exit(app.exec_())


if __name__ == "__main__":
    main()

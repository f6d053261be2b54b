"""
Test script for the Qt layer: application controller, generation worker
and puzzle window input handling

Tests:
1. Results from superseded requests are dropped
2. Worker signals for successful and failed generation
3. Window status updates and select-mode styles

Runs on the offscreen Qt platform, so no display is needed.

Usage:
    python test_app_controller.py
"""

import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt5.QtWidgets import QApplication
from PyQt5.QtTest import QTest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from main import Application, RESULT_DISPLAY_DELAY_MS
from src.game_session import GameSession, InputMode
from src.generation_worker import GenerationWorker
from src.puzzle import PuzzleSnapshot, SumPuzzle
from src.puzzle_window import FLASH_MS, PuzzleWindow, SELECTED_STYLE, UNSELECTED_STYLE


SOLUTION = [
    [3, 5, 1],
    [2, 9, 4],
    [7, 6, 8],
]
PUZZLE = [
    [None, 5, 1],
    [2, None, None],
    [7, 6, 8],
]


def make_snapshot() -> PuzzleSnapshot:
    row_sums = [sum(row) for row in SOLUTION]
    col_sums = [sum(col) for col in zip(*SOLUTION)]
    return PuzzleSnapshot.create(PUZZLE, SOLUTION, row_sums, col_sums, 2)


@pytest.fixture(scope="module")
def qapp():
    return QApplication.instance() or QApplication([])


class StubWindow:
    """Records the controller's calls instead of drawing anything."""

    def __init__(self):
        self.calls = []

    def set_progress(self, percent):
        self.calls.append(("set_progress", percent))

    def set_generating(self, generating):
        self.calls.append(("set_generating", generating))

    def show_session(self, session):
        self.calls.append(("show_session", session))

    def show_error(self, message):
        self.calls.append(("show_error", message))

    def current_input_mode(self):
        return InputMode.DIRECT


@pytest.fixture
def app(qapp, tmp_path, monkeypatch):
    # Keep config.json out of the project directory
    monkeypatch.chdir(tmp_path)
    application = Application()
    application.window = StubWindow()
    application._request_id = 2
    return application


# ----------------------------------------------------------------------
# Application controller
# ----------------------------------------------------------------------

def test_superseded_results_ignored(app):
    """Progress, results and errors of an older request change nothing."""
    print("\n" + "="*60)
    print("TEST: Superseded Requests")
    print("="*60)

    snapshot = SumPuzzle(3, seed=2).generate(3)

    app._on_progress(1, 50)
    app._on_puzzle_ready(1, snapshot)
    app._on_error(1, "old failure")

    assert app.snapshot is None
    assert app.window.calls == []

    app.snapshot = snapshot
    app._show_puzzle(1)
    assert app.session is None
    assert app.window.calls == []
    print("  [PASS] Stale request ignored")


def test_current_progress_forwarded(app):
    app._on_progress(2, 50)
    assert app.window.calls == [("set_progress", 50)]


def test_current_result_shown_after_delay(app):
    snapshot = SumPuzzle(3, seed=2).generate(3)

    app._on_puzzle_ready(2, snapshot)
    assert app.snapshot is snapshot
    assert app.session is None

    QTest.qWait(RESULT_DISPLAY_DELAY_MS + 200)

    assert isinstance(app.session, GameSession)
    assert app.session.snapshot is snapshot
    assert app.window.calls == [
        ("show_session", app.session),
        ("set_generating", False),
    ]


def test_result_superseded_during_delay(app):
    """A newer request started before the delay ends wins."""
    snapshot = SumPuzzle(3, seed=2).generate(3)

    app._on_puzzle_ready(2, snapshot)
    app._request_id = 3
    QTest.qWait(RESULT_DISPLAY_DELAY_MS + 200)

    assert app.session is None
    assert app.window.calls == []


def test_current_error_reported(app):
    app._on_error(2, "boom")
    assert app.window.calls == [("set_generating", False), ("show_error", "boom")]


# ----------------------------------------------------------------------
# Generation worker
# ----------------------------------------------------------------------

def connect_recorder(worker):
    record = {"progress": [], "ready": [], "error": []}
    worker.progress_changed.connect(record["progress"].append)
    worker.puzzle_ready.connect(lambda rid, snap: record["ready"].append((rid, snap)))
    worker.error_occurred.connect(lambda rid, msg: record["error"].append((rid, msg)))
    return record


def test_worker_emits_puzzle(qapp):
    print("\n" + "="*60)
    print("TEST: Generation Worker")
    print("="*60)

    worker = GenerationWorker(7, size=3, blank_count=2, seed=1)
    record = connect_recorder(worker)

    # Run in the calling thread so the signals arrive synchronously
    worker.run()

    assert record["progress"] == [0, 30, 50, 70, 100]
    assert record["error"] == []
    assert len(record["ready"]) == 1

    request_id, snapshot = record["ready"][0]
    assert request_id == 7
    assert snapshot is worker.snapshot
    assert snapshot.size == 3
    assert snapshot.blank_count == 2
    print(f"  Difficulty: {snapshot.difficulty_label}")
    print("  [PASS] Worker result")


def test_worker_reports_invalid_size(qapp):
    worker = GenerationWorker(8, size=0, blank_count=2)
    record = connect_recorder(worker)

    worker.run()

    assert record["ready"] == []
    assert record["progress"] == []
    assert len(record["error"]) == 1
    assert record["error"][0][0] == 8
    assert worker.snapshot is None


# ----------------------------------------------------------------------
# Puzzle window
# ----------------------------------------------------------------------

@pytest.fixture
def window(qapp):
    puzzle_window = PuzzleWindow()
    yield puzzle_window
    puzzle_window.deleteLater()


def test_rejected_entry_updates_status(window):
    window.show_session(GameSession(make_snapshot(), mode=InputMode.DIRECT))
    assert window.status_label.text() == "0/3 filled"

    window._on_text(0, 0, "3")
    assert window.status_label.text() == "1/3 filled"

    # Replacing the digit with a non-digit drops the entry
    window._on_text(0, 0, "x")
    assert window._cells[(0, 0)].text() == ""
    assert window.status_label.text() == "0/3 filled"


def test_flash_restores_selection_state(window):
    """After the flash, only the currently selected cell is highlighted."""
    window.show_session(GameSession(make_snapshot(), mode=InputMode.SELECT))

    window._on_select(0, 0)
    window._on_pad_digit(3)
    window._on_select(1, 1)

    QTest.qWait(FLASH_MS + 200)

    assert window._cells[(0, 0)].styleSheet() == UNSELECTED_STYLE
    assert window._cells[(0, 0)].text() == "3"
    assert window._cells[(1, 1)].styleSheet() == SELECTED_STYLE


def test_flash_keeps_selected_cell_highlighted(window):
    window.show_session(GameSession(make_snapshot(), mode=InputMode.SELECT))

    window._on_select(1, 2)
    window._on_pad_digit(5)

    QTest.qWait(FLASH_MS + 200)

    assert window._cells[(1, 2)].styleSheet() == SELECTED_STYLE
    assert window.status_label.text() == "1/3 filled"


def main():
    """Run all tests."""
    return pytest.main([__file__, "-v"])


if __name__ == "__main__":
    sys.exit(main())

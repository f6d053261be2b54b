"""
Puzzle Window Module for Sum Puzzle

Provides the PyQt5 main window: regenerate controls, generation progress,
difficulty display and the playable grid with its row and column sums.
Player state lives in a GameSession; the window only renders it and
forwards input.
"""

import logging
from typing import Dict, Optional, Tuple

from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel,
    QPushButton, QComboBox, QLineEdit, QProgressBar, QMessageBox
)
from PyQt5.QtCore import Qt, QTimer, pyqtSignal
from PyQt5.QtGui import QFont

from src.game_session import GameSession, InputMode, CellFeedback

logger = logging.getLogger(__name__)

CELL_PX = 50
FLASH_MS = 500
SOLVED_DIALOG_DELAY_MS = 300

CORRECT_STYLE = "background-color: #c8e6c9;"
INCORRECT_STYLE = "background-color: #ffcdd2;"
SELECTED_STYLE = "background-color: #fff59d;"
UNSELECTED_STYLE = "background-color: white; color: #333333;"
HEADER_STYLE = "background-color: #e3f2fd; color: #1565C0; font-weight: bold;"
REVEALED_STYLE = "background-color: #eeeeee; color: #333333;"

MODE_DESCRIPTIONS = {
    InputMode.DIRECT: "Type digits",
    InputMode.CHOICE: "Choose from 4",
    InputMode.SELECT: "Click cell, then digit",
}

ARROW_KEYS = {
    Qt.Key_Up: "up",
    Qt.Key_Down: "down",
    Qt.Key_Left: "left",
    Qt.Key_Right: "right",
}


class CellEdit(QLineEdit):
    """Single-digit entry field that reports arrow keys."""

    arrow_pressed = pyqtSignal(int, int, str)  # row, col, direction

    def __init__(self, row: int, col: int):
        super().__init__()
        self.row = row
        self.col = col
        self.setMaxLength(1)
        self.setAlignment(Qt.AlignCenter)

    def keyPressEvent(self, event):
        direction = ARROW_KEYS.get(event.key())
        if direction:
            self.arrow_pressed.emit(self.row, self.col, direction)
            return
        super().keyPressEvent(event)


class PuzzleWindow(QMainWindow):
    """
    Main window for playing a sum puzzle.

    Signals are consumed by the Application controller, which owns the
    generation worker and the settings.
    """

    regenerate_requested = pyqtSignal()
    mode_changed = pyqtSignal(str)  # Emits input mode name when changed
    save_image_requested = pyqtSignal()
    shutdown_requested = pyqtSignal()

    def __init__(self):
        super().__init__()
        self.session: Optional[GameSession] = None
        self._cells: Dict[Tuple[int, int], QWidget] = {}
        self._init_ui()

    def _init_ui(self):
        """Initialize the user interface components."""
        self.setWindowTitle("Sum Puzzle")
        self.setMinimumSize(380, 480)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout()
        layout.setSpacing(10)
        layout.setContentsMargins(20, 20, 20, 20)
        central_widget.setLayout(layout)

        # Difficulty label
        self.difficulty_label = QLabel("Difficulty: --")
        self.difficulty_label.setAlignment(Qt.AlignCenter)
        difficulty_font = QFont()
        difficulty_font.setPointSize(11)
        difficulty_font.setBold(True)
        self.difficulty_label.setFont(difficulty_font)
        layout.addWidget(self.difficulty_label)

        # Input mode selector
        mode_layout = QHBoxLayout()
        mode_label = QLabel("Input:")
        mode_label.setFont(QFont("", 9))
        mode_layout.addWidget(mode_label)

        self.mode_combo = QComboBox()
        for mode, description in MODE_DESCRIPTIONS.items():
            self.mode_combo.addItem(description, mode.value)
        self.mode_combo.currentIndexChanged.connect(self._on_mode_changed)
        mode_layout.addWidget(self.mode_combo, 1)
        layout.addLayout(mode_layout)

        # Progress bar (visible while generating)
        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setValue(0)
        self.progress_bar.setVisible(False)
        layout.addWidget(self.progress_bar)

        # Puzzle grid
        self.grid_container = QWidget()
        self.grid_layout = QGridLayout()
        self.grid_layout.setSpacing(2)
        self.grid_container.setLayout(self.grid_layout)
        layout.addWidget(self.grid_container, 0, Qt.AlignCenter)

        # Digit pad for click-select mode
        self.pad_container = QWidget()
        pad_layout = QHBoxLayout()
        pad_layout.setSpacing(2)
        self.pad_container.setLayout(pad_layout)
        for digit in range(1, 10):
            button = QPushButton(str(digit))
            button.setFixedSize(32, 32)
            button.clicked.connect(lambda _checked, d=digit: self._on_pad_digit(d))
            pad_layout.addWidget(button)
        self.pad_container.setVisible(False)
        layout.addWidget(self.pad_container, 0, Qt.AlignCenter)

        # Status line
        self.status_label = QLabel("")
        self.status_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.status_label)

        # Buttons
        button_layout = QHBoxLayout()
        self.regenerate_button = QPushButton("NEW PUZZLE")
        self.regenerate_button.setMinimumHeight(40)
        button_font = QFont()
        button_font.setPointSize(11)
        button_font.setBold(True)
        self.regenerate_button.setFont(button_font)
        self.regenerate_button.clicked.connect(self.regenerate_requested.emit)
        button_layout.addWidget(self.regenerate_button)

        self.save_button = QPushButton("Save Image")
        self.save_button.setMinimumHeight(40)
        self.save_button.clicked.connect(self.save_image_requested.emit)
        self.save_button.setEnabled(False)  # Disabled until a puzzle exists
        button_layout.addWidget(self.save_button)
        layout.addLayout(button_layout)

        layout.addStretch()

        self._apply_styles()

    def _apply_styles(self):
        """Apply clean, minimal styling to the window."""
        style = """
            QMainWindow {
                background-color: #f5f5f5;
            }
            QPushButton {
                background-color: #4CAF50;
                color: white;
                border: none;
                border-radius: 5px;
                padding: 6px;
            }
            QPushButton:hover {
                background-color: #45a049;
            }
            QPushButton:pressed {
                background-color: #3d8b40;
            }
            QPushButton:disabled {
                background-color: #cccccc;
                color: #666666;
            }
            QLabel {
                color: #333333;
            }
        """
        self.setStyleSheet(style)

    # ------------------------------------------------------------------
    # Controller API
    # ------------------------------------------------------------------

    def set_input_mode(self, mode: InputMode):
        """Select a mode in the dropdown without emitting mode_changed."""
        index = self.mode_combo.findData(mode.value)
        if index >= 0:
            self.mode_combo.blockSignals(True)
            self.mode_combo.setCurrentIndex(index)
            self.mode_combo.blockSignals(False)

    def current_input_mode(self) -> InputMode:
        return InputMode.from_name(self.mode_combo.currentData())

    def set_generating(self, generating: bool):
        """
        Toggle the generating state.

        Args:
            generating: True while a worker is producing a puzzle
        """
        self.regenerate_button.setEnabled(not generating)
        self.progress_bar.setVisible(generating)
        if generating:
            self.progress_bar.setValue(0)
            self.status_label.setText("Generating...")

    def set_progress(self, percent: int):
        """Update the progress bar."""
        self.progress_bar.setValue(percent)

    def show_session(self, session: GameSession):
        """
        Render a new puzzle.

        Args:
            session: Session for the freshly generated puzzle
        """
        self.session = session
        self.session.on_solved = self._on_solved
        snapshot = session.snapshot

        self.difficulty_label.setText(f"Difficulty: {snapshot.level.display}")
        self.save_button.setEnabled(True)
        self.pad_container.setVisible(session.mode is InputMode.SELECT)
        self._build_grid()
        self._update_status()

    def show_error(self, message: str):
        """Show a generation failure and invite the player to retry."""
        self.status_label.setText("Generation failed")
        QMessageBox.warning(
            self, "Sum Puzzle",
            f"Failed to generate the puzzle. Please try again.\n\n{message}"
        )

    # ------------------------------------------------------------------
    # Grid construction
    # ------------------------------------------------------------------

    def _clear_grid(self):
        while self.grid_layout.count():
            item = self.grid_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self._cells.clear()

    def _build_grid(self):
        """Create the corner, the sum headers and one widget per cell."""
        self._clear_grid()
        snapshot = self.session.snapshot
        cell_font = QFont()
        cell_font.setPointSize(14)

        # Top-left corner is empty
        self.grid_layout.addWidget(self._make_label("", ""), 0, 0)

        # Column sums
        for col, total in enumerate(snapshot.col_sums):
            self.grid_layout.addWidget(self._make_label(str(total), HEADER_STYLE), 0, col + 1)

        for row in range(snapshot.size):
            self.grid_layout.addWidget(
                self._make_label(str(snapshot.row_sums[row]), HEADER_STYLE), row + 1, 0
            )

            for col in range(snapshot.size):
                value = snapshot.puzzle[row][col]
                if value is not None:
                    widget = self._make_label(str(value), REVEALED_STYLE)
                else:
                    widget = self._make_input(row, col)
                    self._cells[(row, col)] = widget
                widget.setFont(cell_font)
                self.grid_layout.addWidget(widget, row + 1, col + 1)

        first = next(iter(self._cells.values()), None)
        if isinstance(first, QLineEdit):
            first.setFocus()

    def _make_label(self, text: str, style: str) -> QLabel:
        label = QLabel(text)
        label.setAlignment(Qt.AlignCenter)
        label.setFixedSize(CELL_PX, CELL_PX)
        label.setStyleSheet(style)
        return label

    def _make_input(self, row: int, col: int) -> QWidget:
        """Create the entry widget for a blank cell in the session's mode."""
        mode = self.session.mode

        if mode is InputMode.CHOICE:
            combo = QComboBox()
            combo.addItem("", None)
            for digit in self.session.choices_for(row, col):
                combo.addItem(str(digit), digit)
            combo.currentIndexChanged.connect(
                lambda index, r=row, c=col, w=combo: self._on_choice(r, c, w, index)
            )
            combo.setFixedSize(CELL_PX, CELL_PX)
            return combo

        if mode is InputMode.SELECT:
            button = QPushButton("")
            button.setFixedSize(CELL_PX, CELL_PX)
            button.setStyleSheet(UNSELECTED_STYLE)
            button.clicked.connect(lambda _checked, r=row, c=col: self._on_select(r, c))
            return button

        edit = CellEdit(row, col)
        edit.setFixedSize(CELL_PX, CELL_PX)
        edit.textEdited.connect(lambda text, r=row, c=col: self._on_text(r, c, text))
        edit.arrow_pressed.connect(self._on_arrow)
        return edit

    # ------------------------------------------------------------------
    # Input handlers
    # ------------------------------------------------------------------

    def _on_mode_changed(self, index: int):
        """Handle input mode dropdown selection change."""
        mode_name = self.mode_combo.itemData(index)
        if mode_name:
            self.mode_changed.emit(mode_name)

    def _on_text(self, row: int, col: int, text: str):
        if not text:
            self.session.clear(row, col)
            self._update_status()
            return

        feedback = self.session.enter(row, col, text)
        widget = self._cells[(row, col)]
        if feedback is CellFeedback.REJECTED:
            widget.setText("")
            self._update_status()
            return

        self._flash(widget, feedback)
        self._update_status()

        target = self.session.next_blank(row, col)
        if target is not None:
            self._cells[target].setFocus()

    def _on_arrow(self, row: int, col: int, direction: str):
        target = self.session.navigate(row, col, direction)
        if target is not None:
            self._cells[target].setFocus()

    def _on_choice(self, row: int, col: int, combo: QComboBox, index: int):
        digit = combo.itemData(index)
        if digit is None:
            self.session.clear(row, col)
        else:
            self._flash(combo, self.session.enter(row, col, digit))
        self._update_status()

    def _on_select(self, row: int, col: int):
        previous = self.session.selected
        if previous is not None:
            self._cells[previous].setStyleSheet(UNSELECTED_STYLE)
        if self.session.select(row, col):
            self._cells[(row, col)].setStyleSheet(SELECTED_STYLE)

    def _on_pad_digit(self, digit: int):
        if self.session is None or self.session.selected is None:
            return
        row, col = self.session.selected
        feedback = self.session.enter_selected(digit)
        button = self._cells[(row, col)]
        button.setText(str(digit))
        self._flash(button, feedback, cell=(row, col))
        self._update_status()

    def _flash(self, widget: QWidget, feedback: CellFeedback,
               cell: Optional[Tuple[int, int]] = None):
        """
        Briefly color a cell green or red.

        Args:
            widget: Cell widget to color
            feedback: Result of the entry
            cell: Grid position of a select-mode button; its resting style
                depends on whether it is still selected when the flash ends
        """
        style = CORRECT_STYLE if feedback is CellFeedback.CORRECT else INCORRECT_STYLE
        widget.setStyleSheet(style)

        # Parented to the cell so a rebuilt grid takes the timer with it
        timer = QTimer(widget)
        timer.setSingleShot(True)
        timer.timeout.connect(lambda: widget.setStyleSheet(self._rest_style(cell)))
        timer.start(FLASH_MS)

    def _rest_style(self, cell: Optional[Tuple[int, int]]) -> str:
        if cell is None:
            return ""
        if self.session is not None and self.session.selected == cell:
            return SELECTED_STYLE
        return UNSELECTED_STYLE

    def _update_status(self):
        if self.session:
            self.status_label.setText(self.session.get_state_string())

    def _on_solved(self):
        """Congratulate the player once the puzzle is solved."""
        QTimer.singleShot(
            SOLVED_DIALOG_DELAY_MS,
            lambda: QMessageBox.information(
                self, "Sum Puzzle", "Congratulations! You solved the puzzle!"
            )
        )

    def closeEvent(self, event):
        """
        Handle window close event.

        Emits shutdown_requested so the controller can wait for a
        running worker.

        Args:
            event: QCloseEvent object
        """
        self.shutdown_requested.emit()
        event.accept()

"""
Progress Module - Observer interface for generation progress.
"""

from typing import Callable, List, Optional, Protocol

# Percentages reported by the generation pipeline, in order
PROGRESS_START = 0
PROGRESS_GRID = 30
PROGRESS_SUMS = 50
PROGRESS_MASK = 70
PROGRESS_DONE = 100


class ProgressObserver(Protocol):
    """Anything that wants to hear about generation progress."""

    def report_progress(self, percent: int) -> None:
        ...


class CallbackObserver:
    """
    Adapts a plain function to the ProgressObserver interface.

    Attributes:
        callback: Function called with each percentage
    """

    def __init__(self, callback: Callable[[int], None]):
        self.callback = callback

    def report_progress(self, percent: int) -> None:
        self.callback(percent)


class NullObserver:
    """Observer that ignores every notification."""

    def report_progress(self, percent: int) -> None:
        pass


class RecordingObserver:
    """
    Observer that keeps every reported percentage.

    Useful for headless callers and tests.
    """

    def __init__(self):
        self.history: List[int] = []

    def report_progress(self, percent: int) -> None:
        self.history.append(percent)

    @property
    def last(self) -> Optional[int]:
        """Most recent percentage, or None before the first report."""
        return self.history[-1] if self.history else None


def as_observer(observer) -> ProgressObserver:
    """
    Normalize an observer argument.

    Args:
        observer: None, a ProgressObserver, or a plain callable

    Returns:
        ProgressObserver instance
    """
    if observer is None:
        return NullObserver()
    if hasattr(observer, "report_progress"):
        return observer
    if callable(observer):
        return CallbackObserver(observer)
    raise TypeError(f"Not a progress observer: {observer!r}")

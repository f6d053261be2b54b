"""
Error types raised by the puzzle engine.
"""


class PuzzleError(Exception):
    """Base class for all puzzle engine errors."""


class InvalidSizeError(PuzzleError, ValueError):
    """Grid size is not a positive integer."""

    def __init__(self, size: object):
        super().__init__(f"Grid size must be a positive integer, got {size!r}")
        self.size = size


class GenerationError(PuzzleError, RuntimeError):
    """A stage of the generation pipeline failed."""

    def __init__(self, stage: str, cause: BaseException):
        super().__init__(f"Puzzle generation failed during {stage}: {cause}")
        self.stage = stage
        self.cause = cause


class PuzzleNotGeneratedError(PuzzleError):
    """Puzzle data was requested before a successful generate()."""

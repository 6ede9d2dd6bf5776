"""Exceptions raised by the board engine."""


class BoardError(Exception):
    """Base class for every error the board engine raises."""


class OutOfBounds(BoardError, IndexError):
    """A coordinate fell outside the grid extents.

    Internally generated coordinates never trigger this; seeing it means the
    caller passed a bad position.
    """

    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"({x}, {y}) is outside the {width}x{height} board")
        self.x = x
        self.y = y


class InvalidRemoval(BoardError, ValueError):
    """A removal request named empty cells or mixed colours. Nothing was changed."""


class RecoveryExhausted(BoardError, RuntimeError):
    """Reshuffling could not produce a board with a legal move."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class ConfigError(ValueError):
    """Board configuration failed validation."""

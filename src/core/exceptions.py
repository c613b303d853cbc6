"""
Exceptions used across layers.

Illegal moves are expected outcomes of user/AI input and carry a `MoveError` reason.
Everything else signals a corrupted game state or a bad request.
"""

from src.core.shared_types import MoveError


class GameError(Exception):
    """Base class for everything the chess backend raises on purpose"""


class InvalidPositionError(GameError):
    """A coordinate outside the board, or square notation that cannot be parsed"""


class IllegalMoveError(GameError):
    """The requested move was rejected. Game state is left untouched."""

    def __init__(self, reason: MoveError, message: str = "") -> None:
        self.reason = reason
        super().__init__(message or reason.value)


class GameStateError(GameError):
    """The game is in a state that should be unreachable (missing king, unknown status, ...)"""


class InvalidRequestError(GameError):
    """Request fields could not be interpreted"""


class RepositoryError(GameError):
    """Persistence layer could not deliver the requested record"""

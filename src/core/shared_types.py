"""
Type definitions used across layers
"""

from enum import StrEnum


class MoveError(StrEnum):
    """Why a move attempt got rejected. Values double as human readable messages."""

    NO_PIECE_AT_SOURCE = "no piece on the starting square"
    WRONG_PLAYER = "piece belongs to the player not on move"
    OCCUPIED_BY_OWN_COLOR = "target square holds a piece of your own color"
    INVALID_PIECE_MOVEMENT = "piece cannot move that way"
    PATH_BLOCKED = "path to the target square is blocked"
    MOVE_INTO_CHECK = "move would leave your king in check"
    INVALID_CASTLING = "castling is not allowed"
    INVALID_PROMOTION_CHOICE = "invalid promotion choice"
    GAME_ALREADY_OVER = "game is already over"


# --- Boundary versions of the domain enums. Names match the domain enums in src/chess/pieces.py
class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PromotionChoice(StrEnum):
    """A pawn can only be promoted into one of these"""

    QUEEN = "queen"
    ROOK = "rook"
    BISHOP = "bishop"
    KNIGHT = "knight"

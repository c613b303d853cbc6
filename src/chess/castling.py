"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Self

from src.chess.attacks import is_any_under_attack
from src.chess.board import Board, squares_between
from src.chess.moves import MoveHistory
from src.chess.pieces import Color, Piece, PieceType
from src.chess.position import Position
from src.core.shared_types import MoveError


class CastlingDirection(Enum):
    """The four castling directions."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    """

    color: Color
    king_from: Position
    king_to: Position
    rook_from: Position
    rook_to: Position

    @classmethod
    def from_notation(
        cls, color: Color, k_from: str, k_to: str, r_from: str, r_to: str
    ) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        return cls(
            color,
            Position.from_notation(k_from),
            Position.from_notation(k_to),
            Position.from_notation(r_from),
            Position.from_notation(r_to),
        )

    @property
    def king_path(self) -> list[Position]:
        """Every square the king stands on or passes through: current, intermediate, destination"""
        return [self.king_from, *squares_between(self.king_from, self.king_to), self.king_to]

    @property
    def home_squares(self) -> tuple[Position, Position]:
        return self.king_from, self.rook_from


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_notation(
        Color.WHITE, "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_notation(
        Color.WHITE, "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_notation(
        Color.BLACK, "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_notation(
        Color.BLACK, "e8", "c8", "a8", "d8"
    ),
}


def is_castling_attempt(from_square: Position, to_square: Position) -> bool:
    """A king move of two files along its rank"""
    return from_square.rank == to_square.rank and abs(to_square.file - from_square.file) == 2


def find_castling_direction(
    king_from: Position, king_to: Position, color: Color
) -> Optional[CastlingDirection]:
    for direction, rule in CASTLING_RULES.items():
        if rule.color == color and rule.king_from == king_from and rule.king_to == king_to:
            return direction
    return None


def castling_error(
    board: Board,
    king_from: Position,
    king_to: Position,
    color: Color,
    history: MoveHistory,
) -> Optional[MoveError]:
    """
    Check if the king's two-file move is a legal castling move
    ---

    **you are allowed to castle if**

    * The king and the chosen rook never left their starting squares (and nothing landed there since).
    * All squares between king and rook are empty.
    * You are not currently in check (you cannot castle out of a check).
    * None of the squares the king passes through or lands on is under attack.
    """
    direction = find_castling_direction(king_from, king_to, color)
    if direction is None:
        return MoveError.INVALID_CASTLING
    rule = CASTLING_RULES[direction]

    if any(history.has_moved(square) for square in rule.home_squares):
        return MoveError.INVALID_CASTLING

    if board.get(rule.king_from) != Piece(PieceType.KING, color):
        return MoveError.INVALID_CASTLING
    if board.get(rule.rook_from) != Piece(PieceType.ROOK, color):
        return MoveError.INVALID_CASTLING

    if not board.is_path_clear(rule.king_from, rule.rook_from):
        return MoveError.INVALID_CASTLING

    # king_path starts at the king's current square: covers castling out of check as well
    if is_any_under_attack(board, rule.king_path, color.opposite()):
        return MoveError.INVALID_CASTLING

    return None


def castling_rook_move(king_from: Position, king_to: Position, color: Color) -> tuple[Position, Position]:
    """Where the rook comes from / goes to, for a castling king move. Only call for valid castling moves."""
    direction = find_castling_direction(king_from, king_to, color)
    assert direction is not None
    rule = CASTLING_RULES[direction]
    return rule.rook_from, rule.rook_to

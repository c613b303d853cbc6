"""
Capturing rules / attacking rules

"Can this piece geometrically reach that square?" Nothing more: no castling, no en passant and no king safety.
The king-safety filter in rules.py is built on top of these, so they must never call back into it.
"""

from typing import Callable

from src.chess.board import Board
from src.chess.moves import (
    bishop_move_error,
    king_move_error,
    knight_move_error,
    pawn_direction,
    queen_move_error,
    rook_move_error,
)
from src.chess.pieces import Color, PieceType
from src.chess.position import Position


def pawn_attacks(board: Board, from_square: Position, to_square: Position, color: Color) -> bool:
    """Pawns only take diagonally forward. A pawn push never attacks."""
    df = abs(to_square.file - from_square.file)
    dr = to_square.rank - from_square.rank
    return df == 1 and dr == pawn_direction(color)


def knight_attacks(board: Board, from_square: Position, to_square: Position, color: Color) -> bool:
    return knight_move_error(board, from_square, to_square, color) is None


def bishop_attacks(board: Board, from_square: Position, to_square: Position, color: Color) -> bool:
    return bishop_move_error(board, from_square, to_square, color) is None


def rook_attacks(board: Board, from_square: Position, to_square: Position, color: Color) -> bool:
    return rook_move_error(board, from_square, to_square, color) is None


def queen_attacks(board: Board, from_square: Position, to_square: Position, color: Color) -> bool:
    return queen_move_error(board, from_square, to_square, color) is None


def king_attacks(board: Board, from_square: Position, to_square: Position, color: Color) -> bool:
    """
    Fixed one-square radius.
    NOTE: deliberately not the king's full move rule, which includes castling and asks for attacked squares itself.
    """
    return king_move_error(board, from_square, to_square, color) is None


# --- STRATEGY PATTERN: ATTACKING RULES ---
AttacksFn = Callable[[Board, Position, Position, Color], bool]
ATTACK_RULES: dict[PieceType, AttacksFn] = {
    PieceType.PAWN: pawn_attacks,
    PieceType.KNIGHT: knight_attacks,
    PieceType.BISHOP: bishop_attacks,
    PieceType.ROOK: rook_attacks,
    PieceType.QUEEN: queen_attacks,
    PieceType.KING: king_attacks,
}


def is_square_attacked(board: Board, square: Position, by_color: Color) -> bool:
    """Is any piece of `by_color` able to reach `square`? (whatever is standing there)"""
    for attacker_square, piece in board.pieces(by_color):
        if attacker_square == square:
            continue
        if ATTACK_RULES[piece.type](board, attacker_square, square, by_color):
            return True
    return False


def is_any_under_attack(board: Board, squares: list[Position], by_color: Color) -> bool:
    return any(is_square_attacked(board, square, by_color) for square in squares)


def is_in_check(board: Board, color: Color) -> bool:
    """Raises GameStateError if the king of `color` is not on the board"""
    king_square = board.find_king(color)
    return is_square_attacked(board, king_square, color.opposite())

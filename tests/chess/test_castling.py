"""Unit tests for src/chess/castling.py"""

from dataclasses import dataclass, field
from typing import Optional

import pytest

from src.chess.board import Board
from src.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    CastlingSquares,
    castling_error,
    castling_rook_move,
    find_castling_direction,
    is_castling_attempt,
)
from src.chess.moves import Move
from src.chess.pieces import Color, Piece
from src.chess.position import Position
from src.core.shared_types import MoveError


def sq(name: str) -> Position:
    return Position.from_notation(name)


@dataclass
class StubHistory:
    """Stand-in for the game history: which squares have seen a move"""

    moved: set[Position] = field(default_factory=set)
    last_move: Optional[Move] = None

    def has_moved(self, square: Position) -> bool:
        return square in self.moved


@pytest.fixture
def castling_board() -> Board:
    """Only the Kings and the Rooks. Ready to perform any castling move (if allowed)."""
    return Board.from_letters(
        {"e1": "K", "a1": "R", "h1": "R", "e8": "k", "a8": "r", "h8": "r"}
    )


def test_castling_squares_creation() -> None:
    """Just to have a little contract stating: 'I want to be able to create this dataclass'"""
    castling_squares = CastlingSquares.from_notation(Color.WHITE, "e1", "g1", "h1", "f1")
    assert castling_squares.king_from == sq("e1")
    assert castling_squares.king_to == sq("g1")
    assert castling_squares.rook_from == sq("h1")
    assert castling_squares.rook_to == sq("f1")
    assert castling_squares.king_path == [sq("e1"), sq("f1"), sq("g1")]


def test_queen_side_king_path() -> None:
    """b1 is not part of the king's path, only of the rook's"""
    rule = CASTLING_RULES[CastlingDirection.WHITE_QUEEN_SIDE]
    assert rule.king_path == [sq("e1"), sq("d1"), sq("c1")]


def test_home_squares() -> None:
    rule = CASTLING_RULES[CastlingDirection.BLACK_KING_SIDE]
    assert rule.home_squares == (sq("e8"), sq("h8"))


def test_is_castling_attempt() -> None:
    assert is_castling_attempt(sq("e1"), sq("g1"))
    assert is_castling_attempt(sq("e1"), sq("c1"))
    assert not is_castling_attempt(sq("e1"), sq("f1"))
    assert not is_castling_attempt(sq("e1"), sq("g2"))


def test_find_castling_direction() -> None:
    assert find_castling_direction(sq("e1"), sq("g1"), Color.WHITE) == CastlingDirection.WHITE_KING_SIDE
    assert find_castling_direction(sq("e8"), sq("c8"), Color.BLACK) == CastlingDirection.BLACK_QUEEN_SIDE
    # right squares, wrong color
    assert find_castling_direction(sq("e1"), sq("g1"), Color.BLACK) is None
    assert find_castling_direction(sq("d1"), sq("f1"), Color.WHITE) is None


@pytest.mark.parametrize("direction", list(CastlingDirection))
def test_castling_allowed(direction: CastlingDirection, castling_board: Board) -> None:
    rule = CASTLING_RULES[direction]
    error = castling_error(castling_board, rule.king_from, rule.king_to, rule.color, StubHistory())
    assert error is None
    assert castling_rook_move(rule.king_from, rule.king_to, rule.color) == (
        rule.rook_from,
        rule.rook_to,
    )


# -- Every precondition blocks castling on its own --
def test_king_has_moved(castling_board: Board) -> None:
    history = StubHistory(moved={sq("e1")})
    assert castling_error(castling_board, sq("e1"), sq("g1"), Color.WHITE, history) == MoveError.INVALID_CASTLING
    assert castling_error(castling_board, sq("e1"), sq("c1"), Color.WHITE, history) == MoveError.INVALID_CASTLING


def test_rook_has_moved(castling_board: Board) -> None:
    """Only the side of the rook that moved is affected"""
    history = StubHistory(moved={sq("h1")})
    assert castling_error(castling_board, sq("e1"), sq("g1"), Color.WHITE, history) == MoveError.INVALID_CASTLING
    assert castling_error(castling_board, sq("e1"), sq("c1"), Color.WHITE, history) is None


def test_rook_missing(castling_board: Board) -> None:
    castling_board.set(sq("h1"), None)
    assert castling_error(castling_board, sq("e1"), sq("g1"), Color.WHITE, StubHistory()) == MoveError.INVALID_CASTLING


@pytest.mark.parametrize("blocker_square", ["f1", "g1"])
def test_king_side_path_occupied(castling_board: Board, blocker_square: str) -> None:
    castling_board.set(sq(blocker_square), Piece.from_letter("N"))
    assert castling_error(castling_board, sq("e1"), sq("g1"), Color.WHITE, StubHistory()) == MoveError.INVALID_CASTLING


def test_queen_side_b_file_occupied(castling_board: Board) -> None:
    """b1 must be empty for the rook to pass, even though the king does not cross it"""
    castling_board.set(sq("b1"), Piece.from_letter("N"))
    assert castling_error(castling_board, sq("e1"), sq("c1"), Color.WHITE, StubHistory()) == MoveError.INVALID_CASTLING


def test_cannot_castle_out_of_check(castling_board: Board) -> None:
    castling_board.set(sq("e5"), Piece.from_letter("r"))
    assert castling_error(castling_board, sq("e1"), sq("g1"), Color.WHITE, StubHistory()) == MoveError.INVALID_CASTLING


@pytest.mark.parametrize("attacked_square", ["f1", "g1"])
def test_cannot_castle_through_or_into_check(castling_board: Board, attacked_square: str) -> None:
    """A black rook on the f- or g-file covers a square the king needs"""
    attacker_square = f"{attacked_square[0]}5"
    castling_board.set(sq(attacker_square), Piece.from_letter("r"))
    assert castling_error(castling_board, sq("e1"), sq("g1"), Color.WHITE, StubHistory()) == MoveError.INVALID_CASTLING


def test_attacked_b_file_does_not_block_queen_side(castling_board: Board) -> None:
    castling_board.set(sq("b5"), Piece.from_letter("r"))
    assert castling_error(castling_board, sq("e1"), sq("c1"), Color.WHITE, StubHistory()) is None


def test_not_a_castling_square(castling_board: Board) -> None:
    castling_board.set(sq("d4"), castling_board.get(sq("e1")))
    assert castling_error(castling_board, sq("d4"), sq("f4"), Color.WHITE, StubHistory()) == MoveError.INVALID_CASTLING

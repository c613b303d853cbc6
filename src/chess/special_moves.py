"""En passant and pawn promotion"""

from typing import Optional

from src.chess.board import HOME_RANK, Board
from src.chess.moves import Move, pawn_direction
from src.chess.pieces import Color, Piece, PieceType
from src.chess.position import Position
from src.core.shared_types import MoveError


# -- EN PASSANT MOVES ---
def is_double_pawn_push(move: Move, board: Board) -> bool:
    """
    Was `move` (already played, so the pawn stands on its target square) a two-square pawn advance?
    """
    moved_piece = board.get(move.to_square)
    if moved_piece is None or moved_piece.type != PieceType.PAWN:
        return False
    same_file = move.from_square.file == move.to_square.file
    return same_file and abs(move.to_square.rank - move.from_square.rank) == 2


def en_passant_capture_square(from_square: Position, to_square: Position) -> Position:
    """
    The pawn taken en passant stands beside the capturing pawn, not on the target square:
    same file as the target square, same rank as the capturing pawn started on.
    """
    return Position(file=to_square.file, rank=from_square.rank)


def is_en_passant(
    board: Board,
    from_square: Position,
    to_square: Position,
    color: Color,
    last_move: Optional[Move],
) -> bool:
    """
    A diagonal pawn step onto an empty square is only allowed straight after the opponent
    pushed a pawn two squares, landing right next to our pawn.

    NOTE: Only the immediately preceding move counts. The chance is gone one move later.
    """
    if last_move is None:
        return False

    if board.get(from_square) != Piece(PieceType.PAWN, color):
        return False

    df = abs(to_square.file - from_square.file)
    dr = to_square.rank - from_square.rank
    if df != 1 or dr != pawn_direction(color) or not board.is_empty(to_square):
        return False

    if board.get(last_move.to_square) != Piece(PieceType.PAWN, color.opposite()):
        return False
    if not is_double_pawn_push(last_move, board):
        return False

    return last_move.to_square == en_passant_capture_square(from_square, to_square)


def en_passant_target(last_move: Optional[Move], board: Board) -> Optional[Position]:
    """The square a pawn could move onto to capture en passant right now (skipped over by the double push)"""
    if last_move is None or not is_double_pawn_push(last_move, board):
        return None
    return Position(
        file=last_move.from_square.file,
        rank=(last_move.from_square.rank + last_move.to_square.rank) // 2,
    )


# -- PAWN PROMOTION MOVES --
PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
]


def promotion_rank(color: Color) -> int:
    """The far rank: the opponent's back rank"""
    return HOME_RANK[color.opposite()]


def is_promotion_move(board: Board, from_square: Position, to_square: Position) -> bool:
    """check if the move is a pawn move that reaches the far rank"""
    piece = board.get(from_square)
    if piece is None or piece.type != PieceType.PAWN:
        return False
    return to_square.rank == promotion_rank(piece.color)


def promotion_error(
    board: Board, from_square: Position, to_square: Position, promote_to: Optional[PieceType]
) -> Optional[MoveError]:
    """
    A pawn reaching the far rank needs a choice out of PROMOTION_OPTIONS.
    Any other move must not ask for a promotion.
    """
    if is_promotion_move(board, from_square, to_square):
        if promote_to not in PROMOTION_OPTIONS:
            return MoveError.INVALID_PROMOTION_CHOICE
        return None
    if promote_to is not None:
        return MoveError.INVALID_PROMOTION_CHOICE
    return None


def pawn_pushes_w_promotion(pawn_move: Move) -> list[Move]:
    """Return multiple copies of the pawn move with the piece type to promote into filled in."""
    return [
        Move(
            from_square=pawn_move.from_square,
            to_square=pawn_move.to_square,
            promote_to=piece_type,
        )
        for piece_type in PROMOTION_OPTIONS
    ]

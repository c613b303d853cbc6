"""
Move legality

Puts the pieces together:
1. basic sanity (piece present, right color, no self-capture)
2. the piece's movement pattern, with castling and en passant as the special king/pawn patterns
3. king safety: play the move on a copy of the board and make sure your own king is not attacked afterwards

The last step is the most expensive one, hence it is evaluated last.
"""

from typing import Optional

from src.chess.attacks import is_in_check
from src.chess.board import Board
from src.chess.castling import castling_error, castling_rook_move, is_castling_attempt
from src.chess.moves import CANDIDATE_RULES, MOVEMENT_RULES, Move, MoveHistory
from src.chess.pieces import Color, Piece, PieceType
from src.chess.position import Position
from src.chess.special_moves import (
    en_passant_capture_square,
    is_en_passant,
    is_promotion_move,
    pawn_pushes_w_promotion,
)
from src.core.shared_types import MoveError


def classify_move(
    board: Board,
    from_square: Position,
    to_square: Position,
    mover: Color,
    history: MoveHistory,
) -> Optional[MoveError]:
    """None if the move is legal, otherwise the (first) reason it is not."""
    piece = board.get(from_square)
    if piece is None:
        return MoveError.NO_PIECE_AT_SOURCE
    if piece.color != mover:
        return MoveError.WRONG_PLAYER

    target = board.get(to_square)
    if target is not None and target.color == mover:
        return MoveError.OCCUPIED_BY_OWN_COLOR

    error = _pattern_error(board, piece, from_square, to_square, history)
    if error is not None:
        return error

    if _leaves_king_in_check(board, from_square, to_square, mover, history):
        return MoveError.MOVE_INTO_CHECK
    return None


def is_legal(
    board: Board,
    from_square: Position,
    to_square: Position,
    mover: Color,
    history: MoveHistory,
) -> bool:
    return classify_move(board, from_square, to_square, mover, history) is None


def _pattern_error(
    board: Board,
    piece: Piece,
    from_square: Position,
    to_square: Position,
    history: MoveHistory,
) -> Optional[MoveError]:
    """Movement pattern of the piece, including the special moves"""
    if piece.type == PieceType.KING and is_castling_attempt(from_square, to_square):
        return castling_error(board, from_square, to_square, piece.color, history)

    if piece.type == PieceType.PAWN and is_en_passant(
        board, from_square, to_square, piece.color, history.last_move
    ):
        return None

    return MOVEMENT_RULES[piece.type](board, from_square, to_square, piece.color)


def _leaves_king_in_check(
    board: Board,
    from_square: Position,
    to_square: Position,
    mover: Color,
    history: MoveHistory,
) -> bool:
    """
    Return True if the move puts (or leaves) you in check

    plan:
    1. Copy the board
    2. make the candidate move
    3. determine if king is in check on the new board
    """
    scratch = board.copy()
    apply_move(scratch, Move(from_square, to_square), history.last_move)
    return is_in_check(scratch, mover)


def apply_move(board: Board, move: Move, last_move: Optional[Move]) -> Optional[Piece]:
    """
    Update the board for a move that is already known to be legal. Returns the captured piece, if any.
    ---

    * castling: the rook jumps over as well
    * en passant: the pawn taken is not on the target square
    * promotion: the pawn is swapped for the chosen piece (if no choice given, the pawn stays a pawn,
      which is what the king-safety simulation wants)
    """
    piece = board.get(move.from_square)
    # for the typechecker: only called for moves of an existing piece
    assert piece is not None

    is_castling = piece.type == PieceType.KING and is_castling_attempt(
        move.from_square, move.to_square
    )
    is_ep = piece.type == PieceType.PAWN and is_en_passant(
        board, move.from_square, move.to_square, piece.color, last_move
    )

    captured = board.move_piece(move.from_square, move.to_square)

    if is_castling:
        rook_from, rook_to = castling_rook_move(move.from_square, move.to_square, piece.color)
        board.move_piece(rook_from, rook_to)
    elif is_ep:
        take_square = en_passant_capture_square(move.from_square, move.to_square)
        captured = board.get(take_square)
        board.set(take_square, None)

    if move.promote_to is not None and piece.type == PieceType.PAWN:
        board.set(move.to_square, piece.promote_to(move.promote_to))

    return captured


# --- MOVE GENERATION ---
def legal_destinations(board: Board, from_square: Position, history: MoveHistory) -> set[Position]:
    """
    Every square the piece on `from_square` can legally go to.
    Empty set if the square is empty.

    Candidates come from raycasting; each one is then pushed through the full legality check.
    """
    piece = board.get(from_square)
    if piece is None:
        return set()
    candidates = CANDIDATE_RULES[piece.type](from_square, board, piece.color)
    return {
        move.to_square
        for move in candidates
        if is_legal(board, move.from_square, move.to_square, piece.color, history)
    }


def legal_moves(board: Board, color: Color, history: MoveHistory) -> list[Move]:
    """
    List of legal moves for the player with the 'color' pieces
    ----

    Pawn push to promotion square? --> one move for every choice of piece type to promote into.
    """
    moves: list[Move] = []
    for square, _ in sorted(board.pieces(color)):
        for destination in sorted(legal_destinations(board, square, history)):
            move = Move(square, destination)
            if is_promotion_move(board, square, destination):
                moves.extend(pawn_pushes_w_promotion(move))
            else:
                moves.append(move)
    return moves


def has_legal_move(board: Board, color: Color, history: MoveHistory) -> bool:
    """Like legal_moves, but stops at the first one found"""
    for square, piece in board.pieces(color):
        for move in CANDIDATE_RULES[piece.type](square, board, color):
            if is_legal(board, move.from_square, move.to_square, color, history):
                return True
    return False

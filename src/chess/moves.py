"""
Geometry/Base movement rules

Key idea: Use strategy pattern to define the movement pattern for each piece type.

Two families of functions live here:
* movement patterns: "may this piece go from A to B?" -> None if so, otherwise the reason why not.
* candidate moves: raycasting to list the squares a piece could possibly reach.

Neither knows about history (castling/en passant) nor about king safety. That is layered on top in rules.py
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.chess.board import PAWN_RANK, Board, Vector, is_diagonal, is_straight
from src.chess.pieces import LETTER_TO_PIECE, PIECE_TO_LETTER, Color, PieceType
from src.chess.position import Position
from src.core.exceptions import InvalidPositionError
from src.core.shared_types import MoveError

KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KING_DELTAS: list[Vector] = DIAGONALS + STRAIGHTS


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Position
    to_square: Position
    promote_to: Optional[PieceType] = None

    @classmethod
    def from_notation(cls, notation: str) -> Self:
        """
        Coordinate notation
        ---
        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        """
        if len(notation) not in (4, 5):
            raise InvalidPositionError(f"Cannot read {notation!r} as a move")
        from_sq = Position.from_notation(notation[:2])
        to_sq = Position.from_notation(notation[2:4])
        if len(notation) == 4:
            return cls(from_sq, to_sq)
        promote_char = notation[4].lower()
        if promote_char not in LETTER_TO_PIECE:
            raise InvalidPositionError(f"Unknown piece letter in move {notation!r}")
        return cls(from_sq, to_sq, LETTER_TO_PIECE[promote_char])

    def to_notation(self) -> str:
        piece_char = PIECE_TO_LETTER[self.promote_to] if self.promote_to else ""
        return f"{self.from_square.to_notation()}{self.to_square.to_notation()}{piece_char}"

    def __str__(self) -> str:
        return self.to_notation()


class MoveHistory(Protocol):
    """Just the parts of the game history the special moves need"""

    @property
    def last_move(self) -> Optional[Move]: ...
    def has_moved(self, square: Position) -> bool: ...


def pawn_direction(color: Color) -> int:
    """White moves UP the board, Black moves DOWN"""
    return 1 if color == Color.WHITE else -1


# --- MOVEMENT PATTERNS ---
def knight_move_error(
    board: Board, from_square: Position, to_square: Position, color: Color
) -> Optional[MoveError]:
    """Knights always move such that |delta_rank| + |delta_file| = 3 (and never in a straight line)"""
    df = abs(to_square.file - from_square.file)
    dr = abs(to_square.rank - from_square.rank)
    if (df, dr) not in ((1, 2), (2, 1)):
        return MoveError.INVALID_PIECE_MOVEMENT
    return None


def bishop_move_error(
    board: Board, from_square: Position, to_square: Position, color: Color
) -> Optional[MoveError]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    if not is_diagonal(from_square, to_square):
        return MoveError.INVALID_PIECE_MOVEMENT
    if not board.is_path_clear(from_square, to_square):
        return MoveError.PATH_BLOCKED
    return None


def rook_move_error(
    board: Board, from_square: Position, to_square: Position, color: Color
) -> Optional[MoveError]:
    """Rooks move either horizontally or vertically"""
    if not is_straight(from_square, to_square):
        return MoveError.INVALID_PIECE_MOVEMENT
    if not board.is_path_clear(from_square, to_square):
        return MoveError.PATH_BLOCKED
    return None


def queen_move_error(
    board: Board, from_square: Position, to_square: Position, color: Color
) -> Optional[MoveError]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    if is_diagonal(from_square, to_square):
        return bishop_move_error(board, from_square, to_square, color)
    return rook_move_error(board, from_square, to_square, color)


def king_move_error(
    board: Board, from_square: Position, to_square: Position, color: Color
) -> Optional[MoveError]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled separately).
    """
    df = abs(to_square.file - from_square.file)
    dr = abs(to_square.rank - from_square.rank)
    if max(df, dr) != 1:
        return MoveError.INVALID_PIECE_MOVEMENT
    return None


def pawn_move_error(
    board: Board, from_square: Position, to_square: Position, color: Color
) -> Optional[MoveError]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally

    NOTE: En passant is taken care of in special_moves.py
    """
    direction = pawn_direction(color)
    df = to_square.file - from_square.file
    dr = to_square.rank - from_square.rank

    # single push
    if df == 0 and dr == direction:
        if not board.is_empty(to_square):
            return MoveError.INVALID_PIECE_MOVEMENT
        return None

    # double push from the starting rank
    if df == 0 and dr == 2 * direction and from_square.rank == PAWN_RANK[color]:
        if not board.is_path_clear(from_square, to_square):
            return MoveError.PATH_BLOCKED
        if not board.is_empty(to_square):
            return MoveError.INVALID_PIECE_MOVEMENT
        return None

    # diagonal capture: the target must hold an opponent's piece
    if abs(df) == 1 and dr == direction:
        target = board.get(to_square)
        if target is None or target.color == color:
            return MoveError.INVALID_PIECE_MOVEMENT
        return None

    return MoveError.INVALID_PIECE_MOVEMENT


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MoveErrorFn = Callable[[Board, Position, Position, Color], Optional[MoveError]]
MOVEMENT_RULES: dict[PieceType, MoveErrorFn] = {
    PieceType.PAWN: pawn_move_error,
    PieceType.KNIGHT: knight_move_error,
    PieceType.BISHOP: bishop_move_error,
    PieceType.ROOK: rook_move_error,
    PieceType.QUEEN: queen_move_error,
    PieceType.KING: king_move_error,
}


# --- CANDIDATE MOVES ---
def raycasting_move(
    square: Position, board: Board, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.

    ---
    The first occupied square is included: it may hold an opponent's piece that can be taken.
    Own pieces get filtered out later by the legality check.
    """
    moves: list[Move] = []
    for df, dr in directions:
        target_square = square.offset(df, dr)
        while target_square is not None:
            moves.append(Move(from_square=square, to_square=target_square))
            if not board.is_empty(target_square):
                break
            target_square = target_square.offset(df, dr)
    return moves


def single_step_move(square: Position, deltas: list[Vector]) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for pawns, kings, and knights that just can move a single step along a direction"""
    moves: list[Move] = []
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if target_square is not None:
            moves.append(Move(from_square=square, to_square=target_square))
    return moves


def candidate_pawn_moves(square: Position, board: Board, color: Color) -> list[Move]:
    """Single/double pushes and both diagonals (diagonals may turn out to be en passant captures)"""
    direction = pawn_direction(color)
    deltas: list[Vector] = [(0, direction), (0, 2 * direction), (1, direction), (-1, direction)]
    return single_step_move(square, deltas)


def candidate_knight_moves(square: Position, board: Board, color: Color) -> list[Move]:
    return single_step_move(square, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Position, board: Board, color: Color) -> list[Move]:
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Position, board: Board, color: Color) -> list[Move]:
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Position, board: Board, color: Color) -> list[Move]:
    return raycasting_move(square, board, DIAGONALS + STRAIGHTS)


def candidate_king_moves(square: Position, board: Board, color: Color) -> list[Move]:
    """Single steps, plus the two castling targets two files away along the rank"""
    return single_step_move(square, KING_DELTAS + [(2, 0), (-2, 0)])


CandidateMovesFn = Callable[[Position, Board, Color], list[Move]]
CANDIDATE_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}

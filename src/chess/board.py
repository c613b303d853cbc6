"""
The Game board is a plain store of pieces on squares.

It knows nothing about turns or history. The only rule-adjacent things it offers are the geometric helpers
(alignment, squares in between, clear paths) the movement rules are built from.
"""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.pieces import Color, Piece, PieceType
from src.chess.position import BOARD_SIZE, Position
from src.core.exceptions import GameStateError

Vector = tuple[int, int]

BACK_RANK_ORDER: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

HOME_RANK: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: BOARD_SIZE - 1}
PAWN_RANK: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: BOARD_SIZE - 2}


# --- GEOMETRY ---
def is_diagonal(from_square: Position, to_square: Position) -> bool:
    """|delta_rank| = |delta_file| != 0"""
    df = abs(to_square.file - from_square.file)
    dr = abs(to_square.rank - from_square.rank)
    return df == dr and df != 0


def is_straight(from_square: Position, to_square: Position) -> bool:
    """Either the file or the rank stays the same (but not both)"""
    same_file = from_square.file == to_square.file
    same_rank = from_square.rank == to_square.rank
    return same_file != same_rank


def step_towards(from_square: Position, to_square: Position) -> Vector:
    """Unit step (each component -1, 0 or 1) pointing from one square to the other"""

    def _sign(value: int) -> int:
        return (value > 0) - (value < 0)

    return (
        _sign(to_square.file - from_square.file),
        _sign(to_square.rank - from_square.rank),
    )


def squares_between(from_square: Position, to_square: Position) -> list[Position]:
    """
    The squares strictly in between two squares that lie on a common line (rank, file or diagonal).

    Needed for path clearance of sliding pieces and for castling (the king/rook path must be empty).
    """
    if not (is_straight(from_square, to_square) or is_diagonal(from_square, to_square)):
        raise ValueError(
            f"squares_between requires both squares to lie on a common line. \n from: {from_square}\n to:{to_square}"
        )

    df, dr = step_towards(from_square, to_square)
    squares_found: list[Position] = []
    square = from_square
    while True:
        next_square = square.offset(df, dr)
        # cannot be None: we walk towards a square that is on the board
        assert next_square is not None
        if next_square == to_square:
            break
        squares_found.append(next_square)
        square = next_square
    return squares_found


@dataclass
class Board:
    position: dict[Position, Piece] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> Self:
        return cls({})

    @classmethod
    def new_game(cls) -> Self:
        """Standard starting position. White on ranks 0 and 1, Black on ranks 7 and 6."""
        board = cls.empty()
        for color in Color:
            for file, piece_type in enumerate(BACK_RANK_ORDER):
                board.set(Position(file, HOME_RANK[color]), Piece(piece_type, color))
                board.set(Position(file, PAWN_RANK[color]), Piece(PieceType.PAWN, color))
        return board

    @classmethod
    def from_letters(cls, placement: dict[str, str]) -> Self:
        """Convenience for composing positions: {'e1': 'K', 'e8': 'k'} (upper case: White)"""
        board = cls.empty()
        for square_name, letter in placement.items():
            board.set(Position.from_notation(square_name), Piece.from_letter(letter))
        return board

    def get(self, square: Position) -> Optional[Piece]:
        return self.position.get(square)

    def set(self, square: Position, piece: Optional[Piece]) -> None:
        """Place a piece (replacing whatever was there) or clear the square when given None"""
        if piece is None:
            self.position.pop(square, None)
        else:
            self.position[square] = piece

    def is_empty(self, square: Position) -> bool:
        return square not in self.position

    def is_path_clear(self, from_square: Position, to_square: Position) -> bool:
        return all(self.is_empty(square) for square in squares_between(from_square, to_square))

    def move_piece(self, from_square: Position, to_square: Position) -> Optional[Piece]:
        """Relocate a piece. Whatever stood on the target square gets returned (the captured piece)."""
        piece_that_moved = self.position.pop(from_square)
        captured = self.get(to_square)
        self.position[to_square] = piece_that_moved
        return captured

    def pieces(self, color: Color) -> list[tuple[Position, Piece]]:
        return [
            (square, piece) for square, piece in self.position.items() if piece.color == color
        ]

    def locate_pieces(self, piece: Piece) -> list[Position]:
        return [square for square, found in self.position.items() if found == piece]

    def find_king(self, color: Color) -> Position:
        kings = self.locate_pieces(Piece(PieceType.KING, color))
        if not kings:
            raise GameStateError(f"No {color.name.lower()} king on the board")
        return kings[0]

    def copy(self) -> Self:
        # Pieces and positions are immutable, so a shallow copy of the mapping is a full snapshot
        return type(self)(dict(self.position))

    def count_material(self) -> dict[Color, int]:
        """Tally the points of material each player has on the board"""
        return {
            color: sum(piece.points for _, piece in self.pieces(color)) for color in Color
        }

    def __len__(self) -> int:
        return len(self.position)

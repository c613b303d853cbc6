"""Defines the types of chess pieces"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self


class PieceType(Enum):
    PAWN = auto()
    KNIGHT = auto()
    BISHOP = auto()
    ROOK = auto()
    QUEEN = auto()
    KING = auto()


class Color(Enum):
    WHITE = auto()
    BLACK = auto()

    def opposite(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


LETTER_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_LETTER: dict[PieceType, str] = {
    value: key for key, value in LETTER_TO_PIECE.items()
}


PIECE_POINTS: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
}

# For renderers. Indexed by piece type, (white glyph, black glyph)
PIECE_GLYPHS: dict[PieceType, tuple[str, str]] = {
    PieceType.KING: ("♔", "♚"),
    PieceType.QUEEN: ("♕", "♛"),
    PieceType.ROOK: ("♖", "♜"),
    PieceType.BISHOP: ("♗", "♝"),
    PieceType.KNIGHT: ("♘", "♞"),
    PieceType.PAWN: ("♙", "♟"),
}


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color

    @property
    def points(self) -> int:
        # NOTE: The King's worth is undefined (does not count towards total points)
        return PIECE_POINTS.get(self.type, 0)

    @classmethod
    def from_letter(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = LETTER_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_letter(self) -> str:
        return (
            PIECE_TO_LETTER[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_LETTER[self.type]
        )

    def glyph(self) -> str:
        white, black = PIECE_GLYPHS[self.type]
        return white if self.color == Color.WHITE else black

    def promote_to(self, new_type: PieceType) -> "Piece":
        """Pieces are values: promotion hands back a new piece of the same color"""
        return Piece(new_type, self.color)

"""
A square on the board

(placed in its own module as multiple other modules need to import it)

Zero-based: file 0-7 maps to a-h, rank 0-7 maps to 1-8. White starts on rank 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.core.exceptions import InvalidPositionError

BOARD_SIZE = 8
FILE_LETTERS = "abcdefgh"


@dataclass(frozen=True, order=True)
class Position:
    file: int
    rank: int

    def __post_init__(self) -> None:
        # an out-of-range Position must never escape construction
        if not Position.is_within_bounds(self.file, self.rank):
            raise InvalidPositionError(
                f"Position out of range: file={self.file}, rank={self.rank}"
            )

    @staticmethod
    def is_within_bounds(file: int, rank: int) -> bool:
        return (0 <= file < BOARD_SIZE) and (0 <= rank < BOARD_SIZE)

    @classmethod
    def from_notation(cls, notation: str) -> Position:
        """Square notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        if len(notation) != 2:
            raise InvalidPositionError(f"Cannot read {notation!r} as a square name")
        file_char, rank_char = notation[0].lower(), notation[1]
        if file_char not in FILE_LETTERS or rank_char not in "12345678":
            raise InvalidPositionError(f"Cannot read {notation!r} as a square name")
        return cls(FILE_LETTERS.index(file_char), int(rank_char) - 1)

    def to_notation(self) -> str:
        return f"{FILE_LETTERS[self.file]}{self.rank + 1}"

    def offset(self, df: int, dr: int) -> Optional[Position]:
        """The square (df, dr) away from this one, or None if that falls off the board"""
        file, rank = self.file + df, self.rank + dr
        if not Position.is_within_bounds(file, rank):
            return None
        return Position(file, rank)

    def __str__(self) -> str:
        return self.to_notation()


def all_positions() -> list[Position]:
    return [Position(file, rank) for rank in range(BOARD_SIZE) for file in range(BOARD_SIZE)]

"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.chess.position import Position
from src.core.exceptions import InvalidPositionError, InvalidRequestError
from src.core.shared_types import Color, PromotionChoice

SquareName = str


# --- REQUEST MODELS ---
def _validate_square_name(value: str) -> str:
    try:
        Position.from_notation(value)
    except InvalidPositionError:
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as a valid square name."
        ) from None
    return value.lower()


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: SquareName

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: SquareName
    to_square: SquareName
    # the enum only admits queen/rook/bishop/knight: promoting into a pawn or king is rejected here already
    promote_to: Optional[PromotionChoice] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    current_player: Color
    status: str
    # square name -> piece letter (upper case: White)
    pieces: dict[SquareName, str]
    move_history: list[str]
    captured: list[str] = []


class LegalMovesResponse(BaseModel):
    game_id: UUID
    square: SquareName
    destinations: list[SquareName]

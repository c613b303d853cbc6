"""
Where games are kept between requests.

A stored game is its move list (plus the player to move and the status label, for cheap listing).
The repository never interprets moves: the service replays them through GameState on every load.
"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """Implemented on SQLAlchemy in sql_repository.py, and by an in-memory dict in the service tests"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """The stored move list for `game_id`, or None if there is no such game."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store a new game (usually with an empty move list) and hand out its id."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Replace the whole record: the move list passed in is the complete game so far. None if unknown id."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove the game and return what was stored, or None if unknown id."""
        ...

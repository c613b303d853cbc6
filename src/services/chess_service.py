"""Orchestration of communication from API models to business logic and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

from src.api.models import (
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
)
from src.chess.game import GameState
from src.chess.pieces import PieceType
from src.chess.position import Position
from src.core.exceptions import RepositoryError
from src.core.shared_types import Color
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    def create_new_game(self) -> GameResponse:
        """Start a game from the standard starting position and persist it."""
        game = GameState.new_game()
        stored_game, game_id = self.repo.create_game(game.to_model())
        logger.info("New game %s", game_id)
        return self._create_game_response(game_id, GameState.from_model(stored_game))

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by a frontend to check when it is the player's turn for instance.
        """
        game = self._load_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def legal_destinations(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Squares the piece on the requested square can move to (for highlighting)"""
        game = self._load_game(request.game_id)
        destinations = game.legal_destinations(Position.from_notation(request.square))
        return LegalMovesResponse(
            game_id=request.game_id,
            square=request.square,
            destinations=sorted(square.to_notation() for square in destinations),
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """
        Make a move attempt.
        ---
        IllegalMoveError propagates to the caller. Nothing gets stored in that case.
        """
        game = self._load_game(request.game_id)

        promotion = PieceType[request.promote_to.name] if request.promote_to else None
        game.attempt_move(
            Position.from_notation(request.from_square),
            Position.from_notation(request.to_square),
            promotion,
        )

        self.repo.update_game(request.game_id, game.to_model())
        logger.info("Game %s: %s played, status %s", request.game_id, game.last_move, game.status.label())
        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")
        logger.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _load_game(self, game_id: UUID) -> GameState:
        """Attempt to find the game in the repository (raise error if it fails) and replay it."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return GameState.from_model(game_model)

    def _create_game_response(self, game_id: UUID, game: GameState) -> GameResponse:
        return GameResponse(
            game_id=game_id,
            current_player=Color[game.current_player.name],
            status=game.status.label(),
            pieces={
                square.to_notation(): piece.to_letter()
                for square, piece in sorted(game.board.position.items())
            },
            move_history=[move.to_notation() for move in game.move_history],
            captured=[piece.to_letter() for piece in game.captured_pieces],
        )

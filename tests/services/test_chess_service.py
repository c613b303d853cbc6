"""Unit tests for src/services/chess_service.py"""

from typing import Generator
from uuid import UUID, uuid4

import pytest

from src.api.models import (
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
)
from src.core.exceptions import GameError, IllegalMoveError, RepositoryError
from src.core.models import GameModel
from src.core.shared_types import Color, MoveError, PromotionChoice
from src.services.chess_service import ChessService


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        game_id = uuid4()
        self._games[game_id] = game
        return game, game_id

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        return self._games.get(game_id)

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        if game_id not in self._games:
            return None
        self._games[game_id] = game
        return game

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        return self._games.pop(game_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> ChessService:
    return ChessService(mock_repository)


def move(service: ChessService, game_id: UUID, notation: str) -> GameResponse:
    request = MoveRequest(game_id=game_id, from_square=notation[:2], to_square=notation[2:4])
    return service.make_move(request)


# --- SERVICE - CREATE NEW GAME ----
def test_create_a_new_game(service: ChessService, mock_repository: MockRepository) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    response = service.create_new_game()

    # Check response structure
    assert isinstance(response, GameResponse)
    assert isinstance(response.game_id, UUID)

    # Check response data
    assert response.current_player == Color.WHITE
    assert response.status == "in_progress"
    assert len(response.pieces) == 32
    assert response.pieces["e1"] == "K"
    assert response.pieces["d8"] == "q"
    assert response.move_history == []

    # Check persisted data
    stored_game = mock_repository.get_game(response.game_id)
    assert stored_game == GameModel(moves=[], current_player="white", status="in_progress")


# --- SERVICE - GET GAME ----
def test_get_game_state(service: ChessService) -> None:
    created = service.create_new_game()
    response = service.get_game_state(GetGameRequest(game_id=created.game_id))
    assert response == created


def test_get_unknown_game(service: ChessService) -> None:
    with pytest.raises(RepositoryError):
        service.get_game_state(GetGameRequest(game_id=uuid4()))


# --- SERVICE - MAKE MOVE ----
def test_make_move(service: ChessService, mock_repository: MockRepository) -> None:
    game_id = service.create_new_game().game_id
    response = move(service, game_id, "e2e4")

    assert response.current_player == Color.BLACK
    assert response.move_history == ["e2e4"]
    assert response.pieces["e4"] == "P"
    assert "e2" not in response.pieces

    stored_game = mock_repository.get_game(game_id)
    assert stored_game is not None
    assert stored_game.moves == ["e2e4"]
    assert stored_game.current_player == "black"


def test_illegal_move_is_not_stored(service: ChessService, mock_repository: MockRepository) -> None:
    """Service propagates the exception, the stored game stays as it was."""
    game_id = service.create_new_game().game_id
    move(service, game_id, "e2e4")

    with pytest.raises(IllegalMoveError) as error:
        move(service, game_id, "e4e5")
    assert error.value.reason == MoveError.WRONG_PLAYER

    stored_game = mock_repository.get_game(game_id)
    assert stored_game is not None
    assert stored_game.moves == ["e2e4"]


def test_full_game_until_checkmate(service: ChessService) -> None:
    game_id = service.create_new_game().game_id
    for notation in ["f2f3", "e7e5", "g2g4"]:
        move(service, game_id, notation)
    response = move(service, game_id, "d8h4")
    assert response.status == "checkmate"

    # Test any top-level custom exception is raised (specific exception types are responsibility of other layers)
    with pytest.raises(GameError):
        move(service, game_id, "a2a3")


def test_move_with_promotion(service: ChessService, mock_repository: MockRepository) -> None:
    """Pawn walks up the a-file, takes on b7 and promotes on a8"""
    game_id = service.create_new_game().game_id
    for notation in ["a2a4", "h7h6", "a4a5", "h6h5", "a5a6", "h5h4", "a6b7", "h4h3"]:
        move(service, game_id, notation)

    request = MoveRequest(
        game_id=game_id, from_square="b7", to_square="a8", promote_to=PromotionChoice.QUEEN
    )
    response = service.make_move(request)
    assert response.pieces["a8"] == "Q"
    assert response.captured == ["p", "r"]

    stored_game = mock_repository.get_game(game_id)
    assert stored_game is not None
    assert stored_game.moves[-1] == "b7a8q"


def test_move_for_unknown_game(service: ChessService) -> None:
    with pytest.raises(RepositoryError):
        move(service, uuid4(), "e2e4")


# --- SERVICE - LEGAL MOVES ----
def test_legal_destinations(service: ChessService) -> None:
    game_id = service.create_new_game().game_id
    response = service.legal_destinations(LegalMovesRequest(game_id=game_id, square="g1"))
    assert isinstance(response, LegalMovesResponse)
    assert response.destinations == ["f3", "h3"]

    response = service.legal_destinations(LegalMovesRequest(game_id=game_id, square="e4"))
    assert response.destinations == []

    # black pawn, but white to move
    response = service.legal_destinations(LegalMovesRequest(game_id=game_id, square="e7"))
    assert response.destinations == []


# --- SERVICE - DELETE GAME ----
def test_delete_game(service: ChessService, mock_repository: MockRepository) -> None:
    game_id = service.create_new_game().game_id
    service.delete_game(DeleteGameRequest(game_id=game_id))
    assert mock_repository.get_game(game_id) is None

    with pytest.raises(RepositoryError):
        service.delete_game(DeleteGameRequest(game_id=game_id))

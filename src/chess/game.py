"""
The GameState is the entrypoint into the domain layer.

It owns the board and all history, and is only ever changed through `attempt_move()`:
validate first, then commit. A rejected move leaves everything untouched.
"""

import logging
from collections import Counter
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import NoReturn, Optional, Self

from src.chess.attacks import is_in_check
from src.chess.board import Board
from src.chess.castling import CASTLING_RULES, CastlingDirection
from src.chess.moves import Move
from src.chess.pieces import Color, Piece, PieceType
from src.chess.position import Position
from src.chess.rules import apply_move, classify_move, has_legal_move, legal_destinations, legal_moves
from src.chess.special_moves import en_passant_target, promotion_error
from src.core.exceptions import GameStateError, IllegalMoveError
from src.core.models import GameModel
from src.core.shared_types import MoveError

logger = logging.getLogger(__name__)

# 50 moves by each player
FIFTY_MOVE_RULE_HALF_MOVES = 100
REPETITION_LIMIT = 3


class Status(Enum):
    IN_PROGRESS = auto()
    CHECK = auto()
    CHECKMATE = auto()
    STALEMATE = auto()
    DRAW = auto()


class DrawReason(Enum):
    REPETITION = auto()
    FIFTY_MOVE_RULE = auto()
    INSUFFICIENT_MATERIAL = auto()


TERMINAL_STATUSES = frozenset({Status.CHECKMATE, Status.STALEMATE, Status.DRAW})


@dataclass(frozen=True)
class GameStatus:
    """
    Status plus its detail:
    * CHECK: `color` is the side in check
    * CHECKMATE: `color` is the winner
    * DRAW: `draw_reason` tells why
    """

    status: Status
    color: Optional[Color] = None
    draw_reason: Optional[DrawReason] = None

    @classmethod
    def in_progress(cls) -> Self:
        return cls(Status.IN_PROGRESS)

    @classmethod
    def check(cls, color: Color) -> Self:
        return cls(Status.CHECK, color=color)

    @classmethod
    def checkmate(cls, winner: Color) -> Self:
        return cls(Status.CHECKMATE, color=winner)

    @classmethod
    def stalemate(cls) -> Self:
        return cls(Status.STALEMATE)

    @classmethod
    def draw(cls, reason: DrawReason) -> Self:
        return cls(Status.DRAW, draw_reason=reason)

    @property
    def is_over(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def label(self) -> str:
        return self.status.name.lower()


# Hashable snapshot used for detecting repetitions
PositionKey = tuple[
    frozenset[tuple[Position, Piece]], Color, frozenset[CastlingDirection], Optional[Position]
]


@dataclass
class GameState:
    board: Board
    current_player: Color = Color.WHITE
    status: GameStatus = field(default_factory=GameStatus.in_progress)
    move_history: list[Move] = field(default_factory=list)
    # how often a move started from / landed on each square (castling rights)
    touched_squares: Counter[Position] = field(default_factory=Counter)
    last_move: Optional[Move] = None
    captured_pieces: list[Piece] = field(default_factory=list)
    half_move_clock: int = 0
    repetitions: Counter[PositionKey] = field(default_factory=Counter)

    @classmethod
    def new_game(cls) -> Self:
        game = cls(board=Board.new_game())
        game._record_position()
        return game

    @classmethod
    def from_board(
        cls,
        board: Board,
        current_player: Color = Color.WHITE,
        last_move: Optional[Move] = None,
        moved_squares: Optional[list[Position]] = None,
    ) -> Self:
        """
        Start from a composed position (puzzles, tests, endgame drills).
        `moved_squares` marks squares whose original occupant is considered to have moved already.
        """
        game = cls(
            board=board,
            current_player=current_player,
            last_move=last_move,
            touched_squares=Counter(moved_squares or []),
        )
        game._record_position()
        game._update_game_status()
        return game

    @classmethod
    def replay(cls, moves: list[Move]) -> Self:
        """New game with the given moves played. Every move is validated again."""
        game = cls.new_game()
        for move in moves:
            game.attempt_move(move.from_square, move.to_square, move.promote_to)
        return game

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a GameState from the information the Service layer actually has"""
        game = cls.replay([Move.from_notation(notation) for notation in model.moves])
        if game.status.label() != model.status:
            raise GameStateError(
                f"Stored status {model.status!r} does not match replayed status {game.status.label()!r}"
            )
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            moves=[move.to_notation() for move in self.move_history],
            current_player=self.current_player.name.lower(),
            status=self.status.label(),
        )

    # --- QUERIES ---
    @property
    def winner(self) -> Optional[Color]:
        if self.status.status != Status.CHECKMATE:
            return None
        return self.status.color

    def has_moved(self, square: Position) -> bool:
        return self.touched_squares[square] > 0

    def is_in_check(self, color: Optional[Color] = None) -> bool:
        return is_in_check(self.board, color or self.current_player)

    def is_legal(self, from_square: Position, to_square: Position) -> bool:
        return (
            classify_move(self.board, from_square, to_square, self.current_player, self) is None
        )

    def legal_destinations(self, from_square: Position) -> set[Position]:
        """
        Used both to highlight moves and for AI move generation.
        Empty once the game is over, and for pieces of the side not to move.
        """
        if self.status.is_over:
            return set()
        piece = self.board.get(from_square)
        if piece is None or piece.color != self.current_player:
            return set()
        return legal_destinations(self.board, from_square, self)

    def legal_moves(self) -> list[Move]:
        if self.status.is_over:
            return []
        return legal_moves(self.board, self.current_player, self)

    def material(self) -> dict[Color, int]:
        return self.board.count_material()

    def clone(self) -> Self:
        """Independent snapshot (for example one per search worker)"""
        return deepcopy(self)

    # --- MOVE APPLICATION ---
    def attempt_move(
        self,
        from_square: Position,
        to_square: Position,
        promotion: Optional[PieceType] = None,
    ) -> GameStatus:
        """
        Attempt to make a move
        -----

        1. make sure the game is (still) in progress
        2. check legality (never trust a "legal" cached by the caller)
        3. check the promotion choice
        4. update the board (castling: rook too, en passant: remove the pawn beside)
        5. update history / bookkeeping
        6. switch turns and update game status

        Raises IllegalMoveError (with the reason) if the move is rejected.
        """
        move = Move(from_square, to_square, promotion)

        if self.status.is_over:
            self._reject(move, MoveError.GAME_ALREADY_OVER)

        error = classify_move(self.board, from_square, to_square, self.current_player, self)
        if error is None:
            error = promotion_error(self.board, from_square, to_square, promotion)
        if error is not None:
            self._reject(move, error)

        moving_piece = self.board.get(from_square)
        assert moving_piece is not None
        captured = apply_move(self.board, move, self.last_move)

        self._update_history(move, moving_piece, captured)
        self.current_player = self.current_player.opposite()
        self._record_position()
        self._update_game_status()

        logger.debug("Accepted move %s, status now %s", move, self.status.label())
        return self.status

    # -- PRIVATE HELPERS ---
    def _reject(self, move: Move, reason: MoveError) -> NoReturn:
        logger.debug("Rejected move %s: %s", move, reason.value)
        raise IllegalMoveError(reason, f"Move not allowed: {move} ({reason.value})")

    def _update_history(self, move: Move, moving_piece: Piece, captured: Optional[Piece]) -> None:
        self.move_history.append(move)
        self.last_move = move
        self.touched_squares[move.from_square] += 1
        self.touched_squares[move.to_square] += 1

        if captured is not None:
            self.captured_pieces.append(captured)

        # a pawn move or a capture resets the clock; positions before it can never come back either
        if moving_piece.type == PieceType.PAWN or captured is not None:
            self.half_move_clock = 0
            self.repetitions.clear()
        else:
            self.half_move_clock += 1

    def _position_key(self) -> PositionKey:
        """Same pieces on the same squares, same side to move, same castling and en passant options"""
        return (
            frozenset(self.board.position.items()),
            self.current_player,
            self._castling_rights(),
            self._en_passant_option(),
        )

    def _castling_rights(self) -> frozenset[CastlingDirection]:
        """Directions whose king and rook home squares were never touched"""
        return frozenset(
            direction
            for direction, rule in CASTLING_RULES.items()
            if not any(self.has_moved(square) for square in rule.home_squares)
        )

    def _en_passant_option(self) -> Optional[Position]:
        """The en passant target, but only if a pawn of the side to move can actually take there"""
        target = en_passant_target(self.last_move, self.board)
        if target is None or self.last_move is None:
            return None
        for df in (-1, 1):
            origin = self.last_move.to_square.offset(df, 0)
            if origin is None or self.board.get(origin) != Piece(PieceType.PAWN, self.current_player):
                continue
            if self.is_legal(origin, target):
                return target
        return None

    def _record_position(self) -> None:
        self.repetitions[self._position_key()] += 1

    def _update_game_status(self) -> None:
        """
        Performs checks to see if game has ended and changes status accordingly.

        NOTE the turn has already been switched. The color to move is the opponent of the player that just moved.
        """
        color = self.current_player
        in_check = is_in_check(self.board, color)
        can_move = has_legal_move(self.board, color, self)

        if in_check and not can_move:
            new_status = GameStatus.checkmate(winner=color.opposite())
        elif not can_move:
            new_status = GameStatus.stalemate()
        elif (reason := self._draw_reason()) is not None:
            new_status = GameStatus.draw(reason)
        elif in_check:
            new_status = GameStatus.check(color)
        else:
            new_status = GameStatus.in_progress()

        if new_status.is_over:
            logger.info(
                "Game over after %d moves: %s", len(self.move_history), new_status.label()
            )
        self.status = new_status

    def _draw_reason(self) -> Optional[DrawReason]:
        if self.repetitions[self._position_key()] >= REPETITION_LIMIT:
            return DrawReason.REPETITION
        if self.half_move_clock >= FIFTY_MOVE_RULE_HALF_MOVES:
            return DrawReason.FIFTY_MOVE_RULE
        if is_insufficient_material(self.board):
            return DrawReason.INSUFFICIENT_MATERIAL
        return None


def is_insufficient_material(board: Board) -> bool:
    """
    Neither side can ever mate:
    * king vs king
    * king and a single bishop or knight vs king
    * king and bishop vs king and bishop, bishops on same colored squares
    """
    minor_pieces: list[tuple[Position, Piece]] = []
    for square, piece in board.position.items():
        if piece.type == PieceType.KING:
            continue
        if piece.type not in (PieceType.BISHOP, PieceType.KNIGHT):
            return False
        minor_pieces.append((square, piece))

    if len(minor_pieces) <= 1:
        return True

    if len(minor_pieces) == 2:
        (square_a, piece_a), (square_b, piece_b) = minor_pieces
        both_bishops = piece_a.type == piece_b.type == PieceType.BISHOP
        opposing = piece_a.color != piece_b.color
        same_square_color = (square_a.file + square_a.rank) % 2 == (square_b.file + square_b.rank) % 2
        return both_bishops and opposing and same_square_color

    return False

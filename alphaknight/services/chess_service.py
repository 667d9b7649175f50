"""Orchestration of communication from a UI/CLI collaborator to the rules engine (and the reverse direction)."""

import logging
from typing import Optional

from alphaknight.api.models import (
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    PositionResponse,
    SquareView,
)
from alphaknight.chess import engine
from alphaknight.chess.history import GameHistory
from alphaknight.chess.pieces import Color as PieceColor
from alphaknight.chess.position import GameStatus, Position
from alphaknight.core.config import EngineSettings, get_settings
from alphaknight.core.exceptions import GameStateError
from alphaknight.core.shared_types import Color, Status

logger = logging.getLogger(__name__)

STATUS_NAMES: dict[GameStatus, Status] = {
    GameStatus.NORMAL: Status.IN_PROGRESS,
    GameStatus.CHECK: Status.CHECK,
    GameStatus.CHECKMATE: Status.CHECKMATE,
    GameStatus.STALEMATE: Status.STALEMATE,
}


class ChessService:
    """One game session: keeps the current Position, the engine does the rest."""

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        start: Optional[Position] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.position = start if start is not None else engine.new_game()

    # -- collaborator API ---
    def new_game(self) -> PositionResponse:
        """Throw away the current game and start from the standard position."""
        self.position = engine.new_game()
        logger.info("New game started")
        return self.get_game_state()

    def get_game_state(self) -> PositionResponse:
        return self._create_position_response(self.position)

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt. A rejected move leaves the session untouched."""
        result = engine.propose_move(
            self.position,
            request.origin,
            request.destination,
            promotion=request.promote_to,
            settings=self.settings,
        )
        if result.accepted:
            self.position = result.position

        return MoveResponse(
            accepted=result.accepted,
            reason=result.reason,
            message=result.message,
            position=self._create_position_response(self.position),
        )

    def legal_moves(self) -> LegalMovesResponse:
        """retrieve set of legal moves for the side to move."""
        return LegalMovesResponse(
            color=self._to_color(self.position.color_to_move),
            legal_moves=[move.to_uci() for move in engine.legal_moves(self.position)],
        )

    def board_view(self) -> list[SquareView]:
        """Squares from a8 to h1, for a collaborator that draws the board"""
        return [
            SquareView(
                square=square.to_algebraic(),
                piece=None if piece.is_empty else piece.to_fen(),
            )
            for square, piece in engine.render(self.position)
        ]

    def move_history(self) -> list[str]:
        return GameHistory.of(self.position).to_uci()

    def undo(self) -> PositionResponse:
        """
        Go back one move.
        ----
        Navigation only: the positions already played are not altered. The next move simply starts a new line from here.
        """
        if self.position.previous is None:
            raise GameStateError("Nothing to undo: no moves have been played.")
        logger.info("Taking back %s", self.position.last_move)
        self.position = self.position.previous
        return self.get_game_state()

    # -- Internal helpers --
    def _create_position_response(self, position: Position) -> PositionResponse:
        return PositionResponse(
            placement=position.placement(),
            color_to_move=self._to_color(position.color_to_move),
            status=STATUS_NAMES[position.status],
            castling_rights=[direction.value for direction in position.castling_rights.held()],
            en_passant_square=(
                position.en_passant_square.to_algebraic()
                if position.en_passant_square is not None
                else None
            ),
            move_history=GameHistory.of(position).to_uci(),
        )

    def _to_color(self, color: PieceColor) -> Color:
        return Color[color.name]

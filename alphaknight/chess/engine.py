"""
The engine module is the entrypoint into the domain layer for collaborators (service layer, a GUI, a CLI, ...).

Collaborators only ever
* start a game (`new_game` / `setup_position`),
* propose a move (`propose_move`), getting back either the new Position or a structured rejection,
* read a Position (`render`, `history`, `legal_moves`).
"""

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence

from alphaknight.chess.board import Board
from alphaknight.chess.castling import CastlingRights
from alphaknight.chess.history import GameHistory
from alphaknight.chess.moves import Move
from alphaknight.chess.pieces import Color, Piece, PieceType
from alphaknight.chess.position import Position
from alphaknight.chess.square import BOARD_DIMENSIONS, Square
from alphaknight.chess.status import evaluate_status, legal_moves
from alphaknight.chess.validator import build_move, validate
from alphaknight.core.config import EngineSettings, get_settings
from alphaknight.core.exceptions import IllegalMoveError, IllegalMoveReason

logger = logging.getLogger(__name__)

SquareRef = int | str | Square


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a move proposal. On rejection `position` is the (untouched) position the move was proposed on."""

    position: Position
    move: Optional[Move] = None
    reason: Optional[IllegalMoveReason] = None
    message: str = ""

    @property
    def accepted(self) -> bool:
        return self.reason is None


def as_square(ref: SquareRef) -> Square:
    """Square index (0-63), algebraic name ("e4") or an actual Square"""
    if isinstance(ref, Square):
        return ref
    if isinstance(ref, str):
        return Square.from_algebraic(ref)
    return Square(ref)


def new_game() -> Position:
    """Standard starting position, white to move, all castling rights"""
    return Position.from_board(Board.starting_position())


def setup_position(
    placement: str,
    color_to_move: Color = Color.WHITE,
    castling_rights: Optional[CastlingRights] = None,
    en_passant_square: Optional[SquareRef] = None,
) -> Position:
    """Custom starting position (FEN piece placement), with its status evaluated. No rights unless given."""
    position = Position.from_board(
        Board.from_fen(placement),
        color_to_move=color_to_move,
        castling_rights=castling_rights if castling_rights is not None else CastlingRights.none(),
        en_passant_square=as_square(en_passant_square) if en_passant_square is not None else None,
    )
    return replace(position, status=evaluate_status(position))


def apply_move(position: Position, move: Move) -> Position:
    """Play a move that was already built. Raises an IllegalMoveError if it cannot be played."""
    successor = validate(move, position)
    return replace(successor, status=evaluate_status(successor))


def propose_move(
    position: Position,
    origin: SquareRef,
    destination: SquareRef,
    promotion: Optional[PieceType] = None,
    settings: Optional[EngineSettings] = None,
) -> MoveResult:
    """
    Attempt a move
    -----

    Never raises for an illegal move: the rejection is reported in the MoveResult, and the position is left as it was.
    Without a promotion choice, a pawn reaching the last rank promotes to the configured default
    (unless a choice is required).
    """
    settings = settings or get_settings()
    default_promotion = None if settings.require_promotion_choice else settings.default_promotion
    try:
        move = build_move(
            position,
            as_square(origin),
            as_square(destination),
            promote_to=promotion,
            default_promotion=default_promotion,
        )
        new_position = apply_move(position, move)
    except IllegalMoveError as error:
        logger.info("Rejected move %s -> %s: %s", origin, destination, error.message)
        return MoveResult(position=position, reason=error.reason, message=error.message)

    logger.info(
        "%s played %s, %s to move",
        position.color_to_move.name.lower(),
        move,
        new_position.color_to_move.name.lower(),
    )
    if new_position.is_terminal:
        logger.info("Game over: %s", new_position.status.name.lower())
    return MoveResult(position=new_position, move=move)


def history(position: Position) -> list[Move]:
    """Ordered moves that led to the position"""
    return GameHistory.of(position).moves


def replay(moves: Iterable[Move], start: Optional[Position] = None) -> Position:
    """Replay moves from the start position (a new game by default). Raises on the first illegal move."""
    position = start if start is not None else new_game()
    for move in moves:
        position = apply_move(position, move)
    return position


def render(position: Position) -> list[tuple[Square, Piece]]:
    """All 64 (square, piece) pairs, row by row from the black back rank (a8..h8) down to the white one (a1..h1)"""
    num_files, num_ranks = BOARD_DIMENSIONS
    return [
        (square, position.piece(square))
        for rank in range(num_ranks - 1, -1, -1)
        for square in (Square.from_file_rank(file, rank) for file in range(num_files))
    ]


# -- SIGNED-MAGNITUDE CODEC --
def board_codes(position: Position) -> tuple[int, ...]:
    """The board as 64 signed integers: 1-6 pawn..king, positive white, negative black, 0 empty. Index = square."""
    return tuple(piece.to_code() for piece in position.board)


def position_from_codes(
    codes: Sequence[int],
    color_to_move: Color = Color.WHITE,
    castling_rights: Optional[CastlingRights] = None,
) -> Position:
    board = Board([Piece.from_code(code) for code in codes])
    position = Position.from_board(
        board,
        color_to_move=color_to_move,
        castling_rights=castling_rights if castling_rights is not None else CastlingRights.none(),
    )
    return replace(position, status=evaluate_status(position))

"""
Representation of a single position of a game: where the pieces are, who is to move, which castling rights remain,
the en passant target square and whether the side to move is in check / mated / stalemated.

A Position is a value. Once constructed it never changes; making a move produces a new Position.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Optional

from alphaknight.chess.board import Board
from alphaknight.chess.castling import CastlingRights
from alphaknight.chess.moves import PAWN_DIRECTION, PAWN_START_RANK, Move
from alphaknight.chess.pieces import PLAYER_COLORS, Color, Piece, PieceType
from alphaknight.chess.square import ALL_SQUARES, NUM_SQUARES, Square
from alphaknight.core.exceptions import InvalidPositionError

# rank of the square skipped by a double push, keyed by the color that pushed
EN_PASSANT_RANK: dict[Color, int] = {
    color: PAWN_START_RANK[color] + PAWN_DIRECTION[color] for color in PLAYER_COLORS
}


class GameStatus(Enum):
    """Exactly one of these holds for the side to move"""

    NORMAL = auto()
    CHECK = auto()
    CHECKMATE = auto()
    STALEMATE = auto()


@dataclass(frozen=True)
class Position:
    board: tuple[Piece, ...]
    color_to_move: Color = Color.WHITE
    castling_rights: CastlingRights = field(default_factory=CastlingRights)
    en_passant_square: Optional[Square] = None
    status: GameStatus = GameStatus.NORMAL
    # provenance: the position this one was reached from, and by which move. Not part of the value.
    previous: Optional[Position] = field(default=None, compare=False, repr=False)
    last_move: Optional[Move] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if len(self.board) != NUM_SQUARES:
            raise InvalidPositionError(
                f"A position holds exactly {NUM_SQUARES} squares, got {len(self.board)}"
            )

        if self.color_to_move not in PLAYER_COLORS:
            raise InvalidPositionError(f"Invalid side to move: {self.color_to_move}")

        for color in PLAYER_COLORS:
            num_kings = self.board.count(Piece(PieceType.KING, color))
            if num_kings != 1:
                raise InvalidPositionError(
                    f"Expected exactly one {color.name} king, found {num_kings}"
                )

        if self.en_passant_square is not None:
            # the target square lies right behind a pawn the opponent just pushed by two
            pushed_by = self.color_to_move.opponent
            if self.en_passant_square.rank != EN_PASSANT_RANK[pushed_by]:
                raise InvalidPositionError(
                    f"{self.en_passant_square} cannot be an en passant square with {self.color_to_move.name} to move"
                )

    @classmethod
    def from_board(
        cls,
        board: Board,
        color_to_move: Color = Color.WHITE,
        castling_rights: Optional[CastlingRights] = None,
        en_passant_square: Optional[Square] = None,
    ) -> Position:
        return cls(
            board=board.freeze(),
            color_to_move=color_to_move,
            castling_rights=castling_rights if castling_rights is not None else CastlingRights(),
            en_passant_square=en_passant_square,
        )

    # -- READING THE POSITION --
    def piece(self, square: Square) -> Piece:
        return self.board[square.index]

    def scratch_board(self) -> Board:
        """Mutable copy of the placement to try out moves on"""
        return Board(list(self.board))

    def occupied_squares(self, color: Color) -> Iterator[Square]:
        return (square for square in ALL_SQUARES if self.piece(square).color == color)

    def king_square(self, color: Color) -> Square:
        return Square(self.board.index(Piece(PieceType.KING, color)))

    def placement(self) -> str:
        return self.scratch_board().to_fen()

    @property
    def in_check(self) -> bool:
        return self.status in (GameStatus.CHECK, GameStatus.CHECKMATE)

    @property
    def is_checkmate(self) -> bool:
        return self.status == GameStatus.CHECKMATE

    @property
    def is_stalemate(self) -> bool:
        return self.status == GameStatus.STALEMATE

    @property
    def is_terminal(self) -> bool:
        return self.status in (GameStatus.CHECKMATE, GameStatus.STALEMATE)

    @property
    def ply(self) -> int:
        """Number of moves played to reach this position"""
        count = 0
        position = self
        while position.previous is not None:
            count += 1
            position = position.previous
        return count

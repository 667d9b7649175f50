"""Defines the types of chess pieces"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self

from alphaknight.core.exceptions import InvalidPositionError


class PieceType(Enum):
    EMPTY = auto()
    PAWN = auto()
    KNIGHT = auto()
    BISHOP = auto()
    ROOK = auto()
    QUEEN = auto()
    KING = auto()


class Color(Enum):
    NONE = auto()
    WHITE = auto()
    BLACK = auto()

    @property
    def opponent(self) -> "Color":
        if self == Color.NONE:
            return Color.NONE
        return Color.WHITE if self == Color.BLACK else Color.BLACK


PLAYER_COLORS: tuple[Color, Color] = (Color.WHITE, Color.BLACK)

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# Signed-magnitude encoding: magnitude is the kind, sign is the color (white positive), 0 is an empty square.
# Only used at the serialization boundary (`Piece.from_code` / `Piece.to_code`).
PIECE_CODES: dict[PieceType, int] = {
    PieceType.EMPTY: 0,
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 2,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 4,
    PieceType.QUEEN: 5,
    PieceType.KING: 6,
}

CODE_TO_PIECE: dict[int, PieceType] = {value: key for key, value in PIECE_CODES.items()}


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color

    def __post_init__(self) -> None:
        # an empty square has no color and a colorless square holds no piece
        if (self.type == PieceType.EMPTY) != (self.color == Color.NONE):
            raise InvalidPositionError(f"Inconsistent piece: {self.type.name} / {self.color.name}")

    @classmethod
    def from_fen(cls, character: str) -> Self:
        if character.lower() not in FEN_TO_PIECE:
            raise InvalidPositionError(f"Unknown piece letter {character!r}")
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        if self.is_empty:
            return "."
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    @classmethod
    def from_code(cls, code: int) -> Self:
        """Decode the signed-magnitude integer representation"""
        if abs(code) not in CODE_TO_PIECE:
            raise InvalidPositionError(f"No piece is encoded by {code}")
        if code == 0:
            return cls(PieceType.EMPTY, Color.NONE)
        color = Color.WHITE if code > 0 else Color.BLACK
        return cls(CODE_TO_PIECE[abs(code)], color)

    def to_code(self) -> int:
        magnitude = PIECE_CODES[self.type]
        return -magnitude if self.color == Color.BLACK else magnitude

    @property
    def is_empty(self) -> bool:
        return self.type == PieceType.EMPTY

    def is_opponent_of(self, color: Color) -> bool:
        return not self.is_empty and self.color == color.opponent

    def promoted_to(self, new_type: PieceType) -> Self:
        """Pieces are immutable: promotion hands back a new piece of the same color."""
        return type(self)(new_type, self.color)


EMPTY_SQUARE = Piece(PieceType.EMPTY, Color.NONE)

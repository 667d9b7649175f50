"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Self

from alphaknight.chess.pieces import Color, PieceType
from alphaknight.chess.square import Square

if TYPE_CHECKING:
    from alphaknight.chess.moves import Move


class CastlingDirection(Enum):
    """The four castling directions. Values are the names of the matching `CastlingRights` fields."""

    WHITE_KING_SIDE = "white_king_side"
    WHITE_QUEEN_SIDE = "white_queen_side"
    BLACK_KING_SIDE = "black_king_side"
    BLACK_QUEEN_SIDE = "black_queen_side"

    @property
    def color(self) -> Color:
        if self in (CastlingDirection.WHITE_KING_SIDE, CastlingDirection.WHITE_QUEEN_SIDE):
            return Color.WHITE
        return Color.BLACK

    @property
    def is_king_side(self) -> bool:
        return self in (CastlingDirection.WHITE_KING_SIDE, CastlingDirection.BLACK_KING_SIDE)


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, we already know the king / rook are still at their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)

    def squares_between(self) -> list[Square]:
        """Squares between king and rook. All of them must be empty before castling."""
        low, high = sorted((self.king_from.index, self.rook_from.index))
        return [Square(index) for index in range(low + 1, high)]

    def king_path(self) -> list[Square]:
        """Squares the king stands on, crosses, and lands on. None of them may be attacked."""
        step = 1 if self.king_to.index > self.king_from.index else -1
        return [
            Square(index)
            for index in range(self.king_from.index, self.king_to.index + step, step)
        ]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}

def castling_directions(color: Color) -> list[CastlingDirection]:
    return [direction for direction in CastlingDirection if direction.color == color]


def castling_direction_for(king_from: Square, king_to: Square) -> CastlingDirection | None:
    """Which castling move (if any) moves the king between these two squares"""
    for direction, squares in CASTLING_RULES.items():
        if squares.king_from == king_from and squares.king_to == king_to:
            return direction
    return None


@dataclass(frozen=True)
class CastlingRights:
    """Four independent rights. Once revoked, a right is never granted again."""

    white_king_side: bool = True
    white_queen_side: bool = True
    black_king_side: bool = True
    black_queen_side: bool = True

    @classmethod
    def none(cls) -> Self:
        return cls(False, False, False, False)

    def has(self, direction: CastlingDirection) -> bool:
        return getattr(self, direction.value)

    def can_castle(self, color: Color) -> bool:
        return any(self.has(direction) for direction in castling_directions(color))

    def revoke(self, *directions: CastlingDirection) -> Self:
        return replace(self, **{direction.value: False for direction in directions})

    def held(self) -> list[CastlingDirection]:
        return [direction for direction in CastlingDirection if self.has(direction)]

    def is_subset_of(self, other: CastlingRights) -> bool:
        return all(other.has(direction) for direction in self.held())


# --- CASTLING RIGHTS TRACKER ---
def update_castling_rights(rights: CastlingRights, move: Move) -> CastlingRights:
    """
    Checks which rights should get revoked
    ----

    1. If you are moving your king from its home square (castling included) --> revoke both
    2. If something leaves a rook's home square --> revoke the right in the direction of that rook
    3. If something lands on a rook's home square (so takes the rook) --> revoke the opponent's right in that direction
    """
    to_revoke: list[CastlingDirection] = []
    for direction in rights.held():
        squares = CASTLING_RULES[direction]
        king_leaves_home = (
            move.piece.type == PieceType.KING
            and move.piece.color == direction.color
            and move.from_square == squares.king_from
        )
        rook_leaves_home = move.from_square == squares.rook_from
        rook_home_taken = move.to_square == squares.rook_from
        if king_leaves_home or rook_leaves_home or rook_home_taken:
            to_revoke.append(direction)

    if not to_revoke:
        return rights
    return rights.revoke(*to_revoke)


def derive_castling_rights(
    moves: Iterable[Move], initial: CastlingRights | None = None
) -> CastlingRights:
    """Recompute the rights from move provenance alone (starting from all rights held unless told otherwise)."""
    rights = initial if initial is not None else CastlingRights()
    for move in moves:
        rights = update_castling_rights(rights, move)
    return rights

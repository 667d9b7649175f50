"""
A square on the board

(placed in its own module as multiple other modules need to import it)

Squares are indexed rank-major: a1 = 0, b1 = 1, ..., h1 = 7, a2 = 8, ..., h8 = 63.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from alphaknight.core.exceptions import OutOfBoundsError

# Chess board is always 8x8. (files, ranks)
BOARD_DIMENSIONS = (8, 8)
NUM_SQUARES = BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]

Vector = tuple[int, int]


@dataclass(frozen=True, order=True)
class Square:
    index: int

    def __post_init__(self) -> None:
        if not 0 <= self.index < NUM_SQUARES:
            raise OutOfBoundsError(f"Square index {self.index} not in [0, {NUM_SQUARES - 1}]")

    @classmethod
    def from_file_rank(cls, file: int, rank: int) -> Square:
        """0-based file and rank. Out of range values are rejected (no wrapping into the next rank)."""
        num_files, num_ranks = BOARD_DIMENSIONS
        if not (0 <= file < num_files and 0 <= rank < num_ranks):
            raise OutOfBoundsError(f"(file={file}, rank={rank}) is not on the board")
        return cls(rank * num_files + file)

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to 0 - 63"""
        if len(sq) != 2 or not sq[1].isdigit():
            raise OutOfBoundsError(f"Cannot interpret {sq!r} as a square")
        file = ord(sq[0].lower()) - ord("a")
        rank = int(sq[1]) - 1
        return cls.from_file_rank(file, rank)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a'))}{self.rank + 1}"

    @property
    def file(self) -> int:
        return self.index % BOARD_DIMENSIONS[0]

    @property
    def rank(self) -> int:
        return self.index // BOARD_DIMENSIONS[0]

    def shifted(self, df: int, dr: int) -> Optional[Square]:
        """The square displaced by (df, dr), or None if that walks off the board.

        Works on file/rank, never on the raw index: h1 + (1, 0) is off the board, not a2.
        """
        file = self.file + df
        rank = self.rank + dr
        if not (0 <= file < BOARD_DIMENSIONS[0] and 0 <= rank < BOARD_DIMENSIONS[1]):
            return None
        return Square(rank * BOARD_DIMENSIONS[0] + file)

    def delta(self, other: Square) -> Vector:
        """(file, rank) translation needed to go from this square to the other one"""
        return other.file - self.file, other.rank - self.rank

    def __str__(self) -> str:
        return self.to_algebraic()


ALL_SQUARES: tuple[Square, ...] = tuple(Square(index) for index in range(NUM_SQUARES))

"""The Board is the mutable scratch copy of a piece placement. Moves are tried out on a Board, never on a Position."""

from dataclasses import dataclass
from typing import Self

from alphaknight.chess.pieces import EMPTY_SQUARE, Color, Piece, PieceType
from alphaknight.chess.square import ALL_SQUARES, BOARD_DIMENSIONS, NUM_SQUARES, Square
from alphaknight.core.exceptions import InvalidPositionError

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


@dataclass
class Board:
    squares: list[Piece]

    def __post_init__(self) -> None:
        if len(self.squares) != NUM_SQUARES:
            raise InvalidPositionError(
                f"A board holds exactly {NUM_SQUARES} squares, got {len(self.squares)}"
            )

    @classmethod
    def empty(cls) -> Self:
        return cls([EMPTY_SQUARE] * NUM_SQUARES)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.
        """
        num_files, num_ranks = BOARD_DIMENSIONS
        fen_by_ranks = fen_str.split("/")
        if len(fen_by_ranks) != num_ranks:
            raise InvalidPositionError(f"Expected {num_ranks} ranks in placement: {fen_str!r}")

        board = cls.empty()
        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = num_ranks - 1 - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 0
            for character in fen_one_rank:
                if character.isdigit():
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
                    continue
                if file >= num_files:
                    raise InvalidPositionError(f"Rank {rank + 1} overflows in placement: {fen_str!r}")
                board.place_piece(Piece.from_fen(character), Square.from_file_rank(file, rank))
                file += 1
            if file != num_files:
                raise InvalidPositionError(f"Rank {rank + 1} does not hold {num_files} squares: {fen_str!r}")
        return board

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_PLACEMENT)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(BOARD_DIMENSIONS[0]):
            piece = self.piece(Square.from_file_rank(file, rank))

            if piece.is_empty:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def piece(self, square: Square) -> Piece:
        return self.squares[square.index]

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Square]:
        return [square for square in ALL_SQUARES if self.piece(square) == Piece(piece_type, color)]

    def locate_color(self, color: Color) -> list[Square]:
        return [square for square in ALL_SQUARES if self.piece(square).color == color]

    def king_square(self, color: Color) -> Square:
        kings = self.locate_pieces(PieceType.KING, color)
        if len(kings) != 1:
            raise InvalidPositionError(f"Expected exactly one {color.name} king, found {len(kings)}")
        return kings[0]

    def place_piece(self, piece: Piece, square: Square) -> None:
        self.squares[square.index] = piece

    def remove_piece(self, square: Square) -> None:
        self.squares[square.index] = EMPTY_SQUARE

    def move_piece(self, from_square: Square, to_square: Square) -> None:
        """Update the placement: whatever stands on the target square is overwritten (captured)"""
        piece_that_moved = self.piece(from_square)
        self.remove_piece(from_square)
        self.place_piece(piece_that_moved, to_square)

    def copy(self) -> Self:
        return type(self)(list(self.squares))

    def freeze(self) -> tuple[Piece, ...]:
        """Snapshot to hand over to an (immutable) Position"""
        return tuple(self.squares)

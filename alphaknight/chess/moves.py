"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define pseudo-legal destination sets for each piece type.


Legality (not leaving your own king in check, castling through attacked squares, ...) is checked later by the validator
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional, Protocol

from alphaknight.chess.castling import (
    CASTLING_RULES,
    CastlingRights,
    castling_directions,
)
from alphaknight.chess.pieces import EMPTY_SQUARE, PIECE_TO_FEN, Color, Piece, PieceType
from alphaknight.chess.square import Square, Vector
from alphaknight.core.exceptions import (
    GeometryViolationError,
    InvalidPromotionError,
    NullMoveError,
)


class Board(Protocol):
    """Just the parts the movement strategies need. Both the scratch Board and a Position offer it."""

    def piece(self, square: Square) -> Piece: ...


class MoveTag(Enum):
    NONE = auto()
    CASTLE_KINGSIDE = auto()
    CASTLE_QUEENSIDE = auto()
    EN_PASSANT = auto()
    PROMOTION = auto()


def is_chess_translation(df: int, dr: int) -> bool:
    """
    Could any chess piece ever translate by (df, dr)?
    Straight lines, diagonals and knight jumps only. Anything else (e.g. h1 -> a2, which is a raw index step of +1)
    means a file edge got wrapped.
    """
    if df == 0 and dr == 0:
        return False
    if df == 0 or dr == 0:
        return True
    if abs(df) == abs(dr):
        return True
    return {abs(df), abs(dr)} == {1, 2}


@dataclass(frozen=True)
class Move:
    """A proposed transition, with the moving/captured pieces captured at proposal time"""

    from_square: Square
    to_square: Square
    piece: Piece
    captured: Piece = EMPTY_SQUARE
    special: MoveTag = MoveTag.NONE
    promote_to: Optional[PieceType] = None

    def __post_init__(self) -> None:
        if self.from_square == self.to_square:
            raise NullMoveError(f"Origin and destination are both {self.from_square}")

        df, dr = self.from_square.delta(self.to_square)
        if not is_chess_translation(df, dr):
            raise GeometryViolationError(
                f"No piece can move from {self.from_square} to {self.to_square}"
            )

        if (self.special == MoveTag.PROMOTION) != (self.promote_to is not None):
            raise InvalidPromotionError(
                f"A promotion piece must be given exactly for promotion moves: {self.to_uci()}"
            )

    @property
    def is_capture(self) -> bool:
        return not self.captured.is_empty

    @property
    def is_castling(self) -> bool:
        return self.special in (MoveTag.CASTLE_KINGSIDE, MoveTag.CASTLE_QUEENSIDE)

    def to_uci(self) -> str:
        """
        Universal Chess Interface notation: <from_square><to_square>[promotion]

        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        """
        piece_char = PIECE_TO_FEN[self.promote_to] if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"

    def __str__(self) -> str:
        return self.to_uci()


# --- MOVEMENT RULES ---
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS

# White moves UP the board (+8 in index terms), Black moves DOWN (-8)
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: -1}
PAWN_START_RANK: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: 6}
PROMOTION_RANK: dict[Color, int] = {Color.WHITE: 7, Color.BLACK: 0}


def raycasting_move(square: Square, board: Board, directions: list[Vector]) -> set[Square]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    player_color = board.piece(square).color

    destinations: set[Square] = set()
    for df, dr in directions:
        target_square = square.shifted(df, dr)
        while target_square is not None:
            target_piece = board.piece(target_square)
            if not target_piece.is_empty:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if target_piece.is_opponent_of(player_color):
                    destinations.add(target_square)
                break

            destinations.add(target_square)
            target_square = target_square.shifted(df, dr)
    return destinations


def single_step_move(square: Square, board: Board, deltas: list[Vector]) -> set[Square]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump a single step along a direction"""
    player_color = board.piece(square).color
    destinations: set[Square] = set()
    for df, dr in deltas:
        target_square = square.shifted(df, dr)
        if target_square is None:
            continue

        if board.piece(target_square).color != player_color:
            destinations.add(target_square)

    return destinations


def pawn_capture_squares(square: Square, color: Color) -> list[Square]:
    """The (at most two) squares diagonally in front of a pawn"""
    dr = PAWN_DIRECTION[color]
    targets = [square.shifted(df, dr) for df in (-1, 1)]
    return [target for target in targets if target is not None]


def candidate_pawn_moves(square: Square, board: Board) -> set[Square]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square only.
    - It can move by two in their first move (so when on their starting rank), through two empty squares
    - takes diagonally

    NOTE: En passant is added by `pseudo_legal_destinations`, as it depends on the position and not on the board alone
    """
    color = board.piece(square).color
    dr = PAWN_DIRECTION[color]
    destinations: set[Square] = set()

    one_step = square.shifted(0, dr)
    if one_step is not None and board.piece(one_step).is_empty:
        destinations.add(one_step)
        two_steps = one_step.shifted(0, dr)
        on_start_rank = square.rank == PAWN_START_RANK[color]
        if on_start_rank and two_steps is not None and board.piece(two_steps).is_empty:
            destinations.add(two_steps)

    for target_square in pawn_capture_squares(square, color):
        if board.piece(target_square).is_opponent_of(color):
            destinations.add(target_square)
    return destinations


def candidate_knight_moves(square: Square, board: Board) -> set[Square]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> set[Square]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> set[Square]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> set[Square]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return candidate_bishop_moves(square, board) | candidate_rook_moves(square, board)


def candidate_king_moves(square: Square, board: Board) -> set[Square]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (see `castling_destinations`).
    """
    return single_step_move(square, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], set[Square]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def pseudo_legal_destinations(
    square: Square, board: Board, en_passant_square: Optional[Square] = None
) -> set[Square]:
    """Every square the piece on `square` may reach, ignoring whether its own king ends up in check. Castling excluded."""
    piece = board.piece(square)
    if piece.is_empty:
        return set()

    movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece.type]
    destinations = movement_rule(square, board)
    if piece.type == PieceType.PAWN and en_passant_square is not None:
        if can_capture_en_passant(square, en_passant_square, board):
            destinations.add(en_passant_square)
    return destinations


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Square,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    ---
    Similar to raycasting moves.
    However, where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_


    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color and that
    is allowed to move along the given direction?"_

    ---
    Returns TRUE if the first piece encountered along one of the directions is of the specified color and type.
    """
    for df, dr in directions:
        target_square = square.shifted(df, dr)
        while target_square is not None:
            piece_found = board.piece(target_square)
            if not piece_found.is_empty:
                if piece_found == Piece(by_piece_type, by_color):
                    return True
                break
            target_square = target_square.shifted(df, dr)
    return False


def single_step_attack(
    square: Square,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """
    Raycasting is for sliding pieces. This is the equivalent for pawns, kings, and knights that just can move a single step along a direction.

    ---
    Returns TRUE if a piece of the specified color and type sits a single step away.
    """
    attacker = Piece(by_piece_type, by_color)
    for df, dr in deltas:
        target_square = square.shifted(df, dr)
        if target_square is not None and board.piece(target_square) == attacker:
            return True
    return False


def is_attacked_by_pawn(square: Square, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric, so to check IF a white pawn could take on your square -->
    Must look one rank DOWN the board. Hence, vectors are exactly opposite to the ones used in `pawn_capture_squares()`
    """
    dr = -PAWN_DIRECTION[by_color]
    return single_step_attack(square, by_color, PieceType.PAWN, board, [(1, dr), (-1, dr)])


def is_attacked_by_knight(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_by_bishop(square: Square, by_color: Color, board: Board) -> bool:
    return raycasting_attack(square, by_color, PieceType.BISHOP, board, DIAGONALS)


def is_attacked_by_rook(square: Square, by_color: Color, board: Board) -> bool:
    return raycasting_attack(square, by_color, PieceType.ROOK, board, STRAIGHTS)


def is_attacked_by_queen(square: Square, by_color: Color, board: Board) -> bool:
    return raycasting_attack(square, by_color, PieceType.QUEEN, board, STRAIGHTS + DIAGONALS)


def is_attacked_by_king(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KING, board, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Square, Color, Board], bool]
ATTACK_RULES: dict[PieceType, IsAttackedFn] = {
    PieceType.PAWN: is_attacked_by_pawn,
    PieceType.KNIGHT: is_attacked_by_knight,
    PieceType.BISHOP: is_attacked_by_bishop,
    PieceType.ROOK: is_attacked_by_rook,
    PieceType.QUEEN: is_attacked_by_queen,
    PieceType.KING: is_attacked_by_king,
}


def is_attacked(square: Square, by_color: Color, board: Board) -> bool:
    """Could any piece of `by_color` capture on `square`? Pure function of the board."""
    return any(rule(square, by_color, board) for rule in ATTACK_RULES.values())


# -- CASTLING MOVES ---
def castling_destinations(square: Square, board: Board, rights: CastlingRights) -> set[Square]:
    """
    King destinations reached by castling, as far as the board alone can tell:
    the right is still held, king and rook are on their home squares and nothing stands in between.

    Attacked squares are the validator's concern.
    """
    king = board.piece(square)
    if king.type != PieceType.KING:
        return set()

    destinations: set[Square] = set()
    for direction in castling_directions(king.color):
        squares = CASTLING_RULES[direction]
        if not rights.has(direction) or squares.king_from != square:
            continue
        if board.piece(squares.rook_from) != Piece(PieceType.ROOK, king.color):
            continue
        if any(not board.piece(between).is_empty for between in squares.squares_between()):
            continue
        destinations.add(squares.king_to)
    return destinations


# -- EN PASSANT MOVES ---
def en_passant_victim_square(en_passant_square: Square, color: Color) -> Optional[Square]:
    """The square of the pawn that gets taken when `color` captures on the en passant square (one step behind it)."""
    return en_passant_square.shifted(0, -PAWN_DIRECTION[color])


def can_capture_en_passant(square: Square, en_passant_square: Square, board: Board) -> bool:
    """The pawn on `square` sits diagonally behind the target square, which is empty, with an opposing pawn right past it."""
    pawn = board.piece(square)
    if pawn.type != PieceType.PAWN:
        return False
    if en_passant_square not in pawn_capture_squares(square, pawn.color):
        return False
    if not board.piece(en_passant_square).is_empty:
        return False
    victim_square = en_passant_victim_square(en_passant_square, pawn.color)
    return (
        victim_square is not None
        and board.piece(victim_square) == Piece(PieceType.PAWN, pawn.color.opponent)
    )


def double_push_en_passant_square(move: Move) -> Optional[Square]:
    """The en passant target square created by the move, i.e. the square a pawn skipped over."""
    if move.piece.type != PieceType.PAWN:
        return None
    _, dr = move.from_square.delta(move.to_square)
    if abs(dr) != 2:
        return None
    return move.from_square.shifted(0, dr // 2)


# -- PAWN PROMOTION MOVES --
PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
]


def is_promotion_square(square: Square, color: Color) -> bool:
    """A pawn of `color` arriving here must promote"""
    return square.rank == PROMOTION_RANK[color]

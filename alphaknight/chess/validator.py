"""
Legality of a single move.

`validate()` decides whether a Move may be played on a Position and, if so, builds the Position it leads to.
All speculative work happens on a scratch Board: the Position handed in is never touched.

plan:
1. Is the right piece moving, and does the Move still describe this position?
2. No capturing your own pieces (or a king)
3. Piece geometry (movement rules) or the castling conditions
4. Make the move on a copy of the board
5. Your own king may not be attacked afterwards
6. Hand back the new Position (side to move flipped, castling rights / en passant square updated)
"""

import logging
from typing import Optional

from alphaknight.chess.board import Board
from alphaknight.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    castling_direction_for,
    update_castling_rights,
)
from alphaknight.chess.moves import (
    PROMOTION_OPTIONS,
    Move,
    MoveTag,
    castling_destinations,
    double_push_en_passant_square,
    en_passant_victim_square,
    is_attacked,
    is_promotion_square,
    pseudo_legal_destinations,
)
from alphaknight.chess.pieces import PieceType
from alphaknight.chess.position import Position
from alphaknight.chess.square import Square
from alphaknight.core.exceptions import (
    BlockedError,
    CastlingUnavailableError,
    EmptyOriginError,
    ExposesKingError,
    GameOverError,
    GeometryViolationError,
    IllegalMoveError,
    InvalidPromotionError,
    KingCaptureError,
    SelfCaptureError,
    StaleMoveError,
    WrongTurnError,
)

logger = logging.getLogger(__name__)


def build_move(
    position: Position,
    from_square: Square,
    to_square: Square,
    promote_to: Optional[PieceType] = None,
    default_promotion: Optional[PieceType] = None,
) -> Move:
    """
    Read a Move off the position: which piece moves, what gets captured and whether it is a special move.
    ----

    * a king jumping from its home square onto a castling square --> castling
    * a pawn moving diagonally onto the (empty) en passant square --> en passant, the captured pawn stands behind it
    * a pawn reaching the last rank --> promotion. Without a choice, `default_promotion` is used (if any).
    """
    piece = position.piece(from_square)
    captured = position.piece(to_square)
    special = MoveTag.NONE

    if piece.type == PieceType.KING:
        direction = castling_direction_for(from_square, to_square)
        if direction is not None and direction.color == piece.color:
            special = (
                MoveTag.CASTLE_KINGSIDE if direction.is_king_side else MoveTag.CASTLE_QUEENSIDE
            )

    if piece.type == PieceType.PAWN:
        is_diagonal = from_square.file != to_square.file
        if is_diagonal and captured.is_empty and to_square == position.en_passant_square:
            special = MoveTag.EN_PASSANT
            victim_square = en_passant_victim_square(to_square, piece.color)
            if victim_square is not None:
                captured = position.piece(victim_square)
        elif is_promotion_square(to_square, piece.color):
            special = MoveTag.PROMOTION
            promote_to = promote_to or default_promotion
            if promote_to is None:
                raise InvalidPromotionError(
                    f"Pawn reaching {to_square} must be told what to promote to"
                )

    if promote_to is not None and special != MoveTag.PROMOTION:
        raise InvalidPromotionError(
            f"Only a pawn reaching the last rank can promote ({from_square} -> {to_square})"
        )

    return Move(from_square, to_square, piece, captured, special, promote_to)


def validate(move: Move, position: Position) -> Position:
    """Return the position reached by the move, or raise the IllegalMoveError explaining why it cannot be played.

    NOTE: the status (check / mate) of the returned position is not evaluated here.
    """
    if position.is_terminal:
        raise GameOverError(f"No moves can be made in a finished game ({position.status.name.lower()})")

    # 1. who is moving
    mover = position.piece(move.from_square)
    if mover.is_empty:
        raise EmptyOriginError(f"No piece found on {move.from_square}")
    if mover.color != position.color_to_move:
        raise WrongTurnError(
            f"Tried to move a {mover.color.name} piece while {position.color_to_move.name} is to move"
        )

    # 2. what is being taken
    target = position.piece(move.to_square)
    if target.color == mover.color:
        raise SelfCaptureError(f"{move.to_square} is occupied by your own piece")

    expected = build_move(position, move.from_square, move.to_square, move.promote_to)
    if move != expected:
        raise StaleMoveError(f"Move {move} does not describe the current position")

    if move.captured.type == PieceType.KING:
        raise KingCaptureError(f"{move} would capture a king")

    # 3. geometry
    if move.is_castling:
        _check_castling(move, position)
    else:
        _check_reachable(move, position)

    if move.special == MoveTag.PROMOTION and move.promote_to not in PROMOTION_OPTIONS:
        raise InvalidPromotionError(f"Cannot promote to {move.promote_to}")

    # 4. speculative application
    board = _apply_on_scratch(move, position)

    # 5. self-check rule
    if is_attacked(board.king_square(mover.color), mover.color.opponent, board):
        raise ExposesKingError(f"{move} leaves the {mover.color.name} king in check")

    # 6. publish
    return Position(
        board=board.freeze(),
        color_to_move=mover.color.opponent,
        castling_rights=update_castling_rights(position.castling_rights, move),
        en_passant_square=double_push_en_passant_square(move),
        previous=position,
        last_move=move,
    )


def is_legal(move: Move, position: Position) -> bool:
    """Legality as a predicate"""
    try:
        validate(move, position)
    except IllegalMoveError:
        return False
    return True


# --- HELPERS ---
def _check_reachable(move: Move, position: Position) -> None:
    """
    Destination must be one of the pseudo-legal destinations of the piece.

    If it is not, but the piece could get there on an otherwise empty board, something is in the way (Blocked).
    Otherwise the piece simply does not move like that (GeometryViolation).
    """
    destinations = pseudo_legal_destinations(
        move.from_square, position, position.en_passant_square
    )
    if move.to_square in destinations:
        return

    lone_piece_board = Board.empty()
    lone_piece_board.place_piece(move.piece, move.from_square)
    if move.to_square in pseudo_legal_destinations(move.from_square, lone_piece_board):
        raise BlockedError(f"The path of {move} is obstructed")
    raise GeometryViolationError(
        f"A {move.piece.type.name.lower()} cannot move from {move.from_square} to {move.to_square}"
    )


def _castling_direction(move: Move) -> CastlingDirection:
    direction = castling_direction_for(move.from_square, move.to_square)
    # for the type checker: only called for moves tagged as castling, which are built from a direction
    assert direction is not None
    return direction


def _check_castling(move: Move, position: Position) -> None:
    """
    **you are allowed to castle if**

    * Castling rights are not yet revoked.
    * The rook is still there and all squares between king and rook are empty.
    * You are not currently in check (you cannot castle out of check).
    * The king does not cross or land on a square that is under attack.
    """
    direction = _castling_direction(move)
    color = move.piece.color
    if not position.castling_rights.has(direction):
        raise CastlingUnavailableError(f"Castling right {direction.name} has been revoked")

    if move.to_square not in castling_destinations(
        move.from_square, position, position.castling_rights
    ):
        raise CastlingUnavailableError(
            f"Cannot castle {direction.name}: rook missing or path occupied"
        )

    for square in CASTLING_RULES[direction].king_path():
        if is_attacked(square, color.opponent, position):
            logger.debug("castling %s refused: %s is attacked", direction.name, square)
            raise CastlingUnavailableError(
                f"Cannot castle {direction.name}: king would be in check on {square}"
            )


def _apply_on_scratch(move: Move, position: Position) -> Board:
    """Make the move on a copy of the board. NOTE: castling and en passant displace a second piece."""
    board = position.scratch_board()
    board.move_piece(move.from_square, move.to_square)

    if move.special == MoveTag.EN_PASSANT:
        victim_square = en_passant_victim_square(move.to_square, move.piece.color)
        assert victim_square is not None
        board.remove_piece(victim_square)
    elif move.is_castling:
        squares = CASTLING_RULES[_castling_direction(move)]
        board.move_piece(squares.rook_from, squares.rook_to)
    elif move.special == MoveTag.PROMOTION:
        assert move.promote_to is not None
        board.place_piece(move.piece.promoted_to(move.promote_to), move.to_square)
    return board

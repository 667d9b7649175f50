"""
Checks for ending the game: check, checkmate and stalemate for the side to move.

"No legal move exists" means: every piece of the side to move, every pseudo-legal destination (castling and every
promotion choice included) has been run through the validator, and all of them got rejected.
"""

from alphaknight.chess.moves import (
    PROMOTION_OPTIONS,
    Move,
    castling_destinations,
    is_attacked,
    is_promotion_square,
    pseudo_legal_destinations,
)
from alphaknight.chess.pieces import PieceType
from alphaknight.chess.position import GameStatus, Position
from alphaknight.chess.validator import build_move, is_legal


def candidate_moves(position: Position) -> list[Move]:
    """
    Before knowing the set of legal moves, we use the movement rules to find candidate moves, which will later be
    tested for legality. Ordered by origin, destination (and promotion choice).
    """
    color = position.color_to_move
    moves: list[Move] = []
    for square in position.occupied_squares(color):
        piece = position.piece(square)
        destinations = pseudo_legal_destinations(square, position, position.en_passant_square)
        destinations |= castling_destinations(square, position, position.castling_rights)
        for destination in sorted(destinations):
            promotes = piece.type == PieceType.PAWN and is_promotion_square(destination, color)
            for promote_to in PROMOTION_OPTIONS if promotes else [None]:
                moves.append(build_move(position, square, destination, promote_to))
    return moves


def legal_moves(position: Position) -> list[Move]:
    """List of legal moves for the side to move"""
    return [move for move in candidate_moves(position) if is_legal(move, position)]


def has_legal_move(position: Position) -> bool:
    return any(is_legal(move, position) for move in candidate_moves(position))


def is_check(position: Position) -> bool:
    """Is the side to move in check?"""
    color = position.color_to_move
    return is_attacked(position.king_square(color), color.opponent, position)


def evaluate_status(position: Position) -> GameStatus:
    """
    check | move exists --> status
    ------+-------------+----------
    yes   | yes         | CHECK
    yes   | no          | CHECKMATE
    no    | yes         | NORMAL
    no    | no          | STALEMATE
    """
    in_check = is_check(position)
    can_move = has_legal_move(position)
    if in_check:
        return GameStatus.CHECK if can_move else GameStatus.CHECKMATE
    return GameStatus.NORMAL if can_move else GameStatus.STALEMATE

"""Unit tests for the movement / attacking rules in /alphaknight/chess/moves.py"""

from typing import Callable
from unittest.mock import patch

import pytest

from alphaknight.chess.board import Board
from alphaknight.chess.castling import CastlingRights
from alphaknight.chess.moves import (
    Move,
    MoveTag,
    candidate_bishop_moves,
    candidate_king_moves,
    candidate_knight_moves,
    candidate_pawn_moves,
    candidate_queen_moves,
    candidate_rook_moves,
    can_capture_en_passant,
    castling_destinations,
    double_push_en_passant_square,
    en_passant_victim_square,
    is_attacked,
    is_chess_translation,
    pseudo_legal_destinations,
)
from alphaknight.chess.pieces import Color, Piece, PieceType
from alphaknight.chess.square import Square
from alphaknight.core.exceptions import (
    GeometryViolationError,
    InvalidPromotionError,
    NullMoveError,
)


def squares(*names: str) -> set[Square]:
    return {Square.from_algebraic(name) for name in names}


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


# --- MOVE CONSTRUCTION ---
def test_null_move_rejected() -> None:
    with pytest.raises(NullMoveError):
        Move(sq("e2"), sq("e2"), Piece.from_fen("P"))


@pytest.mark.parametrize(
    "from_index, to_index",
    [
        (7, 8),  # h1 -> a2: raw +1, but wraps a file edge
        (6, 16),  # g1 -> a3: raw +10 "knight offset" across the edge
        (15, 24),  # h2 -> a4: raw +9 "diagonal" across the edge
        (0, 11),  # a1 -> d2: not a line, diagonal nor a jump
    ],
)
def test_wraparound_translations_rejected(from_index: int, to_index: int) -> None:
    with pytest.raises(GeometryViolationError):
        Move(Square(from_index), Square(to_index), Piece.from_fen("N"))


@pytest.mark.parametrize(
    "df, dr, expected",
    [(0, 3, True), (-5, 0, True), (2, 2, True), (2, 1, True), (-1, -2, True), (3, 1, False), (0, 0, False)],
)
def test_is_chess_translation(df: int, dr: int, expected: bool) -> None:
    assert is_chess_translation(df, dr) == expected


def test_promotion_piece_only_for_promotions() -> None:
    with pytest.raises(InvalidPromotionError):
        Move(sq("e7"), sq("e8"), Piece.from_fen("P"), special=MoveTag.PROMOTION)
    with pytest.raises(InvalidPromotionError):
        Move(sq("e2"), sq("e3"), Piece.from_fen("P"), promote_to=PieceType.QUEEN)


def test_uci_notation() -> None:
    move = Move(sq("e7"), sq("e8"), Piece.from_fen("P"), special=MoveTag.PROMOTION, promote_to=PieceType.KNIGHT)
    assert move.to_uci() == "e7e8n"
    assert str(Move(sq("g1"), sq("f3"), Piece.from_fen("N"))) == "g1f3"


def test_move_flags() -> None:
    capture = Move(sq("e4"), sq("d5"), Piece.from_fen("P"), Piece.from_fen("p"))
    castle = Move(sq("e1"), sq("g1"), Piece.from_fen("K"), special=MoveTag.CASTLE_KINGSIDE)
    assert capture.is_capture and not capture.is_castling
    assert castle.is_castling and not castle.is_capture


# --- PAWNS ---
def test_white_pawn_from_start() -> None:
    board = Board.starting_position()
    assert candidate_pawn_moves(sq("e2"), board) == squares("e3", "e4")


def test_black_pawn_moves_down() -> None:
    board = Board.starting_position()
    assert candidate_pawn_moves(sq("d7"), board) == squares("d6", "d5")


def test_pawn_double_push_blocked() -> None:
    """Both squares in front must be empty for the double push"""
    board = Board.from_fen("8/8/8/8/4n3/8/4P3/8")
    assert candidate_pawn_moves(sq("e2"), board) == squares("e3")
    board = Board.from_fen("8/8/8/8/8/4n3/4P3/8")
    assert candidate_pawn_moves(sq("e2"), board) == set()


def test_pawn_only_pushes_once_off_start_rank() -> None:
    board = Board.from_fen("8/8/8/8/8/4P3/8/8")
    assert candidate_pawn_moves(sq("e3"), board) == squares("e4")


def test_pawn_captures_diagonally() -> None:
    board = Board.from_fen("8/8/8/3p1N2/4P3/8/8/8")
    assert candidate_pawn_moves(sq("e4"), board) == squares("e5", "d5")


def test_pawn_on_a_file_does_not_wrap() -> None:
    """A pawn on a4 has one capture square only (b5); h-file pieces are not its neighbours"""
    board = Board.from_fen("8/8/7p/1p6/P7/8/8/8")
    assert candidate_pawn_moves(sq("a4"), board) == squares("a5", "b5")


# --- KNIGHTS ---
def test_knight_from_b1_in_starting_position() -> None:
    board = Board.starting_position()
    assert candidate_knight_moves(sq("b1"), board) == squares("a3", "c3")


def test_knight_in_corner_does_not_wrap() -> None:
    board = Board.from_fen("8/8/8/8/8/8/8/7N")
    assert candidate_knight_moves(sq("h1"), board) == squares("g3", "f2")


def test_knight_in_center() -> None:
    board = Board.from_fen("8/8/8/8/3N4/8/8/8")
    assert candidate_knight_moves(sq("d4"), board) == squares("b3", "b5", "c2", "c6", "e2", "e6", "f3", "f5")


# --- SLIDING PIECES ---
def test_rook_stops_at_first_piece() -> None:
    """Can take the opponent's pawn on d6, but cannot go through or land on its own pawn on b4"""
    board = Board.from_fen("8/8/3p4/8/1P1R4/8/8/8")
    assert candidate_rook_moves(sq("d4"), board) == squares(
        "d5", "d6", "c4", "e4", "f4", "g4", "h4", "d3", "d2", "d1"
    )


def test_rook_in_starting_position_has_no_moves() -> None:
    board = Board.starting_position()
    assert candidate_rook_moves(sq("a1"), board) == set()


def test_bishop_along_the_edge() -> None:
    board = Board.from_fen("8/8/8/8/8/8/8/B7")
    assert candidate_bishop_moves(sq("a1"), board) == squares("b2", "c3", "d4", "e5", "f6", "g7", "h8")


def test_bishop_on_h_file_does_not_wrap() -> None:
    board = Board.from_fen("8/8/8/8/7B/8/8/8")
    assert candidate_bishop_moves(sq("h4"), board) == squares("g5", "f6", "e7", "d8", "g3", "f2", "e1")


def test_queen_is_bishop_plus_rook() -> None:
    board = Board.from_fen("8/8/2p5/8/4Q3/8/8/8")
    queen_moves = candidate_queen_moves(sq("e4"), board)
    assert queen_moves == candidate_bishop_moves(sq("e4"), board) | candidate_rook_moves(sq("e4"), board)
    assert sq("c6") in queen_moves
    assert sq("b7") not in queen_moves


# --- KING ---
def test_king_single_steps() -> None:
    board = Board.from_fen("8/8/8/8/8/8/3P4/4K3")
    assert candidate_king_moves(sq("e1"), board) == squares("d1", "f1", "e2", "f2")


def test_king_on_h_file_does_not_wrap() -> None:
    board = Board.from_fen("8/8/8/7K/8/8/8/8")
    assert candidate_king_moves(sq("h5"), board) == squares("g4", "g5", "g6", "h4", "h6")


def test_castling_destinations_starting_position() -> None:
    """Pieces in between: no castling"""
    board = Board.starting_position()
    assert castling_destinations(sq("e1"), board, CastlingRights()) == set()


def test_castling_destinations_cleared_back_rank() -> None:
    board = Board.from_fen("r3k2r/8/8/8/8/8/8/R3K2R")
    assert castling_destinations(sq("e1"), board, CastlingRights()) == squares("g1", "c1")
    assert castling_destinations(sq("e8"), board, CastlingRights()) == squares("g8", "c8")

    rights = CastlingRights(white_king_side=False, white_queen_side=True, black_king_side=True, black_queen_side=True)
    assert castling_destinations(sq("e1"), board, rights) == squares("c1")


def test_castling_needs_the_rook() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/8/4K2R")
    assert castling_destinations(sq("e1"), board, CastlingRights()) == squares("g1")


def test_castling_queen_side_needs_b_file_empty() -> None:
    board = Board.from_fen("4k3/8/8/8/8/8/8/RN2K3")
    assert castling_destinations(sq("e1"), board, CastlingRights()) == set()


# --- STRATEGY PATTERN ---
def test_movement_rules_are_looked_up_by_piece_type() -> None:
    """Swapping out the rule for a piece type changes the destinations for that piece type only"""
    board = Board.from_fen("8/8/8/8/3N4/8/8/8")
    fake_rule: Callable[[Square, Board], set[Square]] = lambda square, board: squares("a1")
    with patch.dict("alphaknight.chess.moves.MOVEMENT_RULES", {PieceType.KNIGHT: fake_rule}):
        assert pseudo_legal_destinations(sq("d4"), board) == squares("a1")
    assert sq("a1") not in pseudo_legal_destinations(sq("d4"), board)


def test_empty_square_has_no_destinations() -> None:
    assert pseudo_legal_destinations(sq("e4"), Board.starting_position()) == set()


# --- ATTACKS ---
@pytest.mark.parametrize(
    "placement, target, by_color, expected",
    [
        ("8/8/8/8/8/8/8/R7", "a8", Color.WHITE, True),
        ("8/8/8/8/8/8/P7/R7", "a8", Color.WHITE, False),  # blocked by its own pawn
        ("8/8/8/8/8/8/8/B7", "h8", Color.WHITE, True),
        ("8/8/8/8/8/8/8/B7", "h1", Color.WHITE, False),
        ("8/8/8/8/8/5n2/8/8", "e1", Color.BLACK, True),
        ("8/8/8/8/8/5n2/8/8", "e1", Color.WHITE, False),  # wrong color
        ("8/8/8/8/8/8/8/7N", "a2", Color.WHITE, False),  # no wrapping
        ("8/8/8/8/8/8/3P4/8", "e3", Color.WHITE, True),
        ("8/8/8/8/8/8/3P4/8", "c1", Color.WHITE, False),  # pawns attack forward only
        ("8/8/8/3p4/8/8/8/8", "e4", Color.BLACK, True),
        ("8/8/8/3p4/8/8/8/8", "d4", Color.BLACK, False),  # pawns do not attack straight ahead
        ("8/8/8/8/4k3/8/8/8", "d3", Color.BLACK, True),
        ("8/8/8/8/8/8/8/7Q", "a8", Color.WHITE, True),
    ],
)
def test_is_attacked(placement: str, target: str, by_color: Color, expected: bool) -> None:
    assert is_attacked(sq(target), by_color, Board.from_fen(placement)) == expected


def test_is_attacked_does_not_modify_board() -> None:
    board = Board.starting_position()
    before = board.freeze()
    is_attacked(sq("f3"), Color.WHITE, board)
    assert board.freeze() == before


# --- EN PASSANT ---
def test_double_push_sets_en_passant_square() -> None:
    white = Move(sq("e2"), sq("e4"), Piece.from_fen("P"))
    black = Move(sq("d7"), sq("d5"), Piece.from_fen("p"))
    assert double_push_en_passant_square(white) == sq("e3")
    assert double_push_en_passant_square(black) == sq("d6")
    assert double_push_en_passant_square(Move(sq("e2"), sq("e3"), Piece.from_fen("P"))) is None
    assert double_push_en_passant_square(Move(sq("a1"), sq("a3"), Piece.from_fen("R"))) is None


def test_en_passant_victim_square() -> None:
    assert en_passant_victim_square(sq("d6"), Color.WHITE) == sq("d5")
    assert en_passant_victim_square(sq("e3"), Color.BLACK) == sq("e4")


def test_en_passant_capture() -> None:
    board = Board.from_fen("8/8/8/3pP3/8/8/8/8")
    assert can_capture_en_passant(sq("e5"), sq("d6"), board)
    assert pseudo_legal_destinations(sq("e5"), board, en_passant_square=sq("d6")) == squares("e6", "d6")
    # without a target square it is just a single push
    assert pseudo_legal_destinations(sq("e5"), board) == squares("e6")


def test_en_passant_requires_adjacent_pawn() -> None:
    board = Board.from_fen("8/8/8/2p1P3/8/8/8/8")
    assert not can_capture_en_passant(sq("e5"), sq("d6"), board)

"""Unit tests for alphaknight/services/chess_service.py"""

import pytest

from alphaknight.api.models import MoveRequest
from alphaknight.chess.board import STARTING_PLACEMENT
from alphaknight.chess.engine import setup_position
from alphaknight.chess.pieces import Color as PieceColor
from alphaknight.core.config import EngineSettings
from alphaknight.core.exceptions import GameStateError, IllegalMoveReason
from alphaknight.core.shared_types import Color, Status
from alphaknight.services.chess_service import ChessService


@pytest.fixture
def service() -> ChessService:
    """Fresh session with default settings (not read from the environment)"""
    return ChessService(settings=EngineSettings())


def play(service: ChessService, *moves_uci: str) -> None:
    for uci in moves_uci:
        response = service.make_move(MoveRequest(origin=uci[:2], destination=uci[2:4]))
        assert response.accepted, response.message


# --- SERVICE - GAME STATE ----
def test_initial_game_state(service: ChessService) -> None:
    state = service.get_game_state()
    assert state.placement == STARTING_PLACEMENT
    assert state.color_to_move == Color.WHITE
    assert state.status == Status.IN_PROGRESS
    assert state.castling_rights == [
        "white_king_side",
        "white_queen_side",
        "black_king_side",
        "black_queen_side",
    ]
    assert state.en_passant_square is None
    assert state.move_history == []


def test_new_game_resets_the_session(service: ChessService) -> None:
    play(service, "e2e4")
    state = service.new_game()
    assert state.placement == STARTING_PLACEMENT
    assert state.move_history == []


def test_custom_start() -> None:
    start = setup_position("4k3/8/8/8/8/8/8/4K3", PieceColor.BLACK)
    service = ChessService(settings=EngineSettings(), start=start)
    assert service.get_game_state().color_to_move == Color.BLACK


# --- SERVICE - MAKE MOVES ----
def test_make_valid_move(service: ChessService) -> None:
    response = service.make_move(MoveRequest(origin="e2", destination="e4"))
    assert response.accepted
    assert response.reason is None
    assert response.position.color_to_move == Color.BLACK
    assert response.position.en_passant_square == "e3"
    assert response.position.move_history == ["e2e4"]


def test_make_move_with_square_indices(service: ChessService) -> None:
    response = service.make_move(MoveRequest(origin=12, destination=28))
    assert response.accepted
    assert response.position.move_history == ["e2e4"]


def test_rejected_move_keeps_the_game(service: ChessService) -> None:
    """Moving the a1 rook through its own pawn: rejected, nothing changes"""
    before = service.get_game_state()
    response = service.make_move(MoveRequest(origin="a1", destination="a8"))
    assert not response.accepted
    assert response.reason == IllegalMoveReason.BLOCKED
    assert response.message
    assert response.position == before
    assert service.get_game_state() == before


def test_wrong_turn(service: ChessService) -> None:
    response = service.make_move(MoveRequest(origin=52, destination=36))
    assert response.reason == IllegalMoveReason.WRONG_TURN


def test_out_of_bounds_square(service: ChessService) -> None:
    response = service.make_move(MoveRequest(origin=12, destination=64))
    assert response.reason == IllegalMoveReason.OUT_OF_BOUNDS


def test_checkmate(service: ChessService) -> None:
    play(service, "f2f3", "e7e5", "g2g4", "d8h4")
    state = service.get_game_state()
    assert state.status == Status.CHECKMATE
    response = service.make_move(MoveRequest(origin="a2", destination="a3"))
    assert response.reason == IllegalMoveReason.GAME_OVER


def test_promotion_choice_from_request() -> None:
    start = setup_position("7k/P7/8/8/8/8/8/K7")
    service = ChessService(settings=EngineSettings(), start=start)
    response = service.make_move(MoveRequest(origin="a7", destination="a8", promote_to="n"))
    assert response.accepted
    assert response.position.placement == "N6k/8/8/8/8/8/8/K7"


# --- SERVICE - READING THE BOARD ----
def test_legal_moves(service: ChessService) -> None:
    response = service.legal_moves()
    assert response.color == Color.WHITE
    assert len(response.legal_moves) == 20
    assert "g1f3" in response.legal_moves


def test_board_view(service: ChessService) -> None:
    view = service.board_view()
    assert len(view) == 64
    assert view[0].square == "a8"
    assert view[0].piece == "r"
    assert view[-1].square == "h1"
    assert view[-1].piece == "R"
    assert view[20].square == "e6"
    assert view[20].piece is None


def test_move_history(service: ChessService) -> None:
    play(service, "d2d4", "g8f6", "c2c4")
    assert service.move_history() == ["d2d4", "g8f6", "c2c4"]


# --- SERVICE - UNDO ----
def test_undo(service: ChessService) -> None:
    play(service, "e2e4", "e7e5")
    state = service.undo()
    assert state.move_history == ["e2e4"]
    assert state.color_to_move == Color.BLACK
    # play on from there
    play(service, "c7c5")
    assert service.move_history() == ["e2e4", "c7c5"]


def test_undo_without_moves(service: ChessService) -> None:
    with pytest.raises(GameStateError):
        service.undo()

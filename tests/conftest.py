"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable

import pytest

from alphaknight.chess.engine import new_game, propose_move
from alphaknight.chess.pieces import FEN_TO_PIECE
from alphaknight.chess.position import Position


PlayFn = Callable[..., Position]


@pytest.fixture
def starting_position() -> Position:
    return new_game()


@pytest.fixture
def play() -> PlayFn:
    """Call the inner function with a position and any number of UCI moves. Every one of them must be accepted."""

    def _play(position: Position, *moves_uci: str) -> Position:
        for uci in moves_uci:
            promotion = FEN_TO_PIECE[uci[4]] if len(uci) == 5 else None
            result = propose_move(position, uci[:2], uci[2:4], promotion=promotion)
            assert result.accepted, f"{uci} got rejected: {result.message}"
            position = result.position
        return position

    return _play

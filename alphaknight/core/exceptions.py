"""
Exceptions used across layers.

Every rejected move is an `IllegalMoveError` carrying an `IllegalMoveReason`, so callers can either catch a specific
subclass or switch on the reason. Only `InvalidPositionError` signals a programming error upstream.
"""

from enum import StrEnum


class IllegalMoveReason(StrEnum):
    OUT_OF_BOUNDS = "out of bounds"
    NULL_MOVE = "null move"
    WRONG_TURN = "wrong turn"
    EMPTY_ORIGIN = "empty origin"
    SELF_CAPTURE = "self capture"
    GEOMETRY_VIOLATION = "geometry violation"
    BLOCKED = "blocked"
    EXPOSES_KING = "exposes king"
    CASTLING_UNAVAILABLE = "castling unavailable"
    STALE_MOVE = "stale move"
    INVALID_PROMOTION = "invalid promotion"
    KING_CAPTURE = "king capture"
    GAME_OVER = "game over"


class ChessError(Exception):
    """Base class for everything the engine raises on purpose."""


class IllegalMoveError(ChessError):
    """A move got rejected. Subclasses fix the reason."""

    reason: IllegalMoveReason

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.reason.value)
        self.message = message or self.reason.value


class OutOfBoundsError(IllegalMoveError):
    reason = IllegalMoveReason.OUT_OF_BOUNDS


class NullMoveError(IllegalMoveError):
    reason = IllegalMoveReason.NULL_MOVE


class WrongTurnError(IllegalMoveError):
    reason = IllegalMoveReason.WRONG_TURN


class EmptyOriginError(IllegalMoveError):
    reason = IllegalMoveReason.EMPTY_ORIGIN


class SelfCaptureError(IllegalMoveError):
    reason = IllegalMoveReason.SELF_CAPTURE


class GeometryViolationError(IllegalMoveError):
    reason = IllegalMoveReason.GEOMETRY_VIOLATION


class BlockedError(IllegalMoveError):
    reason = IllegalMoveReason.BLOCKED


class ExposesKingError(IllegalMoveError):
    reason = IllegalMoveReason.EXPOSES_KING


class CastlingUnavailableError(IllegalMoveError):
    reason = IllegalMoveReason.CASTLING_UNAVAILABLE


class StaleMoveError(IllegalMoveError):
    """The Move was built against a different position than the one it is applied to."""

    reason = IllegalMoveReason.STALE_MOVE


class InvalidPromotionError(IllegalMoveError):
    reason = IllegalMoveReason.INVALID_PROMOTION


class KingCaptureError(IllegalMoveError):
    reason = IllegalMoveReason.KING_CAPTURE


class GameOverError(IllegalMoveError):
    reason = IllegalMoveReason.GAME_OVER


class InvalidPositionError(ChessError):
    """A Position breaks an invariant (e.g. no king for one side). Indicates a bug, never a user error."""


class InvalidRequestError(ChessError):
    """Raised by the request model validators. NOTE: not a ValueError, so pydantic lets it propagate as is."""


class GameStateError(ChessError):
    """The session cannot do what was asked in its current state."""

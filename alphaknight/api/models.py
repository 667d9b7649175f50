"""Requests and Response models"""

from typing import Any, Optional

from pydantic import BaseModel, field_validator

from alphaknight.chess.pieces import FEN_TO_PIECE, PieceType
from alphaknight.core.exceptions import IllegalMoveReason, InvalidRequestError
from alphaknight.core.shared_types import Color, Status

SquareName = str
PieceLetter = str


# --- REQUEST MODELS ---
class MoveRequest(BaseModel):
    """
    origin / destination: either a square index (0 = a1, 63 = h8) or an algebraic square name ("e2").
    NOTE: only the format is checked here. Whether the square exists on the board is for the engine to decide.
    """

    origin: int | str
    destination: int | str
    promote_to: Optional[PieceType] = None

    @field_validator(*["origin", "destination"])
    @classmethod
    def validate_square(cls, value: int | str) -> int | str:
        def _is_algebraic_notation(value: str) -> bool:
            if len(value) != 2:
                return False

            first_character = value[0]
            second_character = value[1]
            if not (first_character.isalpha() and second_character.isnumeric()):
                return False
            return True

        if isinstance(value, int):
            return value
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value.lower()

    @field_validator("promote_to", mode="before")
    @classmethod
    def parse_piece(cls, value: Any) -> Any:
        """Accept the piece name ("queen") or its letter ("q")"""
        if not isinstance(value, str):
            return value

        name = value.strip()
        if name.lower() in FEN_TO_PIECE:
            return FEN_TO_PIECE[name.lower()]
        if name.upper() in PieceType.__members__:
            return PieceType[name.upper()]
        raise InvalidRequestError(f"Cannot interpret {value!r} as a piece type.")


# --- RESPONSE MODELS ---
class SquareView(BaseModel):
    square: SquareName
    piece: Optional[PieceLetter]


class PositionResponse(BaseModel):
    placement: str
    color_to_move: Color
    status: Status
    castling_rights: list[str]
    en_passant_square: Optional[SquareName]
    move_history: list[str]


class MoveResponse(BaseModel):
    accepted: bool
    reason: Optional[IllegalMoveReason]
    message: str
    position: PositionResponse


class LegalMovesResponse(BaseModel):
    color: Color
    legal_moves: list[str]

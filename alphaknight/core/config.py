"""
Engine settings.

Defaults are fine for regular play. Can be overridden through environment variables:
* ALPHAKNIGHT_DEFAULT_PROMOTION : piece a pawn promotes to when no choice is given (name, e.g. "queen" or "knight")
* ALPHAKNIGHT_REQUIRE_PROMOTION_CHOICE : "true" --> reject promotions without an explicit choice
* ALPHAKNIGHT_LOG_LEVEL : level of the "alphaknight" loggers
"""

import logging
import os
from functools import lru_cache
from typing import Any, Mapping, Optional, Self

from pydantic import BaseModel, field_validator

from alphaknight.chess.pieces import PieceType

ENV_PREFIX = "ALPHAKNIGHT_"
PACKAGE_LOGGER = "alphaknight"
NOT_PROMOTABLE = (PieceType.EMPTY, PieceType.PAWN, PieceType.KING)


class EngineSettings(BaseModel):
    default_promotion: PieceType = PieceType.QUEEN
    require_promotion_choice: bool = False
    log_level: str = "WARNING"

    @field_validator("default_promotion", mode="before")
    @classmethod
    def parse_piece_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            name = value.strip().upper()
            if name not in PieceType.__members__:
                raise ValueError(f"Unknown piece type: {value!r}")
            return PieceType[name]
        return value

    @field_validator("default_promotion")
    @classmethod
    def validate_promotion(cls, value: PieceType) -> PieceType:
        if value in NOT_PROMOTABLE:
            raise ValueError(f"A pawn cannot promote to {value.name.lower()}")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        """Only the variables that are set override the defaults"""
        environ = os.environ if environ is None else environ
        overrides: dict[str, Any] = {}
        for name in cls.model_fields:
            env_name = f"{ENV_PREFIX}{name.upper()}"
            if env_name in environ:
                overrides[name] = environ[env_name]
        return cls(**overrides)


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    return EngineSettings.from_env()


def configure_logging(settings: Optional[EngineSettings] = None) -> None:
    """Set the level of every logger in the package. Handlers are left to the application."""
    settings = settings or get_settings()
    logging.getLogger(PACKAGE_LOGGER).setLevel(settings.log_level)

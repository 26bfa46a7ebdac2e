"""
Boundary layer data model(s).

These objects are what leaves the engine for storage: plain strings, booleans and lists, validated by pydantic.
Hence, both the domain layer (higher) and the db layer (lower) use the model(s) defined here to send/receive data
(Decouples the data model specific to the DB layer from the domain objects)
"""

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from src.core.exceptions import InvalidFENError, NotationError
from src.core.shared_types import Status

SQUARE_NAME = re.compile(r"^[a-h][1-8]$")
PIECE_KINDS = frozenset({"pawn", "knight", "bishop", "rook", "queen", "king"})
COLOR_NAMES = frozenset({"white", "black"})
CASTLING_KEYS = frozenset({"K", "Q", "k", "q"})


def _check_square_name(value: str) -> str:
    if not SQUARE_NAME.match(value):
        raise NotationError(f"Cannot interpret {value!r} as a valid square name.")
    return value


def _check_color_name(value: str) -> str:
    if value not in COLOR_NAMES:
        raise ValueError(f"Unknown color {value!r}. Pick one of {sorted(COLOR_NAMES)}")
    return value


class PieceRecord(BaseModel):
    kind: str
    color: str

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, value: str) -> str:
        if value not in PIECE_KINDS:
            raise ValueError(
                f"Unknown piece {value!r}. Pick one of {sorted(PIECE_KINDS)}"
            )
        return value

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: str) -> str:
        return _check_color_name(value)


class BoardRecord(BaseModel):
    """Every field of a Board: the pieces keyed by square name, castling rights keyed by FEN letter, en passant square."""

    pieces: dict[str, PieceRecord]
    castling_rights: dict[str, bool]
    en_passant: Optional[str] = None

    @field_validator("pieces")
    @classmethod
    def validate_squares(cls, value: dict[str, PieceRecord]) -> dict[str, PieceRecord]:
        for square_name in value:
            _check_square_name(square_name)
        return value

    @field_validator("castling_rights")
    @classmethod
    def validate_castling_rights(cls, value: dict[str, bool]) -> dict[str, bool]:
        if set(value) != CASTLING_KEYS:
            raise ValueError(
                f"Castling rights need exactly the keys {sorted(CASTLING_KEYS)}, got {sorted(value)}"
            )
        return value

    @field_validator("en_passant")
    @classmethod
    def validate_en_passant(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _check_square_name(value)


class GameModel(BaseModel):
    """Transport-safe representation of a chess game used between the Game and the DB layer."""

    current_fen: str
    starting_fen: str
    moves: list[str] = Field(default_factory=list)
    status: Status = Status.IN_PROGRESS
    winner: Optional[str] = None

    @field_validator("current_fen", "starting_fen")
    @classmethod
    def validate_fen(cls, value: str) -> str:
        parts = value.strip().split(" ")
        if len(parts) != 6:
            raise InvalidFENError("FEN string must contain 6 space-separated parts.")
        return value

    @field_validator("winner")
    @classmethod
    def validate_winner(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _check_color_name(value)

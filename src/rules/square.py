"""
A single cell of the board: either empty, or holding exactly one piece.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.rules.pieces import Color, Piece


@dataclass(frozen=True)
class Square:
    piece: Optional[Piece] = None

    @classmethod
    def occupied_by(cls, piece: Piece) -> Square:
        return cls(piece)

    @property
    def is_empty(self) -> bool:
        return self.piece is None

    @property
    def is_occupied(self) -> bool:
        return self.piece is not None

    def holds(self, color: Color) -> bool:
        """Occupied by a piece of the given color"""
        return self.piece is not None and self.piece.color is color


EMPTY_SQUARE = Square()

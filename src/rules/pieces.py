"""Defines the colors and types of chess pieces"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.core.exceptions import NotationError


class Color(Enum):
    WHITE = "white"
    BLACK = "black"

    def __invert__(self) -> Color:
        """~Color.WHITE is Color.BLACK and vice versa"""
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    def __lt__(self, other: object) -> bool:
        # Arbitrary but fixed order (White first), only needed to sort stored values.
        if not isinstance(other, Color):
            return NotImplemented
        return self is Color.WHITE and other is Color.BLACK

    def __str__(self) -> str:
        return self.value.capitalize()

    @property
    def forward(self) -> int:
        """White moves UP the board, Black moves DOWN"""
        return 1 if self is Color.WHITE else -1

    @property
    def back_rank(self) -> int:
        return 0 if self is Color.WHITE else 7

    @property
    def pawn_rank(self) -> int:
        """The rank the pawns start on (and can push by two squares from)"""
        return self.back_rank + self.forward

    @property
    def promotion_rank(self) -> int:
        return (~self).back_rank


WHITE = Color.WHITE
BLACK = Color.BLACK


class PieceType(Enum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"

    @classmethod
    def from_name(cls, name: str) -> PieceType:
        """Accepts the full name ('queen') or the FEN letter ('q'), in any case."""
        name = name.strip().lower()
        if name in FEN_TO_PIECE:
            return FEN_TO_PIECE[name]
        try:
            return cls(name)
        except ValueError:
            raise NotationError(f"Unknown piece name: {name!r}") from None


FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}


PIECE_POINTS: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
}

# Pieces that move along a line until blocked
SLIDING_PIECES = frozenset({PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN})

# What a pawn reaching the far rank may turn into. Order is the order in which promotions get enumerated.
PROMOTION_OPTIONS: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


@dataclass(frozen=True)
class Piece:
    kind: PieceType
    color: Color

    @classmethod
    def from_fen(cls, character: str) -> Piece:
        # lower case: Black pieces, upper case: White pieces
        if character.lower() not in FEN_TO_PIECE:
            raise NotationError(f"Unknown FEN piece character: {character!r}")
        color = Color.WHITE if character.isupper() else Color.BLACK
        return cls(FEN_TO_PIECE[character.lower()], color)

    def to_fen(self) -> str:
        letter = PIECE_TO_FEN[self.kind]
        return letter.upper() if self.color is Color.WHITE else letter

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def value(self) -> int:
        # NOTE: The King's worth is undefined (does not count towards total points)
        return PIECE_POINTS.get(self.kind, 0)

    def is_king(self) -> bool:
        return self.kind is PieceType.KING

    def is_pawn(self) -> bool:
        return self.kind is PieceType.PAWN

    def is_sliding(self) -> bool:
        return self.kind in SLIDING_PIECES

    def promoted_to(self, kind: PieceType) -> Piece:
        return Piece(kind, self.color)

    def __str__(self) -> str:
        return f"{self.color} {self.name}"

"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.rules.pieces import Color
from src.rules.position import Position


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"

    @classmethod
    def for_color(cls, color: Color, king_side: bool) -> CastlingDirection:
        if color is Color.WHITE:
            return cls.WHITE_KING_SIDE if king_side else cls.WHITE_QUEEN_SIDE
        return cls.BLACK_KING_SIDE if king_side else cls.BLACK_QUEEN_SIDE

    @property
    def color(self) -> Color:
        return Color.WHITE if self.value.isupper() else Color.BLACK

    @property
    def is_king_side(self) -> bool:
        return self.value.lower() == "k"


# Order in which rights are written in a FEN string
CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, the king / rook should still be at their starting squares.
    """

    king_from: Position
    king_to: Position
    rook_from: Position
    rook_to: Position

    @classmethod
    def from_notation(
        cls, k_from: str, k_to: str, r_from: str, r_to: str
    ) -> CastlingSquares:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        return cls(
            Position.from_notation(k_from),
            Position.from_notation(k_to),
            Position.from_notation(r_from),
            Position.from_notation(r_to),
        )

    def between(self) -> list[Position]:
        """Squares strictly between king and rook. All of these must be empty to castle."""
        return squares_between_on_rank(self.king_from, self.rook_from)

    def king_path(self) -> list[Position]:
        """Where the king starts, every square it crosses, and where it lands. None of these may be attacked."""
        crossed = squares_between_on_rank(self.king_from, self.king_to)
        return [self.king_from, *crossed, self.king_to]


def squares_between_on_rank(
    from_position: Position, to_position: Position
) -> list[Position]:
    """Find the squares in between the two positions specified that are on the same rank"""
    if from_position.rank != to_position.rank:
        raise ValueError(
            "squares_between_on_rank requires both squares to lie on the same rank. "
            f"from: {from_position}, to: {to_position}"
        )

    step = 1 if to_position.file > from_position.file else -1
    return [
        Position(file, from_position.rank)
        for file in range(from_position.file + step, to_position.file, step)
    ]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_notation(
        "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_notation(
        "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_notation(
        "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_notation(
        "e8", "c8", "a8", "d8"
    ),
}

# A right is lost for good once anything leaves or lands on the rook's home square
ROOK_HOMES: dict[Position, CastlingDirection] = {
    rule.rook_from: direction for direction, rule in CASTLING_RULES.items()
}


def directions_of(color: Color) -> list[CastlingDirection]:
    return [direction for direction in CASTLING_ORDER if direction.color is color]

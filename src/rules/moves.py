"""
The moves a player can ask the Game to make, and the free-form text grammar that produces them.

Legality is checked later by the Board. A Move only says what the player intends to do.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from src.core.exceptions import MoveParseError, NotationError
from src.rules.pieces import PROMOTION_OPTIONS, PieceType
from src.rules.position import Position


@dataclass(frozen=True)
class QueenSideCastle:
    """King to the c-file, queen side rook to the d-file (of the mover's back rank)"""

    def __str__(self) -> str:
        return "O-O-O"


@dataclass(frozen=True)
class KingSideCastle:
    """King to the g-file, king side rook to the f-file (of the mover's back rank)"""

    def __str__(self) -> str:
        return "O-O"


@dataclass(frozen=True)
class PieceMove:
    """
    Move whatever stands on `from_position` to `to_position`.
    Covers captures and en passant. A pawn that reaches the far rank this way becomes a queen.
    """

    from_position: Position
    to_position: Position

    def __str__(self) -> str:
        return f"{self.from_position} to {self.to_position}"


@dataclass(frozen=True)
class Promotion:
    """Pawn move to the far rank, choosing the piece it turns into"""

    from_position: Position
    to_position: Position
    kind: PieceType

    def __post_init__(self) -> None:
        if self.kind not in PROMOTION_OPTIONS:
            raise MoveParseError(f"A pawn cannot promote to a {self.kind.value}.")

    def __str__(self) -> str:
        return f"{self.from_position} to {self.to_position} {self.kind.value}"


@dataclass(frozen=True)
class Resign:
    """Give up. The opponent wins."""

    def __str__(self) -> str:
        return "Resign"


Move = Union[QueenSideCastle, KingSideCastle, PieceMove, Promotion, Resign]
CastlingMove = Union[QueenSideCastle, KingSideCastle]


# --- TEXT GRAMMAR ---
RESIGN_TOKENS = frozenset({"resign", "resigns"})
QUEEN_SIDE_TOKENS = frozenset(
    {"queenside castle", "castle queenside", "O-O-O", "0-0-0", "o-o-o"}
)
KING_SIDE_TOKENS = frozenset(
    {"kingside castle", "castle kingside", "O-O", "0-0", "o-o"}
)


def parse_move(text: str) -> Move:
    """
    Interpret free-form text as a move attempt.
    ----

    Accepted shapes:
    * "resign", "resigns"
    * "O-O-O", "0-0-0", "o-o-o", "castle queenside", "queenside castle"
    * "O-O", "0-0", "o-o", "castle kingside", "kingside castle"
    * "e2e4", "e2 e4", "e2 to e4"
    * "e7 to e8 queen" (promotion, piece by name or FEN letter)

    Text like "knight to e4" or "Qxe4" is rejected with a MoveParseError.
    """
    text = text.strip()

    if text.lower() in RESIGN_TOKENS:
        return Resign()
    if text in QUEEN_SIDE_TOKENS:
        return QueenSideCastle()
    if text in KING_SIDE_TOKENS:
        return KingSideCastle()

    words = text.split()
    try:
        if len(words) == 1 and len(words[0]) == 4:
            return PieceMove(
                Position.from_notation(words[0][:2]),
                Position.from_notation(words[0][2:]),
            )
        if len(words) == 2:
            return PieceMove(
                Position.from_notation(words[0]), Position.from_notation(words[1])
            )
        if len(words) == 3 and words[1] == "to":
            return PieceMove(
                Position.from_notation(words[0]), Position.from_notation(words[2])
            )
        if len(words) == 4 and words[1] == "to":
            kind = PieceType.from_name(words[3])
            if kind not in PROMOTION_OPTIONS:
                raise MoveParseError(f"Invalid promotion to {kind.value!r}: {text!r}")
            return Promotion(
                Position.from_notation(words[0]),
                Position.from_notation(words[2]),
                kind,
            )
    except NotationError as exc:
        raise MoveParseError(f"Cannot interpret {text!r} as a move: {exc}") from exc

    raise MoveParseError(f"Invalid move format: {text!r}")

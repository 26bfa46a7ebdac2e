"""What a move attempt returns to the caller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from src.rules.board import Board
from src.rules.moves import Move
from src.rules.pieces import Color


@dataclass(frozen=True)
class Continuing:
    """Move accepted, the game goes on. Holds a snapshot of the board after the move."""

    board: Board


@dataclass(frozen=True)
class Victory:
    """Checkmate or resignation"""

    winner: Color

    def __str__(self) -> str:
        return f"{self.winner} wins"


@dataclass(frozen=True)
class Stalemate:
    """
    Drawn game: the player to move has no legal move but is not in check,
    or neither side has enough material left to checkmate.
    """

    def __str__(self) -> str:
        return "Stalemate"


@dataclass(frozen=True)
class IllegalMove:
    """
    The move breaks the rules (moving through pieces, capturing your own piece,
    leaving your king in check, ...). Nothing changed, the same player may try again.
    """

    move: Move

    def __str__(self) -> str:
        return f"Illegal move: {self.move}"


GameResult = Union[Continuing, Victory, Stalemate, IllegalMove]

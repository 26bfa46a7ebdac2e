"""
A coordinate on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.core.exceptions import NotationError

# Chess board is always 8x8. Files and ranks are counted from zero: a1 is (0, 0), h8 is (7, 7)
BOARD_DIMENSIONS = (8, 8)
FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"


@dataclass(frozen=True, order=True)
class Position:
    file: int
    rank: int

    def __post_init__(self) -> None:
        # never clamp: a coordinate off the board is a bug in the caller
        if not Position.is_on_board(self.file, self.rank):
            raise NotationError(
                f"Position out of bounds: file={self.file}, rank={self.rank}"
            )

    @staticmethod
    def is_on_board(file: int, rank: int) -> bool:
        return (0 <= file < BOARD_DIMENSIONS[0]) and (0 <= rank < BOARD_DIMENSIONS[1])

    @classmethod
    def from_notation(cls, notation: str) -> Position:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        if len(notation) != 2:
            raise NotationError(f"Cannot interpret {notation!r} as a square name.")

        file_char, rank_char = notation[0].lower(), notation[1]
        if file_char not in FILE_NAMES or rank_char not in RANK_NAMES:
            raise NotationError(f"Cannot interpret {notation!r} as a square name.")

        return cls(FILE_NAMES.index(file_char), RANK_NAMES.index(rank_char))

    def to_notation(self) -> str:
        return f"{FILE_NAMES[self.file]}{self.rank + 1}"

    def offset(self, delta_file: int, delta_rank: int) -> Optional[Position]:
        """The position reached by stepping (delta_file, delta_rank). None when that leaves the board."""
        file = self.file + delta_file
        rank = self.rank + delta_rank
        if not Position.is_on_board(file, rank):
            return None
        return Position(file, rank)

    def __str__(self) -> str:
        return self.to_notation()


# a1, b1, ..., h1, a2, ..., h8
ALL_POSITIONS: tuple[Position, ...] = tuple(
    Position(file, rank)
    for rank in range(BOARD_DIMENSIONS[1])
    for file in range(BOARD_DIMENSIONS[0])
)

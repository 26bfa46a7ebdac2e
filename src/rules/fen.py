"""
Reading and writing complete FEN records: the board plus whose turn it is and the move counters.
"""

from dataclasses import dataclass
from itertools import combinations
from typing import Optional, Self

from src.core.exceptions import InvalidFENError
from src.core.models import SQUARE_NAME
from src.rules.board import STARTING_PLACEMENT, Board
from src.rules.castling import CASTLING_ORDER, CastlingDirection
from src.rules.pieces import FEN_TO_PIECE, Color
from src.rules.position import BOARD_DIMENSIONS, Position

STARTING_FEN = f"{STARTING_PLACEMENT} w KQkq - 0 1"
NUM_FEN_FIELDS = 6
COLOR_CODES: dict[str, Color] = {"w": Color.WHITE, "b": Color.BLACK}

# the en passant square is always the one a pawn skipped: 3rd rank (white pushed) or 6th rank (black pushed)
EN_PASSANT_RANKS = frozenset({"3", "6"})

# every subset of KQkq, always written in that order ("-" when nothing is left)
VALID_CASTLING_ENCODINGS: list[str] = ["-"] + [
    "".join(direction.value for direction in subset)
    for size in range(1, len(CASTLING_ORDER) + 1)
    for subset in combinations(CASTLING_ORDER, size)
]


def castling_from_fen(castle_fen: str) -> dict[CastlingDirection, bool]:
    """'KQk' -> white may castle both ways, black only on the king side"""
    return {
        direction: (direction.value in castle_fen) for direction in CastlingDirection
    }


def castling_to_fen(castling_rights: dict[CastlingDirection, bool]) -> str:
    letters = [
        direction.value for direction in CASTLING_ORDER if castling_rights[direction]
    ]
    return "".join(letters) or "-"


# --- VALIDATION ---
def is_valid_fen(fen: str) -> bool:
    """All six space separated fields are present and each one is well-formed."""
    fields = fen.split(" ")
    if len(fields) != NUM_FEN_FIELDS:
        return False

    placement, color, castling, en_passant, half_moves, num_turns = fields
    return all(
        [
            is_valid_placement(placement),
            is_valid_color_code(color),
            is_valid_castling_rights(castling),
            is_valid_en_passant(en_passant),
            is_valid_move_counter(half_moves),
            is_valid_move_counter(num_turns),
        ]
    )


def is_valid_placement(placement: str) -> bool:
    """Eight ranks, each describing exactly eight files with piece letters and digits."""
    num_files, num_ranks = BOARD_DIMENSIONS
    ranks = placement.split("/")
    return len(ranks) == num_ranks and all(
        _count_files(rank) == num_files for rank in ranks
    )


def _count_files(rank_fen: str) -> Optional[int]:
    """Number of files a single rank covers. None as soon as an unknown character shows up."""
    count = 0
    for character in rank_fen:
        if _is_ascii_digit(character):
            count += int(character)
        elif character.lower() in FEN_TO_PIECE:
            count += 1
        else:
            return None
    return count


def is_valid_color_code(color: str) -> bool:
    return color in COLOR_CODES


def is_valid_castling_rights(castling: str) -> bool:
    return castling in VALID_CASTLING_ENCODINGS


def is_valid_en_passant(en_passant: str) -> bool:
    """'-', or a square on the 3rd or 6th rank"""
    if en_passant == "-":
        return True
    return is_valid_square(en_passant) and en_passant[1] in EN_PASSANT_RANKS


def is_valid_square(square: str) -> bool:
    return SQUARE_NAME.fullmatch(square) is not None


def is_valid_move_counter(counter: str) -> bool:
    return _is_ascii_digit(counter)


def _is_ascii_digit(text: str) -> bool:
    """isdigit() on its own also accepts characters like '²', which int() rejects"""
    return text.isascii() and text.isdigit()


@dataclass
class FENState:
    """
    Everything a FEN record holds
    ----

    FEN (Forsyth-Edwards Notation) describes a position completely enough to resume a game from it:

    <placement> <active color> <castling rights> <en passant square> <half move clock> <turn number>

    * placement: see Board.from_fen()
    * active color: "w" or "b"
    * castling rights: any subset of KQkq (upper case White, lower case Black), "-" if none remain
    * en passant square: the square a pawn skipped with its double step on the previous move, "-" otherwise
    * half move clock: moves since the last pawn move or capture
    * turn number: starts at 1, goes up after every move of Black

    The standard starting position reads
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
    """

    placement: str
    color_to_move: Color
    castling_rights: dict[CastlingDirection, bool]
    en_passant_square: Optional[Position]
    half_move_clock: int
    num_turns: int

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        if not is_valid_fen(fen):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}")

        placement, color, castling, en_passant, half_moves, num_turns = fen.split(" ")
        return cls(
            placement=placement,
            color_to_move=COLOR_CODES[color],
            castling_rights=castling_from_fen(castling),
            en_passant_square=(
                None if en_passant == "-" else Position.from_notation(en_passant)
            ),
            half_move_clock=int(half_moves),
            num_turns=int(num_turns),
        )

    def to_fen(self) -> str:
        color = "w" if self.color_to_move is Color.WHITE else "b"
        en_passant = (
            self.en_passant_square.to_notation() if self.en_passant_square else "-"
        )
        fields = [
            self.placement,
            color,
            castling_to_fen(self.castling_rights),
            en_passant,
            str(self.half_move_clock),
            str(self.num_turns),
        ]
        return " ".join(fields)

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)

    @classmethod
    def from_board(
        cls, board: Board, color_to_move: Color, half_move_clock: int, num_turns: int
    ) -> Self:
        return cls(
            board.to_fen(),
            color_to_move,
            dict(board.castling_rights),
            board.en_passant,
            half_move_clock,
            num_turns,
        )

    def to_board(self) -> Board:
        return Board.from_fen(
            self.placement,
            castling_rights=self.castling_rights,
            en_passant=self.en_passant_square,
        )

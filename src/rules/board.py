"""The Game board implements all rules that effect the `position` (in chess: the configuration of pieces on the board)"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterator, Optional

from src.core.models import BoardRecord, PieceRecord
from src.rules.castling import (
    CASTLING_RULES,
    ROOK_HOMES,
    CastlingDirection,
    directions_of,
)
from src.rules.movement import ATTACK_RULES, MOVEMENT_RULES
from src.rules.moves import (
    KingSideCastle,
    Move,
    PieceMove,
    Promotion,
    QueenSideCastle,
    Resign,
)
from src.rules.pieces import (
    PROMOTION_OPTIONS,
    Color,
    Piece,
    PieceType,
)
from src.rules.position import ALL_POSITIONS, BOARD_DIMENSIONS, RANK_NAMES, Position
from src.rules.square import EMPTY_SQUARE, Square

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_PLACEMENT = "/".join(["8"] * BOARD_DIMENSIONS[1])

# Non-king material with which a side can never force checkmate on its own
INSUFFICIENT_MATERIAL: list[Counter[PieceType]] = [
    Counter(),
    Counter({PieceType.KNIGHT: 1}),
    Counter({PieceType.KNIGHT: 2}),
    Counter({PieceType.BISHOP: 1}),
    Counter({PieceType.BISHOP: 2}),
]


def no_castling_rights() -> dict[CastlingDirection, bool]:
    return {direction: False for direction in CastlingDirection}


def all_castling_rights() -> dict[CastlingDirection, bool]:
    return {direction: True for direction in CastlingDirection}


@dataclass
class Board:
    squares: dict[Position, Square]
    castling_rights: dict[CastlingDirection, bool] = field(
        default_factory=no_castling_rights
    )
    en_passant: Optional[Position] = None

    # --- CREATION ---
    @classmethod
    def empty(cls) -> Board:
        return cls({position: EMPTY_SQUARE for position in ALL_POSITIONS})

    @classmethod
    def starting_position(cls) -> Board:
        return cls.from_fen(STARTING_PLACEMENT, castling_rights=all_castling_rights())

    @classmethod
    def from_fen(
        cls,
        placement: str,
        castling_rights: Optional[dict[CastlingDirection, bool]] = None,
        en_passant: Optional[Position] = None,
    ) -> Board:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.

        Castling rights and the en passant square are separate FEN fields, hence passed in separately (see fen.py).
        """
        board = cls.empty()
        for rank_idx, fen_one_rank in enumerate(placement.split("/")):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = BOARD_DIMENSIONS[1] - 1 - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 0
            for character in fen_one_rank:
                if character in RANK_NAMES:
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
                else:
                    board.place_piece(Piece.from_fen(character), Position(file, rank))
                    file += 1

        if castling_rights is not None:
            board.castling_rights = {**no_castling_rights(), **castling_rights}
        board.en_passant = en_passant
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in reversed(range(BOARD_DIMENSIONS[1]))
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(BOARD_DIMENSIONS[0]):
            piece = self.piece_at(Position(file, rank))
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def to_record(self) -> BoardRecord:
        """Structured encoding for storage. Round trips every field, incl. castling rights and en passant square."""
        return BoardRecord(
            pieces={
                position.to_notation(): PieceRecord(
                    kind=piece.kind.value, color=piece.color.value
                )
                for position, piece in self.occupied()
            },
            castling_rights={
                direction.value: allowed
                for direction, allowed in self.castling_rights.items()
            },
            en_passant=self.en_passant.to_notation() if self.en_passant else None,
        )

    @classmethod
    def from_record(cls, record: BoardRecord) -> Board:
        board = cls.empty()
        for notation, piece_record in record.pieces.items():
            piece = Piece(PieceType(piece_record.kind), Color(piece_record.color))
            board.place_piece(piece, Position.from_notation(notation))
        board.castling_rights = {
            CastlingDirection(key): allowed
            for key, allowed in record.castling_rights.items()
        }
        board.en_passant = (
            Position.from_notation(record.en_passant) if record.en_passant else None
        )
        return board

    def copy(self) -> Board:
        """Squares and positions are immutable values, so copying the containers is enough"""
        return Board(dict(self.squares), dict(self.castling_rights), self.en_passant)

    # --- LOOKUPS ---
    def square_at(self, position: Position) -> Square:
        return self.squares[position]

    def piece_at(self, position: Position) -> Optional[Piece]:
        return self.squares[position].piece

    def place_piece(self, piece: Piece, position: Position) -> None:
        self.squares[position] = Square.occupied_by(piece)

    def remove_piece(self, position: Position) -> None:
        self.squares[position] = EMPTY_SQUARE

    def occupied(self) -> list[tuple[Position, Piece]]:
        return [
            (position, square.piece)
            for position, square in self.squares.items()
            if square.piece is not None
        ]

    def pieces(self, color: Color) -> list[tuple[Position, Piece]]:
        """All pieces of one color (and where they stand)"""
        return [
            (position, piece)
            for position, piece in self.occupied()
            if piece.color is color
        ]

    def king_position(self, color: Color) -> Optional[Position]:
        king = Piece(PieceType.KING, color)
        return next(
            (position for position, piece in self.occupied() if piece == king), None
        )

    def material(self, color: Color) -> int:
        """Tally the points of material a player has on the board"""
        return sum(piece.value for _, piece in self.pieces(color))

    # --- ATTACKS / CHECK ---
    def is_reachable(self, origin: Position, target: Position) -> bool:
        """Can the piece on `origin` get to `target`, ignoring the safety of its own king?"""
        piece = self.piece_at(origin)
        if piece is None:
            return False
        return target in MOVEMENT_RULES[piece.kind](origin, self)

    def is_attacked(self, position: Position, by_color: Color) -> bool:
        return any(rule(position, by_color, self) for rule in ATTACK_RULES)

    def king_in_check(self, color: Color) -> bool:
        king = self.king_position(color)
        if king is None:
            return False
        return self.is_attacked(king, ~color)

    def can_castle(self, color: Color, direction: CastlingDirection) -> bool:
        """
        **you are allowed to castle if**

        * Castling rights in this direction are not yet revoked (king and rook never moved, rook never captured).
        * King and rook actually stand on their starting squares.
        * Every square in between king and rook is empty.
        * The king is not in check, and does not pass through or land on an attacked square.
        """
        if direction.color is not color or not self.castling_rights[direction]:
            return False

        rule = CASTLING_RULES[direction]
        if self.piece_at(rule.king_from) != Piece(PieceType.KING, color):
            return False
        if self.piece_at(rule.rook_from) != Piece(PieceType.ROOK, color):
            return False

        if any(self.square_at(position).is_occupied for position in rule.between()):
            return False

        return not any(
            self.is_attacked(position, ~color) for position in rule.king_path()
        )

    # --- LEGALITY ---
    def is_legal(self, move: Move, color: Color) -> bool:
        """
        Pseudo-legal for `color`, and the king of `color` is not in check afterwards.

        The move is tried out on a copy. This board never changes.
        """
        if isinstance(move, Resign):
            return False

        if isinstance(move, (KingSideCastle, QueenSideCastle)):
            if not self.can_castle(color, _castling_direction(move, color)):
                return False
        elif not self._is_pseudo_legal_piece_move(move, color):
            return False

        scratch = self.copy()
        scratch.apply_raw(move, color)
        return not scratch.king_in_check(color)

    def _is_pseudo_legal_piece_move(
        self, move: PieceMove | Promotion, color: Color
    ) -> bool:
        piece = self.piece_at(move.from_position)
        if piece is None or piece.color is not color:
            return False

        # kings are never captured
        captured = self.piece_at(move.to_position)
        if captured is not None and captured.is_king():
            return False

        if not self.is_reachable(move.from_position, move.to_position):
            return False

        if isinstance(move, Promotion):
            return (
                piece.is_pawn()
                and move.to_position.rank == color.promotion_rank
                and move.kind in PROMOTION_OPTIONS
            )
        return True

    def legal_moves(self, color: Color) -> Iterator[Move]:
        """
        Every legal move of `color`, one at a time.
        ----

        Generated lazily, so asking "is there any legal move?" stops at the first one found.

        1. every piece's reachable squares (pawns reaching the far rank: one move per promotion option)
        2. castling in both directions
        3. each candidate is filtered by `is_legal()`
        """
        for origin, piece in self.pieces(color):
            for target in MOVEMENT_RULES[piece.kind](origin, self):
                if piece.is_pawn() and target.rank == color.promotion_rank:
                    candidates: list[Move] = [
                        Promotion(origin, target, kind) for kind in PROMOTION_OPTIONS
                    ]
                else:
                    candidates = [PieceMove(origin, target)]

                for move in candidates:
                    if self.is_legal(move, color):
                        yield move

        for castle in (KingSideCastle(), QueenSideCastle()):
            if self.is_legal(castle, color):
                yield castle

    def has_legal_move(self, color: Color) -> bool:
        return next(self.legal_moves(color), None) is not None

    # --- APPLYING MOVES ---
    def apply_raw(self, move: Move, color: Color) -> None:
        """
        Update the position on the board, for a move already known to be (pseudo-)legal.
        ----

        1. the en passant square of the previous move expires (whether it was used or not)
        2. move the piece(s): castling also moves the rook, en passant removes the pawn that was passed.
        3. revoke castling rights if king or rook moved, or a rook got captured.
        4. a pawn pushed by two squares leaves an en passant square behind.
        """
        previous_en_passant = self.en_passant
        self.en_passant = None

        if isinstance(move, (KingSideCastle, QueenSideCastle)):
            rule = CASTLING_RULES[_castling_direction(move, color)]
            self._relocate(rule.king_from, rule.king_to)
            self._relocate(rule.rook_from, rule.rook_to)
            self._revoke_castling_rights(color)
            return

        if isinstance(move, Resign):
            raise ValueError("Resigning does not change the board.")

        origin, target = move.from_position, move.to_position
        piece = self.piece_at(origin)
        if piece is None:
            raise ValueError(f"No piece on {origin} to move.")

        if piece.is_pawn() and target == previous_en_passant:
            # The pawn taken stood next to the moving pawn, not on the target square
            self.remove_piece(Position(target.file, origin.rank))

        if piece.is_king():
            self._revoke_castling_rights(piece.color)
        for position in (origin, target):
            if position in ROOK_HOMES:
                self.castling_rights[ROOK_HOMES[position]] = False

        if isinstance(move, Promotion):
            piece = piece.promoted_to(move.kind)
        elif piece.is_pawn() and target.rank == piece.color.promotion_rank:
            piece = piece.promoted_to(PieceType.QUEEN)

        self.remove_piece(origin)
        self.place_piece(piece, target)

        if piece.is_pawn() and abs(target.rank - origin.rank) == 2:
            self.en_passant = Position(origin.file, (origin.rank + target.rank) // 2)

    def _relocate(self, origin: Position, target: Position) -> None:
        piece = self.piece_at(origin)
        if piece is None:
            raise ValueError(f"No piece on {origin} to move.")
        self.remove_piece(origin)
        self.place_piece(piece, target)

    def _revoke_castling_rights(self, color: Color) -> None:
        for direction in directions_of(color):
            self.castling_rights[direction] = False

    # --- DRAWS ---
    def insufficient_material(self) -> bool:
        """
        Neither side can force checkmate.
        ----

        Each side is judged on its own material. Besides the king, a side may only have:
        * nothing
        * one or two knights
        * one or two bishops

        Both sides have to fall into one of these patterns.
        """
        return all(self._has_insufficient_material(color) for color in Color)

    def _has_insufficient_material(self, color: Color) -> bool:
        material = Counter(
            piece.kind for _, piece in self.pieces(color) if not piece.is_king()
        )
        return material in INSUFFICIENT_MATERIAL

    def __str__(self) -> str:
        """Text diagram, 8th rank at the top. Empty squares are dots."""
        rows = []
        for rank in reversed(range(BOARD_DIMENSIONS[1])):
            row = []
            for file in range(BOARD_DIMENSIONS[0]):
                piece = self.piece_at(Position(file, rank))
                row.append(piece.to_fen() if piece else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)


def _castling_direction(
    move: KingSideCastle | QueenSideCastle, color: Color
) -> CastlingDirection:
    king_side = isinstance(move, KingSideCastle)
    return CastlingDirection.for_color(color, king_side=king_side)

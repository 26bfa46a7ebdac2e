"""Unit tests for /src/rules/pieces.py"""

import pytest

from src.core.exceptions import NotationError
from src.rules.pieces import (
    BLACK,
    FEN_TO_PIECE,
    PIECE_TO_FEN,
    WHITE,
    Color,
    Piece,
    PieceType,
)


@pytest.mark.parametrize("char", [char.upper() for char in FEN_TO_PIECE.keys()])
def test_creating_white_piece_from_fen(char: str) -> None:
    """Capital letters are used for white pieces"""
    piece = Piece.from_fen(char)
    assert piece.kind == FEN_TO_PIECE[char.lower()]
    assert piece.color == Color.WHITE


@pytest.mark.parametrize("char", [char.lower() for char in FEN_TO_PIECE.keys()])
def test_creating_black_piece_from_fen(char: str) -> None:
    """Lower case letters are used for black pieces"""
    piece = Piece.from_fen(char)
    assert piece.kind == FEN_TO_PIECE[char.lower()]
    assert piece.color == Color.BLACK


@pytest.mark.parametrize("piece_type", list(PieceType))
def test_pieces_to_fen(piece_type: PieceType) -> None:
    assert Piece(piece_type, Color.WHITE).to_fen() == PIECE_TO_FEN[piece_type].upper()
    assert Piece(piece_type, Color.BLACK).to_fen() == PIECE_TO_FEN[piece_type]


def test_unknown_fen_character() -> None:
    with pytest.raises(NotationError):
        Piece.from_fen("x")


def test_color_negation() -> None:
    assert ~Color.WHITE is Color.BLACK
    assert ~Color.BLACK is Color.WHITE
    assert ~~Color.WHITE is Color.WHITE


def test_color_aliases_and_display() -> None:
    assert WHITE is Color.WHITE
    assert BLACK is Color.BLACK
    assert str(WHITE) == "White"
    assert str(BLACK) == "Black"


def test_color_order() -> None:
    """Arbitrary, but fixed: White sorts first"""
    assert Color.WHITE < Color.BLACK
    assert not Color.BLACK < Color.WHITE
    assert sorted([Color.BLACK, Color.WHITE]) == [Color.WHITE, Color.BLACK]


@pytest.mark.parametrize(
    "color, forward, pawn_rank, promotion_rank",
    [(Color.WHITE, 1, 1, 7), (Color.BLACK, -1, 6, 0)],
)
def test_pawn_direction(
    color: Color, forward: int, pawn_rank: int, promotion_rank: int
) -> None:
    """Pawns move toward the opponent's side"""
    assert color.forward == forward
    assert color.pawn_rank == pawn_rank
    assert color.promotion_rank == promotion_rank


@pytest.mark.parametrize(
    "name, expected",
    [
        ("queen", PieceType.QUEEN),
        ("Knight", PieceType.KNIGHT),
        ("ROOK", PieceType.ROOK),
        ("b", PieceType.BISHOP),
        ("N", PieceType.KNIGHT),
    ],
)
def test_piece_type_from_name(name: str, expected: PieceType) -> None:
    assert PieceType.from_name(name) == expected


def test_unknown_piece_name() -> None:
    with pytest.raises(NotationError):
        PieceType.from_name("dragon")


def test_helpers() -> None:
    assert Piece(PieceType.KING, Color.WHITE).is_king()
    assert not Piece(PieceType.QUEEN, Color.WHITE).is_king()
    assert Piece(PieceType.PAWN, Color.BLACK).is_pawn()
    assert Piece(PieceType.QUEEN, Color.BLACK).is_sliding()
    assert not Piece(PieceType.KNIGHT, Color.BLACK).is_sliding()


def test_piece_values() -> None:
    """The King's worth is undefined, so it does not count towards the total"""
    assert Piece(PieceType.KING, Color.WHITE).value == 0
    assert Piece(PieceType.QUEEN, Color.WHITE).value == 9
    assert Piece(PieceType.PAWN, Color.BLACK).value == 1


@pytest.mark.parametrize("color", list(Color))
def test_promotion_keeps_color(color: Color) -> None:
    """Pieces are immutable: promoting gives a new piece of the same color"""
    pawn = Piece(PieceType.PAWN, color)
    queen = pawn.promoted_to(PieceType.QUEEN)
    assert queen == Piece(PieceType.QUEEN, color)
    assert pawn.kind == PieceType.PAWN

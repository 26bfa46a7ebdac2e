"""Unit tests for /src/rules/game.py"""

import logging

import pytest

from src.core.exceptions import GameOverError, InvalidFENError, MoveParseError
from src.core.models import GameModel
from src.core.shared_types import Status
from src.rules.fen import STARTING_FEN
from src.rules.game import Game
from src.rules.moves import KingSideCastle, PieceMove, Resign
from src.rules.pieces import Color, Piece, PieceType
from src.rules.position import Position
from src.rules.results import Continuing, IllegalMove, Stalemate, Victory

FOOLS_MATE = ["f2 f3", "e7 e5", "g2 g4", "d8 h4"]
SCHOLARS_MATE = ["e2e4", "e7e5", "f1c4", "b8c6", "d1h5", "g8f6", "h5f7"]


def _at(name: str) -> Position:
    return Position.from_notation(name)


def _play(game: Game, moves: list[str]) -> None:
    """Play a sequence of moves that are all expected to go through"""
    for text in moves:
        result = game.apply(text)
        assert not isinstance(result, IllegalMove), text


# -- CREATION LOGIC --
def test_new_game() -> None:
    game = Game.new_game()
    assert game.turn is Color.WHITE
    assert game.status is Status.IN_PROGRESS
    assert game.result is None
    assert game.moves == []
    assert game.to_fen() == STARTING_FEN
    assert len(game.legal_moves()) == 20


def test_game_from_fen() -> None:
    fen = "r3k2r/pppq1ppp/2npbn2/4p3/2B1P3/2NP1N2/PPP2PPP/R1BQ1RK1 b kq - 3 9"
    game = Game.from_fen(fen)
    assert game.turn is Color.BLACK
    assert game.half_move_clock == 3
    assert game.num_turns == 9
    assert game.starting_fen == fen
    assert game.to_fen() == fen


def test_game_from_invalid_fen() -> None:
    with pytest.raises(InvalidFENError):
        Game.from_fen("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq -")


def test_model_roundtrip() -> None:
    game = Game.new_game()
    _play(game, ["e2e4", "e7 e5", "g1 to f3"])

    model = game.to_model()
    assert model.moves == ["e2 to e4", "e7 to e5", "g1 to f3"]
    assert model.status is Status.IN_PROGRESS
    assert model.winner is None
    assert model.starting_fen == STARTING_FEN

    restored = Game.from_model(model)
    assert restored.to_model() == model
    assert restored.turn is Color.BLACK
    assert restored.board == game.board


def test_model_roundtrip_of_finished_game() -> None:
    game = Game.new_game()
    _play(game, FOOLS_MATE)

    model = game.to_model()
    assert model.status is Status.CHECKMATE
    assert model.winner == "black"

    restored = Game.from_model(model)
    assert restored.result == Victory(Color.BLACK)
    assert restored.is_over
    with pytest.raises(GameOverError):
        restored.apply("e2e4")


def test_model_of_a_drawn_game() -> None:
    model = GameModel(
        current_fen="k7/2Q5/1K6/8/8/8/8/8 b - - 1 1",
        starting_fen="k7/8/1K6/8/8/8/8/2Q5 w - - 0 1",
        moves=["c1 to c7"],
        status=Status.STALEMATE,
    )
    game = Game.from_model(model)
    assert game.result == Stalemate()
    assert game.winner is None


def test_model_with_winner_status_needs_winner() -> None:
    model = GameModel(
        current_fen=STARTING_FEN,
        starting_fen=STARTING_FEN,
        moves=["Resign"],
        status=Status.RESIGNED,
    )
    with pytest.raises(ValueError):
        Game.from_model(model)


# -- PLAYING --
def test_first_move() -> None:
    game = Game.new_game()
    result = game.apply("e2e4")

    assert isinstance(result, Continuing)
    assert result.board.en_passant == _at("e3")
    assert result.board.piece_at(_at("e4")) == Piece(PieceType.PAWN, Color.WHITE)
    assert game.turn is Color.BLACK
    assert game.moves == [PieceMove(_at("e2"), _at("e4"))]
    assert (
        game.to_fen() == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
    )


def test_move_objects_are_accepted() -> None:
    game = Game.new_game()
    result = game.apply(PieceMove(_at("g1"), _at("f3")))
    assert isinstance(result, Continuing)


def test_continuing_holds_a_snapshot() -> None:
    """Later moves do not change the board handed out with an earlier result"""
    game = Game.new_game()
    result = game.apply("e2e4")
    assert isinstance(result, Continuing)
    game.apply("e7e5")
    assert result.board.piece_at(_at("e7")) == Piece(PieceType.PAWN, Color.BLACK)


def test_move_counters() -> None:
    game = Game.new_game()
    _play(game, ["g1f3", "g8f6", "b1c3"])
    assert game.half_move_clock == 3
    assert game.num_turns == 2

    # pawn move resets the half move clock
    _play(game, ["e7e5"])
    assert game.half_move_clock == 0
    assert game.num_turns == 3

    # so does a capture
    _play(game, ["f3e5"])
    assert game.half_move_clock == 0


def test_illegal_move_changes_nothing() -> None:
    game = Game.new_game()
    result = game.apply("e2e5")

    assert result == IllegalMove(PieceMove(_at("e2"), _at("e5")))
    assert str(result) == "Illegal move: e2 to e5"
    assert game.turn is Color.WHITE
    assert game.moves == []
    assert game.to_fen() == STARTING_FEN


def test_cannot_move_opponents_piece() -> None:
    game = Game.new_game()
    assert isinstance(game.apply("e7e5"), IllegalMove)
    assert game.turn is Color.WHITE


def test_illegal_move_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="src.rules.game")
    Game.new_game().apply("e2e5")
    assert "Rejected illegal move e2 to e5 for White" in caplog.text


@pytest.mark.parametrize("text", ["knight to e4", "Qxe4", "e9e4", "", "e2 e²"])
def test_unparsable_move(text: str) -> None:
    game = Game.new_game()
    with pytest.raises(MoveParseError):
        game.apply(text)
    assert game.moves == []
    assert game.turn is Color.WHITE


def test_no_en_passant_for_a_pawn_that_is_not_adjacent() -> None:
    """After 1. e4 d5 the black pawn is taken the ordinary way, not en passant"""
    game = Game.new_game()
    _play(game, ["e2e4", "d7d5"])
    assert game.board.en_passant == _at("d6")
    assert isinstance(game.apply("e4 d6"), IllegalMove)
    assert isinstance(game.apply("e4 d5"), Continuing)


def test_en_passant() -> None:
    game = Game.new_game()
    _play(game, ["e2e4", "a7a6", "e4e5", "d7d5"])
    result = game.apply("e5 to d6")
    assert isinstance(result, Continuing)
    assert result.board.piece_at(_at("d5")) is None
    assert result.board.piece_at(_at("d6")) == Piece(PieceType.PAWN, Color.WHITE)


def test_en_passant_only_on_the_next_move() -> None:
    game = Game.new_game()
    _play(game, ["e2e4", "a7a6", "e4e5", "d7d5", "h2h3", "a6a5"])
    assert isinstance(game.apply("e5d6"), IllegalMove)


def test_castling() -> None:
    game = Game.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    result = game.apply("O-O")
    assert isinstance(result, Continuing)
    assert game.to_fen() == "r3k2r/8/8/8/8/8/8/R4RK1 b kq - 1 1"

    result = game.apply("castle queenside")
    assert isinstance(result, Continuing)
    assert game.to_fen() == "2kr3r/8/8/8/8/8/8/R4RK1 w - - 2 2"


def test_castling_after_king_went_back_and_forth() -> None:
    game = Game.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    _play(game, ["e1 e2", "h8 h7", "e2 e1", "h7 h8"])
    assert game.to_fen() == "r3k2r/8/8/8/8/8/8/R3K2R w q - 4 3"
    assert game.apply("O-O") == IllegalMove(KingSideCastle())


@pytest.mark.parametrize(
    "text, kind",
    [("e7 to e8 knight", PieceType.KNIGHT), ("e7e8", PieceType.QUEEN)],
)
def test_promotion(text: str, kind: PieceType) -> None:
    """The black pawn on a2 keeps enough material on the board to play on"""
    game = Game.from_fen("7k/4P3/8/8/8/8/p7/4K3 w - - 0 1")
    result = game.apply(text)
    assert isinstance(result, Continuing)
    assert result.board.piece_at(_at("e8")) == Piece(kind, Color.WHITE)


def test_underpromotion_to_lone_knight_is_a_draw() -> None:
    """King and knight against a bare king cannot force mate"""
    game = Game.from_fen("7k/4P3/8/8/8/8/8/4K3 w - - 0 1")
    assert game.apply("e7 to e8 knight") == Stalemate()
    assert game.status is Status.INSUFFICIENT_MATERIAL
    assert game.board.piece_at(_at("e8")) == Piece(PieceType.KNIGHT, Color.WHITE)


# -- GAME ENDINGS --
def test_fools_mate() -> None:
    game = Game.new_game()
    _play(game, FOOLS_MATE[:-1])
    result = game.apply(FOOLS_MATE[-1])

    assert result == Victory(Color.BLACK)
    assert str(result) == "Black wins"
    assert game.status is Status.CHECKMATE
    assert game.winner is Color.BLACK
    assert game.is_over
    assert game.legal_moves() == []


def test_scholars_mate() -> None:
    game = Game.new_game()
    _play(game, SCHOLARS_MATE[:-1])
    assert game.apply(SCHOLARS_MATE[-1]) == Victory(Color.WHITE)
    assert game.status is Status.CHECKMATE


def test_stalemate() -> None:
    """Queen to c7 leaves the black king on a8 without a move, but not in check"""
    game = Game.from_fen("k7/8/1K6/8/8/8/8/2Q5 w - - 0 1")
    result = game.apply("c1c7")
    assert result == Stalemate()
    assert str(result) == "Stalemate"
    assert game.status is Status.STALEMATE
    assert game.winner is None


def test_insufficient_material() -> None:
    """Taking the last rook leaves king vs king"""
    game = Game.from_fen("4k3/8/8/8/8/8/3r4/4K3 w - - 0 1")
    assert game.apply("e1d2") == Stalemate()
    assert game.status is Status.INSUFFICIENT_MATERIAL


def test_resign() -> None:
    game = Game.new_game()
    result = game.apply("resign")
    assert result == Victory(Color.BLACK)
    assert game.status is Status.RESIGNED
    assert game.moves == [Resign()]
    assert game.to_model().moves == ["Resign"]


def test_black_resigns() -> None:
    game = Game.new_game()
    _play(game, ["e2e4"])
    assert game.apply(Resign()) == Victory(Color.WHITE)


def test_no_moves_after_game_over() -> None:
    game = Game.new_game()
    _play(game, FOOLS_MATE)
    for move in ["e2e4", "resign"]:
        with pytest.raises(GameOverError):
            game.apply(move)
    assert len(game.moves) == len(FOOLS_MATE)


def test_game_end_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="src.rules.game")
    game = Game.new_game()
    _play(game, FOOLS_MATE)
    assert "Game over after 4 moves: Black wins (checkmate)" in caplog.text


@pytest.mark.parametrize(
    "fen",
    [
        "8/8/8/8/8/8/8/8 w - - 0 1",  # no kings at all
        "4k3/8/8/8/8/8/8/8 w - - 0 1",  # white king missing
        "4k3/8/8/8/8/8/8/3KK3 w - - 0 1",  # two white kings
        "4k3/8/8/8/8/8/8/4R1K1 w - - 0 1",  # black in check, but white to move
    ],
)
def test_game_from_unplayable_position(fen: str) -> None:
    with pytest.raises(InvalidFENError):
        Game.from_fen(fen)

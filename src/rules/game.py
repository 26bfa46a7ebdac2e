"""
The Game class is the entrypoint into the rules engine for a host application.
It is responsible for orchestrating everything required to play a turn: whose turn it is, whether the move is legal,
and whether the game has ended. The host feeds it moves and gets a GameResult back.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import GameOverError, InvalidFENError
from src.core.models import GameModel
from src.core.shared_types import Status
from src.rules.board import Board
from src.rules.fen import STARTING_FEN, FENState
from src.rules.moves import Move, PieceMove, Promotion, Resign, parse_move
from src.rules.pieces import Color
from src.rules.results import Continuing, GameResult, IllegalMove, Stalemate, Victory

logger = logging.getLogger(__name__)


@dataclass
class Game:
    board: Board = field(default_factory=Board.starting_position)
    turn: Color = Color.WHITE
    moves: list[Move] = field(default_factory=list)
    status: Status = Status.IN_PROGRESS
    result: Optional[GameResult] = None
    starting_fen: str = STARTING_FEN
    half_move_clock: int = 0
    num_turns: int = 1

    # --- CREATION ---
    @classmethod
    def new_game(cls) -> Self:
        """Standard starting position, White to move"""
        return cls()

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """
        Start from an arbitrary position. The turn, castling rights and en passant square are taken from the FEN.

        The position itself has to be playable: one king per color, and the player who just moved is not in check.
        """
        state = FENState.from_fen(fen)
        board = state.to_board()
        for color in Color:
            num_kings = sum(piece.is_king() for _, piece in board.pieces(color))
            if num_kings != 1:
                raise InvalidFENError(f"{color} has {num_kings} kings in: {fen}")
        if board.king_in_check(~state.color_to_move):
            raise InvalidFENError(
                f"{~state.color_to_move} is in check, but it is not their move: {fen}"
            )

        return cls(
            board=board,
            turn=state.color_to_move,
            starting_fen=fen,
            half_move_clock=state.half_move_clock,
            num_turns=state.num_turns,
        )

    def to_fen(self) -> str:
        state = FENState.from_board(
            self.board, self.turn, self.half_move_clock, self.num_turns
        )
        return state.to_fen()

    def to_model(self) -> GameModel:
        """Encode into a format the persistence layer uses"""
        winner = self.winner
        return GameModel(
            current_fen=self.to_fen(),
            starting_fen=self.starting_fen,
            moves=[str(move) for move in self.moves],
            status=self.status,
            winner=winner.value if winner else None,
        )

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the persistence layer has"""
        game = cls.from_fen(model.current_fen)
        game.starting_fen = model.starting_fen
        game.moves = [parse_move(text) for text in model.moves]
        game.status = model.status

        if model.status.has_winner:
            if model.winner is None:
                raise ValueError(f"A game ended by {model.status} needs a winner.")
            game.result = Victory(Color(model.winner))
        elif model.status.is_over:
            game.result = Stalemate()
        return game

    # --- STATE ---
    @property
    def is_over(self) -> bool:
        return self.status.is_over

    @property
    def winner(self) -> Optional[Color]:
        if isinstance(self.result, Victory):
            return self.result.winner
        return None

    def legal_moves(self) -> list[Move]:
        """All legal moves for the player whose turn it is (none once the game is over)"""
        if self.is_over:
            return []
        return list(self.board.legal_moves(self.turn))

    # --- PLAYING ---
    def apply(self, move: Move | str) -> GameResult:
        """
        Attempt to make a move for the player whose turn it is
        -----

        1. text gets parsed first (a MoveParseError means it is not a move at all)
        2. the game must still be in progress, otherwise GameOverError
        3. resigning hands the win to the opponent
        4. an illegal move changes nothing and is returned as IllegalMove
        5. otherwise the board is updated, and the opponent's position decides whether the game ended
        """
        if isinstance(move, str):
            move = parse_move(move)

        if self.is_over:
            raise GameOverError(
                f"Game is not in progress. status: {self.status}, result: {self.result}"
            )

        mover = self.turn
        if isinstance(move, Resign):
            self.moves.append(move)
            return self._end(Victory(~mover), Status.RESIGNED)

        if not self.board.is_legal(move, mover):
            logger.info("Rejected illegal move %s for %s", move, mover)
            return IllegalMove(move)

        self._update_clocks(move, mover)
        self.board.apply_raw(move, mover)
        self.moves.append(move)
        self.turn = ~mover
        logger.debug("%s played %s", mover, move)

        return self._evaluate_position(mover)

    # -- PRIVATE HELPERS ---
    def _evaluate_position(self, mover: Color) -> GameResult:
        """
        Performs checks to see if game has ended, from the point of view of the opponent who is now to move.
        """
        opponent = ~mover
        if not self.board.has_legal_move(opponent):
            if self.board.king_in_check(opponent):
                return self._end(Victory(mover), Status.CHECKMATE)
            return self._end(Stalemate(), Status.STALEMATE)

        if self.board.insufficient_material():
            return self._end(Stalemate(), Status.INSUFFICIENT_MATERIAL)

        return Continuing(self.board.copy())

    def _end(self, result: GameResult, status: Status) -> GameResult:
        self.result = result
        self.status = status
        logger.info(
            "Game over after %d moves: %s (%s)", len(self.moves), result, status
        )
        return result

    def _update_clocks(self, move: Move, mover: Color) -> None:
        """FEN bookkeeping. Called BEFORE the board is updated, so a capture can still be seen."""
        if mover is Color.BLACK:
            self.num_turns += 1

        if isinstance(move, (PieceMove, Promotion)):
            moving_piece = self.board.piece_at(move.from_position)
            is_pawn_move = moving_piece is not None and moving_piece.is_pawn()
            is_capture = self.board.square_at(move.to_position).is_occupied
            if is_pawn_move or is_capture:
                self.half_move_clock = 0
                return
        self.half_move_clock += 1

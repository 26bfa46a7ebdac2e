"""GameRepository backed by SQLAlchemy"""

import logging
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.core.shared_types import Status
from src.db.schema import DBGame

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """Every write is committed right away; the session is owned by the caller."""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        game_db = self.db.get(DBGame, game_id)
        return self._to_model(game_db) if game_db else None

    def require_game(self, game_id: UUID) -> GameModel:
        """Like get_game(), for callers that cannot continue without the record."""
        game = self.get_game(game_id)
        if game is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        game_db = DBGame(id=uuid4())
        self._copy_into(game_db, game)
        self.db.add(game_db)
        self._commit(game_db)
        logger.debug("Created game %s", game_db.id)
        return self._to_model(game_db), game_db.id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        game_db = self.db.get(DBGame, game_id)
        if game_db is None:
            return None
        self._copy_into(game_db, game)
        self._commit(game_db)
        logger.debug("Updated game %s (%s)", game_id, game.status)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        game_db = self.db.get(DBGame, game_id)
        if game_db is None:
            return None
        deleted = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        logger.debug("Deleted game %s", game_id)
        return deleted

    def list_games(
        self, status: Optional[Status] = None
    ) -> list[tuple[UUID, GameModel]]:
        query = select(DBGame).order_by(DBGame.created_at)
        if status is not None:
            query = query.where(DBGame.status == status.value)
        return [
            (game_db.id, self._to_model(game_db)) for game_db in self.db.scalars(query)
        ]

    # --- CONVERSION ---
    @staticmethod
    def _copy_into(game_db: DBGame, game: GameModel) -> None:
        game_db.starting_fen = game.starting_fen
        game_db.current_fen = game.current_fen
        # a fresh list, so the JSON column registers the change
        game_db.moves = list(game.moves)
        game_db.status = game.status.value
        game_db.winner = game.winner

    @staticmethod
    def _to_model(game_db: DBGame) -> GameModel:
        return GameModel(
            current_fen=game_db.current_fen,
            starting_fen=game_db.starting_fen,
            moves=list(game_db.moves),
            status=Status(game_db.status),
            winner=game_db.winner,
        )

    def _commit(self, game_db: DBGame) -> None:
        self.db.commit()
        self.db.refresh(game_db)

"""What the engine expects from any storage backend. The SQL implementation lives in sql_repository.py"""

from typing import Optional, Protocol
from uuid import UUID

from src.core.models import GameModel
from src.core.shared_types import Status


class GameRepository(Protocol):
    """Stores GameModel records under a generated ID"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """The stored record, or None for an unknown ID."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store a new record. Returns what was stored and the ID it got."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite an existing record. None for an unknown ID."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a record, returning what it held. None for an unknown ID."""
        ...

    def list_games(
        self, status: Optional[Status] = None
    ) -> list[tuple[UUID, GameModel]]:
        """All records (oldest first), optionally only those with a given status."""
        ...

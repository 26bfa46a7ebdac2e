"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    """One row per game. The position is stored as FEN, the move history as display text."""

    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    starting_fen: Mapped[str] = mapped_column(String(100))
    current_fen: Mapped[str] = mapped_column(String(100))
    moves: Mapped[list[str]] = mapped_column(JSON, default=list)
    # Status values, e.g. "in progress" or "checkmate"
    status: Mapped[str] = mapped_column(String(32), index=True)
    winner: Mapped[Optional[str]] = mapped_column(String(5))
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)

    def __repr__(self) -> str:
        return f"DBGame(id={self.id}, status={self.status!r}, moves={len(self.moves)})"

"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    """
    A stored game: its starting position plus the moves played from there.
    current_fen is redundant (the moves can be replayed) but saves a replay for simple lookups.
    """

    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    starting_fen: Mapped[str]
    current_fen: Mapped[str]
    moves_uci: Mapped[list[str]] = mapped_column(JSON, default=list)
    undone_uci: Mapped[list[str]] = mapped_column(JSON, default=list)
    registered_players: Mapped[dict[str, str]] = mapped_column(JSON, default=dict)
    status: Mapped[str]
    resigned_by: Mapped[Optional[str]]
    undo_enabled: Mapped[bool] = mapped_column(default=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)

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
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    starting_fen: Mapped[str]
    current_fen: Mapped[str]
    moves_uci: Mapped[list[str]] = mapped_column(JSON, default=list)
    against_bot: Mapped[bool] = mapped_column(default=False)
    status: Mapped[str]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)


class DBFenLogEntry(Base):
    """One exported FEN string (post-game review), in the order they got logged"""

    __tablename__ = "fen_log"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    fen: Mapped[str]
    game_id: Mapped[Optional[UUID]]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)

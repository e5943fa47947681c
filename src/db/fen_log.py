"""
Sinks for the FEN log: every selection in a game appends the position as FEN, so a game can be reviewed afterwards.

Both classes implement the FenLog protocol of src/chess/game.py.
"""

from pathlib import Path
from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.db.schema import DBFenLogEntry


class FileFenLog:
    """One FEN per line, appended to a text file"""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def append(self, fen: str) -> None:
        try:
            with self.path.open("a", encoding="utf-8") as file:
                file.write(f"{fen}\n")
        except OSError as exc:
            raise RepositoryError(f"Cannot write FEN log {self.path}: {exc}") from exc

    def read(self) -> list[str]:
        if not self.path.exists():
            return []
        return self.path.read_text(encoding="utf-8").splitlines()


class SQLFenLog:
    """FEN log stored in the database (optionally tagged with the game it belongs to)"""

    def __init__(self, db_session: Session, game_id: Optional[UUID] = None) -> None:
        self.db = db_session
        self.game_id = game_id

    def append(self, fen: str) -> None:
        self.db.add(DBFenLogEntry(fen=fen, game_id=self.game_id))
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise RepositoryError(f"Cannot store FEN log entry: {exc}") from exc
        logger.trace(f"FEN logged: {fen}")

    def read(self) -> list[str]:
        query = select(DBFenLogEntry.fen).order_by(DBFenLogEntry.id)
        if self.game_id is not None:
            query = query.where(DBFenLogEntry.game_id == self.game_id)
        return list(self.db.scalars(query))

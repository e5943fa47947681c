"""Wiring: build a ChessService from the application settings."""

from typing import Generator, Optional

from sqlalchemy.orm import Session

from src.chess.game import FenLog
from src.core.config import Settings
from src.core.logging import setup_logging
from src.db.database import create_session_factory, get_db
from src.db.fen_log import FileFenLog, SQLFenLog
from src.db.sql_repository import SQLGameRepository
from src.engine.protocol import ChessEngine
from src.engine.uci_engine import UCIEngine
from src.services.chess_service import ChessService


def open_engine(settings: Settings) -> Optional[UCIEngine]:
    """Start the configured engine binary. No engine configured means no games against the bot."""
    if settings.engine_path is None:
        return None
    return UCIEngine(settings.engine_path, timeout=settings.engine_timeout)


def build_fen_log(settings: Settings, db_session: Session) -> FenLog:
    if settings.fen_log_backend == "database":
        return SQLFenLog(db_session)
    return FileFenLog(settings.fen_log_path)


def build_chess_service(
    settings: Settings, db_session: Session, engine: Optional[ChessEngine] = None
) -> ChessService:
    """
    Configure logging and assemble the service: SQL repository, FEN log (file or database), (optional) engine.
    The caller owns the session and the engine, and closes them.
    """
    setup_logging(settings.log_level, settings.log_file)
    return ChessService(
        repository=SQLGameRepository(db_session),
        engine=engine,
        fen_log=build_fen_log(settings, db_session),
    )


def open_chess_service(
    settings: Settings, engine: Optional[ChessEngine] = None
) -> Generator[ChessService, None, None]:
    """Service bound to its own session on the configured database. The session closes with the generator."""
    sessions = get_db(create_session_factory(settings))
    db_session = next(sessions)
    try:
        yield build_chess_service(settings, db_session, engine)
    finally:
        sessions.close()

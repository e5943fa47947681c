"""Unit tests for src/services/setup.py"""

from pathlib import Path
from unittest.mock import patch

import pytest
from loguru import logger
from sqlalchemy.orm import Session

from src.api.models import CreateGameRequest, GetGameRequest, MoveRequest
from src.core.config import Settings
from src.core.exceptions import EngineError
from src.db.fen_log import FileFenLog, SQLFenLog
from src.db.sql_repository import SQLGameRepository
from src.services.setup import build_chess_service, open_chess_service, open_engine


def test_no_engine_configured() -> None:
    assert open_engine(Settings()) is None


def test_missing_engine_binary() -> None:
    settings = Settings(engine_path=Path("/nowhere/stockfish"))
    with patch("src.engine.uci_engine.shutil.which", return_value=None):
        with pytest.raises(EngineError):
            open_engine(settings)


def test_build_chess_service(db_session_repo: Session, tmp_path: Path) -> None:
    settings = Settings(fen_log_path=tmp_path / "chess-tui.fen", log_file=tmp_path / "chess.log")
    service = build_chess_service(settings, db_session_repo)
    logger.remove()

    assert isinstance(service.repo, SQLGameRepository)
    assert isinstance(service.fen_log, FileFenLog)
    assert service.engine is None


def test_fen_log_in_the_database(db_session_repo: Session) -> None:
    settings = Settings(fen_log_backend="database")
    service = build_chess_service(settings, db_session_repo)
    logger.remove()
    assert isinstance(service.fen_log, SQLFenLog)

    game_id = service.create_game(CreateGameRequest()).game_id
    service.make_move(MoveRequest(game_id=game_id, from_square="e2", to_square="e4"))
    assert service.fen_log.read() == ["rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 0"]


def test_open_chess_service(tmp_path: Path) -> None:
    settings = Settings(database_url=f"sqlite:///{tmp_path / 'games.db'}", fen_log_path=tmp_path / "chess-tui.fen")
    services = open_chess_service(settings)
    service = next(services)
    logger.remove()
    game_id = service.create_game(CreateGameRequest()).game_id
    services.close()

    # a new session on the same database finds the game again
    services = open_chess_service(settings)
    state = next(services).get_game_state(GetGameRequest(game_id=game_id))
    logger.remove()
    services.close()
    assert state.move_history == []

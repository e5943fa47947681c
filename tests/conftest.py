"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Generator

import pytest
from loguru import logger
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.chess.board import Board
from src.chess.coords import Coords
from src.chess.pieces import Color, Piece, PieceType
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def log_messages() -> Generator[list[str], None, None]:
    """Capture what gets logged through loguru (pytest's caplog does not see loguru records)."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="TRACE")
    try:
        yield messages
    finally:
        logger.remove(handler_id)


@pytest.fixture
def castling_board() -> Board:
    """Only the Kings and the Rooks on their starting squares. Ready to perform any castling move (if allowed)."""
    return Board.from_fen("r3k2r/8/8/8/8/8/8/R3K2R")


@pytest.fixture
def kings_only_board() -> Board:
    """
    Only kings on their canonical starting squares.
    Because legality involves inferring if a king is under attack, most positions in the tests need both of them.
    """
    return Board.from_pieces(
        {
            Coords(7, 4): Piece(PieceType.KING, Color.WHITE),
            Coords(0, 4): Piece(PieceType.KING, Color.BLACK),
        }
    )

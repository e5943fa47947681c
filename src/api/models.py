"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.chess.fen import is_valid_fen, is_valid_square
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType, Status

PROMOTION_CHOICES = (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)


def _validate_square(value: str) -> str:
    if not is_valid_square(value):
        raise InvalidRequestError(f"Cannot interpret {value!r} as a valid square name.")
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None
    against_bot: bool = False

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        value = value.strip()
        if len(value.split(" ")) != 6:
            raise InvalidRequestError("FEN string must contain 6 space-separated parts.")
        if not is_valid_fen(value):
            raise InvalidRequestError(f"Cannot interpret {value!r} as FEN.")
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str
    promote_to: Optional[PieceType] = None

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)

    @field_validator("promote_to")
    @classmethod
    def validate_promotion(cls, value: Optional[PieceType]) -> Optional[PieceType]:
        if value is not None and value not in PROMOTION_CHOICES:
            raise InvalidRequestError(f"A pawn cannot promote to a {value}.")
        return value


class TakebackRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    fen_state: str
    starting_state: str
    player_turn: Color
    status: Status
    against_bot: bool
    move_history: list[str]
    history_lines: list[str]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    square: str
    color: Color
    legal_moves: list[str]

"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Both the API layer (higher) and the db layer (lower) use the model defined here to send to/receive from the Service.
The domain Game is never persisted as such: it gets rebuilt by replaying the moves on top of the starting position.
"""

from dataclasses import dataclass, field

from src.core.shared_types import Status


@dataclass
class GameModel:
    """Transport-safe representation of a chess game used between API, Service and DB layers."""

    starting_fen: str
    current_fen: str
    moves_uci: list[str] = field(default_factory=list)
    against_bot: bool = False
    status: str = Status.IN_PROGRESS

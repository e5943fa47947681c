"""
Contract for the external chess engine.

The game only needs two things from an engine: take a position, answer with a move (in UCI notation, ex. "e7e5").
Anything implementing these can be attached to a Game (the UCI subprocess adapter, a mock in tests, ...).
"""

from typing import Protocol


class ChessEngine(Protocol):
    def set_position(self, fen: str) -> None:
        """Position to search from, as FEN."""
        ...

    def best_move(self) -> str:
        """Best move for the position last set. Raises EngineError if there is none."""
        ...

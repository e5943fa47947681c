"""
Exceptions raised by the domain, engine, persistence and service layers.

All of them derive from GameError, so a caller driving a game (UI, service) can catch a single type
and keep the session alive.
"""


class GameError(Exception):
    """Base class for every recoverable error in the application."""


class InvalidFENError(GameError):
    """The supplied string cannot be interpreted as FEN."""


class InvalidCoordinatesError(GameError, ValueError):
    """Coordinates too far outside of the board to be represented, or a malformed square name/code."""


class IllegalMoveError(GameError):
    """The requested move is not in the set of authorized moves."""


class GameStateError(GameError):
    """The game is in a state that does not accept the requested action."""


class NotYourTurnError(GameError):
    """A piece of the color that is not to move was addressed."""


class EngineError(GameError):
    """The external chess engine is missing, crashed, timed out or did not return a move."""


class RepositoryError(GameError):
    """The persistence layer could not find or store the requested record."""


class InvalidRequestError(GameError, ValueError):
    """Input at the service boundary failed validation."""

"""Rooks move either horizontally or vertically"""

from src.chess.coords import Coords
from src.chess.history import History
from src.chess.moves import STRAIGHTS, Board, raycasting_move
from src.chess.pieces import Color


def piece_move(
    coords: Coords,
    color: Color,
    board: Board,
    allow_ally_capture: bool,
    history: History,
) -> list[Coords]:
    return raycasting_move(coords, color, board, STRAIGHTS, allow_ally_capture)

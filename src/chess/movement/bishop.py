"""Bishops move diagonally: |delta_row| = |delta_col|"""

from src.chess.coords import Coords
from src.chess.history import History
from src.chess.moves import DIAGONALS, Board, raycasting_move
from src.chess.pieces import Color


def piece_move(
    coords: Coords,
    color: Color,
    board: Board,
    allow_ally_capture: bool,
    history: History,
) -> list[Coords]:
    return raycasting_move(coords, color, board, DIAGONALS, allow_ally_capture)

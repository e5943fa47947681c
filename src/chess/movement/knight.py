"""Knights always move such that |delta_row| + |delta_col| = 3"""

from src.chess.coords import Coords
from src.chess.history import History
from src.chess.moves import KNIGHT_DELTAS, Board, single_step_move
from src.chess.pieces import Color


def piece_move(
    coords: Coords,
    color: Color,
    board: Board,
    allow_ally_capture: bool,
    history: History,
) -> list[Coords]:
    return single_step_move(coords, color, board, KNIGHT_DELTAS, allow_ally_capture)

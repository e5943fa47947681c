"""
The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
"""

from src.chess.coords import Coords
from src.chess.history import History
from src.chess.movement import bishop, rook
from src.chess.moves import Board
from src.chess.pieces import Color


def piece_move(
    coords: Coords,
    color: Color,
    board: Board,
    allow_ally_capture: bool,
    history: History,
) -> list[Coords]:
    diagonal_moves = bishop.piece_move(coords, color, board, allow_ally_capture, history)
    straight_moves = rook.piece_move(coords, color, board, allow_ally_capture, history)
    return diagonal_moves + straight_moves

"""
A pawn:
- moves by a single square forward.
- It can move by two in their first move (so when on their starting row), if both squares are free
- takes diagonally, also 'en passant' on the square an enemy pawn just jumped over
"""

from src.chess.coords import Coords
from src.chess.history import History
from src.chess.moves import Board
from src.chess.pieces import Color, PieceType

# White moves UP the board (towards row 0), black moves DOWN
FORWARD: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
STARTING_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}
LAST_ROW: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 7}


def piece_move(
    coords: Coords,
    color: Color,
    board: Board,
    allow_ally_capture: bool,
    history: History,
) -> list[Coords]:
    direction = FORWARD[color]
    diagonals = [coords.offset(direction, d_col) for d_col in (-1, 1)]

    # Protected squares: a pawn only ever threatens its diagonals, whatever stands on them.
    if allow_ally_capture:
        return [target for target in diagonals if target.is_valid()]

    positions: list[Coords] = []

    # pawn pushes
    one_step = coords.offset(direction, 0)
    if one_step.is_valid() and board.piece(one_step) is None:
        positions.append(one_step)

        two_steps = coords.offset(2 * direction, 0)
        if coords.row == STARTING_ROW[color] and board.piece(two_steps) is None:
            positions.append(two_steps)

    # pawns take diagonally
    for target in diagonals:
        if not target.is_valid():
            continue
        target_piece = board.piece(target)
        if target_piece is not None and target_piece.color != color:
            positions.append(target)
        elif target_piece is None and is_en_passant_target(coords, target, color, history):
            positions.append(target)

    return positions


def is_en_passant_target(coords: Coords, target: Coords, color: Color, history: History) -> bool:
    """
    En passant is only available right after the opponent's pawn made a double step,
    landing next to ours (same row, adjacent column). Our pawn takes on the square that was jumped over.
    """
    if not history:
        return False
    last = history[-1]
    if last.piece_type != PieceType.PAWN:
        return False

    origin, destination = last.origin, last.destination
    is_double_step = abs(destination.row - origin.row) == 2 and origin.col == destination.col
    # the double step must have been made by the opponent: towards us
    moved_towards_us = (destination.row - origin.row) * FORWARD[color] < 0
    lands_adjacent = destination.row == coords.row and abs(destination.col - coords.col) == 1
    jumped_over_target = destination.col == target.col
    return is_double_step and moved_towards_us and lands_adjacent and jumped_over_target

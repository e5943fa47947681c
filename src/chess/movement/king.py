"""
The king can move by a single square at the time.

Castling is modelled as a special king move: the king jumps two columns towards the rook.
"""

from src.chess.castling import CASTLING_RULES, castling_directions, has_untouched_pieces
from src.chess.coords import Coords
from src.chess.history import History
from src.chess.moves import KING_DELTAS, Board, single_step_move
from src.chess.pieces import Color


def piece_move(
    coords: Coords,
    color: Color,
    board: Board,
    allow_ally_capture: bool,
    history: History,
) -> list[Coords]:
    """Adjacent squares only. The king does not check here whether it would walk into check, src/chess/check.py does."""
    return single_step_move(coords, color, board, KING_DELTAS, allow_ally_capture)


def castling_moves(
    coords: Coords,
    color: Color,
    board: Board,
    history: History,
    threatened: set[Coords],
) -> list[Coords]:
    """
    Find the castling destinations of the king standing on `coords`
    ---

    **you are allowed to castle if**

    * The king and the rook never moved (nothing ever left their starting squares).
    * There is no piece in between the king and the rook.
    * You are not currently in check (you cannot castle out of check).
    * None of the squares the king passes through or lands on is under attack (`threatened`: all squares the opponent protects).
    """
    # Cannot castle out of a check.
    if coords in threatened:
        return []

    positions: list[Coords] = []
    for direction in castling_directions(color):
        rule = CASTLING_RULES[direction]
        if coords != rule.king_from:
            continue

        if not has_untouched_pieces(board, direction, history):
            continue

        if any(board.piece(square) is not None for square in rule.between):
            continue

        if any(square in threatened for square in rule.king_path):
            continue

        positions.append(rule.king_to)
    return positions

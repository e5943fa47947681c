"""
Check / pin filter
----

The movement rules produce raw candidate squares. Here we remove the ones that would leave (or put) your own king in check.

Pins need no special treatment: a pinned piece moving off the line of the pin exposes its king on the scratch board,
so the move gets filtered out. Note that pins do not change what a piece protects (see `protected_positions`).
"""

from src.chess.board import Board
from src.chess.castling import CASTLING_RULES, castling_direction_of, is_castling_move
from src.chess.coords import Coords
from src.chess.history import History
from src.chess.movement.pawn import FORWARD
from src.chess.movement.rules import piece_move, threatened_positions
from src.chess.pieces import Color, PieceType


def is_getting_checked(board: Board, color: Color, history: History) -> bool:
    """Is the king of `color` standing on a square protected by any piece of the opponent? A board without that king is never in check."""
    king_coords = board.king_square(color)
    if king_coords is None:
        return False
    return king_coords in threatened_positions(board, color.opposite(), history)


def authorized_positions(coords: Coords, color: Color, board: Board, history: History) -> list[Coords]:
    """
    Legal destinations of the piece on `coords`
    ----

    plan:
    1. generate the raw candidate squares
    2. for every candidate: copy the board and make the move on the copy
    3. keep it if the king is not in check on the copy
    """
    piece = board.piece(coords)
    if piece is None or piece.color != color:
        return []

    candidates = piece_move(piece.type, coords, color, board, False, history)
    return [
        target
        for target in candidates
        if not is_putting_yourself_in_check(coords, target, board, history)
    ]


def is_putting_yourself_in_check(from_coords: Coords, to_coords: Coords, board: Board, history: History) -> bool:
    """Return True if the move leaves the mover's king attacked"""
    piece = board.piece(from_coords)
    if piece is None:
        return False

    scratch = board.copy()
    simulate_move(scratch, from_coords, to_coords)
    return is_getting_checked(scratch, piece.color, history)


def simulate_move(board: Board, from_coords: Coords, to_coords: Coords) -> None:
    """
    Apply the move to a (scratch) board, side effects of the special moves included:
    * en passant: a pawn moving diagonally onto an empty square removes the pawn next to it
    * castling: the rook jumps over the king
    """
    piece = board.piece(from_coords)
    if piece is None:
        return

    is_diagonal_pawn_move = piece.type == PieceType.PAWN and from_coords.col != to_coords.col
    if is_diagonal_pawn_move and board.is_empty(to_coords):
        board.remove_piece(to_coords.offset(-FORWARD[piece.color], 0))

    if is_castling_move(piece, from_coords, to_coords):
        direction = castling_direction_of(piece.color, from_coords, to_coords)
        if direction is not None:
            rule = CASTLING_RULES[direction]
            board.move_piece(rule.king_from, rule.king_to)
            board.move_piece(rule.rook_from, rule.rook_to)
            return

    board.move_piece(from_coords, to_coords)

"""
Dispatch of the movement rules over the (closed) set of piece types.

* `piece_move`: raw reachable squares of a piece, including castling candidates for the king
* `protected_positions`: the squares a piece threatens/defends (independent of whose turn it is)
* `threatened_positions`: everything a color protects, used to find out if a square is under attack
"""

from src.chess.coords import Coords
from src.chess.history import History
from src.chess.movement import bishop, king, knight, pawn, queen, rook
from src.chess.moves import Board
from src.chess.pieces import Color, Piece, PieceType


def piece_move(
    piece_type: PieceType,
    coords: Coords,
    color: Color,
    board: Board,
    allow_ally_capture: bool,
    history: History,
) -> list[Coords]:
    match piece_type:
        case PieceType.PAWN:
            return pawn.piece_move(coords, color, board, allow_ally_capture, history)
        case PieceType.KNIGHT:
            return knight.piece_move(coords, color, board, allow_ally_capture, history)
        case PieceType.BISHOP:
            return bishop.piece_move(coords, color, board, allow_ally_capture, history)
        case PieceType.ROOK:
            return rook.piece_move(coords, color, board, allow_ally_capture, history)
        case PieceType.QUEEN:
            return queen.piece_move(coords, color, board, allow_ally_capture, history)
        case PieceType.KING:
            positions = king.piece_move(coords, color, board, allow_ally_capture, history)
            # NOTE castling never protects a square, and skipping it here stops the recursion
            # (the opponent's threatened squares include the squares of their king)
            if not allow_ally_capture:
                threatened = threatened_positions(board, color.opposite(), history)
                positions.extend(king.castling_moves(coords, color, board, history, threatened))
            return positions


def protected_positions(coords: Coords, piece: Piece, board: Board, history: History) -> list[Coords]:
    """Raw reachable set with `allow_ally_capture`: squares the piece could capture on or defends."""
    return piece_move(piece.type, coords, piece.color, board, True, history)


def threatened_positions(board: Board, by_color: Color, history: History) -> set[Coords]:
    """Union of the protected positions of all pieces of `by_color`"""
    threatened: set[Coords] = set()
    for coords, piece in board.occupied():
        if piece.color != by_color:
            continue
        threatened.update(protected_positions(coords, piece, board, history))
    return threatened

"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Self

from src.chess.coords import Coords
from src.chess.history import History, did_piece_already_move
from src.chess.moves import Board
from src.chess.pieces import Color, Piece, PieceType


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"


CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.

    * `between`: squares that must be empty
    * `king_path`: squares the king passes through or lands on, none of which may be under attack
    """

    color: Color
    king_from: Coords
    king_to: Coords
    rook_from: Coords
    rook_to: Coords
    between: tuple[Coords, ...]
    king_path: tuple[Coords, ...]

    @classmethod
    def from_algebraic(
        cls, color: Color, k_from: str, k_to: str, r_from: str, r_to: str
    ) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        king_from = Coords.from_algebraic(k_from)
        king_to = Coords.from_algebraic(k_to)
        rook_from = Coords.from_algebraic(r_from)
        rook_to = Coords.from_algebraic(r_to)

        row = king_from.row
        step = 1 if rook_from.col > king_from.col else -1
        between = tuple(Coords(row, col) for col in range(king_from.col + step, rook_from.col, step))
        king_path = tuple(Coords(row, col) for col in range(king_from.col + step, king_to.col + step, step))
        return cls(color, king_from, king_to, rook_from, rook_to, between, king_path)


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(Color.WHITE, "e1", "g1", "h1", "f1"),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(Color.WHITE, "e1", "c1", "a1", "d1"),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(Color.BLACK, "e8", "g8", "h8", "f8"),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(Color.BLACK, "e8", "c8", "a8", "d8"),
}


def castling_directions(color: Color) -> list[CastlingDirection]:
    return [direction for direction, rule in CASTLING_RULES.items() if rule.color == color]


def is_castling_move(piece: Piece, from_coords: Coords, to_coords: Coords) -> bool:
    """A king never moves by more than a single column, except when castling"""
    return piece.type == PieceType.KING and abs(to_coords.col - from_coords.col) > 1


def castling_direction_of(color: Color, from_coords: Coords, to_coords: Coords) -> Optional[CastlingDirection]:
    """
    Which castling a king move corresponds to.

    The destination may either be the king's landing square ("e1g1") or the rook's square ("e1h1"),
    the latter being how some engines/UIs report castling. Both point towards the same rook.
    """
    for direction in castling_directions(color):
        rule = CASTLING_RULES[direction]
        if from_coords != rule.king_from:
            continue
        towards_rook = (rule.rook_from.col - rule.king_from.col) * (to_coords.col - from_coords.col) > 0
        if towards_rook and to_coords.row == rule.king_from.row:
            return direction
    return None


def has_untouched_pieces(board: Board, direction: CastlingDirection, history: History) -> bool:
    """
    Castling rights are not stored, they are derived:
    the king and the rook must still stand on their starting squares, and no move may ever have started from those squares.
    """
    rule = CASTLING_RULES[direction]
    king_in_place = board.piece(rule.king_from) == Piece(PieceType.KING, rule.color)
    rook_in_place = board.piece(rule.rook_from) == Piece(PieceType.ROOK, rule.color)
    if not (king_in_place and rook_in_place):
        return False
    return not (
        did_piece_already_move(history, rule.king_from)
        or did_piece_already_move(history, rule.rook_from)
    )


def castling_to_fen(castling_rights: dict[CastlingDirection, bool]) -> str:
    """create the part of the FEN string that encodes castling rights"""
    castling_chars = "".join(
        [direction.value for direction in CASTLING_ORDER if castling_rights[direction]]
    )
    return castling_chars or "-"


def castling_from_fen(castle_fen: str) -> dict[CastlingDirection, bool]:
    """parse the part of the FEN string that encodes castling rights"""
    return {
        direction: (direction.value in castle_fen) for direction in CastlingDirection
    }

"""
Move history
-----

One record per ply: the type of piece that moved and a compact code of the move, the origin and destination
as two concatenated (row, col) digit pairs. ex) (PAWN, "6444") is a pawn moving from e2 to e4.

Next to the (public) history the Game keeps an undo record per ply it applied itself. That record holds everything
a takeback needs to restore, so nothing has to be reconstructed by re-reading the history.
"""

from dataclasses import dataclass
from typing import Optional, Self

from src.chess.coords import Coords
from src.chess.pieces import Cell, Color, Piece, PieceType
from src.core.exceptions import InvalidCoordinatesError


@dataclass(frozen=True)
class HistoryRecord:
    piece_type: PieceType
    notation: str

    @classmethod
    def from_move(cls, piece_type: PieceType, from_coords: Coords, to_coords: Coords) -> Self:
        return cls(piece_type, f"{from_coords.to_hist()}{to_coords.to_hist()}")

    def __post_init__(self) -> None:
        if len(self.notation) != 4 or not (self.notation.isascii() and self.notation.isdigit()):
            raise InvalidCoordinatesError(f"History notation must be four digits, got {self.notation!r}")

    @property
    def origin(self) -> Coords:
        return Coords.from_hist(self.notation[:2])

    @property
    def destination(self) -> Coords:
        return Coords.from_hist(self.notation[2:])

    def to_algebraic(self) -> str:
        """ex) "6444" -> "e2-e4" """
        return f"{self.origin.to_algebraic()}-{self.destination.to_algebraic()}"


History = list[HistoryRecord]


@dataclass(frozen=True)
class UndoRecord:
    """Everything that changed on the board (and counters) when a single ply got applied."""

    moved_piece: Piece
    from_coords: Coords
    to_coords: Coords
    captured_piece: Cell
    captured_coords: Optional[Coords]
    rook_from: Optional[Coords]
    rook_to: Optional[Coords]
    previous_counter: int
    previous_turn: Color
    promoted_to: Optional[PieceType] = None


def did_piece_already_move(history: History, starting_coords: Coords) -> bool:
    """Has any move ever originated from these coordinates? Used for the untouched king/rook requirement of castling."""
    code = starting_coords.to_hist()
    return any(record.notation[:2] == code for record in history)


def did_pawn_move_two_cells(history: History) -> bool:
    """Was the last ply a double step of a pawn (which creates an en passant target)?"""
    if not history:
        return False
    last = history[-1]
    return last.piece_type == PieceType.PAWN and abs(last.destination.row - last.origin.row) == 2


def en_passant_target(history: History) -> Optional[Coords]:
    """The square a pawn jumped over with its double step in the last ply (None otherwise)."""
    if not did_pawn_move_two_cells(history):
        return None
    last = history[-1]
    return Coords((last.origin.row + last.destination.row) // 2, last.origin.col)


def history_lines(history: History, first_to_move: Color = Color.WHITE) -> list[str]:
    """
    Display format of the history: numbered move pairs, white's ply then black's ply.

    ex) "1.  ♙ e2-e4     ♟ e7-e5". A line without a reply from black leaves the black columns blank.
    A game that black started (from a FEN) leaves the white columns of the first line blank.
    """
    plies: list[Optional[HistoryRecord]] = list(history)
    if first_to_move == Color.BLACK and plies:
        plies.insert(0, None)

    lines: list[str] = []
    for idx in range(0, len(plies), 2):
        white_glyph, white_move = _display_ply(plies[idx], Color.WHITE)
        black_glyph, black_move = _display_ply(plies[idx + 1] if idx + 1 < len(plies) else None, Color.BLACK)
        lines.append(f"{idx // 2 + 1}.  {white_glyph} {white_move}     {black_glyph} {black_move}")
    return lines


def _display_ply(record: Optional[HistoryRecord], color: Color) -> tuple[str, str]:
    if record is None:
        return "  ", "     "
    return Piece(record.piece_type, color).glyph, record.to_algebraic()

"""The Board holds the `position` (in chess: the configuration of pieces on the board) as an 8x8 grid"""

from dataclasses import dataclass, field
from string import digits
from typing import Iterator, Optional, Self

from src.chess.coords import BOARD_SIZE, Coords
from src.chess.pieces import FEN_TO_PIECE, Cell, Color, Piece, PieceType
from src.core.exceptions import InvalidFENError

Grid = list[list[Cell]]

BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def empty_grid() -> Grid:
    return [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]


@dataclass
class Board:
    grid: Grid = field(default_factory=empty_grid)

    @classmethod
    def starting_position(cls) -> Self:
        """Black on rows 0-1, white on rows 6-7"""
        grid = empty_grid()
        for col, piece_type in enumerate(BACK_RANK):
            grid[0][col] = Piece(piece_type, Color.BLACK)
            grid[1][col] = Piece(PieceType.PAWN, Color.BLACK)
            grid[6][col] = Piece(PieceType.PAWN, Color.WHITE)
            grid[7][col] = Piece(piece_type, Color.WHITE)
        return cls(grid)

    @classmethod
    def from_pieces(cls, pieces: dict[Coords, Piece]) -> Self:
        """Convenience constructor (mostly for tests): only list the occupied cells."""
        board = cls()
        for coords, piece in pieces.items():
            board.place_piece(piece, coords)
        return board

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the first part of a FEN string, the one that denotes the board position
        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 0), starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank (row 7) are the white pieces.
        """
        fen_by_ranks = fen_str.split("/")
        if len(fen_by_ranks) != BOARD_SIZE:
            raise InvalidFENError(f"Expected {BOARD_SIZE} ranks in FEN position: {fen_str!r}")

        grid = empty_grid()
        # FEN string is read from top rank (8th) to bottom rank (1st), which is exactly the row order.
        for row, fen_one_rank in enumerate(fen_by_ranks):
            col = 0
            for character in fen_one_rank:
                if character in digits:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
                    continue
                if character.lower() not in FEN_TO_PIECE or col >= BOARD_SIZE:
                    raise InvalidFENError(f"Cannot place {character!r} on rank {BOARD_SIZE - row}: {fen_str!r}")
                grid[row][col] = Piece.from_fen(character)
                col += 1
            if col != BOARD_SIZE:
                raise InvalidFENError(f"Rank {BOARD_SIZE - row} does not describe {BOARD_SIZE} squares: {fen_str!r}")
        return cls(grid)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in range(BOARD_SIZE))

    def _row_to_fen(self, row: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for piece in self.grid[row]:
            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- ACCESS ---
    def piece(self, coords: Coords) -> Cell:
        """Off-board coordinates hold nothing."""
        if not coords.is_valid():
            return None
        return self.grid[coords.row][coords.col]

    def is_empty(self, coords: Coords) -> bool:
        return self.piece(coords) is None

    def color_at(self, coords: Coords) -> Optional[Color]:
        piece = self.piece(coords)
        return piece.color if piece else None

    def occupied(self) -> Iterator[tuple[Coords, Piece]]:
        """All occupied cells in row-major order"""
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                piece = self.grid[row][col]
                if piece is not None:
                    yield Coords(row, col), piece

    def locate_color(self, color: Color) -> list[Coords]:
        return [coords for coords, piece in self.occupied() if piece.color == color]

    def king_square(self, color: Color) -> Optional[Coords]:
        """Scan the grid for the king. None if the color has no king (only happens in hand-made positions)."""
        king = Piece(PieceType.KING, color)
        return next((coords for coords, piece in self.occupied() if piece == king), None)

    # --- MUTATION ---
    def place_piece(self, piece: Cell, coords: Coords) -> None:
        self.grid[coords.row][coords.col] = piece

    def remove_piece(self, coords: Coords) -> Cell:
        removed = self.grid[coords.row][coords.col]
        self.grid[coords.row][coords.col] = None
        return removed

    def move_piece(self, from_coords: Coords, to_coords: Coords) -> Cell:
        """Relocate whatever stands on from_coords. Returns what was standing on to_coords."""
        captured = self.piece(to_coords)
        self.grid[to_coords.row][to_coords.col] = self.grid[from_coords.row][from_coords.col]
        self.grid[from_coords.row][from_coords.col] = None
        return captured

    def copy(self) -> Self:
        """Pieces are immutable, so copying the rows is enough for a scratch board"""
        return type(self)([row.copy() for row in self.grid])

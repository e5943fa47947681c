"""
A position on the board

(placed in its own module as multiple other modules need to import it)

Coordinates are (row, col) with row 0 being the 8th rank (black's back rank) and col 0 being the a-file.
This is the orientation the board is drawn in, so the grid can be indexed directly: grid[row][col].
"""

from __future__ import annotations

from dataclasses import dataclass
from string import digits

from src.core.exceptions import InvalidCoordinatesError

# Chess board is always 8x8.
BOARD_SIZE = 8

# Cursor arithmetic may step a couple of squares off the board before validity gets checked.
COORDINATE_MARGIN = 2

# Value of both components when nothing is selected / targeted.
UNDEFINED_POSITION = 99


@dataclass(frozen=True, order=True)
class Coords:
    """Ordering is row-major (row first, then column): used to sort lists of destinations."""

    row: int
    col: int

    def __post_init__(self) -> None:
        if self.row == UNDEFINED_POSITION and self.col == UNDEFINED_POSITION:
            return

        lowest, highest = -COORDINATE_MARGIN, BOARD_SIZE - 1 + COORDINATE_MARGIN
        if not (lowest <= self.row <= highest) or not (lowest <= self.col <= highest):
            raise InvalidCoordinatesError(
                f"Coordinates ({self.row}, {self.col}) are too far off the board. Use Coords.undefined() for 'no position'."
            )

    @classmethod
    def undefined(cls) -> Coords:
        """The 'no selection' sentinel"""
        return cls(UNDEFINED_POSITION, UNDEFINED_POSITION)

    def is_valid(self) -> bool:
        return (0 <= self.row < BOARD_SIZE) and (0 <= self.col < BOARD_SIZE)

    def is_undefined(self) -> bool:
        return self.row == UNDEFINED_POSITION and self.col == UNDEFINED_POSITION

    def offset(self, d_row: int, d_col: int) -> Coords:
        """New coordinates shifted by the given amount. The result may lie outside the board."""
        return Coords(self.row + d_row, self.col + d_col)

    # --- History code: "64" = row 6, col 4 ---
    @classmethod
    def from_hist(cls, code: str) -> Coords:
        if len(code) != 2 or not (code.isascii() and code.isdigit()):
            raise InvalidCoordinatesError(f"History code must be two digits, got {code!r}")
        return cls(int(code[0]), int(code[1]))

    def to_hist(self) -> str:
        return f"{self.row}{self.col}"

    # --- Algebraic notation: 'a8' = (0, 0), 'h1' = (7, 7) ---
    @classmethod
    def from_algebraic(cls, square: str) -> Coords:
        """The rank counts from white's side of the board, while rows count from black's side."""
        if len(square) != 2:
            raise InvalidCoordinatesError(f"Cannot interpret {square!r} as a square")

        file_char, rank_char = square[0].lower(), square[1]
        col = ord(file_char) - ord("a")
        if not (0 <= col < BOARD_SIZE) or rank_char not in digits:
            raise InvalidCoordinatesError(f"Cannot interpret {square!r} as a square")

        row = BOARD_SIZE - int(rank_char)
        coords = cls(row, col)
        if not coords.is_valid():
            raise InvalidCoordinatesError(f"Square {square!r} is not on the board")
        return coords

    def to_algebraic(self) -> str:
        return f"{chr(self.col + ord('a'))}{BOARD_SIZE - self.row}"

    def __str__(self) -> str:
        return self.to_algebraic() if self.is_valid() else f"({self.row}, {self.col})"

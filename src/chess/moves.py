"""
Geometry/Base movement rules shared by the pieces, and the basic definition of a move

The piece modules in src/chess/movement/ combine the two helpers below (rays for sliding pieces, single steps for
the others) with their own direction vectors.

Legality (does the move leave your own king in check?) is checked later by src/chess/check.py
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Protocol, Self

from src.chess.coords import Coords
from src.chess.pieces import FEN_TO_PIECE, PIECE_TO_FEN, PROMOTION_OPTIONS, Cell, Color, Piece, PieceType
from src.core.exceptions import InvalidCoordinatesError


class Board(Protocol):
    """Just the parts the movement rules need: a read-only snapshot of the grid"""

    def piece(self, coords: Coords) -> Cell: ...

    def occupied(self) -> Iterator[tuple[Coords, Piece]]: ...


# (d_row, d_col)
Vector = tuple[int, int]

DIAGONALS: tuple[Vector, ...] = ((-1, -1), (1, 1), (1, -1), (-1, 1))
STRAIGHTS: tuple[Vector, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
KING_DELTAS: tuple[Vector, ...] = DIAGONALS + STRAIGHTS
KNIGHT_DELTAS: tuple[Vector, ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_coords: Coords
    to_coords: Coords
    promote_to: Optional[PieceType] = None

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface:
        ---
        One of the standard chess notations for moves, and the one external engines answer in.

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        * "e1g1": the king castles king side
        """
        uci = uci.strip()
        if len(uci) not in (4, 5):
            raise InvalidCoordinatesError(f"Cannot interpret {uci!r} as a move")
        from_coords = Coords.from_algebraic(uci[:2])
        to_coords = Coords.from_algebraic(uci[2:4])
        promote_to = None
        if len(uci) == 5:
            promote_to = FEN_TO_PIECE.get(uci[4].lower())
            if promote_to not in PROMOTION_OPTIONS:
                raise InvalidCoordinatesError(f"Cannot promote to {uci[4]!r} in {uci!r}")
        return cls(from_coords, to_coords, promote_to)

    def to_uci(self) -> str:
        piece_char = PIECE_TO_FEN[self.promote_to] if self.promote_to else ""
        return f"{self.from_coords.to_algebraic()}{self.to_coords.to_algebraic()}{piece_char}"

    @classmethod
    def from_hist(cls, notation: str) -> Self:
        """Four digit history code, ex) "6444" """
        return cls(Coords.from_hist(notation[:2]), Coords.from_hist(notation[2:]))

    def to_hist(self) -> str:
        return f"{self.from_coords.to_hist()}{self.to_coords.to_hist()}"


def is_ally(board: Board, coords: Coords, color: Color) -> bool:
    piece = board.piece(coords)
    return piece is not None and piece.color == color


def is_enemy_king(board: Board, coords: Coords, color: Color) -> bool:
    """Is the piece on these coordinates the king of the opponent of `color`?"""
    piece = board.piece(coords)
    return piece is not None and piece.type == PieceType.KING and piece.color != color


# --- MOVEMENT RULES ---
def raycasting_move(
    coords: Coords,
    color: Color,
    board: Board,
    directions: tuple[Vector, ...],
    allow_ally_capture: bool,
) -> list[Coords]:
    """
    Raycasting algorithm
    -----

    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or the edge of the board.

    ---
    With `allow_ally_capture` we are not looking for moves but for the squares the piece protects/threatens:
    * an ally blocking the ray is included (it is defended), the ray stops there.
    * the enemy king does not block the ray: the square behind it is threatened as well, otherwise the king could
      'escape' by stepping backwards along the line of attack.
    """
    positions: list[Coords] = []
    for d_row, d_col in directions:
        target = coords
        while True:
            target = target.offset(d_row, d_col)
            if not target.is_valid():
                break

            if board.piece(target) is None:
                positions.append(target)
                continue

            if is_ally(board, target, color):
                if allow_ally_capture:
                    positions.append(target)
                break

            # enemy piece: can be captured
            positions.append(target)
            if not (allow_ally_capture and is_enemy_king(board, target, color)):
                break
    return positions


def single_step_move(
    coords: Coords,
    color: Color,
    board: Board,
    deltas: tuple[Vector, ...],
    allow_ally_capture: bool,
) -> list[Coords]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    positions: list[Coords] = []
    for d_row, d_col in deltas:
        target = coords.offset(d_row, d_col)
        if not target.is_valid():
            continue

        if is_ally(board, target, color) and not allow_ally_capture:
            continue
        positions.append(target)
    return positions

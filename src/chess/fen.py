"""
FEN codec
----

* parsing/validation of a full FEN string (`FENState.from_fen`), used to start a game from a given position
* construction of the FEN string describing the current game (`fen_position`), which is what the external engine gets to see
"""

from dataclasses import dataclass
from string import ascii_lowercase, digits
from typing import Optional, Self

from src.chess.board import Board
from src.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    castling_from_fen,
    castling_to_fen,
    has_untouched_pieces,
)
from src.chess.check import is_getting_checked
from src.chess.coords import BOARD_SIZE, Coords
from src.chess.history import History, en_passant_target
from src.chess.pieces import FEN_TO_PIECE, Color
from src.core.exceptions import InvalidFENError

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# NOTE: the side to move is always written as black. The position is built for the external engine, which
# (in games against the bot) only ever gets asked for black's reply.
ENGINE_SIDE_TO_MOVE = Color.BLACK


def is_valid_fen(fen: str) -> bool:
    """Six space separated fields, each of them well-formed."""
    parts = fen.split(" ")
    if len(parts) != 6:
        return False

    position, color, castling, en_passant, half_move_counter, full_move_counter = parts
    return (
        is_valid_position(position)
        and is_valid_color_code(color)
        and is_valid_castling_rights(castling)
        and is_valid_en_passant(en_passant)
        and is_valid_move_counter(half_move_counter)
        and is_valid_move_counter(full_move_counter)
    )


def is_valid_position(position: str) -> bool:
    """Eight ranks separated by '/', each adding up to eight files (piece letters count 1, digits count as empties)."""
    rank_fens = position.split("/")
    if len(rank_fens) != BOARD_SIZE:
        return False
    return all(_rank_width(rank_fen) == BOARD_SIZE for rank_fen in rank_fens)


def _rank_width(rank_fen: str) -> int:
    """Number of files covered by one rank of the placement, -1 on an unknown character"""
    width = 0
    for character in rank_fen:
        if character in digits:
            width += int(character)
        elif character.lower() in FEN_TO_PIECE:
            width += 1
        else:
            return -1
    return width


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def is_valid_castling_rights(castling: str) -> bool:
    """Either '-' or a subset of KQkq, written in that order without repeats."""
    return castling_to_fen(castling_from_fen(castling)) == castling


def is_valid_en_passant(en_passant: str) -> bool:
    """Valid en passant square encoding should be a square that exists on the board or a '-'"""
    return (en_passant == "-") or is_valid_square(en_passant)


def is_valid_square(square: str) -> bool:
    """Valid square should be a letter for the file + a number for the rank"""
    if len(square) != 2:
        return False

    file_char, rank_char = square[0], square[1]
    if file_char not in ascii_lowercase[:BOARD_SIZE]:
        return False

    return rank_char in digits and 1 <= int(rank_char) <= BOARD_SIZE


def is_valid_move_counter(counter: str) -> bool:
    return counter.isascii() and counter.isdigit()


@dataclass
class FENState:
    """
    Data that can be constructed from a FEN string.
    ----

    FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.

    <board position string><active color><castling rights><en passant square><# half move clock><number turns played>

    * The string to describe the board position is described in the Board class
    * The active color is either "w" or "b"
    * Castling rights are denoted as "k" for king-side or "q" for queen-side. Capital letters for the white pieces, small letters for the black pieces.
        In the starting position: KQkq (all rights available), and as rights get revoked a "-" is used instead of the designated letter.
    * The en passant square indicates the square a pawn can take on. If not available a "-" is used.
    * The half move clock counts the number of moves made since the last pawn move or capture. (Used for the 50 move rule)
    * The number of turns.

    ex) The standard starting position has a FEN
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
    """

    position: str
    color_to_move: Color
    castling_rights: dict[CastlingDirection, bool]
    en_passant_square: Optional[Coords]
    half_move_clock: int
    num_turns: int

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the FEN into data"""

        # raise an exception if invalid FEN:
        parts = fen.split(" ")
        if len(parts) != 6:
            raise InvalidFENError(f"Incorrect FEN position, expected 6 fields but got {len(parts)}: {fen!r}")
        if not is_valid_color_code(parts[1]):
            raise InvalidFENError(f"Color should be either w or b, {parts[1]!r} is invalid")
        if not is_valid_fen(fen):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen!r}")

        (
            position,
            active_color,
            castling_str,
            en_passant_algebraic,
            half_move_clock,
            num_turns,
        ) = parts

        color_to_move = Color.WHITE if active_color == "w" else Color.BLACK
        castling_rights = castling_from_fen(castling_str)
        en_passant_square = (
            Coords.from_algebraic(en_passant_algebraic)
            if en_passant_algebraic != "-"
            else None
        )
        return cls(
            position,
            color_to_move,
            castling_rights,
            en_passant_square,
            int(half_move_clock),
            int(num_turns),
        )

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data"""
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        castling_str = castling_to_fen(self.castling_rights)

        en_passant_algebraic = (
            self.en_passant_square.to_algebraic()
            if self.en_passant_square is not None
            else "-"
        )
        return f"{self.position} {active_color} {castling_str} {en_passant_algebraic} {self.half_move_clock} {self.num_turns}"

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)


def castling_rights(board: Board, history: History) -> dict[CastlingDirection, bool]:
    """
    Rights are derived, not tracked: the king/rook pair must be untouched and the king must not be in check right now.
    """
    in_check = {color: is_getting_checked(board, color, history) for color in Color}
    return {
        direction: has_untouched_pieces(board, direction, history)
        and not in_check[CASTLING_RULES[direction].color]
        for direction in CastlingDirection
    }


def fen_position(board: Board, history: History, half_move_clock: int) -> str:
    """
    Describe the current game as FEN
    ----

    * side to move: always black (see ENGINE_SIDE_TO_MOVE)
    * en passant square: the square the pawn jumped over, if the last ply was a double step
    * number of turns: half the length of the history
    """
    state = FENState(
        position=board.to_fen(),
        color_to_move=ENGINE_SIDE_TO_MOVE,
        castling_rights=castling_rights(board, history),
        en_passant_square=en_passant_target(history),
        half_move_clock=half_move_clock,
        num_turns=len(history) // 2,
    )
    return state.to_fen()

"""Unit tests for src/chess/moves.py and the movement rules in src/chess/movement/"""

import pytest

from src.chess.board import Board
from src.chess.coords import Coords
from src.chess.history import HistoryRecord
from src.chess.movement.rules import piece_move, protected_positions, threatened_positions
from src.chess.moves import DIAGONALS, Move, raycasting_move, single_step_move
from src.chess.pieces import Color, Piece, PieceType
from src.core.exceptions import InvalidCoordinatesError


def lone_piece(piece: Piece, coords: Coords) -> Board:
    return Board.from_pieces({coords: piece})


def squares(*names: str) -> set[Coords]:
    return {Coords.from_algebraic(name) for name in names}


# -- MOVE CREATION, ENCODING/DECODING --
@pytest.mark.parametrize(
    "uci, from_square, to_square, promote_to",
    [
        ("e2e4", "e2", "e4", None),
        ("g3a7", "g3", "a7", None),
        ("e7e8q", "e7", "e8", PieceType.QUEEN),
        ("a2a1n", "a2", "a1", PieceType.KNIGHT),
    ],
)
def test_move_from_uci(uci: str, from_square: str, to_square: str, promote_to: PieceType | None) -> None:
    move = Move.from_uci(uci)
    assert move.from_coords == Coords.from_algebraic(from_square)
    assert move.to_coords == Coords.from_algebraic(to_square)
    assert move.promote_to == promote_to
    assert move.to_uci() == uci


@pytest.mark.parametrize("uci", ["e2", "e2e4e5", "e2e4x", "z2e4", "e7e8k", "e2e1p"])
def test_invalid_uci_raises(uci: str) -> None:
    with pytest.raises(InvalidCoordinatesError):
        Move.from_uci(uci)


def test_move_history_code() -> None:
    move = Move.from_hist("6444")
    assert move == Move(Coords(6, 4), Coords(4, 4))
    assert move.to_hist() == "6444"


# -- GEOMETRY HELPERS --
def test_raycasting_stops_at_pieces() -> None:
    """Enemy pieces can be captured (and block), allies just block"""
    board = Board.from_pieces(
        {
            Coords(4, 4): Piece(PieceType.BISHOP, Color.WHITE),
            Coords(2, 2): Piece(PieceType.PAWN, Color.BLACK),
            Coords(6, 6): Piece(PieceType.PAWN, Color.WHITE),
        }
    )
    positions = raycasting_move(Coords(4, 4), Color.WHITE, board, DIAGONALS, False)
    assert Coords(2, 2) in positions
    assert Coords(1, 1) not in positions
    assert Coords(5, 5) in positions
    assert Coords(6, 6) not in positions


def test_raycasting_protection_looks_through_enemy_king() -> None:
    """The square behind the king is attacked too, the king cannot escape along the line of attack"""
    board = Board.from_pieces(
        {
            Coords(4, 0): Piece(PieceType.ROOK, Color.WHITE),
            Coords(4, 3): Piece(PieceType.KING, Color.BLACK),
        }
    )
    protected = raycasting_move(Coords(4, 0), Color.WHITE, board, ((0, 1),), True)
    assert Coords(4, 3) in protected
    assert Coords(4, 4) in protected


def test_single_step_protects_allies() -> None:
    board = Board.from_pieces(
        {
            Coords(7, 7): Piece(PieceType.KING, Color.WHITE),
            Coords(6, 7): Piece(PieceType.PAWN, Color.WHITE),
        }
    )
    deltas = ((-1, 0), (0, -1))
    assert single_step_move(Coords(7, 7), Color.WHITE, board, deltas, False) == [Coords(7, 6)]
    assert single_step_move(Coords(7, 7), Color.WHITE, board, deltas, True) == [Coords(6, 7), Coords(7, 6)]


# -- EVERY PIECE ON AN EMPTY BOARD --
def test_bishop_on_empty_board() -> None:
    board = lone_piece(Piece(PieceType.BISHOP, Color.WHITE), Coords(4, 4))
    positions = piece_move(PieceType.BISHOP, Coords(4, 4), Color.WHITE, board, False, [])
    assert len(positions) == 13
    assert set(positions) == squares(
        "a8", "b7", "c6", "d5", "f3", "g2", "h1", "b1", "c2", "d3", "f5", "g6", "h7"
    )


def test_rook_on_empty_board() -> None:
    board = lone_piece(Piece(PieceType.ROOK, Color.BLACK), Coords(0, 0))
    positions = piece_move(PieceType.ROOK, Coords(0, 0), Color.BLACK, board, False, [])
    assert len(positions) == 14
    assert set(positions) == squares(
        "b8", "c8", "d8", "e8", "f8", "g8", "h8", "a7", "a6", "a5", "a4", "a3", "a2", "a1"
    )


def test_queen_on_empty_board() -> None:
    board = lone_piece(Piece(PieceType.QUEEN, Color.WHITE), Coords(4, 3))
    positions = piece_move(PieceType.QUEEN, Coords(4, 3), Color.WHITE, board, False, [])
    assert len(positions) == 27


@pytest.mark.parametrize(
    "coords, expected_count",
    [(Coords(4, 4), 8), (Coords(0, 0), 2), (Coords(7, 6), 3), (Coords(3, 0), 4)],
)
def test_knight_on_empty_board(coords: Coords, expected_count: int) -> None:
    board = lone_piece(Piece(PieceType.KNIGHT, Color.WHITE), coords)
    positions = piece_move(PieceType.KNIGHT, coords, Color.WHITE, board, False, [])
    assert len(positions) == expected_count


def test_knight_jumps_over_pieces() -> None:
    board = Board.starting_position()
    positions = piece_move(PieceType.KNIGHT, Coords(7, 6), Color.WHITE, board, False, [])
    assert set(positions) == squares("f3", "h3")


@pytest.mark.parametrize(
    "coords, expected_count",
    [(Coords(4, 4), 8), (Coords(0, 0), 3), (Coords(3, 7), 5)],
)
def test_king_on_empty_board(coords: Coords, expected_count: int) -> None:
    board = lone_piece(Piece(PieceType.KING, Color.BLACK), coords)
    positions = piece_move(PieceType.KING, coords, Color.BLACK, board, False, [])
    assert len(positions) == expected_count


# -- PAWNS --
@pytest.mark.parametrize(
    "color, coords, expected",
    [
        (Color.WHITE, Coords(6, 4), {Coords(5, 4), Coords(4, 4)}),
        (Color.BLACK, Coords(1, 2), {Coords(2, 2), Coords(3, 2)}),
        (Color.WHITE, Coords(5, 4), {Coords(4, 4)}),
        (Color.BLACK, Coords(4, 4), {Coords(5, 4)}),
    ],
)
def test_pawn_pushes(color: Color, coords: Coords, expected: set[Coords]) -> None:
    """Two squares from the starting row only, white goes up the board, black goes down"""
    board = lone_piece(Piece(PieceType.PAWN, color), coords)
    assert set(piece_move(PieceType.PAWN, coords, color, board, False, [])) == expected


def test_blocked_pawn() -> None:
    board = Board.from_pieces(
        {
            Coords(6, 4): Piece(PieceType.PAWN, Color.WHITE),
            Coords(5, 4): Piece(PieceType.KNIGHT, Color.BLACK),
        }
    )
    assert piece_move(PieceType.PAWN, Coords(6, 4), Color.WHITE, board, False, []) == []


def test_double_step_needs_both_squares_free() -> None:
    board = Board.from_pieces(
        {
            Coords(6, 4): Piece(PieceType.PAWN, Color.WHITE),
            Coords(4, 4): Piece(PieceType.KNIGHT, Color.BLACK),
        }
    )
    assert piece_move(PieceType.PAWN, Coords(6, 4), Color.WHITE, board, False, []) == [Coords(5, 4)]


def test_pawn_captures_diagonally() -> None:
    board = Board.from_pieces(
        {
            Coords(4, 4): Piece(PieceType.PAWN, Color.WHITE),
            Coords(3, 3): Piece(PieceType.ROOK, Color.BLACK),
            Coords(3, 5): Piece(PieceType.ROOK, Color.WHITE),
        }
    )
    positions = piece_move(PieceType.PAWN, Coords(4, 4), Color.WHITE, board, False, [])
    assert set(positions) == {Coords(3, 4), Coords(3, 3)}


def test_pawn_protects_its_diagonals_only() -> None:
    board = lone_piece(Piece(PieceType.PAWN, Color.BLACK), Coords(1, 0))
    protected = protected_positions(Coords(1, 0), Piece(PieceType.PAWN, Color.BLACK), board, [])
    assert protected == [Coords(2, 1)]


def test_en_passant_right_after_double_step() -> None:
    """Black pawn d7-d5 lands next to the white pawn on e5: exd6 is possible"""
    board = Board.from_pieces(
        {
            Coords(3, 4): Piece(PieceType.PAWN, Color.WHITE),
            Coords(3, 3): Piece(PieceType.PAWN, Color.BLACK),
        }
    )
    history = [HistoryRecord(PieceType.PAWN, "1333")]
    positions = piece_move(PieceType.PAWN, Coords(3, 4), Color.WHITE, board, False, history)
    assert Coords(2, 3) in positions


def test_no_en_passant_after_single_steps() -> None:
    board = Board.from_pieces(
        {
            Coords(3, 4): Piece(PieceType.PAWN, Color.WHITE),
            Coords(3, 3): Piece(PieceType.PAWN, Color.BLACK),
        }
    )
    history = [HistoryRecord(PieceType.PAWN, "2333")]
    positions = piece_move(PieceType.PAWN, Coords(3, 4), Color.WHITE, board, False, history)
    assert Coords(2, 3) not in positions


# -- THREATS --
def test_threatened_positions_of_starting_position() -> None:
    """Black threatens the whole 6th rank and defends all of its own pieces (except its rooks on the corners)"""
    threatened = threatened_positions(Board.starting_position(), Color.BLACK, [])
    assert all(Coords(2, col) in threatened for col in range(8))
    assert Coords(3, 4) not in threatened
    assert Coords(0, 0) not in threatened
    assert Coords(0, 4) in threatened

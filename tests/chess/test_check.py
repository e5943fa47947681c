"""Unit tests for src/chess/check.py"""

from src.chess.board import Board
from src.chess.check import (
    authorized_positions,
    is_getting_checked,
    is_putting_yourself_in_check,
    simulate_move,
)
from src.chess.coords import Coords
from src.chess.history import HistoryRecord
from src.chess.pieces import Color, Piece, PieceType

WHITE_KING = Piece(PieceType.KING, Color.WHITE)
BLACK_KING = Piece(PieceType.KING, Color.BLACK)


def test_is_getting_checked_by_rook() -> None:
    board = Board.from_pieces(
        {
            Coords(0, 4): BLACK_KING,
            Coords(7, 4): Piece(PieceType.ROOK, Color.WHITE),
        }
    )
    assert is_getting_checked(board, Color.BLACK, [])
    assert not is_getting_checked(board, Color.WHITE, [])


def test_piece_in_front_blocks_the_check() -> None:
    board = Board.from_pieces(
        {
            Coords(0, 4): BLACK_KING,
            Coords(1, 4): Piece(PieceType.PAWN, Color.BLACK),
            Coords(7, 4): Piece(PieceType.ROOK, Color.WHITE),
        }
    )
    assert not is_getting_checked(board, Color.BLACK, [])


def test_pawn_gives_check_diagonally_only() -> None:
    board = Board.from_pieces(
        {
            Coords(3, 3): WHITE_KING,
            Coords(2, 3): Piece(PieceType.PAWN, Color.BLACK),
        }
    )
    assert not is_getting_checked(board, Color.WHITE, [])
    board.move_piece(Coords(2, 3), Coords(2, 2))
    assert is_getting_checked(board, Color.WHITE, [])


def test_board_without_king_is_never_in_check() -> None:
    board = Board.from_pieces({Coords(0, 0): Piece(PieceType.QUEEN, Color.BLACK)})
    assert not is_getting_checked(board, Color.WHITE, [])


def test_king_cannot_step_into_check() -> None:
    board = Board.from_pieces(
        {
            Coords(7, 4): WHITE_KING,
            Coords(0, 3): Piece(PieceType.ROOK, Color.BLACK),
            Coords(0, 7): BLACK_KING,
        }
    )
    positions = authorized_positions(Coords(7, 4), Color.WHITE, board, [])
    assert all(target.col != 3 for target in positions)
    assert set(positions) == {Coords(6, 4), Coords(6, 5), Coords(7, 5)}


def test_king_cannot_retreat_along_the_line_of_attack() -> None:
    board = Board.from_pieces(
        {
            Coords(4, 4): WHITE_KING,
            Coords(4, 0): Piece(PieceType.ROOK, Color.BLACK),
            Coords(0, 7): BLACK_KING,
        }
    )
    positions = authorized_positions(Coords(4, 4), Color.WHITE, board, [])
    assert Coords(4, 5) not in positions
    assert Coords(4, 3) not in positions


def test_king_cannot_capture_a_defended_piece() -> None:
    board = Board.from_pieces(
        {
            Coords(7, 4): WHITE_KING,
            Coords(6, 4): Piece(PieceType.QUEEN, Color.BLACK),
            Coords(5, 4): Piece(PieceType.ROOK, Color.BLACK),
            Coords(0, 0): BLACK_KING,
        }
    )
    assert Coords(6, 4) not in authorized_positions(Coords(7, 4), Color.WHITE, board, [])


def test_pinned_bishop_stays_on_the_diagonal() -> None:
    """Bishop on d2 pinned to the king on e1 by the queen on b4: only c3 and capturing on b4 are left"""
    board = Board.from_pieces(
        {
            Coords(7, 4): WHITE_KING,
            Coords(6, 3): Piece(PieceType.BISHOP, Color.WHITE),
            Coords(4, 1): Piece(PieceType.QUEEN, Color.BLACK),
            Coords(0, 4): BLACK_KING,
        }
    )
    positions = authorized_positions(Coords(6, 3), Color.WHITE, board, [])
    assert set(positions) == {Coords(5, 2), Coords(4, 1)}


def test_pinned_knight_cannot_move() -> None:
    board = Board.from_pieces(
        {
            Coords(7, 4): WHITE_KING,
            Coords(6, 4): Piece(PieceType.KNIGHT, Color.WHITE),
            Coords(0, 4): Piece(PieceType.ROOK, Color.BLACK),
            Coords(0, 0): BLACK_KING,
        }
    )
    assert authorized_positions(Coords(6, 4), Color.WHITE, board, []) == []


def test_only_moves_resolving_the_check_are_authorized() -> None:
    """Rook on e5 checks the king on e1: from a1 the white rook cannot help, from a3 it can only block on e3"""
    board = Board.from_pieces(
        {
            Coords(7, 4): WHITE_KING,
            Coords(7, 0): Piece(PieceType.ROOK, Color.WHITE),
            Coords(3, 4): Piece(PieceType.ROOK, Color.BLACK),
            Coords(0, 0): BLACK_KING,
        }
    )
    positions = authorized_positions(Coords(7, 0), Color.WHITE, board, [])
    assert positions == []

    board.move_piece(Coords(7, 0), Coords(5, 0))
    assert authorized_positions(Coords(5, 0), Color.WHITE, board, []) == [Coords(5, 4)]


def test_opponent_pieces_have_no_authorized_positions() -> None:
    board = Board.starting_position()
    assert authorized_positions(Coords(1, 4), Color.WHITE, board, []) == []
    assert authorized_positions(Coords(4, 4), Color.WHITE, board, []) == []


def test_is_putting_yourself_in_check() -> None:
    board = Board.from_pieces(
        {
            Coords(7, 4): WHITE_KING,
            Coords(6, 4): Piece(PieceType.ROOK, Color.WHITE),
            Coords(0, 4): Piece(PieceType.QUEEN, Color.BLACK),
            Coords(0, 0): BLACK_KING,
        }
    )
    assert is_putting_yourself_in_check(Coords(6, 4), Coords(6, 3), board, [])
    assert not is_putting_yourself_in_check(Coords(6, 4), Coords(2, 4), board, [])


def test_simulated_en_passant_removes_the_passed_pawn() -> None:
    """Taking en passant could expose the king on the rank: the captured pawn must disappear on the scratch board too"""
    board = Board.from_pieces(
        {
            Coords(3, 0): WHITE_KING,
            Coords(3, 1): Piece(PieceType.PAWN, Color.WHITE),
            Coords(3, 2): Piece(PieceType.PAWN, Color.BLACK),
            Coords(3, 7): Piece(PieceType.ROOK, Color.BLACK),
            Coords(0, 7): BLACK_KING,
        }
    )
    history = [HistoryRecord(PieceType.PAWN, "1232")]
    assert Coords(2, 2) not in authorized_positions(Coords(3, 1), Color.WHITE, board, history)

    scratch = board.copy()
    simulate_move(scratch, Coords(3, 1), Coords(2, 2))
    assert scratch.is_empty(Coords(3, 2))
    assert scratch.piece(Coords(2, 2)) == Piece(PieceType.PAWN, Color.WHITE)

"""Unit tests for src/chess/history.py"""

import pytest

from src.chess.coords import Coords
from src.chess.history import (
    HistoryRecord,
    did_pawn_move_two_cells,
    did_piece_already_move,
    en_passant_target,
    history_lines,
)
from src.chess.pieces import Color, PieceType
from src.core.exceptions import InvalidCoordinatesError


def test_record_from_move() -> None:
    record = HistoryRecord.from_move(PieceType.PAWN, Coords(6, 4), Coords(4, 4))
    assert record.notation == "6444"
    assert record.origin == Coords(6, 4)
    assert record.destination == Coords(4, 4)
    assert record.to_algebraic() == "e2-e4"


@pytest.mark.parametrize("notation", ["644", "64444", "6a44"])
def test_malformed_record_raises(notation: str) -> None:
    with pytest.raises(InvalidCoordinatesError):
        HistoryRecord(PieceType.PAWN, notation)


def test_did_piece_already_move() -> None:
    history = [HistoryRecord(PieceType.KING, "7475"), HistoryRecord(PieceType.KING, "7574")]
    assert did_piece_already_move(history, Coords(7, 4))
    assert not did_piece_already_move(history, Coords(7, 7))


@pytest.mark.parametrize(
    "history, expected",
    [
        ([], None),
        ([HistoryRecord(PieceType.PAWN, "6444")], Coords(5, 4)),
        ([HistoryRecord(PieceType.PAWN, "1333")], Coords(2, 3)),
        ([HistoryRecord(PieceType.PAWN, "6454")], None),
        ([HistoryRecord(PieceType.ROOK, "7755")], None),
        ([HistoryRecord(PieceType.PAWN, "6444"), HistoryRecord(PieceType.KNIGHT, "0625")], None),
    ],
)
def test_en_passant_target(history: list[HistoryRecord], expected: Coords | None) -> None:
    assert en_passant_target(history) == expected
    assert did_pawn_move_two_cells(history) is (expected is not None)


def test_history_lines() -> None:
    history = [
        HistoryRecord(PieceType.PAWN, "6444"),
        HistoryRecord(PieceType.PAWN, "1434"),
        HistoryRecord(PieceType.KNIGHT, "7655"),
    ]
    lines = history_lines(history)
    assert lines[0] == "1.  ♙ e2-e4     ♟ e7-e5"
    assert lines[1].startswith("2.  ♘ g1-f3")
    assert lines[1].rstrip() == "2.  ♘ g1-f3"
    assert len(lines) == 2


def test_empty_history_has_no_lines() -> None:
    assert history_lines([]) == []


def test_history_lines_when_black_moved_first() -> None:
    history = [HistoryRecord(PieceType.PAWN, "1434"), HistoryRecord(PieceType.KNIGHT, "7655")]
    lines = history_lines(history, first_to_move=Color.BLACK)
    assert lines[0].startswith("1.   ")
    assert lines[0].endswith("♟ e7-e5")
    assert "♙" not in lines[0]
    assert lines[1].rstrip() == "2.  ♘ g1-f3"
    assert history_lines([], first_to_move=Color.BLACK) == []

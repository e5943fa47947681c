"""
The Game class is the entrypoint into the domain layer.
It owns the board, the history and whose turn it is, and orchestrates everything required to play a ply:
selecting pieces, applying moves (castling / en passant / promotion included), detecting the end of the game and
taking moves back.

The cursor/selection methods mirror what a (terminal) UI does with the keyboard:

Idle --select_cell--> PieceSelected --cursor_*--> (cycle destinations) --select_cell--> move applied
    --> PromotionPending (pawn reached the last row) --select_cell--> promotion resolved
    --> Idle (next ply), or Checkmate / Draw (input frozen)
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Protocol, Self

from loguru import logger

from src.chess.board import Board
from src.chess.castling import CASTLING_RULES, castling_direction_of, is_castling_move
from src.chess.check import authorized_positions, is_getting_checked
from src.chess.coords import BOARD_SIZE, Coords
from src.chess.fen import FENState, fen_position
from src.chess.history import (
    History,
    HistoryRecord,
    UndoRecord,
    did_pawn_move_two_cells,
    history_lines,
)
from src.chess.movement.pawn import FORWARD, LAST_ROW
from src.chess.moves import Move
from src.chess.pieces import PROMOTION_OPTIONS, Color, Piece, PieceType
from src.core.exceptions import EngineError, InvalidCoordinatesError
from src.core.shared_types import Status
from src.engine.protocol import ChessEngine

FIFTY_MOVE_RULE = 50
REPETITION_WINDOW = 9
DEFAULT_CURSOR = Coords(4, 4)


class FenLog(Protocol):
    """Append-only sink for the FEN strings of a game (post-game review)."""

    def append(self, fen: str) -> None: ...


@dataclass
class Game:
    board: Board
    player_turn: Color = Color.WHITE
    move_history: History = field(default_factory=list)

    # --- UI state ---
    cursor_coordinates: Coords = DEFAULT_CURSOR
    selected_coordinates: Coords = field(default_factory=Coords.undefined)
    selected_piece_cursor: int = 0
    old_cursor_position: Coords = field(default_factory=Coords.undefined)
    promotion_cursor: int = 0

    # --- game state flags ---
    checkmate: bool = False
    draw: bool = False
    promotion_pending: bool = False
    consecutive_non_pawn_or_capture: int = 0

    # --- injected collaborators ---
    engine: Optional[ChessEngine] = None
    is_game_against_bot: bool = False
    fen_log: Optional[FenLog] = None

    # One record per ply applied by this game (the history may start with plies it did not apply itself).
    undo_stack: list[UndoRecord] = field(default_factory=list)

    # -- CREATION LOGIC --
    @classmethod
    def new(cls) -> Self:
        """Standard starting position, white to move"""
        return cls(Board.starting_position())

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """
        Start from the position described by the FEN string (raises InvalidFENError).

        NOTE castling rights and en passant squares are derived from the history, which is empty here:
        kings/rooks on their starting squares count as untouched.
        """
        state = FENState.from_fen(fen)
        logger.debug(f"Creating game from FEN: {fen}")
        return cls(
            board=Board.from_fen(state.position),
            player_turn=state.color_to_move,
            consecutive_non_pawn_or_capture=state.half_move_clock,
        )

    def set_engine(self, engine: ChessEngine) -> None:
        """Play against the engine: it answers every move of the human player (who plays white)."""
        self.engine = engine
        self.is_game_against_bot = True

    # -- QUERIES --
    @property
    def status(self) -> Status:
        if self.checkmate:
            return Status.CHECKMATE
        if self.draw:
            if self.consecutive_non_pawn_or_capture == FIFTY_MOVE_RULE:
                return Status.DRAW_FIFTY_HALF_MOVE_RULE
            if self.draw_by_repetition():
                return Status.DRAW_REPETITION
            return Status.STALEMATE
        if self.promotion_pending:
            return Status.PROMOTION_PENDING
        return Status.IN_PROGRESS

    @property
    def is_over(self) -> bool:
        return self.checkmate or self.draw

    def is_cell_selected(self) -> bool:
        return not self.selected_coordinates.is_undefined()

    def get_authorized_positions(self, coords: Coords) -> list[Coords]:
        """Legal destinations of the piece on `coords`, sorted row-major. Empty for empty/invalid cells."""
        piece = self.board.piece(coords)
        if piece is None:
            return []
        return sorted(authorized_positions(coords, piece.color, self.board, self.move_history))

    def number_of_authorized_positions(self) -> int:
        """How many legal moves does the side to move have?"""
        return sum(
            len(authorized_positions(coords, self.player_turn, self.board, self.move_history))
            for coords in self.board.locate_color(self.player_turn)
        )

    def is_check(self) -> bool:
        return is_getting_checked(self.board, self.player_turn, self.move_history)

    def fen_position(self) -> str:
        return fen_position(self.board, self.move_history, self.consecutive_non_pawn_or_capture)

    def did_pawn_move_two_cells(self) -> bool:
        return did_pawn_move_two_cells(self.move_history)

    def history_lines(self) -> list[str]:
        # player_turn is the side to move after the last ply, so an odd history was started by the other side
        first_to_move = self.player_turn.opposite() if len(self.move_history) % 2 else self.player_turn
        return history_lines(self.move_history, first_to_move)

    def moves_uci(self) -> list[str]:
        """The plies applied by this game in UCI notation, promotions included (ex. ["e2e4", "e7e5"])"""
        return [
            Move(undo.from_coords, undo.to_coords, undo.promoted_to).to_uci()
            for undo in self.undo_stack
        ]

    # --- CHECKS FOR ENDING THE GAME ---
    def is_checkmate(self) -> bool:
        if not self.is_check():
            return False
        return self.number_of_authorized_positions() == 0

    def is_stalemate(self) -> bool:
        return not self.is_check() and self.number_of_authorized_positions() == 0

    def is_draw(self) -> bool:
        return (
            self.is_stalemate()
            or self.consecutive_non_pawn_or_capture == FIFTY_MOVE_RULE
            or self.draw_by_repetition()
        )

    def refresh_flags(self) -> None:
        """Re-evaluate checkmate / draw / pending promotion for the side to move"""
        self.checkmate = self.is_checkmate()
        self.draw = not self.checkmate and self.is_draw()
        self.promotion_pending = self.is_latest_move_promotion()

    def draw_by_repetition(self) -> bool:
        """
        Approximation of the threefold repetition: the same two plies of each side got played back and forth.

        Looking at the last 9 plies (newest first): plies 0-1 repeat as 4-5 and as 8, plies 2-3 repeat as 6-7.
        Positions reached through a different move order are not detected.
        """
        if len(self.move_history) < REPETITION_WINDOW:
            return False
        last = self.move_history[::-1][:REPETITION_WINDOW]
        return (
            (last[0], last[1]) == (last[4], last[5])
            and last[4] == last[8]
            and (last[2], last[3]) == (last[6], last[7])
        )

    def is_latest_move_promotion(self) -> bool:
        """Did the last ply bring a pawn to the last row (and is it still waiting to get promoted)?"""
        if not self.move_history:
            return False
        destination = self.move_history[-1].destination
        piece = self.board.piece(destination)
        return (
            piece is not None
            and piece.type == PieceType.PAWN
            and destination.row == LAST_ROW[piece.color]
        )

    # -- CURSOR / SELECTION (what the UI calls) --
    def cursor_up(self) -> None:
        if self.is_over or self.promotion_pending:
            return
        if self.is_cell_selected():
            self.move_selected_piece_cursor(False, -1)
        elif self.cursor_coordinates.row > 0:
            self.cursor_coordinates = self.cursor_coordinates.offset(-1, 0)

    def cursor_down(self) -> None:
        if self.is_over or self.promotion_pending:
            return
        if self.is_cell_selected():
            self.move_selected_piece_cursor(False, 1)
        elif self.cursor_coordinates.row < BOARD_SIZE - 1:
            self.cursor_coordinates = self.cursor_coordinates.offset(1, 0)

    def cursor_left(self) -> None:
        # During a promotion the cursor picks the piece to promote to
        if self.promotion_pending:
            self.promotion_cursor = (self.promotion_cursor - 1) % len(PROMOTION_OPTIONS)
        elif not self.is_over:
            if self.is_cell_selected():
                self.move_selected_piece_cursor(False, -1)
            elif self.cursor_coordinates.col > 0:
                self.cursor_coordinates = self.cursor_coordinates.offset(0, -1)

    def cursor_right(self) -> None:
        if self.promotion_pending:
            self.promotion_cursor = (self.promotion_cursor + 1) % len(PROMOTION_OPTIONS)
        elif not self.is_over:
            if self.is_cell_selected():
                self.move_selected_piece_cursor(False, 1)
            elif self.cursor_coordinates.col < BOARD_SIZE - 1:
                self.cursor_coordinates = self.cursor_coordinates.offset(0, 1)

    def move_selected_piece_cursor(self, first_time_moving: bool, direction: int) -> None:
        """With a piece selected, the cursor jumps between its legal destinations (in row-major order)."""
        positions = self.get_authorized_positions(self.selected_coordinates)
        if not positions:
            self.cursor_coordinates = Coords.undefined()
            return

        if not (first_time_moving and self.selected_piece_cursor == 0):
            self.selected_piece_cursor = (self.selected_piece_cursor + direction) % len(positions)
        self.cursor_coordinates = positions[self.selected_piece_cursor]

    def select_cell(self) -> None:
        """
        The 'enter' key
        ----

        * a promotion is pending: promote to the piece under the promotion cursor
        * nothing selected: select the piece under the cursor (if it is yours and can move)
        * a piece selected: move it to the cursor, hand the turn over (and let the bot answer)

        Raises EngineError if the bot could not answer; the human move stays on the board and `play_bot_turn` can be retried.
        """
        self.export_fen_position()

        if self.promotion_pending:
            self.promote_piece()
            if self.is_game_against_bot and self.player_turn != Color.WHITE:
                self.play_bot_turn()
        elif not self.is_over:
            if not self.is_cell_selected():
                self._select_piece_under_cursor()
            elif self.cursor_coordinates.is_valid():
                self.move_piece(self.selected_coordinates, self.cursor_coordinates)
                self.unselect_cell()
                self.switch_player_turn()
                if self.is_game_against_bot:
                    self.play_bot_turn()

        # NOTE a resolved promotion can end the game just like any other ply
        self.refresh_flags()
        if self.is_over:
            logger.info(f"Game over: {self.status}")

    def _select_piece_under_cursor(self) -> None:
        piece = self.board.piece(self.cursor_coordinates)
        if piece is None or piece.color != self.player_turn:
            return
        # Check if the piece on the cell can move before selecting it
        if not self.get_authorized_positions(self.cursor_coordinates):
            return

        self.selected_coordinates = self.cursor_coordinates
        self.old_cursor_position = self.cursor_coordinates
        self.move_selected_piece_cursor(True, 1)

    def unselect_cell(self) -> None:
        if self.is_cell_selected():
            self.selected_coordinates = Coords.undefined()
            self.selected_piece_cursor = 0
            self.cursor_coordinates = self.old_cursor_position

    def switch_player_turn(self) -> None:
        self.player_turn = self.player_turn.opposite()

    def export_fen_position(self) -> None:
        """Every selection gets logged as FEN for post-game review."""
        if self.fen_log is not None:
            self.fen_log.append(self.fen_position())

    # -- BOT TURN --
    def play_bot_turn(self) -> None:
        """Let the engine answer, unless the human still has to pick a promotion or the game ended."""
        self.promotion_pending = self.is_latest_move_promotion()
        if self.promotion_pending:
            return

        self.checkmate = self.is_checkmate()
        self.draw = self.is_draw()
        if self.is_over:
            return

        try:
            self.bot_move()
        except EngineError as exc:
            logger.error(f"Engine could not play a move: {exc}")
            raise
        self.switch_player_turn()

    def bot_move(self) -> None:
        """
        Ask the engine for a move and play it.
        ----

        1. send the position (as FEN)
        2. read the best move in UCI notation, ex. "e7e5" or "a2a1q"
        3. decode into coordinates and check it is a legal move
        4. play it (promotions get resolved right away)
        """
        if self.engine is None:
            raise EngineError("No chess engine attached to this game")

        self.engine.set_position(self.fen_position())
        answer = self.engine.best_move()
        try:
            move = Move.from_uci(answer)
        except InvalidCoordinatesError as exc:
            raise EngineError(f"Cannot interpret engine move {answer!r}") from exc

        piece = self.board.piece(move.from_coords)
        if piece is None or piece.color != self.player_turn:
            raise EngineError(f"Engine suggested a move for the wrong side: {answer!r}")

        legal_destinations = self.get_authorized_positions(move.from_coords)
        is_rook_square_castle = self._is_castling_notation(move)
        if move.to_coords not in legal_destinations and not is_rook_square_castle:
            raise EngineError(f"Engine suggested an illegal move: {answer!r}")

        logger.debug(f"Engine plays {answer}")
        self.move_piece(move.from_coords, move.to_coords)
        if self.is_latest_move_promotion():
            self.promote_last_move(move.promote_to or PieceType.QUEEN)

    def _is_castling_notation(self, move: Move) -> bool:
        """Castling reported as 'king takes own rook' (e8h8): legal if the king may land on its castling square."""
        piece = self.board.piece(move.from_coords)
        if piece is None or not is_castling_move(piece, move.from_coords, move.to_coords):
            return False
        direction = castling_direction_of(piece.color, move.from_coords, move.to_coords)
        if direction is None:
            return False
        return CASTLING_RULES[direction].king_to in self.get_authorized_positions(move.from_coords)

    # -- APPLYING MOVES --
    def move_piece(self, from_coords: Coords, to_coords: Coords) -> None:
        """
        Apply a move to the board
        -----

        Invalid coordinates (ex. 'nothing selected') or an empty origin are silently ignored.
        Does NOT check legality and does NOT hand over the turn.

        1. update the 50 move counter (reset on pawn move or capture)
        2. en passant: remove the pawn that got passed
        3. castling: the king lands two columns towards the rook, the rook jumps over it
        4. record the ply in the history (and what is needed to take it back)
        """
        if not from_coords.is_valid() or not to_coords.is_valid():
            return

        piece = self.board.piece(from_coords)
        if piece is None:
            return

        previous_counter = self.consecutive_non_pawn_or_capture
        captured = self.board.piece(to_coords)
        captured_coords: Optional[Coords] = to_coords if captured is not None else None
        rook_from: Optional[Coords] = None
        rook_to: Optional[Coords] = None
        landing = to_coords

        castling = (
            castling_direction_of(piece.color, from_coords, to_coords)
            if is_castling_move(piece, from_coords, to_coords)
            else None
        )
        if castling is not None:
            # NOTE the destination can be the rook's own square, that is not a capture
            rule = CASTLING_RULES[castling]
            captured, captured_coords = None, None
            landing, rook_from, rook_to = rule.king_to, rule.rook_from, rule.rook_to
            self.board.move_piece(from_coords, landing)
            self.board.move_piece(rook_from, rook_to)
        else:
            if self._is_en_passant(piece, from_coords, to_coords):
                captured_coords = to_coords.offset(-FORWARD[piece.color], 0)
                captured = self.board.remove_piece(captured_coords)
            self.board.move_piece(from_coords, to_coords)

        if piece.type == PieceType.PAWN or captured is not None:
            self.consecutive_non_pawn_or_capture = 0
        else:
            self.consecutive_non_pawn_or_capture += 1

        record = HistoryRecord.from_move(piece.type, from_coords, landing)
        self.move_history.append(record)
        self.undo_stack.append(
            UndoRecord(
                moved_piece=piece,
                from_coords=from_coords,
                to_coords=landing,
                captured_piece=captured,
                captured_coords=captured_coords,
                rook_from=rook_from,
                rook_to=rook_to,
                previous_counter=previous_counter,
                previous_turn=self.player_turn,
            )
        )
        logger.debug(f"{piece.color.name.lower()} {piece.type.name.lower()} {record.to_algebraic()}")

    def _is_en_passant(self, piece: Piece, from_coords: Coords, to_coords: Coords) -> bool:
        """A pawn moving diagonally onto an empty square can only be taking en passant"""
        return (
            piece.type == PieceType.PAWN
            and from_coords.col != to_coords.col
            and self.board.is_empty(to_coords)
        )

    def promote_piece(self) -> None:
        """Replace the pawn that just reached the last row by the piece under the promotion cursor"""
        self.promote_last_move(PROMOTION_OPTIONS[self.promotion_cursor])

    def promote_last_move(self, piece_type: PieceType) -> None:
        """Promotion with an explicit piece type (engine answers, replayed games)"""
        if self.move_history:
            destination = self.move_history[-1].destination
            pawn = self.board.piece(destination)
            if pawn is not None:
                self.board.place_piece(Piece(piece_type, pawn.color), destination)
                logger.debug(f"Promoted to {piece_type.name.lower()} on {destination}")
                if self.undo_stack:
                    self.undo_stack[-1] = replace(self.undo_stack[-1], promoted_to=piece_type)
        self.promotion_pending = False
        self.promotion_cursor = 0

    # -- TAKEBACK --
    def takeback(self) -> None:
        """
        Undo the last ply
        ----

        Restores the moved piece (a promoted piece turns back into a pawn), whatever it captured (en passant included),
        the rook of a castling move, the 50 move counter and the turn.

        Plies the game did not apply itself (history handed to the constructor) cannot be taken back.
        """
        if not self.move_history:
            return
        if not self.undo_stack:
            logger.warning("Cannot take back a ply that was not played in this game")
            return

        undo = self.undo_stack.pop()
        record = self.move_history.pop()

        self.board.remove_piece(undo.to_coords)
        self.board.place_piece(undo.moved_piece, undo.from_coords)
        if undo.rook_from is not None and undo.rook_to is not None:
            self.board.move_piece(undo.rook_to, undo.rook_from)
        if undo.captured_piece is not None and undo.captured_coords is not None:
            self.board.place_piece(undo.captured_piece, undo.captured_coords)

        self.consecutive_non_pawn_or_capture = undo.previous_counter
        self.player_turn = undo.previous_turn

        self.unselect_cell()
        self.checkmate = False
        self.draw = False
        self.promotion_pending = False
        self.promotion_cursor = 0
        logger.debug(f"Took back {record.to_algebraic()}")

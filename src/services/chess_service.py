"""Orchestration of communication from API models to business logic and persistence layers (and the reverse direction)."""

from typing import Optional
from uuid import UUID

from loguru import logger

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    TakebackRequest,
)
from src.chess.coords import Coords
from src.chess.fen import STARTING_FEN
from src.chess.game import FenLog, Game
from src.chess.moves import Move
from src.chess.pieces import Color as PieceColor
from src.chess.pieces import PieceType as DomainPieceType
from src.core.exceptions import (
    EngineError,
    GameStateError,
    IllegalMoveError,
    NotYourTurnError,
    RepositoryError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, PieceType
from src.db.repository import GameRepository
from src.engine.protocol import ChessEngine

# In games against the bot, the human plays white
HUMAN_COLOR = PieceColor.WHITE


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(
        self,
        repository: GameRepository,
        engine: Optional[ChessEngine] = None,
        fen_log: Optional[FenLog] = None,
    ) -> None:
        self.repo = repository
        self.engine = engine
        self.fen_log = fen_log

    # -- API logic ---
    def create_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a new game, from the standard starting position unless a FEN is supplied."""
        if request.against_bot and self.engine is None:
            raise GameStateError("Cannot play against the bot: no chess engine configured.")

        starting_fen = request.starting_fen or STARTING_FEN
        game = self._prepare(Game.from_fen(starting_fen), request.against_bot)

        # The bot moves first if the position has black to move
        if request.against_bot and game.player_turn != HUMAN_COLOR:
            game.play_bot_turn()
        game.refresh_flags()

        stored_game, game_id = self.repo.create_game(self._to_model(game, starting_fen, request.against_bot))
        logger.info(f"New game {game_id} (against bot: {request.against_bot})")
        return self._create_game_response(game_id, game, stored_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """Retrieve current game state."""
        game_model = self._fetch_game(request.game_id)
        game = self._replay(game_model)
        return self._create_game_response(request.game_id, game, game_model)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Legal destinations of the piece on the requested square."""
        game = self._replay(self._fetch_game(request.game_id))

        coords = Coords.from_algebraic(request.square)
        piece = game.board.piece(coords)
        if piece is None:
            raise IllegalMoveError(f"There is no piece on {request.square}.")

        return LegalMovesResponse(
            game_id=request.game_id,
            square=request.square,
            color=Color[piece.color.name],
            legal_moves=[target.to_algebraic() for target in game.get_authorized_positions(coords)],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """
        Make a move attempt.
        ----

        1. rebuild the game from the stored moves
        2. check the move: the game is not over, the piece belongs to the side to move, the destination is authorized
        3. apply it (promote if needed), hand over the turn
        4. against the bot: let the engine answer
        5. store the new state

        If the engine fails, the move of the player is stored anyway before the EngineError propagates.
        """
        stored_model = self._fetch_game(request.game_id)
        game = self._replay(stored_model)

        if game.is_over:
            raise GameStateError(f"Game {request.game_id} is over ({game.status}).")

        from_coords = Coords.from_algebraic(request.from_square)
        to_coords = Coords.from_algebraic(request.to_square)
        piece = game.board.piece(from_coords)
        if piece is None:
            raise IllegalMoveError(f"There is no piece on {request.from_square}.")
        if piece.color != game.player_turn:
            raise NotYourTurnError(f"It is {game.player_turn.name.lower()}'s turn to move.")
        if to_coords not in game.get_authorized_positions(from_coords):
            raise IllegalMoveError(f"{request.from_square}-{request.to_square} is not a legal move.")

        game.move_piece(from_coords, to_coords)
        if game.is_latest_move_promotion():
            promote_to = request.promote_to or PieceType.QUEEN
            game.promote_last_move(DomainPieceType[promote_to.name])
        game.switch_player_turn()
        game.export_fen_position()

        if stored_model.against_bot:
            try:
                game.play_bot_turn()
            except EngineError:
                self._save(request.game_id, game, stored_model)
                raise
        game.refresh_flags()

        updated_model = self._save(request.game_id, game, stored_model)
        return self._create_game_response(request.game_id, game, updated_model)

    def takeback(self, request: TakebackRequest) -> GameResponse:
        """Undo the last ply. Against the bot, its answer and the player's move both get taken back."""
        stored_model = self._fetch_game(request.game_id)
        game = self._replay(stored_model)

        if not game.move_history:
            raise GameStateError(f"Nothing to take back in game {request.game_id}.")

        game.takeback()
        if stored_model.against_bot and game.player_turn != HUMAN_COLOR and game.move_history:
            game.takeback()
        game.refresh_flags()

        updated_model = self._save(request.game_id, game, stored_model)
        return self._create_game_response(request.game_id, game, updated_model)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")

    # -- Internal helpers --
    def _prepare(self, game: Game, against_bot: bool) -> Game:
        """Attach the collaborators of this service to a game"""
        game.fen_log = self.fen_log
        if against_bot and self.engine is not None:
            game.set_engine(self.engine)
        return game

    def _replay(self, model: GameModel) -> Game:
        """Rebuild the domain Game: start position + all moves played since."""
        game = Game.from_fen(model.starting_fen)
        for uci in model.moves_uci:
            move = Move.from_uci(uci)
            game.move_piece(move.from_coords, move.to_coords)
            if move.promote_to is not None:
                game.promote_last_move(move.promote_to)
            game.switch_player_turn()
        game.refresh_flags()
        return self._prepare(game, model.against_bot)

    def _save(self, game_id: UUID, game: Game, stored_model: GameModel) -> GameModel:
        model = self._to_model(game, stored_model.starting_fen, stored_model.against_bot)
        updated = self.repo.update_game(game_id, model)
        if updated is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return updated

    @staticmethod
    def _to_model(game: Game, starting_fen: str, against_bot: bool) -> GameModel:
        return GameModel(
            starting_fen=starting_fen,
            current_fen=game.fen_position(),
            moves_uci=game.moves_uci(),
            against_bot=against_bot,
            status=game.status,
        )

    @staticmethod
    def _create_game_response(game_id: UUID, game: Game, model: GameModel) -> GameResponse:
        """Convert the state of the game to a GameResponse (for game with given ID.)"""
        return GameResponse(
            game_id=game_id,
            fen_state=model.current_fen,
            starting_state=model.starting_fen,
            player_turn=Color[game.player_turn.name],
            status=game.status,
            against_bot=model.against_bot,
            move_history=game.moves_uci(),
            history_lines=game.history_lines(),
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model

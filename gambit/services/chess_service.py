"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from gambit.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameActionRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    ResignRequest,
)
from gambit.chess.game import GameSession
from gambit.chess.square import Square
from gambit.core.config import Settings, get_settings
from gambit.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    NotYourTurnError,
    RepositoryError,
)
from gambit.core.models import GameModel
from gambit.core.shared_types import Color
from gambit.db.repository import GameRepository

logger = logging.getLogger(__name__)


class ChessService:
    """
    Orchestration of layers for chess game.
    ----
    Every request rebuilds the GameSession from the repository, acts on it, and stores the result.
    Where the domain layer answers with False (illegal move, nothing to undo), the service raises,
    so callers of the service get told why their request did nothing.
    """

    def __init__(self, repository: GameRepository, settings: Optional[Settings] = None) -> None:
        self.repo = repository
        self.settings = settings or get_settings()

    # -- API routes logic ---
    def create_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a new game, from the standard position or a given FEN."""

        undo_enabled = (
            request.undo_enabled
            if request.undo_enabled is not None
            else self.settings.undo_enabled
        )
        # raises InvalidFENError before anything gets stored
        session = (
            GameSession.from_fen(request.starting_fen, undo_enabled=undo_enabled)
            if request.starting_fen
            else GameSession.new_game(undo_enabled=undo_enabled)
        )

        model = session.to_model()
        model.registered_players = {
            Color.WHITE.value: request.white_player,
            Color.BLACK.value: request.black_player,
        }
        stored_game, game_id = self.repo.create_game(model)
        logger.info("Created game %s", game_id)
        return self._create_game_response(game_id, stored_game, session)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game_model, session = self._load(request.game_id)
        return self._create_game_response(request.game_id, game_model, session)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Legal moves (UCI) of the side to move. Optionally only those of the piece on a given square."""
        _, session = self._load(request.game_id)
        moves = (
            session.legal_moves(Square.from_algebraic(request.square))
            if request.square
            else session.all_legal_moves()
        )
        return LegalMovesResponse(
            game_id=request.game_id,
            color=session.current_player,
            legal_moves=[move.to_uci() for move in moves],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt."""
        game_model, session = self._load(request.game_id)

        if session.is_over:
            raise GameStateError(f"Game {request.game_id} is over: {session.state}")
        if request.color != session.current_player:
            raise NotYourTurnError(f"It is {session.current_player}'s turn, not {request.color}'s.")

        accepted = session.make_move(
            Square.from_algebraic(request.from_square),
            Square.from_algebraic(request.to_square),
            promote_to=request.promote_to,
            player=request.color,
        )
        if not accepted:
            raise IllegalMoveError(
                f"{request.from_square}{request.to_square} is not a legal move in {session.to_fen()}"
            )
        return self._save(request.game_id, game_model, session)

    def undo_move(self, request: GameActionRequest) -> GameResponse:
        """Take back the last move."""
        game_model, session = self._load(request.game_id)
        if not session.undo():
            raise GameStateError(f"Nothing to undo in game {request.game_id}")
        return self._save(request.game_id, game_model, session)

    def redo_move(self, request: GameActionRequest) -> GameResponse:
        """Replay the last move that was taken back."""
        game_model, session = self._load(request.game_id)
        if not session.redo():
            raise GameStateError(f"Nothing to redo in game {request.game_id}")
        return self._save(request.game_id, game_model, session)

    def resign(self, request: ResignRequest) -> GameResponse:
        game_model, session = self._load(request.game_id)
        if not session.resign(request.color):
            raise GameStateError(f"Game {request.game_id} is already over: {session.state}")
        return self._save(request.game_id, game_model, session)

    def agree_draw(self, request: GameActionRequest) -> GameResponse:
        game_model, session = self._load(request.game_id)
        if not session.agree_draw():
            raise GameStateError(f"Game {request.game_id} is already over: {session.state}")
        return self._save(request.game_id, game_model, session)

    def export_pgn(self, request: GetGameRequest) -> str:
        """The game so far as PGN, with the registered player names."""
        game_model, session = self._load(request.game_id)
        return session.to_pgn(
            white=game_model.registered_players.get(Color.WHITE.value, "White"),
            black=game_model.registered_players.get(Color.BLACK.value, "Black"),
        )

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _load(self, game_id: UUID) -> tuple[GameModel, GameSession]:
        """Fetch the stored game and replay it into a GameSession."""
        game_model = self._fetch_game(game_id)
        return game_model, GameSession.from_model(game_model)

    def _save(self, game_id: UUID, previous: GameModel, session: GameSession) -> GameResponse:
        """Store the session (keeping the registered players) and answer with the new state."""
        model = session.to_model()
        model.registered_players = previous.registered_players
        stored = self.repo.update_game(game_id, model)
        if stored is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return self._create_game_response(game_id, stored, session)

    def _create_game_response(
        self, game_id: UUID, model: GameModel, session: GameSession
    ) -> GameResponse:
        """Convert info in GameModel / GameSession to a GameResponse (for game with given ID.)"""
        return GameResponse(
            game_id=game_id,
            players=model.registered_players,
            fen_state=model.current_fen,
            starting_state=model.starting_fen,
            move_history=[move.to_algebraic() for move in session.moves],
            status=session.state,
            side_to_move=session.current_player,
            winner=session.winner,
            can_undo=session.can_undo,
            can_redo=session.can_redo,
            captured={
                color.value: [piece.to_fen() for piece in session.captured_pieces(color)]
                for color in Color
            },
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model

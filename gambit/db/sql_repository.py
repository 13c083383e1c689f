"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gambit.core.exceptions import RepositoryError
from gambit.core.models import GameModel
from gambit.db.schema import DBGame

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(
            id=new_id,
            starting_fen=game.starting_fen,
            current_fen=game.current_fen,
            moves_uci=list(game.moves_uci),
            undone_uci=list(game.undone_uci),
            registered_players=dict(game.registered_players),
            status=game.status,
            resigned_by=game.resigned_by,
            undo_enabled=game.undo_enabled,
        )
        self.db.add(game_db)
        self._commit()
        self.db.refresh(game_db)
        logger.info("Stored new game %s", new_id)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Replace the stored data of an existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_db.starting_fen = game.starting_fen
        game_db.current_fen = game.current_fen
        # NOTE: assign new lists/dicts, JSON columns do not track in-place changes
        game_db.moves_uci = list(game.moves_uci)
        game_db.undone_uci = list(game.undone_uci)
        game_db.registered_players = dict(game.registered_players)
        game_db.status = game.status
        game_db.resigned_by = game.resigned_by
        game_db.undo_enabled = game.undo_enabled
        self._commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self._commit()
        logger.info("Deleted game %s", game_id)
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Could not store game: {e}") from e

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            starting_fen=game_db.starting_fen,
            current_fen=game_db.current_fen,
            moves_uci=list(game_db.moves_uci),
            undone_uci=list(game_db.undone_uci),
            registered_players=dict(game_db.registered_players),
            status=game_db.status,
            resigned_by=game_db.resigned_by,
            undo_enabled=game_db.undo_enabled,
        )

"""
Storage contract for games.

A stored game is not a board snapshot: it is a GameModel holding the starting FEN plus the UCI moves played
(and the moves taken back, for redo). GameSession.from_model() replays them, so a repository only has to hand back
exactly what it was given. current_fen and status are stored for lookups, never trusted over the replay.
"""

from typing import Protocol
from uuid import UUID

from gambit.core.models import GameModel


class GameRepository(Protocol):
    """What ChessService needs from a storage backend (see SQLGameRepository)"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """The stored model (None for an unknown id). Move lists come back in the order they were stored."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store a new game. Returns the model as stored and the id assigned to it."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite every field of an existing game (None for an unknown id). Called after every accepted request."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Drop a game. Returns what was stored (None for an unknown id)."""
        ...

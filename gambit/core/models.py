"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make GameModel easier to read
PieceColor = str
PlayerName = str


@dataclass
class GameModel:
    """
    Transport-safe representation of a chess game used between API, Service, DB, and Game layers.
    ----
    A game is stored as its starting position plus the moves played from there (UCI),
    so replaying the moves rebuilds the full undo history.
    undone_uci holds the redo stack (bottom to top), status / resigned_by the outcomes that cannot be replayed.
    """

    starting_fen: str
    current_fen: str
    moves_uci: list[str]
    status: str
    undone_uci: list[str] = field(default_factory=list)
    registered_players: dict[PieceColor, PlayerName] = field(default_factory=dict)
    resigned_by: Optional[PieceColor] = None
    undo_enabled: bool = True

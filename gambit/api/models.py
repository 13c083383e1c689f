"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from gambit.chess.pieces import PROMOTION_OPTIONS
from gambit.chess.square import is_valid_square_name
from gambit.core.exceptions import InvalidRequestError
from gambit.core.shared_types import Color, GameState, PieceType

PieceColor = str
PlayerName = str


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    white_player: PlayerName = "White"
    black_player: PlayerName = "Black"
    starting_fen: Optional[str] = None
    undo_enabled: Optional[bool] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        """Only the shape is checked here. Whether it is a usable position is up to the domain layer."""
        if value is None:
            return value

        parts = value.strip().split(" ")
        if len(parts) != 6:
            raise InvalidRequestError(
                "FEN string must contain 6 space-separated parts."
            )
        return value.strip()


class GameActionRequest(BaseModel):
    """Undo / redo / draw agreement: all that is needed is which game."""

    game_id: UUID


class ResignRequest(BaseModel):
    game_id: UUID
    color: Color


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: Optional[str] = None

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_valid_square_name(value):
            raise InvalidRequestError(f"Cannot interpret square: {value!r} as a valid square name.")
        return value


class MoveRequest(BaseModel):
    game_id: UUID
    color: Color
    from_square: str
    to_square: str
    promote_to: Optional[PieceType] = None

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not is_valid_square_name(value):
            raise InvalidRequestError(
                f"Cannot interpret square: {value!r} as a valid square name."
            )
        return value

    @field_validator("promote_to")
    @classmethod
    def validate_promotion(cls, value: Optional[PieceType]) -> Optional[PieceType]:
        if value is not None and value not in PROMOTION_OPTIONS:
            raise InvalidRequestError(
                f"Cannot promote to {value}. Pick one from {', '.join(PROMOTION_OPTIONS)}."
            )
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    players: dict[PieceColor, PlayerName]
    fen_state: str
    starting_state: str
    move_history: list[str]
    status: GameState
    side_to_move: Color
    winner: Optional[Color] = None
    can_undo: bool
    can_redo: bool
    captured: dict[PieceColor, list[str]]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    color: Color
    legal_moves: list[str]

"""Types shared between the domain layer, the service and the request / response models."""

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opposite(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class GameState(StrEnum):
    IN_PROGRESS = "in progress"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW_BY_REPETITION = "draw by repetition"
    DRAW_BY_FIFTY_MOVES = "draw by fifty moves"
    DRAW_BY_INSUFFICIENT_MATERIAL = "draw by insufficient material"
    DRAW_BY_AGREEMENT = "draw by agreement"
    RESIGNED = "resigned"

    @property
    def is_terminal(self) -> bool:
        return self not in (GameState.IN_PROGRESS, GameState.CHECK)

    @property
    def is_draw(self) -> bool:
        return self in DRAW_STATES


DRAW_STATES = frozenset(
    {
        GameState.STALEMATE,
        GameState.DRAW_BY_REPETITION,
        GameState.DRAW_BY_FIFTY_MOVES,
        GameState.DRAW_BY_INSUFFICIENT_MATERIAL,
        GameState.DRAW_BY_AGREEMENT,
    }
)

"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from gambit.chess.square import Square, squares_between
from gambit.core.exceptions import InvalidFENError
from gambit.core.shared_types import Color


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"

    @property
    def color(self) -> Color:
        return Color.WHITE if self.value.isupper() else Color.BLACK

    @property
    def is_king_side(self) -> bool:
        return self.value.lower() == "k"


# Four independent booleans: is castling still allowed in this direction
CastlingRights = dict[CastlingDirection, bool]


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, we already know the king / rook are still at their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)

    @property
    def between(self) -> list[Square]:
        """Squares that must be empty: everything strictly between king and rook."""
        return squares_between(self.king_from, self.rook_from)

    @property
    def king_path(self) -> list[Square]:
        """Squares that must not be attacked: where the king starts, passes through and lands."""
        return [self.king_from, *squares_between(self.king_from, self.king_to), self.king_to]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}

# Anything leaving or landing on one of these squares ends castling in that direction (rook moved or got captured)
ROOK_HOME_SQUARES: dict[Square, CastlingDirection] = {
    rule.rook_from: direction for direction, rule in CASTLING_RULES.items()
}

KING_HOME_SQUARES: dict[Color, Square] = {
    Color.WHITE: CASTLING_RULES[CastlingDirection.WHITE_KING_SIDE].king_from,
    Color.BLACK: CASTLING_RULES[CastlingDirection.BLACK_KING_SIDE].king_from,
}


def castling_directions(color: Color) -> list[CastlingDirection]:
    return [direction for direction in CastlingDirection if direction.color == color]


def all_castling_rights() -> CastlingRights:
    return {direction: True for direction in CastlingDirection}


def no_castling_rights() -> CastlingRights:
    return {direction: False for direction in CastlingDirection}


def castling_from_fen(castling_fen: str) -> CastlingRights:
    """'KQkq' -> every direction allowed, '-' -> none, anything in between accordingly."""
    if castling_fen == "-":
        return no_castling_rights()

    allowed = set(castling_fen)
    if not castling_fen or len(allowed) != len(castling_fen) or not allowed <= {
        direction.value for direction in CastlingDirection
    }:
        raise InvalidFENError(f"Invalid castling rights: {castling_fen!r}")
    return {direction: direction.value in allowed for direction in CastlingDirection}


def castling_to_fen(rights: CastlingRights) -> str:
    # NOTE: iterating over the Enum keeps the canonical KQkq order
    encoded = "".join(
        direction.value for direction in CastlingDirection if rights.get(direction)
    )
    return encoded or "-"

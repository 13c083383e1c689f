"""Defines the types of chess pieces"""

from dataclasses import dataclass, field, replace
from typing import Self

from gambit.core.exceptions import InvalidFENError
from gambit.core.shared_types import Color, PieceType

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}


PIECE_POINTS: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
}

# Pieces a pawn can turn into when reaching the last rank
PROMOTION_OPTIONS = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

MINOR_PIECES = frozenset({PieceType.KNIGHT, PieceType.BISHOP})


@dataclass
class Piece:
    """
    A piece on the board.
    ----
    moved: has the piece ever left its square. Only matters for castling and pawn double pushes.
    It gets set by the move applier and restored to its exact previous value when a move is taken back.
    """

    type: PieceType
    color: Color
    moved: bool = False
    points: int = field(init=False, repr=False)

    def __post_init__(self):
        # NOTE: The King's worth is undefined (does not count towards total points)
        self.points = PIECE_POINTS.get(self.type, 0)

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        if character.lower() not in FEN_TO_PIECE:
            raise InvalidFENError(f"Unknown piece letter: {character!r}")
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    def copy(self) -> Self:
        """Independent piece with the same type, color and moved flag."""
        return replace(self)

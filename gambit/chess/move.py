"""
A move: everything needed to play it on a board (and take it back again).

Moves are built by the validator, which knows the board. They are immutable:
changing the promotion choice produces a new Move.
"""

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Optional, Self

from gambit.chess.pieces import FEN_TO_PIECE, PIECE_TO_FEN, PROMOTION_OPTIONS, Piece
from gambit.chess.square import Square
from gambit.core.exceptions import InvalidNotationError, InvalidSquareError
from gambit.core.shared_types import PieceType


class MoveKind(Enum):
    NORMAL = auto()
    CAPTURE = auto()
    CASTLE_KINGSIDE = auto()
    CASTLE_QUEENSIDE = auto()
    EN_PASSANT = auto()
    DOUBLE_PAWN_PUSH = auto()
    PROMOTION = auto()
    PROMOTION_CAPTURE = auto()


CAPTURE_KINDS = frozenset(
    {MoveKind.CAPTURE, MoveKind.EN_PASSANT, MoveKind.PROMOTION_CAPTURE}
)
CASTLING_KINDS = frozenset({MoveKind.CASTLE_KINGSIDE, MoveKind.CASTLE_QUEENSIDE})
PROMOTION_KINDS = frozenset({MoveKind.PROMOTION, MoveKind.PROMOTION_CAPTURE})


@dataclass(frozen=True)
class Move:
    """
    A validated move.
    ----
    moving_piece / captured_piece are snapshots (copies) of the pieces at the time the move was validated.
    They are informative only: two moves are the same move when origin, destination, kind and promotion match.
    """

    from_square: Square
    to_square: Square
    moving_piece: Piece = field(compare=False)
    captured_piece: Optional[Piece] = field(default=None, compare=False)
    kind: MoveKind = MoveKind.NORMAL
    promote_to: Optional[PieceType] = None

    @property
    def is_capture(self) -> bool:
        return self.kind in CAPTURE_KINDS

    @property
    def is_castling(self) -> bool:
        return self.kind in CASTLING_KINDS

    @property
    def is_promotion(self) -> bool:
        return self.kind in PROMOTION_KINDS

    @property
    def capture_square(self) -> Optional[Square]:
        """
        Where the captured piece stands. Same as the destination, except for en passant:
        then the captured pawn is directly behind the destination, i.e. on the rank the capturing pawn left from.
        """
        if not self.is_capture:
            return None
        if self.kind == MoveKind.EN_PASSANT:
            return Square(self.to_square.file, self.from_square.rank)
        return self.to_square

    def with_promotion(self, piece_type: PieceType) -> Self:
        """Same move, promoting to another piece type."""
        if not self.is_promotion:
            raise ValueError(f"{self.to_uci()} is not a promotion.")
        if piece_type not in PROMOTION_OPTIONS:
            raise ValueError(f"Cannot promote to a {piece_type}.")
        return replace(self, promote_to=piece_type)

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        piece_char = PIECE_TO_FEN[self.promote_to] if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"

    def to_algebraic(self) -> str:
        """
        Algebraic notation as used in move lists:
        * castling: O-O / O-O-O
        * piece letter for everything but pawns
        * pawn captures are prefixed by the file the pawn came from
        * x for captures, then the destination
        * =Q / =R / =B / =N for promotions

        NOTE: no disambiguation (Nbd2) and no check markers.
        """
        if self.kind == MoveKind.CASTLE_KINGSIDE:
            return "O-O"
        if self.kind == MoveKind.CASTLE_QUEENSIDE:
            return "O-O-O"

        notation = ""
        if self.moving_piece.type != PieceType.PAWN:
            notation += PIECE_TO_FEN[self.moving_piece.type].upper()
        elif self.is_capture:
            notation += self.from_square.to_algebraic()[0]

        if self.is_capture:
            notation += "x"
        notation += self.to_square.to_algebraic()

        if self.is_promotion and self.promote_to:
            notation += f"={PIECE_TO_FEN[self.promote_to].upper()}"
        return notation

    def __str__(self) -> str:
        return self.to_algebraic()


def parse_uci(uci: str) -> tuple[Square, Square, Optional[PieceType]]:
    """
    Universal Chess Interface:
    ---
    One of the standard chess notations for moves

    examples:
    * "e2e4": move the piece that was on e2 to e4
    * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
    * "e1g1": the king castles king side

    Only the squares and promotion choice are read here. What kind of move it is depends on the board.
    """
    if len(uci) not in (4, 5):
        raise InvalidNotationError(f"Cannot interpret {uci!r} as a move in UCI notation.")
    try:
        from_square = Square.from_algebraic(uci[:2])
        to_square = Square.from_algebraic(uci[2:4])
    except InvalidSquareError as e:
        raise InvalidNotationError(f"Cannot interpret {uci!r} as a move in UCI notation.") from e

    promote_to = None
    if len(uci) == 5:
        promote_to = FEN_TO_PIECE.get(uci[4])
        if promote_to not in PROMOTION_OPTIONS:
            raise InvalidNotationError(f"Invalid promotion in {uci!r}.")
    return from_square, to_square, promote_to

"""
Position interchange: reading and writing FEN strings.

Everything in a FEN string maps onto a Board (placement, castling rights, en passant square)
plus the bookkeeping of a game session (side to move, half-move clock, move number).
"""

import logging
from dataclasses import dataclass
from typing import Optional, Self

from gambit.chess.board import STARTING_PLACEMENT, Board
from gambit.chess.castling import (
    CASTLING_RULES,
    KING_HOME_SQUARES,
    ROOK_HOME_SQUARES,
    CastlingDirection,
    CastlingRights,
    castling_from_fen,
    castling_to_fen,
)
from gambit.chess.movement import PAWN_START_RANK
from gambit.chess.pieces import FEN_TO_PIECE
from gambit.chess.square import BOARD_DIMENSIONS, Square, is_valid_square_name
from gambit.core.exceptions import InvalidFENError
from gambit.core.shared_types import Color, PieceType

logger = logging.getLogger(__name__)

STARTING_FEN = f"{STARTING_PLACEMENT} w KQkq - 0 1"

# en passant squares only ever appear behind a pawn that just made a double push
EN_PASSANT_RANKS = {"3", "6"}


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows proper FEN notation.
    """
    return _fen_error(fen) is None


def _fen_error(fen: str) -> Optional[str]:
    """Describe the first problem found in a FEN string (None if there are none)"""

    # there should be 6 parts to the string
    parts = fen.split(" ")
    if len(parts) != 6:
        return "expected 6 space separated fields"

    position, color, castling, en_passant, half_move_counter, full_move_counter = parts
    if not is_valid_position(position):
        return f"invalid piece placement {position!r}"
    if not is_valid_color_code(color):
        return f"invalid side to move {color!r}"
    if not is_valid_castling_rights(castling):
        return f"invalid castling rights {castling!r}"
    if not is_valid_en_passant(en_passant):
        return f"invalid en passant square {en_passant!r}"
    if not (
        is_valid_move_counter(half_move_counter)
        and is_valid_move_counter(full_move_counter)
    ):
        return "move counters should be non-negative integers"
    if int(full_move_counter) < 1:
        return "move number starts at 1"
    return None


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = position.split("/")
    if len(rank_fens) != num_ranks:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            # make sure every character is valid
            if character.isdigit():
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        # make sure you are creating a correctly sized board
        if file_count != num_files:
            return False
    return True


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def is_valid_castling_rights(castling: str) -> bool:
    """A valid castling encoding is a subset of KQkq in that order, or a '-' if all rights have been revoked."""
    if castling == "-":
        return True
    order = [direction.value for direction in CastlingDirection]
    if not castling or any(character not in order for character in castling):
        return False
    indices = [order.index(character) for character in castling]
    return indices == sorted(set(indices))


def is_valid_en_passant(en_passant: str) -> bool:
    """Valid en passant square encoding should be a square on the 3rd or 6th rank or a '-'"""
    return (en_passant == "-") or (
        is_valid_square_name(en_passant) and en_passant[1] in EN_PASSANT_RANKS
    )


def is_valid_move_counter(counter: str) -> bool:
    return counter.isdigit()


@dataclass
class FENState:
    """
    Data that can be constructed from a FEN string.
    ----

    FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.
    The purpose of FEN is to provide all the necessary information to restart a game from a particular position.

    <board position string><active color><castling rights><en passant square><# half move clock><number turns played>

    * The string to describe the board position is described in the Board class
    * The active color is either "w" or "b"
    * Castling rights are denoted as "k" for king-side or "q" for queen-side. Capital letters for the white pieces, small letters for the black pieces.
        In the starting position: KQkq (all rights available), and as rights get revoked the letter is dropped ("-" once all are gone).
    * The en passant square is the square a pawn skipped over with a double push. If not available a "-" is used.
    * The half move clock counts the number of half moves made since the last pawn move or capture. (Used for the fifty-move rule)
    * The number of turns starts at 1 and increments after every move black makes.

    ex) The standard starting position has a FEN
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
    i.e. it is white to move, all castling options available, no en passant square, no half moves and we are in the first turn.
    """

    position: str
    color_to_move: Color
    castling_rights: CastlingRights
    en_passant_square: Optional[Square]
    half_move_clock: int
    num_turns: int

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the FEN into data"""

        # raise an exception if invalid FEN:
        error = _fen_error(fen.strip())
        if error is not None:
            raise InvalidFENError(f"Cannot interpret supplied string as FEN ({error}): {fen!r}")

        # extract the different components. FEN is space separated
        (
            position,
            active_color,
            castling_str,
            en_passant_algebraic,
            half_move_clock,
            num_turns,
        ) = fen.strip().split(" ")

        return cls(
            position=position,
            color_to_move=Color.WHITE if active_color == "w" else Color.BLACK,
            castling_rights=castling_from_fen(castling_str),
            en_passant_square=(
                Square.from_algebraic(en_passant_algebraic)
                if en_passant_algebraic != "-"
                else None
            ),
            half_move_clock=int(half_move_clock),
            num_turns=int(num_turns),
        )

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data"""
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        castling_str = castling_to_fen(self.castling_rights)

        en_passant_algebraic = (
            self.en_passant_square.to_algebraic()
            if self.en_passant_square is not None
            else "-"
        )
        return f"{self.position} {active_color} {castling_str} {en_passant_algebraic} {self.half_move_clock} {self.num_turns}"

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)

    @classmethod
    def from_board(
        cls, board: Board, color_to_move: Color, half_move_clock: int, num_turns: int
    ) -> Self:
        return cls(
            position=board.to_fen(),
            color_to_move=color_to_move,
            castling_rights=dict(board.castling_rights),
            en_passant_square=board.en_passant_square,
            half_move_clock=half_move_clock,
            num_turns=num_turns,
        )

    def to_board(self) -> Board:
        """
        Build the board described by this state.
        ----
        A FEN string has no notion of which pieces moved before, so the moved flags get reconstructed:
        * a King / Rook whose castling right is absent counts as moved (as do Kings / Rooks away from their home squares)
        * a pawn away from its start rank has obviously moved

        Castling rights that the placement cannot back up (no king / rook on the home squares) are dropped.
        """
        board = Board.from_fen(self.position)
        for color in Color:
            kings = board.locate_pieces(PieceType.KING, color)
            if len(kings) != 1:
                raise InvalidFENError(
                    f"Expected exactly one {color} king, found {len(kings)}: {self.position!r}"
                )

        board.castling_rights = _supported_castling_rights(board, self.castling_rights)
        board.en_passant_square = self.en_passant_square
        _reconstruct_moved_flags(board)
        return board


def _supported_castling_rights(board: Board, rights: CastlingRights) -> CastlingRights:
    supported = dict(rights)
    for direction, allowed in rights.items():
        if not allowed:
            continue
        rule = CASTLING_RULES[direction]
        king = board.piece(rule.king_from)
        rook = board.piece(rule.rook_from)
        king_home = king is not None and king.type == PieceType.KING and king.color == direction.color
        rook_home = rook is not None and rook.type == PieceType.ROOK and rook.color == direction.color
        if not (king_home and rook_home):
            logger.debug("Dropping castling right %s: king or rook not on its home square", direction.value)
            supported[direction] = False
    return supported


def _reconstruct_moved_flags(board: Board) -> None:
    for square, piece in board.pieces():
        if piece.type == PieceType.KING:
            piece.moved = square != KING_HOME_SQUARES[piece.color] or not any(
                allowed and direction.color == piece.color
                for direction, allowed in board.castling_rights.items()
            )
        elif piece.type == PieceType.ROOK:
            direction = ROOK_HOME_SQUARES.get(square)
            piece.moved = (
                direction is None
                or direction.color != piece.color
                or not board.castling_rights[direction]
            )
        elif piece.type == PieceType.PAWN:
            piece.moved = square.rank != PAWN_START_RANK[piece.color]

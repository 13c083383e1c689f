"""The Game board: where the pieces are, plus the two bits of position state that live with them (en passant target and castling rights)"""

from dataclasses import dataclass, field
from typing import Optional, Self

from gambit.chess.castling import CastlingRights, all_castling_rights, no_castling_rights
from gambit.chess.pieces import Piece
from gambit.chess.square import BOARD_DIMENSIONS, Square, squares_between
from gambit.core.exceptions import InvalidFENError, KingNotFoundError
from gambit.core.shared_types import Color, PieceType

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


@dataclass
class Board:
    """
    Mapping from squares to pieces. Empty squares are simply absent.
    ----
    en_passant_square: the square a pawn just skipped over with a double push (if any).
    castling_rights: which castling directions are still allowed. Kept up to date by the move applier.
    """

    position: dict[Square, Piece] = field(default_factory=dict)
    en_passant_square: Optional[Square] = None
    castling_rights: CastlingRights = field(default_factory=no_castling_rights)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using a given FEN string.

        That is, we supply the first part of the FEN string that denotes the board position
        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces. Again, left-to-right reads a1-h1.

        Castling rights / en passant are not part of the placement: set them afterwards (see fen.py).
        """
        fen_by_ranks = fen_str.split("/")
        if len(fen_by_ranks) != BOARD_DIMENSIONS[1]:
            raise InvalidFENError(
                f"Expected {BOARD_DIMENSIONS[1]} ranks in piece placement, got {len(fen_by_ranks)}: {fen_str!r}"
            )

        position: dict[Square, Piece] = {}
        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = BOARD_DIMENSIONS[1] - 1 - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 0
            for character in fen_one_rank:
                if character.isdigit():
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
                else:
                    # simple case: a letter directly denotes the piece that should be created
                    if file >= BOARD_DIMENSIONS[0]:
                        raise InvalidFENError(f"Rank {rank + 1} is too long: {fen_one_rank!r}")
                    position[Square(file, rank)] = Piece.from_fen(character)
                    file += 1
            if file != BOARD_DIMENSIONS[0]:
                raise InvalidFENError(
                    f"Rank {rank + 1} does not describe {BOARD_DIMENSIONS[0]} squares: {fen_one_rank!r}"
                )
        return cls(position)

    @classmethod
    def standard(cls) -> Self:
        """Classical starting position, all castling rights intact."""
        board = cls.from_fen(STARTING_PLACEMENT)
        board.castling_rights = all_castling_rights()
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1] - 1, -1, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(BOARD_DIMENSIONS[0]):
            piece = self.piece(Square(file, rank))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- QUERIES ---
    def piece(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def is_empty(self, square: Square) -> bool:
        return square not in self.position

    def is_occupied_by(self, square: Square, color: Color) -> bool:
        piece = self.position.get(square)
        return piece is not None and piece.color == color

    def pieces(self) -> list[tuple[Square, Piece]]:
        return list(self.position.items())

    def locate_pieces(self, piece_type: PieceType, color: Optional[Color] = None) -> list[Square]:
        return [
            square
            for square, piece in self.position.items()
            if piece.type == piece_type and (color is None or piece.color == color)
        ]

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square for square, piece in self.position.items() if piece.color == color
        ]

    def king_square(self, color: Color) -> Square:
        """
        Where is the King of this color.
        ---
        A game in progress always has exactly one King per color, so not finding one means something went badly wrong.
        """
        kings = self.locate_pieces(PieceType.KING, color)
        if not kings:
            raise KingNotFoundError(f"No {color} king on the board: {self.to_fen()}")
        return kings[0]

    def is_path_clear(self, from_square: Square, to_square: Square) -> bool:
        """Are all squares strictly between two squares on a common line empty."""
        return all(
            self.is_empty(square) for square in squares_between(from_square, to_square)
        )

    # --- MUTATIONS ---
    def place_piece(self, piece: Piece, square: Square) -> None:
        self.position[square] = piece

    def remove_piece(self, square: Square) -> Optional[Piece]:
        """Take a piece off the board and hand it back (None if the square was empty)"""
        return self.position.pop(square, None)

    def copy(self) -> Self:
        """
        Independent copy of the board, used to try out moves.
        NOTE: pieces are copied as well, so flags set on the copy never leak into the original.
        """
        return type(self)(
            position={square: piece.copy() for square, piece in self.position.items()},
            en_passant_square=self.en_passant_square,
            castling_rights=dict(self.castling_rights),
        )

    def count_material(self) -> dict[Color, int]:
        """Tally the points of material each player has on the board"""
        return {color: self._count_material_player(color) for color in Color}

    def _count_material_player(self, color: Color) -> int:
        """Tally the points of material for a specific player"""
        return sum(piece.points for piece in self.position.values() if piece.color == color)

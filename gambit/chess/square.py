"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

from gambit.core.exceptions import InvalidSquareError

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)

FILE_NAMES = "abcdefgh"


def is_valid_square_name(name: str) -> bool:
    """Algebraic notation for a square: a file letter a-h followed by a rank digit 1-8."""
    if len(name) != 2:
        return False
    file_name, rank_name = name[0], name[1]
    return (
        file_name in FILE_NAMES[: BOARD_DIMENSIONS[0]]
        and rank_name.isdigit()
        and 1 <= int(rank_name) <= BOARD_DIMENSIONS[1]
    )


@dataclass(frozen=True)
class Square:
    """File and rank both count from 0: a1 is (0, 0), h8 is (7, 7)."""

    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)"""
        if not is_valid_square_name(sq):
            raise InvalidSquareError(f"Cannot interpret {sq!r} as a square name.")
        return cls(ord(sq[0]) - ord("a"), int(sq[1]) - 1)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a'))}{self.rank + 1}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.file < BOARD_DIMENSIONS[0]) and (
            0 <= self.rank < BOARD_DIMENSIONS[1]
        )

    def offset(self, file_step: int, rank_step: int) -> Square:
        """Square shifted by a vector. Can end up off the board: check with is_within_bounds()."""
        return Square(self.file + file_step, self.rank + rank_step)

    @property
    def is_light(self) -> bool:
        # a1 is a dark square
        return (self.file + self.rank) % 2 == 1

    def __str__(self) -> str:
        return self.to_algebraic()


def squares_between(start: Square, end: Square) -> list[Square]:
    """
    Squares strictly between two squares on the same rank, file or diagonal.
    ----
    Endpoints are excluded, so adjacent squares (or identical ones) have nothing in between.
    """
    file_diff = end.file - start.file
    rank_diff = end.rank - start.rank
    if not (file_diff == 0 or rank_diff == 0 or abs(file_diff) == abs(rank_diff)):
        raise ValueError(f"{start} and {end} are not on a common line.")

    distance = max(abs(file_diff), abs(rank_diff))
    if distance == 0:
        return []
    file_step = file_diff // distance
    rank_step = rank_diff // distance
    return [
        start.offset(file_step * i, rank_step * i) for i in range(1, distance)
    ]

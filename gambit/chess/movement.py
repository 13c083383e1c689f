"""
Geometry of the pieces: which squares can a piece reach from a given square.

Key idea: Use strategy pattern to define the movement pattern for each piece type,
but keep the strategies as pure functions over (square, color) that ignore the pieces on the board.

Occupancy, blocking and king safety are checked later by the validator.
"""

from typing import Callable

from gambit.chess.square import Square
from gambit.core.shared_types import Color, PieceType

Vector = tuple[int, int]

KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = [
    (1, 0),
    (-1, 0),
    (0, 1),
    (0, -1),
    (1, 1),
    (-1, 1),
    (1, -1),
    (-1, -1),
]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]

# Pawns: White moves up the board, Black moves down the board
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: -1}
PAWN_START_RANK: dict[Color, int] = {Color.WHITE: 1, Color.BLACK: 6}
PROMOTION_RANK: dict[Color, int] = {Color.WHITE: 7, Color.BLACK: 0}


# --- MOVEMENT PATTERNS ---
def stepping_squares(square: Square, deltas: list[Vector]) -> list[Square]:
    """Knights and kings: a single step along each of a fixed set of vectors. Only squares on the board are kept."""
    targets = [square.offset(df, dr) for df, dr in deltas]
    return [target for target in targets if target.is_within_bounds()]


def sliding_squares(square: Square, directions: list[Vector]) -> list[Square]:
    """
    Raycasting
    -----
    Move along each direction until we fall off the board.

    NOTE: unlike a real 'line of sight' we do not stop at pieces on the way.
    Whether the path is blocked is decided when validating a move against an actual board.
    """
    targets: list[Square] = []
    for df, dr in directions:
        target = square.offset(df, dr)
        while target.is_within_bounds():
            targets.append(target)
            target = target.offset(df, dr)
    return targets


def pawn_squares(square: Square, color: Color) -> list[Square]:
    """
    A pawn:
    - moves by a single square forward.
    - It can move by two when still on its starting rank
    - takes diagonally (forward), which includes en passant

    All four candidates are returned (when on the board).
    Which of them are actually available depends on the board, so that is up to the validator.
    """
    direction = PAWN_DIRECTION[color]
    candidates = [square.offset(0, direction)]
    if square.rank == PAWN_START_RANK[color]:
        candidates.append(square.offset(0, 2 * direction))
    candidates.extend(pawn_attack_squares(square, color))
    return [target for target in candidates if target.is_within_bounds()]


def pawn_attack_squares(square: Square, color: Color) -> list[Square]:
    """Pawns only attack the two squares diagonally in front of them (not the squares they can move to)."""
    direction = PAWN_DIRECTION[color]
    targets = [square.offset(-1, direction), square.offset(1, direction)]
    return [target for target in targets if target.is_within_bounds()]


def knight_squares(square: Square, color: Color) -> list[Square]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return stepping_squares(square, KNIGHT_DELTAS)


def bishop_squares(square: Square, color: Color) -> list[Square]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return sliding_squares(square, DIAGONALS)


def rook_squares(square: Square, color: Color) -> list[Square]:
    """Rooks move either horizontally or vertically"""
    return sliding_squares(square, STRAIGHTS)


def queen_squares(square: Square, color: Color) -> list[Square]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return sliding_squares(square, DIAGONALS + STRAIGHTS)


def king_squares(square: Square, color: Color) -> list[Square]:
    """Single step in any direction. Castling is not a movement pattern: the validator adds it."""
    return stepping_squares(square, KING_DELTAS)


MovementRule = Callable[[Square, Color], list[Square]]

MOVEMENT_RULES: dict[PieceType, MovementRule] = {
    PieceType.PAWN: pawn_squares,
    PieceType.KNIGHT: knight_squares,
    PieceType.BISHOP: bishop_squares,
    PieceType.ROOK: rook_squares,
    PieceType.QUEEN: queen_squares,
    PieceType.KING: king_squares,
}

# Pieces that need a clear path to reach their target
SLIDING_PIECES = frozenset({PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN})


def potential_moves(piece_type: PieceType, color: Color, square: Square) -> list[Square]:
    """Squares reachable from `square` by a piece of this type and color on an otherwise empty board."""
    return MOVEMENT_RULES[piece_type](square, color)

"""
Draw rules that do not follow from the board alone: the fifty-move rule, threefold repetition
and insufficient material. Plus the position fingerprint used to spot repetitions.
"""

from gambit.chess.board import Board
from gambit.chess.castling import castling_to_fen
from gambit.chess.pieces import MINOR_PIECES
from gambit.core.shared_types import Color, PieceType

# 50 moves by each player = 100 half-moves without a capture or pawn move
FIFTY_MOVE_RULE_HALF_MOVES = 100
REPETITION_LIMIT = 3


def position_fingerprint(board: Board, side_to_move: Color) -> str:
    """
    Positions are 'the same' for the repetition rule when the placement, side to move, castling rights and
    en passant square all match. That is exactly the first 4 fields of a FEN string (move counters are left out).
    """
    side = "w" if side_to_move == Color.WHITE else "b"
    en_passant = board.en_passant_square.to_algebraic() if board.en_passant_square else "-"
    return f"{board.to_fen()} {side} {castling_to_fen(board.castling_rights)} {en_passant}"


def is_threefold_repetition(history: list[str]) -> bool:
    """Has the most recent fingerprint in the history occurred (at least) 3 times"""
    if not history:
        return False
    return history.count(history[-1]) >= REPETITION_LIMIT


def is_fifty_move_draw(half_move_clock: int) -> bool:
    return half_move_clock >= FIFTY_MOVE_RULE_HALF_MOVES


def is_insufficient_material(board: Board) -> bool:
    """
    Neither side can possibly mate:
    * king vs king
    * king + a single minor piece vs king
    * king + two knights vs king
    * king + two bishops on the same square color vs king

    Any pawn, rook or queen on the board is always enough.
    """
    minors: dict[Color, list[tuple[PieceType, bool]]] = {Color.WHITE: [], Color.BLACK: []}
    for square, piece in board.pieces():
        if piece.type == PieceType.KING:
            continue
        if piece.type not in MINOR_PIECES:
            return False
        minors[piece.color].append((piece.type, square.is_light))

    counts = sorted(len(pieces) for pieces in minors.values())
    if counts == [0, 0] or counts == [0, 1]:
        return True
    if counts != [0, 2]:
        return False

    # Two minor pieces, both on the same side
    pieces = minors[Color.WHITE] or minors[Color.BLACK]
    types = {piece_type for piece_type, _ in pieces}
    if types == {PieceType.KNIGHT}:
        return True
    if types == {PieceType.BISHOP}:
        return len({is_light for _, is_light in pieces}) == 1
    return False

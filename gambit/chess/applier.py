"""
Playing a move on a board and taking it back again.

apply_move() mutates the board in place and hands back a PriorState: a snapshot of everything the move is about to
overwrite (flags, captured piece, en passant target, castling rights). revert_move() uses that snapshot to restore the
board exactly, without having to re-derive the side effects of castling / en passant / promotion.
"""

from dataclasses import dataclass
from typing import Optional

from gambit.chess.board import Board
from gambit.chess.castling import (
    CASTLING_RULES,
    ROOK_HOME_SQUARES,
    CastlingDirection,
    CastlingRights,
    castling_directions,
)
from gambit.chess.move import Move, MoveKind
from gambit.chess.pieces import Piece
from gambit.chess.square import Square
from gambit.core.exceptions import BoardCorruptionError
from gambit.core.shared_types import Color, PieceType

CASTLING_DIRECTION_BY_KIND: dict[tuple[MoveKind, Color], CastlingDirection] = {
    (MoveKind.CASTLE_KINGSIDE, Color.WHITE): CastlingDirection.WHITE_KING_SIDE,
    (MoveKind.CASTLE_QUEENSIDE, Color.WHITE): CastlingDirection.WHITE_QUEEN_SIDE,
    (MoveKind.CASTLE_KINGSIDE, Color.BLACK): CastlingDirection.BLACK_KING_SIDE,
    (MoveKind.CASTLE_QUEENSIDE, Color.BLACK): CastlingDirection.BLACK_QUEEN_SIDE,
}


@dataclass
class PriorState:
    """What a move overwrote. The Piece objects are the ones that were on the board, not copies."""

    mover: Piece
    mover_moved: bool
    captured: Optional[Piece]
    captured_square: Optional[Square]
    captured_moved: bool
    rook: Optional[Piece]
    rook_moved: bool
    en_passant_square: Optional[Square]
    castling_rights: CastlingRights


def castling_direction(move: Move) -> CastlingDirection:
    """Which castling rule a castling move follows (depends on the color of the king)"""
    return CASTLING_DIRECTION_BY_KIND[(move.kind, move.moving_piece.color)]


def apply_move(board: Board, move: Move) -> PriorState:
    """
    Play a (validated) move on the board.
    ----
    1. lift the mover from its square
    2. remove the captured piece (for en passant: from behind the destination)
    3. put the mover (or for a promotion: a brand new piece) on the destination, flagged as moved
    4. castling: bring the rook over as well
    5. en passant target: the skipped square after a double pawn push, cleared otherwise
    6. castling rights: a king move ends both of its rights, anything touching a rook's home square ends that one
    """
    mover = board.remove_piece(move.from_square)
    if mover is None:
        raise BoardCorruptionError(f"No piece on {move.from_square} to play {move.to_uci()}")

    prior = PriorState(
        mover=mover,
        mover_moved=mover.moved,
        captured=None,
        captured_square=None,
        captured_moved=False,
        rook=None,
        rook_moved=False,
        en_passant_square=board.en_passant_square,
        castling_rights=dict(board.castling_rights),
    )

    capture_square = move.capture_square
    if capture_square is not None:
        captured = board.remove_piece(capture_square)
        if captured is None:
            raise BoardCorruptionError(f"Nothing to capture on {capture_square} for {move.to_uci()}")
        prior.captured = captured
        prior.captured_square = capture_square
        prior.captured_moved = captured.moved

    if not board.is_empty(move.to_square):
        raise BoardCorruptionError(f"{move.to_square} is occupied, but {move.to_uci()} is not a capture")

    placed = Piece(move.promote_to, mover.color) if move.is_promotion and move.promote_to else mover
    placed.moved = True
    board.place_piece(placed, move.to_square)

    if move.is_castling:
        rule = CASTLING_RULES[castling_direction(move)]
        rook = board.remove_piece(rule.rook_from)
        if rook is None or rook.type != PieceType.ROOK:
            raise BoardCorruptionError(f"No rook on {rule.rook_from} to castle with")
        prior.rook = rook
        prior.rook_moved = rook.moved
        rook.moved = True
        board.place_piece(rook, rule.rook_to)

    board.en_passant_square = None
    if move.kind == MoveKind.DOUBLE_PAWN_PUSH:
        board.en_passant_square = Square(
            move.from_square.file, (move.from_square.rank + move.to_square.rank) // 2
        )

    _revoke_castling_rights(board, move, mover)
    return prior


def revert_move(board: Board, move: Move, prior: PriorState) -> None:
    """Exact inverse of apply_move(): afterwards the board is indistinguishable from before the move."""
    if board.remove_piece(move.to_square) is None:
        raise BoardCorruptionError(f"Nothing on {move.to_square} to take back {move.to_uci()}")

    if move.is_castling and prior.rook is not None:
        rule = CASTLING_RULES[castling_direction(move)]
        board.remove_piece(rule.rook_to)
        prior.rook.moved = prior.rook_moved
        board.place_piece(prior.rook, rule.rook_from)

    prior.mover.moved = prior.mover_moved
    board.place_piece(prior.mover, move.from_square)

    if prior.captured is not None and prior.captured_square is not None:
        prior.captured.moved = prior.captured_moved
        board.place_piece(prior.captured, prior.captured_square)

    board.en_passant_square = prior.en_passant_square
    board.castling_rights = dict(prior.castling_rights)


def _revoke_castling_rights(board: Board, move: Move, mover: Piece) -> None:
    if mover.type == PieceType.KING:
        for direction in castling_directions(mover.color):
            board.castling_rights[direction] = False

    for square in (move.from_square, move.to_square):
        direction = ROOK_HOME_SQUARES.get(square)
        if direction is not None:
            board.castling_rights[direction] = False

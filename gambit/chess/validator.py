"""
Move generation and validation.

A move request (from, to) is checked in two stages:
    1. pseudo-legality: does the piece move like that, is the path clear, is the target square available
    2. king safety: play the move on a copy of the board and make sure our own king is not left under attack

Castling gets its own checks (rights, empty squares between king and rook, no attacked squares on the king's path).
"""

from typing import Optional

from gambit.chess.applier import apply_move
from gambit.chess.board import Board
from gambit.chess.castling import CASTLING_RULES, CastlingDirection, castling_directions
from gambit.chess.move import Move, MoveKind
from gambit.chess.movement import (
    PAWN_DIRECTION,
    PAWN_START_RANK,
    PROMOTION_RANK,
    SLIDING_PIECES,
    pawn_attack_squares,
    potential_moves,
)
from gambit.chess.pieces import PROMOTION_OPTIONS, Piece
from gambit.chess.square import Square
from gambit.core.shared_types import Color, GameState, PieceType


# --- LEGAL MOVES ---
def legal_moves(board: Board, square: Square, side_to_move: Color) -> list[Move]:
    """All legal moves of the piece on `square`. Empty if there is no piece of the side to move there."""
    piece = board.piece(square)
    if piece is None or piece.color != side_to_move:
        return []

    moves: list[Move] = []
    for target in potential_moves(piece.type, piece.color, square):
        move = validate_move(board, square, target, side_to_move)
        if move is not None:
            moves.append(move)

    if piece.type == PieceType.KING:
        moves.extend(castling_moves(board, square, side_to_move))
    return moves


def all_legal_moves(board: Board, side_to_move: Color) -> list[Move]:
    """Legal moves of every piece of one side"""
    moves: list[Move] = []
    for square in board.locate_color(side_to_move):
        moves.extend(legal_moves(board, square, side_to_move))
    return moves


def has_legal_moves(board: Board, side_to_move: Color) -> bool:
    """Same as bool(all_legal_moves(...)), but stops at the first piece that can move."""
    return any(
        legal_moves(board, square, side_to_move)
        for square in board.locate_color(side_to_move)
    )


def validate_move(
    board: Board,
    from_square: Square,
    to_square: Square,
    side_to_move: Color,
    promote_to: Optional[PieceType] = None,
) -> Optional[Move]:
    """
    Turn a request (from, to) into a Move, or None if the move is not legal.
    ----
    Promotions default to a Queen when no promote_to is given.
    A King asking for its castling destination (e1 -> g1 etc.) is checked with the castling rules.
    """
    if not (from_square.is_within_bounds() and to_square.is_within_bounds()):
        return None
    if promote_to is not None and promote_to not in PROMOTION_OPTIONS:
        return None

    piece = board.piece(from_square)
    if piece is None or piece.color != side_to_move:
        return None

    if piece.type == PieceType.KING:
        castling = _castling_move_to(board, from_square, to_square, side_to_move)
        if castling is not None:
            return castling

    target = board.piece(to_square)
    if target is not None and target.color == piece.color:
        return None

    if piece.type == PieceType.PAWN:
        if not _is_valid_pawn_target(board, piece, from_square, to_square):
            return None
    elif to_square not in potential_moves(piece.type, piece.color, from_square):
        return None

    if piece.type in SLIDING_PIECES and not board.is_path_clear(from_square, to_square):
        return None

    move = _build_move(board, piece, from_square, to_square, promote_to)
    if leaves_king_in_check(board, move):
        return None
    return move


def _is_valid_pawn_target(board: Board, pawn: Piece, from_square: Square, to_square: Square) -> bool:
    """
    The four ways a pawn can move:
    * one step forward onto an empty square
    * two steps forward from the start rank, both squares empty
    * one step diagonally forward onto an enemy piece
    * one step diagonally forward onto the en passant square (with the enemy pawn right behind it)
    """
    direction = PAWN_DIRECTION[pawn.color]
    file_diff = to_square.file - from_square.file
    rank_diff = to_square.rank - from_square.rank

    if file_diff == 0:
        if rank_diff == direction:
            return board.is_empty(to_square)
        if rank_diff == 2 * direction and from_square.rank == PAWN_START_RANK[pawn.color]:
            return board.is_empty(from_square.offset(0, direction)) and board.is_empty(to_square)
        return False

    if abs(file_diff) == 1 and rank_diff == direction:
        if board.is_occupied_by(to_square, pawn.color.opposite):
            return True
        if to_square == board.en_passant_square:
            passed_pawn = board.piece(Square(to_square.file, from_square.rank))
            return (
                passed_pawn is not None
                and passed_pawn.type == PieceType.PAWN
                and passed_pawn.color != pawn.color
            )
    return False


def _build_move(
    board: Board,
    piece: Piece,
    from_square: Square,
    to_square: Square,
    promote_to: Optional[PieceType],
) -> Move:
    """Classify a pseudo-legal move and snapshot the pieces involved."""
    captured = board.piece(to_square)
    kind = MoveKind.CAPTURE if captured is not None else MoveKind.NORMAL
    promotion: Optional[PieceType] = None

    if piece.type == PieceType.PAWN:
        if captured is None and to_square == board.en_passant_square and from_square.file != to_square.file:
            kind = MoveKind.EN_PASSANT
            captured = board.piece(Square(to_square.file, from_square.rank))
        elif abs(to_square.rank - from_square.rank) == 2:
            kind = MoveKind.DOUBLE_PAWN_PUSH
        elif to_square.rank == PROMOTION_RANK[piece.color]:
            kind = MoveKind.PROMOTION_CAPTURE if captured is not None else MoveKind.PROMOTION
            promotion = promote_to or PieceType.QUEEN

    return Move(
        from_square=from_square,
        to_square=to_square,
        moving_piece=piece.copy(),
        captured_piece=captured.copy() if captured is not None else None,
        kind=kind,
        promote_to=promotion,
    )


# --- CASTLING ---
def castling_moves(board: Board, king_square: Square, color: Color) -> list[Move]:
    """Castling moves available to the king on `king_square` (king side and queen side checked independently)"""
    king = board.piece(king_square)
    if king is None or king.type != PieceType.KING or king.color != color or king.moved:
        return []

    moves: list[Move] = []
    for direction in castling_directions(color):
        move = _castling_move(board, direction)
        if move is not None:
            moves.append(move)
    return moves


def _castling_move_to(
    board: Board, from_square: Square, to_square: Square, color: Color
) -> Optional[Move]:
    for direction in castling_directions(color):
        rule = CASTLING_RULES[direction]
        if rule.king_from == from_square and rule.king_to == to_square:
            return _castling_move(board, direction)
    return None


def _castling_move(board: Board, direction: CastlingDirection) -> Optional[Move]:
    """
    Castling is allowed when:
    * the right has not been lost (king / rook never moved, rook never captured)
    * king and rook are on their home squares and did not move
    * all squares between them are empty
    * the king is not in check, does not pass through an attacked square, and does not land on one

    NOTE: whether the rook is attacked does not matter.
    """
    if not board.castling_rights.get(direction, False):
        return None

    rule = CASTLING_RULES[direction]
    color = direction.color
    king = board.piece(rule.king_from)
    rook = board.piece(rule.rook_from)
    if king is None or king.type != PieceType.KING or king.color != color or king.moved:
        return None
    if rook is None or rook.type != PieceType.ROOK or rook.color != color or rook.moved:
        return None

    if not all(board.is_empty(square) for square in rule.between):
        return None
    if any(is_square_attacked(board, square, color.opposite) for square in rule.king_path):
        return None

    move = Move(
        from_square=rule.king_from,
        to_square=rule.king_to,
        moving_piece=king.copy(),
        kind=MoveKind.CASTLE_KINGSIDE if direction.is_king_side else MoveKind.CASTLE_QUEENSIDE,
    )
    if leaves_king_in_check(board, move):
        return None
    return move


# --- ATTACKS AND CHECKS ---
def is_square_attacked(board: Board, square: Square, by_color: Color) -> bool:
    """
    Can any piece of `by_color` reach `square`.
    ----
    Pawns only attack diagonally forward; every other piece attacks along its movement pattern,
    sliding pieces only with a clear path.
    No king safety is applied here (this function is what king safety is built on),
    so it works fine on boards where a king is missing.
    """
    for from_square, piece in board.pieces():
        if piece.color != by_color:
            continue
        if piece.type == PieceType.PAWN:
            if square in pawn_attack_squares(from_square, piece.color):
                return True
            continue
        if square not in potential_moves(piece.type, piece.color, from_square):
            continue
        if piece.type not in SLIDING_PIECES or board.is_path_clear(from_square, square):
            return True
    return False


def is_in_check(board: Board, color: Color) -> bool:
    return is_square_attacked(board, board.king_square(color), color.opposite)


def leaves_king_in_check(board: Board, move: Move) -> bool:
    """Play the move on a throw-away copy of the board and see if the mover's king ends up attacked."""
    simulation = board.copy()
    apply_move(simulation, move)
    return is_in_check(simulation, move.moving_piece.color)


# --- GAME STATE ---
def game_state(board: Board, side_to_move: Color) -> GameState:
    """
    State of the game judging by the board alone: checkmate, stalemate, check or in progress.
    Draws by the clock, repetition or material are up to the game session.
    """
    in_check = is_in_check(board, side_to_move)
    if not has_legal_moves(board, side_to_move):
        return GameState.CHECKMATE if in_check else GameState.STALEMATE
    return GameState.CHECK if in_check else GameState.IN_PROGRESS

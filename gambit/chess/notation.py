"""
Move-list interchange: numbered move pairs in algebraic notation ("1. e4 e5\n2. Nf3 Nc6"), and a minimal PGN export.

Writing uses Move.to_algebraic(). Reading matches every token against the legal moves of the position it is played in,
so a move list can only be read by replaying it (see GameSession.from_move_list).
"""

import re
from datetime import date
from typing import Optional

from gambit.chess.board import Board
from gambit.chess.move import Move
from gambit.chess.pieces import PROMOTION_OPTIONS
from gambit.chess.validator import all_legal_moves
from gambit.core.exceptions import InvalidNotationError
from gambit.core.shared_types import Color, GameState, PieceType

WHITE_WINS = "1-0"
BLACK_WINS = "0-1"
DRAW = "1/2-1/2"
UNFINISHED = "*"
RESULT_TOKENS = (WHITE_WINS, BLACK_WINS, DRAW, UNFINISHED)

# "12." or "12..." possibly glued to the move that follows ("12.Nf3")
MOVE_NUMBER = re.compile(r"^(\d+)(\.+)(.*)$")
# check / mate markers and annotation symbols carry no information we need
ANNOTATIONS = re.compile(r"[+#!?]+$")
# "e8Q" -> "e8=Q"
BARE_PROMOTION = re.compile(r"([a-h][18])([QRBN])$")


# --- WRITING ---
def format_move_list(
    moves: list[Move], first_move_number: int = 1, black_first: bool = False
) -> str:
    """
    One line per move number: "N. <white move> <black move>".
    When the game started with Black to move, the first line reads "N... <black move>".
    """
    lines: list[str] = []
    notations = [move.to_algebraic() for move in moves]
    move_number = first_move_number
    if black_first and notations:
        lines.append(f"{move_number}... {notations[0]}")
        notations = notations[1:]
        move_number += 1

    for i in range(0, len(notations), 2):
        lines.append(f"{move_number}. {' '.join(notations[i:i + 2])}")
        move_number += 1
    return "\n".join(lines)


def result_token(state: GameState, winner: Optional[Color]) -> str:
    """PGN result: who won, a draw, or '*' for a game still going."""
    if winner is not None:
        return WHITE_WINS if winner == Color.WHITE else BLACK_WINS
    if state.is_draw:
        return DRAW
    return UNFINISHED


def export_pgn(
    move_list: str,
    result: str,
    white: str = "White",
    black: str = "Black",
    event: str = "Casual game",
    game_date: Optional[date] = None,
) -> str:
    """Move list with the minimal set of PGN headers (Event, Date, White, Black, Result)"""
    game_date = game_date or date.today()
    headers = {
        "Event": event,
        "Date": game_date.strftime("%Y.%m.%d"),
        "White": white,
        "Black": black,
        "Result": result,
    }
    header_lines = "\n".join(f'[{key} "{value}"]' for key, value in headers.items())
    movetext = f"{move_list} {result}" if move_list else result
    return f"{header_lines}\n\n{movetext}\n"


# --- READING ---
def parse_move_list(text: str) -> list[str]:
    """
    Split a move list into the individual moves (in algebraic notation).
    ----
    Move numbers and results are dropped, PGN header lines ("[White "..."]") are skipped.
    Move numbers have to follow each other (1. 2. 3. ...), otherwise the list is rejected.
    """
    tokens: list[str] = []
    expected_number: Optional[int] = None
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("["):
            continue
        for token in line.split():
            numbered = MOVE_NUMBER.match(token)
            if numbered:
                number = int(numbered.group(1))
                if expected_number is not None and number != expected_number:
                    raise InvalidNotationError(
                        f"Move number {number} found where {expected_number} was expected."
                    )
                expected_number = number + 1
                token = numbered.group(3)
                if not token:
                    continue
            if token in RESULT_TOKENS:
                continue
            tokens.append(token)
    return tokens


def resolve_algebraic(board: Board, side_to_move: Color, token: str) -> Move:
    """
    Find the legal move written as `token`.
    ----
    Besides the notation written by Move.to_algebraic(), this also accepts check markers ("Qh5+"), "0-0" for castling,
    promotions without "=" ("e8Q") and an origin file / rank / square to tell two pieces apart ("Nbd2", "R1e2").
    """
    cleaned = ANNOTATIONS.sub("", token.strip()).replace("0", "O")
    cleaned = BARE_PROMOTION.sub(r"\1=\2", cleaned)

    matches = [
        move for move in _candidate_moves(board, side_to_move) if cleaned in _spellings(move)
    ]
    if not matches:
        raise InvalidNotationError(f"{token!r} is not a legal move for {side_to_move}.")
    if len(matches) > 1:
        raise InvalidNotationError(
            f"{token!r} is ambiguous: could be any of {', '.join(move.to_uci() for move in matches)}."
        )
    return matches[0]


def _candidate_moves(board: Board, side_to_move: Color) -> list[Move]:
    """Legal moves, including every promotion choice (the validator only offers the queen)."""
    moves: list[Move] = []
    for move in all_legal_moves(board, side_to_move):
        if move.is_promotion:
            moves.extend(move.with_promotion(piece_type) for piece_type in PROMOTION_OPTIONS)
        else:
            moves.append(move)
    return moves


def _spellings(move: Move) -> set[str]:
    notation = move.to_algebraic()
    if move.is_castling or move.moving_piece.type == PieceType.PAWN:
        return {notation}

    letter, rest = notation[0], notation[1:]
    origin = move.from_square.to_algebraic()
    return {
        notation,
        f"{letter}{origin[0]}{rest}",
        f"{letter}{origin[1]}{rest}",
        f"{letter}{origin}{rest}",
    }

"""Unit tests for /gambit/chess/notation.py"""

from datetime import date

import pytest

from gambit.chess.board import Board
from gambit.chess.fen import FENState
from gambit.chess.notation import (
    BLACK_WINS,
    DRAW,
    UNFINISHED,
    WHITE_WINS,
    export_pgn,
    format_move_list,
    parse_move_list,
    resolve_algebraic,
    result_token,
)
from gambit.chess.square import Square
from gambit.core.exceptions import InvalidNotationError
from gambit.core.shared_types import Color, GameState, PieceType


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def board_from(fen: str) -> Board:
    return FENState.from_fen(fen).to_board()


# --- WRITING ---
def test_format_empty_move_list() -> None:
    assert format_move_list([]) == ""


def test_format_move_list_pairs_moves() -> None:
    board = Board.standard()
    moves = [
        resolve_algebraic(board, Color.WHITE, "e4"),
    ]
    assert format_move_list(moves) == "1. e4"
    assert format_move_list(moves, first_move_number=12) == "12. e4"


def test_format_move_list_black_first() -> None:
    board = board_from("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1")
    move = resolve_algebraic(board, Color.BLACK, "e5")
    assert format_move_list([move], first_move_number=1, black_first=True) == "1... e5"


@pytest.mark.parametrize(
    "state, winner, expected",
    [
        (GameState.CHECKMATE, Color.WHITE, WHITE_WINS),
        (GameState.RESIGNED, Color.BLACK, BLACK_WINS),
        (GameState.STALEMATE, None, DRAW),
        (GameState.DRAW_BY_REPETITION, None, DRAW),
        (GameState.DRAW_BY_AGREEMENT, None, DRAW),
        (GameState.IN_PROGRESS, None, UNFINISHED),
        (GameState.CHECK, None, UNFINISHED),
    ],
)
def test_result_token(state: GameState, winner: Color | None, expected: str) -> None:
    assert result_token(state, winner) == expected


def test_export_pgn() -> None:
    pgn = export_pgn(
        "1. e4 e5", UNFINISHED, white="Alice", black="Bob", game_date=date(2024, 3, 1)
    )
    assert pgn.splitlines() == [
        '[Event "Casual game"]',
        '[Date "2024.03.01"]',
        '[White "Alice"]',
        '[Black "Bob"]',
        '[Result "*"]',
        "",
        "1. e4 e5 *",
    ]


def test_export_pgn_without_moves() -> None:
    assert export_pgn("", DRAW).rstrip().endswith("\n\n1/2-1/2")


# --- READING ---
def test_parse_move_list() -> None:
    text = "1. e4 e5\n2. Nf3 Nc6\n3.Bb5 a6 *"
    assert parse_move_list(text) == ["e4", "e5", "Nf3", "Nc6", "Bb5", "a6"]


def test_parse_move_list_skips_headers_and_results() -> None:
    text = '[Event "Casual game"]\n[White "Alice"]\n\n1. f3 e5 2. g4 Qh4# 0-1\n'
    assert parse_move_list(text) == ["f3", "e5", "g4", "Qh4#"]


def test_parse_move_list_black_first() -> None:
    assert parse_move_list("7... Kd7 8. Ke2") == ["Kd7", "Ke2"]


def test_parse_move_list_rejects_skipped_move_numbers() -> None:
    with pytest.raises(InvalidNotationError):
        parse_move_list("1. e4 e5 3. Nf3")


@pytest.mark.parametrize(
    "token, uci",
    [
        ("e4", "e2e4"),
        ("Nf3", "g1f3"),
        ("Nc3", "b1c3"),
        ("a3", "a2a3"),
    ],
)
def test_resolve_opening_moves(token: str, uci: str) -> None:
    move = resolve_algebraic(Board.standard(), Color.WHITE, token)
    assert move.to_uci() == uci


def test_resolve_ignores_annotations() -> None:
    board = board_from("rnbqkbnr/pppp1ppp/8/4p3/6P1/5P2/PPPPP2P/RNBQKBNR b KQkq - 0 2")
    move = resolve_algebraic(board, Color.BLACK, "Qh4#")
    assert move.to_uci() == "d8h4"
    assert resolve_algebraic(board, Color.BLACK, "Qh4!?") == move


def test_resolve_castling() -> None:
    board = board_from("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    assert resolve_algebraic(board, Color.WHITE, "O-O").to_uci() == "e1g1"
    assert resolve_algebraic(board, Color.WHITE, "0-0-0").to_uci() == "e1c1"


def test_resolve_promotion_choices() -> None:
    board = board_from("4k3/1P6/8/8/8/8/8/4K3 w - - 0 1")
    assert resolve_algebraic(board, Color.WHITE, "b8=Q").promote_to == PieceType.QUEEN
    assert resolve_algebraic(board, Color.WHITE, "b8=N").promote_to == PieceType.KNIGHT
    assert resolve_algebraic(board, Color.WHITE, "b8R").promote_to == PieceType.ROOK


def test_resolve_pawn_capture() -> None:
    board = board_from("4k3/8/8/3p4/4P3/8/8/4K3 w - - 0 1")
    move = resolve_algebraic(board, Color.WHITE, "exd5")
    assert move.is_capture
    assert move.to_uci() == "e4d5"


def test_resolve_needs_disambiguation() -> None:
    """Both knights can reach d2"""
    board = board_from("4k3/8/8/8/8/5N2/8/1N2K3 w - - 0 1")
    with pytest.raises(InvalidNotationError):
        resolve_algebraic(board, Color.WHITE, "Nd2")
    assert resolve_algebraic(board, Color.WHITE, "Nbd2").from_square == sq("b1")
    assert resolve_algebraic(board, Color.WHITE, "Nfd2").from_square == sq("f3")
    assert resolve_algebraic(board, Color.WHITE, "N3d2").from_square == sq("f3")
    assert resolve_algebraic(board, Color.WHITE, "Nf3d2").from_square == sq("f3")


@pytest.mark.parametrize("token", ["e5", "Ke2", "Qh5", "O-O", "xyz", ""])
def test_resolve_illegal_moves(token: str) -> None:
    with pytest.raises(InvalidNotationError):
        resolve_algebraic(Board.standard(), Color.WHITE, token)

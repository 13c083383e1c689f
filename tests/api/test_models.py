from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from gambit.api.models import (
    CreateGameRequest,
    GameResponse,
    LegalMovesRequest,
    MoveRequest,
)
from gambit.core.exceptions import InvalidRequestError
from gambit.core.shared_types import Color, GameState, PieceType


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


# -- Validation - CreateGameRequest --
def test_valid_fen() -> None:
    """Test that CreateGameRequest accepts a valid FEN string."""
    valid_fen = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
    request = CreateGameRequest(white_player="Alice", starting_fen=f" {valid_fen} ")
    assert request.starting_fen == valid_fen
    assert request.black_player == "Black"


def test_starting_fen_is_optional() -> None:
    """Should be able to not supply a starting FEN, and validator just returns None."""
    request = CreateGameRequest()
    assert request.starting_fen is None
    assert request.undo_enabled is None


@pytest.mark.parametrize(
    "invalid_fen",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR",
        "",
    ],
)
def test_invalid_fen(invalid_fen: str) -> None:
    with pytest.raises(InvalidRequestError):
        CreateGameRequest(starting_fen=invalid_fen)


# -- Validation - MoveRequest --
def test_valid_move_request(mock_id: UUID) -> None:
    request = MoveRequest(
        game_id=mock_id, color="black", from_square="e7", to_square="e8", promote_to="knight"
    )
    assert request.color == Color.BLACK
    assert request.promote_to == PieceType.KNIGHT


@pytest.mark.parametrize("square", ["e9", "i1", "e", "", "E2"])
def test_invalid_squares(mock_id: UUID, square: str) -> None:
    with pytest.raises(InvalidRequestError):
        MoveRequest(game_id=mock_id, color=Color.WHITE, from_square=square, to_square="e4")
    with pytest.raises(InvalidRequestError):
        MoveRequest(game_id=mock_id, color=Color.WHITE, from_square="e2", to_square=square)


@pytest.mark.parametrize("promote_to", ["king", "pawn"])
def test_invalid_promotion(mock_id: UUID, promote_to: str) -> None:
    with pytest.raises(InvalidRequestError):
        MoveRequest(
            game_id=mock_id,
            color=Color.WHITE,
            from_square="e7",
            to_square="e8",
            promote_to=promote_to,
        )


def test_unknown_color_or_piece(mock_id: UUID) -> None:
    """Anything that is not even a color / piece type is caught by pydantic itself"""
    with pytest.raises(ValidationError):
        MoveRequest(game_id=mock_id, color="green", from_square="e2", to_square="e4")
    with pytest.raises(ValidationError):
        MoveRequest(
            game_id=mock_id, color=Color.WHITE, from_square="e7", to_square="e8", promote_to="dragon"
        )


# -- Validation - LegalMovesRequest --
def test_legal_moves_request(mock_id: UUID) -> None:
    assert LegalMovesRequest(game_id=mock_id).square is None
    assert LegalMovesRequest(game_id=mock_id, square="g1").square == "g1"
    with pytest.raises(InvalidRequestError):
        LegalMovesRequest(game_id=mock_id, square="z0")


# -- Responses --
def test_game_response_serialises_enums(mock_id: UUID) -> None:
    response = GameResponse(
        game_id=mock_id,
        players={"white": "Alice", "black": "Bob"},
        fen_state="fen",
        starting_state="fen",
        move_history=["e4"],
        status=GameState.CHECKMATE,
        side_to_move=Color.WHITE,
        winner=Color.BLACK,
        can_undo=True,
        can_redo=False,
        captured={"white": [], "black": []},
    )
    dumped = response.model_dump(mode="json")
    assert dumped["status"] == "checkmate"
    assert dumped["winner"] == "black"
    assert dumped["game_id"] == str(mock_id)

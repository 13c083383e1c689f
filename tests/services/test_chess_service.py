"""Unit tests for gambit/services/chess_service.py"""

from typing import Generator
from uuid import UUID, uuid4

import pytest

from gambit.chess.fen import STARTING_FEN
from gambit.core.config import Settings
from gambit.core.exceptions import (
    GameError,
    GameStateError,
    IllegalMoveError,
    InvalidFENError,
    NotYourTurnError,
    RepositoryError,
)
from gambit.core.models import GameModel
from gambit.core.shared_types import Color, GameState, PieceType
from gambit.services.chess_service import (
    ChessService,
    CreateGameRequest,
    DeleteGameRequest,
    GameActionRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    ResignRequest,
)

# --- MOCK DEPENDENCIES ----
PROMOTION_FEN = "4k3/1P6/8/8/8/8/8/4K3 w - - 0 1"


class MockRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        game_id = uuid4()
        self._games[game_id] = game
        return game, game_id

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        return self._games.get(game_id)

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        if game_id not in self._games:
            return None
        self._games[game_id] = game
        return game

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        return self._games.pop(game_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> ChessService:
    return ChessService(mock_repository, settings=Settings())


@pytest.fixture
def new_game(service: ChessService) -> GameResponse:
    return service.create_game(CreateGameRequest(white_player="Alice", black_player="Bob"))


def move(game_id: UUID, color: Color, uci: str, promote_to: PieceType | None = None) -> MoveRequest:
    return MoveRequest(
        game_id=game_id,
        color=color,
        from_square=uci[:2],
        to_square=uci[2:4],
        promote_to=promote_to,
    )


# --- SERVICE - CREATE NEW GAME ----
def test_create_a_new_game(mock_repository: MockRepository, new_game: GameResponse) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    assert new_game.players == {"white": "Alice", "black": "Bob"}
    assert new_game.fen_state == STARTING_FEN
    assert new_game.starting_state == STARTING_FEN
    assert new_game.status == GameState.IN_PROGRESS
    assert new_game.side_to_move == Color.WHITE
    assert new_game.move_history == []
    assert not new_game.can_undo
    assert new_game.captured == {"white": [], "black": []}

    stored = mock_repository.get_game(new_game.game_id)
    assert stored is not None
    assert stored.registered_players == {"white": "Alice", "black": "Bob"}


def test_create_from_fen(service: ChessService) -> None:
    response = service.create_game(CreateGameRequest(starting_fen=PROMOTION_FEN))
    assert response.fen_state == PROMOTION_FEN
    assert response.players == {"white": "White", "black": "Black"}


def test_create_with_invalid_fen(mock_repository: MockRepository, service: ChessService) -> None:
    """Nothing gets stored when the position cannot be used"""
    with pytest.raises(InvalidFENError):
        service.create_game(CreateGameRequest(starting_fen="8/8/8/8/8/8/8/8 w - - 0 1"))
    assert mock_repository._games == {}


def test_undo_setting(mock_repository: MockRepository) -> None:
    service = ChessService(mock_repository, settings=Settings(undo_enabled=False))
    game = service.create_game(CreateGameRequest())
    assert not mock_repository.get_game(game.game_id).undo_enabled

    game = service.create_game(CreateGameRequest(undo_enabled=True))
    assert mock_repository.get_game(game.game_id).undo_enabled


# --- SERVICE - QUERIES ----
def test_get_existing_game_state(service: ChessService, new_game: GameResponse) -> None:
    response = service.get_game_state(GetGameRequest(game_id=new_game.game_id))
    assert response == new_game


def test_attempt_to_find_unknown_game(service: ChessService) -> None:
    with pytest.raises(RepositoryError):
        service.get_game_state(GetGameRequest(game_id=uuid4()))


def test_getting_legal_moves(service: ChessService, new_game: GameResponse) -> None:
    response = service.legal_moves(LegalMovesRequest(game_id=new_game.game_id))
    assert isinstance(response, LegalMovesResponse)
    assert response.color == Color.WHITE
    assert len(response.legal_moves) == 20

    knight = service.legal_moves(LegalMovesRequest(game_id=new_game.game_id, square="g1"))
    assert set(knight.legal_moves) == {"g1f3", "g1h3"}


# --- SERVICE - PLAYING ----
def test_make_legal_move(
    mock_repository: MockRepository, service: ChessService, new_game: GameResponse
) -> None:
    response = service.make_move(move(new_game.game_id, Color.WHITE, "e2e4"))
    assert response.side_to_move == Color.BLACK
    assert response.move_history == ["e4"]
    assert response.can_undo
    assert response.players == {"white": "Alice", "black": "Bob"}
    assert mock_repository.get_game(new_game.game_id).moves_uci == ["e2e4"]


def test_attempt_illegal_move(service: ChessService, new_game: GameResponse) -> None:
    with pytest.raises(IllegalMoveError):
        service.make_move(move(new_game.game_id, Color.WHITE, "e2e5"))


def test_attempt_move_before_your_turn(service: ChessService, new_game: GameResponse) -> None:
    with pytest.raises(NotYourTurnError):
        service.make_move(move(new_game.game_id, Color.BLACK, "e7e5"))


def test_play_to_checkmate(service: ChessService, new_game: GameResponse) -> None:
    game_id = new_game.game_id
    for color, uci in zip([Color.WHITE, Color.BLACK] * 2, ["f2f3", "e7e5", "g2g4", "d8h4"]):
        response = service.make_move(move(game_id, color, uci))
    assert response.status == GameState.CHECKMATE
    assert response.winner == Color.BLACK

    with pytest.raises(GameStateError):
        service.make_move(move(game_id, Color.WHITE, "a2a3"))
    assert service.legal_moves(LegalMovesRequest(game_id=game_id)).legal_moves == []

    pgn = service.export_pgn(GetGameRequest(game_id=game_id))
    assert '[White "Alice"]' in pgn
    assert pgn.endswith("1. f3 e5\n2. g4 Qh4 0-1\n")


def test_promotion_and_capture_ledger(service: ChessService) -> None:
    game = service.create_game(CreateGameRequest(starting_fen="1n2k3/P7/8/8/8/8/8/4K3 w - - 0 1"))
    response = service.make_move(move(game.game_id, Color.WHITE, "a7b8", PieceType.KNIGHT))
    assert response.fen_state.startswith("1N2k3/8/")
    assert response.captured == {"white": [], "black": ["n"]}
    assert response.move_history == ["axb8=N"]


# --- SERVICE - UNDO / REDO ----
def test_undo_and_redo(service: ChessService, new_game: GameResponse) -> None:
    game_id = new_game.game_id
    service.make_move(move(game_id, Color.WHITE, "e2e4"))

    undone = service.undo_move(GameActionRequest(game_id=game_id))
    assert undone.fen_state == STARTING_FEN
    assert undone.can_redo
    assert not undone.can_undo

    redone = service.redo_move(GameActionRequest(game_id=game_id))
    assert redone.move_history == ["e4"]
    assert not redone.can_redo


def test_nothing_to_undo(service: ChessService, new_game: GameResponse) -> None:
    with pytest.raises(GameStateError):
        service.undo_move(GameActionRequest(game_id=new_game.game_id))
    with pytest.raises(GameStateError):
        service.redo_move(GameActionRequest(game_id=new_game.game_id))


def test_undo_disabled(mock_repository: MockRepository) -> None:
    service = ChessService(mock_repository, settings=Settings())
    game = service.create_game(CreateGameRequest(undo_enabled=False))
    service.make_move(move(game.game_id, Color.WHITE, "e2e4"))
    with pytest.raises(GameStateError):
        service.undo_move(GameActionRequest(game_id=game.game_id))


# --- SERVICE - ENDING THE GAME ----
def test_resign(service: ChessService, new_game: GameResponse) -> None:
    response = service.resign(ResignRequest(game_id=new_game.game_id, color=Color.WHITE))
    assert response.status == GameState.RESIGNED
    assert response.winner == Color.BLACK

    # the resignation survives a reload
    reloaded = service.get_game_state(GetGameRequest(game_id=new_game.game_id))
    assert reloaded.status == GameState.RESIGNED
    with pytest.raises(GameStateError):
        service.resign(ResignRequest(game_id=new_game.game_id, color=Color.BLACK))


def test_no_redo_after_resignation(service: ChessService, new_game: GameResponse) -> None:
    game_id = new_game.game_id
    service.make_move(move(game_id, Color.WHITE, "e2e4"))
    service.undo_move(GameActionRequest(game_id=game_id))
    service.resign(ResignRequest(game_id=game_id, color=Color.WHITE))

    with pytest.raises(GameStateError):
        service.redo_move(GameActionRequest(game_id=game_id))
    response = service.get_game_state(GetGameRequest(game_id=game_id))
    assert response.fen_state == STARTING_FEN
    assert response.move_history == []
    assert response.status == GameState.RESIGNED


def test_promotion_choice_on_a_quiet_move(service: ChessService, new_game: GameResponse) -> None:
    with pytest.raises(IllegalMoveError):
        service.make_move(move(new_game.game_id, Color.WHITE, "e2e4", PieceType.ROOK))


def test_agree_draw(service: ChessService, new_game: GameResponse) -> None:
    response = service.agree_draw(GameActionRequest(game_id=new_game.game_id))
    assert response.status == GameState.DRAW_BY_AGREEMENT
    assert response.winner is None
    with pytest.raises(GameError):
        service.agree_draw(GameActionRequest(game_id=new_game.game_id))


def test_delete_game(
    mock_repository: MockRepository, service: ChessService, new_game: GameResponse
) -> None:
    service.delete_game(DeleteGameRequest(game_id=new_game.game_id))
    assert mock_repository.get_game(new_game.game_id) is None
    with pytest.raises(RepositoryError):
        service.get_game_state(GetGameRequest(game_id=new_game.game_id))

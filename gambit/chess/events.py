"""
Observer contract: how a game session tells the outside world (a UI, a logger, ...) what happened.

Subclass GameObserver and override the callbacks you care about. Observers are called synchronously,
in the order they were registered, and must not make moves / undo / redo from inside a callback.

Order of events
---
* accepted move (or redo): piece captured (captures only), move made, board changed, turn changed, game state changed
* undo: move undone, board changed, turn changed, game state changed
* resignation / draw agreement: game state changed
* legal move query for highlighting (GameSession.legal_targets): legal moves calculated
"""

from gambit.chess.board import Board
from gambit.chess.move import Move
from gambit.chess.pieces import Piece
from gambit.chess.square import Square
from gambit.core.shared_types import Color, GameState


class GameObserver:
    def on_move_made(self, move: Move) -> None:
        pass

    def on_piece_captured(self, piece: Piece) -> None:
        pass

    def on_board_changed(self, board: Board) -> None:
        pass

    def on_turn_changed(self, color: Color) -> None:
        pass

    def on_game_state_changed(self, state: GameState, color: Color) -> None:
        """`color`: the side the state applies to (the side to move, e.g. the side that got mated)"""

    def on_move_undone(self, move: Move) -> None:
        pass

    def on_legal_moves_calculated(self, square: Square, targets: list[Square]) -> None:
        pass

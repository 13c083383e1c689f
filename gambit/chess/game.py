"""
The GameSession is the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating everything required to play a turn -->
validating the request, playing the move, keeping the clocks / history / undo stacks up to date,
classifying the resulting position and telling the observers about it.

Illegal moves and no-op requests (nothing to undo, undo disabled, ...) are answered with False: they are part of
normal play. Exceptions are reserved for malformed input (parse errors) and broken invariants.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Self

from gambit.chess.applier import PriorState, apply_move, revert_move
from gambit.chess.board import Board
from gambit.chess.draws import (
    is_fifty_move_draw,
    is_insufficient_material,
    is_threefold_repetition,
    position_fingerprint,
)
from gambit.chess.events import GameObserver
from gambit.chess.fen import STARTING_FEN, FENState
from gambit.chess.move import Move, parse_uci
from gambit.chess.notation import (
    export_pgn,
    format_move_list,
    parse_move_list,
    resolve_algebraic,
    result_token,
)
from gambit.chess.pieces import PROMOTION_OPTIONS, Piece
from gambit.chess.square import Square
from gambit.chess.validator import all_legal_moves, game_state, legal_moves, validate_move
from gambit.core.exceptions import GameStateError, InvalidNotationError, InvariantViolationError
from gambit.core.models import GameModel
from gambit.core.shared_types import Color, GameState, PieceType

logger = logging.getLogger(__name__)


@dataclass
class AppliedMove:
    """Entry of the undo stack: the move, what it overwrote on the board, and the clock before it was played."""

    move: Move
    prior: PriorState
    half_move_clock: int


class GameSession:
    """
    A single game of chess, from a starting position onwards.
    ----
    current_player: the side to move
    move_number: starts at the value given by the position (1 for a new game), goes up after every Black move
    half_move_clock: half moves since the last capture or pawn move (fifty-move rule)
    """

    def __init__(
        self,
        board: Board,
        current_player: Color = Color.WHITE,
        move_number: int = 1,
        half_move_clock: int = 0,
        undo_enabled: bool = True,
    ) -> None:
        self.board = board
        self.current_player = current_player
        self.move_number = move_number
        self.half_move_clock = half_move_clock
        self.undo_enabled = undo_enabled

        # Needed to write down where the game started
        self.starting_fen = self.to_fen()
        self._starting_player = current_player
        self._starting_move_number = move_number

        self._undo_stack: list[AppliedMove] = []
        self._redo_stack: list[Move] = []
        self._repetition_history: list[str] = [self.fingerprint()]
        self._captured: dict[Color, list[Piece]] = {Color.WHITE: [], Color.BLACK: []}
        self._observers: list[GameObserver] = []
        self._notifying = False
        self._halted = False
        self._resigned_by: Optional[Color] = None
        self._draw_agreed = False
        self._state = self._classify()

    # --- CREATION ---
    @classmethod
    def new_game(cls, undo_enabled: bool = True) -> Self:
        """Standard starting position, White to move."""
        return cls.from_fen(STARTING_FEN, undo_enabled=undo_enabled)

    @classmethod
    def from_fen(cls, fen: str, undo_enabled: bool = True) -> Self:
        """Continue from any position. Raises InvalidFENError (before anything else happens) if the FEN cannot be used."""
        state = FENState.from_fen(fen)
        session = cls(
            board=state.to_board(),
            current_player=state.color_to_move,
            move_number=state.num_turns,
            half_move_clock=state.half_move_clock,
            undo_enabled=undo_enabled,
        )
        logger.info("Loaded position %s (%s)", session.starting_fen, session.state)
        return session

    @classmethod
    def from_move_list(
        cls, move_list: str, starting_fen: str = STARTING_FEN, undo_enabled: bool = True
    ) -> Self:
        """Replay a move list in algebraic notation (see notation.py). Raises InvalidNotationError on the first move that does not fit."""
        session = cls.from_fen(starting_fen, undo_enabled=undo_enabled)
        for token in parse_move_list(move_list):
            move = resolve_algebraic(session.board, session.current_player, token)
            if not session.make_move(move.from_square, move.to_square, move.promote_to):
                raise InvalidNotationError(f"Cannot play {token!r}: the game is over ({session.state}).")
        return session

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """
        Rebuild a stored game by replaying it from its starting position.
        ----
        The undone moves get replayed and then undone again, so redo works just like before the game was stored.
        Resignations and draw agreements cannot be replayed: they are restored from the stored status.
        """
        session = cls.from_fen(model.starting_fen, undo_enabled=True)
        for uci in [*model.moves_uci, *reversed(model.undone_uci)]:
            from_square, to_square, promote_to = parse_uci(uci)
            if not session.make_move(from_square, to_square, promote_to):
                raise InvalidNotationError(f"Stored move {uci!r} is not legal in {session.to_fen()}")
        for _ in model.undone_uci:
            session.undo()
        session.undo_enabled = model.undo_enabled

        if model.status == GameState.RESIGNED and model.resigned_by:
            session.resign(Color(model.resigned_by))
        elif model.status == GameState.DRAW_BY_AGREEMENT:
            session.agree_draw()
        return session

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            starting_fen=self.starting_fen,
            current_fen=self.to_fen(),
            moves_uci=[move.to_uci() for move in self.moves],
            undone_uci=[move.to_uci() for move in self._redo_stack],
            status=self.state.value,
            resigned_by=self._resigned_by.value if self._resigned_by else None,
            undo_enabled=self.undo_enabled,
        )

    # --- STATE ---
    @property
    def state(self) -> GameState:
        return self._state

    @property
    def is_over(self) -> bool:
        return self._state.is_terminal

    @property
    def winner(self) -> Optional[Color]:
        """
        Checkmate: the side to move got mated, so the opponent won.
        Resignation: the side that did not resign.
        """
        if self._state == GameState.CHECKMATE:
            return self.current_player.opposite
        if self._state == GameState.RESIGNED and self._resigned_by is not None:
            return self._resigned_by.opposite
        return None

    @property
    def moves(self) -> list[Move]:
        """Moves played so far (undone moves excluded)"""
        return [record.move for record in self._undo_stack]

    @property
    def can_undo(self) -> bool:
        return self.undo_enabled and bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return self.undo_enabled and bool(self._redo_stack)

    def captured_pieces(self, color: Color) -> list[Piece]:
        """Pieces of `color` that were taken off the board, in the order they got captured"""
        return list(self._captured[color])

    def captured_material(self, color: Color) -> int:
        """Points worth of `color`'s pieces that were captured"""
        return sum(piece.points for piece in self._captured[color])

    def fingerprint(self) -> str:
        return position_fingerprint(self.board, self.current_player)

    def to_fen(self) -> str:
        return FENState.from_board(
            self.board, self.current_player, self.half_move_clock, self.move_number
        ).to_fen()

    def move_list(self) -> str:
        return format_move_list(
            self.moves,
            first_move_number=self._starting_move_number,
            black_first=self._starting_player == Color.BLACK,
        )

    def to_pgn(self, white: str = "White", black: str = "Black", event: str = "Casual game") -> str:
        return export_pgn(
            self.move_list(),
            result_token(self._state, self.winner),
            white=white,
            black=black,
            event=event,
        )

    # --- QUERIES ---
    def legal_moves(self, square: Square) -> list[Move]:
        """Legal moves of the piece on `square` (nothing for the side not to move, or once the game is over)"""
        if self.is_over:
            return []
        return legal_moves(self.board, square, self.current_player)

    def all_legal_moves(self) -> list[Move]:
        if self.is_over:
            return []
        return all_legal_moves(self.board, self.current_player)

    def legal_targets(self, square: Square) -> list[Square]:
        """Squares the piece on `square` can move to. Meant for highlighting, so observers get told as well."""
        targets = [move.to_square for move in self.legal_moves(square)]
        self._notify("on_legal_moves_calculated", square, targets)
        return targets

    # --- OBSERVERS ---
    def add_observer(self, observer: GameObserver) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: GameObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self, event: str, *args: object) -> None:
        # legal_targets() may be called (and notify) from inside a callback
        was_notifying = self._notifying
        self._notifying = True
        try:
            for observer in list(self._observers):
                getattr(observer, event)(*args)
        finally:
            self._notifying = was_notifying

    # --- PLAYING ---
    def make_move(
        self,
        from_square: Square,
        to_square: Square,
        promote_to: Optional[PieceType] = None,
        player: Optional[Color] = None,
    ) -> bool:
        """
        Attempt a move. Returns False (and changes nothing) when the move is not accepted:
        * the game is over
        * `player` is given and it is not their turn
        * the move is not legal (including an invalid promotion choice, or a choice on a move that does not promote)

        A promotion without `promote_to` becomes a queen.
        """
        self._check_mutable()
        if self.is_over:
            logger.debug("Rejected %s%s: game is over (%s)", from_square, to_square, self._state)
            return False
        if player is not None and player != self.current_player:
            logger.debug("Rejected %s%s: not %s's turn", from_square, to_square, player)
            return False
        if promote_to is not None and promote_to not in PROMOTION_OPTIONS:
            logger.debug("Rejected %s%s: cannot promote to %s", from_square, to_square, promote_to)
            return False

        move = validate_move(self.board, from_square, to_square, self.current_player)
        if move is None:
            logger.debug("Rejected %s%s: illegal move for %s", from_square, to_square, self.current_player)
            return False
        if promote_to is not None:
            if not move.is_promotion:
                logger.debug("Rejected %s%s: promotion choice on a move that does not promote", from_square, to_square)
                return False
            move = move.with_promotion(promote_to)

        self._redo_stack.clear()
        self._play(move)
        return True

    def undo(self) -> bool:
        """Take back the last move. False when undo is disabled or there is nothing to take back."""
        self._check_mutable()
        if not self.can_undo:
            logger.debug("Nothing to undo (undo enabled: %s)", self.undo_enabled)
            return False

        record = self._undo_stack.pop()
        try:
            revert_move(self.board, record.move, record.prior)
        except InvariantViolationError:
            self._halt()
            raise

        if record.prior.captured is not None:
            self._captured[record.prior.captured.color].pop()
        self.half_move_clock = record.half_move_clock
        self._repetition_history.pop()
        self.current_player = self.current_player.opposite
        if self.current_player == Color.BLACK:
            self.move_number -= 1
        # a resignation / draw agreement only ever concerns the position it was made in
        self._resigned_by = None
        self._draw_agreed = False
        self._state = self._classify()
        self._redo_stack.append(record.move)

        self._notify("on_move_undone", record.move)
        self._notify("on_board_changed", self.board)
        self._notify("on_turn_changed", self.current_player)
        self._notify("on_game_state_changed", self._state, self.current_player)
        return True

    def redo(self) -> bool:
        """Play the most recently undone move again. False when undo is disabled, nothing was undone or the game is over."""
        self._check_mutable()
        if not self.can_redo:
            logger.debug("Nothing to redo (undo enabled: %s)", self.undo_enabled)
            return False
        if self.is_over:
            logger.debug("Rejected redo: game is over (%s)", self._state)
            return False
        self._play(self._redo_stack.pop())
        return True

    def resign(self, color: Color) -> bool:
        """`color` gives up. Only possible while the game is still going."""
        self._check_mutable()
        if self.is_over:
            return False
        self._resigned_by = color
        self._finish(GameState.RESIGNED)
        return True

    def agree_draw(self) -> bool:
        """Both players agreed to a draw. Only possible while the game is still going."""
        self._check_mutable()
        if self.is_over:
            return False
        self._draw_agreed = True
        self._finish(GameState.DRAW_BY_AGREEMENT)
        return True

    # --- INTERNALS ---
    def _play(self, move: Move) -> None:
        """Forward bookkeeping of an accepted move (new move or redo)"""
        half_move_clock = self.half_move_clock
        try:
            prior = apply_move(self.board, move)
        except InvariantViolationError:
            self._halt()
            raise
        self._undo_stack.append(AppliedMove(move, prior, half_move_clock))

        if prior.captured is not None:
            self._captured[prior.captured.color].append(prior.captured)
        if move.moving_piece.type == PieceType.PAWN or prior.captured is not None:
            self.half_move_clock = 0
        else:
            self.half_move_clock += 1

        self.current_player = self.current_player.opposite
        if self.current_player == Color.WHITE:
            self.move_number += 1
        self._repetition_history.append(self.fingerprint())

        try:
            self._state = self._classify()
        except InvariantViolationError:
            self._halt()
            raise

        if self._state.is_terminal:
            logger.info("Game finished after %s: %s", move.to_uci(), self._state)

        if prior.captured is not None:
            self._notify("on_piece_captured", prior.captured)
        self._notify("on_move_made", move)
        self._notify("on_board_changed", self.board)
        self._notify("on_turn_changed", self.current_player)
        self._notify("on_game_state_changed", self._state, self.current_player)

    def _classify(self) -> GameState:
        """
        Start from what the board says (checkmate / stalemate / check / in progress),
        then look for draws in this order: fifty-move rule, threefold repetition, insufficient material.
        """
        if self._resigned_by is not None:
            return GameState.RESIGNED
        if self._draw_agreed:
            return GameState.DRAW_BY_AGREEMENT

        state = game_state(self.board, self.current_player)
        if state in (GameState.CHECKMATE, GameState.STALEMATE):
            return state
        if is_fifty_move_draw(self.half_move_clock):
            return GameState.DRAW_BY_FIFTY_MOVES
        if is_threefold_repetition(self._repetition_history):
            return GameState.DRAW_BY_REPETITION
        if is_insufficient_material(self.board):
            return GameState.DRAW_BY_INSUFFICIENT_MATERIAL
        return state

    def _finish(self, state: GameState) -> None:
        self._state = state
        logger.info("Game finished: %s", state)
        self._notify("on_game_state_changed", self._state, self.current_player)

    def _check_mutable(self) -> None:
        if self._halted:
            raise GameStateError("Session halted after an invariant violation. Start a new session.")
        if self._notifying:
            raise GameStateError("Observers must not change the game from inside a callback.")

    def _halt(self) -> None:
        self._halted = True
        logger.critical("Invariant violated, halting session at %s", self.board.to_fen())


class GameBuilder:
    """Fluent construction of a GameSession: GameBuilder().with_fen(fen).with_observer(ui).build()"""

    def __init__(self) -> None:
        self._fen = STARTING_FEN
        self._undo_enabled = True
        self._observers: list[GameObserver] = []

    def with_standard_setup(self) -> Self:
        self._fen = STARTING_FEN
        return self

    def with_fen(self, fen: str) -> Self:
        self._fen = fen
        return self

    def with_undo_enabled(self, enabled: bool = True) -> Self:
        self._undo_enabled = enabled
        return self

    def with_observer(self, observer: GameObserver) -> Self:
        self._observers.append(observer)
        return self

    def build(self) -> GameSession:
        session = GameSession.from_fen(self._fen, undo_enabled=self._undo_enabled)
        for observer in self._observers:
            session.add_observer(observer)
        return session

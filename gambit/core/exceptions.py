"""
Exceptions raised across the layers.

Illegal moves and no-op requests (undo with an empty history, ...) are NOT exceptions in the domain layer:
the GameSession reports those with a boolean. The exceptions below cover the remaining failure modes:
    - malformed external data (ParseError and subclasses): recovered by rejecting the input.
    - broken invariants (InvariantViolationError and subclasses): bugs, never recovered from.
    - service level errors, which translate domain rejections for callers of the ChessService.
"""


class GameError(Exception):
    """Base class for all errors raised by gambit."""


# --- MALFORMED EXTERNAL DATA ---
class ParseError(GameError):
    """Some external string could not be interpreted."""


class InvalidFENError(ParseError):
    """FEN string is not a valid chess position."""


class InvalidSquareError(ParseError):
    """Square name is not in algebraic notation (a1 - h8)."""


class InvalidNotationError(ParseError):
    """Move (list) in algebraic or UCI notation cannot be interpreted / matched to a legal move."""


class InvalidRequestError(GameError):
    """Request to the service does not have the expected shape."""


# --- INVARIANT VIOLATIONS ---
class InvariantViolationError(GameError):
    """The board or session ended up in a state that should be impossible."""


class KingNotFoundError(InvariantViolationError):
    """A side has no King on the board."""


class BoardCorruptionError(InvariantViolationError):
    """The board does not agree with a move that was validated against it."""


# --- SERVICE LEVEL ---
class GameStateError(GameError):
    """Request does not fit the current state of the game (game over, nothing to undo, halted session...)."""


class IllegalMoveError(GameError):
    """Requested move is not legal in the current position."""


class NotYourTurnError(GameError):
    """Requested move is made by the side that is not to move."""


class RepositoryError(GameError):
    """Persistence layer could not deliver what was asked."""

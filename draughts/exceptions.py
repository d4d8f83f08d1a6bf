# Exception types raised by the rules engine and its collaborators
class DraughtsError(Exception):
    """Base exception for draughts errors."""

    pass


class SquareIndexError(DraughtsError, IndexError):
    """Raised when a square index is outside 0..31 (a caller bug)."""

    pass


class InvalidPositionError(DraughtsError, ValueError):
    """Raised when a board table is malformed."""

    pass


class IllegalMoveError(DraughtsError, ValueError):
    """Raised when a move is not in the legal set for the side to move."""

    pass


class MalformedMoveError(DraughtsError, ValueError):
    """Raised when a move payload cannot be decoded."""

    pass


class DesyncError(DraughtsError):
    """Raised when a peer's position fingerprint differs from ours."""

    pass


class GameOverError(DraughtsError):
    """Raised when a move is attempted after the game has ended."""

    pass

"""
Type definitions for the draughts rules engine.

This module provides:
- Type aliases for squares and move lists
- The Color, Direction and Layout enumerations
- Immutable Piece and Move values
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from typing import Optional, Tuple

# Basic type aliases
SquareIndex = int  # 0..31 playable squares
Captures = Tuple[SquareIndex, ...]  # captured squares in jump order

# Constants for type safety
SQUARES_COUNT = 32
SQUARES_PER_ROW = 4
MIN_SQUARE_INDEX = 0
MAX_SQUARE_INDEX = 31


class Color(IntEnum):
    """Piece color. Values match the sign used in board vectors."""

    BLACK = 1
    RED = -1

    @property
    def opposite(self) -> Color:
        return Color.RED if self is Color.BLACK else Color.BLACK

    @classmethod
    def parse(cls, value: str) -> Color:
        """Parse a color name such as ``"red"`` or ``"Black"``."""
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown color: {value!r}") from None


class Layout(str, Enum):
    """Named starting layouts.

    STANDARD is the full 12 v 12 opening and the default. OUTPOST is the
    reference layout: local men fill 23-31 and the enemy holds 6, 14 and 17.
    """

    STANDARD = "standard"
    OUTPOST = "outpost"


def row_left_shifted(idx: SquareIndex) -> bool:
    """Even physical rows start on column 0 (their first square is the left edge)."""
    return idx % 8 < SQUARES_PER_ROW


class Direction(Enum):
    """A diagonal direction. "Up" means toward square 0."""

    UP_LEFT = (True, True)
    UP_RIGHT = (True, False)
    DOWN_LEFT = (False, True)
    DOWN_RIGHT = (False, False)

    @property
    def is_up(self) -> bool:
        return self.value[0]

    @property
    def is_down(self) -> bool:
        return not self.value[0]

    @property
    def is_left(self) -> bool:
        return self.value[1]

    @property
    def is_right(self) -> bool:
        return not self.value[1]

    def offset(self, idx: SquareIndex) -> int:
        """Index delta to the diagonal neighbour of ``idx``.

        Rows hold 4 squares, so straight up/down is -4/+4; which diagonal that
        is depends on whether the row is left shifted.
        """
        shifted = row_left_shifted(idx)
        if self is Direction.UP_LEFT:
            return -5 if shifted else -4
        if self is Direction.UP_RIGHT:
            return -4 if shifted else -3
        if self is Direction.DOWN_LEFT:
            return 3 if shifted else 4
        return 4 if shifted else 5

    def blocked_at(self, idx: SquareIndex) -> bool:
        """True if stepping this way from ``idx`` would leave the board sideways."""
        if row_left_shifted(idx):
            return self.is_left and idx % SQUARES_PER_ROW == 0
        return self.is_right and idx % SQUARES_PER_ROW == SQUARES_PER_ROW - 1

    def is_backward(self, moves_up: bool) -> bool:
        """Backward for a man whose forward direction is up when ``moves_up``."""
        return self.is_down if moves_up else self.is_up

    def step(self, idx: SquareIndex) -> Optional[SquareIndex]:
        """Neighbour of ``idx`` in this direction, or None off the board."""
        if self.blocked_at(idx):
            return None
        nxt = idx + self.offset(idx)
        if MIN_SQUARE_INDEX <= nxt <= MAX_SQUARE_INDEX:
            return nxt
        return None


@dataclass(frozen=True)
class Piece:
    """Contents of one square. ``is_active=False`` marks an empty square."""

    color: Color = Color.BLACK
    is_king: bool = False
    is_active: bool = True

    def crowned(self) -> Piece:
        return self if self.is_king else replace(self, is_king=True)

    def value(self) -> int:
        """Signed encoding: +-1 for men, +-2 for kings, 0 when empty."""
        if not self.is_active:
            return 0
        return int(self.color) * (2 if self.is_king else 1)

    @classmethod
    def from_value(cls, value: int) -> Piece:
        if value == 0:
            return EMPTY
        if abs(value) not in (1, 2):
            raise ValueError(f"Invalid piece value: {value}")
        return cls(color=Color.BLACK if value > 0 else Color.RED, is_king=abs(value) == 2)


EMPTY = Piece(is_active=False)


@dataclass(frozen=True)
class Move:
    """A complete turn for one piece.

    ``captured`` is None for a simple move and lists the jumped squares in
    order for a capture. ``promotes`` means the man is crowned during this
    move: a man crowned mid-capture that jumps on keeps the flag even though
    its destination lies outside the far row.
    """

    origin: SquareIndex
    destination: SquareIndex
    captured: Optional[Captures] = None
    promotes: bool = False

    @property
    def is_capture(self) -> bool:
        return bool(self.captured)

    @property
    def capture_count(self) -> int:
        return len(self.captured) if self.captured else 0


def is_valid_square(idx: object) -> bool:
    """Check if a value is a playable square index."""
    return isinstance(idx, int) and not isinstance(idx, bool) and MIN_SQUARE_INDEX <= idx <= MAX_SQUARE_INDEX

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .exceptions import InvalidPositionError, SquareIndexError
from .types import (
    EMPTY,
    SQUARES_COUNT,
    SQUARES_PER_ROW,
    Color,
    Layout,
    Piece,
    SquareIndex,
    is_valid_square,
)

# -----------------------------
# Board indexing and utilities
# -----------------------------
_OUTPOSTS = (6, 14, 17)


def check_square(idx: SquareIndex) -> SquareIndex:
    if not is_valid_square(idx):
        raise SquareIndexError(f"square index ({idx}) is outside 0..{SQUARES_COUNT - 1}")
    return idx


def is_promotion_square(idx: SquareIndex, moves_up: bool) -> bool:
    """Far row for a man moving up (squares 0-3) or down (squares 28-31)."""
    if moves_up:
        return idx < SQUARES_PER_ROW
    return idx >= SQUARES_COUNT - SQUARES_PER_ROW


@dataclass
class Position:
    """Board state: 32 squares, side to move, and the local color.

    The local color's men move up (toward square 0); the other color's men
    move down.
    """

    pieces: List[Piece]
    side_to_move: Color = Color.RED
    local_color: Color = Color.RED

    def __post_init__(self) -> None:
        if not isinstance(self.pieces, list) or len(self.pieces) != SQUARES_COUNT:
            raise InvalidPositionError(f"Board must be a list of {SQUARES_COUNT} pieces")
        if not all(isinstance(p, Piece) for p in self.pieces):
            raise InvalidPositionError("Board entries must be Piece values")
        self.side_to_move = Color(self.side_to_move)
        self.local_color = Color(self.local_color)

    def moves_up(self, color: Color) -> bool:
        return color == self.local_color

    def piece_at(self, idx: SquareIndex) -> Piece:
        return self.pieces[check_square(idx)]

    def is_empty(self, idx: SquareIndex) -> bool:
        return not self.piece_at(idx).is_active

    def is_color(self, idx: SquareIndex, color: Color) -> bool:
        piece = self.piece_at(idx)
        return piece.is_active and piece.color == color

    def is_player(self, idx: SquareIndex) -> bool:
        return self.is_color(idx, self.local_color)

    def is_enemy(self, idx: SquareIndex) -> bool:
        return self.is_color(idx, self.local_color.opposite)

    def squares_of(self, color: Color) -> List[SquareIndex]:
        return [i for i, p in enumerate(self.pieces) if p.is_active and p.color == color]

    def piece_count(self, color: Optional[Color] = None) -> int:
        """Active pieces of ``color``, or of both colors when omitted."""
        if color is None:
            return sum(1 for p in self.pieces if p.is_active)
        return len(self.squares_of(color))

    def player_piece_count(self) -> int:
        return self.piece_count(self.local_color)

    def enemy_piece_count(self) -> int:
        return self.piece_count(self.local_color.opposite)

    def empty_count(self) -> int:
        return sum(1 for p in self.pieces if not p.is_active)

    def copy(self) -> Position:
        return Position(list(self.pieces), self.side_to_move, self.local_color)

    # ----------------------------
    # Snapshots
    # ----------------------------
    def to_array(self) -> np.ndarray:
        """Signed int8 vector of length 32 (see ``Piece.value``)."""
        return np.array([p.value() for p in self.pieces], dtype=np.int8)

    @classmethod
    def from_array(cls, values: Union[Sequence[int], np.ndarray],
                   side_to_move: Color = Color.RED,
                   local_color: Color = Color.RED) -> Position:
        arr = np.asarray(values)
        if arr.shape != (SQUARES_COUNT,):
            raise InvalidPositionError(f"Board vector must have shape ({SQUARES_COUNT},), got {arr.shape}")
        try:
            pieces = [Piece.from_value(int(v)) for v in arr]
        except ValueError as e:
            raise InvalidPositionError(str(e)) from e
        return cls(pieces, side_to_move, local_color)

    def fingerprint(self) -> str:
        """Stable digest of the board, side to move and orientation."""
        h = hashlib.sha1(self.to_array().tobytes())
        h.update(bytes([self.side_to_move == Color.BLACK, self.local_color == Color.BLACK]))
        return h.hexdigest()


# ----------------------------
# Board setup
# ----------------------------
def default_setup(local_color: Color, layout: Union[Layout, str] = Layout.STANDARD) -> List[Piece]:
    """Starting table for ``local_color`` seated at the high-index side."""
    layout = Layout(layout)
    local = Piece(color=local_color)
    enemy = Piece(color=local_color.opposite)
    tiles: List[Piece] = []
    for i in range(SQUARES_COUNT):
        if layout is Layout.OUTPOST:
            if i in _OUTPOSTS:
                tiles.append(enemy)
            elif i >= 23:
                tiles.append(local)
            else:
                tiles.append(EMPTY)
        else:
            if i < 12:
                tiles.append(enemy)
            elif i >= 20:
                tiles.append(local)
            else:
                tiles.append(EMPTY)
    return tiles


def initial_position(local_color: Color = Color.RED,
                     layout: Union[Layout, str] = Layout.STANDARD,
                     side_to_move: Optional[Color] = None) -> Position:
    """Initial position; the local color moves first unless told otherwise."""
    local_color = Color(local_color)
    return Position(
        default_setup(local_color, layout),
        side_to_move=local_color if side_to_move is None else side_to_move,
        local_color=local_color,
    )


def position_from_squares(local_color: Color = Color.RED,
                          side_to_move: Optional[Color] = None,
                          **by_kind: Sequence[SquareIndex]) -> Position:
    """Build a sparse position.

    Keyword arguments ``red``, ``black``, ``red_kings`` and ``black_kings``
    list the occupied squares, e.g. ``position_from_squares(red=[21], black=[17])``.
    """
    kinds: dict = {
        "red": Piece(Color.RED),
        "black": Piece(Color.BLACK),
        "red_kings": Piece(Color.RED, is_king=True),
        "black_kings": Piece(Color.BLACK, is_king=True),
    }
    tiles: List[Piece] = [EMPTY] * SQUARES_COUNT
    for kind, squares in by_kind.items():
        if kind not in kinds:
            raise TypeError(f"Unknown piece kind: {kind}")
        for sq in squares:
            check_square(sq)
            if tiles[sq].is_active:
                raise InvalidPositionError(f"Square {sq} is occupied twice")
            tiles[sq] = kinds[kind]
    local_color = Color(local_color)
    return Position(tiles, local_color if side_to_move is None else side_to_move, local_color)


def count_pieces(position: Position) -> Tuple[int, int, int, int]:
    """Count pieces of each type on the board.

    Returns:
        Tuple of (black_pieces, red_pieces, black_kings, red_kings)
    """
    active = [p for p in position.pieces if p.is_active]
    blacks = sum(1 for p in active if p.color == Color.BLACK)
    reds = sum(1 for p in active if p.color == Color.RED)
    bk = sum(1 for p in active if p.color == Color.BLACK and p.is_king)
    rk = sum(1 for p in active if p.color == Color.RED and p.is_king)
    return blacks, reds, bk, rk

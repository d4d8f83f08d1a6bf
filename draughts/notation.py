"""
Move notation using the 1..32 square numbers of standard checkers.

Internally squares are 0..31; text always shows them one higher.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .types import SQUARES_COUNT, Move, SquareIndex


def square_name(idx: SquareIndex) -> str:
    return str(idx + 1)


def move_to_str(move: Move) -> str:
    """Text form: 24-20 for a simple move, 24x15 for a capture."""
    sep = 'x' if move.is_capture else '-'
    return f"{square_name(move.origin)}{sep}{square_name(move.destination)}"


def parse_move_str(s: str) -> Optional[Tuple[SquareIndex, SquareIndex]]:
    """Parse a move string into 0-based (origin, destination).

    Intermediate squares of a written jump path are accepted and ignored.
    """
    s = s.strip().lower().replace('x', '-').replace(' ', '')
    if not s:
        return None
    parts: List[str] = [p for p in s.split('-') if p]
    if len(parts) < 2:
        return None
    try:
        seq: List[int] = [int(p) for p in parts]
    except ValueError:
        return None
    if not all(1 <= x <= SQUARES_COUNT for x in seq):
        return None
    return seq[0] - 1, seq[-1] - 1


def match_moves(moves: Iterable[Move], s: str) -> List[Move]:
    """Legal moves whose endpoints match the text. Empty if none or unparseable."""
    parsed = parse_move_str(s)
    if parsed is None:
        return []
    origin, destination = parsed
    return [m for m in moves if m.origin == origin and m.destination == destination]

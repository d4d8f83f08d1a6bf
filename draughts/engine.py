"""
Engine API: move generation, move application and game-end detection.

All functions are pure: they read the Position they are given and return
new values, so a driver can call them back to back without locking.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from .board import Position, initial_position
from .config import GameRulesSettings, get_game_rules
from .moves import MoveGenerator, PieceMoves
from .types import EMPTY, Color, Layout, Move, SquareIndex

__all__ = [
    "start_new_game",
    "get_generator",
    "legal_moves",
    "legal_moves_for_piece",
    "apply_move",
    "is_terminal",
    "winner",
]


def get_generator(rules: Optional[GameRulesSettings] = None) -> MoveGenerator:
    """MoveGenerator configured from rules settings (global config when omitted)."""
    rules = rules or get_game_rules()
    return MoveGenerator(
        captures_mandatory=rules.captures_mandatory,
        continue_after_promotion=rules.continue_after_promotion,
    )


def start_new_game(local_color: Optional[Color] = None,
                   rules: Optional[GameRulesSettings] = None) -> Position:
    """Fresh starting position; settings pick the layout and local color."""
    rules = rules or get_game_rules()
    color = rules.color() if local_color is None else Color(local_color)
    return initial_position(color, Layout(rules.opening_layout))


def legal_moves(position: Position, color: Optional[Color] = None,
                rules: Optional[GameRulesSettings] = None) -> Optional[List[Move]]:
    return get_generator(rules).legal_moves(position, color)


def legal_moves_for_piece(position: Position, square: SquareIndex,
                          rules: Optional[GameRulesSettings] = None) -> Optional[PieceMoves]:
    return get_generator(rules).legal_moves_for_piece(position, square)


def apply_move(position: Position, move: Move) -> Position:
    """Apply a move generated for this position and pass the turn.

    The input position is left untouched. The move is trusted: legality is
    not re-checked here.
    """
    pieces = list(position.pieces)
    piece = pieces[move.origin]
    if move.promotes:
        piece = piece.crowned()
    pieces[move.origin] = EMPTY
    for sq in move.captured or ():
        pieces[sq] = EMPTY
    pieces[move.destination] = piece
    return replace(position, pieces=pieces, side_to_move=piece.color.opposite)


def is_terminal(position: Position, color: Optional[Color] = None,
                rules: Optional[GameRulesSettings] = None) -> bool:
    """True if ``color`` (default: side to move) has no pieces or no legal move."""
    return not legal_moves(position, color, rules)


def winner(position: Position, rules: Optional[GameRulesSettings] = None) -> Optional[Color]:
    """The winning color if the side to move has lost, else None."""
    if is_terminal(position, rules=rules):
        return position.side_to_move.opposite
    return None

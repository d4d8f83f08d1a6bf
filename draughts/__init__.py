"""Draughts package: checkers rules engine.

Usage examples:
    from draughts import start_new_game, legal_moves, apply_move
    from draughts import Game, encode_move, decode_move
"""
from __future__ import annotations

from .types import Color, Direction, Layout, Move, Piece, EMPTY
from .board import Position, initial_position, position_from_squares, count_pieces
from .moves import MoveGenerator, MoveValidator

# Engine API
from .engine import (
    start_new_game,
    get_generator,
    legal_moves,
    legal_moves_for_piece,
    apply_move,
    is_terminal,
    winner,
)

# Collaborator-facing helpers
from .notation import move_to_str, parse_move_str, match_moves
from .wire import MoveMessage, encode_move, decode_move, validate_incoming
from .game import Game
from .exceptions import (
    DraughtsError,
    SquareIndexError,
    InvalidPositionError,
    IllegalMoveError,
    MalformedMoveError,
    DesyncError,
    GameOverError,
)

__version__ = "1.0.0"

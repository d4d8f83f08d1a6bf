"""
Game state management: one owned Position plus turn, history and highlights.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple, Union

from .board import Position
from .config import GameRulesSettings, get_game_rules
from .engine import apply_move, get_generator, start_new_game
from .exceptions import GameOverError, IllegalMoveError
from .types import Color, Layout, Move, SquareIndex
from .wire import decode_move, validate_incoming

logger = logging.getLogger(__name__)


def group_moves_by_start(moves: List[Move]) -> Dict[SquareIndex, List[Move]]:
    """Group moves by their starting square."""
    result: Dict[SquareIndex, List[Move]] = {}
    for move in moves:
        result.setdefault(move.origin, []).append(move)
    return result


def group_moves_by_dest(moves: List[Move]) -> Dict[SquareIndex, List[Move]]:
    """Group moves by their ending square."""
    result: Dict[SquareIndex, List[Move]] = {}
    for move in moves:
        result.setdefault(move.destination, []).append(move)
    return result


class Game:
    """Owns the Position for one game and serialises calls into the engine.

    Callers re-read ``position`` after ``start_new_game``, ``make_move`` and
    ``undo_move``; there is no change notification.
    """

    def __init__(self, local_color: Optional[Color] = None,
                 rules: Optional[GameRulesSettings] = None) -> None:
        self.rules = rules or get_game_rules()
        self.generator = get_generator(self.rules)
        self.position: Position = start_new_game(local_color, self.rules)
        self.history: List[Tuple[Position, Optional[Move]]] = []
        self.last_move: Optional[Move] = None
        self.legal_moves_list: List[Move] = []
        self.moves_by_start: Dict[SquareIndex, List[Move]] = {}
        self.game_over = False
        self.winner: Optional[Color] = None
        self._refresh()

    def start_new_game(self, local_color: Optional[Color] = None,
                       layout: Optional[Union[Layout, str]] = None) -> None:
        """Reset to a starting layout. The local color moves first."""
        rules = self.rules
        if layout is not None:
            rules = rules.model_copy(update={'opening_layout': Layout(layout)})
        self.position = start_new_game(local_color, rules)
        self.history.clear()
        self.last_move = None
        self._refresh()
        logger.info("New game: local=%s layout=%s", self.position.local_color.name,
                    Layout(rules.opening_layout).value)

    def load_position(self, position: Position) -> None:
        """Continue from an arbitrary position (history is discarded)."""
        self.position = position.copy()
        self.history.clear()
        self.last_move = None
        self._refresh()

    def _refresh(self) -> None:
        """Recalculate legal moves, groupings and the game-end flags."""
        moves = self.generator.legal_moves(self.position)
        self.legal_moves_list = moves or []
        self.moves_by_start = group_moves_by_start(self.legal_moves_list)
        if not self.legal_moves_list:
            self.game_over = True
            self.winner = self.position.side_to_move.opposite
            logger.info("Game over: %s wins", self.winner.name)
        else:
            self.game_over = False
            self.winner = None

    @property
    def current_player(self) -> Color:
        return self.position.side_to_move

    def is_local_turn(self) -> bool:
        return self.position.side_to_move == self.position.local_color

    def legal_moves(self) -> List[Move]:
        return list(self.legal_moves_list)

    def moves_for_square(self, square: SquareIndex) -> List[Move]:
        """All legal moves starting from a specific square."""
        return self.moves_by_start.get(square, [])

    def destinations_for_square(self, square: SquareIndex) -> Dict[SquareIndex, List[Move]]:
        """Move options from a square grouped by destination."""
        return group_moves_by_dest(self.moves_for_square(square))

    def marked_squares(self) -> List[SquareIndex]:
        """Destination squares of every legal move, in board order."""
        return sorted({m.destination for m in self.legal_moves_list})

    def is_valid_move(self, move: Move) -> bool:
        return move in self.legal_moves_list

    def make_move(self, move: Move) -> Position:
        """Apply a legal move and pass the turn."""
        if self.game_over:
            raise GameOverError("The game has ended")
        if not self.is_valid_move(move):
            raise IllegalMoveError(f"Move {move.origin}->{move.destination} is not legal")

        self.history.append((self.position, self.last_move))
        self.position = apply_move(self.position, move)
        self.last_move = move
        self._refresh()
        return self.position

    def apply_remote(self, payload: Union[str, bytes]) -> Move:
        """Decode, validate and apply a move received from the peer."""
        if self.game_over:
            raise GameOverError("The game has ended")
        message = decode_move(payload)
        move = validate_incoming(self.position, message, self.generator)
        self.make_move(move)
        return move

    def undo_move(self) -> bool:
        """Undo the last move and return success."""
        if not self.rules.allow_undo or not self.history:
            return False
        self.position, self.last_move = self.history.pop()
        self._refresh()
        return True

    def piece_counts(self) -> Tuple[int, int, int]:
        """(local pieces, enemy pieces, empty squares)."""
        return (self.position.player_piece_count(), self.position.enemy_piece_count(),
                self.position.empty_count())

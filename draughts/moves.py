from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .board import Position, is_promotion_square
from .types import Captures, Color, Direction, Move, SquareIndex

logger = logging.getLogger(__name__)

# (moves, any_is_capture)
PieceMoves = Tuple[List[Move], bool]


class MoveGenerator:
    """Generates legal moves for a position.

    This class encapsulates move generation and capture rules. Search is a
    depth-first walk over (square, direction, captured-so-far) states; the
    capture chain is a tuple, so sibling branches never share it.
    """

    def __init__(self, captures_mandatory: bool = True,
                 continue_after_promotion: bool = True) -> None:
        self.captures_mandatory = bool(captures_mandatory)
        self.continue_after_promotion = bool(continue_after_promotion)

    @staticmethod
    def _occupied(position: Position, origin: SquareIndex, idx: SquareIndex) -> bool:
        # The moving piece has left its origin square, so a circular chain may
        # end there. Keeping the origin blocked would forbid such chains.
        return idx != origin and position.pieces[idx].is_active

    def _walk(self, position: Position, origin: SquareIndex, square: SquareIndex,
              color: Color, is_king: bool, direction: Direction,
              chain: Captures, crowned: bool) -> PieceMoves:
        """Moves found by stepping from ``square`` along ``direction``.

        A non-empty ``chain`` means the piece is mid-capture and only further
        captures are produced.
        """
        moves_up = position.moves_up(color)
        if not is_king and direction.is_backward(moves_up):
            return [], False
        nxt: Optional[SquareIndex] = direction.step(square)
        if nxt is None:
            return [], False

        if self._occupied(position, origin, nxt):
            target = position.pieces[nxt]
            if target.color == color or nxt in chain:
                return [], False
            return self._jump(position, origin, nxt, color, is_king, direction, chain, crowned)

        if not is_king:
            if chain:
                return [], False
            return [Move(origin, nxt, None, is_promotion_square(nxt, moves_up))], False

        # Kings slide over empty squares.
        further, taking = self._walk(position, origin, nxt, color, is_king, direction, chain, crowned)
        if chain:
            return further, taking
        step = Move(origin, nxt, None, is_promotion_square(nxt, moves_up))
        return [step] + further, taking

    def _jump(self, position: Position, origin: SquareIndex, over: SquareIndex,
              color: Color, is_king: bool, direction: Direction,
              chain: Captures, crowned: bool) -> PieceMoves:
        landing: Optional[SquareIndex] = direction.step(over)
        if landing is None or self._occupied(position, origin, landing):
            return [], False

        moves_up = position.moves_up(color)
        chain = chain + (over,)
        far_row = is_promotion_square(landing, moves_up)
        crowned = crowned or (not is_king and far_row)
        if crowned and not is_king and not self.continue_after_promotion:
            return [Move(origin, landing, chain, True)], True

        continuations: List[Move] = []
        for d in Direction:
            found, taking = self._walk(position, origin, landing, color, is_king or crowned, d, chain, crowned)
            if taking:
                continuations.extend(found)
        if continuations:
            return continuations, True
        return [Move(origin, landing, chain, crowned or far_row)], True

    def legal_moves_for_piece(self, position: Position, square: SquareIndex) -> Optional[PieceMoves]:
        """Moves for the piece on ``square``.

        Returns None when the square is empty or the piece cannot move.
        Raises SquareIndexError for an index outside 0..31.
        """
        piece = position.piece_at(square)
        if not piece.is_active:
            return None
        moves: List[Move] = []
        any_capture = False
        for direction in Direction:
            found, taking = self._walk(position, square, square, piece.color, piece.is_king,
                                       direction, (), False)
            moves.extend(found)
            any_capture = any_capture or taking
        if not moves:
            return None
        if any_capture and self.captures_mandatory:
            moves = [m for m in moves if m.is_capture]
        return moves, any_capture

    def legal_moves(self, position: Position, color: Optional[Color] = None) -> Optional[List[Move]]:
        """All legal moves for ``color`` (default: the side to move).

        Returns None if that side has no pieces, and an empty list if it has
        pieces but none can move.
        """
        side = position.side_to_move if color is None else Color(color)
        squares = position.squares_of(side)
        if not squares:
            return None
        captures: List[Move] = []
        quiets: List[Move] = []
        for sq in squares:
            result = self.legal_moves_for_piece(position, sq)
            if result is None:
                continue
            for m in result[0]:
                (captures if m.is_capture else quiets).append(m)
        logger.debug("%s: %d captures, %d quiet moves", side.name, len(captures), len(quiets))
        if captures:
            return captures if self.captures_mandatory else captures + quiets
        return quiets


class MoveValidator:
    """Validates moves against generated legal moves."""

    @staticmethod
    def validate(position: Position, move: Move, captures_mandatory: bool = True,
                 continue_after_promotion: bool = True) -> bool:
        gen = MoveGenerator(captures_mandatory, continue_after_promotion)
        legal = gen.legal_moves(position)
        return bool(legal) and move in legal


# Convenience functional API

def legal_moves_for_piece(position: Position, square: SquareIndex,
                          captures_mandatory: bool = True) -> Optional[PieceMoves]:
    return MoveGenerator(captures_mandatory=captures_mandatory).legal_moves_for_piece(position, square)


def legal_moves(position: Position, color: Optional[Color] = None,
                captures_mandatory: bool = True) -> Optional[List[Move]]:
    return MoveGenerator(captures_mandatory=captures_mandatory).legal_moves(position, color)

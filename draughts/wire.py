"""
Wire contract for sending a turn to a peer.

A MoveMessage carries the minimal description needed to replay a move on
the peer's copy of the game, plus an optional fingerprint of the position it
was made from. Incoming messages must pass ``validate_incoming`` before they
are applied.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .board import Position
from .exceptions import DesyncError, IllegalMoveError, MalformedMoveError
from .engine import get_generator
from .moves import MoveGenerator
from .types import MAX_SQUARE_INDEX, MIN_SQUARE_INDEX, Move

logger = logging.getLogger(__name__)


class MoveMessage(BaseModel):
    """Serializable form of a Move."""

    model_config = ConfigDict(frozen=True, extra='forbid')

    origin: int = Field(ge=MIN_SQUARE_INDEX, le=MAX_SQUARE_INDEX)
    destination: int = Field(ge=MIN_SQUARE_INDEX, le=MAX_SQUARE_INDEX)
    captured: Optional[List[int]] = Field(default=None, description="Captured squares in jump order")
    promotes: bool = False
    fingerprint: Optional[str] = Field(default=None, description="Fingerprint of the position before the move")

    @field_validator('captured')
    @classmethod
    def validate_captured(cls, v):
        if v is None:
            return v
        if not v:
            raise ValueError("captured must be omitted or non-empty")
        if any(not MIN_SQUARE_INDEX <= sq <= MAX_SQUARE_INDEX for sq in v):
            raise ValueError("captured squares must be in 0..31")
        if len(set(v)) != len(v):
            raise ValueError("a square cannot be captured twice")
        return v

    @model_validator(mode='after')
    def validate_endpoints(self) -> 'MoveMessage':
        if self.origin == self.destination and not self.captured:
            raise ValueError("a simple move must change square")
        return self

    @classmethod
    def from_move(cls, move: Move, position: Optional[Position] = None) -> 'MoveMessage':
        return cls(
            origin=move.origin,
            destination=move.destination,
            captured=list(move.captured) if move.captured else None,
            promotes=move.promotes,
            fingerprint=position.fingerprint() if position is not None else None,
        )

    def to_move(self) -> Move:
        return Move(
            origin=self.origin,
            destination=self.destination,
            captured=tuple(self.captured) if self.captured else None,
            promotes=self.promotes,
        )


def encode_move(move: Move, position: Optional[Position] = None) -> str:
    """JSON payload for ``move``; include ``position`` to enable desync checks."""
    return MoveMessage.from_move(move, position).model_dump_json(exclude_none=True)


def decode_move(payload: Union[str, bytes]) -> MoveMessage:
    try:
        return MoveMessage.model_validate_json(payload)
    except ValidationError as e:
        raise MalformedMoveError(f"Invalid move payload: {e.error_count()} error(s)") from e


def validate_incoming(position: Position, message: MoveMessage,
                      generator: Optional[MoveGenerator] = None) -> Move:
    """Return the locally generated Move matching ``message``.

    Raises DesyncError if the sender's fingerprint disagrees with ours and
    IllegalMoveError if the move is not legal for the side to move.
    """
    if message.fingerprint is not None and message.fingerprint != position.fingerprint():
        logger.warning("Rejected move %d->%d: position fingerprint mismatch",
                       message.origin, message.destination)
        raise DesyncError("Peer position does not match local position")
    generator = generator or get_generator()
    legal = generator.legal_moves(position) or []
    wanted = message.to_move()
    for move in legal:
        if move == wanted:
            return move
    logger.warning("Rejected move %d->%d: not legal for %s",
                   message.origin, message.destination, position.side_to_move.name)
    raise IllegalMoveError(f"Move {message.origin}->{message.destination} is not legal")

"""Move-selection agents for the pursuit game engine.

An agent is asked for a move with the game view, its current location, the
legal move set and a single-use callback. It must eventually call the
callback exactly once with a member of the set. Agents may answer
immediately (RandomAgent) or hold on to the callback and answer later
(DeferredAgent).
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Callable, Optional, TYPE_CHECKING

from core.board import NodeId
from core.moves import DoubleMove, Move, PassMove, TicketMove

from .game_engine import InvalidMoveError

if TYPE_CHECKING:
    from .view import GameView


MoveCallback = Callable[[Move], None]


def sort_moves(moves: frozenset[Move]) -> list[Move]:
    """Order moves deterministically: passes, singles, then doubles."""

    def key(move: Move) -> tuple:
        if isinstance(move, PassMove):
            return (0,)
        if isinstance(move, TicketMove):
            return (1, move.destination, move.ticket.value)
        return (
            2,
            move.first_move.destination,
            move.first_move.ticket.value,
            move.second_move.destination,
            move.second_move.ticket.value,
        )

    return sorted(moves, key=key)


class Agent(ABC):
    """Abstract move-selection collaborator."""

    @abstractmethod
    def make_move(
        self,
        view: GameView,
        location: NodeId,
        moves: frozenset[Move],
        callback: MoveCallback,
    ) -> None:
        """Choose one of ``moves`` and pass it to ``callback``."""
        pass


class FirstMoveAgent(Agent):
    """Always plays the first move in deterministic order."""

    def make_move(self, view, location, moves, callback) -> None:
        callback(sort_moves(moves)[0])


class RandomAgent(Agent):
    """Plays a uniformly random legal move.

    Args:
        seed: Seed for reproducible games.
        allow_double: If False, double moves are only played when nothing
            else is legal.
    """

    def __init__(self, seed: Optional[int] = None, allow_double: bool = True):
        self.rng = random.Random(seed)
        self.allow_double = allow_double

    def make_move(self, view, location, moves, callback) -> None:
        candidates = sort_moves(moves)
        if not self.allow_double:
            singles = [m for m in candidates if not isinstance(m, DoubleMove)]
            candidates = singles or candidates
        callback(self.rng.choice(candidates))


class DeferredAgent(Agent):
    """Stores the request so an external caller can answer it later."""

    def __init__(self) -> None:
        self.view: Optional[GameView] = None
        self.location: Optional[NodeId] = None
        self.moves: frozenset[Move] = frozenset()
        self._callback: Optional[MoveCallback] = None

    def make_move(self, view, location, moves, callback) -> None:
        self.view = view
        self.location = location
        self.moves = moves
        self._callback = callback

    @property
    def is_waiting(self) -> bool:
        return self._callback is not None

    def submit(self, move: Move) -> None:
        """Answer the pending request.

        Raises:
            RuntimeError: If no request is pending.
            InvalidMoveError: If the move was not offered; the request stays
                pending.
        """
        if self._callback is None:
            raise RuntimeError("No move has been requested from this agent")
        if move not in self.moves:
            raise InvalidMoveError(f"Invalid move: {move}")
        callback, self._callback = self._callback, None
        self.moves = frozenset()
        callback(move)

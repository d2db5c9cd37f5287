"""Spectator protocol for the pursuit game engine.

Spectators observe a game through four events:
- on_move_made: a move was played (Mr X's moves possibly concealed)
- on_round_started: Mr X completed a move opening the given round
- on_rotation_complete: every player has moved once and the game goes on
- on_game_over: the game ended; carries the winning colours

Events are delivered synchronously, in registration order.
"""

from __future__ import annotations

import logging
from abc import ABC
from typing import Any, Iterator, TYPE_CHECKING

from core.constants import Colour
from core.moves import Move

if TYPE_CHECKING:
    from .view import GameView


logger = logging.getLogger(__name__)


class Spectator(ABC):
    """Base class for game observers. Override the events you care about."""

    def on_move_made(self, view: GameView, move: Move) -> None:
        pass

    def on_round_started(self, view: GameView, round_index: int) -> None:
        pass

    def on_rotation_complete(self, view: GameView) -> None:
        pass

    def on_game_over(self, view: GameView, winning_colours: frozenset[Colour]) -> None:
        pass


class SpectatorRegistry:
    """Ordered collection of spectators with strict registration rules."""

    def __init__(self) -> None:
        self._spectators: list[Spectator] = []

    def register(self, spectator: Spectator) -> None:
        """Add a spectator.

        Raises:
            ValueError: If the spectator is None or already registered.
        """
        if spectator is None:
            raise ValueError("Cannot register a null spectator")
        if spectator in self._spectators:
            raise ValueError(f"Spectator {spectator!r} is already registered")
        self._spectators.append(spectator)

    def unregister(self, spectator: Spectator) -> None:
        """Remove a spectator.

        Raises:
            ValueError: If the spectator is None or not registered.
        """
        if spectator is None:
            raise ValueError("Cannot unregister a null spectator")
        if spectator not in self._spectators:
            raise ValueError(f"Spectator {spectator!r} is not registered")
        self._spectators.remove(spectator)

    def as_tuple(self) -> tuple[Spectator, ...]:
        return tuple(self._spectators)

    def __iter__(self) -> Iterator[Spectator]:
        # Snapshot so spectators may (un)register while being notified
        return iter(tuple(self._spectators))

    def __len__(self) -> int:
        return len(self._spectators)

    def __contains__(self, spectator: object) -> bool:
        return spectator in self._spectators

    # -------------------------------------------------------------------------
    # Notification
    # -------------------------------------------------------------------------

    def move_made(self, view: GameView, move: Move) -> None:
        for spectator in self:
            spectator.on_move_made(view, move)

    def round_started(self, view: GameView, round_index: int) -> None:
        for spectator in self:
            spectator.on_round_started(view, round_index)

    def rotation_complete(self, view: GameView) -> None:
        for spectator in self:
            spectator.on_rotation_complete(view)

    def game_over(self, view: GameView, winning_colours: frozenset[Colour]) -> None:
        for spectator in self:
            spectator.on_game_over(view, winning_colours)


class LoggingSpectator(Spectator):
    """Writes every event to a logger."""

    def __init__(self, log: logging.Logger = logger, level: int = logging.INFO):
        self.log = log
        self.level = level

    def on_move_made(self, view: GameView, move: Move) -> None:
        self.log.log(self.level, "Round %d: %s", view.get_current_round(), move)

    def on_round_started(self, view: GameView, round_index: int) -> None:
        self.log.log(self.level, "Round %d started", round_index)

    def on_rotation_complete(self, view: GameView) -> None:
        self.log.log(self.level, "Rotation complete")

    def on_game_over(self, view: GameView, winning_colours: frozenset[Colour]) -> None:
        winners = ", ".join(sorted(c.value for c in winning_colours))
        self.log.log(self.level, "Game over, winners: %s", winners)


class RecordingSpectator(Spectator):
    """Keeps every event as an ``(event_name, payload)`` tuple."""

    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def on_move_made(self, view: GameView, move: Move) -> None:
        self.events.append(("move_made", move))

    def on_round_started(self, view: GameView, round_index: int) -> None:
        self.events.append(("round_started", round_index))

    def on_rotation_complete(self, view: GameView) -> None:
        self.events.append(("rotation_complete", None))

    def on_game_over(self, view: GameView, winning_colours: frozenset[Colour]) -> None:
        self.events.append(("game_over", winning_colours))

    def moves(self) -> list[Move]:
        return [payload for name, payload in self.events if name == "move_made"]

    def event_names(self) -> list[str]:
        return [name for name, _ in self.events]

    def clear(self) -> None:
        self.events.clear()

"""Read-only view of a game for agents and spectators.

The view never hands out mutable state: Mr X's location is reported as the
last disclosed location, and collections are returned as tuples.
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from core.board import BoardGraph, NodeId
from core.constants import Colour, Ticket

if TYPE_CHECKING:
    from .game_engine import GameEngine


class GameView:
    """Spectator-safe projection of a GameEngine."""

    def __init__(self, engine: GameEngine):
        self._engine = engine

    def get_players(self) -> tuple[Colour, ...]:
        """Colours in turn order, Mr X first."""
        return tuple(self._engine._state.colours())

    def get_current_player(self) -> Colour:
        return self._engine._state.get_current_player().colour

    def get_current_round(self) -> int:
        return self._engine._state.current_round

    def get_rounds(self) -> tuple[bool, ...]:
        return self._engine._state.rounds

    def get_board(self) -> BoardGraph:
        return self._engine._state.board

    def get_player_location(self, colour: Colour) -> Optional[NodeId]:
        """Location of a player, or None if the colour is not playing.

        Mr X's location is the last one disclosed (0 before the first reveal).
        """
        state = self._engine._state
        if colour.is_mrx():
            return state.revealed_location
        for player in state.detectives:
            if player.colour is colour:
                return player.location
        return None

    def get_player_tickets(self, colour: Colour, ticket: Ticket) -> Optional[int]:
        """Ticket count of a player, or None if the colour is not playing."""
        for player in self._engine._state.players:
            if player.colour is colour:
                return player.tickets.get(ticket, 0)
        return None

    def is_game_over(self) -> bool:
        return self._engine.is_game_over()

    def get_winning_players(self) -> frozenset[Colour]:
        return self._engine.get_winning_players()

    def is_reveal_round(self) -> bool:
        """Check if Mr X's next move will be disclosed."""
        state = self._engine._state
        return state.current_round < len(state.rounds) and state.rounds[state.current_round]

    def __repr__(self) -> str:
        return f"GameView(round={self.get_current_round()}, player={self.get_current_player().value})"

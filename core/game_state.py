"""Game state for the pursuit game engine.

GameState is the single source of truth for a game in progress. It is owned
by the GameEngine; callers outside the engine only ever receive clones or
read-only views.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any

from .board import BoardGraph, NodeId
from .constants import Colour, HIDDEN_LOCATION, NOT_STARTED
from .player import Player


@dataclass
class GameState:
    """The complete game state.

    Attributes:
        rounds: Reveal schedule; True marks a round where Mr X surfaces.
        board: The transport graph (shared, immutable).
        players: All players in turn order, Mr X first.
        current_round: Zero-based index of Mr X's next round.
        current_player_idx: Index into ``players`` of the player to act.
        round_finished: Whether the last move completed a rotation.
        revealed_location: Mr X's last disclosed location.
    """

    rounds: tuple[bool, ...]
    board: BoardGraph
    players: list[Player]
    current_round: int = NOT_STARTED
    current_player_idx: int = 0
    round_finished: bool = False
    revealed_location: NodeId = HIDDEN_LOCATION

    # -------------------------------------------------------------------------
    # Player access methods
    # -------------------------------------------------------------------------

    @property
    def mrx(self) -> Player:
        return self.players[0]

    @property
    def detectives(self) -> list[Player]:
        return self.players[1:]

    def get_current_player(self) -> Player:
        """Get the player whose turn it is."""
        return self.players[self.current_player_idx]

    def get_player(self, colour: Colour) -> Player:
        """Get a player by colour.

        Raises:
            ValueError: If no player has that colour.
        """
        for player in self.players:
            if player.colour is colour:
                return player
        raise ValueError(f"No player with colour {colour.value}")

    def colours(self) -> list[Colour]:
        return [player.colour for player in self.players]

    def num_players(self) -> int:
        return len(self.players)

    # -------------------------------------------------------------------------
    # Round queries
    # -------------------------------------------------------------------------

    def is_final_round(self) -> bool:
        """Check if Mr X is about to play the last round of the schedule."""
        return self.current_round == len(self.rounds) - 1

    def rounds_remaining(self) -> int:
        return len(self.rounds) - self.current_round

    # -------------------------------------------------------------------------
    # Cloning and serialization
    # -------------------------------------------------------------------------

    def clone(self) -> GameState:
        """Copy the mutable parts of the state; the board is shared."""
        return GameState(
            rounds=self.rounds,
            board=self.board,
            players=[player.clone() for player in self.players],
            current_round=self.current_round,
            current_player_idx=self.current_player_idx,
            round_finished=self.round_finished,
            revealed_location=self.revealed_location,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize the mutable game state to a dictionary."""
        return {
            "rounds": list(self.rounds),
            "current_round": self.current_round,
            "current_player_idx": self.current_player_idx,
            "round_finished": self.round_finished,
            "revealed_location": self.revealed_location,
            "players": [
                {
                    "colour": p.colour.value,
                    "location": p.location,
                    "tickets": {t.value: n for t, n in p.tickets.items()},
                }
                for p in self.players
            ],
        }

    def state_hash(self) -> str:
        """Compute a hash of the game state."""
        state_json = json.dumps(self.to_dict(), sort_keys=True)
        return hashlib.sha256(state_json.encode()).hexdigest()

    def __str__(self) -> str:
        """Return a human-readable string representation."""
        lines = [
            f"GameState(round={self.current_round}/{len(self.rounds)}, "
            f"finished={self.round_finished})",
            f"  Current player: {self.get_current_player().colour.value}",
            f"  Mr X last seen: {self.revealed_location or 'never'}",
            f"  Players ({len(self.players)}):",
        ]
        for p in self.players:
            tickets = ", ".join(f"{t.value}={n}" for t, n in p.tickets.items())
            lines.append(f"    {p.colour.value}: at {p.location} [{tickets}]")
        return "\n".join(lines)

"""Core data models for the pursuit game engine."""

from .constants import (
    Colour,
    Transport,
    Ticket,
    TRANSPORT_TICKETS,
    SPECIAL_TICKETS,
    DETECTIVE_FORBIDDEN_TICKETS,
    NOT_STARTED,
    HIDDEN_LOCATION,
    MIN_DETECTIVES,
    MAX_DETECTIVES,
    REVEAL_ROUNDS,
    DEFAULT_ROUNDS,
    MRX_DEFAULT_TICKETS,
    DETECTIVE_DEFAULT_TICKETS,
    DETECTIVE_COLOURS,
)

from .board import NodeId, Edge, BoardGraph

from .player import Player, PlayerConfiguration

from .moves import Move, PassMove, TicketMove, DoubleMove

from .game_state import GameState

__all__ = [
    # Constants
    "Colour",
    "Transport",
    "Ticket",
    "TRANSPORT_TICKETS",
    "SPECIAL_TICKETS",
    "DETECTIVE_FORBIDDEN_TICKETS",
    "NOT_STARTED",
    "HIDDEN_LOCATION",
    "MIN_DETECTIVES",
    "MAX_DETECTIVES",
    "REVEAL_ROUNDS",
    "DEFAULT_ROUNDS",
    "MRX_DEFAULT_TICKETS",
    "DETECTIVE_DEFAULT_TICKETS",
    "DETECTIVE_COLOURS",
    # Board
    "NodeId",
    "Edge",
    "BoardGraph",
    # Player
    "Player",
    "PlayerConfiguration",
    # Moves
    "Move",
    "PassMove",
    "TicketMove",
    "DoubleMove",
    # Game State
    "GameState",
]

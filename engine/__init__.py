"""Rules engine for the pursuit game.

This module provides the game logic including:
- Legal move generation and the visibility policy for Mr X
- Win condition evaluation
- The turn engine and its state machine
- Spectator notification and read-only game views
"""

from .turn_machine import (
    TurnMachine,
    TurnPhase,
    TurnTransitionResult,
    TURN_TRANSITIONS,
)

from .move_generator import (
    legal_single_moves,
    legal_double_moves,
    legal_moves,
)

from .visibility import (
    is_reveal_round,
    shown_ticket_move,
    shown_double_move,
)

from .win_conditions import Winner, evaluate_winner, winning_colours

from .spectators import (
    Spectator,
    SpectatorRegistry,
    LoggingSpectator,
    RecordingSpectator,
)

from .setup import (
    GameConfigError,
    validate_game_config,
    create_configurations,
)

from .agents import Agent, RandomAgent, FirstMoveAgent, DeferredAgent

from .view import GameView

from .game_engine import GameEngine, InvalidMoveError

__all__ = [
    # Turn machine
    "TurnMachine",
    "TurnPhase",
    "TurnTransitionResult",
    "TURN_TRANSITIONS",
    # Move generation
    "legal_single_moves",
    "legal_double_moves",
    "legal_moves",
    # Visibility
    "is_reveal_round",
    "shown_ticket_move",
    "shown_double_move",
    # Win conditions
    "Winner",
    "evaluate_winner",
    "winning_colours",
    # Spectators
    "Spectator",
    "SpectatorRegistry",
    "LoggingSpectator",
    "RecordingSpectator",
    # Setup
    "GameConfigError",
    "validate_game_config",
    "create_configurations",
    # Agents
    "Agent",
    "RandomAgent",
    "FirstMoveAgent",
    "DeferredAgent",
    # Game engine
    "GameView",
    "GameEngine",
    "InvalidMoveError",
]

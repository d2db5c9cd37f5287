"""Turn state machine for the pursuit game engine.

Tracks where the engine is in a turn:
- AWAITING_MOVE: an agent has been asked for a move
- APPLYING: a submitted move is being applied
- ROUND_ADVANCING: the next player is being chosen and win conditions checked
- GAME_OVER: terminal

The machine does not modify game state; it only enforces that the engine
moves through the turn in a valid order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TurnPhase(Enum):
    """Phases of a single turn."""

    AWAITING_MOVE = "awaiting_move"
    APPLYING = "applying"
    ROUND_ADVANCING = "round_advancing"
    GAME_OVER = "game_over"


# Valid phase transitions
TURN_TRANSITIONS: dict[TurnPhase, list[TurnPhase]] = {
    TurnPhase.AWAITING_MOVE: [TurnPhase.APPLYING],
    TurnPhase.APPLYING: [TurnPhase.ROUND_ADVANCING],
    TurnPhase.ROUND_ADVANCING: [TurnPhase.AWAITING_MOVE, TurnPhase.GAME_OVER],
    # Terminal
    TurnPhase.GAME_OVER: [],
}


@dataclass
class TurnTransitionResult:
    """Result of a transition attempt.

    Attributes:
        success: Whether the transition was made.
        new_phase: The phase entered, None on failure.
        reason: Why the transition failed.
    """

    success: bool
    new_phase: Optional[TurnPhase]
    reason: Optional[str] = None


class TurnMachine:
    """State machine for the engine's turn phases."""

    def __init__(self, initial_phase: TurnPhase = TurnPhase.AWAITING_MOVE):
        self._phase = initial_phase

    @property
    def phase(self) -> TurnPhase:
        return self._phase

    def get_valid_transitions(self) -> list[TurnPhase]:
        return TURN_TRANSITIONS.get(self._phase, [])

    def can_transition_to(self, target_phase: TurnPhase) -> bool:
        return target_phase in self.get_valid_transitions()

    def transition_to(self, target_phase: TurnPhase) -> TurnTransitionResult:
        """Attempt to transition to a new phase.

        Returns:
            TurnTransitionResult indicating success or failure.
        """
        if not self.can_transition_to(target_phase):
            valid = self.get_valid_transitions()
            return TurnTransitionResult(
                success=False,
                new_phase=None,
                reason=f"Cannot transition from {self._phase.value} to {target_phase.value}. "
                f"Valid transitions: {[p.value for p in valid]}",
            )

        self._phase = target_phase
        return TurnTransitionResult(success=True, new_phase=target_phase)

    def is_awaiting_move(self) -> bool:
        return self._phase == TurnPhase.AWAITING_MOVE

    def is_game_over(self) -> bool:
        return self._phase == TurnPhase.GAME_OVER

    def __str__(self) -> str:
        return f"TurnMachine(phase={self._phase.value})"

    def __repr__(self) -> str:
        return f"TurnMachine(phase={self._phase!r})"

"""Win condition evaluation for the pursuit game engine.

The winner is a pure function of the game state. Every query about the end
of the game (is it over, who won) is derived from a single evaluation so the
answers can never disagree.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, TYPE_CHECKING

from core.constants import Colour

from .move_generator import legal_moves

if TYPE_CHECKING:
    from core.game_state import GameState


class Winner(Enum):
    """The winning side."""

    MRX = "mrx"
    DETECTIVES = "detectives"


def evaluate_winner(state: GameState) -> Optional[Winner]:
    """Determine the winning side, if any.

    Rules, in order:
    1. Mr X has no legal moves: detectives win.
    2. The schedule is exhausted and the rotation finished: Mr X wins.
    3. A detective stands on Mr X's true location: detectives win.
    4. No detective holds any ticket: Mr X wins.

    Returns:
        The winning side, or None if the game continues.
    """
    mrx = state.mrx

    if not legal_moves(state, mrx):
        return Winner.DETECTIVES

    if state.current_round == len(state.rounds) and state.round_finished:
        return Winner.MRX

    if any(detective.location == mrx.location for detective in state.detectives):
        return Winner.DETECTIVES

    if sum(d.total_tickets() for d in state.detectives) == 0:
        return Winner.MRX

    return None


def winning_colours(state: GameState, winner: Optional[Winner]) -> frozenset[Colour]:
    """Return the colours on the winning side (empty if nobody won)."""
    if winner is Winner.MRX:
        return frozenset({state.mrx.colour})
    if winner is Winner.DETECTIVES:
        return frozenset(d.colour for d in state.detectives)
    return frozenset()

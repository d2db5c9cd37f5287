"""Visibility policy for Mr X's moves.

The engine always applies Mr X's true destination to the game state. What
spectators see is filtered here: on a hidden round the reported destination
is replaced with the last location Mr X was seen at.

All functions are pure in (rounds, round index, revealed location, move).
"""

from __future__ import annotations

from typing import Sequence

from core.board import NodeId
from core.moves import DoubleMove, TicketMove


def is_reveal_round(rounds: Sequence[bool], round_index: int) -> bool:
    """Check if Mr X surfaces on the given zero-based round."""
    return bool(rounds[round_index])


def next_revealed_location(
    rounds: Sequence[bool],
    round_index: int,
    revealed_location: NodeId,
    destination: NodeId,
) -> NodeId:
    """Return the disclosed location after Mr X rides to ``destination``."""
    if is_reveal_round(rounds, round_index):
        return destination
    return revealed_location


def conceal_ticket_move(move: TicketMove, revealed_location: NodeId) -> TicketMove:
    """Report the move as ending where Mr X was last seen."""
    return move.with_destination(revealed_location)


def shown_ticket_move(
    move: TicketMove,
    rounds: Sequence[bool],
    round_index: int,
    revealed_location: NodeId,
) -> TicketMove:
    """Return the spectator-facing version of a single move.

    Detective moves are always shown as made. Mr X's move keeps its true
    destination only on a reveal round.

    Args:
        move: The move as played.
        rounds: Reveal schedule.
        round_index: The round the move is played in (before advancing).
        revealed_location: Mr X's disclosed location before the move.
    """
    if move.colour.is_detective() or is_reveal_round(rounds, round_index):
        return move
    return conceal_ticket_move(move, revealed_location)


def shown_double_move(
    move: DoubleMove,
    rounds: Sequence[bool],
    round_index: int,
    revealed_location: NodeId,
) -> DoubleMove:
    """Return the spectator-facing version of a double move.

    The double move spans rounds ``round_index`` and ``round_index + 1``:

    =============  =============  ==========================================
    first round    second round   shown legs
    =============  =============  ==========================================
    reveal         reveal         true, true
    reveal         hidden         true, first leg's destination
    hidden         reveal         last seen, true final destination
    hidden         hidden         last seen, last seen
    =============  =============  ==========================================

    The legs of the returned move are what spectators are told for each leg
    afterwards, so the announcement and the per-leg reports agree.
    """
    first_reveal = is_reveal_round(rounds, round_index)
    second_reveal = is_reveal_round(rounds, round_index + 1)
    first, second = move.first_move, move.second_move

    if first_reveal and second_reveal:
        return move
    if first_reveal:
        return DoubleMove(move.colour, first, second.with_destination(first.destination))
    if second_reveal:
        return DoubleMove(move.colour, first.with_destination(revealed_location), second)
    return DoubleMove(
        move.colour,
        first.with_destination(revealed_location),
        second.with_destination(revealed_location),
    )

"""Legal move generation for the pursuit game engine.

Moves are generated against the current state only:
- Single moves: one ride per route leaving a node, paid with the route's
  ticket or with a secret ticket
- Double moves (Mr X only): every pair of single moves, checked against the
  current inventory as a whole
- A detective with nothing to play gets exactly one PassMove
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.board import NodeId
from core.constants import Ticket
from core.moves import DoubleMove, Move, PassMove, TicketMove

if TYPE_CHECKING:
    from core.game_state import GameState
    from core.player import Player


def occupied_by_other_detective(state: GameState, player: Player, node_id: NodeId) -> bool:
    """Check if a detective other than ``player`` stands on ``node_id``."""
    return any(
        detective.location == node_id
        for detective in state.detectives
        if detective is not player
    )


def legal_single_moves(
    state: GameState,
    player: Player,
    location: NodeId,
) -> set[TicketMove]:
    """Get every single ride ``player`` could take from ``location``.

    A ride is legal when the player holds the route's ticket (or a secret
    ticket) and no other detective is standing on the destination.

    Args:
        state: The current game state.
        player: The player to generate moves for.
        location: The node to ride from (not necessarily the player's own).

    Returns:
        A set of TicketMoves, empty if no route qualifies.
    """
    moves: set[TicketMove] = set()

    for edge in state.board.get_edges_from(location):
        if occupied_by_other_detective(state, player, edge.destination):
            continue

        ticket = Ticket.from_transport(edge.transport)
        if player.has_tickets(ticket):
            moves.add(TicketMove(player.colour, ticket, edge.destination))

        if player.has_tickets(Ticket.SECRET):
            moves.add(TicketMove(player.colour, Ticket.SECRET, edge.destination))

    return moves


def can_play_double(state: GameState, player: Player) -> bool:
    """Check if a double move may be started this round."""
    return player.has_tickets(Ticket.DOUBLE) and not state.is_final_round()


def legal_double_moves(
    state: GameState,
    player: Player,
    first_moves: set[TicketMove],
) -> set[DoubleMove]:
    """Get every double move built on the given first legs.

    Both legs are checked against the current inventory: a leg pair using the
    same ticket kind needs two of it, otherwise one of each is enough.

    Args:
        state: The current game state.
        player: The player to generate moves for.
        first_moves: Legal single moves from the player's location.

    Returns:
        A set of DoubleMoves, empty if none are allowed.
    """
    moves: set[DoubleMove] = set()
    if not can_play_double(state, player):
        return moves

    for first in first_moves:
        for second in legal_single_moves(state, player, first.destination):
            if first.ticket == second.ticket:
                affordable = player.has_tickets(first.ticket, 2)
            else:
                affordable = player.has_tickets(first.ticket) and player.has_tickets(second.ticket)

            if affordable:
                moves.add(DoubleMove(player.colour, first, second))

    return moves


def legal_moves(state: GameState, player: Player) -> frozenset[Move]:
    """Get the full legal move set for a player.

    Returns:
        Single moves, plus double moves for Mr X. A detective with no moves
        gets ``{PassMove}``; Mr X with no moves gets an empty set.
    """
    singles = legal_single_moves(state, player, player.location)
    moves: set[Move] = set(singles)

    if player.is_mrx():
        moves.update(legal_double_moves(state, player, singles))
    elif not moves:
        moves.add(PassMove(player.colour))

    return frozenset(moves)

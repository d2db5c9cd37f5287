"""Action space mapping for the pursuit RL environment.

Provides bidirectional mapping between flat action indices (for neural networks)
and Move objects (for the game engine), plus the boolean action mask.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

from core.board import BoardGraph, NodeId
from core.constants import Colour, Ticket
from core.moves import DoubleMove, Move, PassMove, TicketMove
from .config import ActionSpaceConfig, DEFAULT_ACTION_CONFIG, LEG_TICKETS


class ActionMapping:
    """Bidirectional mapping between flat action indices and moves.

    The mapping ignores the mover's colour: an index names a ticket and a
    destination (or two of each), and the colour is supplied when decoding.
    The mapping is deterministic and consistent across all game states.
    """

    def __init__(self, board: BoardGraph, config: ActionSpaceConfig = DEFAULT_ACTION_CONFIG):
        """Initialize action mapping with board topology.

        Args:
            board: The game board (needed for node ordering).
            config: Action space configuration.

        Raises:
            ValueError: If the board has more nodes than the config allows.
        """
        if board.num_nodes() > config.MAX_NODES:
            raise ValueError(
                f"Board has {board.num_nodes()} nodes but the action space "
                f"only supports {config.MAX_NODES}"
            )

        self.config = config
        self.board = board

        # Build deterministic mappings
        self._node_ids: list[NodeId] = board.nodes()
        self._node_to_idx = {node_id: idx for idx, node_id in enumerate(self._node_ids)}
        self._ticket_to_idx = {ticket: idx for idx, ticket in enumerate(LEG_TICKETS)}

    @property
    def total_actions(self) -> int:
        return self.config.total_actions

    def _leg_index(self, ticket: Ticket, destination: NodeId) -> int:
        try:
            return self._ticket_to_idx[ticket] * self.config.MAX_NODES + self._node_to_idx[destination]
        except KeyError:
            raise ValueError(f"No action for {ticket.value} to {destination}") from None

    def _leg_from_index(self, leg_idx: int) -> tuple[Ticket, NodeId]:
        ticket_idx, node_idx = divmod(leg_idx, self.config.MAX_NODES)
        if node_idx >= len(self._node_ids):
            raise ValueError(f"Action references node slot {node_idx} not on this board")
        return LEG_TICKETS[ticket_idx], self._node_ids[node_idx]

    def move_to_index(self, move: Move) -> int:
        """Convert a move to its flat action index.

        Raises:
            ValueError: If the move has no index in this space.
        """
        match move:
            case PassMove():
                return self.config.pass_idx
            case TicketMove():
                return self.config.single_start + self._leg_index(move.ticket, move.destination)
            case DoubleMove():
                first = self._leg_index(move.first_move.ticket, move.first_move.destination)
                second = self._leg_index(move.second_move.ticket, move.second_move.destination)
                return self.config.double_start + first * self.config.single_count + second
        raise ValueError(f"Unknown move type: {move!r}")

    def index_to_move(self, action_idx: int, colour: Colour) -> Move:
        """Convert flat action index to a move for ``colour``.

        Raises:
            ValueError: If action_idx is out of range or names an absent node.
        """
        config = self.config
        if not 0 <= action_idx < config.total_actions:
            raise ValueError(f"Action index {action_idx} out of range [0, {config.total_actions})")

        if action_idx == config.pass_idx:
            return PassMove(colour)

        if action_idx < config.single_end:
            ticket, destination = self._leg_from_index(action_idx - config.single_start)
            return TicketMove(colour, ticket, destination)

        first_idx, second_idx = divmod(action_idx - config.double_start, config.single_count)
        t1, d1 = self._leg_from_index(first_idx)
        t2, d2 = self._leg_from_index(second_idx)
        return DoubleMove.of(colour, t1, d1, t2, d2)

    def action_mask(self, moves: Iterable[Move]) -> np.ndarray:
        """Boolean mask of shape (total_actions,) with True for each legal move.

        Raises:
            RuntimeError: If a legal move has no index.
        """
        mask = np.zeros(self.config.total_actions, dtype=np.bool_)
        for move in moves:
            try:
                mask[self.move_to_index(move)] = True
            except ValueError as e:
                raise RuntimeError(
                    f"Legal move {move} has no ActionMapping entry; "
                    "the action space is inconsistent with the board"
                ) from e
        return mask

    def get_valid_action_indices(self, mask: np.ndarray) -> np.ndarray:
        return np.where(mask)[0]

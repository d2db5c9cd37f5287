"""Observation encoding for the pursuit RL environment.

Encodes what one player may know about a game into a flat numpy array
suitable for neural network input. The encoder reads only the GameView, so
Mr X's true location appears only when it is passed in by the player who
actually knows it.
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

import numpy as np

from core.board import BoardGraph, NodeId
from core.constants import Colour, Ticket, HIDDEN_LOCATION
from .config import ObservationConfig, DEFAULT_OBS_CONFIG

if TYPE_CHECKING:
    from engine.view import GameView


class ObservationEncoder:
    """Encodes a GameView into a flat observation tensor.

    The observation is structured as follows:
    1. Locations [MAX_PLAYERS x MAX_NODES], one-hot per seat (all zeros when
       the location is unknown or the seat is empty)
    2. Tickets [MAX_PLAYERS x NUM_TICKETS], normalized to [0, 1]
    3. Global state: round progress, next move revealed, Mr X seen,
       observer is Mr X, then the current seat one-hot

    Seats follow turn order, Mr X first.
    """

    def __init__(self, config: ObservationConfig = DEFAULT_OBS_CONFIG):
        """Initialize the encoder with configuration.

        Args:
            config: Observation configuration defining tensor dimensions.
        """
        self.config = config
        self._node_to_idx: dict[NodeId, int] = {}
        self._board: Optional[BoardGraph] = None

    def _initialize_mappings(self, board: BoardGraph) -> None:
        """Map node ids (sorted) to one-hot positions for this board."""
        if board.num_nodes() > self.config.MAX_NODES:
            raise ValueError(
                f"Board has {board.num_nodes()} nodes but observations "
                f"only support {self.config.MAX_NODES}"
            )
        self._node_to_idx = {node_id: idx for idx, node_id in enumerate(board.nodes())}
        self._board = board

    @property
    def observation_dim(self) -> int:
        """Total dimension of the flat observation tensor."""
        return self.config.total_observation_dim

    def encode(
        self,
        view: GameView,
        observer: Colour,
        own_location: Optional[NodeId] = None,
    ) -> np.ndarray:
        """Encode the game from ``observer``'s point of view.

        Args:
            view: Read-only game view.
            observer: The colour the learner is playing.
            own_location: The observer's true location, as handed to its
                agent. Only used for Mr X, whose view location is the last
                revealed one.

        Returns:
            Flat numpy array of shape (total_observation_dim,) with dtype float32.
        """
        board = view.get_board()
        if self._board is not board:
            self._initialize_mappings(board)

        config = self.config
        obs = np.zeros(config.total_observation_dim, dtype=np.float32)
        players = view.get_players()
        if len(players) > config.MAX_PLAYERS:
            raise ValueError(f"Game has {len(players)} players, at most {config.MAX_PLAYERS} supported")

        loc_offset = 0
        ticket_offset = config.location_features_size
        global_offset = ticket_offset + config.ticket_features_size

        for seat, colour in enumerate(players):
            location = view.get_player_location(colour)
            if colour.is_mrx() and observer.is_mrx() and own_location is not None:
                location = own_location
            if location is not None and location != HIDDEN_LOCATION:
                obs[loc_offset + seat * config.MAX_NODES + self._node_to_idx[location]] = 1.0

            for t_idx, ticket in enumerate(Ticket):
                count = view.get_player_tickets(colour, ticket) or 0
                obs[ticket_offset + seat * config.NUM_TICKETS + t_idx] = min(
                    count / config.TICKET_NORMALIZER, 1.0
                )

        rounds = view.get_rounds()
        current_round = view.get_current_round()
        obs[global_offset] = current_round / len(rounds) if rounds else 0.0
        obs[global_offset + 1] = float(view.is_reveal_round())
        obs[global_offset + 2] = float(view.get_player_location(Colour.BLACK) != HIDDEN_LOCATION)
        obs[global_offset + 3] = float(observer.is_mrx())
        current_seat = players.index(view.get_current_player())
        obs[global_offset + config.GLOBAL_BASE_DIM + current_seat] = 1.0

        return obs

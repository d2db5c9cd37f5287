"""Configuration constants for the pursuit RL environment.

This module defines all configuration values for observation encoding,
action space sizing, and reward shaping.
"""

from dataclasses import dataclass
from typing import ClassVar

from core.constants import Ticket, MAX_DETECTIVES


# Tickets that can pay for a single leg (DOUBLE only announces a pair)
LEG_TICKETS: tuple[Ticket, ...] = (Ticket.TAXI, Ticket.BUS, Ticket.UNDERGROUND, Ticket.SECRET)


@dataclass(frozen=True)
class BoardConfig:
    """Configuration for the default pursuit board topology.

    These values are derived from data/default_board.json and should
    match the actual board being used.
    """

    MAX_NODES: int = 30


@dataclass(frozen=True)
class ObservationConfig:
    """Configuration for observation tensor dimensions.

    Layout of the flat observation:
    1. Locations [MAX_PLAYERS x MAX_NODES] one-hot per seat
    2. Tickets [MAX_PLAYERS x NUM_TICKETS] normalized counts
    3. Global state [GLOBAL_FEATURE_DIM]
    """

    MAX_NODES: int = BoardConfig.MAX_NODES
    MAX_PLAYERS: int = 1 + MAX_DETECTIVES
    NUM_TICKETS: int = len(Ticket)

    # Counts above this saturate at 1.0
    TICKET_NORMALIZER: float = 20.0

    # round progress, next move revealed, Mr X seen, learner is Mr X,
    # then the current seat one-hot
    GLOBAL_BASE_DIM: ClassVar[int] = 4

    @property
    def location_features_size(self) -> int:
        return self.MAX_PLAYERS * self.MAX_NODES

    @property
    def ticket_features_size(self) -> int:
        return self.MAX_PLAYERS * self.NUM_TICKETS

    @property
    def global_features_size(self) -> int:
        return self.GLOBAL_BASE_DIM + self.MAX_PLAYERS

    @property
    def total_observation_dim(self) -> int:
        """Total dimension of the flat observation tensor."""
        return (
            self.location_features_size
            + self.ticket_features_size
            + self.global_features_size
        )


@dataclass(frozen=True)
class ActionSpaceConfig:
    """Configuration for the discrete action space.

    Index ranges, in order:
    - pass: a single index
    - singles: LEG_TICKETS x MAX_NODES
    - doubles: (LEG_TICKETS x MAX_NODES) squared, first leg major
    """

    MAX_NODES: int = BoardConfig.MAX_NODES
    NUM_LEG_TICKETS: int = len(LEG_TICKETS)

    @property
    def pass_idx(self) -> int:
        return 0

    @property
    def single_count(self) -> int:
        """Number of single ticket moves: leg ticket x destination."""
        return self.NUM_LEG_TICKETS * self.MAX_NODES

    @property
    def single_start(self) -> int:
        return self.pass_idx + 1

    @property
    def single_end(self) -> int:
        return self.single_start + self.single_count

    @property
    def double_count(self) -> int:
        """Number of double moves: one single per leg."""
        return self.single_count * self.single_count

    @property
    def double_start(self) -> int:
        return self.single_end

    @property
    def double_end(self) -> int:
        return self.double_start + self.double_count

    @property
    def total_actions(self) -> int:
        """Total number of discrete actions in the unified action space."""
        return self.double_end


@dataclass
class RewardConfig:
    """Configuration for reward calculation.

    Rewards are sparse: only the final step of an episode pays out.
    """

    win_reward: float = 1.0
    loss_reward: float = -1.0
    step_reward: float = 0.0
    invalid_action_penalty: float = -1.0


@dataclass(frozen=True)
class EnvConfig:
    """Episode setup for PursuitEnv."""

    # "mrx" or "detectives"
    learner_side: str = "mrx"
    num_detectives: int = 4
    max_steps: int = 500


# Default configuration instances
DEFAULT_BOARD_CONFIG = BoardConfig()
DEFAULT_OBS_CONFIG = ObservationConfig()
DEFAULT_ACTION_CONFIG = ActionSpaceConfig()
DEFAULT_REWARD_CONFIG = RewardConfig()
DEFAULT_ENV_CONFIG = EnvConfig()

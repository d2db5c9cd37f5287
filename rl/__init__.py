"""Reinforcement Learning module for the pursuit game.

This module provides a Gymnasium-compatible environment for training
RL agents to play either side of the pursuit game with action masking.

Key components:
- PursuitEnv: Core Gymnasium environment
- ObservationEncoder: Observer-correct flat observations
- ActionMapping: Move <-> flat index bijection and action masks
"""

from .config import (
    LEG_TICKETS,
    BoardConfig,
    ObservationConfig,
    ActionSpaceConfig,
    RewardConfig,
    EnvConfig,
    DEFAULT_BOARD_CONFIG,
    DEFAULT_OBS_CONFIG,
    DEFAULT_ACTION_CONFIG,
    DEFAULT_REWARD_CONFIG,
    DEFAULT_ENV_CONFIG,
)
from .observation import ObservationEncoder
from .action_space import ActionMapping
from .env import PursuitEnv, make_pursuit_env

__all__ = [
    # Configuration
    "LEG_TICKETS",
    "BoardConfig",
    "ObservationConfig",
    "ActionSpaceConfig",
    "RewardConfig",
    "EnvConfig",
    "DEFAULT_BOARD_CONFIG",
    "DEFAULT_OBS_CONFIG",
    "DEFAULT_ACTION_CONFIG",
    "DEFAULT_REWARD_CONFIG",
    "DEFAULT_ENV_CONFIG",
    # Observation encoding
    "ObservationEncoder",
    # Action space
    "ActionMapping",
    # Environment
    "PursuitEnv",
    "make_pursuit_env",
]

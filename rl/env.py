"""Gymnasium environment for the pursuit game.

Provides a single-agent, turn-based interface for RL training with:
- The learner playing Mr X or all of the detectives
- Opponents played by RandomAgent
- Observations limited to what the learner's side may know
- Action masking for legal move enforcement
"""

from __future__ import annotations

import logging
from typing import Optional, Any, Sequence, SupportsFloat

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from core.board import BoardGraph
from core.constants import Colour, DEFAULT_ROUNDS
from core.moves import Move
from engine.agents import Agent, DeferredAgent, RandomAgent
from engine.game_engine import GameEngine
from engine.setup import create_configurations
from engine.win_conditions import Winner
from data.loader import load_default_board
from .config import (
    ObservationConfig,
    ActionSpaceConfig,
    RewardConfig,
    EnvConfig,
    DEFAULT_OBS_CONFIG,
    DEFAULT_ACTION_CONFIG,
    DEFAULT_REWARD_CONFIG,
    DEFAULT_ENV_CONFIG,
)
from .observation import ObservationEncoder
from .action_space import ActionMapping


logger = logging.getLogger(__name__)

LEARNER_SIDES = ("mrx", "detectives")


class PursuitEnv(gym.Env):
    """Gymnasium environment for the pursuit game.

    Each step answers one move request addressed to the learner's side. The
    learner's players share a DeferredAgent; the engine runs opponents
    synchronously until the learner is asked again or the game ends.

    Compatible with maskable policies via the action_masks() method.
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 1}

    def __init__(
        self,
        board: Optional[BoardGraph] = None,
        rounds: Sequence[bool] = DEFAULT_ROUNDS,
        render_mode: Optional[str] = None,
        env_config: EnvConfig = DEFAULT_ENV_CONFIG,
        obs_config: ObservationConfig = DEFAULT_OBS_CONFIG,
        action_config: ActionSpaceConfig = DEFAULT_ACTION_CONFIG,
        reward_config: RewardConfig = DEFAULT_REWARD_CONFIG,
    ):
        """Initialize the pursuit environment.

        Args:
            board: Optional custom board. Uses default if None.
            rounds: Reveal schedule for every episode.
            render_mode: Rendering mode ("human", "ansi", or None).
            env_config: Learner side, detective count and step limit.
            obs_config: Observation encoding configuration.
            action_config: Action space configuration.
            reward_config: Reward calculation configuration.

        Raises:
            ValueError: If the learner side is unknown.
        """
        super().__init__()
        if env_config.learner_side not in LEARNER_SIDES:
            raise ValueError(
                f"learner_side must be one of {LEARNER_SIDES}, got {env_config.learner_side!r}"
            )

        self._board = board if board is not None else load_default_board()
        self._rounds = tuple(rounds)
        self.render_mode = render_mode

        # Configuration
        self._env_config = env_config
        self._obs_config = obs_config
        self._action_config = action_config
        self._reward_config = reward_config

        # Core components
        self._engine: Optional[GameEngine] = None
        self._learner = DeferredAgent()
        self._obs_encoder = ObservationEncoder(obs_config)
        self._action_mapping = ActionMapping(self._board, action_config)
        self._step_count = 0

        # Define spaces
        self.observation_space = spaces.Box(
            low=0.0,
            high=1.0,
            shape=(obs_config.total_observation_dim,),
            dtype=np.float32,
        )
        self.action_space = spaces.Discrete(action_config.total_actions)

    @property
    def learner_is_mrx(self) -> bool:
        return self._env_config.learner_side == "mrx"

    @property
    def engine(self) -> Optional[GameEngine]:
        return self._engine

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[dict] = None,
    ) -> tuple[np.ndarray, dict]:
        """Reset the environment to a new game with random start locations.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info).
        """
        super().reset(seed=seed)

        self._learner = DeferredAgent()
        setup_seed = int(self.np_random.integers(2**31 - 1))
        opponent_seed = int(self.np_random.integers(2**31 - 1))

        def agent_for(colour: Colour) -> Agent:
            if colour.is_mrx() == self.learner_is_mrx:
                return self._learner
            return RandomAgent(seed=opponent_seed + list(Colour).index(colour))

        configurations = create_configurations(
            self._board,
            self._env_config.num_detectives,
            agent_factory=agent_for,
            seed=setup_seed,
        )
        self._engine = GameEngine(self._rounds, self._board, *configurations)
        self._step_count = 0
        self._advance()

        logger.debug("Reset episode: learner=%s", self._env_config.learner_side)
        return self._get_observation(), self._build_info()

    def step(
        self,
        action: int,
    ) -> tuple[np.ndarray, SupportsFloat, bool, bool, dict]:
        """Answer the learner's pending move request.

        Args:
            action: Flat action index (0 to total_actions-1).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).

        Raises:
            RuntimeError: If reset() has not been called or the episode is over.
        """
        if self._engine is None:
            raise RuntimeError("Environment not initialized. Call reset() first.")
        if not self._learner.is_waiting:
            raise RuntimeError("Episode is over. Call reset() to start a new one.")

        self._step_count += 1
        truncated = self._step_count >= self._env_config.max_steps

        move = self._decode(int(action))
        if move is None:
            info = self._build_info()
            info["invalid_action"] = True
            return (
                self._get_observation(),
                self._reward_config.invalid_action_penalty,
                False,
                truncated,
                info,
            )

        self._learner.submit(move)
        self._advance()

        terminated = self._engine.is_game_over()
        if terminated:
            truncated = False
        reward = self._compute_reward(terminated)

        info = self._build_info()
        info["move"] = str(move)
        return self._get_observation(), float(reward), terminated, truncated, info

    def _decode(self, action: int) -> Optional[Move]:
        """Map an index to a currently legal move, or None if it is not one."""
        colour = self._engine.get_current_player()
        try:
            move = self._action_mapping.index_to_move(action, colour)
        except ValueError:
            return None
        return move if move in self._learner.moves else None

    def _advance(self) -> None:
        """Run rotations until the learner is asked for a move or the game ends."""
        engine = self._engine
        while not self._learner.is_waiting and not engine.is_game_over():
            engine.start_rotate()

    def _compute_reward(self, terminated: bool) -> float:
        config = self._reward_config
        if not terminated:
            return config.step_reward
        mrx_won = self._engine.winner() is Winner.MRX
        return config.win_reward if mrx_won == self.learner_is_mrx else config.loss_reward

    def action_masks(self) -> np.ndarray:
        """Get action mask for maskable policies.

        Returns:
            Boolean array of shape (total_actions,) where True = valid action.
        """
        if self._engine is None or not self._learner.is_waiting:
            # Terminal (or uninitialized): allow pass so a policy has a legal action
            mask = np.zeros(self._action_config.total_actions, dtype=np.bool_)
            mask[self._action_config.pass_idx] = True
            return mask
        return self._action_mapping.action_mask(self._learner.moves)

    def _observer(self) -> Colour:
        if self._learner.is_waiting:
            return self._engine.get_current_player()
        if self.learner_is_mrx:
            return Colour.BLACK
        return self._engine.get_players()[1]

    def _get_observation(self) -> np.ndarray:
        """Get the observation tensor for the learner's side."""
        if self._engine is None:
            return np.zeros(self._obs_config.total_observation_dim, dtype=np.float32)
        own_location = None
        if self.learner_is_mrx:
            own_location = self._engine.state.get_player(Colour.BLACK).location
        return self._obs_encoder.encode(self._engine.view, self._observer(), own_location)

    def _build_info(self) -> dict[str, Any]:
        """Build info dictionary with game metadata."""
        if self._engine is None:
            return {}
        engine = self._engine
        return {
            "round": engine.get_current_round(),
            "current_player": engine.get_current_player().value,
            "valid_action_count": len(self._learner.moves) if self._learner.is_waiting else 0,
            "game_over": engine.is_game_over(),
            "winners": sorted(c.value for c in engine.get_winning_players()),
            "step_count": self._step_count,
        }

    def render(self) -> Optional[str]:
        """Render the public game summary."""
        if self._engine is None:
            return None
        summary = self._engine.get_game_summary()
        lines = [f"Round {summary['round']}/{summary['rounds_total']}"]
        for player in summary["players"]:
            lines.append(f"  {player['colour']:7} at {player['location']}")
        text = "\n".join(lines)
        if self.render_mode == "human":
            print(text)
            return None
        return text

    def close(self) -> None:
        """Clean up environment resources."""
        self._engine = None


def make_pursuit_env(
    learner_side: str = "mrx",
    num_detectives: int = 4,
    render_mode: Optional[str] = None,
    **kwargs,
) -> PursuitEnv:
    """Factory function for creating pursuit environments.

    Args:
        learner_side: "mrx" or "detectives".
        num_detectives: Number of detectives (1-5).
        render_mode: Rendering mode.
        **kwargs: Additional arguments passed to PursuitEnv.

    Returns:
        Configured PursuitEnv instance.
    """
    env_config = EnvConfig(learner_side=learner_side, num_detectives=num_detectives)
    return PursuitEnv(render_mode=render_mode, env_config=env_config, **kwargs)

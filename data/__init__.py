"""Data loading and visualization utilities for the pursuit game engine."""

from .loader import (
    BoardLoader,
    BoardLoadError,
    GameConfig,
    GameConfigLoader,
    GameConfigLoadError,
    load_board,
    load_default_board,
    load_game_config,
    load_default_game_config,
    get_board_stats,
)

from .graph_vis import (
    BoardVisualizer,
    visualize_board,
    visualize_game,
    visualize_default_board,
)

__all__ = [
    # Loader
    "BoardLoader",
    "BoardLoadError",
    "GameConfig",
    "GameConfigLoader",
    "GameConfigLoadError",
    "load_board",
    "load_default_board",
    "load_game_config",
    "load_default_game_config",
    "get_board_stats",
    # Visualization
    "BoardVisualizer",
    "visualize_board",
    "visualize_game",
    "visualize_default_board",
]

"""Script to generate board visualizations.

Run from the project root:
    python scripts/generate_board_vis.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from data.loader import load_default_board, load_default_game_config, get_board_stats
from data.graph_vis import visualize_board, visualize_game
from engine.agents import RandomAgent
from engine.game_engine import GameEngine


def generate_default_board_vis():
    """Generate visualization of the empty default board."""
    print("Loading default board...")
    board = load_default_board()

    stats = get_board_stats(board)
    print(f"Board has {stats['num_nodes']} nodes and {stats['num_edges']} edges")
    for transport, count in stats["edges_by_transport"].items():
        print(f"  {transport}: {count}")

    output_path = project_root / "output" / "default_board.png"
    output_path.parent.mkdir(exist_ok=True)

    print(f"Generating visualization -> {output_path}")
    fig = visualize_board(
        board,
        title="Pursuit - Default Board",
        save_path=output_path,
        show=False,
    )
    print("Done!")
    return fig


def generate_mid_game_vis(rotations: int = 5, seed: int = 1):
    """Play a few random rotations and draw what spectators can see."""
    print("\nPlaying random rotations for a mid-game snapshot...")
    board = load_default_board()
    game = load_default_game_config().with_agents(lambda colour: RandomAgent(seed=seed))
    engine = GameEngine(game.rounds, board, *game.configurations())

    for _ in range(rotations):
        if engine.is_game_over():
            break
        engine.start_rotate()

    output_path = project_root / "output" / "mid_game.png"
    output_path.parent.mkdir(exist_ok=True)

    print(f"Generating visualization -> {output_path}")
    fig = visualize_game(engine.view, save_path=output_path, show=False)
    print("Done!")
    return fig


if __name__ == "__main__":
    generate_default_board_vis()
    generate_mid_game_vis()

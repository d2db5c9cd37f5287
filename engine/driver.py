"""Interactive CLI driver for playing the pursuit game.

This module provides a text-based interface for watching or playing a game.
It also serves as a reference for how a GUI would interact with the engine.

The driver is designed to be extensible:
- TextRenderer is a spectator that handles all display (can be swapped for GUI)
- MovePrompter handles all user input (can be swapped for GUI events)
- GameDriver orchestrates the rotation loop

Usage:
    python -m engine.driver --detectives 4 --seed 7 --human mrx

Or from code:
    from engine.driver import GameDriver
    driver = GameDriver.from_files(num_detectives=3)
    driver.run()
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from core.board import BoardGraph
from core.constants import Colour, Ticket, DEFAULT_ROUNDS, MAX_DETECTIVES, MIN_DETECTIVES
from core.moves import Move
from core.player import PlayerConfiguration

from engine.agents import Agent, RandomAgent, sort_moves
from engine.game_engine import GameEngine
from engine.setup import create_configurations
from engine.spectators import Spectator
from engine.view import GameView


logger = logging.getLogger(__name__)


# =============================================================================
# Renderer (GUI-ready abstraction)
# =============================================================================

class TextRenderer(Spectator):
    """CLI renderer that prints every spectator event."""

    # Player colors (ANSI codes)
    PLAYER_COLORS = {
        Colour.BLACK: "\033[90m",
        Colour.BLUE: "\033[94m",
        Colour.GREEN: "\033[92m",
        Colour.RED: "\033[91m",
        Colour.WHITE: "\033[97m",
        Colour.YELLOW: "\033[93m",
    }
    RESET = "\033[0m"
    BOLD = "\033[1m"

    def __init__(self, use_colors: bool = True, out=None):
        """Initialize the renderer.

        Args:
            use_colors: Whether to use ANSI color codes.
            out: Stream to write to (default: stdout).
        """
        self.use_colors = use_colors
        self.out = out or sys.stdout

    def _color(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if self.use_colors:
            return f"{color}{text}{self.RESET}"
        return text

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    def _name(self, colour: Colour) -> str:
        label = "Mr X" if colour.is_mrx() else colour.value.title()
        return self._color(label, self.PLAYER_COLORS[colour])

    @staticmethod
    def _strip_ansi(text: str) -> str:
        """Strip ANSI escape codes from text."""
        return re.sub(r"\033\[[0-9;]*m", "", text)

    def render_message(self, message: str) -> None:
        self._print(f"\n{message}")

    def render_status(self, view: GameView) -> None:
        """Print every player's public location and tickets."""
        rounds = view.get_rounds()
        self._print("-" * 60)
        self._print(f"Round {view.get_current_round()} of {len(rounds)}")
        for colour in view.get_players():
            location = view.get_player_location(colour)
            shown = "?" if location == 0 else str(location)
            tickets = ", ".join(
                f"{t.value}={view.get_player_tickets(colour, t)}"
                for t in Ticket
                if view.get_player_tickets(colour, t)
            )
            name = self._name(colour)
            padding = " " * max(0, 8 - len(self._strip_ansi(name)))
            self._print(f"  {name}{padding} at {shown:>4}  [{tickets}]")

    def on_move_made(self, view: GameView, move: Move) -> None:
        self._print(f"  {self._name(move.colour)}: {move}")

    def on_round_started(self, view: GameView, round_index: int) -> None:
        rounds = view.get_rounds()
        marker = " (revealed)" if rounds[round_index] else ""
        self._print(self._color(f"-- Round {round_index + 1}/{len(rounds)}{marker}", self.BOLD))

    def on_rotation_complete(self, view: GameView) -> None:
        self.render_status(view)

    def on_game_over(self, view: GameView, winning_colours: frozenset[Colour]) -> None:
        self._print("\n" + "=" * 60)
        self._print(self._color("GAME OVER".center(60), self.BOLD))
        self._print("=" * 60)
        winners = ", ".join(self._name(c) for c in sorted(winning_colours, key=lambda c: c.value))
        self._print(f"Winners: {winners}")


# =============================================================================
# Move Prompter (GUI-ready abstraction)
# =============================================================================

@dataclass
class MoveChoice:
    """Represents a choice the player can make."""
    index: int
    description: str
    move: Move


class MovePrompter(ABC):
    """Abstract base class for prompting a human for a move.

    Implement this interface to create a GUI move selector.
    The CLI prompter is provided as TextPrompter.
    """

    @abstractmethod
    def prompt_choice(self, message: str, choices: list[MoveChoice]) -> MoveChoice:
        """Prompt the player to pick one of ``choices``."""
        pass


class TextPrompter(MovePrompter):
    """CLI text-based move prompter."""

    def __init__(self, input_fn=input):
        self.input_fn = input_fn

    def prompt_choice(self, message: str, choices: list[MoveChoice]) -> MoveChoice:
        print(f"\n{message}")
        print("-" * 50)
        for choice in choices:
            print(f"  {choice.index}. {choice.description}")

        print()
        while True:
            raw = self.input_fn("Enter choice: ").strip()
            try:
                idx = int(raw)
            except ValueError:
                print("Invalid input. Please enter a number.")
                continue
            for choice in choices:
                if choice.index == idx:
                    return choice
            print("Invalid choice. Please try again.")


class HumanAgent(Agent):
    """Agent that asks a human for every move through a prompter."""

    def __init__(self, prompter: Optional[MovePrompter] = None):
        self.prompter = prompter or TextPrompter()

    def make_move(self, view, location, moves, callback) -> None:
        choices = [
            MoveChoice(idx, str(move), move)
            for idx, move in enumerate(sort_moves(moves))
        ]
        colour = view.get_current_player()
        label = "Mr X" if colour.is_mrx() else colour.value.title()
        choice = self.prompter.prompt_choice(f"{label} at {location}: choose your move", choices)
        callback(choice.move)


# =============================================================================
# Game Driver
# =============================================================================

class GameDriver:
    """Runs rotations of a GameEngine until the game is over.

    This class wires together:
    - GameEngine for game logic
    - TextRenderer (or any Spectator) for display
    - Agents, one per player, for move selection
    """

    def __init__(
        self,
        rounds: Sequence[bool],
        board: BoardGraph,
        configurations: Sequence[PlayerConfiguration],
        renderer: Optional[Spectator] = None,
    ):
        """Initialize the driver.

        Args:
            rounds: Reveal schedule.
            board: The board to play on.
            configurations: Mr X first, then the detectives.
            renderer: Spectator used for display (default: TextRenderer).
        """
        self.engine = GameEngine(rounds, board, *configurations)
        self.renderer = renderer or TextRenderer()
        self.engine.register_spectator(self.renderer)

    @classmethod
    def from_files(
        cls,
        board_path: Optional[str] = None,
        game_path: Optional[str] = None,
        num_detectives: Optional[int] = None,
        seed: Optional[int] = None,
        human: Optional[str] = None,
        renderer: Optional[Spectator] = None,
    ) -> GameDriver:
        """Build a driver from board/game files (bundled defaults if omitted).

        With ``num_detectives`` the starts are drawn at random instead of
        read from the game file.
        """
        from data.loader import (
            load_board,
            load_default_board,
            load_game_config,
            load_default_game_config,
        )

        board = load_board(board_path) if board_path else load_default_board()

        def agent_for(colour: Colour) -> Agent:
            if human == "mrx" and colour.is_mrx():
                return HumanAgent()
            if human == "detectives" and colour.is_detective():
                return HumanAgent()
            return RandomAgent(seed=None if seed is None else seed + list(Colour).index(colour))

        if num_detectives is not None:
            rounds = DEFAULT_ROUNDS
            configurations = create_configurations(
                board, num_detectives, agent_factory=agent_for, seed=seed
            )
        else:
            game = load_game_config(game_path) if game_path else load_default_game_config()
            rounds = game.rounds
            configurations = game.with_agents(agent_for).configurations()

        return cls(rounds, board, configurations, renderer=renderer)

    def run(self, max_rotations: Optional[int] = None) -> frozenset[Colour]:
        """Run the game loop.

        Args:
            max_rotations: Stop early after this many rotations.

        Returns:
            The winning colours (empty if stopped early).
        """
        engine = self.engine
        if isinstance(self.renderer, TextRenderer):
            self.renderer.render_message(
                f"Starting a {len(engine.get_rounds())}-round game "
                f"with {len(engine.get_players()) - 1} detectives"
            )
            self.renderer.render_status(engine.view)

        rotations = 0
        while not engine.is_game_over():
            if max_rotations is not None and rotations >= max_rotations:
                logger.info("Stopping after %d rotations", rotations)
                break
            engine.start_rotate()
            rotations += 1

        return engine.get_winning_players()


# =============================================================================
# Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play a game of hidden-movement pursuit")
    parser.add_argument("--board", type=str, default=None, help="Path to a board JSON file")
    parser.add_argument("--game", type=str, default=None, help="Path to a game setup JSON file")
    parser.add_argument(
        "--detectives",
        type=int,
        default=None,
        choices=range(MIN_DETECTIVES, MAX_DETECTIVES + 1),
        help="Number of detectives; random start locations",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--human",
        choices=["mrx", "detectives"],
        default=None,
        help="Side controlled from the keyboard",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the CLI driver."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    driver = GameDriver.from_files(
        board_path=args.board,
        game_path=args.game,
        num_detectives=args.detectives,
        seed=args.seed,
        human=args.human,
        renderer=TextRenderer(use_colors=not args.no_color),
    )
    try:
        driver.run()
    except KeyboardInterrupt:
        print("\n\nGame interrupted. Goodbye!")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Board and game configuration loaders for the pursuit game engine.

Loads and validates board topology and game setups from JSON files,
converting them into BoardGraph and PlayerConfiguration instances.

Board files look like::

    {"nodes": [{"id": 1, "position": {"x": 0, "y": 0}}, ...],
     "edges": [[1, 2, "taxi"], [1, 3, "bus"], ...]}

Game files give the reveal schedule and each player's start::

    {"reveal_rounds": [3, 8], "round_count": 10,
     "mrx": {"location": 15, "tickets": {"taxi": 4, ...}},
     "detectives": [{"colour": "blue", "location": 1, "tickets": {...}}]}
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from core.board import BoardGraph
from core.constants import Colour, Ticket, Transport
from core.player import PlayerConfiguration


logger = logging.getLogger(__name__)


def resource_path(relative_path: str) -> Path:
    """
    Get absolute path to a resource, works for dev and PyInstaller exe.
    """
    if hasattr(sys, "_MEIPASS"):
        # PyInstaller bundles resources in a temporary folder
        return Path(sys._MEIPASS) / "data" / relative_path

    # Dev mode: look relative to this file (in the data/ directory)
    return Path(__file__).parent / relative_path


class BoardLoadError(Exception):
    """Raised when board loading or validation fails."""
    pass


class GameConfigLoadError(Exception):
    """Raised when a game configuration file cannot be loaded."""
    pass


def _read_json(path: Path, error_cls: type[Exception]) -> Any:
    if not path.exists():
        raise error_cls(f"File not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise error_cls(f"Invalid JSON in {path}: {e}")
    except OSError as e:
        raise error_cls(f"Error reading {path}: {e}")


class BoardLoader:
    """Loads and validates board data from JSON files."""

    def __init__(self, strict: bool = True):
        """Initialize the loader.

        Args:
            strict: If True, require the board to be connected.
        """
        self.strict = strict

    def load_from_file(self, file_path: str | Path) -> BoardGraph:
        """Load a board from a JSON file.

        Raises:
            BoardLoadError: If the file cannot be read, parsed or validated.
        """
        path = Path(file_path)
        logger.debug("Loading board from %s", path)
        return self.load_from_dict(_read_json(path, BoardLoadError))

    def load_from_dict(self, data: dict[str, Any]) -> BoardGraph:
        """Load a board from a dictionary.

        Args:
            data: Dictionary containing 'nodes' and 'edges' keys.

        Raises:
            BoardLoadError: If validation fails.
        """
        self._validate_structure(data)

        node_ids: set[int] = set()
        positions: dict[int, tuple[float, float]] = {}
        for node_data in data["nodes"]:
            node_id, position = self._parse_node(node_data)
            if node_id in node_ids:
                raise BoardLoadError(f"Duplicate node ID: {node_id}")
            node_ids.add(node_id)
            if position is not None:
                positions[node_id] = position

        edges: list[tuple[int, int, Transport]] = []
        seen: set[tuple[int, int, Transport]] = set()
        for edge_data in data["edges"]:
            node_a, node_b, transport = self._parse_edge(edge_data)

            if node_a not in node_ids:
                raise BoardLoadError(f"Edge references unknown node: {node_a}")
            if node_b not in node_ids:
                raise BoardLoadError(f"Edge references unknown node: {node_b}")
            if node_a == node_b:
                raise BoardLoadError(f"Self-loop edge not allowed: [{node_a}, {node_b}]")

            key = (min(node_a, node_b), max(node_a, node_b), transport)
            if key in seen:
                raise BoardLoadError(f"Duplicate {transport.value} edge: {key[:2]}")
            seen.add(key)
            edges.append((node_a, node_b, transport))

        board = BoardGraph.from_edges(edges, nodes=sorted(node_ids), positions=positions)

        if self.strict and board.num_nodes() > 1 and not board.is_connected():
            raise BoardLoadError("Board is not connected")

        return board

    def _validate_structure(self, data: dict[str, Any]) -> None:
        """Validate the basic structure of the board data."""
        if not isinstance(data, dict):
            raise BoardLoadError("Board data must be a dictionary")

        for key in ("nodes", "edges"):
            if key not in data:
                raise BoardLoadError(f"Board data missing '{key}' key")
            if not isinstance(data[key], list):
                raise BoardLoadError(f"'{key}' must be a list")

        if len(data["nodes"]) == 0:
            raise BoardLoadError("Board must have at least one node")

    def _parse_node(self, node_data: Any) -> tuple[int, Optional[tuple[float, float]]]:
        if isinstance(node_data, int):
            node_data = {"id": node_data}
        if not isinstance(node_data, dict) or "id" not in node_data:
            raise BoardLoadError(f"Node missing required field: id ({node_data!r})")

        node_id = node_data["id"]
        if not isinstance(node_id, int) or isinstance(node_id, bool) or node_id <= 0:
            raise BoardLoadError(f"Invalid node ID: {node_id}")

        position_data = node_data.get("position")
        if position_data is None:
            return node_id, None
        if not isinstance(position_data, dict) or "x" not in position_data or "y" not in position_data:
            raise BoardLoadError(f"Invalid position format for node {node_id}")
        return node_id, (position_data["x"], position_data["y"])

    def _parse_edge(self, edge_data: Any) -> tuple[int, int, Transport]:
        if not isinstance(edge_data, list) or len(edge_data) != 3:
            raise BoardLoadError(f"Edge must be [from, to, transport], got {edge_data!r}")
        node_a, node_b, transport_str = edge_data
        try:
            transport = Transport(transport_str)
        except ValueError:
            raise BoardLoadError(
                f"Invalid transport '{transport_str}'. "
                f"Valid transports: {[t.value for t in Transport]}"
            )
        return node_a, node_b, transport


@dataclass(frozen=True)
class GameConfig:
    """Reveal schedule plus every player's starting configuration."""

    rounds: tuple[bool, ...]
    mrx: PlayerConfiguration
    detectives: tuple[PlayerConfiguration, ...]

    def configurations(self) -> list[PlayerConfiguration]:
        return [self.mrx, *self.detectives]

    def with_agents(self, agent_factory) -> GameConfig:
        """Return a copy whose players use agents from ``agent_factory(colour)``."""

        def attach(config: PlayerConfiguration) -> PlayerConfiguration:
            return PlayerConfiguration(
                colour=config.colour,
                location=config.location,
                tickets=config.tickets,
                agent=agent_factory(config.colour),
            )

        return GameConfig(
            rounds=self.rounds,
            mrx=attach(self.mrx),
            detectives=tuple(attach(d) for d in self.detectives),
        )


class GameConfigLoader:
    """Loads a reveal schedule and player starts from JSON files."""

    def load_from_file(self, file_path: str | Path) -> GameConfig:
        path = Path(file_path)
        logger.debug("Loading game configuration from %s", path)
        return self.load_from_dict(_read_json(path, GameConfigLoadError))

    def load_from_dict(self, data: dict[str, Any]) -> GameConfig:
        """Build a GameConfig.

        The schedule is either an explicit ``rounds`` list of booleans or
        ``round_count`` plus one-based ``reveal_rounds``.

        Raises:
            GameConfigLoadError: If a field is missing or malformed.
        """
        if not isinstance(data, dict):
            raise GameConfigLoadError("Game data must be a dictionary")

        rounds = self._parse_rounds(data)

        if "mrx" not in data:
            raise GameConfigLoadError("Game data missing 'mrx' key")
        mrx = self._parse_player(data["mrx"], default_colour=Colour.BLACK)

        detectives_data = data.get("detectives")
        if not isinstance(detectives_data, list):
            raise GameConfigLoadError("'detectives' must be a list")
        detectives = tuple(self._parse_player(d) for d in detectives_data)

        return GameConfig(rounds=rounds, mrx=mrx, detectives=detectives)

    def _parse_rounds(self, data: dict[str, Any]) -> tuple[bool, ...]:
        if "rounds" in data:
            rounds = data["rounds"]
            if not isinstance(rounds, list) or not all(isinstance(r, bool) for r in rounds):
                raise GameConfigLoadError("'rounds' must be a list of booleans")
            return tuple(rounds)

        if "round_count" not in data:
            raise GameConfigLoadError("Game data needs 'rounds' or 'round_count'")
        count = data["round_count"]
        reveal = set(data.get("reveal_rounds", []))
        if not isinstance(count, int) or count < 0:
            raise GameConfigLoadError(f"Invalid round_count: {count}")
        out_of_range = [r for r in reveal if not 1 <= r <= count]
        if out_of_range:
            raise GameConfigLoadError(f"Reveal rounds out of range: {sorted(out_of_range)}")
        return tuple((i + 1) in reveal for i in range(count))

    def _parse_player(
        self,
        player_data: Any,
        default_colour: Optional[Colour] = None,
    ) -> PlayerConfiguration:
        if not isinstance(player_data, dict):
            raise GameConfigLoadError(f"Player entry must be a dictionary, got {player_data!r}")

        try:
            colour = Colour(player_data["colour"]) if "colour" in player_data else default_colour
        except ValueError:
            raise GameConfigLoadError(f"Invalid colour '{player_data['colour']}'")
        if colour is None:
            raise GameConfigLoadError("Detective entry missing 'colour'")

        location = player_data.get("location")
        if not isinstance(location, int):
            raise GameConfigLoadError(f"Invalid location for {colour.value}: {location!r}")

        tickets: dict[Ticket, int] = {}
        for name, count in player_data.get("tickets", {}).items():
            try:
                tickets[Ticket(name)] = int(count)
            except ValueError:
                raise GameConfigLoadError(f"Invalid ticket '{name}' for {colour.value}")

        return PlayerConfiguration(colour=colour, location=location, tickets=tickets)


def load_board(file_path: str | Path, strict: bool = True) -> BoardGraph:
    """Convenience function to load a board from a file."""
    return BoardLoader(strict=strict).load_from_file(file_path)


def load_default_board() -> BoardGraph:
    """Load the bundled default board.

    Raises:
        BoardLoadError: If the default board file is missing or invalid.
    """
    return load_board(resource_path("default_board.json"), strict=True)


def load_game_config(file_path: str | Path) -> GameConfig:
    """Convenience function to load a game configuration from a file."""
    return GameConfigLoader().load_from_file(file_path)


def load_default_game_config() -> GameConfig:
    """Load the bundled game configuration matching the default board."""
    return load_game_config(resource_path("default_game.json"))


def get_board_stats(board: BoardGraph) -> dict[str, Any]:
    """Get statistics about a board.

    Returns:
        Dictionary with node/edge counts and edges per transport.
    """
    by_transport = {t.value: 0 for t in Transport}
    for _, _, transport in board.to_networkx().edges(data="transport"):
        by_transport[transport.value] += 1

    return {
        "num_nodes": board.num_nodes(),
        "num_edges": board.num_edges(),
        "edges_by_transport": by_transport,
        "connected": board.is_connected(),
    }

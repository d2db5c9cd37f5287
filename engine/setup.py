"""Game configuration checks and setup helpers for the pursuit game engine.

Construction of a game is refused when the configuration is malformed:
- empty reveal schedule or empty board
- Mr X not BLACK, or a detective configured as BLACK
- two players sharing a start location or a colour
- a player missing an entry for any ticket kind
- a detective holding secret or double tickets

Setup helpers build standard configurations with distinct random start
locations for quick games, the CLI driver and the RL environment.
"""

from __future__ import annotations

import random
from typing import Callable, Optional, Sequence

from core.board import BoardGraph
from core.constants import (
    Colour,
    Ticket,
    DETECTIVE_COLOURS,
    DETECTIVE_DEFAULT_TICKETS,
    DETECTIVE_FORBIDDEN_TICKETS,
    MAX_DETECTIVES,
    MIN_DETECTIVES,
    MRX_DEFAULT_TICKETS,
)
from core.player import PlayerConfiguration


class GameConfigError(ValueError):
    """Raised when a game cannot be created from its configuration."""

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


def validate_game_config(
    rounds: Optional[Sequence[bool]],
    board: Optional[BoardGraph],
    configurations: Sequence[Optional[PlayerConfiguration]],
) -> list[str]:
    """Validate a game configuration.

    Args:
        rounds: Reveal schedule.
        board: Transport graph.
        configurations: Mr X's configuration first, then the detectives'.

    Returns:
        List of validation error messages (empty if valid).
    """
    errors: list[str] = []

    if rounds is None or len(rounds) == 0:
        errors.append("Empty rounds")

    if board is None or board.is_empty():
        errors.append("Empty board")

    if len(configurations) < 1 + MIN_DETECTIVES:
        errors.append(f"Need Mr X and at least {MIN_DETECTIVES} detective(s)")

    if any(config is None for config in configurations):
        errors.append("Null player configuration")
        return errors

    if configurations:
        mrx = configurations[0]
        if mrx.colour.is_detective():
            errors.append(f"Mr X must be BLACK, got {mrx.colour.value}")
        for detective in configurations[1:]:
            if detective.colour.is_mrx():
                errors.append("A detective cannot be BLACK")

    # Check duplicated locations and colours
    seen_locations: set[int] = set()
    seen_colours: set[Colour] = set()
    for config in configurations:
        if config.location in seen_locations:
            errors.append(f"Duplicate location {config.location}")
        seen_locations.add(config.location)

        if config.colour in seen_colours:
            errors.append(f"Duplicate colour {config.colour.value}")
        seen_colours.add(config.colour)

        if board is not None and not board.is_empty() and not board.has_node(config.location):
            errors.append(f"{config.colour.value} starts off the board at {config.location}")

    # Check ticket inventories
    for config in configurations:
        missing = [t.value for t in Ticket if t not in config.tickets]
        if missing:
            errors.append(f"{config.colour.value} is missing tickets: {missing}")
            continue

        negative = [t.value for t in Ticket if config.tickets[t] < 0]
        if negative:
            errors.append(f"{config.colour.value} has negative tickets: {negative}")

        if config.colour.is_detective():
            for ticket in DETECTIVE_FORBIDDEN_TICKETS:
                if config.tickets[ticket] > 0:
                    errors.append(
                        f"Detective {config.colour.value} has {ticket.value} tickets"
                    )

    return errors


def create_configurations(
    board: BoardGraph,
    num_detectives: int = MAX_DETECTIVES,
    agent_factory: Optional[Callable[[Colour], object]] = None,
    seed: Optional[int] = None,
) -> list[PlayerConfiguration]:
    """Create standard configurations with distinct random start locations.

    Args:
        board: The board to place players on.
        num_detectives: Number of detectives (1-5).
        agent_factory: Called with each colour to create its agent.
        seed: Seed for start location selection.

    Returns:
        Mr X's configuration followed by the detectives'.

    Raises:
        ValueError: If the detective count is out of range or the board
            has too few nodes.
    """
    if not MIN_DETECTIVES <= num_detectives <= MAX_DETECTIVES:
        raise ValueError(
            f"Number of detectives must be between {MIN_DETECTIVES} and {MAX_DETECTIVES}, "
            f"got {num_detectives}"
        )
    if board.num_nodes() < num_detectives + 1:
        raise ValueError(
            f"Board has {board.num_nodes()} nodes, need at least {num_detectives + 1}"
        )

    rng = random.Random(seed)
    locations = rng.sample(board.nodes(), num_detectives + 1)
    colours = [Colour.BLACK, *DETECTIVE_COLOURS[:num_detectives]]

    configurations = []
    for colour, location in zip(colours, locations):
        tickets = MRX_DEFAULT_TICKETS if colour.is_mrx() else DETECTIVE_DEFAULT_TICKETS
        agent = agent_factory(colour) if agent_factory is not None else None
        configurations.append(
            PlayerConfiguration(colour=colour, location=location, tickets=tickets, agent=agent)
        )
    return configurations

"""Player model for the pursuit game engine.

Each player has a colour, a location on the board and a ticket inventory.
Tickets spent by detectives are handed to Mr X; Mr X's tickets are lost.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .board import NodeId
from .constants import Colour, Ticket


@dataclass(frozen=True)
class PlayerConfiguration:
    """Starting configuration of one player.

    Attributes:
        colour: The player's colour (BLACK for Mr X).
        location: Starting node.
        tickets: Starting ticket counts; must contain every Ticket kind.
        agent: Move-selection collaborator (see engine.agents.Agent).
    """

    colour: Colour
    location: NodeId
    tickets: Mapping[Ticket, int]
    agent: Optional[Any] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tickets", MappingProxyType(dict(self.tickets)))


@dataclass
class Player:
    """Mutable per-game record of a participant.

    Attributes:
        colour: The player's colour.
        location: Current (true) node.
        tickets: Remaining ticket counts, one entry per Ticket kind.
        agent: Move-selection collaborator asked for this player's moves.
    """

    colour: Colour
    location: NodeId
    tickets: dict[Ticket, int]
    agent: Optional[Any] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_configuration(cls, config: PlayerConfiguration) -> Player:
        return cls(
            colour=config.colour,
            location=config.location,
            tickets=dict(config.tickets),
            agent=config.agent,
        )

    def is_mrx(self) -> bool:
        return self.colour.is_mrx()

    def is_detective(self) -> bool:
        return self.colour.is_detective()

    def has_tickets(self, ticket: Ticket, quantity: int = 1) -> bool:
        """Check if the player holds at least ``quantity`` of a ticket."""
        return self.tickets.get(ticket, 0) >= quantity

    def add_ticket(self, ticket: Ticket) -> None:
        self.tickets[ticket] = self.tickets.get(ticket, 0) + 1

    def remove_ticket(self, ticket: Ticket) -> None:
        """Spend one ticket.

        Raises:
            ValueError: If the player holds none of that kind.
        """
        if not self.has_tickets(ticket):
            raise ValueError(f"Player {self.colour.value} has no {ticket.value} tickets")
        self.tickets[ticket] -= 1

    def total_tickets(self) -> int:
        """Return the number of tickets held across all kinds."""
        return sum(self.tickets.values())

    def clone(self) -> Player:
        """Copy the record, sharing the agent."""
        return Player(
            colour=self.colour,
            location=self.location,
            tickets=dict(self.tickets),
            agent=self.agent,
        )

"""Move variants for the pursuit game engine.

A move is one of three immutable, hashable variants:
- PassMove: a detective with nowhere to go
- TicketMove: one ride using one ticket
- DoubleMove: two TicketMoves played as a single turn by Mr X

Every move carries the colour of the player making it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .board import NodeId
from .constants import Colour, Ticket


@dataclass(frozen=True)
class PassMove:
    """A detective passing because no ride is possible."""

    colour: Colour

    def __str__(self) -> str:
        return f"Pass({self.colour.value})"


@dataclass(frozen=True)
class TicketMove:
    """A single ride to ``destination`` paid with ``ticket``."""

    colour: Colour
    ticket: Ticket
    destination: NodeId

    def with_destination(self, destination: NodeId) -> TicketMove:
        """Return a copy reporting a different destination."""
        return TicketMove(self.colour, self.ticket, destination)

    def __str__(self) -> str:
        return f"Ticket({self.colour.value}, {self.ticket.value}, {self.destination})"


@dataclass(frozen=True)
class DoubleMove:
    """Two consecutive rides committed atomically."""

    colour: Colour
    first_move: TicketMove
    second_move: TicketMove

    @classmethod
    def of(
        cls,
        colour: Colour,
        first_ticket: Ticket,
        first_destination: NodeId,
        second_ticket: Ticket,
        second_destination: NodeId,
    ) -> DoubleMove:
        return cls(
            colour,
            TicketMove(colour, first_ticket, first_destination),
            TicketMove(colour, second_ticket, second_destination),
        )

    @property
    def final_destination(self) -> NodeId:
        return self.second_move.destination

    def __str__(self) -> str:
        return (
            f"Double({self.colour.value}, "
            f"{self.first_move.ticket.value}->{self.first_move.destination}, "
            f"{self.second_move.ticket.value}->{self.second_move.destination})"
        )


Move = Union[PassMove, TicketMove, DoubleMove]

"""Constants and enums for the pursuit game engine."""

from __future__ import annotations

from enum import Enum


class Colour(Enum):
    """Player colours. BLACK is always Mr X; every other colour is a detective."""

    BLACK = "black"
    BLUE = "blue"
    GREEN = "green"
    RED = "red"
    WHITE = "white"
    YELLOW = "yellow"

    def is_mrx(self) -> bool:
        return self is Colour.BLACK

    def is_detective(self) -> bool:
        return self is not Colour.BLACK


class Transport(Enum):
    """Transport kinds carried by board edges."""

    TAXI = "taxi"
    BUS = "bus"
    UNDERGROUND = "underground"
    FERRY = "ferry"


class Ticket(Enum):
    """Ticket kinds held by players."""

    TAXI = "taxi"
    BUS = "bus"
    UNDERGROUND = "underground"
    DOUBLE = "double"  # Two consecutive moves as one turn
    SECRET = "secret"  # Any transport, destination not disclosed by itself

    @classmethod
    def from_transport(cls, transport: Transport) -> Ticket:
        """Return the ticket required to ride an edge of the given transport."""
        return TRANSPORT_TICKETS[transport]

    def is_special(self) -> bool:
        return self in SPECIAL_TICKETS


TRANSPORT_TICKETS: dict[Transport, Ticket] = {
    Transport.TAXI: Ticket.TAXI,
    Transport.BUS: Ticket.BUS,
    Transport.UNDERGROUND: Ticket.UNDERGROUND,
    # Ferries can only be taken with a secret ticket
    Transport.FERRY: Ticket.SECRET,
}

SPECIAL_TICKETS = frozenset({Ticket.DOUBLE, Ticket.SECRET})

# Detectives must hold zero of these
DETECTIVE_FORBIDDEN_TICKETS = (Ticket.DOUBLE, Ticket.SECRET)

# Round index before Mr X's first move
NOT_STARTED = 0

# Disclosed location of Mr X before the first reveal round
HIDDEN_LOCATION = 0

# Player limits
MIN_DETECTIVES = 1
MAX_DETECTIVES = 5

# Standard board game schedule: 24 rounds, Mr X surfaces on rounds 3, 8, 13, 18, 24
REVEAL_ROUNDS = (3, 8, 13, 18, 24)
DEFAULT_ROUND_COUNT = 24
DEFAULT_ROUNDS: tuple[bool, ...] = tuple(
    (i + 1) in REVEAL_ROUNDS for i in range(DEFAULT_ROUND_COUNT)
)

MRX_DEFAULT_TICKETS: dict[Ticket, int] = {
    Ticket.TAXI: 4,
    Ticket.BUS: 3,
    Ticket.UNDERGROUND: 3,
    Ticket.DOUBLE: 2,
    Ticket.SECRET: 5,
}

DETECTIVE_DEFAULT_TICKETS: dict[Ticket, int] = {
    Ticket.TAXI: 11,
    Ticket.BUS: 8,
    Ticket.UNDERGROUND: 4,
    Ticket.DOUBLE: 0,
    Ticket.SECRET: 0,
}

# Seat order used when detectives are created automatically
DETECTIVE_COLOURS = (
    Colour.BLUE,
    Colour.GREEN,
    Colour.RED,
    Colour.WHITE,
    Colour.YELLOW,
)

"""
Seats and partnerships at a four-handed table.

Play goes clockwise North -> East -> South -> West. Partners sit opposite:
North-South against East-West.
"""
from __future__ import annotations

from enum import Enum, IntEnum


class Seat(IntEnum):
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    @property
    def next(self) -> "Seat":
        """Clockwise successor (the seat on this seat's left)."""
        return Seat((self + 1) % 4)

    @property
    def partner(self) -> "Seat":
        return Seat((self + 2) % 4)

    @property
    def team(self) -> "Team":
        return Team.NS if self in (Seat.NORTH, Seat.SOUTH) else Team.EW

    @property
    def label(self) -> str:
        return self.name.capitalize()

    def __str__(self) -> str:
        return self.label


class Team(str, Enum):
    NS = "NS"
    EW = "EW"

    @property
    def opponent(self) -> "Team":
        return Team.EW if self is Team.NS else Team.NS

    @property
    def seats(self) -> tuple[Seat, Seat]:
        if self is Team.NS:
            return (Seat.NORTH, Seat.SOUTH)
        return (Seat.EAST, Seat.WEST)

    @property
    def label(self) -> str:
        return "North-South" if self is Team.NS else "East-West"


def seats_from(start: Seat) -> list[Seat]:
    """The four seats in clockwise order beginning with ``start``."""
    return [Seat((start + i) % 4) for i in range(4)]


def seat_from_token(token: str) -> Seat:
    """Parse "N", "north" or "NORTH" into a Seat."""
    t = token.strip().upper()
    for seat in Seat:
        if t in (seat.name, seat.name[0]):
            return seat
    raise ValueError(f"Unknown seat: {token!r}")

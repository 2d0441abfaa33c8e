"""
Bid shapes, auction history entries, contracts and auction results.

Each variant accepts one bid shape:
- CardBid  (Minnesota Whist): a card laid face down; black = High, red = Low.
- LevelBid (Bid Whist, Widow Whist): a trick target with optional direction / no-trump.
- ExactBid (Oh Hell): the exact number of tricks a seat will take.
- Pass     (Bid Whist).

A history is an ordered tuple of BidEntry; its order is meaningful (reveal
order, dealer restriction, re-bid rounds) and it is never mutated.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence, Union

from .deck import Card
from .errors import ErrorKind, Rejection
from .ranking import RankDirection
from .seats import Seat, Team


@dataclass(frozen=True)
class CardBid:
    card: Card

    @property
    def is_high(self) -> bool:
        return not self.card.is_red

    def __str__(self) -> str:
        return f"{'High' if self.is_high else 'Low'} ({self.card})"


@dataclass(frozen=True)
class LevelBid:
    level: int
    direction: RankDirection = RankDirection.UPTOWN
    no_trump: bool = False

    def __str__(self) -> str:
        if self.no_trump:
            return f"{self.level} No Trump"
        return f"{self.level} {self.direction.value.capitalize()}"


@dataclass(frozen=True)
class ExactBid:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Pass:
    def __str__(self) -> str:
        return "Pass"


PASS = Pass()

Bid = Union[CardBid, LevelBid, ExactBid, Pass]


@dataclass(frozen=True)
class BidEntry:
    """A bid as recorded in the auction: who, what, position in sequence, re-bid round."""

    seat: Seat
    bid: Bid
    index: int
    round: int = 0

    @property
    def is_pass(self) -> bool:
        return isinstance(self.bid, Pass)


History = Sequence[BidEntry]


class ContractKind(str, Enum):
    HIGH = "high"          # Minnesota: a black card granded
    LOW = "low"            # Minnesota: Nula
    ALL_RED = "all_red"    # Minnesota: every seat bid red, nobody granded
    LEVEL = "level"        # Bid Whist
    EXACT = "exact"        # Oh Hell
    SOLO = "solo"          # Widow Whist
    BOOK = "book"          # Classic Whist, no auction


@dataclass(frozen=True)
class Contract:
    """
    What a hand is played for. ``declarer`` is None when no single seat is
    bound (all-red, Oh Hell, Classic). ``seat_bids`` holds the Oh Hell bids in
    auction order.
    """

    kind: ContractKind
    declarer: Seat | None = None
    level: int | None = None
    direction: RankDirection = RankDirection.UPTOWN
    no_trump: bool = False
    seat_bids: tuple[tuple[Seat, int], ...] = ()
    revealed: tuple[BidEntry, ...] = ()
    tricks_available: int = 13

    @property
    def declaring_team(self) -> Team | None:
        return self.declarer.team if self.declarer is not None else None

    def bid_for(self, seat: Seat) -> int | None:
        for s, v in self.seat_bids:
            if s == seat:
                return v
        return None

    def describe(self) -> str:
        if self.kind == ContractKind.HIGH:
            return f"{self.declarer} granded High"
        if self.kind == ContractKind.LOW:
            return "Low (Nula)"
        if self.kind == ContractKind.ALL_RED:
            return "All bid Low"
        if self.kind == ContractKind.LEVEL:
            return f"{self.declarer}: {LevelBid(self.level, self.direction, self.no_trump)}"
        if self.kind == ContractKind.EXACT:
            return ", ".join(f"{s} {v}" for s, v in self.seat_bids)
        if self.kind == ContractKind.SOLO:
            return f"{self.declarer} solo for {self.level}"
        return "Book"


class AuctionStatus(str, Enum):
    INCOMPLETE = "incomplete"
    WON = "won"
    ALL_PASS = "all_pass"


@dataclass(frozen=True)
class AuctionResult:
    """Outcome of ``resolve``. Only WON and ALL_PASS are terminal."""

    status: AuctionStatus
    reason: str
    winner: Seat | None = None
    winning_bid: Bid | None = None
    contract: Contract | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status != AuctionStatus.INCOMPLETE

    @classmethod
    def incomplete(cls, reason: str) -> "AuctionResult":
        return cls(AuctionStatus.INCOMPLETE, reason)

    @classmethod
    def all_pass(cls, reason: str) -> "AuctionResult":
        return cls(AuctionStatus.ALL_PASS, reason)


@dataclass(frozen=True)
class BidValidation:
    rejection: Rejection | None = None

    @property
    def valid(self) -> bool:
        return self.rejection is None

    @property
    def reason(self) -> str | None:
        return self.rejection.reason if self.rejection else None

    @classmethod
    def ok(cls) -> "BidValidation":
        return cls()

    @classmethod
    def invalid(cls, code: str, reason: str) -> "BidValidation":
        return cls(Rejection(ErrorKind.INVALID_BID, code, reason))


@dataclass(frozen=True)
class SubmitResult:
    """History after a submitted bid; unchanged (same object) when rejected."""

    history: tuple[BidEntry, ...]
    validation: BidValidation = field(default_factory=BidValidation.ok)

    @property
    def accepted(self) -> bool:
        return self.validation.valid

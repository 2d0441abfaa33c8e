"""
Bidding engines, one per variant that has an auction.

Minnesota Whist: every seat lays one card face down at the same time. Bids are
revealed from the dealer's left; the first black card "grands" High. If all
four are red nobody granded (all-red hand).

Bid Whist: seat by seat from the dealer's left. Levels 3..6 (book of 6 plus the
level, out of 12 tricks). Each bid must beat the standing bid on
(level, no-trump); Uptown and Downtown rank equal. A seat that passes is out
for the rest of the auction. The auction ends when the three other seats have
passed behind a live bid, or when all four pass (no contract).

Oh Hell: every seat bids once, from the dealer's left, 0..tricks available.
The last bidder may not bring the total to exactly the tricks available.

Widow Whist: simultaneous bids of 6..12 for the widow. Highest bid wins. Tied
seats, and only they, bid again in a new round where they may hold the tied
level or raise. If every tied seat holds, the first of them from the dealer's
left wins.

Every function takes the history and the dealer explicitly and returns a new
value; nothing is stored between calls.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, NamedTuple

from .bids import (
    PASS,
    AuctionResult,
    AuctionStatus,
    Bid,
    BidEntry,
    BidValidation,
    CardBid,
    Contract,
    ContractKind,
    ExactBid,
    History,
    LevelBid,
    Pass,
    SubmitResult,
)
from .errors import (
    ALREADY_PASSED,
    AUCTION_COMPLETE,
    BID_OUT_OF_RANGE,
    BID_TOO_LOW,
    DEALER_RESTRICTION,
    DUPLICATE_BID,
    NOT_IN_REBID,
    OUT_OF_TURN,
    WRONG_BID_SHAPE,
)
from .deal import first_to_bid
from .seats import Seat, seats_from

logger = logging.getLogger(__name__)

BID_WHIST_MIN_LEVEL = 3
BID_WHIST_MAX_LEVEL = 6
BID_WHIST_TRICKS = 12
WIDOW_MIN_BID = 6
WIDOW_MAX_BID = 12
WIDOW_TRICKS = 12


@dataclass(frozen=True)
class BiddingEngine:
    """Bundle of pure auction functions for one variant."""

    name: str
    simultaneous: bool
    is_complete: Callable[[History, Seat], bool]
    next_bidder: Callable[[History, Seat], Seat | None]
    validate_bid: Callable[[Bid, Seat, History, Seat], BidValidation]
    resolve: Callable[[History, Seat], AuctionResult]
    current_round: Callable[[History, Seat], int] = lambda history, dealer: 0

    def submit(self, bid: Bid, seat: Seat, history: History, dealer: Seat) -> SubmitResult:
        """Validate ``bid`` and, if legal, return the history with it appended."""
        current = tuple(history)
        validation = self.validate_bid(bid, seat, current, dealer)
        if not validation.valid:
            logger.debug("%s: rejected %s from %s: %s", self.name, bid, seat, validation.reason)
            return SubmitResult(current, validation)
        entry = BidEntry(seat, bid, len(current), self.current_round(current, dealer))
        logger.debug("%s: %s bids %s", self.name, seat, bid)
        return SubmitResult(current + (entry,))


def _seat_has_bid(history: History, seat: Seat, round_: int = 0) -> bool:
    return any(e.seat == seat and e.round == round_ for e in history)


# ---------------------------------------------------------------------------
#  Minnesota Whist
# ---------------------------------------------------------------------------


def minnesota_is_complete(history: History, dealer: Seat) -> bool:
    return len({e.seat for e in history}) == 4


def minnesota_next_bidder(history: History, dealer: Seat) -> Seat | None:
    """Bids are simultaneous; this only names some seat still to bid (reveal order)."""
    for seat in seats_from(first_to_bid(dealer)):
        if not _seat_has_bid(history, seat):
            return seat
    return None


def minnesota_validate(bid: Bid, seat: Seat, history: History, dealer: Seat) -> BidValidation:
    if not isinstance(bid, CardBid):
        return BidValidation.invalid(WRONG_BID_SHAPE, "Minnesota Whist bids are a single card")
    if minnesota_is_complete(history, dealer):
        return BidValidation.invalid(AUCTION_COMPLETE, "All bids are already in")
    if _seat_has_bid(history, seat):
        return BidValidation.invalid(DUPLICATE_BID, f"{seat} has already bid")
    return BidValidation.ok()


def minnesota_resolve(history: History, dealer: Seat, all_red_as_low: bool = False) -> AuctionResult:
    if not minnesota_is_complete(history, dealer):
        missing = 4 - len({e.seat for e in history})
        return AuctionResult.incomplete(f"Waiting for {missing} more bid(s)")

    by_seat = {e.seat: e for e in history}
    revealed: list[BidEntry] = []
    for seat in seats_from(first_to_bid(dealer)):
        entry = by_seat[seat]
        revealed.append(entry)
        if entry.bid.is_high:
            contract = Contract(
                kind=ContractKind.HIGH,
                declarer=seat,
                revealed=tuple(revealed),
            )
            logger.debug("Minnesota: %s grands High with %s", seat, entry.bid.card)
            return AuctionResult(
                AuctionStatus.WON,
                f"{seat} granded High ({seat.team.label})",
                winner=seat,
                winning_bid=entry.bid,
                contract=contract,
            )

    # All four red: the first revealer is the nominal leader of the auction.
    first = revealed[0]
    kind = ContractKind.LOW if all_red_as_low else ContractKind.ALL_RED
    logger.debug("Minnesota: all bids red, contract %s", kind.value)
    return AuctionResult(
        AuctionStatus.WON,
        "All players bid Low",
        winner=first.seat,
        winning_bid=first.bid,
        contract=Contract(kind=kind, revealed=tuple(revealed)),
    )


# ---------------------------------------------------------------------------
#  Bid Whist
# ---------------------------------------------------------------------------


def _bid_key(bid: LevelBid) -> tuple[int, int]:
    return (bid.level, 1 if bid.no_trump else 0)


def _passed_seats(history: History) -> set[Seat]:
    return {e.seat for e in history if e.is_pass}


def _standing_bid(history: History) -> BidEntry | None:
    best: BidEntry | None = None
    for e in history:
        if isinstance(e.bid, LevelBid):
            if best is None or _bid_key(e.bid) > _bid_key(best.bid):
                best = e
    return best


def bid_whist_is_complete(history: History, dealer: Seat) -> bool:
    passed = _passed_seats(history)
    if len(passed) == 4:
        return True
    return _standing_bid(history) is not None and len(passed) == 3


def bid_whist_next_bidder(history: History, dealer: Seat) -> Seat | None:
    if bid_whist_is_complete(history, dealer):
        return None
    if not history:
        return first_to_bid(dealer)
    passed = _passed_seats(history)
    seat = history[-1].seat.next
    while seat in passed:
        seat = seat.next
    return seat


def bid_whist_validate(bid: Bid, seat: Seat, history: History, dealer: Seat) -> BidValidation:
    if not isinstance(bid, (LevelBid, Pass)):
        return BidValidation.invalid(WRONG_BID_SHAPE, "Bid Whist bids are a level or a pass")
    if bid_whist_is_complete(history, dealer):
        return BidValidation.invalid(AUCTION_COMPLETE, "The auction is over")
    if seat in _passed_seats(history):
        return BidValidation.invalid(ALREADY_PASSED, f"{seat} has passed and cannot bid again")
    expected = bid_whist_next_bidder(history, dealer)
    if seat != expected:
        return BidValidation.invalid(OUT_OF_TURN, f"It is {expected}'s turn to bid")
    if isinstance(bid, Pass):
        return BidValidation.ok()
    if not BID_WHIST_MIN_LEVEL <= bid.level <= BID_WHIST_MAX_LEVEL:
        return BidValidation.invalid(
            BID_OUT_OF_RANGE,
            f"Bid must be between {BID_WHIST_MIN_LEVEL} and {BID_WHIST_MAX_LEVEL}",
        )
    standing = _standing_bid(history)
    if standing is not None and _bid_key(bid) <= _bid_key(standing.bid):
        return BidValidation.invalid(BID_TOO_LOW, f"Bid must beat {standing.bid}")
    return BidValidation.ok()


def bid_whist_resolve(history: History, dealer: Seat) -> AuctionResult:
    if not bid_whist_is_complete(history, dealer):
        return AuctionResult.incomplete("Auction still in progress")
    standing = _standing_bid(history)
    if standing is None:
        logger.debug("Bid Whist: all four passed")
        return AuctionResult.all_pass("All players passed; redeal")
    bid: LevelBid = standing.bid
    contract = Contract(
        kind=ContractKind.LEVEL,
        declarer=standing.seat,
        level=bid.level,
        direction=bid.direction,
        no_trump=bid.no_trump,
        tricks_available=BID_WHIST_TRICKS,
    )
    logger.debug("Bid Whist: %s wins with %s", standing.seat, bid)
    return AuctionResult(
        AuctionStatus.WON,
        f"{standing.seat} wins the bid: {bid}",
        winner=standing.seat,
        winning_bid=bid,
        contract=contract,
    )


# ---------------------------------------------------------------------------
#  Oh Hell
# ---------------------------------------------------------------------------


def oh_hell_is_complete(history: History, dealer: Seat) -> bool:
    return len(history) >= 4


def oh_hell_next_bidder(history: History, dealer: Seat) -> Seat | None:
    if oh_hell_is_complete(history, dealer):
        return None
    return seats_from(first_to_bid(dealer))[len(history)]


def oh_hell_validate(
    bid: Bid, seat: Seat, history: History, dealer: Seat, tricks_available: int = 13
) -> BidValidation:
    if not isinstance(bid, ExactBid):
        return BidValidation.invalid(WRONG_BID_SHAPE, "Oh Hell bids are a number of tricks")
    if oh_hell_is_complete(history, dealer):
        return BidValidation.invalid(AUCTION_COMPLETE, "All bids are already in")
    expected = oh_hell_next_bidder(history, dealer)
    if seat != expected:
        return BidValidation.invalid(OUT_OF_TURN, f"It is {expected}'s turn to bid")
    if not 0 <= bid.value <= tricks_available:
        return BidValidation.invalid(BID_OUT_OF_RANGE, f"Bid must be between 0 and {tricks_available}")
    if len(history) == 3:
        total = sum(e.bid.value for e in history) + bid.value
        if total == tricks_available:
            forbidden = tricks_available - (total - bid.value)
            return BidValidation.invalid(
                DEALER_RESTRICTION,
                f"Dealer cannot bid {forbidden}: total bids would equal {tricks_available} tricks",
            )
    return BidValidation.ok()


def oh_hell_resolve(history: History, dealer: Seat, tricks_available: int = 13) -> AuctionResult:
    if not oh_hell_is_complete(history, dealer):
        return AuctionResult.incomplete(f"Waiting for {4 - len(history)} more bid(s)")
    seat_bids = tuple((e.seat, e.bid.value) for e in history)
    total = sum(v for _, v in seat_bids)
    return AuctionResult(
        AuctionStatus.WON,
        f"Bids total {total} of {tricks_available} tricks",
        contract=Contract(
            kind=ContractKind.EXACT,
            seat_bids=seat_bids,
            tricks_available=tricks_available,
        ),
    )


# ---------------------------------------------------------------------------
#  Widow Whist
# ---------------------------------------------------------------------------


class WidowRound(NamedTuple):
    """Where a Widow Whist auction stands."""
    round: int
    participants: tuple[Seat, ...]
    entries: tuple[BidEntry, ...]
    floor: int                   # lowest level allowed this round
    winner: BidEntry | None      # set once the auction is decided


def widow_round(history: History, dealer: Seat) -> WidowRound:
    """Replay the history round by round, narrowing to tied seats after each round."""
    order = seats_from(first_to_bid(dealer))
    participants = tuple(order)
    floor = WIDOW_MIN_BID
    round_ = 0
    while True:
        entries = tuple(e for e in history if e.round == round_)
        if len(entries) < len(participants):
            return WidowRound(round_, participants, entries, floor, None)
        top = max(e.bid.level for e in entries)
        tied = [e for e in entries if e.bid.level == top]
        if len(tied) == 1:
            return WidowRound(round_, participants, entries, floor, tied[0])
        if round_ > 0 and top == floor:
            # Every tied seat held: first from the dealer's left takes it.
            tied.sort(key=lambda e: order.index(e.seat))
            return WidowRound(round_, participants, entries, floor, tied[0])
        participants = tuple(s for s in order if any(e.seat == s for e in tied))
        floor = top
        round_ += 1


def widow_is_complete(history: History, dealer: Seat) -> bool:
    return widow_round(history, dealer).winner is not None


def widow_current_round(history: History, dealer: Seat) -> int:
    return widow_round(history, dealer).round


def widow_next_bidder(history: History, dealer: Seat) -> Seat | None:
    state = widow_round(history, dealer)
    if state.winner is not None:
        return None
    done = {e.seat for e in state.entries}
    for seat in state.participants:
        if seat not in done:
            return seat
    return None


def widow_validate(bid: Bid, seat: Seat, history: History, dealer: Seat) -> BidValidation:
    if not isinstance(bid, LevelBid):
        return BidValidation.invalid(WRONG_BID_SHAPE, "Widow Whist bids are a number of tricks")
    state = widow_round(history, dealer)
    if state.winner is not None:
        return BidValidation.invalid(AUCTION_COMPLETE, "The widow has been won")
    if seat not in state.participants:
        return BidValidation.invalid(NOT_IN_REBID, f"{seat} is not part of the re-bid")
    if any(e.seat == seat for e in state.entries):
        return BidValidation.invalid(DUPLICATE_BID, f"{seat} has already bid this round")
    if not WIDOW_MIN_BID <= bid.level <= WIDOW_MAX_BID:
        return BidValidation.invalid(BID_OUT_OF_RANGE, f"Bid must be between {WIDOW_MIN_BID} and {WIDOW_MAX_BID}")
    if bid.level < state.floor:
        return BidValidation.invalid(BID_TOO_LOW, f"Re-bid must be at least {state.floor}")
    return BidValidation.ok()


def widow_resolve(history: History, dealer: Seat) -> AuctionResult:
    state = widow_round(history, dealer)
    if state.winner is None:
        if state.round > 0:
            tied = ", ".join(str(s) for s in state.participants)
            return AuctionResult.incomplete(f"Tie at {state.floor}: re-bid between {tied}")
        return AuctionResult.incomplete(f"Waiting for {4 - len(state.entries)} more bid(s)")
    entry = state.winner
    logger.debug("Widow Whist: %s wins the widow bidding %d", entry.seat, entry.bid.level)
    return AuctionResult(
        AuctionStatus.WON,
        f"{entry.seat} won the widow with {entry.bid.level} tricks",
        winner=entry.seat,
        winning_bid=entry.bid,
        contract=Contract(
            kind=ContractKind.SOLO,
            declarer=entry.seat,
            level=entry.bid.level,
            tricks_available=WIDOW_TRICKS,
        ),
    )


# ---------------------------------------------------------------------------
#  Engine bundles
# ---------------------------------------------------------------------------


def minnesota_engine(all_red_as_low: bool = False) -> BiddingEngine:
    return BiddingEngine(
        name="Minnesota Whist",
        simultaneous=True,
        is_complete=minnesota_is_complete,
        next_bidder=minnesota_next_bidder,
        validate_bid=minnesota_validate,
        resolve=partial(minnesota_resolve, all_red_as_low=all_red_as_low),
    )


def bid_whist_engine() -> BiddingEngine:
    return BiddingEngine(
        name="Bid Whist",
        simultaneous=False,
        is_complete=bid_whist_is_complete,
        next_bidder=bid_whist_next_bidder,
        validate_bid=bid_whist_validate,
        resolve=bid_whist_resolve,
    )


def oh_hell_engine(tricks_available: int = 13) -> BiddingEngine:
    return BiddingEngine(
        name="Oh Hell",
        simultaneous=False,
        is_complete=oh_hell_is_complete,
        next_bidder=oh_hell_next_bidder,
        validate_bid=partial(oh_hell_validate, tricks_available=tricks_available),
        resolve=partial(oh_hell_resolve, tricks_available=tricks_available),
    )


def widow_engine() -> BiddingEngine:
    return BiddingEngine(
        name="Widow Whist",
        simultaneous=True,
        is_complete=widow_is_complete,
        next_bidder=widow_next_bidder,
        validate_bid=widow_validate,
        resolve=widow_resolve,
        current_round=widow_current_round,
    )


__all__ = [
    "PASS",
    "BiddingEngine",
    "WidowRound",
    "widow_round",
    "minnesota_engine",
    "bid_whist_engine",
    "oh_hell_engine",
    "widow_engine",
]

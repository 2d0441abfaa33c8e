"""
Single hand and match orchestration: deal → bid → kitty exchange → trump → tricks → score.

This is a reference driver built only on the public engine functions. All
decisions come from callbacks that receive the current HandState and the seat
to act:

    get_bid(state, seat) -> Bid
    get_play(state, seat) -> Card
    get_exchange(state, seat) -> list[Card]     (kitty/widow variants)
    get_trump(state, seat) -> Suit | None       (bid-winner-declares variants)

A callback returning an illegal decision is a driver bug and raises ValueError
with the rejection text.
"""
from __future__ import annotations

import logging
import random
from typing import Callable, NamedTuple, Optional

from .bids import AuctionResult, AuctionStatus, Bid, BidEntry, Contract
from .deal import Deal, deal_hand, exchange_kitty, hand_size_schedule, next_dealer
from .deck import Card, Suit, build_deck
from .play import PlayStatus, Trick, TrickTally, legal_plays, play_card
from .ranking import RankingRules
from .scoring import HandScore, Outcome
from .seats import Seat
from .trump import TrumpSelectionMethod, TrumpState
from .variants import VariantId, VariantRules, get_rules, with_options

logger = logging.getLogger(__name__)

BidCallback = Callable[["HandState", Seat], Bid]
PlayCallback = Callable[["HandState", Seat], Card]
ExchangeCallback = Callable[["HandState", Seat], list]
TrumpCallback = Callable[["HandState", Seat], Optional[Suit]]


class HandState:
    """Mutable state for one hand, owned by the driver between engine calls."""

    def __init__(self, rules: VariantRules, deal: Deal):
        self.rules = rules
        self.dealer = deal.dealer
        self.hands: list[list[Card]] = [list(h) for h in deal.hands]
        self.kitty: list[Card] = list(deal.kitty)
        self.stock: list[Card] = list(deal.stock)
        self.discards: list[Card] = []
        self.last_card_dealt = deal.last_card_dealt
        self.turned_card = deal.turned_card
        self.history: tuple[BidEntry, ...] = ()
        self.auction: AuctionResult | None = None
        self.contract: Contract | None = rules.default_contract()
        self.trump: Suit | None = None
        self.ranking: RankingRules = rules.ranking(None)
        self.trick: Trick | None = None
        self.completed: list[Trick] = []
        self.tally = TrickTally()

    def current_player(self) -> Seat | None:
        return self.trick.next_seat if self.trick is not None else None

    def legal_cards(self, seat: Seat) -> list[Card]:
        return legal_plays(self.hands[seat], self.trick, self.ranking)

    def all_cards(self) -> list[Card]:
        """Every card of the deck, wherever it currently lies."""
        cards: list[Card] = []
        for h in self.hands:
            cards.extend(h)
        cards.extend(self.kitty)
        cards.extend(self.stock)
        cards.extend(self.discards)
        for t in self.completed:
            cards.extend(t.cards)
        if self.trick is not None and not self.trick.is_complete:
            cards.extend(self.trick.cards)
        return cards

    def run_auction(self, get_bid: BidCallback) -> AuctionResult:
        engine = self.rules.bidding
        if engine is None:
            raise ValueError(f"{self.rules.name} has no auction")
        while not engine.is_complete(self.history, self.dealer):
            seat = engine.next_bidder(self.history, self.dealer)
            result = engine.submit(get_bid(self, seat), seat, self.history, self.dealer)
            if not result.accepted:
                raise ValueError(result.validation.reason)
            self.history = result.history
        self.auction = engine.resolve(self.history, self.dealer)
        if self.auction.status == AuctionStatus.WON:
            self.contract = self.auction.contract
        logger.debug("Auction: %s", self.auction.reason)
        return self.auction

    def exchange(self, get_exchange: ExchangeCallback) -> None:
        declarer = self.contract.declarer if self.contract is not None else None
        if not self.kitty or declarer is None:
            return
        result = exchange_kitty(self.hands[declarer], self.kitty, get_exchange(self, declarer))
        if not result.ok:
            raise ValueError(result.rejection.reason)
        self.hands[declarer] = result.hand
        self.discards.extend(result.discards)
        self.kitty = []

    def choose_trump(self, get_trump: TrumpCallback | None) -> Suit | None:
        declared_suit = None
        no_trump = False
        if self.rules.spec.trump_selection == TrumpSelectionMethod.BID_WINNER:
            if self.contract is not None and self.contract.no_trump:
                no_trump = True
            elif get_trump is not None and self.contract is not None and self.contract.declarer is not None:
                declared_suit = get_trump(self, self.contract.declarer)
                no_trump = declared_suit is None
        state = TrumpState(
            last_card_dealt=self.last_card_dealt,
            turned_card=self.turned_card,
            declared_suit=declared_suit,
            declared_no_trump=no_trump,
        )
        self.trump = self.rules.determine_trump(state)
        self.ranking = self.rules.ranking(self.trump, self.contract)
        return self.trump

    def start_play(self) -> None:
        leader = self.rules.opening_leader(self.contract, self.dealer)
        self.trick = Trick(leader=leader, trump=self.trump)

    def play(self, seat: Seat, card: Card) -> Seat | None:
        """Play one card; returns the trick winner when the trick completes."""
        result = play_card(self.trick, seat, card, self.hands[seat], self.ranking)
        if not result.ok:
            raise ValueError(result.rejection.reason)
        self.hands[seat] = result.hand
        self.trick = result.trick
        if result.status != PlayStatus.COMPLETE:
            return None
        self.completed.append(result.trick)
        self.tally = self.tally.add(result.winner)
        if len(self.completed) < self.rules.tricks_per_hand:
            self.trick = Trick(leader=result.winner, trump=self.trump)
        return result.winner

    @property
    def is_over(self) -> bool:
        return len(self.completed) == self.rules.tricks_per_hand


class HandOutcome(NamedTuple):
    state: HandState
    score: HandScore
    redeals: int


def play_one_hand(
    rules: VariantRules,
    dealer: Seat,
    get_bid: BidCallback | None,
    get_play: PlayCallback,
    get_exchange: ExchangeCallback | None = None,
    get_trump: TrumpCallback | None = None,
    rng: random.Random | None = None,
    deck: list[Card] | None = None,
) -> HandOutcome:
    """
    Play one full hand. An auction where everyone passes is redealt by the
    same dealer, up to ``rules.options.max_redeals`` times; after that the
    hand scores nothing.
    """
    if rng is None:
        rng = random.Random()
    redeals = 0
    while True:
        cards = list(deck) if deck is not None and redeals == 0 else build_deck(rng=rng)
        state = HandState(rules, deal_hand(cards, dealer, rules.cards_per_player, rules.kitty_size))
        if rules.bidding is None:
            break
        if get_bid is None:
            raise ValueError(f"{rules.name} needs a bid callback")
        auction = state.run_auction(get_bid)
        if auction.status != AuctionStatus.ALL_PASS:
            break
        if redeals >= rules.options.max_redeals:
            logger.info("%s: no contract after %d redeals", rules.name, redeals)
            return HandOutcome(state, HandScore(0, 0, f"No contract after {redeals} redeals"), redeals)
        redeals += 1
        logger.debug("All passed; %s redeals (%d)", dealer, redeals)

    if state.kitty and state.contract is not None and state.contract.declarer is not None:
        if get_exchange is None:
            raise ValueError(f"{rules.name} needs an exchange callback")
        state.exchange(get_exchange)
    state.choose_trump(get_trump)
    state.start_play()
    while not state.is_over:
        seat = state.current_player()
        state.play(seat, get_play(state, seat))

    score = rules.scoring.score(state.contract, state.tally)
    logger.info("%s hand dealt by %s: %s", rules.name, dealer, score.description.replace("\n", "; "))
    return HandOutcome(state, score, redeals)


class MatchResult(NamedTuple):
    ns: int
    ew: int
    outcome: Outcome | None
    hands: list[HandScore]
    message: str


def run_match(
    variant: str | VariantId | VariantRules,
    get_bid: BidCallback | None,
    get_play: PlayCallback,
    get_exchange: ExchangeCallback | None = None,
    get_trump: TrumpCallback | None = None,
    max_hands: int = 200,
    dealer: Seat = Seat.NORTH,
    rng: random.Random | None = None,
    oh_hell_schedule: bool = False,
) -> MatchResult:
    """
    Play hands until the game is over or ``max_hands`` is reached.
    With ``oh_hell_schedule`` the Oh Hell hand size follows the down-and-up
    schedule, repeating.
    """
    rules = variant if isinstance(variant, VariantRules) else get_rules(variant)
    if rng is None:
        rng = random.Random()
    schedule = hand_size_schedule() if oh_hell_schedule and rules.spec.id == VariantId.OH_HELL else None
    ns = ew = 0
    hands: list[HandScore] = []
    outcome: Outcome | None = None
    for i in range(max_hands):
        hand_rules = with_options(rules, oh_hell_hand_size=schedule[i % len(schedule)]) if schedule else rules
        result = play_one_hand(hand_rules, dealer, get_bid, get_play, get_exchange, get_trump, rng=rng)
        hands.append(result.score)
        ns += result.score.ns
        ew += result.score.ew
        outcome = rules.scoring.game_over(ns, ew, rules.target)
        if outcome is not None:
            break
        dealer = next_dealer(dealer)
    if outcome is not None:
        message = rules.scoring.game_over_message(outcome, ns, ew)
    else:
        message = f"No winner after {len(hands)} hands: {ns}-{ew}"
    logger.info(message)
    return MatchResult(ns, ew, outcome, hands, message)

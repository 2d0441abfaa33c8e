"""
Baseline decision source for the reference driver.

RandomAgent picks uniformly among the decisions the engines accept, so it
exercises every rule without any playing strength. Its methods match the
driver callbacks in ``whist.game``.

Usage:
    agent = RandomAgent(seed=42)
    run_match("bid_whist", agent.bid, agent.play, agent.exchange, agent.declare_trump)
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, List

from .bids import PASS, Bid, CardBid, ExactBid, LevelBid
from .bidding import BID_WHIST_MAX_LEVEL, BID_WHIST_MIN_LEVEL, WIDOW_MAX_BID, WIDOW_MIN_BID
from .deck import Card, Suit
from .ranking import RankDirection
from .seats import Seat
from .variants import VariantId

if TYPE_CHECKING:
    from .game import HandState


def candidate_bids(state: "HandState", seat: Seat) -> List[Bid]:
    """Every bid shape the variant might accept from ``seat`` (not yet validated)."""
    variant = state.rules.spec.id
    if variant == VariantId.MINNESOTA_WHIST:
        return [CardBid(c) for c in state.hands[seat]]
    if variant == VariantId.BID_WHIST:
        return [
            LevelBid(level, direction, no_trump)
            for level in range(BID_WHIST_MIN_LEVEL, BID_WHIST_MAX_LEVEL + 1)
            for direction in RankDirection
            for no_trump in (False, True)
        ]
    if variant == VariantId.OH_HELL:
        return [ExactBid(v) for v in range(state.rules.tricks_per_hand + 1)]
    if variant == VariantId.WIDOW_WHIST:
        return [LevelBid(level) for level in range(WIDOW_MIN_BID, WIDOW_MAX_BID + 1)]
    return []


@dataclass
class RandomAgent:
    """Uniformly random legal decisions; passes with probability ``pass_rate`` when it may."""

    seed: int | None = None
    pass_rate: float = 0.5

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def bid(self, state: "HandState", seat: Seat) -> Bid:
        engine = state.rules.bidding
        can_pass = engine.validate_bid(PASS, seat, state.history, state.dealer).valid
        if can_pass and self._rng.random() < self.pass_rate:
            return PASS
        legal = [
            b for b in candidate_bids(state, seat)
            if engine.validate_bid(b, seat, state.history, state.dealer).valid
        ]
        if legal:
            return self._rng.choice(legal)
        if can_pass:
            return PASS
        raise ValueError(f"No legal bid available for {seat}")

    def play(self, state: "HandState", seat: Seat) -> Card:
        legal = state.legal_cards(seat)
        if not legal:
            raise ValueError(f"No legal card available for {seat}")
        return self._rng.choice(legal)

    def exchange(self, state: "HandState", seat: Seat) -> List[Card]:
        pool = list(state.hands[seat]) + list(state.kitty)
        return self._rng.sample(pool, len(state.kitty))

    def declare_trump(self, state: "HandState", seat: Seat) -> Suit:
        return self._rng.choice(list(Suit))


__all__ = ["RandomAgent", "candidate_bids"]

"""
Trick-taking shared by every variant: legal plays, playing a card, trick winner.

Must follow the led suit when able (the left bower follows trump when bowers
are on); otherwise any card, trump included. The highest trump wins, else the
highest card of the led suit. A trick is immutable: playing a card returns a
new Trick and a new hand without the card.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, NamedTuple, Sequence

from .deck import Card, Suit
from .errors import (
    CARD_NOT_IN_HAND,
    CLAIMS_DISABLED,
    MUST_FOLLOW_SUIT,
    OUT_OF_TURN,
    TRICK_COMPLETE,
    ErrorKind,
    Rejection,
)
from .ranking import RankingRules
from .seats import Seat, Team

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Trick:
    """Plays in the order made, the seat that led, and the trump in effect (None = no trump)."""

    leader: Seat
    trump: Suit | None = None
    plays: tuple[tuple[Seat, Card], ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.plays

    @property
    def is_complete(self) -> bool:
        return len(self.plays) == 4

    @property
    def next_seat(self) -> Seat | None:
        if self.is_complete:
            return None
        return Seat((self.leader + len(self.plays)) % 4)

    @property
    def cards(self) -> list[Card]:
        return [c for _, c in self.plays]

    def card_of(self, seat: Seat) -> Card | None:
        for s, c in self.plays:
            if s == seat:
                return c
        return None

    def with_play(self, seat: Seat, card: Card) -> "Trick":
        return dataclasses.replace(self, plays=self.plays + ((seat, card),))


def _rules_for(trick: Trick, rules: RankingRules | None) -> RankingRules:
    if rules is None:
        return RankingRules(trump=trick.trump)
    if rules.trump != trick.trump:
        return dataclasses.replace(rules, trump=trick.trump)
    return rules


def led_suit(trick: Trick, rules: RankingRules | None = None) -> Suit | None:
    """Effective suit of the leader's card, or None before the lead."""
    card = trick.card_of(trick.leader)
    if card is None:
        return None
    return _rules_for(trick, rules).effective_suit(card)


def legal_plays(hand: Sequence[Card], trick: Trick, rules: RankingRules | None = None) -> list[Card]:
    """Cards from ``hand`` that may be played to ``trick``."""
    r = _rules_for(trick, rules)
    suit = led_suit(trick, r)
    if suit is None:
        return list(hand)
    following = [c for c in hand if r.effective_suit(c) == suit]
    return following if following else list(hand)


class PlayStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    REJECTED = "rejected"


class PlayResult(NamedTuple):
    """
    Result of ``play_card``. On rejection ``trick`` and ``hand`` are the inputs,
    unchanged; ``winner`` is set once the trick is complete.
    """
    status: PlayStatus
    trick: Trick
    hand: list[Card]
    winner: Seat | None = None
    rejection: Rejection | None = None

    @property
    def ok(self) -> bool:
        return self.status != PlayStatus.REJECTED


def _reject(trick: Trick, hand: Sequence[Card], code: str, reason: str) -> PlayResult:
    logger.debug("Play rejected: %s", reason)
    return PlayResult(
        PlayStatus.REJECTED,
        trick,
        list(hand),
        rejection=Rejection(ErrorKind.INVALID_PLAY, code, reason),
    )


def play_card(
    trick: Trick,
    seat: Seat,
    card: Card,
    hand: Sequence[Card],
    rules: RankingRules | None = None,
) -> PlayResult:
    """Try to play ``card`` from ``seat``'s ``hand`` to ``trick``."""
    if trick.is_complete:
        return _reject(trick, hand, TRICK_COMPLETE, "This trick is already complete")
    if seat != trick.next_seat:
        return _reject(trick, hand, OUT_OF_TURN, f"It is {trick.next_seat}'s turn to play")
    if card not in hand:
        return _reject(trick, hand, CARD_NOT_IN_HAND, f"Card {card} is not in your hand")
    r = _rules_for(trick, rules)
    suit = led_suit(trick, r)
    if suit is not None and r.effective_suit(card) != suit:
        if any(r.effective_suit(c) == suit for c in hand):
            return _reject(trick, hand, MUST_FOLLOW_SUIT, f"Must follow suit: {suit.name.capitalize()}")

    new_hand = list(hand)
    new_hand.remove(card)
    new_trick = trick.with_play(seat, card)
    if new_trick.is_complete:
        winner = determine_winner(new_trick, r)
        return PlayResult(PlayStatus.COMPLETE, new_trick, new_hand, winner=winner)
    return PlayResult(PlayStatus.IN_PROGRESS, new_trick, new_hand)


def current_winner(trick: Trick, rules: RankingRules | None = None) -> Seat | None:
    """Seat currently winning a (possibly partial) trick; None when empty."""
    r = _rules_for(trick, rules)
    suit = led_suit(trick, r)
    if suit is None:
        return None
    best_seat, _ = max(trick.plays, key=lambda p: r.trick_power(p[1], suit))
    return best_seat


def determine_winner(trick: Trick, rules: RankingRules | None = None) -> Seat:
    """Winner of a complete trick. The order of ``plays`` does not matter, only who led."""
    if not trick.is_complete:
        raise ValueError(f"Trick is not complete ({len(trick.plays)} of 4 cards)")
    if len({c for _, c in trick.plays}) != 4 or len({s for s, _ in trick.plays}) != 4:
        raise ValueError("A complete trick needs four distinct cards from four seats")
    winner = current_winner(trick, rules)
    logger.debug("Trick %s won by %s", " ".join(str(c) for c in trick.cards), winner)
    return winner


@dataclass(frozen=True)
class TrickTally:
    """Tricks taken per seat, indexed by Seat."""

    counts: tuple[int, int, int, int] = (0, 0, 0, 0)

    @classmethod
    def from_seats(cls, counts: Mapping[Seat, int]) -> "TrickTally":
        return cls(tuple(int(counts.get(s, 0)) for s in Seat))

    @classmethod
    def for_teams(cls, ns: int, ew: int) -> "TrickTally":
        """Tally when only team totals matter (credited to North and East)."""
        return cls((ns, ew, 0, 0))

    @classmethod
    def from_tricks(cls, tricks: Iterable[Trick], rules: RankingRules | None = None) -> "TrickTally":
        tally = cls()
        for t in tricks:
            tally = tally.add(determine_winner(t, rules))
        return tally

    def add(self, seat: Seat, n: int = 1) -> "TrickTally":
        counts = list(self.counts)
        counts[seat] += n
        return TrickTally(tuple(counts))

    def seat(self, seat: Seat) -> int:
        return self.counts[seat]

    def team(self, team: Team) -> int:
        return sum(self.counts[s] for s in team.seats)

    @property
    def total(self) -> int:
        return sum(self.counts)


class ClaimWindow(NamedTuple):
    """What an external arbiter needs to judge a claim."""
    tricks_remaining: int
    next_to_play: Seat | None
    winner_elect: Seat | None


def claim_window(
    hands: Sequence[Sequence[Card]],
    trick: Trick,
    rules: RankingRules | None = None,
) -> ClaimWindow:
    """
    Tricks still to be decided (the one in progress included), who plays
    next, and who is currently winning the trick in progress.
    """
    remaining = max(len(h) for h in hands)
    return ClaimWindow(remaining, trick.next_seat, current_winner(trick, rules))


class ClaimResult(NamedTuple):
    tally: TrickTally
    rejection: Rejection | None = None

    @property
    def ok(self) -> bool:
        return self.rejection is None


def award_claim(
    tally: TrickTally,
    claimant: Seat,
    window: ClaimWindow,
    allows_claims: bool,
) -> ClaimResult:
    """
    Credit every remaining trick to ``claimant``. Whether the claim is truly
    unbeatable is for the caller to decide before calling this.
    """
    if not allows_claims:
        return ClaimResult(
            tally,
            Rejection(ErrorKind.INVALID_PLAY, CLAIMS_DISABLED, "Claiming tricks is not allowed in this game"),
        )
    logger.debug("%s claims the remaining %d tricks", claimant, window.tricks_remaining)
    return ClaimResult(tally.add(claimant, window.tricks_remaining))

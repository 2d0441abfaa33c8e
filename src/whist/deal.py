"""
Dealing and kitty/widow exchange for four players.

Cards are dealt one at a time, clockwise, starting with the dealer's left-hand
opponent, so the dealer receives the last card of the deal. Cards left after
the hands are dealt go first to the kitty (Bid Whist) or widow (Widow Whist),
then to the undealt stock (Oh Hell short hands); the top stock card is the
turned-up card.
"""
from __future__ import annotations

import logging
from typing import NamedTuple, Sequence

from .deck import Card
from .errors import (
    CARD_NOT_IN_HAND,
    DUPLICATE_DISCARD,
    WRONG_DISCARD_COUNT,
    ErrorKind,
    Rejection,
)
from .seats import Seat, seats_from

logger = logging.getLogger(__name__)

MAX_CARDS_PER_PLAYER = 13


class Deal(NamedTuple):
    """Result of one deal. Hands are indexed by Seat; all lists are fresh and owned by the caller."""
    hands: tuple[list[Card], list[Card], list[Card], list[Card]]
    kitty: list[Card]
    stock: list[Card]
    dealer: Seat
    last_card_dealt: Card
    turned_card: Card | None

    def all_cards(self) -> list[Card]:
        cards: list[Card] = []
        for h in self.hands:
            cards.extend(h)
        cards.extend(self.kitty)
        cards.extend(self.stock)
        return cards


def deal_hand(
    deck: Sequence[Card],
    dealer: Seat,
    cards_per_player: int = MAX_CARDS_PER_PLAYER,
    kitty_size: int = 0,
) -> Deal:
    """
    Deal ``cards_per_player`` cards to each seat from the top of ``deck``,
    then ``kitty_size`` cards to the kitty; the rest is the stock.
    The deck itself is not modified.
    """
    if not 1 <= cards_per_player <= MAX_CARDS_PER_PLAYER:
        raise ValueError(f"cards_per_player must be 1..13, got {cards_per_player}")
    needed = 4 * cards_per_player + kitty_size
    if kitty_size < 0 or needed > len(deck):
        raise ValueError(f"Cannot deal {needed} cards from a deck of {len(deck)}")
    if len(set(deck)) != len(deck):
        raise ValueError("Deck contains duplicate cards")

    order = seats_from(dealer.next)
    hands: list[list[Card]] = [[], [], [], []]
    for i in range(4 * cards_per_player):
        hands[order[i % 4]].append(deck[i])
    last = deck[4 * cards_per_player - 1]
    kitty = list(deck[4 * cards_per_player:needed])
    stock = list(deck[needed:])
    turned = stock[0] if stock else None

    logger.debug(
        "Dealt %d cards each from %s, kitty=%d, stock=%d, last card %s",
        cards_per_player, dealer, len(kitty), len(stock), last,
    )
    return Deal(
        hands=(hands[0], hands[1], hands[2], hands[3]),
        kitty=kitty,
        stock=stock,
        dealer=dealer,
        last_card_dealt=last,
        turned_card=turned,
    )


def first_to_bid(dealer: Seat) -> Seat:
    """The player on the dealer's left speaks first."""
    return dealer.next


def first_to_play(dealer: Seat) -> Seat:
    """Opening lead when no declarer leads: the player on the dealer's left."""
    return dealer.next


def next_dealer(dealer: Seat) -> Seat:
    """Deal passes clockwise."""
    return dealer.next


def hand_size_schedule(max_cards: int = MAX_CARDS_PER_PLAYER) -> list[int]:
    """Oh Hell hand sizes: down from ``max_cards`` to 1, then back up to ``max_cards``."""
    if not 1 <= max_cards <= MAX_CARDS_PER_PLAYER:
        raise ValueError(f"max_cards must be 1..13, got {max_cards}")
    down = list(range(max_cards, 0, -1))
    return down + list(range(2, max_cards + 1))


class ExchangeResult(NamedTuple):
    """Outcome of a kitty exchange: new hand and discard pile, or a rejection."""
    hand: list[Card] | None
    discards: list[Card] | None
    rejection: Rejection | None

    @property
    def ok(self) -> bool:
        return self.rejection is None


def _reject_exchange(code: str, reason: str) -> ExchangeResult:
    logger.debug("Exchange rejected: %s", reason)
    return ExchangeResult(None, None, Rejection(ErrorKind.INVALID_PLAY, code, reason))


def exchange_kitty(
    hand: Sequence[Card],
    kitty: Sequence[Card],
    discards: Sequence[Card],
) -> ExchangeResult:
    """
    The declarer picks up the kitty and lays away exactly ``len(kitty)`` cards
    of any suit from hand ∪ kitty. Only count and ownership are checked.
    Inputs are not modified.
    """
    if len(discards) != len(kitty):
        return _reject_exchange(
            WRONG_DISCARD_COUNT,
            f"Must discard exactly {len(kitty)} cards (got {len(discards)})",
        )
    if len(set(discards)) != len(discards):
        return _reject_exchange(DUPLICATE_DISCARD, "The same card cannot be discarded twice")
    pool = list(hand) + list(kitty)
    for c in discards:
        if c not in pool:
            return _reject_exchange(CARD_NOT_IN_HAND, f"Card {c} is not in your hand or the kitty")
    laid_away = set(discards)
    remaining = [c for c in pool if c not in laid_away]
    return ExchangeResult(remaining, list(discards), None)

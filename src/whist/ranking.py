"""
Trump-aware card ordering, shared by display sorting and trick resolution.

Rank direction: UPTOWN is the natural order (Ace high, 2 low); DOWNTOWN
reverses it for the whole hand (2 high, Ace low).

Bowers (opt-in): with a trump suit designated, the jack of trump (right bower)
is the highest card in the deck and the jack of the same-colour suit (left
bower) becomes a trump ranked just below it.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .deck import Card, Rank, Suit

RIGHT_BOWER_STRENGTH = 99
LEFT_BOWER_STRENGTH = 98

# Display order of suits in a sorted hand: ♠ ♥ ♦ ♣
DISPLAY_SUIT_ORDER = (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS)


class RankDirection(str, Enum):
    UPTOWN = "uptown"
    DOWNTOWN = "downtown"


@dataclass(frozen=True)
class RankingRules:
    """Trump suit (None = no trump), rank direction and bower flag for one hand."""

    trump: Suit | None = None
    direction: RankDirection = RankDirection.UPTOWN
    bowers: bool = False

    def _bowers_active(self) -> bool:
        return self.bowers and self.trump is not None

    def is_right_bower(self, card: Card) -> bool:
        return self._bowers_active() and card.rank == Rank.JACK and card.suit == self.trump

    def is_left_bower(self, card: Card) -> bool:
        return (
            self._bowers_active()
            and card.rank == Rank.JACK
            and card.suit == self.trump.same_color_suit
        )

    def effective_suit(self, card: Card) -> Suit:
        """Suit the card belongs to for following and winning (left bower counts as trump)."""
        if self.is_left_bower(card):
            return self.trump
        return card.suit

    def is_trump(self, card: Card) -> bool:
        return self.trump is not None and self.effective_suit(card) == self.trump

    def strength(self, card: Card) -> int:
        """Rank strength within the card's effective suit; larger is better."""
        if self.is_right_bower(card):
            return RIGHT_BOWER_STRENGTH
        if self.is_left_bower(card):
            return LEFT_BOWER_STRENGTH
        if self.direction == RankDirection.DOWNTOWN:
            return Rank.ACE + Rank.TWO - card.rank
        return int(card.rank)

    def trick_power(self, card: Card, led_suit: Suit) -> tuple[int, int]:
        """
        (class, strength) of a card inside a trick led in ``led_suit``.
        Trump is class 2, led suit class 1, anything else class 0 (cannot win).
        """
        suit = self.effective_suit(card)
        if self.trump is not None and suit == self.trump:
            return (2, self.strength(card))
        if suit == led_suit:
            return (1, self.strength(card))
        return (0, 0)

    def compare(self, a: Card, b: Card, led_suit: Suit | None = None) -> int:
        """
        -1, 0 or 1 as ``a`` ranks below, equal to, or above ``b``.

        With ``led_suit`` the comparison is the trick comparison (trump beats
        the led suit, off-suit cards never beat anything). Without it, trump
        outranks everything and other suits follow display order.
        """
        if led_suit is not None:
            ka, kb = self.trick_power(a, led_suit), self.trick_power(b, led_suit)
        else:
            ka, kb = self._display_key(a), self._display_key(b)
        return (ka > kb) - (ka < kb)

    def _display_key(self, card: Card) -> tuple[int, int]:
        if self.is_trump(card):
            return (len(DISPLAY_SUIT_ORDER), self.strength(card))
        return (len(DISPLAY_SUIT_ORDER) - 1 - DISPLAY_SUIT_ORDER.index(card.suit), self.strength(card))

    def sort_hand(self, cards: Iterable[Card]) -> list[Card]:
        """Trump first (bowers on top), then ♠ ♥ ♦ ♣, strongest first within each suit."""
        return sorted(cards, key=self._display_key, reverse=True)


NATURAL = RankingRules()


def compare(
    a: Card,
    b: Card,
    trump: Suit | None = None,
    direction: RankDirection = RankDirection.UPTOWN,
    led_suit: Suit | None = None,
    bowers: bool = False,
) -> int:
    """Free-function form of ``RankingRules.compare``."""
    return RankingRules(trump=trump, direction=direction, bowers=bowers).compare(a, b, led_suit)


def sort_hand(cards: Iterable[Card], rules: RankingRules = NATURAL) -> list[Card]:
    return rules.sort_hand(cards)

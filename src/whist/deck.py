"""
Standard 52-card deck: 4 suits × 13 ranks (2 .. Ace).
Cards are immutable values; hands are plain lists owned by one seat at a time.
Serialized form is "rankIndex|suitIndex" (rank 2 = index 0, Ace = index 12).
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum

from .errors import INVALID_FORMAT, OUT_OF_RANGE, MalformedCardError


class Suit(IntEnum):
    """Values are the serialization indices."""
    HEARTS = 0
    DIAMONDS = 1
    CLUBS = 2
    SPADES = 3

    @property
    def is_red(self) -> bool:
        return self in (Suit.HEARTS, Suit.DIAMONDS)

    @property
    def color(self) -> str:
        return "red" if self.is_red else "black"

    @property
    def same_color_suit(self) -> "Suit":
        """The other suit of the same colour (home of the left bower)."""
        return {
            Suit.HEARTS: Suit.DIAMONDS,
            Suit.DIAMONDS: Suit.HEARTS,
            Suit.CLUBS: Suit.SPADES,
            Suit.SPADES: Suit.CLUBS,
        }[self]

    @property
    def symbol(self) -> str:
        return "♥♦♣♠"[self]


class Rank(IntEnum):
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def symbol(self) -> str:
        return {11: "J", 12: "Q", 13: "K", 14: "A"}.get(self.value) or str(self.value)


@dataclass(frozen=True, order=True)
class Card:
    """A single playing card. Ordering is by rank, then suit index."""

    rank: Rank
    suit: Suit

    @property
    def is_red(self) -> bool:
        return self.suit.is_red

    @property
    def color(self) -> str:
        return self.suit.color

    def __str__(self) -> str:
        return f"{self.rank.symbol}{self.suit.symbol}"

    def __repr__(self) -> str:
        return str(self)


def make_deck_52() -> list[Card]:
    """Build a full 52-card deck in suit-then-rank order (unshuffled)."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


def build_deck(seed: int | None = None, rng: random.Random | None = None) -> list[Card]:
    """
    A freshly shuffled 52-card deck. ``rng`` wins over ``seed`` when both are
    given; a seed makes the shuffle reproducible.
    """
    if rng is None:
        rng = random.Random(seed)
    deck = make_deck_52()
    rng.shuffle(deck)
    return deck


def parse_card(text: str) -> Card:
    """Parse a human token such as "10H", "QS" or "A♦"."""
    t = text.strip().upper()
    if len(t) < 2:
        raise MalformedCardError(INVALID_FORMAT, f"Not a card: {text!r}")
    rank_part, suit_part = t[:-1], t[-1]
    suits = {"H": Suit.HEARTS, "D": Suit.DIAMONDS, "C": Suit.CLUBS, "S": Suit.SPADES}
    suits.update({s.symbol: s for s in Suit})
    ranks = {r.symbol: r for r in Rank}
    if suit_part not in suits or rank_part not in ranks:
        raise MalformedCardError(INVALID_FORMAT, f"Not a card: {text!r}")
    return Card(ranks[rank_part], suits[suit_part])


def encode_card(card: Card) -> str:
    return f"{card.rank - Rank.TWO}|{int(card.suit)}"


def decode_card(raw: str) -> Card:
    """
    Inverse of ``encode_card``.

    Raises MalformedCardError with code "invalid_format" when the text is not
    two integers separated by "|", and "out_of_range" when an index is outside
    the rank or suit domain.
    """
    if not isinstance(raw, str):
        raise MalformedCardError(INVALID_FORMAT, f"Card encoding must be a string, got {raw!r}")
    parts = raw.split("|")
    if len(parts) != 2:
        raise MalformedCardError(INVALID_FORMAT, f"Invalid card encoding: {raw!r}")
    try:
        rank_index = int(parts[0])
        suit_index = int(parts[1])
    except ValueError:
        raise MalformedCardError(INVALID_FORMAT, f"Invalid card encoding: {raw!r}") from None
    if not 0 <= rank_index < len(Rank):
        raise MalformedCardError(OUT_OF_RANGE, f"Rank index {rank_index} out of range")
    if not 0 <= suit_index < len(Suit):
        raise MalformedCardError(OUT_OF_RANGE, f"Suit index {suit_index} out of range")
    return Card(Rank(rank_index + Rank.TWO), Suit(suit_index))


def encode_cards(cards: list[Card]) -> list[str]:
    return [encode_card(c) for c in cards]


def decode_cards(raw: list[str]) -> list[Card]:
    return [decode_card(r) for r in raw]

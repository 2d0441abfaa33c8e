"""
Trump selection policies.

- NONE: never a trump suit (Minnesota Whist).
- LAST_CARD: suit of the last card dealt, which the dealer receives (Classic Whist).
- BID_WINNER: the auction winner names a suit or no-trump after seeing the
  kitty/widow (Bid Whist, Widow Whist). The choice is player input recorded in
  the state, never computed here.
- TURNED_CARD: suit of the card turned up after the deal (Oh Hell); no trump
  when the whole deck was dealt.

``determine_trump`` only reads its input.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .deck import Card, Suit
from .errors import MissingParameterError

logger = logging.getLogger(__name__)


class TrumpSelectionMethod(str, Enum):
    NONE = "none"
    LAST_CARD = "last_card"
    BID_WINNER = "bid_winner"
    TURNED_CARD = "turned_card"


@dataclass(frozen=True)
class TrumpState:
    """The parts of a hand that trump selection may look at."""

    last_card_dealt: Card | None = None
    turned_card: Card | None = None
    declared_suit: Suit | None = None
    declared_no_trump: bool = False


def determine_trump(method: TrumpSelectionMethod, state: TrumpState) -> Suit | None:
    """Trump suit for the hand, or None for no trump."""
    if method == TrumpSelectionMethod.NONE:
        return None
    if method == TrumpSelectionMethod.LAST_CARD:
        if state.last_card_dealt is None:
            raise MissingParameterError("last_card_dealt is required to determine trump")
        trump = state.last_card_dealt.suit
    elif method == TrumpSelectionMethod.BID_WINNER:
        if state.declared_no_trump:
            trump = None
        elif state.declared_suit is None:
            raise MissingParameterError("The bid winner has not declared trump")
        else:
            trump = state.declared_suit
    elif method == TrumpSelectionMethod.TURNED_CARD:
        trump = state.turned_card.suit if state.turned_card is not None else None
    else:
        raise ValueError(f"Unknown trump selection method: {method}")
    logger.debug("Trump (%s): %s", method.value, trump.name if trump is not None else "none")
    return trump

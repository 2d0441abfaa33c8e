"""
Variant registry: stable tokens, table metadata, and the per-hand rules bundle.

Adding a variant means adding a VariantId, a VARIANTS entry, and its bidding /
scoring functions in ``_ENGINES``. Unknown tokens raise
UnsupportedVariantError; there is no default variant.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .bidding import BiddingEngine, bid_whist_engine, minnesota_engine, oh_hell_engine, widow_engine
from .bids import Contract, ContractKind
from .config import ALL_RED_LOW, RuleOptions
from .deal import first_to_play
from .deck import Suit
from .errors import UnsupportedVariantError
from .ranking import RankingRules
from .scoring import (
    BID_WHIST_SCORING,
    CLASSIC_SCORING,
    MINNESOTA_SCORING,
    OH_HELL_SCORING,
    WIDOW_SCORING,
    ScoringEngine,
)
from .seats import Seat
from .trump import TrumpSelectionMethod, TrumpState, determine_trump

logger = logging.getLogger(__name__)


class VariantId(str, Enum):
    """Values are the persisted tokens and must never change."""
    MINNESOTA_WHIST = "minnesota_whist"
    CLASSIC_WHIST = "classic_whist"
    BID_WHIST = "bid_whist"
    OH_HELL = "oh_hell"
    WIDOW_WHIST = "widow_whist"


@dataclass(frozen=True)
class VariantSpec:
    """Constant table facts for one variant."""

    id: VariantId
    name: str
    short_description: str
    uses_bidding: bool
    trump_selection: TrumpSelectionMethod
    winning_score: int
    tricks_per_hand: int
    special_card_count: int = 0
    special_cards_label: str | None = None
    allows_claiming_tricks: bool = False
    solo_declarer: bool = False
    quick_reference: str = ""

    @property
    def has_special_cards(self) -> bool:
        return self.special_card_count > 0

    @property
    def cards_per_player(self) -> int:
        return self.tricks_per_hand


VARIANTS: dict[VariantId, VariantSpec] = {
    VariantId.MINNESOTA_WHIST: VariantSpec(
        id=VariantId.MINNESOTA_WHIST,
        name="Minnesota Whist",
        short_description="Bid High or Low with a card. No trump.",
        uses_bidding=True,
        trump_selection=TrumpSelectionMethod.NONE,
        winning_score=13,
        tricks_per_hand=13,
        quick_reference=(
            "Each player lays a card face down: black = High, red = Low. "
            "Reveal from dealer's left; first black card grands. "
            "High: 7+ tricks scores 1 per trick over 6, else opponents score 2 per trick over 6. "
            "All red: side with more tricks loses 1 per trick over 6. Game to 13."
        ),
    ),
    VariantId.CLASSIC_WHIST: VariantSpec(
        id=VariantId.CLASSIC_WHIST,
        name="Classic Whist",
        short_description="Traditional whist. Last card dealt sets trump.",
        uses_bidding=False,
        trump_selection=TrumpSelectionMethod.LAST_CARD,
        winning_score=7,
        tricks_per_hand=13,
        quick_reference=(
            "No bidding. The dealer's last card sets trump. "
            "Each side scores 1 point per trick over 6. Game to 7."
        ),
    ),
    VariantId.BID_WHIST: VariantSpec(
        id=VariantId.BID_WHIST,
        name="Bid Whist",
        short_description="Bid for the kitty. Uptown, Downtown or No Trump.",
        uses_bidding=True,
        trump_selection=TrumpSelectionMethod.BID_WINNER,
        winning_score=7,
        tricks_per_hand=12,
        special_card_count=4,
        special_cards_label="Kitty",
        quick_reference=(
            "Bid 3-6 books over 6, Uptown or Downtown, optionally No Trump. "
            "Winner takes the kitty and names trump. Made = +bid (x2 for all 12, +1 No Trump); "
            "set = -bid. Game at +7 or -7."
        ),
    ),
    VariantId.OH_HELL: VariantSpec(
        id=VariantId.OH_HELL,
        name="Oh Hell",
        short_description="Bid exactly how many tricks you will take.",
        uses_bidding=True,
        trump_selection=TrumpSelectionMethod.TURNED_CARD,
        winning_score=100,
        tricks_per_hand=13,
        quick_reference=(
            "Bid 0 to hand size. Dealer may not make the bids total the tricks available. "
            "Exact bid scores 10 + bid, anything else 0. Game to 100."
        ),
    ),
    VariantId.WIDOW_WHIST: VariantSpec(
        id=VariantId.WIDOW_WHIST,
        name="Widow Whist",
        short_description="Bid for widow rights. Exchange and play solo.",
        uses_bidding=True,
        trump_selection=TrumpSelectionMethod.BID_WINNER,
        winning_score=50,
        tricks_per_hand=12,
        special_card_count=4,
        special_cards_label="Widow",
        solo_declarer=True,
        quick_reference=(
            "Simultaneous bids of 6-12 tricks; ties re-bid. High bidder takes the widow, "
            "discards 4, names trump and plays alone. Made = tricks - 6, set = -2 per trick short. "
            "Game to 50."
        ),
    ),
}


_SCORING: dict[VariantId, ScoringEngine] = {
    VariantId.MINNESOTA_WHIST: MINNESOTA_SCORING,
    VariantId.CLASSIC_WHIST: CLASSIC_SCORING,
    VariantId.BID_WHIST: BID_WHIST_SCORING,
    VariantId.OH_HELL: OH_HELL_SCORING,
    VariantId.WIDOW_WHIST: WIDOW_SCORING,
}


def variant_from_token(token: str | VariantId) -> VariantId:
    """Parse a persisted token. Unknown tokens raise UnsupportedVariantError."""
    if isinstance(token, VariantId):
        return token
    key = str(token).strip().lower()
    try:
        return VariantId(key)
    except ValueError:
        raise UnsupportedVariantError(str(token)) from None


def variant_token(variant: VariantId) -> str:
    return variant.value


def get_spec(variant: str | VariantId) -> VariantSpec:
    return VARIANTS[variant_from_token(variant)]


def tricks_per_hand(variant: str | VariantId, options: RuleOptions | None = None) -> int:
    spec = get_spec(variant)
    if spec.id == VariantId.OH_HELL and options is not None and options.oh_hell_hand_size:
        return options.oh_hell_hand_size
    return spec.tricks_per_hand


def winning_score(variant: str | VariantId, options: RuleOptions | None = None) -> int:
    if options is not None and options.winning_score is not None:
        return options.winning_score
    return get_spec(variant).winning_score


def uses_bidding(variant: str | VariantId) -> bool:
    return get_spec(variant).uses_bidding


def has_special_cards(variant: str | VariantId) -> bool:
    return get_spec(variant).has_special_cards


def special_card_count(variant: str | VariantId) -> int:
    return get_spec(variant).special_card_count


def trump_selection_method(variant: str | VariantId) -> TrumpSelectionMethod:
    return get_spec(variant).trump_selection


def _make_bidding(spec: VariantSpec, options: RuleOptions) -> BiddingEngine | None:
    factories: dict[VariantId, Callable[[], BiddingEngine]] = {
        VariantId.MINNESOTA_WHIST: lambda: minnesota_engine(all_red_as_low=options.all_red_scoring == ALL_RED_LOW),
        VariantId.BID_WHIST: bid_whist_engine,
        VariantId.OH_HELL: lambda: oh_hell_engine(tricks_per_hand(spec.id, options)),
        VariantId.WIDOW_WHIST: widow_engine,
    }
    factory = factories.get(spec.id)
    return factory() if factory is not None else None


@dataclass(frozen=True)
class VariantRules:
    """Everything a driver needs for one hand of one variant."""

    spec: VariantSpec
    options: RuleOptions
    bidding: BiddingEngine | None
    scoring: ScoringEngine

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def target(self) -> int:
        return winning_score(self.spec.id, self.options)

    @property
    def tricks_per_hand(self) -> int:
        return tricks_per_hand(self.spec.id, self.options)

    @property
    def cards_per_player(self) -> int:
        return self.tricks_per_hand

    @property
    def kitty_size(self) -> int:
        return self.spec.special_card_count

    @property
    def allows_claims(self) -> bool:
        if self.options.allow_claims is not None:
            return self.options.allow_claims
        return self.spec.allows_claiming_tricks

    def default_contract(self) -> Contract | None:
        """Contract for variants without an auction."""
        if self.bidding is None:
            return Contract(kind=ContractKind.BOOK, tricks_available=self.tricks_per_hand)
        return None

    def determine_trump(self, state: TrumpState) -> Suit | None:
        return determine_trump(self.spec.trump_selection, state)

    def ranking(self, trump: Suit | None, contract: Contract | None = None) -> RankingRules:
        direction = contract.direction if contract is not None else RankingRules().direction
        return RankingRules(trump=trump, direction=direction, bowers=self.options.bowers)

    def opening_leader(self, contract: Contract | None, dealer: Seat) -> Seat:
        """The declarer leads when there is one; otherwise the dealer's left."""
        if contract is not None and contract.declarer is not None:
            return contract.declarer
        return first_to_play(dealer)


def get_rules(variant: str | VariantId, options: RuleOptions | None = None) -> VariantRules:
    """Resolve the rules bundle for a variant token. Call once per hand."""
    spec = get_spec(variant)
    opts = options if options is not None else RuleOptions()
    rules = VariantRules(spec=spec, options=opts, bidding=_make_bidding(spec, opts), scoring=_SCORING[spec.id])
    logger.debug("Rules for %s: target=%d, tricks=%d", spec.name, rules.target, rules.tricks_per_hand)
    return rules


def with_options(rules: VariantRules, **changes) -> VariantRules:
    """Same variant, different options (e.g. the next Oh Hell hand size)."""
    return get_rules(rules.spec.id, dataclasses.replace(rules.options, **changes))

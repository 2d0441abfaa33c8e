"""Tests for the variant registry, trump policies and rule options."""
import pytest

from whist.bids import CardBid, ContractKind
from whist.config import RuleOptions
from whist.deck import Card, Rank, Suit
from whist.errors import ErrorKind, MissingParameterError, UnsupportedVariantError
from whist.ranking import RankDirection
from whist.seats import Seat
from whist.trump import TrumpSelectionMethod, TrumpState, determine_trump
from whist.variants import (
    VARIANTS,
    VariantId,
    get_rules,
    has_special_cards,
    special_card_count,
    tricks_per_hand,
    trump_selection_method,
    uses_bidding,
    variant_from_token,
    variant_token,
    winning_score,
    with_options,
)

TOKENS = ["minnesota_whist", "classic_whist", "bid_whist", "oh_hell", "widow_whist"]


def test_tokens_round_trip():
    assert [variant_token(v) for v in VariantId] == TOKENS
    for token in TOKENS:
        assert variant_token(variant_from_token(token)) == token
    assert variant_from_token("Bid_Whist") == VariantId.BID_WHIST


@pytest.mark.parametrize("token", ["", "bridge", "minnesota"])
def test_unknown_token(token):
    with pytest.raises(UnsupportedVariantError) as info:
        variant_from_token(token)
    assert info.value.token == token
    assert info.value.rejection.kind == ErrorKind.UNSUPPORTED_VARIANT
    with pytest.raises(ValueError):
        get_rules(token)


def test_every_variant_registered():
    assert set(VARIANTS) == set(VariantId)
    for variant, spec in VARIANTS.items():
        assert spec.id == variant
        assert spec.quick_reference


def test_metadata():
    assert winning_score("minnesota_whist") == 13
    assert winning_score("classic_whist") == 7
    assert winning_score("bid_whist") == 7
    assert winning_score("oh_hell") == 100
    assert winning_score("widow_whist") == 50
    assert tricks_per_hand("bid_whist") == 12
    assert tricks_per_hand("minnesota_whist") == 13
    assert not uses_bidding("classic_whist")
    assert uses_bidding("oh_hell")
    assert has_special_cards("bid_whist") and special_card_count("widow_whist") == 4
    assert not has_special_cards("oh_hell")
    assert VARIANTS[VariantId.WIDOW_WHIST].special_cards_label == "Widow"
    assert VARIANTS[VariantId.WIDOW_WHIST].solo_declarer


def test_trump_policies():
    assert trump_selection_method("minnesota_whist") == TrumpSelectionMethod.NONE
    assert trump_selection_method("classic_whist") == TrumpSelectionMethod.LAST_CARD
    assert trump_selection_method("bid_whist") == TrumpSelectionMethod.BID_WINNER
    assert trump_selection_method("widow_whist") == TrumpSelectionMethod.BID_WINNER
    assert trump_selection_method("oh_hell") == TrumpSelectionMethod.TURNED_CARD


def test_determine_trump():
    card = Card(Rank.FIVE, Suit.CLUBS)
    assert determine_trump(TrumpSelectionMethod.NONE, TrumpState(last_card_dealt=card)) is None
    assert determine_trump(TrumpSelectionMethod.LAST_CARD, TrumpState(last_card_dealt=card)) == Suit.CLUBS
    assert determine_trump(TrumpSelectionMethod.TURNED_CARD, TrumpState(turned_card=card)) == Suit.CLUBS
    assert determine_trump(TrumpSelectionMethod.TURNED_CARD, TrumpState()) is None
    assert determine_trump(TrumpSelectionMethod.BID_WINNER, TrumpState(declared_suit=Suit.SPADES)) == Suit.SPADES
    assert determine_trump(TrumpSelectionMethod.BID_WINNER, TrumpState(declared_no_trump=True)) is None


def test_determine_trump_missing_input():
    with pytest.raises(MissingParameterError):
        determine_trump(TrumpSelectionMethod.LAST_CARD, TrumpState())
    with pytest.raises(MissingParameterError):
        determine_trump(TrumpSelectionMethod.BID_WINNER, TrumpState())


def test_rules_bundle():
    classic = get_rules("classic_whist")
    assert classic.bidding is None
    assert classic.default_contract().kind == ContractKind.BOOK
    assert classic.opening_leader(None, Seat.WEST) == Seat.NORTH
    assert classic.determine_trump(TrumpState(last_card_dealt=Card(Rank.ACE, Suit.DIAMONDS))) == Suit.DIAMONDS
    assert classic.ranking(Suit.DIAMONDS).trump == Suit.DIAMONDS

    bid = get_rules(VariantId.BID_WHIST)
    assert bid.bidding.name == "Bid Whist"
    assert bid.kitty_size == 4 and bid.cards_per_player == 12
    assert bid.default_contract() is None
    assert not bid.allows_claims


def test_options_override():
    opts = RuleOptions(winning_score=21, bowers=True, allow_claims=True, oh_hell_hand_size=5)
    oh = get_rules("oh_hell", opts)
    assert oh.target == 21
    assert oh.tricks_per_hand == 5
    assert oh.allows_claims
    ranking = oh.ranking(Suit.HEARTS)
    assert ranking.bowers and ranking.direction == RankDirection.UPTOWN
    assert with_options(oh, oh_hell_hand_size=3).tricks_per_hand == 3
    # Hand size only affects Oh Hell
    assert tricks_per_hand("minnesota_whist", opts) == 13


def test_all_red_low_option_reaches_bidding():
    rules = get_rules("minnesota_whist", RuleOptions(all_red_scoring="low"))
    history = ()
    for seat in Seat:
        history = rules.bidding.submit(CardBid(Card(Rank.TWO, Suit.HEARTS)), seat, history, Seat.NORTH).history
    assert rules.bidding.resolve(history, Seat.NORTH).contract.kind == ContractKind.LOW


@pytest.mark.parametrize(
    "kwargs",
    [
        {"winning_score": 0},
        {"oh_hell_hand_size": 14},
        {"all_red_scoring": "sideways"},
        {"max_redeals": -1},
    ],
)
def test_rule_options_validation(kwargs):
    with pytest.raises(ValueError):
        RuleOptions(**kwargs)


def test_rule_options_dict():
    opts = RuleOptions(winning_score=10, bowers=True)
    assert RuleOptions.from_dict(opts.to_dict()) == opts
    with pytest.raises(ValueError):
        RuleOptions.from_dict({"trumps": "always"})

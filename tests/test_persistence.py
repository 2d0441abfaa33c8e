"""Tests for hand snapshot save/load."""
import json
import random

import pytest

from whist.agents import RandomAgent
from whist.bids import PASS, CardBid, ExactBid, LevelBid
from whist.config import RuleOptions
from whist.deal import deal_hand
from whist.deck import Card, Rank, Suit, build_deck
from whist.errors import MalformedCardError, MalformedDataError, UnsupportedVariantError
from whist.game import HandState
from whist.persistence import (
    SCHEMA_VERSION,
    bid_from_dict,
    bid_to_dict,
    hand_from_dict,
    hand_from_json,
    hand_to_dict,
    hand_to_json,
)
from whist.ranking import RankDirection
from whist.seats import Seat
from whist.variants import get_rules


def _mid_hand(variant, tricks=3, seed=6):
    """Deal, bid and play a few tricks with RandomAgent; return the state."""
    rules = get_rules(variant, RuleOptions(bowers=True))
    agent = RandomAgent(seed=seed, pass_rate=0.0)
    state = HandState(rules, deal_hand(build_deck(rng=random.Random(seed)), Seat.EAST,
                                       rules.cards_per_player, rules.kitty_size))
    if rules.bidding is not None:
        state.run_auction(agent.bid)
    state.exchange(agent.exchange)
    state.choose_trump(agent.declare_trump)
    state.start_play()
    # a few complete tricks plus one card of the next
    for _ in range(tricks * 4 + 1):
        seat = state.current_player()
        state.play(seat, agent.play(state, seat))
    return state


@pytest.mark.parametrize("variant", ["minnesota_whist", "classic_whist", "bid_whist", "widow_whist"])
def test_round_trip_mid_hand(variant):
    state = _mid_hand(variant)
    restored, scores = hand_from_json(hand_to_json(state, (4, -2)))
    assert scores == (4, -2)
    assert restored.rules.spec.id == state.rules.spec.id
    assert restored.rules.options == state.rules.options
    assert restored.dealer == state.dealer
    assert restored.hands == state.hands
    assert restored.discards == state.discards
    assert restored.history == state.history
    assert restored.contract == state.contract
    assert restored.trump == state.trump
    assert restored.completed == state.completed
    assert restored.trick == state.trick
    assert restored.tally == state.tally
    assert restored.current_player() == state.current_player()
    assert sorted(restored.all_cards()) == sorted(state.all_cards())


def test_dict_is_json_compatible():
    d = hand_to_dict(_mid_hand("classic_whist", tricks=1))
    assert d["schema_version"] == SCHEMA_VERSION
    assert d["variant"] == "classic_whist"
    assert all("|" in c for c in d["hands"][0])
    json.dumps(d)


@pytest.mark.parametrize(
    "bid",
    [
        CardBid(Card(Rank.QUEEN, Suit.CLUBS)),
        LevelBid(5, RankDirection.DOWNTOWN, no_trump=True),
        ExactBid(0),
        PASS,
    ],
)
def test_bid_dicts(bid):
    assert bid_from_dict(bid_to_dict(bid)) == bid


def test_unknown_bid_type():
    with pytest.raises(MalformedDataError):
        bid_from_dict({"type": "double"})


def test_unknown_variant_token():
    d = hand_to_dict(_mid_hand("classic_whist", tricks=1))
    d["variant"] = "contract_bridge"
    with pytest.raises(UnsupportedVariantError):
        hand_from_dict(d)


def test_corrupt_card():
    d = hand_to_dict(_mid_hand("classic_whist", tricks=1))
    d["hands"][0][0] = "99|1"
    with pytest.raises(MalformedCardError) as info:
        hand_from_dict(d)
    assert info.value.code == "out_of_range"


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d.pop("dealer"),
        lambda d: d.update(dealer="NOBODY"),
        lambda d: d.update(schema_version=99),
        lambda d: d.update(hands=d["hands"][:3]),
        lambda d: d.update(options={"colour": "red"}),
        lambda d: d.update(last_card_dealt=None),
        lambda d: d.update(last_card_dealt=5),
        lambda d: d.update(history=[{"seat": "NORTH", "bid": "pass"}]),
    ],
)
def test_malformed_structure(mutate):
    d = hand_to_dict(_mid_hand("classic_whist", tricks=1))
    mutate(d)
    with pytest.raises(MalformedDataError):
        hand_from_dict(d)


def test_invalid_json():
    with pytest.raises(MalformedDataError):
        hand_from_json("{not json")
    with pytest.raises(MalformedDataError):
        hand_from_json("[1, 2]")


def test_duplicated_card_rejected():
    d = hand_to_dict(_mid_hand("classic_whist", tricks=1))
    d["hands"][1][0] = d["hands"][0][0]
    with pytest.raises(MalformedDataError):
        hand_from_json(json.dumps(d))

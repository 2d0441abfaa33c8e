"""End-to-end hands and matches driven by RandomAgent."""
import random

import pytest

from whist.agents import RandomAgent, candidate_bids
from whist.bids import PASS, ContractKind
from whist.config import RuleOptions
from whist.deal import deal_hand
from whist.deck import build_deck, make_deck_52
from whist.game import HandState, play_one_hand, run_match
from whist.seats import Seat
from whist.variants import VariantId, get_rules

ALL_VARIANTS = list(VariantId)


@pytest.mark.parametrize("variant", ALL_VARIANTS)
def test_random_hands_conserve_cards(variant):
    rules = get_rules(variant)
    agent = RandomAgent(seed=3)
    rng = random.Random(3)
    for i in range(15):
        outcome = play_one_hand(
            rules,
            Seat(i % 4),
            agent.bid,
            agent.play,
            agent.exchange,
            agent.declare_trump,
            rng=rng,
        )
        state = outcome.state
        cards = state.all_cards()
        assert len(cards) == 52
        assert sorted(cards) == sorted(make_deck_52())
        if state.contract is None:
            # Abandoned after too many redeals: nothing was played.
            assert outcome.score.ns == outcome.score.ew == 0
            continue
        assert state.is_over
        assert len(state.completed) == rules.tricks_per_hand
        assert state.tally.total == rules.tricks_per_hand
        assert all(not h for h in state.hands)


def test_classic_trump_is_last_card_dealt():
    rules = get_rules("classic_whist")
    agent = RandomAgent(seed=1)
    deck = build_deck(seed=21)
    outcome = play_one_hand(rules, Seat.EAST, None, agent.play, deck=deck)
    assert outcome.state.trump == deck[51].suit
    assert outcome.state.contract.kind == ContractKind.BOOK
    assert outcome.state.completed[0].leader == Seat.SOUTH


def test_declarer_leads_and_gets_kitty():
    rules = get_rules("bid_whist")
    agent = RandomAgent(seed=8, pass_rate=0.0)
    outcome = play_one_hand(rules, Seat.NORTH, agent.bid, agent.play, agent.exchange, agent.declare_trump,
                            rng=random.Random(8))
    state = outcome.state
    assert state.contract.kind == ContractKind.LEVEL
    assert state.completed[0].leader == state.contract.declarer
    assert len(state.discards) == 4
    assert state.kitty == []


def test_oh_hell_short_hand_turns_trump():
    rules = get_rules("oh_hell", RuleOptions(oh_hell_hand_size=3))
    agent = RandomAgent(seed=4)
    outcome = play_one_hand(rules, Seat.WEST, agent.bid, agent.play, rng=random.Random(4))
    state = outcome.state
    assert state.turned_card is not None
    assert state.trump == state.turned_card.suit
    assert len(state.completed) == 3
    bids = [b for _, b in state.contract.seat_bids]
    assert sum(bids) != 3


def test_all_pass_redeal_is_capped():
    rules = get_rules("bid_whist", RuleOptions(max_redeals=2))

    def always_pass(state, seat):
        return PASS

    outcome = play_one_hand(rules, Seat.SOUTH, always_pass, RandomAgent().play, rng=random.Random(0))
    assert outcome.redeals == 2
    assert (outcome.score.ns, outcome.score.ew) == (0, 0)
    assert "No contract" in outcome.score.description
    assert outcome.state.dealer == Seat.SOUTH


def test_illegal_callback_raises():
    rules = get_rules("classic_whist")
    state = HandState(rules, deal_hand(build_deck(seed=2), Seat.NORTH))
    state.choose_trump(None)
    state.start_play()
    seat = state.current_player()
    wrong_seat_card = state.hands[seat.next][0]
    with pytest.raises(ValueError):
        state.play(seat, wrong_seat_card)


def test_candidate_bids_cover_variant_shapes():
    state = HandState(get_rules("oh_hell", RuleOptions(oh_hell_hand_size=4)),
                      deal_hand(build_deck(seed=5), Seat.NORTH, cards_per_player=4))
    assert len(candidate_bids(state, Seat.EAST)) == 5
    state = HandState(get_rules("bid_whist"), deal_hand(build_deck(seed=5), Seat.NORTH, 12, 4))
    assert len(candidate_bids(state, Seat.EAST)) == 16


@pytest.mark.parametrize("variant", ALL_VARIANTS)
def test_run_match_terminates(variant):
    agent = RandomAgent(seed=11)
    result = run_match(
        variant,
        agent.bid,
        agent.play,
        agent.exchange,
        agent.declare_trump,
        max_hands=300,
        rng=random.Random(11),
    )
    assert result.hands
    assert result.ns == sum(h.ns for h in result.hands)
    assert result.ew == sum(h.ew for h in result.hands)
    if result.outcome is not None:
        assert "Final score" in result.message


def test_run_match_oh_hell_schedule():
    agent = RandomAgent(seed=2)
    result = run_match(
        "oh_hell",
        agent.bid,
        agent.play,
        max_hands=3,
        rng=random.Random(2),
        oh_hell_schedule=True,
    )
    assert len(result.hands) == 3
    assert result.outcome is None
    assert result.message.startswith("No winner after 3 hands")

"""Tests for the per-variant bidding engines."""
from whist.bidding import bid_whist_engine, minnesota_engine, oh_hell_engine, widow_engine, widow_round
from whist.bids import (
    PASS,
    AuctionStatus,
    CardBid,
    ContractKind,
    ExactBid,
    LevelBid,
)
from whist.deck import Card, Rank, Suit
from whist.errors import ErrorKind
from whist.ranking import RankDirection
from whist.seats import Seat

N, E, S, W = Seat.NORTH, Seat.EAST, Seat.SOUTH, Seat.WEST

RED = CardBid(Card(Rank.TWO, Suit.HEARTS))
RED2 = CardBid(Card(Rank.THREE, Suit.DIAMONDS))
BLACK = CardBid(Card(Rank.FOUR, Suit.SPADES))
BLACK2 = CardBid(Card(Rank.FIVE, Suit.CLUBS))


def _run(engine, dealer, bids):
    """Submit (seat, bid) pairs in order; every one must be accepted."""
    history = ()
    for seat, bid in bids:
        result = engine.submit(bid, seat, history, dealer)
        assert result.accepted, result.validation.reason
        history = result.history
    return history


# --- Minnesota Whist -------------------------------------------------------


def test_minnesota_first_black_from_dealers_left_grands():
    engine = minnesota_engine()
    # Dealer North: reveal order E, S, W, N. East red, South black, West black.
    history = _run(engine, N, [(W, BLACK2), (N, RED2), (E, RED), (S, BLACK)])
    assert engine.is_complete(history, N)
    result = engine.resolve(history, N)
    assert result.status == AuctionStatus.WON
    assert result.winner == S
    assert result.contract.kind == ContractKind.HIGH
    assert result.contract.declarer == S
    assert [e.seat for e in result.contract.revealed] == [E, S]


def test_minnesota_all_red():
    engine = minnesota_engine()
    history = _run(engine, E, [(N, RED), (E, RED2), (S, CardBid(Card(Rank.ACE, Suit.HEARTS))), (W, CardBid(Card(Rank.ACE, Suit.DIAMONDS)))])
    result = engine.resolve(history, E)
    assert result.status == AuctionStatus.WON
    assert result.contract.kind == ContractKind.ALL_RED
    assert result.contract.declarer is None
    assert result.winner == S  # first revealed, nominal only


def test_minnesota_all_red_as_low_option():
    engine = minnesota_engine(all_red_as_low=True)
    history = _run(engine, N, [(s, RED) for s in Seat])
    assert engine.resolve(history, N).contract.kind == ContractKind.LOW


def test_minnesota_rejects_double_bid_and_wrong_shape():
    engine = minnesota_engine()
    history = _run(engine, N, [(E, RED)])
    v = engine.validate_bid(BLACK, E, history, N)
    assert not v.valid
    assert v.rejection.code == "duplicate_bid"
    assert v.rejection.kind == ErrorKind.INVALID_BID
    assert engine.validate_bid(ExactBid(3), S, history, N).rejection.code == "wrong_bid_shape"


def test_minnesota_incomplete():
    engine = minnesota_engine()
    history = _run(engine, N, [(E, RED), (W, BLACK)])
    result = engine.resolve(history, N)
    assert result.status == AuctionStatus.INCOMPLETE
    assert not result.is_terminal
    assert engine.next_bidder(history, N) == S


def test_rejected_bid_leaves_history_unchanged():
    engine = minnesota_engine()
    history = _run(engine, N, [(E, RED)])
    result = engine.submit(BLACK, E, history, N)
    assert not result.accepted
    assert result.history == history


# --- Bid Whist -------------------------------------------------------------


def test_bid_whist_sequence_and_winner():
    engine = bid_whist_engine()
    assert engine.next_bidder((), S) == W
    history = _run(
        engine,
        S,
        [
            (W, LevelBid(3)),
            (N, LevelBid(4, RankDirection.DOWNTOWN)),
            (E, PASS),
            (S, PASS),
            (W, LevelBid(4, no_trump=True)),
            (N, PASS),
        ],
    )
    assert engine.is_complete(history, S)
    assert engine.next_bidder(history, S) is None
    result = engine.resolve(history, S)
    assert result.status == AuctionStatus.WON
    assert result.winner == W
    assert result.contract.level == 4
    assert result.contract.no_trump
    assert result.contract.tricks_available == 12


def test_bid_whist_passed_seat_is_skipped_and_cannot_reenter():
    engine = bid_whist_engine()
    history = _run(engine, N, [(E, LevelBid(3)), (S, PASS), (W, LevelBid(4))])
    assert engine.next_bidder(history, N) == N
    history = _run_more(engine, N, history, [(N, LevelBid(5))])
    assert engine.next_bidder(history, N) == E
    v = engine.validate_bid(LevelBid(6), S, history, N)
    assert v.rejection.code == "already_passed"


def _run_more(engine, dealer, history, bids):
    for seat, bid in bids:
        result = engine.submit(bid, seat, history, dealer)
        assert result.accepted, result.validation.reason
        history = result.history
    return history


def test_bid_whist_rejections():
    engine = bid_whist_engine()
    history = _run(engine, N, [(E, LevelBid(4))])
    assert engine.validate_bid(LevelBid(5), W, history, N).rejection.code == "out_of_turn"
    assert engine.validate_bid(LevelBid(4), S, history, N).rejection.code == "bid_too_low"
    assert engine.validate_bid(LevelBid(4, RankDirection.DOWNTOWN), S, history, N).rejection.code == "bid_too_low"
    assert engine.validate_bid(LevelBid(4, no_trump=True), S, history, N).valid
    assert engine.validate_bid(LevelBid(7), S, history, N).rejection.code == "bid_out_of_range"
    assert engine.validate_bid(LevelBid(2), S, (), N).rejection.code == "out_of_turn"
    assert engine.validate_bid(LevelBid(2), E, (), N).rejection.code == "bid_out_of_range"
    assert engine.validate_bid(ExactBid(4), S, history, N).rejection.code == "wrong_bid_shape"


def test_bid_whist_all_pass():
    engine = bid_whist_engine()
    history = _run(engine, W, [(N, PASS), (E, PASS), (S, PASS)])
    assert not engine.is_complete(history, W)
    assert engine.next_bidder(history, W) == W
    history = _run_more(engine, W, history, [(W, PASS)])
    result = engine.resolve(history, W)
    assert result.status == AuctionStatus.ALL_PASS
    assert result.is_terminal
    assert result.contract is None


def test_bid_whist_three_passes_behind_dealer_bid():
    engine = bid_whist_engine()
    history = _run(engine, W, [(N, PASS), (E, PASS), (S, PASS), (W, LevelBid(3))])
    assert engine.is_complete(history, W)
    assert engine.resolve(history, W).winner == W


def test_resolve_is_idempotent():
    engine = bid_whist_engine()
    history = _run(engine, N, [(E, LevelBid(3)), (S, LevelBid(5)), (W, PASS), (N, PASS), (E, PASS)])
    assert engine.resolve(history, N) == engine.resolve(history, N)

    mn = minnesota_engine()
    h2 = _run(mn, N, [(s, RED) for s in Seat])
    assert mn.resolve(h2, N) == mn.resolve(h2, N)


# --- Oh Hell ---------------------------------------------------------------


def _oh_hell_prior(engine, dealer):
    # Dealer North: E, S, W bid first; total 10.
    return _run(engine, dealer, [(E, ExactBid(4)), (S, ExactBid(3)), (W, ExactBid(3))])


def test_oh_hell_dealer_restriction():
    engine = oh_hell_engine(13)
    history = _oh_hell_prior(engine, N)
    assert engine.next_bidder(history, N) == N
    v = engine.validate_bid(ExactBid(3), N, history, N)
    assert not v.valid
    assert v.rejection.kind == ErrorKind.INVALID_BID
    assert v.rejection.code == "dealer_restriction"
    assert "3" in v.reason
    assert engine.validate_bid(ExactBid(2), N, history, N).valid
    assert engine.validate_bid(ExactBid(4), N, history, N).valid


def test_oh_hell_resolve_carries_all_bids():
    engine = oh_hell_engine(13)
    history = _run_more(engine, N, _oh_hell_prior(engine, N), [(N, ExactBid(0))])
    result = engine.resolve(history, N)
    assert result.status == AuctionStatus.WON
    assert result.winner is None
    contract = result.contract
    assert contract.kind == ContractKind.EXACT
    assert contract.bid_for(E) == 4 and contract.bid_for(N) == 0
    assert [s for s, _ in contract.seat_bids] == [E, S, W, N]


def test_oh_hell_order_and_range():
    engine = oh_hell_engine(5)
    assert engine.validate_bid(ExactBid(1), N, (), N).rejection.code == "out_of_turn"
    assert engine.validate_bid(ExactBid(6), E, (), N).rejection.code == "bid_out_of_range"
    assert engine.validate_bid(ExactBid(5), E, (), N).valid
    history = _run(engine, N, [(E, ExactBid(1))])
    assert engine.validate_bid(ExactBid(1), E, history, N).rejection.code == "out_of_turn"
    assert engine.resolve(history, N).status == AuctionStatus.INCOMPLETE


# --- Widow Whist -----------------------------------------------------------


def test_widow_highest_bid_wins():
    engine = widow_engine()
    history = _run(engine, N, [(N, LevelBid(7)), (E, LevelBid(9)), (S, LevelBid(6)), (W, LevelBid(8))])
    result = engine.resolve(history, N)
    assert result.status == AuctionStatus.WON
    assert result.winner == E
    assert result.contract.kind == ContractKind.SOLO
    assert result.contract.level == 9


def test_widow_tie_rebid_restricted_to_tied_seats():
    engine = widow_engine()
    history = _run(engine, N, [(N, LevelBid(8)), (E, LevelBid(8)), (S, LevelBid(6)), (W, LevelBid(7))])
    assert not engine.is_complete(history, N)
    state = widow_round(history, N)
    assert state.round == 1
    assert set(state.participants) == {N, E}
    assert state.floor == 8
    assert engine.resolve(history, N).status == AuctionStatus.INCOMPLETE

    assert engine.validate_bid(LevelBid(9), S, history, N).rejection.code == "not_in_rebid"
    assert engine.validate_bid(LevelBid(7), N, history, N).rejection.code == "bid_too_low"
    assert engine.next_bidder(history, N) == E

    history = _run_more(engine, N, history, [(E, LevelBid(8)), (N, LevelBid(10))])
    assert history[-1].round == 1
    result = engine.resolve(history, N)
    assert result.winner == N
    assert result.contract.level == 10


def test_widow_tie_all_hold_goes_to_first_from_dealers_left():
    engine = widow_engine()
    history = _run(engine, S, [(N, LevelBid(12)), (E, LevelBid(12)), (S, LevelBid(6)), (W, LevelBid(6))])
    history = _run_more(engine, S, history, [(N, LevelBid(12)), (E, LevelBid(12))])
    # Dealer South: order from the left is W, N, E, S.
    assert engine.resolve(history, S).winner == N


def test_widow_rejects_out_of_range_and_duplicate():
    engine = widow_engine()
    assert engine.validate_bid(LevelBid(5), N, (), N).rejection.code == "bid_out_of_range"
    assert engine.validate_bid(LevelBid(13), N, (), N).rejection.code == "bid_out_of_range"
    history = _run(engine, N, [(N, LevelBid(6))])
    assert engine.validate_bid(LevelBid(7), N, history, N).rejection.code == "duplicate_bid"
    assert engine.validate_bid(PASS, E, history, N).rejection.code == "wrong_bid_shape"

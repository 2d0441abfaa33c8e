"""
Hand snapshot serialization.

Turns a HandState into a JSON-compatible dict (and back) so a driver can hand
it to whatever store it uses. Cards use the "rank|suit" encoding. The contract
is not stored: it is recomputed from the bid history on load, and the trick
tally from the completed tricks.

Corrupt cards raise MalformedCardError, unknown variant tokens raise
UnsupportedVariantError, and structural problems raise MalformedDataError; all
are recoverable (callers typically fall back to a fresh deal).
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

from .bids import PASS, AuctionStatus, Bid, BidEntry, CardBid, ExactBid, LevelBid, Pass
from .config import RuleOptions
from .deal import Deal
from .deck import Suit, decode_card, decode_cards, encode_card, encode_cards
from .errors import INVALID_FORMAT, MalformedDataError, WhistError
from .game import HandState
from .play import Trick, TrickTally
from .ranking import RankDirection
from .seats import Seat
from .variants import get_rules, variant_from_token

SCHEMA_VERSION = 1


def bid_to_dict(bid: Bid) -> Dict[str, Any]:
    if isinstance(bid, CardBid):
        return {"type": "card", "card": encode_card(bid.card)}
    if isinstance(bid, LevelBid):
        return {
            "type": "level",
            "level": bid.level,
            "direction": bid.direction.value,
            "no_trump": bid.no_trump,
        }
    if isinstance(bid, ExactBid):
        return {"type": "exact", "value": bid.value}
    if isinstance(bid, Pass):
        return {"type": "pass"}
    raise TypeError(f"Not a bid: {bid!r}")


def bid_from_dict(d: Dict[str, Any]) -> Bid:
    if not isinstance(d, dict):
        raise MalformedDataError(INVALID_FORMAT, f"Bid must be an object, got {d!r}")
    kind = d.get("type")
    if kind == "card":
        return CardBid(decode_card(d["card"]))
    if kind == "level":
        return LevelBid(
            level=int(d["level"]),
            direction=RankDirection(d.get("direction", RankDirection.UPTOWN.value)),
            no_trump=bool(d.get("no_trump", False)),
        )
    if kind == "exact":
        return ExactBid(int(d["value"]))
    if kind == "pass":
        return PASS
    raise MalformedDataError(INVALID_FORMAT, f"Unknown bid type: {kind!r}")


def _trick_to_dict(trick: Trick) -> Dict[str, Any]:
    return {
        "leader": trick.leader.name,
        "trump": trick.trump.name if trick.trump is not None else None,
        "plays": [[seat.name, encode_card(card)] for seat, card in trick.plays],
    }


def _trick_from_dict(d: Dict[str, Any]) -> Trick:
    trump = Suit[d["trump"]] if d.get("trump") else None
    plays = tuple((Seat[s], decode_card(c)) for s, c in d["plays"])
    return Trick(leader=Seat[d["leader"]], trump=trump, plays=plays)


def hand_to_dict(
    state: HandState,
    scores: Tuple[int, int] = (0, 0),
) -> Dict[str, Any]:
    """
    Serialize a hand in progress.

    Args:
        state: The hand to serialize.
        scores: Running match score (NS, EW) before this hand.
    """
    return {
        "schema_version": SCHEMA_VERSION,
        "saved_at": datetime.now(timezone.utc).isoformat(),
        "variant": state.rules.spec.id.value,
        "options": state.rules.options.to_dict(),
        "dealer": state.dealer.name,
        "hands": [encode_cards(h) for h in state.hands],
        "kitty": encode_cards(state.kitty),
        "stock": encode_cards(state.stock),
        "discards": encode_cards(state.discards),
        "last_card_dealt": encode_card(state.last_card_dealt),
        "turned_card": encode_card(state.turned_card) if state.turned_card is not None else None,
        "history": [
            {"seat": e.seat.name, "bid": bid_to_dict(e.bid), "round": e.round}
            for e in state.history
        ],
        "trump": state.trump.name if state.trump is not None else None,
        "completed": [_trick_to_dict(t) for t in state.completed],
        "trick": _trick_to_dict(state.trick) if state.trick is not None else None,
        "scores": list(scores),
    }


def hand_from_dict(d: Dict[str, Any]) -> Tuple[HandState, Tuple[int, int]]:
    """
    Rebuild a HandState (and the running score) from ``hand_to_dict`` output.
    """
    try:
        version = d.get("schema_version")
        if version != SCHEMA_VERSION:
            raise MalformedDataError(INVALID_FORMAT, f"Unsupported schema version: {version!r}")
        rules = get_rules(variant_from_token(d["variant"]), RuleOptions.from_dict(d.get("options", {})))
        hands = [decode_cards(h) for h in d["hands"]]
        if len(hands) != 4:
            raise MalformedDataError(INVALID_FORMAT, "A saved hand needs four seats")
        turned = d.get("turned_card")
        deal = Deal(
            hands=(hands[0], hands[1], hands[2], hands[3]),
            kitty=decode_cards(d.get("kitty", [])),
            stock=decode_cards(d.get("stock", [])),
            dealer=Seat[d["dealer"]],
            last_card_dealt=decode_card(d["last_card_dealt"]),
            turned_card=decode_card(turned) if turned else None,
        )
        state = HandState(rules, deal)
        state.discards = decode_cards(d.get("discards", []))
        state.history = tuple(
            BidEntry(Seat[e["seat"]], bid_from_dict(e["bid"]), i, int(e.get("round", 0)))
            for i, e in enumerate(d.get("history", []))
        )
        if state.history and rules.bidding is not None:
            state.auction = rules.bidding.resolve(state.history, state.dealer)
            if state.auction.status == AuctionStatus.WON:
                state.contract = state.auction.contract
        state.trump = Suit[d["trump"]] if d.get("trump") else None
        state.ranking = rules.ranking(state.trump, state.contract)
        state.completed = [_trick_from_dict(t) for t in d.get("completed", [])]
        state.trick = _trick_from_dict(d["trick"]) if d.get("trick") else None
        cards = state.all_cards()
        if len(set(cards)) != len(cards):
            raise MalformedDataError(INVALID_FORMAT, "Saved hand holds the same card more than once")
        state.tally = TrickTally.from_tricks(state.completed, state.ranking)
        ns, ew = d.get("scores", [0, 0])
    except WhistError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedDataError(INVALID_FORMAT, f"Malformed saved hand: {exc}") from exc
    return state, (int(ns), int(ew))


def hand_to_json(state: HandState, scores: Tuple[int, int] = (0, 0)) -> str:
    return json.dumps(hand_to_dict(state, scores), indent=2)


def hand_from_json(s: str) -> Tuple[HandState, Tuple[int, int]]:
    try:
        data = json.loads(s)
    except json.JSONDecodeError as exc:
        raise MalformedDataError(INVALID_FORMAT, f"Saved hand is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedDataError(INVALID_FORMAT, "Saved hand must be a JSON object")
    return hand_from_dict(data)


__all__ = [
    "bid_to_dict",
    "bid_from_dict",
    "hand_to_dict",
    "hand_from_dict",
    "hand_to_json",
    "hand_from_json",
    "SCHEMA_VERSION",
]

"""
Hand scoring and game-over detection.

Minnesota Whist (to 13): High made (7+ tricks) = +1 per trick over 6 to the
granders; High set = +2 per trick over 6 to the opponents. Low = the side with
fewer tricks scores 7 minus its tricks. All red = the side with more tricks
loses 1 per trick over 6.
Classic Whist (to 7): each side scores its tricks over a book of 6.
Bid Whist (to +7 / -7, 12 tricks): made (6 + level tricks) = +level, doubled
for a Boston (all 12), +1 at no-trump; set = -level.
Oh Hell (to 100): exact bid = 10 + bid for that seat, otherwise 0; team
totals add both partners.
Widow Whist (to 50): made = tricks - 6; set = -2 per trick short; only the
declarer's side is credited.

When both sides reach the target on the same hand the higher score wins and
equal scores are a draw.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .bids import Contract, ContractKind
from .errors import MissingParameterError
from .play import TrickTally
from .seats import Seat, Team

logger = logging.getLogger(__name__)

BOOK = 6


class Outcome(str, Enum):
    NS_WINS = "ns_wins"
    EW_WINS = "ew_wins"
    DRAW = "draw"

    @property
    def winner(self) -> Team | None:
        if self is Outcome.NS_WINS:
            return Team.NS
        if self is Outcome.EW_WINS:
            return Team.EW
        return None


@dataclass(frozen=True)
class HandScore:
    """Point deltas for one hand. ``seat_points`` is only set for per-seat scoring (Oh Hell)."""

    ns: int
    ew: int
    description: str
    seat_points: tuple[int, int, int, int] | None = None
    contract_made: bool | None = None

    def points(self, team: Team) -> int:
        return self.ns if team is Team.NS else self.ew

    @classmethod
    def for_team(cls, team: Team, points: int, description: str, **kw) -> "HandScore":
        if team is Team.NS:
            return cls(points, 0, description, **kw)
        return cls(0, points, description, **kw)


def _check_tally(tally: TrickTally, tricks_available: int) -> None:
    if any(c < 0 for c in tally.counts):
        raise ValueError(f"Trick counts cannot be negative: {tally.counts}")
    if tally.total > tricks_available:
        raise ValueError(f"{tally.total} tricks counted but only {tricks_available} in the hand")


def _require_contract(contract: Contract | None, *kinds: ContractKind) -> Contract:
    if contract is None:
        raise MissingParameterError("A contract is required to score this hand")
    if contract.kind not in kinds:
        raise MissingParameterError(
            f"Contract kind {contract.kind.value} cannot be scored here "
            f"(expected {', '.join(k.value for k in kinds)})"
        )
    return contract


def _require_declarer(contract: Contract) -> Seat:
    if contract.declarer is None:
        raise MissingParameterError(f"{contract.kind.value} contract needs a declarer")
    return contract.declarer


def _require_level(contract: Contract) -> int:
    if contract.level is None:
        raise MissingParameterError(f"{contract.kind.value} contract needs a bid level")
    return contract.level


def score_minnesota(contract: Contract | None, tally: TrickTally) -> HandScore:
    c = _require_contract(contract, ContractKind.HIGH, ContractKind.LOW, ContractKind.ALL_RED)
    _check_tally(tally, 13)
    ns, ew = tally.team(Team.NS), tally.team(Team.EW)

    if c.kind == ContractKind.ALL_RED:
        if ns == ew:
            return HandScore(0, 0, f"All bid Low. Tied {ns}-{ew}, no points scored")
        loser = Team.NS if ns > ew else Team.EW
        taken = max(ns, ew)
        points = -(taken - BOOK)
        return HandScore.for_team(
            loser, points, f"All bid Low. {loser.label} took {taken} tricks and loses {-points} points"
        )

    if c.kind == ContractKind.LOW:
        if ns == ew:
            return HandScore(0, 0, f"Low. Tied {ns}-{ew}, no points scored")
        team = Team.NS if ns < ew else Team.EW
        taken = min(ns, ew)
        points = 7 - taken
        return HandScore.for_team(team, points, f"Low. {team.label} took only {taken} tricks (+{points})")

    team = _require_declarer(c).team
    taken = tally.team(team)
    if taken >= 7:
        points = taken - BOOK
        return HandScore.for_team(
            team, points, f"{team.label} granded High and won {taken} tricks (+{points})", contract_made=True
        )
    opp = team.opponent
    points = max(0, tally.team(opp) - BOOK) * 2
    return HandScore.for_team(
        opp,
        points,
        f"{team.label} granded High but only won {taken} tricks. {opp.label} scores +{points} (x2)",
        contract_made=False,
    )


def score_classic(contract: Contract | None, tally: TrickTally) -> HandScore:
    """Contract is ignored; Classic Whist has no auction."""
    _check_tally(tally, 13)
    ns = max(0, tally.team(Team.NS) - BOOK)
    ew = max(0, tally.team(Team.EW) - BOOK)
    desc = (
        f"North-South {tally.team(Team.NS)} tricks (+{ns}), "
        f"East-West {tally.team(Team.EW)} tricks (+{ew})"
    )
    return HandScore(ns, ew, desc)


def score_bid_whist(contract: Contract | None, tally: TrickTally) -> HandScore:
    c = _require_contract(contract, ContractKind.LEVEL)
    team = _require_declarer(c).team
    level = _require_level(c)
    _check_tally(tally, c.tricks_available)
    taken = tally.team(team)
    books = taken - BOOK
    if books >= level:
        points = level
        notes = []
        if taken == c.tricks_available:
            points *= 2
            notes.append("Boston")
        if c.no_trump:
            points += 1
            notes.append("no trump bonus")
        extra = f" ({', '.join(notes)})" if notes else ""
        return HandScore.for_team(
            team, points, f"{team.label} made {level} with {taken} tricks (+{points}){extra}", contract_made=True
        )
    return HandScore.for_team(
        team, -level, f"{team.label} bid {level} but took {taken} tricks ({-level})", contract_made=False
    )


def score_oh_hell(contract: Contract | None, tally: TrickTally) -> HandScore:
    c = _require_contract(contract, ContractKind.EXACT)
    _check_tally(tally, c.tricks_available)
    seat_points = []
    lines = []
    for seat in Seat:
        bid = c.bid_for(seat)
        if bid is None:
            raise MissingParameterError(f"No bid recorded for {seat}")
        taken = tally.seat(seat)
        pts = 10 + bid if taken == bid else 0
        seat_points.append(pts)
        lines.append(f"{seat} bid {bid}, took {taken} ({'+' + str(pts) if pts else '0'})")
    sp = (seat_points[0], seat_points[1], seat_points[2], seat_points[3])
    ns = sp[Seat.NORTH] + sp[Seat.SOUTH]
    ew = sp[Seat.EAST] + sp[Seat.WEST]
    return HandScore(ns, ew, "\n".join(lines), seat_points=sp)


def score_widow(contract: Contract | None, tally: TrickTally) -> HandScore:
    c = _require_contract(contract, ContractKind.SOLO)
    declarer = _require_declarer(c)
    level = _require_level(c)
    _check_tally(tally, c.tricks_available)
    taken = tally.seat(declarer)
    if taken >= level:
        points = taken - BOOK
        desc = f"{declarer} made bid: {level} tricks, took {taken} = +{points} points"
        made = True
    else:
        short = level - taken
        points = -2 * short
        desc = f"{declarer} failed bid: {level} tricks, took {taken} = {points} points ({short} short)"
        made = False
    return HandScore.for_team(declarer.team, points, desc, contract_made=made)


def check_game_over(ns: int, ew: int, target: int) -> Outcome | None:
    """First side to reach ``target`` wins; both at once: higher score, or a draw if equal."""
    ns_in, ew_in = ns >= target, ew >= target
    if ns_in and ew_in:
        if ns == ew:
            return Outcome.DRAW
        return Outcome.NS_WINS if ns > ew else Outcome.EW_WINS
    if ns_in:
        return Outcome.NS_WINS
    if ew_in:
        return Outcome.EW_WINS
    return None


def check_game_over_two_way(ns: int, ew: int, target: int) -> Outcome | None:
    """
    As ``check_game_over``, but a side falling to ``-target`` loses. Both
    thresholds are checked every hand.
    """
    ns_wins = ns >= target or ew <= -target
    ew_wins = ew >= target or ns <= -target
    if ns_wins and ew_wins:
        if ns == ew:
            return Outcome.DRAW
        return Outcome.NS_WINS if ns > ew else Outcome.EW_WINS
    if ns_wins:
        return Outcome.NS_WINS
    if ew_wins:
        return Outcome.EW_WINS
    return None


def game_over_message(outcome: Outcome, ns: int, ew: int) -> str:
    if outcome is Outcome.NS_WINS:
        return f"North-South wins! Final score: {ns}-{ew}"
    if outcome is Outcome.EW_WINS:
        return f"East-West wins! Final score: {ew}-{ns}"
    return f"Draw! Final score: {ns}-{ew}"


@dataclass(frozen=True)
class ScoringEngine:
    """Bundle of scoring functions for one variant."""

    name: str
    score_hand: Callable[[Contract | None, TrickTally], HandScore]
    check_game_over: Callable[[int, int, int], Outcome | None] = check_game_over
    game_over_message: Callable[[Outcome, int, int], str] = game_over_message

    def score(self, contract: Contract | None, tally: TrickTally) -> HandScore:
        result = self.score_hand(contract, tally)
        logger.debug("%s score: NS %+d, EW %+d (%s)", self.name, result.ns, result.ew, result.description)
        return result

    def game_over(self, ns: int, ew: int, target: int) -> Outcome | None:
        outcome = self.check_game_over(ns, ew, target)
        if outcome is not None:
            logger.debug("%s game over at %d-%d (target %d): %s", self.name, ns, ew, target, outcome.value)
        return outcome


MINNESOTA_SCORING = ScoringEngine("Minnesota Whist", score_minnesota)
CLASSIC_SCORING = ScoringEngine("Classic Whist", score_classic)
BID_WHIST_SCORING = ScoringEngine("Bid Whist", score_bid_whist, check_game_over=check_game_over_two_way)
OH_HELL_SCORING = ScoringEngine("Oh Hell", score_oh_hell)
WIDOW_SCORING = ScoringEngine("Widow Whist", score_widow)

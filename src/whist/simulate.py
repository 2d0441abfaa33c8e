"""
Random-play simulation: play many single hands with RandomAgent and summarize
the score deltas with numpy.

Useful as a smoke test of a variant's rules and as a rough look at how its
scoring is distributed.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass

import numpy as np

from .agents import RandomAgent
from .config import RuleOptions
from .game import play_one_hand
from .seats import Seat, seats_from
from .variants import VariantId, get_rules

logger = logging.getLogger(__name__)


@dataclass
class SimulationSummary:
    variant: VariantId
    hands: int
    mean_ns: float
    mean_ew: float
    std_ns: float
    std_ew: float
    made_rate: float | None  # share of contracts made, None when the variant has none
    redeals: int

    def as_dict(self) -> dict:
        return {
            "variant": self.variant.value,
            "hands": self.hands,
            "mean_ns": self.mean_ns,
            "mean_ew": self.mean_ew,
            "std_ns": self.std_ns,
            "std_ew": self.std_ew,
            "made_rate": self.made_rate,
            "redeals": self.redeals,
        }


def simulate_variant(
    variant: str | VariantId,
    hands: int = 100,
    seed: int = 0,
    options: RuleOptions | None = None,
) -> SimulationSummary:
    """Play ``hands`` independent random hands, rotating the dealer."""
    if hands <= 0:
        raise ValueError("hands must be positive")
    rules = get_rules(variant, options)
    rng = random.Random(seed)
    agent = RandomAgent(seed=seed)
    dealers = seats_from(Seat.NORTH)

    deltas = np.zeros((hands, 2), dtype=np.int64)
    made: list[bool] = []
    redeals = 0
    for i in range(hands):
        outcome = play_one_hand(
            rules,
            dealers[i % 4],
            agent.bid,
            agent.play,
            agent.exchange,
            agent.declare_trump,
            rng=rng,
        )
        deltas[i] = (outcome.score.ns, outcome.score.ew)
        redeals += outcome.redeals
        if outcome.score.contract_made is not None:
            made.append(outcome.score.contract_made)

    summary = SimulationSummary(
        variant=rules.spec.id,
        hands=hands,
        mean_ns=float(deltas[:, 0].mean()),
        mean_ew=float(deltas[:, 1].mean()),
        std_ns=float(deltas[:, 0].std()),
        std_ew=float(deltas[:, 1].std()),
        made_rate=float(np.mean(made)) if made else None,
        redeals=redeals,
    )
    logger.info("Simulated %d %s hands: %s", hands, rules.name, summary.as_dict())
    return summary

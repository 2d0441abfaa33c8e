"""
Command-line interface for the whist rules engines.

Usage examples (after ``pip install -e .``):

    whist variants
    whist simulate --variant bid_whist --hands 500 --seed 7
    whist match --variant minnesota_whist --seed 1
    whist decode-card "12|3"
"""
from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from typing import Optional, Sequence

from .agents import RandomAgent
from .config import ALL_RED_LOW, ALL_RED_PENALTY, RuleOptions
from .deck import decode_card
from .errors import MalformedDataError, UnsupportedVariantError
from .game import run_match
from .simulate import simulate_variant
from .seats import Seat, seat_from_token
from .variants import VARIANTS, VariantId, get_rules

logger = logging.getLogger(__name__)


def _add_rule_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--variant",
        type=str,
        default=VariantId.MINNESOTA_WHIST.value,
        help="Variant token, e.g. minnesota_whist, bid_whist, oh_hell.",
    )
    parser.add_argument(
        "--target",
        type=int,
        default=None,
        help="Override the variant's winning score.",
    )
    parser.add_argument(
        "--bowers",
        action="store_true",
        help="Play with right and left bowers.",
    )
    parser.add_argument(
        "--hand-size",
        type=int,
        default=None,
        help="Oh Hell: cards per player for every hand.",
    )
    parser.add_argument(
        "--all-red",
        choices=[ALL_RED_PENALTY, ALL_RED_LOW],
        default=ALL_RED_PENALTY,
        help="Minnesota Whist: how an all-red hand is scored.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for reproducibility.",
    )


def _options_from_args(args: argparse.Namespace) -> RuleOptions:
    return RuleOptions(
        winning_score=args.target,
        bowers=args.bowers,
        oh_hell_hand_size=args.hand_size,
        all_red_scoring=args.all_red,
    )


def _add_variants_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("variants", help="List supported variants and their table facts.")
    parser.add_argument("--json", action="store_true", help="Print as JSON.")
    parser.set_defaults(func=_cmd_variants)


def _cmd_variants(args: argparse.Namespace) -> int:
    rows = [
        {
            "token": spec.id.value,
            "name": spec.name,
            "uses_bidding": spec.uses_bidding,
            "trump": spec.trump_selection.value,
            "tricks_per_hand": spec.tricks_per_hand,
            "special_cards": spec.special_card_count,
            "winning_score": spec.winning_score,
        }
        for spec in VARIANTS.values()
    ]
    if args.json:
        print(json.dumps(rows, indent=2))
        return 0
    for r in rows:
        label = VARIANTS[VariantId(r["token"])].special_cards_label
        special = f", {r['special_cards']}-card {label}" if label else ""
        print(
            f"{r['token']:<16} {r['name']:<16} tricks={r['tricks_per_hand']:<3} "
            f"trump={r['trump']:<11} target={r['winning_score']}{special}"
        )
    return 0


def _add_simulate_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("simulate", help="Play random hands and summarize scores.")
    _add_rule_options(parser)
    parser.add_argument(
        "--hands",
        type=int,
        default=200,
        help="Number of hands to simulate.",
    )
    parser.set_defaults(func=_cmd_simulate)


def _cmd_simulate(args: argparse.Namespace) -> int:
    summary = simulate_variant(args.variant, hands=args.hands, seed=args.seed, options=_options_from_args(args))
    made = f"{summary.made_rate:.1%}" if summary.made_rate is not None else "n/a"
    print(
        f"{summary.variant.value}: hands={summary.hands} "
        f"NS mean={summary.mean_ns:+.3f} (sd {summary.std_ns:.3f}) "
        f"EW mean={summary.mean_ew:+.3f} (sd {summary.std_ew:.3f}) "
        f"made={made} redeals={summary.redeals}"
    )
    return 0


def _add_match_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("match", help="Play one random match to the target score.")
    _add_rule_options(parser)
    parser.add_argument(
        "--max-hands",
        type=int,
        default=200,
        help="Stop after this many hands if nobody has won.",
    )
    parser.add_argument(
        "--schedule",
        action="store_true",
        help="Oh Hell: follow the down-and-up hand size schedule.",
    )
    parser.add_argument(
        "--dealer",
        type=seat_from_token,
        default=Seat.NORTH,
        help="First dealer: N, E, S or W.",
    )
    parser.set_defaults(func=_cmd_match)


def _cmd_match(args: argparse.Namespace) -> int:
    rules = get_rules(args.variant, _options_from_args(args))
    agent = RandomAgent(seed=args.seed)
    result = run_match(
        rules,
        agent.bid,
        agent.play,
        agent.exchange,
        agent.declare_trump,
        max_hands=args.max_hands,
        dealer=args.dealer,
        rng=random.Random(args.seed),
        oh_hell_schedule=args.schedule,
    )
    for i, hand in enumerate(result.hands, 1):
        print(f"[hand {i}] NS {hand.ns:+d} EW {hand.ew:+d}  {hand.description.splitlines()[0]}")
    print(result.message)
    return 0


def _add_decode_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("decode-card", help='Decode a stored card such as "12|3".')
    parser.add_argument("encoded", type=str)
    parser.set_defaults(func=_cmd_decode)


def _cmd_decode(args: argparse.Namespace) -> int:
    card = decode_card(args.encoded)
    print(card)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="whist", description="Whist-family rules engines.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_variants_parser(subparsers)
    _add_simulate_parser(subparsers)
    _add_match_parser(subparsers)
    _add_decode_parser(subparsers)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except (UnsupportedVariantError, MalformedDataError) as exc:
        logger.error("%s", exc.rejection.reason)
        return 2


if __name__ == "__main__":
    sys.exit(main())

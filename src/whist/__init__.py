"""Whist-family rules engines (Minnesota, Classic, Bid Whist, Oh Hell, Widow Whist)."""

__version__ = "0.1.0"

from .seats import Seat, Team, seats_from
from .deck import Card, Rank, Suit, build_deck, make_deck_52, encode_card, decode_card
from .ranking import RankDirection, RankingRules, compare, sort_hand
from .errors import (
    ErrorKind,
    Rejection,
    WhistError,
    MissingParameterError,
    MalformedDataError,
    MalformedCardError,
    UnsupportedVariantError,
)
from .config import RuleOptions
from .deal import Deal, deal_hand, exchange_kitty, first_to_bid, first_to_play, next_dealer, hand_size_schedule
from .bids import (
    PASS,
    AuctionResult,
    AuctionStatus,
    BidEntry,
    BidValidation,
    CardBid,
    Contract,
    ContractKind,
    ExactBid,
    LevelBid,
    Pass,
)
from .bidding import BiddingEngine
from .trump import TrumpSelectionMethod, TrumpState, determine_trump
from .play import (
    PlayResult,
    PlayStatus,
    Trick,
    TrickTally,
    award_claim,
    claim_window,
    current_winner,
    determine_winner,
    legal_plays,
    play_card,
)
from .scoring import HandScore, Outcome, ScoringEngine, check_game_over, game_over_message
from .variants import (
    VARIANTS,
    VariantId,
    VariantRules,
    VariantSpec,
    get_rules,
    variant_from_token,
    tricks_per_hand,
    winning_score,
    uses_bidding,
    has_special_cards,
    special_card_count,
    trump_selection_method,
)
from .game import HandState, play_one_hand, run_match

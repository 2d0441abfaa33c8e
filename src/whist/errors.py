"""
Error taxonomy shared by every engine.

Anything caused by an external actor's input (a bad bid, an illegal card, a
corrupt saved card, an unknown variant token) is reported as a ``Rejection``
the driver can show to the player. Exceptions are raised only for decode
failures and unknown variant tokens (both recoverable, both carrying a
rejection) and for driver bugs such as a missing mandatory scoring parameter.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    INVALID_BID = "invalid_bid"
    INVALID_PLAY = "invalid_play"
    MALFORMED_DATA = "malformed_data"
    UNSUPPORTED_VARIANT = "unsupported_variant"


@dataclass(frozen=True)
class Rejection:
    """
    A refused input.

    ``code`` is a stable machine tag (e.g. ``"must_follow_suit"``); ``reason``
    is the text meant to be shown verbatim to the player.
    """

    kind: ErrorKind
    code: str
    reason: str

    def __str__(self) -> str:
        return self.reason


# Stable rejection codes
MUST_FOLLOW_SUIT = "must_follow_suit"
CARD_NOT_IN_HAND = "card_not_in_hand"
OUT_OF_TURN = "out_of_turn"
TRICK_COMPLETE = "trick_complete"
DUPLICATE_BID = "duplicate_bid"
WRONG_BID_SHAPE = "wrong_bid_shape"
BID_OUT_OF_RANGE = "bid_out_of_range"
BID_TOO_LOW = "bid_too_low"
DEALER_RESTRICTION = "dealer_restriction"
ALREADY_PASSED = "already_passed"
AUCTION_COMPLETE = "auction_complete"
NOT_IN_REBID = "not_in_rebid"
WRONG_DISCARD_COUNT = "wrong_discard_count"
DUPLICATE_DISCARD = "duplicate_discard"
CLAIMS_DISABLED = "claims_disabled"
INVALID_FORMAT = "invalid_format"
OUT_OF_RANGE = "out_of_range"
UNKNOWN_VARIANT = "unknown_variant"


class WhistError(Exception):
    """Base class for errors raised by the rules core."""


class MissingParameterError(WhistError, ValueError):
    """A scoring or trump function was called without a parameter the variant requires."""


class MalformedDataError(WhistError, ValueError):
    """Serialized data (a card, a saved hand) could not be decoded."""

    def __init__(self, code: str, reason: str):
        super().__init__(reason)
        self.rejection = Rejection(ErrorKind.MALFORMED_DATA, code, reason)

    @property
    def code(self) -> str:
        return self.rejection.code


class MalformedCardError(MalformedDataError):
    """A serialized card could not be decoded."""


class UnsupportedVariantError(WhistError, ValueError):
    """No implementation is registered for a variant token."""

    def __init__(self, token: str):
        reason = f"Unsupported game variant: {token!r}"
        super().__init__(reason)
        self.token = token
        self.rejection = Rejection(ErrorKind.UNSUPPORTED_VARIANT, UNKNOWN_VARIANT, reason)


__all__ = [
    "ErrorKind",
    "Rejection",
    "WhistError",
    "MissingParameterError",
    "MalformedDataError",
    "MalformedCardError",
    "UnsupportedVariantError",
]

"""
Per-game rule options.

Every field has a default that gives the standard rules of the chosen variant;
``None`` means "use the variant's own value".
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict

ALL_RED_PENALTY = "penalty"
ALL_RED_LOW = "low"


@dataclass(frozen=True)
class RuleOptions:
    winning_score: int | None = None
    bowers: bool = False
    allow_claims: bool | None = None
    oh_hell_hand_size: int | None = None
    # Minnesota Whist: score an all-red hand as the penalty rule or as a plain Low
    all_red_scoring: str = ALL_RED_PENALTY
    max_redeals: int = 10

    def __post_init__(self) -> None:
        if self.winning_score is not None and self.winning_score <= 0:
            raise ValueError(f"winning_score must be positive, got {self.winning_score}")
        if self.oh_hell_hand_size is not None and not 1 <= self.oh_hell_hand_size <= 13:
            raise ValueError(f"oh_hell_hand_size must be 1..13, got {self.oh_hell_hand_size}")
        if self.all_red_scoring not in (ALL_RED_PENALTY, ALL_RED_LOW):
            raise ValueError(f"all_red_scoring must be 'penalty' or 'low', got {self.all_red_scoring!r}")
        if self.max_redeals < 0:
            raise ValueError("max_redeals cannot be negative")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "RuleOptions":
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ValueError(f"Unknown rule options: {', '.join(sorted(unknown))}")
        return cls(**d)

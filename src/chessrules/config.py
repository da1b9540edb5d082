"""Rules and session settings."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any


class CheckmateScope(str, Enum):
    """Which escapes are considered before declaring checkmate."""

    # Blocks and captures by any piece count as escapes.
    ALL_PIECES = "all_pieces"
    # Only the king's own steps count (historical behaviour).
    KING_ONLY = "king_only"


@dataclass
class RulesSettings:
    """All configurable knobs of a game."""

    checkmate_scope: CheckmateScope = CheckmateScope.ALL_PIECES
    seed: int | None = None  # seeds the random-move generator
    undo_limit_per_move: int = 1
    start_title: str = "Game start!"

    def __post_init__(self) -> None:
        self.checkmate_scope = CheckmateScope(self.checkmate_scope)
        if self.undo_limit_per_move < 0:
            raise ValueError(
                f"undo_limit_per_move must be >= 0, got {self.undo_limit_per_move}"
            )
        if self.seed is not None and not isinstance(self.seed, int):
            raise ValueError(f"seed must be an integer or None, got {self.seed!r}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RulesSettings:
        """Build settings from a plain mapping (e.g. parsed JSON)."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        return cls(**dict(data))

    def to_mapping(self) -> dict[str, Any]:
        return {
            "checkmate_scope": self.checkmate_scope.value,
            "seed": self.seed,
            "undo_limit_per_move": self.undo_limit_per_move,
            "start_title": self.start_title,
        }

"""Game-layer enums and the controller interface.

The controller depends on this ABC, so UIs and tests can program against it
without pulling in the concrete implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from chessrules.core.enums import Color, PieceType

if TYPE_CHECKING:
    from chessrules.core.position import Position


class GamePhase(IntEnum):
    """Finite-state-machine states for a game."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    GAME_OVER = auto()


class GameEndReason(IntEnum):
    NONE = 0
    CHECKMATE = auto()
    RESIGNATION = auto()
    DRAW_AGREED = auto()


class DrawOffer(IntEnum):
    """Draw offer status between players."""

    NONE = 0
    OFFERED = auto()
    ACCEPTED = auto()
    DECLINED = auto()


class IGameController(ABC):
    """Interface for the game orchestrator."""

    @abstractmethod
    def new_game(self) -> None:
        """Set up a new game from the standard position."""

    @abstractmethod
    def submit_move(
        self, src: Position, dst: Position, promotion: PieceType | str | None = None
    ) -> bool:
        """Submit a move. Returns True if legal and applied."""

    @abstractmethod
    def resign(self, color: Color) -> None:
        """Player of *color* resigns."""

    @abstractmethod
    def offer_draw(self, color: Color) -> None:
        """Player offers a draw."""

    @abstractmethod
    def accept_draw(self, color: Color) -> None:
        """Opponent accepts the draw offer."""

    @abstractmethod
    def undo_move(self) -> bool:
        """Undo the last move. Returns True on success."""

"""GameController — the central orchestrator of a two-player game.

Coordinates: GameState, Board legality checks, promotion choice.
Emits events via simple callbacks so a front end / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from chessrules.config import RulesSettings
from chessrules.core.enums import Color, GameResult, MoveRejection, PieceType
from chessrules.core.position import Position
from chessrules.exceptions import InvalidPromotionRequest
from chessrules.game.interfaces import GamePhase, IGameController
from chessrules.game.state import GameState, MoveRecord

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[MoveRecord, "GameState"], None]
GameOverCallback = Callable[[GameResult], None]
PhaseCallback = Callable[[GamePhase], None]
UndoCallback = Callable[[MoveRecord], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_undo: list[UndoCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController(IGameController):
    """Orchestrates a full game: validates moves, handles promotion,
    switches turns, notifies listeners.

    Methods are meant to be called from a single thread.
    """

    __slots__ = ("_settings", "_state", "events")

    def __init__(self, settings: RulesSettings | None = None) -> None:
        self._settings = settings if settings is not None else RulesSettings()
        self._state = GameState(self._settings)
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def settings(self) -> RulesSettings:
        return self._settings

    @property
    def last_rejection(self) -> MoveRejection | None:
        return self._state.last_rejection

    # ── IGameController impl ─────────────────────────────────────────────

    def new_game(self) -> None:
        self._state = GameState(self._settings)
        self._state.setup()
        _LOGGER.info("New game started")
        self._emit_phase(GamePhase.AWAITING_MOVE)

    def submit_move(
        self,
        src: Position,
        dst: Position,
        promotion: PieceType | str | None = None,
    ) -> bool:
        if self._state.phase != GamePhase.AWAITING_MOVE:
            return False

        if self._state.validate_move(src, dst) is not None:
            return False

        try:
            record = self._state.apply_move(src, dst, promotion)
        except InvalidPromotionRequest as exc:
            _LOGGER.debug("Move %s-%s refused: %s", src, dst, exc)
            return False

        self._after_move(record)
        return True

    def random_move(self) -> bool:
        """Let the side to move play a random legal move."""
        if self._state.phase != GamePhase.AWAITING_MOVE:
            return False
        record = self._state.random_move()
        if record is None:
            return False
        self._after_move(record)
        return True

    def resign(self, color: Color) -> None:
        if self._state.is_game_over:
            return
        self._state.resign(color)
        self._emit_game_over(self._state.result)

    def offer_draw(self, color: Color) -> None:
        self._state.offer_draw(color)

    def accept_draw(self, color: Color) -> None:
        if self._state.accept_draw(color):
            self._emit_game_over(GameResult.DRAW)

    def decline_draw(self) -> None:
        self._state.decline_draw()

    def undo_move(self) -> bool:
        record = self._state.undo_last_move()
        if record is None:
            return False
        for cb in self.events.on_undo:
            cb(record)
        self._emit_phase(GamePhase.AWAITING_MOVE)
        return True

    # ── Internal helpers ─────────────────────────────────────────────────

    def _after_move(self, record: MoveRecord) -> None:
        for cb in self.events.on_move:
            cb(record, self._state)
        if self._state.is_game_over:
            self._emit_game_over(self._state.result)

    def _emit_game_over(self, result: GameResult) -> None:
        self._emit_phase(GamePhase.GAME_OVER)
        for cb in self.events.on_game_over:
            cb(result)

    def _emit_phase(self, phase: GamePhase) -> None:
        for cb in self.events.on_phase_changed:
            cb(phase)

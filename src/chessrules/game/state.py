"""Game state machine — tracks phase transitions, undo policy and results."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from chessrules.config import RulesSettings
from chessrules.core.board import Board, MoveOutcome
from chessrules.core.enums import BoardStatus, Color, GameResult, MoveRejection, PieceType
from chessrules.core.position import Position
from chessrules.exceptions import InvalidPromotionRequest
from chessrules.game.interfaces import DrawOffer, GameEndReason, GamePhase

_LOGGER = logging.getLogger(__name__)


@dataclass
class MoveRecord:
    """A single entry in the move history."""

    outcome: MoveOutcome
    title: str
    promotion: PieceType | None = None

    @property
    def was_capture(self) -> bool:
        return self.outcome.captured is not None

    @property
    def was_check(self) -> bool:
        return self.outcome.status != BoardStatus.NO_CHECKS


@dataclass
class GameState:
    """Manages game lifecycle: phase, result, move history, undo, draw offers.

    This is a pure data/logic class — no I/O, no UI.
    """

    settings: RulesSettings = field(default_factory=RulesSettings)
    board: Board = field(init=False)
    phase: GamePhase = field(default=GamePhase.NOT_STARTED, init=False)
    result: GameResult = field(default=GameResult.IN_PROGRESS, init=False)
    end_reason: GameEndReason = field(default=GameEndReason.NONE, init=False)
    draw_offer: DrawOffer = field(default=DrawOffer.NONE, init=False)
    draw_offer_by: Color | None = field(default=None, init=False)
    move_history: list[MoveRecord] = field(default_factory=list, init=False)
    last_rejection: MoveRejection | None = field(default=None, init=False)
    _undos_left: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        self.board = Board(self.settings)

    # ── Initialisation ───────────────────────────────────────────────────

    def setup(self, settings: RulesSettings | None = None) -> None:
        """Initialise (or reset) the game."""
        if settings is not None:
            self.settings = settings
        self.board = Board(self.settings)
        self.phase = GamePhase.AWAITING_MOVE
        self.result = GameResult.IN_PROGRESS
        self.end_reason = GameEndReason.NONE
        self.draw_offer = DrawOffer.NONE
        self.draw_offer_by = None
        self.last_rejection = None
        self._undos_left = 0
        self.move_history.clear()

    # ── Move application ─────────────────────────────────────────────────

    def validate_move(self, src: Position, dst: Position) -> MoveRejection | None:
        """Why the side to move may not play *src*→*dst*, or ``None``."""
        rejection = self.board.check_move(
            src.file, src.rank, dst.file, dst.rank, self.side_to_move
        )
        self.last_rejection = rejection
        return rejection

    def apply_move(
        self,
        src: Position,
        dst: Position,
        promotion: PieceType | str | None = None,
    ) -> MoveRecord:
        """Apply a validated move and return the history record.

        Caller is responsible for the legality check. A pawn reaching its last
        rank needs *promotion*; any other move must not carry one.

        Raises:
            InvalidPromotionRequest: before the board is touched.
        """
        color = self.side_to_move
        board = self.board
        promoted: PieceType | None = None
        if board.needs_promotion(src.file, src.rank, dst.rank, color):
            if not board.can_promote(src.file, src.rank, dst.file, dst.rank, color, promotion):
                raise InvalidPromotionRequest(
                    f"Pawn reaching {dst} must promote to Q, R, B or N, got {promotion!r}"
                )
            assert promotion is not None
            promoted = board.promote(src.rank, src.file, color, promotion).piece_type
        elif promotion is not None:
            raise InvalidPromotionRequest(f"Move {src}-{dst} is not a promotion")

        outcome = board.move_piece(src.file, src.rank, dst.file, dst.rank, color)
        if promoted is not None:
            outcome = replace(outcome, piece_type=PieceType.PAWN, promotion=promoted)
        return self._record(outcome, promoted)

    def random_move(self) -> MoveRecord | None:
        """Play a random legal move for the side to move, if there is one."""
        if self.is_game_over:
            return None
        color = self.side_to_move
        if not self.board.has_legal_move(color):
            _LOGGER.info("%s has no legal move", color)
            return None
        outcome = self.board.make_random_move(color)
        return self._record(outcome, outcome.promotion)

    def _record(self, outcome: MoveOutcome, promotion: PieceType | None) -> MoveRecord:
        record = MoveRecord(outcome, self.board.history.latest.title, promotion)
        self.move_history.append(record)
        self._undos_left = self.settings.undo_limit_per_move
        self.draw_offer = DrawOffer.NONE  # any move cancels a pending offer
        self.draw_offer_by = None
        self.last_rejection = None
        self._check_game_over(outcome.status)
        return record

    def undo_last_move(self) -> MoveRecord | None:
        """Undo the last move. Returns the undone record, or None if refused.

        Undo is refused once the game is over, when there is no move to undo,
        and when the per-move undo allowance has been used up.
        """
        if self.is_game_over or not self.move_history:
            return None
        if self._undos_left <= 0:
            _LOGGER.debug("Undo refused: allowance for this move used up")
            return None
        if not self.board.undo_prev_move():
            return None
        self._undos_left -= 1
        return self.move_history.pop()

    # ── Resignation / draw ───────────────────────────────────────────────

    def resign(self, color: Color) -> None:
        if self.is_game_over:
            return
        self.board.add_no_move_state(f"{color} resigns. {color.opposite} wins!")
        self.result = (
            GameResult.BLACK_WINS if color == Color.WHITE else GameResult.WHITE_WINS
        )
        self._end(GameEndReason.RESIGNATION)

    def offer_draw(self, color: Color) -> bool:
        if self.is_game_over or self.draw_offer == DrawOffer.OFFERED:
            return False
        self.draw_offer = DrawOffer.OFFERED
        self.draw_offer_by = color
        return True

    def accept_draw(self, color: Color) -> bool:
        """The opponent of whoever offered accepts; the game ends drawn."""
        if self.draw_offer != DrawOffer.OFFERED or self.draw_offer_by in (None, color):
            return False
        self.draw_offer = DrawOffer.ACCEPTED
        self.draw_offer_by = None
        self.set_draw()
        return True

    def decline_draw(self) -> None:
        self.draw_offer = DrawOffer.DECLINED
        self.draw_offer_by = None

    def set_draw(self) -> None:
        if self.is_game_over:
            return
        self.board.add_no_move_state("Draw agreed.")
        self.result = GameResult.DRAW
        self._end(GameEndReason.DRAW_AGREED)

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return Color.WHITE if len(self.move_history) % 2 == 0 else Color.BLACK

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.move_history)

    @property
    def can_undo(self) -> bool:
        return not self.is_game_over and bool(self.move_history) and self._undos_left > 0

    def legal_moves(self) -> list[tuple[Position, Position]]:
        """Legal moves for the side to move."""
        return self.board.legal_moves(self.side_to_move)

    # ── Internal ─────────────────────────────────────────────────────────

    def _check_game_over(self, status: BoardStatus) -> None:
        if status == BoardStatus.WHITE_IN_CHECKMATE:
            self.result = GameResult.BLACK_WINS
        elif status == BoardStatus.BLACK_IN_CHECKMATE:
            self.result = GameResult.WHITE_WINS
        else:
            return
        self._end(GameEndReason.CHECKMATE)

    def _end(self, reason: GameEndReason) -> None:
        self.phase = GamePhase.GAME_OVER
        self.end_reason = reason
        _LOGGER.info("Game over: %s (%s)", self.result.name, reason.name)

"""ReplaySession — step through a finished game on its own board."""

from __future__ import annotations

from chessrules.config import RulesSettings
from chessrules.core.board import Board
from chessrules.core.history import GameHistory, ReplayCursor, Snapshot


class ReplaySession:
    """Board kept in sync with a :class:`ReplayCursor`.

    Stepping past either end raises :class:`HistoryBoundsExceeded` and leaves
    both the cursor and the board where they were.
    """

    __slots__ = ("board", "history", "_cursor")

    def __init__(self, history: GameHistory, settings: RulesSettings | None = None) -> None:
        self.history = history
        self._cursor = ReplayCursor(history)
        self.board = Board(settings, standard_layout=False)
        self._show(self._cursor.current())

    @property
    def index(self) -> int:
        return self._cursor.position

    @property
    def title(self) -> str:
        return self._cursor.current().title

    @property
    def at_start(self) -> bool:
        return self._cursor.position == 0

    @property
    def at_end(self) -> bool:
        return self._cursor.position == len(self.history) - 1

    def next(self) -> Snapshot:
        snapshot = self._cursor.next()
        self._show(snapshot)
        return snapshot

    def previous(self) -> Snapshot:
        snapshot = self._cursor.previous()
        self._show(snapshot)
        return snapshot

    def _show(self, snapshot: Snapshot) -> None:
        snapshot.restore(self.board)
        self.board.turn = snapshot.turn

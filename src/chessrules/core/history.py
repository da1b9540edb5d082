"""GameHistory — an append-only sequence of board snapshots.

Undo truncates the sequence; replay walks it with an independent
:class:`ReplayCursor`, strictly one step at a time.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from chessrules.core.cell import Cell, FrozenGrid, freeze_grid, grid_pieces
from chessrules.core.piece import Piece, PieceState
from chessrules.core.position import Position
from chessrules.exceptions import HistoryBoundsExceeded

if TYPE_CHECKING:
    from chessrules.core.board import Board

_LOGGER = logging.getLogger(__name__)

LastMove = tuple[Position, Position]


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Deep copy of the board at one point of the game."""

    board: FrozenGrid
    pieces: tuple[Piece, ...]
    turn: int
    title: str
    last_move: LastMove | None = None

    @classmethod
    def capture(
        cls,
        cells: Sequence[Sequence[Cell]],
        turn: int,
        title: str,
        last_move: LastMove | None = None,
    ) -> Snapshot:
        board = freeze_grid(cells)
        return cls(board, tuple(grid_pieces(board)), turn, title, last_move)

    def layout(self) -> tuple[tuple[PieceState | None, ...], ...]:
        return tuple(
            tuple(cell.piece.state if cell.piece else None for cell in row)
            for row in self.board
        )

    def restore(self, board: Board) -> None:
        """Load this snapshot into *board* (deep copy, threats recomputed)."""
        board.set_board(self.board, self.pieces, last_move=self.last_move)

    def __str__(self) -> str:
        rows = [f"Turn: {self.turn}  {self.title}"]
        for rank, row in enumerate(self.board):
            rows.append(" ".join(str(cell) for cell in row) + f" {8 - rank}")
        rows.append("a b c d e f g h")
        return "\n".join(rows)


class GameHistory:
    """Ordered snapshots of one game plus its saved name and date."""

    __slots__ = ("name", "save_date", "_snapshots")

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.save_date: datetime | None = None
        self._snapshots: list[Snapshot] = []

    # ── Recording ────────────────────────────────────────────────────────

    def add_state(
        self,
        cells: Sequence[Sequence[Cell]],
        turn: int,
        title: str,
        last_move: LastMove | None = None,
    ) -> Snapshot:
        """Deep-copy *cells* and append them as a new snapshot."""
        snapshot = Snapshot.capture(cells, turn, title, last_move)
        self._snapshots.append(snapshot)
        return snapshot

    def append(self, snapshot: Snapshot) -> None:
        self._snapshots.append(snapshot)

    def undo(self) -> Snapshot:
        """Drop the latest snapshot and return the one now at the end.

        Raises:
            HistoryBoundsExceeded: only the initial snapshot is left.
        """
        if len(self._snapshots) < 2:
            raise HistoryBoundsExceeded("Cannot undo past the start of the game")
        dropped = self._snapshots.pop()
        _LOGGER.debug("Undid snapshot %d (%s)", dropped.turn, dropped.title)
        return self._snapshots[-1]

    def set_name(self, name: str, when: datetime | None = None) -> None:
        """Name the game; naming happens on save, so the date is stamped too."""
        self.name = name
        self.save_date = when if when is not None else datetime.now()

    # ── Access ───────────────────────────────────────────────────────────

    @property
    def snapshots(self) -> tuple[Snapshot, ...]:
        return tuple(self._snapshots)

    @property
    def latest(self) -> Snapshot:
        if not self._snapshots:
            raise HistoryBoundsExceeded("History is empty")
        return self._snapshots[-1]

    def __len__(self) -> int:
        return len(self._snapshots)

    def __iter__(self) -> Iterator[Snapshot]:
        return iter(self._snapshots)

    def __getitem__(self, index: int) -> Snapshot:
        return self._snapshots[index]

    def __str__(self) -> str:
        date = self.save_date.strftime("%m/%d/%Y") if self.save_date else "NO DATE"
        return f"{self.name} ({date})"


class ReplayCursor:
    """Sequential cursor over a history, starting at the first snapshot."""

    __slots__ = ("_history", "_index")

    def __init__(self, history: GameHistory) -> None:
        if not len(history):
            raise HistoryBoundsExceeded("Cannot replay an empty history")
        self._history = history
        self._index = 0

    @property
    def position(self) -> int:
        return self._index

    def current(self) -> Snapshot:
        return self._history[self._index]

    def next(self) -> Snapshot:
        """Advance one snapshot; raises at the end without moving."""
        if self._index + 1 >= len(self._history):
            raise HistoryBoundsExceeded("Already at the end of the game")
        self._index += 1
        return self._history[self._index]

    def previous(self) -> Snapshot:
        """Step back one snapshot; raises at the start without moving."""
        if self._index <= 0:
            raise HistoryBoundsExceeded("Already at the start of the game")
        self._index -= 1
        return self._history[self._index]

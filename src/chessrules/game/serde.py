"""JSON-friendly (de)serialization of snapshots and whole game histories.

Layout::

    {
      "name": "...",
      "save_date": "2024-05-01T12:00:00" | null,
      "states": [
        {
          "board": [[null | {"kind", "color", "has_moved"}, ...] x8] x8,
          "pieces": [{"kind", "color", "has_moved", "rank", "file"}, ...],
          "turn": 3,
          "title": "Black's turn",
          "last_move": ["e2", "e4"] | null
        }
      ]
    }
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

from chessrules.core.cell import empty_grid, grid_pieces
from chessrules.core.enums import Color, PieceType
from chessrules.core.history import GameHistory, LastMove, Snapshot
from chessrules.core.piece import Piece
from chessrules.core.position import BOARD_SIZE, Position
from chessrules.exceptions import SnapshotFormatError

_LOGGER = logging.getLogger(__name__)


# ── Pieces ───────────────────────────────────────────────────────────────────


def _piece_to_dict(piece: Piece) -> dict[str, Any]:
    return {
        "kind": piece.piece_type.name.lower(),
        "color": piece.color.name.lower(),
        "has_moved": piece.has_moved,
    }


def _parse_kind(value: Any) -> PieceType:
    try:
        return PieceType[str(value).upper()]
    except KeyError:
        raise SnapshotFormatError(f"Unknown piece kind: {value!r}") from None


def _parse_color(value: Any) -> Color:
    try:
        return Color[str(value).upper()]
    except KeyError:
        raise SnapshotFormatError(f"Unknown color: {value!r}") from None


def _piece_from_dict(d: Any, position: Position) -> Piece:
    if not isinstance(d, dict):
        raise SnapshotFormatError(f"Piece entry must be an object, got {d!r}")
    try:
        kind, color = d["kind"], d["color"]
    except KeyError as exc:
        raise SnapshotFormatError(f"Piece entry missing {exc.args[0]!r}") from None
    return Piece(_parse_kind(kind), _parse_color(color), position, bool(d.get("has_moved", False)))


def _parse_index(value: Any, what: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value < BOARD_SIZE:
        raise SnapshotFormatError(f"Bad {what}: {value!r}")
    return value


# ── Snapshots ────────────────────────────────────────────────────────────────


def snapshot_to_dict(snapshot: Snapshot) -> dict[str, Any]:
    board = [
        [_piece_to_dict(cell.piece) if cell.piece is not None else None for cell in row]
        for row in snapshot.board
    ]
    pieces = [
        {
            **_piece_to_dict(p),
            "rank": p.position.rank,
            "file": p.position.file,
        }
        for p in snapshot.pieces
    ]
    last_move = None
    if snapshot.last_move is not None:
        src, dst = snapshot.last_move
        last_move = [src.label, dst.label]
    return {
        "board": board,
        "pieces": pieces,
        "turn": snapshot.turn,
        "title": snapshot.title,
        "last_move": last_move,
    }


def _parse_last_move(value: Any) -> LastMove | None:
    if value is None:
        return None
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise SnapshotFormatError(f"Bad last_move: {value!r}")
    try:
        return Position.from_label(str(value[0])), Position.from_label(str(value[1]))
    except ValueError as exc:
        raise SnapshotFormatError(str(exc)) from None


def snapshot_from_dict(d: Any) -> Snapshot:
    """Rebuild a snapshot; the grid is authoritative, the flat list must agree.

    Raises:
        SnapshotFormatError: on any structural problem.
    """
    if not isinstance(d, dict):
        raise SnapshotFormatError("Snapshot must be an object")
    rows = d.get("board")
    if (
        not isinstance(rows, list)
        or len(rows) != BOARD_SIZE
        or any(not isinstance(row, list) or len(row) != BOARD_SIZE for row in rows)
    ):
        raise SnapshotFormatError("Snapshot board must be an 8x8 array")

    grid = empty_grid()
    for rank, row in enumerate(rows):
        for file, entry in enumerate(row):
            if entry is not None:
                grid[rank][file].piece = _piece_from_dict(entry, Position(rank, file))

    pieces = grid_pieces(grid)
    listed = d.get("pieces")
    if listed is not None:
        if not isinstance(listed, list):
            raise SnapshotFormatError("Snapshot pieces must be an array")
        expected = sorted(
            (
                _parse_index(item.get("rank") if isinstance(item, dict) else None, "rank"),
                _parse_index(item.get("file"), "file"),
                _piece_from_dict(item, Position(0, 0)).state,
            )
            for item in listed
        )
        actual = sorted((p.position.rank, p.position.file, p.state) for p in pieces)
        if expected != actual:
            raise SnapshotFormatError("Snapshot piece list does not match its board")

    turn = d.get("turn")
    if not isinstance(turn, int) or isinstance(turn, bool) or turn < 0:
        raise SnapshotFormatError(f"Bad turn: {turn!r}")
    title = d.get("title", "")
    if not isinstance(title, str):
        raise SnapshotFormatError(f"Bad title: {title!r}")

    return Snapshot.capture(grid, turn, title, _parse_last_move(d.get("last_move")))


# ── Histories ────────────────────────────────────────────────────────────────


def history_to_dict(history: GameHistory) -> dict[str, Any]:
    return {
        "name": history.name,
        "save_date": history.save_date.isoformat() if history.save_date else None,
        "states": [snapshot_to_dict(s) for s in history],
    }


def history_from_dict(d: Any) -> GameHistory:
    if not isinstance(d, dict):
        raise SnapshotFormatError("History must be an object")
    states = d.get("states")
    if not isinstance(states, list) or not states:
        raise SnapshotFormatError("History must hold at least one state")

    history = GameHistory(str(d.get("name") or ""))
    raw_date = d.get("save_date")
    if raw_date is not None:
        try:
            history.save_date = datetime.fromisoformat(str(raw_date))
        except ValueError:
            raise SnapshotFormatError(f"Bad save_date: {raw_date!r}") from None
    for entry in states:
        history.append(snapshot_from_dict(entry))
    _LOGGER.debug("Loaded history %r with %d states", history.name, len(history))
    return history


def dumps_history(history: GameHistory, *, indent: int | None = None) -> str:
    return json.dumps(history_to_dict(history), indent=indent)


def loads_history(text: str) -> GameHistory:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SnapshotFormatError(f"Not valid JSON: {exc}") from None
    return history_from_dict(data)


__all__ = [
    "dumps_history",
    "history_from_dict",
    "history_to_dict",
    "loads_history",
    "snapshot_from_dict",
    "snapshot_to_dict",
]

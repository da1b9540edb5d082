"""Tests for snapshot / history serialization."""

import json
from datetime import datetime

import pytest

from chessrules.core.board import Board, new_game
from chessrules.core.enums import Color
from chessrules.core.position import Position
from chessrules.exceptions import SnapshotFormatError
from chessrules.game.serde import (
    dumps_history,
    history_from_dict,
    history_to_dict,
    loads_history,
    snapshot_from_dict,
    snapshot_to_dict,
)

sq = Position.from_label


def _played() -> Board:
    board = new_game()
    for color, (a, b) in zip(
        (Color.WHITE, Color.BLACK, Color.WHITE, Color.BLACK),
        (("e2", "e4"), ("a7", "a6"), ("e4", "e5"), ("d7", "d5")),
    ):
        src, dst = sq(a), sq(b)
        board.move_piece(src.file, src.rank, dst.file, dst.rank, color)
    board.history.set_name("Sample", datetime(2024, 5, 1, 12, 0))
    return board


class TestSnapshotDict:
    def test_layout(self) -> None:
        data = snapshot_to_dict(new_game().history.latest)
        assert data["turn"] == 0
        assert data["title"] == "Game start!"
        assert data["last_move"] is None
        assert data["board"][0][4] == {"kind": "king", "color": "black", "has_moved": False}
        assert data["board"][4][4] is None
        assert len(data["pieces"]) == 32
        assert data["pieces"][0] == {
            "kind": "rook", "color": "black", "has_moved": False, "rank": 0, "file": 0,
        }

    def test_last_move_uses_square_names(self) -> None:
        data = snapshot_to_dict(_played().history.latest)
        assert data["last_move"] == ["d7", "d5"]

    def test_round_trip_keeps_layout(self) -> None:
        snapshot = _played().history.latest
        restored = snapshot_from_dict(snapshot_to_dict(snapshot))
        assert restored.layout() == snapshot.layout()
        assert restored.last_move == snapshot.last_move
        assert (restored.turn, restored.title) == (snapshot.turn, snapshot.title)


class TestHistoryDict:
    def test_round_trip_through_json(self) -> None:
        board = _played()
        loaded = loads_history(dumps_history(board.history))
        assert loaded.name == "Sample"
        assert loaded.save_date == datetime(2024, 5, 1, 12, 0)
        assert len(loaded) == len(board.history)
        assert [s.layout() for s in loaded] == [s.layout() for s in board.history]

    def test_restored_board_keeps_en_passant(self) -> None:
        board = _played()
        loaded = loads_history(dumps_history(board.history))
        other = Board(standard_layout=False)
        loaded.latest.restore(other)
        assert sorted(other.legal_moves(Color.WHITE), key=str) == sorted(
            board.legal_moves(Color.WHITE), key=str
        )
        assert other.can_move_piece(4, 3, 3, 2, Color.WHITE)

    def test_unsaved_history_has_null_date(self) -> None:
        data = history_to_dict(new_game().history)
        assert data["save_date"] is None
        assert history_from_dict(data).save_date is None


class TestMalformed:
    def _data(self) -> dict:
        return history_to_dict(new_game().history)

    def test_unknown_kind(self) -> None:
        data = self._data()
        data["states"][0]["board"][0][0]["kind"] = "wizard"
        with pytest.raises(SnapshotFormatError):
            history_from_dict(data)

    def test_unknown_color(self) -> None:
        data = self._data()
        data["states"][0]["board"][7][4]["color"] = "green"
        with pytest.raises(SnapshotFormatError):
            history_from_dict(data)

    def test_wrong_shape(self) -> None:
        data = self._data()
        data["states"][0]["board"].pop()
        with pytest.raises(SnapshotFormatError):
            history_from_dict(data)

    def test_piece_list_disagrees(self) -> None:
        data = self._data()
        data["states"][0]["pieces"].pop()
        with pytest.raises(SnapshotFormatError):
            history_from_dict(data)

    def test_no_states(self) -> None:
        with pytest.raises(SnapshotFormatError):
            history_from_dict({"name": "x", "states": []})

    def test_bad_last_move(self) -> None:
        data = self._data()
        data["states"][0]["last_move"] = ["e2", "z9"]
        with pytest.raises(SnapshotFormatError):
            history_from_dict(data)

    def test_not_json(self) -> None:
        with pytest.raises(SnapshotFormatError):
            loads_history("{not json")

    def test_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            loads_history(json.dumps({"states": "nope"}))

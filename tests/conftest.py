"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import pytest

from chessrules.config import RulesSettings
from chessrules.core.board import Board
from chessrules.core.enums import Color, PieceType
from chessrules.core.piece import Piece
from chessrules.core.position import Position

BoardFactory = Callable[..., Board]


def sq(label: str) -> Position:
    """Square name → internal position, e.g. ``sq("e2") == Position(6, 4)``."""
    return Position.from_label(label)


def _parse(entry: str, moved: set[str]) -> Piece:
    # "Ke1" is a white king on e1, "re8" a black rook on e8.
    letter, label = entry[0], entry[1:]
    color = Color.WHITE if letter.isupper() else Color.BLACK
    return Piece(PieceType.from_letter(letter), color, sq(label), label in moved)


@pytest.fixture
def make_board() -> BoardFactory:
    """Build a board holding only the listed pieces."""

    def _make(
        *entries: str,
        settings: RulesSettings | None = None,
        moved: Iterable[str] = (),
        last_move: tuple[str, str] | None = None,
    ) -> Board:
        moved_set = set(moved)
        prev = (sq(last_move[0]), sq(last_move[1])) if last_move else None
        return Board.from_pieces(
            [_parse(e, moved_set) for e in entries], settings, last_move=prev
        )

    return _make


@pytest.fixture
def seeded_settings() -> RulesSettings:
    return RulesSettings(seed=1234)

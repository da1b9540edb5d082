"""Piece — a chess man on the board.

Kind and color are fixed at construction; position and ``has_moved`` change
as the game goes on. Movement is dispatched on :attr:`Piece.piece_type`
through :mod:`chessrules.core.movement`, so there is one class for all kinds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from chessrules.core import movement
from chessrules.core.enums import Color, PieceType
from chessrules.core.position import Position

if TYPE_CHECKING:
    from chessrules.core.board import Board

_UNICODE: dict[tuple[Color, PieceType], str] = {
    (Color.WHITE, PieceType.PAWN): "♙",
    (Color.WHITE, PieceType.KNIGHT): "♘",
    (Color.WHITE, PieceType.BISHOP): "♗",
    (Color.WHITE, PieceType.ROOK): "♖",
    (Color.WHITE, PieceType.QUEEN): "♕",
    (Color.WHITE, PieceType.KING): "♔",
    (Color.BLACK, PieceType.PAWN): "♟",
    (Color.BLACK, PieceType.KNIGHT): "♞",
    (Color.BLACK, PieceType.BISHOP): "♝",
    (Color.BLACK, PieceType.ROOK): "♜",
    (Color.BLACK, PieceType.QUEEN): "♛",
    (Color.BLACK, PieceType.KING): "♚",
}

PieceState = tuple[PieceType, Color, bool]


@dataclass(slots=True, eq=False)
class Piece:
    """A live piece. Equality is identity: two pawns are never "the same"."""

    piece_type: PieceType
    color: Color
    position: Position
    has_moved: bool = False

    # ── Movement contract ────────────────────────────────────────────────

    @property
    def direction_vectors(self) -> tuple[Position, ...]:
        return movement.direction_vectors(self.piece_type, self.color)

    def is_valid_movement(self, board: Board, destination: Position) -> bool:
        """Does *destination* match this piece's geometric pattern?"""
        return movement.is_valid_movement(self, board, destination)

    def is_path_clear(self, board: Board, destination: Position) -> Position | None:
        """First obstacle on the way to *destination*, or ``None`` if clear."""
        return movement.is_path_clear(self, board, destination)

    def get_all_moves(self, board: Board) -> list[Position] | None:
        """Every square this piece covers, or ``None`` when there are none."""
        return movement.get_all_moves(self, board)

    def can_reach_destination(self, board: Board, destination: Position) -> bool:
        return movement.can_reach_destination(self, board, destination)

    # ── Copying / comparison ─────────────────────────────────────────────

    def copy(self) -> Piece:
        return Piece(self.piece_type, self.color, self.position, self.has_moved)

    @property
    def state(self) -> PieceState:
        """Structural identity used by snapshots and board comparison."""
        return (self.piece_type, self.color, self.has_moved)

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        """Uppercase letter for White, lowercase for Black."""
        letter = self.piece_type.letter
        return letter if self.color == Color.WHITE else letter.lower()

    @property
    def symbol(self) -> str:
        """Unicode chess symbol, e.g. ♞."""
        return _UNICODE[(self.color, self.piece_type)]

"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from chessrules.core import Color, new_game

    board = new_game()
    if board.can_move_piece(4, 6, 4, 4, Color.WHITE):  # e2 → e4
        board.move_piece(4, 6, 4, 4, Color.WHITE)
    print(board.render())
"""

from chessrules.core.board import Board, MoveOutcome, new_game
from chessrules.core.cell import Cell
from chessrules.core.enums import BoardStatus, Color, GameResult, MoveRejection, PieceType
from chessrules.core.history import GameHistory, ReplayCursor, Snapshot
from chessrules.core.movement import PROMOTION_TYPES
from chessrules.core.piece import Piece
from chessrules.core.position import BOARD_SIZE, Position

__all__ = [
    # Enums
    "BoardStatus",
    "Color",
    "GameResult",
    "MoveRejection",
    "PieceType",
    # Domain objects
    "BOARD_SIZE",
    "Board",
    "Cell",
    "MoveOutcome",
    "PROMOTION_TYPES",
    "Piece",
    "Position",
    "new_game",
    # History
    "GameHistory",
    "ReplayCursor",
    "Snapshot",
]

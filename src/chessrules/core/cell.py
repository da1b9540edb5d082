"""Cell — one square of the grid, owning at most one piece."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from chessrules.core.piece import Piece
from chessrules.core.position import BOARD_SIZE, Position

Grid = list[list["Cell"]]
FrozenGrid = tuple[tuple["Cell", ...], ...]


@dataclass(slots=True)
class Cell:
    position: Position
    piece: Piece | None = None
    render_color: bool = False  # checkerboard shading, cosmetic only

    def copy(self) -> Cell:
        """Deep copy: the piece is duplicated too."""
        piece = self.piece.copy() if self.piece is not None else None
        return Cell(self.position, piece, self.render_color)

    def __str__(self) -> str:
        if self.piece is not None:
            return str(self.piece)
        return "." if not self.render_color else ","


def is_dark(rank: int, file: int) -> bool:
    return (rank + file) % 2 == 1


def empty_grid() -> Grid:
    return [
        [Cell(Position(rank, file), None, is_dark(rank, file)) for file in range(BOARD_SIZE)]
        for rank in range(BOARD_SIZE)
    ]


def copy_grid(cells: Sequence[Sequence[Cell]]) -> Grid:
    """Deep copy of an 8×8 grid; piece positions follow their cells."""
    if len(cells) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in cells):
        raise ValueError("Board must be an 8x8 grid of cells")
    grid: Grid = []
    for rank, row in enumerate(cells):
        new_row: list[Cell] = []
        for file, cell in enumerate(row):
            clone = cell.copy()
            clone.position = Position(rank, file)
            if clone.piece is not None:
                clone.piece.position = clone.position
            new_row.append(clone)
        grid.append(new_row)
    return grid


def freeze_grid(cells: Sequence[Sequence[Cell]]) -> FrozenGrid:
    return tuple(tuple(row) for row in copy_grid(cells))


def grid_pieces(cells: Sequence[Sequence[Cell]]) -> list[Piece]:
    """Live pieces in row-major order (rank 0..7, file 0..7)."""
    return [cell.piece for row in cells for cell in row if cell.piece is not None]

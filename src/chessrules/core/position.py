"""Position — an immutable rank/file coordinate with vector arithmetic.

Grid layout (rank is the row index, file the column index)::

    rank 0 → a8 b8 ... h8   (Black's back rank)
    ...
    rank 7 → a1 b1 ... h1   (White's back rank)

The same type doubles as a direction vector, so values outside [0, 7] are
legal intermediates while walking; :meth:`Position.within_bounds` is the
board check.
"""

from __future__ import annotations

from dataclasses import dataclass

BOARD_SIZE = 8
MIN_INDEX = 0
MAX_INDEX = BOARD_SIZE - 1

_FILES = "abcdefgh"


@dataclass(frozen=True, slots=True)
class Position:
    """Immutable (rank, file) pair."""

    rank: int
    file: int

    # ── Arithmetic ───────────────────────────────────────────────────────

    def __add__(self, other: Position) -> Position:
        return Position(self.rank + other.rank, self.file + other.file)

    @staticmethod
    def add(a: Position, b: Position) -> Position:
        return a + b

    @staticmethod
    def manhattan_distance(a: Position, b: Position) -> Position:
        """Absolute rank and file displacement between *a* and *b*."""
        return Position(abs(a.rank - b.rank), abs(a.file - b.file))

    @staticmethod
    def signed_distance(a: Position, b: Position) -> Position:
        """Per-axis displacement ``a - b``."""
        return Position(a.rank - b.rank, a.file - b.file)

    @staticmethod
    def within_bounds(p: Position) -> bool:
        return MIN_INDEX <= p.rank <= MAX_INDEX and MIN_INDEX <= p.file <= MAX_INDEX

    # ── Ray walking ──────────────────────────────────────────────────────

    @staticmethod
    def max_distance_along(direction: Position, source: Position) -> Position:
        """Farthest in-bounds square reached by stepping *direction* from *source*.

        Returns *source* itself when the first step already leaves the board.
        """
        farthest = source
        current = source
        while Position.within_bounds(current):
            farthest = current
            current = current + direction
        return farthest

    @staticmethod
    def positions_between(
        direction: Position, source: Position, bound: Position
    ) -> list[Position]:
        """Squares from *source* (exclusive) towards *bound* (exclusive)."""
        positions: list[Position] = []
        current = source + direction
        while Position.within_bounds(current) and current != bound:
            positions.append(current)
            current = current + direction
        return positions

    @staticmethod
    def positions_between_max(direction: Position, source: Position) -> list[Position]:
        """Every in-bounds square along *direction*, *source* excluded."""
        positions: list[Position] = []
        current = source + direction
        while Position.within_bounds(current):
            positions.append(current)
            current = current + direction
        return positions

    # ── Display ──────────────────────────────────────────────────────────

    @property
    def label(self) -> str:
        """Human-readable square name, e.g. (7, 4) → 'e1'."""
        if not Position.within_bounds(self):
            return f"({self.rank},{self.file})"
        return f"{_FILES[self.file]}{BOARD_SIZE - self.rank}"

    @classmethod
    def from_label(cls, name: str) -> Position:
        """Parse a square name, e.g. 'e2' → Position(6, 4)."""
        if len(name) != 2 or name[0] not in _FILES or name[1] not in "12345678":
            raise ValueError(f"Invalid square name: {name!r}")
        return cls(BOARD_SIZE - int(name[1]), _FILES.index(name[0]))

    def __str__(self) -> str:
        return self.label

"""Core enumerations for the chess rules domain."""

from __future__ import annotations

from enum import IntEnum, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.capitalize()


class PieceType(IntEnum):
    """Chess piece kinds ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    @property
    def letter(self) -> str:
        """Single uppercase letter, e.g. ``N`` for a knight."""
        return _LETTERS[self]

    @classmethod
    def from_letter(cls, letter: str) -> PieceType:
        """Parse a piece letter in either case, e.g. ``'q'`` → QUEEN."""
        try:
            return _FROM_LETTER[letter.upper()]
        except (KeyError, AttributeError):
            raise ValueError(f"Invalid piece letter: {letter!r}") from None


_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "P",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_FROM_LETTER: dict[str, PieceType] = {v: k for k, v in _LETTERS.items()}


class BoardStatus(IntEnum):
    """Check status reported after every move, most severe first."""

    WHITE_IN_CHECKMATE = auto()
    BLACK_IN_CHECKMATE = auto()
    WHITE_IN_CHECK = auto()
    BLACK_IN_CHECK = auto()
    NO_CHECKS = auto()

    @property
    def is_checkmate(self) -> bool:
        return self in (BoardStatus.WHITE_IN_CHECKMATE, BoardStatus.BLACK_IN_CHECKMATE)


class MoveRejection(IntEnum):
    """Why :meth:`Board.check_move` refused a move (first failing rule)."""

    OUT_OF_BOUNDS = auto()
    NO_PIECE = auto()
    WRONG_COLOR = auto()
    SAME_SQUARE = auto()
    UNREACHABLE = auto()
    SELF_CHECK = auto()


class GameResult(IntEnum):
    """Outcome of a game."""

    IN_PROGRESS = 0
    WHITE_WINS = 1
    BLACK_WINS = 2
    DRAW = 3

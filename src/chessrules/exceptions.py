"""Exception hierarchy for the rules engine.

Illegal moves are never raised: :meth:`Board.check_move` reports them as a
:class:`~chessrules.core.enums.MoveRejection`. The exceptions below cover the
bounded, recoverable failures a caller is expected to react to.
"""

from __future__ import annotations


class ChessRulesError(Exception):
    """Base class for every error raised by :mod:`chessrules`."""


class HistoryBoundsExceeded(ChessRulesError, IndexError):
    """Undo past the first snapshot, or replay past either end."""


class InvalidPromotionRequest(ChessRulesError, ValueError):
    """Promotion asked for the wrong piece, the wrong rank or an unknown type."""


class SnapshotFormatError(ChessRulesError, ValueError):
    """A serialized game history does not match the expected layout."""

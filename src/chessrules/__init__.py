"""chessrules — a two-player chess rules engine with replayable history."""

__version__ = "0.1.0"

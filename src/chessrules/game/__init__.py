"""Game layer — lifecycle, undo policy, events and persistence."""

from chessrules.game.controller import GameController, GameEvents
from chessrules.game.interfaces import DrawOffer, GameEndReason, GamePhase, IGameController
from chessrules.game.replay import ReplaySession
from chessrules.game.serde import dumps_history, history_from_dict, history_to_dict, loads_history
from chessrules.game.state import GameState, MoveRecord

__all__ = [
    "DrawOffer",
    "GameController",
    "GameEndReason",
    "GameEvents",
    "GamePhase",
    "GameState",
    "IGameController",
    "MoveRecord",
    "ReplaySession",
    "dumps_history",
    "history_from_dict",
    "history_to_dict",
    "loads_history",
]

"""Command-line entry point: random self-play, board display and replay."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from chessrules.config import RulesSettings
from chessrules.core.board import new_game
from chessrules.exceptions import ChessRulesError
from chessrules.game.controller import GameController
from chessrules.game.replay import ReplaySession
from chessrules.game.serde import dumps_history, loads_history

_LOGGER = logging.getLogger(__name__)


def _settings(args: argparse.Namespace) -> RulesSettings:
    return RulesSettings(seed=args.seed, checkmate_scope=args.checkmate_scope)


def cmd_show(args: argparse.Namespace) -> int:
    print(new_game().render())
    return 0


def cmd_play(args: argparse.Namespace) -> int:
    controller = GameController(_settings(args))
    controller.new_game()
    state = controller.state

    while state.ply_count < args.max_turns and not state.is_game_over:
        if not controller.random_move():
            _LOGGER.info("%s cannot move, stopping", state.side_to_move)
            break

    board = state.board
    print(board.render())
    print()
    print(f"Turns played: {state.ply_count}")
    print(board.history.latest.title)

    if args.save is not None:
        board.history.set_name(args.save.stem)
        args.save.write_text(dumps_history(board.history, indent=1), encoding="utf-8")
        print(f"Saved to {args.save}")
    return 0


def cmd_replay(args: argparse.Namespace) -> int:
    try:
        history = loads_history(args.path.read_text(encoding="utf-8"))
        session = ReplaySession(history)
    except (OSError, ChessRulesError) as exc:
        print(f"Cannot replay {args.path}: {exc}")
        return 1

    print(history)
    while True:
        print()
        print(f"Turn {session.board.turn}: {session.title}")
        print(session.board.render())
        if session.at_end:
            return 0
        session.next()


def main(argv: list[str] | None = None) -> int:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="count", default=0, help="-v info, -vv debug")

    ap = argparse.ArgumentParser(prog="chessrules")
    sub = ap.add_subparsers(dest="cmd", required=True)

    ss = sub.add_parser("show", parents=[common], help="Show the starting board")
    ss.set_defaults(fn=cmd_show)

    pl = sub.add_parser("play", parents=[common], help="Random self-play")
    pl.add_argument("--seed", type=int, default=None)
    pl.add_argument("--max-turns", type=int, default=200)
    pl.add_argument(
        "--checkmate-scope", default="all_pieces", choices=["all_pieces", "king_only"]
    )
    pl.add_argument("--save", type=Path, default=None, help="write the history as JSON")
    pl.set_defaults(fn=cmd_play)

    rp = sub.add_parser("replay", parents=[common], help="Step through a saved history")
    rp.add_argument("path", type=Path)
    rp.set_defaults(fn=cmd_replay)

    args = ap.parse_args(argv)
    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return int(args.fn(args))


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional, Tuple

from .benchmarks import BenchConfig, run_benchmark
from .config import GameConfig, search_cache_from_env
from .console import SetupError, announce, ask_setup, open_console, play, render_board
from .game_basics import Board, parse_board, serialize_board
from .orchestrator import Game
from .players import DuplicateSymbol, computer_pair, make_players
from .solver import Search, SearchResult

DIST_NAME = "tictactoe-engine"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ttt", description="Tic-tac-toe with a perfect-play computer opponent")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )

    p_play = sub.add_parser("play", help="Play an interactive game on the console")
    p_play.add_argument(
        "--opponent", choices=["human", "computer"], default=None, help="Opponent kind (asked if omitted)"
    )
    p_play.add_argument("--name1", default=None, help="Player 1 name (asked if omitted)")
    p_play.add_argument("--mark1", default=None, help="Player 1 symbol (asked if omitted, default O)")
    p_play.add_argument("--name2", default=None, help="Player 2 name for human games")
    p_play.add_argument("--mark2", default=None, help="Player 2 symbol for human games (default X)")
    p_play.add_argument("--no-cache", action="store_true", help="Disable the search transposition cache")

    p_sol = sub.add_parser("solve", help="Best move for the side to move (board like XX.OO....)")
    p_sol.add_argument("--board", help="9-character board; . - _ or space mark empty cells (omit with --stdin)")
    p_sol.add_argument(
        "--marks", default="XO", help="The two marks, first mover first (default: XO)"
    )
    p_sol.add_argument(
        "--stdin", action="store_true", help="Read many boards from stdin and stream CSV output"
    )
    p_sol.add_argument("--no-cache", action="store_true", help="Disable the search transposition cache")

    p_self = sub.add_parser("selfplay", help="Computer vs computer from the empty board")
    p_self.add_argument("--marks", default="XO", help="The two marks, first mover first (default: XO)")
    p_self.add_argument("--no-cache", action="store_true", help="Disable the search transposition cache")

    p_bench = sub.add_parser("bench", help="Time full searches from the empty board")
    p_bench.add_argument("--repeats", type=int, default=5, help="Number of timed searches (default: 5)")
    p_bench.add_argument("--no-cache", action="store_true", help="Disable the search transposition cache")
    p_bench.add_argument(
        "--tracking",
        choices=["none", "mlflow"],
        default="none",
        help="Experiment tracking backend",
    )
    p_bench.add_argument(
        "--log-dir",
        type=Path,
        default=Path("runs"),
        help="Directory for tracking logs (for mlflow local backend)",
    )

    return p


def _print_info() -> None:
    import importlib.util
    import platform
    import sys

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy", "mlflow"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def _parse_marks(raw: str) -> Optional[Tuple[str, str]]:
    raw = raw.strip().upper()
    if len(raw) != 2 or raw[0] == raw[1] or " " in raw:
        return None
    return raw[0], raw[1]


def _side_to_move(board: Board, marks: Tuple[str, str]) -> Optional[str]:
    """Mark to move on a well-formed board, or None if the board is not reachable."""
    first, second = marks
    if any(m not in marks for m in board.marks()):
        return None
    n1 = board.snapshot().count(first)
    n2 = board.snapshot().count(second)
    if n1 == n2:
        return first
    if n1 == n2 + 1:
        return second
    return None


def _solve_one(raw: str, marks: Tuple[str, str], use_cache: bool = True) -> Optional[Tuple[str, SearchResult]]:
    try:
        board = parse_board(raw.upper())
    except ValueError:
        return None
    to_move = _side_to_move(board, marks)
    if to_move is None or board.is_terminal():
        return None
    other = marks[1] if to_move == marks[0] else marks[0]
    return to_move, Search(to_move, other, use_cache=use_cache).best_move(board, to_move)


def _cmd_solve(ns: argparse.Namespace) -> int:
    marks = _parse_marks(ns.marks)
    if marks is None:
        logging.error("--marks needs two distinct characters, got %r", ns.marks)
        return 2
    use_cache = search_cache_from_env() and not ns.no_cache
    if ns.stdin:
        import csv as _csv
        import sys as _sys

        w = _csv.writer(_sys.stdout)
        w.writerow(["board", "to_move", "move", "score"])
        for line in _sys.stdin:
            raw = line.rstrip("\r\n")
            if not raw.strip():
                continue
            solved = _solve_one(raw, marks, use_cache)
            if solved is None:
                continue
            to_move, res = solved
            w.writerow([raw, to_move, res.move, res.score])
        return 0
    solved = _solve_one(ns.board or "", marks, use_cache)
    if solved is None:
        logging.error("Invalid board. Must be 9 cells of %s or empty, reachable and not finished.", "/".join(marks))
        return 2
    to_move, res = solved
    logging.info(
        "to_move=%s move=%d position=%d score=%d scores=%s nodes=%d",
        to_move,
        res.move,
        res.move + 1,
        res.score,
        list(res.scores),
        res.nodes,
    )
    return 0


def _cmd_selfplay(ns: argparse.Namespace) -> int:
    marks = _parse_marks(ns.marks)
    if marks is None:
        logging.error("--marks needs two distinct characters, got %r", ns.marks)
        return 2
    use_cache = search_cache_from_env() and not ns.no_cache
    game = Game(computer_pair(*marks, use_cache=use_cache))
    result = game.run()
    print(render_board(game.board))
    print(announce(result))
    logging.info("moves=%s final=%s", game.history, serialize_board(game.board))
    return 0


def _cmd_play(ns: argparse.Namespace) -> int:
    try:
        config = GameConfig.from_env().override(
            name1=ns.name1,
            mark1=ns.mark1.upper() if ns.mark1 else None,
            name2=ns.name2,
            mark2=ns.mark2.upper() if ns.mark2 else None,
            opponent=ns.opponent,
        )
    except ValueError as exc:
        logging.error("Invalid game configuration: %s", exc)
        return 2
    if ns.no_cache:
        config = config.override(search_cache=False)
    with open_console() as io:
        io.say("Welcome to Tic-Tac-Toe!\n")
        try:
            config = ask_setup(io, config)
            players = make_players(config)
        except DuplicateSymbol as exc:
            io.say(str(exc))
            return 1
        except SetupError as exc:
            logging.error("%s", exc)
            return 2
        except EOFError:
            logging.error("Input closed during setup")
            return 1
        try:
            play(io, players)
        except EOFError:
            logging.error("Input closed before the game finished")
            return 1
    return 0


def _cmd_bench(ns: argparse.Namespace) -> int:
    if ns.repeats < 1:
        logging.error("--repeats must be at least 1: %s", ns.repeats)
        return 2
    res = run_benchmark(BenchConfig(
        repeats=ns.repeats,
        use_cache=not ns.no_cache,
        tracking=ns.tracking,
        log_dir=ns.log_dir,
    ))
    print(json.dumps(asdict(res)))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    # Early exits
    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver(DIST_NAME))
        except Exception:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    if ns.cmd == "play":
        return _cmd_play(ns)
    if ns.cmd == "solve":
        return _cmd_solve(ns)
    if ns.cmd == "selfplay":
        return _cmd_selfplay(ns)
    if ns.cmd == "bench":
        return _cmd_bench(ns)

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _ver
from typing import Optional, TextIO

from .board import Board, BoardError, Player, is_valid_state, outcome
from .config import SearchConfig, default_side
from .game import Game, IllegalMoveError, play_out
from .search import search

BOARD_HELP = "Board string, row-major, X/O for pieces and _ or . for empty, e.g. XX_OO____"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="minimax-ttt", description="Perfect-play tic-tac-toe engine")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )

    p_sol = sub.add_parser("solve", help="Best move for a player on a given board")
    p_sol.add_argument("--board", help=BOARD_HELP + " (omit with --stdin)")
    p_sol.add_argument(
        "--player",
        choices=["X", "O"],
        default=Player.MACHINE.value,
        help="Side to move and maximize for (default: X)",
    )
    p_sol.add_argument(
        "--stdin", action="store_true", help="Read many boards from stdin and stream CSV output"
    )
    p_sol.add_argument("--prune", action="store_true", help="Use alpha-beta pruning")
    p_sol.add_argument(
        "--discount-depth",
        action="store_true",
        help="Prefer faster wins and slower losses",
    )

    p_play = sub.add_parser("play", help="Play against the engine in the terminal")
    p_play.add_argument("--side", type=int, default=None, help="Board side length (default: 3)")
    p_play.add_argument(
        "--first",
        choices=["human", "machine"],
        default="human",
        help="Who moves first (default: human)",
    )

    p_self = sub.add_parser("selfplay", help="Let the engine play both sides")
    p_self.add_argument("--side", type=int, default=None, help="Board side length (default: 3)")
    p_self.add_argument(
        "--first",
        choices=["human", "machine"],
        default="human",
        help="Who moves first (default: human)",
    )

    return p


def _print_info() -> None:
    import importlib.util
    import platform

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def _parse_board(raw: str) -> Board:
    board = Board.parse(raw)
    if not is_valid_state(board):
        raise BoardError("Board is not a valid game state.")
    return board


def render(board: Board) -> str:
    width = len(str(len(board) - 1))
    sep = "\n" + "+".join(["-" * (width + 2)] * board.side) + "\n"
    rows = []
    for r, row in enumerate(board.rows()):
        cells = []
        for c, v in enumerate(row):
            label = v.value if v is not None else str(r * board.side + c)
            cells.append(f" {label:>{width}} ")
        rows.append("|".join(cells))
    return sep.join(rows)


def _solve(ns: argparse.Namespace, cfg: SearchConfig) -> int:
    if ns.stdin:
        import csv as _csv

        w = _csv.writer(sys.stdout)
        w.writerow(["board", "player", "move", "score"])
        for line in sys.stdin:
            raw = line.strip()
            if not raw:
                continue
            try:
                board = _parse_board(raw)
            except BoardError as exc:
                logging.warning("Skipping %r: %s", raw, exc)
                continue
            res = search(board, ns.player, cfg)
            w.writerow([raw, ns.player, "" if res.move is None else res.move, res.score])
        return 0

    try:
        board = _parse_board(ns.board or "")
    except BoardError as exc:
        logging.error("Invalid board: %s", exc)
        return 2
    if outcome(board) is not None:
        logging.error("Board is already decided (%s); nothing to search.", outcome(board).value)
        return 2
    res = search(board, ns.player, cfg)
    logging.info("move=%s score=%d nodes=%d", res.move, res.score, res.nodes)
    return 0


def _read_move(game: Game, stdin: TextIO) -> Optional[int]:
    while True:
        print(f"Your move (0-{len(game.board) - 1}, q to quit): ", end="", flush=True)
        line = stdin.readline()
        if not line:
            return None
        raw = line.strip().lower()
        if raw in ("q", "quit"):
            return None
        try:
            index = int(raw)
        except ValueError:
            logging.error("Not a cell number: %r", raw)
            continue
        if index not in game.legal_moves():
            logging.error("Cell %d is not available", index)
            continue
        return index


def _play(ns: argparse.Namespace, stdin: TextIO) -> int:
    side = ns.side or default_side()
    first = Player.MACHINE if ns.first == "machine" else Player.HUMAN
    game = Game(side=side, first=first, config=SearchConfig.from_env(SearchConfig.for_side(side)))
    if first is Player.MACHINE:
        logging.info("Machine plays %d", game.machine_move())
    while not game.is_over:
        print(render(game.board))
        index = _read_move(game, stdin)
        if index is None:
            logging.info("Game abandoned")
            return 1
        reply = game.human_move(index)
        if reply is not None:
            logging.info("Machine plays %d", reply)
    print(render(game.board))
    print(game.message)
    return 0


def _selfplay(ns: argparse.Namespace) -> int:
    side = ns.side or default_side()
    first = Player.MACHINE if ns.first == "machine" else Player.HUMAN
    game = Game(side=side, first=first, config=SearchConfig.from_env(SearchConfig.for_side(side)))
    result = play_out(game)
    print(render(game.board))
    logging.info(
        "outcome=%s moves=%s",
        result.value,
        " ".join(f"{m.player.value}{m.index}" for m in game.history),
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if getattr(ns, "version", False):
        try:
            print(_ver("minimax-ttt"))
        except PackageNotFoundError:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    try:
        if ns.cmd == "solve":
            env = SearchConfig.from_env()
            cfg = SearchConfig(
                prune=ns.prune or env.prune,
                discount_depth=ns.discount_depth or env.discount_depth,
                transpositions=env.transpositions,
            )
            return _solve(ns, cfg)
        if ns.cmd == "play":
            return _play(ns, sys.stdin)
        if ns.cmd == "selfplay":
            return _selfplay(ns)
    except (BoardError, IllegalMoveError) as exc:
        logging.error("%s", exc)
        return 2

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

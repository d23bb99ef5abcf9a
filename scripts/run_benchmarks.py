#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import math
import statistics as stats
import time
from dataclasses import dataclass
from typing import Dict, List, Tuple

from minimax_ttt.board import Board, Player
from minimax_ttt.config import SearchConfig
from minimax_ttt.search import search


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    m = stats.fmean(values)
    s = stats.pstdev(values) if len(values) > 1 else 0.0
    z = 1.96
    half = z * (s / math.sqrt(len(values)))
    return m, half


@dataclass
class Config:
    repeats: int = 5
    board: str = "_________"


CONFIGS: Dict[str, SearchConfig] = {
    "plain": SearchConfig(),
    "prune": SearchConfig(prune=True),
    "transpositions": SearchConfig(transpositions=True),
    "prune+transpositions": SearchConfig(prune=True, transpositions=True),
}


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Time search() under each engine configuration")
    p.add_argument("--repeats", type=int, default=Config.repeats)
    p.add_argument("--board", default=Config.board)
    ns = p.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    cfg = Config(repeats=ns.repeats, board=ns.board)
    board = Board.parse(cfg.board)
    for name, search_cfg in CONFIGS.items():
        times: List[float] = []
        nodes = 0
        move = None
        for _ in range(cfg.repeats):
            t0 = time.perf_counter()
            res = search(board, Player.MACHINE, search_cfg)
            times.append(time.perf_counter() - t0)
            nodes, move = res.nodes, res.move
        m, h = ci95(times)
        logging.info("%-22s move=%s nodes=%d mean=%.4fs ± %.4fs (95%% CI)", name, move, nodes, m, h)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

import pytest

from minimax_ttt.board import Board, Player
from minimax_ttt.config import SearchConfig
from minimax_ttt.search import search

pytest.importorskip("pytest_benchmark")


@pytest.mark.parametrize(
    "cfg",
    [SearchConfig(prune=True), SearchConfig(transpositions=True)],
    ids=["prune", "transpositions"],
)
def test_benchmark_empty_board(benchmark, cfg: SearchConfig):
    res = benchmark(search, Board(), Player.MACHINE, cfg)
    assert (res.move, res.score) == (0, 0)

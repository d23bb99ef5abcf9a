import math

import pytest

from minimax_ttt.board import Board, BoardError, Player, has_win
from minimax_ttt.config import SearchConfig
from minimax_ttt.search import SearchResult, best_move, search
from minimax_ttt.solver import solve_state

X, O = Player.MACHINE, Player.HUMAN

CONFIGS = [
    SearchConfig(),
    SearchConfig(prune=True),
    SearchConfig(transpositions=True),
    SearchConfig(prune=True, transpositions=True),
]


@pytest.fixture(scope="module")
def empty_board_result() -> SearchResult:
    # Full game tree from the empty board, searched once for the module.
    return search(Board(), X)


def test_completes_top_row():
    b = Board.parse("XX_OO____")
    for cfg in CONFIGS:
        res = search(b, X, cfg)
        assert res.move == 2
        assert res.score == 10


def test_blocks_opposite_corner_fork():
    b = Board.parse("O___X___O")
    res = search(b, X)
    assert res.score == 0
    # Only an edge avoids the fork; lowest index among them.
    assert res.move == 1
    after = b.copy()
    after.place(res.move, X)
    assert solve_state(after.cells, O)['value'] <= 0


def test_empty_board_is_a_tie_and_picks_lowest_index(empty_board_result: SearchResult):
    assert empty_board_result.score == 0
    assert empty_board_result.move == 0


def test_empty_board_visits_whole_game_tree(empty_board_result: SearchResult):
    assert empty_board_result.nodes == 549946
    bound = sum(math.perm(9, k) for k in range(10))
    assert empty_board_result.nodes <= bound


def test_pruning_visits_fewer_nodes_and_agrees(empty_board_result: SearchResult):
    pruned = search(Board(), X, SearchConfig(prune=True))
    assert pruned.nodes < empty_board_result.nodes
    assert (pruned.score, pruned.move) == (empty_board_result.score, empty_board_result.move)


def test_board_restored_after_search():
    b = Board.parse("O___X____")
    before = b.cells
    for cfg in CONFIGS:
        search(b, O, cfg)
        assert b.cells == before


def test_human_can_be_the_maximizer():
    res = search(Board.parse("OO_XX____"), O)
    assert (res.move, res.score) == (2, 10)


def test_forced_loss_scores_minus_ten():
    # O threatens 1 and 5 at once; every X reply loses, lowest index reported.
    b = Board.parse("O_O_X_X_O")
    res = search(b, X)
    assert (res.move, res.score) == (1, -10)


def test_opponent_line_checked_first():
    b = Board.parse("OX__O__XO")
    assert has_win(b, O)
    assert search(b, X) == SearchResult(score=-10, move=None, nodes=1)


def test_terminal_inputs_return_no_move(caplog):
    full = Board.parse("XOXXOOOXX")
    with caplog.at_level("WARNING"):
        res = search(full, X)
    assert res.move is None and res.score == 0
    assert "terminal board" in caplog.text
    won = Board.parse("XXXOO____")
    assert search(won, X).score == 10
    assert search(won, O).score == -10


def test_tie_break_prefers_lower_index():
    # X wins at 5 or 7 immediately, and 6 or 8 win a move later.
    b = Board.parse("OXOXX____")
    res = search(b, X)
    sol = solve_state(b.cells, X)
    assert res.score == 10
    assert len(sol['optimal_moves']) > 1
    assert res.move == min(sol['optimal_moves']) == 5


def test_depth_discount_prefers_faster_win():
    # 0 blocks O and forks (win in three plies); 7 wins at once.
    b = Board.parse("_XOOX_O__")
    plain = search(b, X)
    assert (plain.move, plain.score) == (0, 10)
    for cfg in (SearchConfig(discount_depth=True), SearchConfig(discount_depth=True, prune=True)):
        fast = search(b, X, cfg)
        assert (fast.move, fast.score) == (7, 9)


def test_accepts_cell_sequence_and_string_player():
    assert best_move([X, X, None, O, O, None, None, None, None], "X") == 2


def test_invalid_player_rejected():
    with pytest.raises(BoardError):
        search(Board(), "Z")


def test_deterministic():
    b = Board.parse("O___X___O")
    assert search(b, X) == search(b, X)


def test_4x4_near_endgame_with_pruning():
    b = Board.parse("XXX_OOO_XOXO____")
    res = search(b, X, SearchConfig.for_side(4))
    assert res.move == 3
    assert res.score == 10

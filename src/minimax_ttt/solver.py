"""
Exact game-theoretic evaluator (negamax with memoization), from the side-to-move perspective.
Used as an independent reference for the search engine.
Tie-break policy for plies_to_end:
- Prefer win over draw over loss.
- Among wins/draws, prefer shorter distance (plies) to termination.
- Among losses, prefer longer distance (delay the loss).
optimal_moves lists every move achieving the value, regardless of distance.
"""
from collections import deque
from functools import lru_cache
from typing import Dict, Iterator, List, Optional, Tuple

from .board import Board, Outcome, Player, empty_cells, outcome, side_to_move

Cells = Tuple[Optional[Player], ...]


def apply_move_t(cells: Cells, idx: int, player: Player) -> Cells:
    lst = list(cells)
    lst[idx] = player
    return tuple(lst)


def _better_dtt(q: int, dtt: int, best_dtt: int) -> bool:
    if q == -1:
        return dtt > best_dtt
    return dtt < best_dtt


@lru_cache(maxsize=None)
def solve_state(cells: Cells, to_move: Player, side: int = 3) -> Dict:
    board = Board(cells, side=side)
    n = side * side
    result = outcome(board)
    if result is not None:
        # Any completed line was made by the previous mover.
        value = 0 if result is Outcome.TIE else -1
        return {
            'value': value,
            'plies_to_end': 0,
            'optimal_moves': tuple(),
            'q_values': tuple([None] * n),
            'dtt_action': tuple([None] * n),
        }
    q_vals: List[Optional[int]] = [None] * n
    dtt_action: List[Optional[int]] = [None] * n
    best_val: Optional[int] = None
    best_dtt: Optional[int] = None
    best_moves: List[int] = []
    for mv in empty_cells(board):
        child = solve_state(apply_move_t(cells, mv, to_move), to_move.opponent, side)
        q = -child['value']
        q_vals[mv] = q
        dtt_action[mv] = 1 + child['plies_to_end']
        if best_val is None or q > best_val:
            best_val = q
            best_dtt = dtt_action[mv]
            best_moves = [mv]
        elif q == best_val:
            best_moves.append(mv)
            if _better_dtt(q, dtt_action[mv], best_dtt):
                best_dtt = dtt_action[mv]
    return {
        'value': best_val,
        'plies_to_end': best_dtt,
        'optimal_moves': tuple(sorted(best_moves)),
        'q_values': tuple(q_vals),
        'dtt_action': tuple(dtt_action),
    }


def reachable_positions(first: Player = Player.HUMAN, side: int = 3) -> Iterator[Tuple[Board, Player]]:
    """Every position reachable from the empty board when `first` opens, with its mover.

    Terminal positions are included; play stops at them.
    """
    start: Cells = tuple([None] * (side * side))
    q = deque([start])
    seen = {start}
    while q:
        s = q.popleft()
        board = Board(s, side=side)
        p = side_to_move(board, first)
        yield board, p
        if outcome(board) is not None:
            continue
        for mv in empty_cells(board):
            child = apply_move_t(s, mv, p)
            if child not in seen:
                seen.add(child)
                q.append(child)


def solve_all_reachable(first: Player = Player.HUMAN, side: int = 3) -> Dict[Tuple[str, str], Dict]:
    """Solve every position reachable when `first` opens, keyed by (board string, mover)."""
    solved = {}
    for board, p in reachable_positions(first, side):
        solved[(str(board), p.value)] = solve_state(board.cells, p, side)
    return solved


def clear_cache() -> None:
    solve_state.cache_clear()

"""
Full-depth minimax from a fixed root perspective.
Scoring and tie-break policy:
- Terminal scores are +10 (root holds a line), -10 (opponent holds a line), 0 (full board).
- With `discount_depth` a win scores base - plies and a loss -(base - plies), so the
  root prefers faster wins and slower losses.
- Moves are tried in ascending cell order and only a strictly better score replaces the
  current best, so the lowest index wins among equally scored moves. Alpha-beta keeps
  that order and that comparison, so pruning never changes the chosen move.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple, Union

from .board import Board, BoardError, Player, empty_cells, has_win, is_full
from .config import SearchConfig

WIN_SCORE = 10
TIE_SCORE = 0
_INF = 10**9


@dataclass
class SearchResult:
    score: int
    move: Optional[int]
    nodes: int = 0


class _Search:
    def __init__(self, board: Board, root: Player, config: SearchConfig) -> None:
        self.board = board
        self.root = root
        self.config = config
        self.nodes = 0
        # key: (cells, to_move, depth or None) -> exact score
        self.table: Dict[Tuple[tuple, Player, Optional[int]], int] = {}
        self.base = max(WIN_SCORE, len(board) + 1) if config.discount_depth else WIN_SCORE

    def _win(self, depth: int) -> int:
        return self.base - depth if self.config.discount_depth else self.base

    def _terminal_score(self, depth: int) -> Optional[int]:
        if has_win(self.board, self.root.opponent):
            return -self._win(depth)
        if has_win(self.board, self.root):
            return self._win(depth)
        if is_full(self.board):
            return TIE_SCORE
        return None

    def minimax(self, to_move: Player, depth: int, alpha: int, beta: int) -> Tuple[int, Optional[int]]:
        self.nodes += 1
        terminal = self._terminal_score(depth)
        if terminal is not None:
            return terminal, None

        key = None
        if self.config.transpositions:
            key = (self.board.cells, to_move, depth if self.config.discount_depth else None)
            if key in self.table:
                return self.table[key], None

        maximizing = to_move is self.root
        best_score: Optional[int] = None
        best_move: Optional[int] = None
        lo, hi = alpha, beta
        for index in empty_cells(self.board):
            with self.board.speculate(index, to_move):
                score, _ = self.minimax(to_move.opponent, depth + 1, lo, hi)
            if best_score is None or (score > best_score if maximizing else score < best_score):
                best_score, best_move = score, index
            if self.config.prune:
                if maximizing:
                    lo = max(lo, best_score)
                else:
                    hi = min(hi, best_score)
                if lo >= hi:
                    break

        assert best_score is not None
        if key is not None and (not self.config.prune or alpha < best_score < beta):
            # Only exact values are cached; bounds from a cutoff are not reusable.
            self.table[key] = best_score
        return best_score, best_move


def _coerce_player(player: Union[Player, str]) -> Player:
    try:
        return Player(player)
    except ValueError as exc:
        raise BoardError(f"Invalid player: {player!r}") from exc


def search(
    board: Union[Board, Sequence[Optional[Player]]],
    player_to_move: Union[Player, str],
    config: Optional[SearchConfig] = None,
) -> SearchResult:
    """Optimal move and score for `player_to_move`, who is the maximizer.

    The caller's board is never modified: the search runs on a private copy
    and every speculative placement is reverted on the way back up.
    A board that is already won or full yields a result with no move.
    """
    if not isinstance(board, Board):
        board = Board(board)
    root = _coerce_player(player_to_move)
    cfg = config or SearchConfig()

    engine = _Search(board.copy(), root, cfg)
    score, move = engine.minimax(root, 0, -_INF, _INF)
    if move is None:
        logging.warning("search called on a terminal board %s; no move to make", board)
    logging.debug(
        "search player=%s board=%s move=%s score=%d nodes=%d",
        root.value, board, move, score, engine.nodes,
    )
    return SearchResult(score=score, move=move, nodes=engine.nodes)


def best_move(
    board: Union[Board, Sequence[Optional[Player]]],
    player_to_move: Union[Player, str],
    config: Optional[SearchConfig] = None,
) -> Optional[int]:
    return search(board, player_to_move, config).move
